import logging
from decimal import Decimal
from typing import Dict, Optional, Sequence
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.gstr3b import EligibleItc, Gstr3bComputation, OutwardSupplies, SupplyBucket
from gstrecon.schemas.tax import TaxHeads
from gstrecon.core.money import round_money
from gstrecon.core.waterfall import HEADS, compute_itc_utilization

logger = logging.getLogger(__name__)

EXPORT_INVOICE_TYPES = {"EXPWP", "EXPWOP", "SEZWP", "SEZWOP"}

# Buckets whose tax is payable by this taxpayer
LIABLE_BUCKETS = ("taxable", "zero_rated", "reverse_charge")


def _zero() -> Dict[str, Decimal]:
    return {head: Decimal("0") for head in HEADS}


def _heads(amounts: Dict[str, Decimal]) -> TaxHeads:
    return TaxHeads(**{head: round_money(amounts[head]) for head in HEADS})


def classify_outward(inv: Invoice) -> str:
    if inv.reverse_charge:
        return "reverse_charge"
    gst = inv.cgst + inv.sgst + inv.igst
    if gst == 0 and inv.taxable_value > 0:
        if (inv.invoice_type or "").upper() in EXPORT_INVOICE_TYPES:
            return "zero_rated"
        return "nil_rated_exempt"
    return "taxable"


def compute_outward_supplies(outward: Sequence[Invoice]) -> OutwardSupplies:
    buckets = {name: {"taxable_value": Decimal("0"), **_zero()} for name in
               ("taxable", "zero_rated", "nil_rated_exempt", "reverse_charge")}

    for inv in outward:
        bucket = buckets[classify_outward(inv)]
        bucket["taxable_value"] += inv.taxable_value
        for head in HEADS:
            bucket[head] += getattr(inv, head)

    liability = _zero()
    for name in LIABLE_BUCKETS:
        for head in HEADS:
            liability[head] += buckets[name][head]

    return OutwardSupplies(
        **{
            name: SupplyBucket(taxable_value=round_money(b["taxable_value"]), tax=_heads(b))
            for name, b in buckets.items()
        },
        total_liability=_heads(liability),
    )


def compute_eligible_itc(inward: Sequence[Invoice]) -> EligibleItc:
    categories = {"reverse_charge": _zero(), "from_isd": _zero(), "all_other": _zero()}
    ineligible = 0

    for inv in inward:
        if not inv.itc_eligible:
            ineligible += 1
            continue
        if inv.reverse_charge:
            category = "reverse_charge"
        elif (inv.invoice_type or "").upper() == "ISD":
            category = "from_isd"
        else:
            category = "all_other"
        for head in HEADS:
            categories[category][head] += getattr(inv, head)

    net = _zero()
    for amounts in categories.values():
        for head in HEADS:
            net[head] += amounts[head]

    return EligibleItc(
        **{name: _heads(amounts) for name, amounts in categories.items()},
        net_itc=_heads(net),
        ineligible_count=ineligible,
    )


def compute_gstr3b(
    outward: Sequence[Invoice],
    inward: Sequence[Invoice],
    brought_forward: Optional[TaxHeads] = None,
    period: Optional[str] = None,
) -> Gstr3bComputation:
    """
    Outward liability and eligible ITC from invoice data, then the utilization
    waterfall. Credit brought forward from the last period adds to this period's ITC.
    """
    if outward is None or inward is None:
        raise TypeError("compute_gstr3b requires outward and inward collections, got None")
    brought_forward = brought_forward or TaxHeads()

    supplies = compute_outward_supplies(outward)
    itc = compute_eligible_itc(inward)
    # Credit notes can push a head below zero; nothing is payable or usable there
    liability = TaxHeads(**{
        head: max(Decimal("0"), getattr(supplies.total_liability, head)) for head in HEADS
    })
    credit = TaxHeads(**{
        head: max(Decimal("0"), getattr(itc.net_itc, head) + getattr(brought_forward, head)) for head in HEADS
    })
    payment = compute_itc_utilization(liability, credit)

    logger.info(
        f"GSTR-3B computed for period {period or '-'}: liability {payment.total_liability}, "
        f"ITC used {payment.total_credit_utilized}, cash payable {payment.total_cash_payable}"
    )
    return Gstr3bComputation(
        period=period,
        outward_supplies=supplies,
        eligible_itc=itc,
        credit_brought_forward=TaxHeads(**{head: round_money(getattr(brought_forward, head)) for head in HEADS}),
        payment=payment,
    )
