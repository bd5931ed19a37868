"""
Purchase register vs GSTR-2A/2B.

Same matching engine as the sales side, keyed on (supplier GSTIN, invoice
number) because bill numbers repeat across suppliers. On top of the match
result it reports the ITC position per tax head.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.purchase import ItcExposure, PurchaseReconciliationResult
from gstrecon.schemas.reconciliation import ReconciliationOptions
from gstrecon.schemas.tax import TaxHeads
from gstrecon.core.aggregator import ReconciliationAggregator
from gstrecon.core.index import supplier_invoice_key
from gstrecon.core.matcher import MatchRun, match_invoices
from gstrecon.core.money import round_money
from gstrecon.core.validation import check_invoices
from gstrecon.core.vendor_aggregation import aggregate_vendor_risk

logger = logging.getLogger(__name__)

HEADS = ("cgst", "sgst", "igst", "cess")


def _sum_heads(invoices: Iterable[Invoice]) -> Dict[str, Decimal]:
    totals = {head: Decimal("0") for head in HEADS}
    for inv in invoices:
        for head in HEADS:
            totals[head] += getattr(inv, head)
    return totals


def _heads(amounts: Dict[str, Decimal]) -> TaxHeads:
    return TaxHeads(**{head: round_money(amounts[head]) for head in HEADS})


def compute_itc_exposure(
    purchases: Sequence[Invoice],
    gstr2b: Sequence[Invoice],
    run: MatchRun,
) -> ItcExposure:
    """
    Claimed vs available vs matched ITC.
    Records the portal marks as ineligible do not count as available credit.
    """
    claimed = _sum_heads(purchases)
    available = _sum_heads(inv for inv in gstr2b if inv.itc_eligible)
    matched = _sum_heads(pair.left for pair in run.matched)

    excess = {h: max(Decimal("0"), claimed[h] - available[h]) for h in HEADS}
    unclaimed = {h: max(Decimal("0"), available[h] - claimed[h]) for h in HEADS}

    return ItcExposure(
        claimed=_heads(claimed),
        available=_heads(available),
        matched=_heads(matched),
        excess_claimed=_heads(excess),
        unclaimed=_heads(unclaimed),
    )


def reconcile_purchase(
    purchases: Sequence[Invoice],
    gstr2b: Sequence[Invoice],
    options: Optional[ReconciliationOptions] = None,
) -> PurchaseReconciliationResult:
    options = options or ReconciliationOptions()
    run = match_invoices(
        purchases,
        gstr2b,
        tolerance=options.tolerance_amount,
        key=supplier_invoice_key,
        policy=options.policy,
    )

    outcomes = run.outcomes()
    aggregator = ReconciliationAggregator().add_all(outcomes)
    result = PurchaseReconciliationResult(
        summary=aggregator.summary(duplicate_groups=len(run.duplicates)),
        matched=run.matched,
        mismatched=run.mismatched,
        missing_in_right=run.missing_in_right,
        missing_in_left=run.missing_in_left,
        duplicates=run.duplicates,
        validation_issues=check_invoices(purchases, options.tolerance_amount),
        monthly_breakdown=aggregator.monthly_breakdown(),
        counterparty_breakdown=aggregator.counterparty_breakdown(),
        itc_exposure=compute_itc_exposure(purchases, gstr2b, run),
        supplier_risk=aggregate_vendor_risk(outcomes),
    )

    logger.info(
        f"Purchase reconciliation COMPLETED. Purchases: {len(purchases)}, GSTR-2B: {len(gstr2b)}, "
        f"matched: {result.summary.matched}, mismatched: {result.summary.mismatched}, "
        f"ITC at risk suppliers: {sum(1 for s in result.supplier_risk if s.missing_in_2b_count)}"
    )
    return result
