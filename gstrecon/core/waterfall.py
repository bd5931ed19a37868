"""
ITC utilization against output liability (GSTR-3B table 6).

The offset order is fixed by law (sections 49 and 49A of the CGST Act):

    1. IGST credit  -> IGST liability
    2. IGST credit  -> CGST liability
    3. IGST credit  -> SGST liability
    4. CGST credit  -> CGST liability
    5. CGST credit  -> IGST liability   (never SGST)
    6. SGST credit  -> SGST liability
    7. SGST credit  -> IGST liability   (never CGST)
    8. Cess credit  -> cess liability   (cess never crosses heads)

Arithmetic runs on exact Decimals; rounding happens once, when the result
is built.
"""
import logging
from decimal import Decimal
from typing import Dict, Tuple
from gstrecon.schemas.tax import TaxHeads, UtilizationSteps, WaterfallResult
from gstrecon.core.money import round_money

logger = logging.getLogger(__name__)

HEADS = ("cgst", "sgst", "igst", "cess")

# (step name, credit head, liability head), in statutory order
UTILIZATION_ORDER: Tuple[Tuple[str, str, str], ...] = (
    ("igst_to_igst", "igst", "igst"),
    ("igst_to_cgst", "igst", "cgst"),
    ("igst_to_sgst", "igst", "sgst"),
    ("cgst_to_cgst", "cgst", "cgst"),
    ("cgst_to_igst", "cgst", "igst"),
    ("sgst_to_sgst", "sgst", "sgst"),
    ("sgst_to_igst", "sgst", "igst"),
    ("cess_to_cess", "cess", "cess"),
)


def _amounts(heads: TaxHeads, label: str) -> Dict[str, Decimal]:
    amounts = {head: getattr(heads, head) for head in HEADS}
    for head, amount in amounts.items():
        if amount < 0:
            raise ValueError(f"{label} for {head.upper()} must be non-negative, got {amount}")
    return amounts


def _rounded(amounts: Dict[str, Decimal]) -> TaxHeads:
    return TaxHeads(**{head: round_money(amounts[head]) for head in HEADS})


def compute_itc_utilization(liability: TaxHeads, credit: TaxHeads) -> WaterfallResult:
    """
    Offset `credit` against `liability` head by head.
    Raises ValueError for negative inputs; that is a caller bug, not a data problem.
    """
    if liability is None or credit is None:
        raise TypeError("compute_itc_utilization requires liability and credit, got None")

    remaining_liability = _amounts(liability, "Liability")
    remaining_credit = _amounts(credit, "Credit")
    opening_liability = dict(remaining_liability)
    opening_credit = dict(remaining_credit)

    utilized = {head: Decimal("0") for head in HEADS}
    applied = {head: Decimal("0") for head in HEADS}
    steps: Dict[str, Decimal] = {}

    for step, credit_head, liability_head in UTILIZATION_ORDER:
        used = min(remaining_credit[credit_head], remaining_liability[liability_head])
        remaining_credit[credit_head] -= used
        remaining_liability[liability_head] -= used
        utilized[credit_head] += used
        applied[liability_head] += used
        steps[step] = used

    cash_payable = {head: max(Decimal("0"), remaining_liability[head]) for head in HEADS}

    result = WaterfallResult(
        liability=_rounded(opening_liability),
        credit_available=_rounded(opening_credit),
        steps=UtilizationSteps(**{step: round_money(amount) for step, amount in steps.items()}),
        credit_utilized=_rounded(utilized),
        credit_applied=_rounded(applied),
        cash_payable=_rounded(cash_payable),
        credit_balance=_rounded(remaining_credit),
        total_liability=round_money(sum(opening_liability.values())),
        total_credit_utilized=round_money(sum(utilized.values())),
        total_cash_payable=round_money(sum(cash_payable.values())),
        total_credit_balance=round_money(sum(remaining_credit.values())),
    )

    logger.debug(
        f"ITC utilization: liability {result.total_liability}, "
        f"credit used {result.total_credit_utilized}, cash {result.total_cash_payable}"
    )
    return result
