from decimal import Decimal
from typing import List, NamedTuple, Optional
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import Discrepancy, MatchPolicy, Severity
from gstrecon.core.money import round_money
from gstrecon.core.normalize import normalize_date, normalize_gstin

DEFAULT_POLICY = MatchPolicy()

# (attribute, label) in reporting order
AMOUNT_FIELDS = (
    ("taxable_value", "Taxable Value"),
    ("cgst", "CGST"),
    ("sgst", "SGST"),
    ("igst", "IGST"),
    ("total_amount", "Total Amount"),
)


class FieldComparison(NamedTuple):
    discrepancies: List[Discrepancy]
    total_difference: Decimal


def amount_severity(delta: Decimal, policy: MatchPolicy = DEFAULT_POLICY) -> Severity:
    magnitude = abs(delta)
    if magnitude > policy.high_severity_above:
        return Severity.HIGH
    if magnitude > policy.medium_severity_above:
        return Severity.MEDIUM
    return Severity.LOW


def compare_invoices(
    left: Invoice,
    right: Invoice,
    tolerance: Decimal = Decimal("1"),
    policy: Optional[MatchPolicy] = None,
) -> FieldComparison:
    """
    Field-level comparison of a paired invoice.

    Every amount field is checked even after a discrepancy is found,
    reports need the full breakdown. `total_difference` is left - right on
    the total amount and is returned even when inside tolerance.
    """
    policy = policy or DEFAULT_POLICY
    discrepancies: List[Discrepancy] = []
    total_difference = Decimal("0")

    for attr, label in AMOUNT_FIELDS:
        left_value = getattr(left, attr)
        right_value = getattr(right, attr)
        delta = left_value - right_value
        if attr == "total_amount":
            total_difference = delta
        if abs(delta) > tolerance:
            discrepancies.append(Discrepancy(
                field=attr,
                label=label,
                left_value=float(left_value),
                right_value=float(right_value),
                difference=round_money(delta),
                severity=amount_severity(delta, policy),
            ))

    left_gstin = normalize_gstin(left.counterparty_gstin)
    right_gstin = normalize_gstin(right.counterparty_gstin)
    if left_gstin and right_gstin and left_gstin != right_gstin:
        discrepancies.append(Discrepancy(
            field="counterparty_gstin",
            label="Counterparty GSTIN",
            left_value=left_gstin,
            right_value=right_gstin,
            severity=Severity.HIGH,
            message="GSTIN mismatch",
        ))

    left_date = normalize_date(left.invoice_date)
    right_date = normalize_date(right.invoice_date)
    if left_date and right_date and left_date != right_date:
        discrepancies.append(Discrepancy(
            field="invoice_date",
            label="Invoice Date",
            left_value=left.invoice_date,
            right_value=right.invoice_date,
            severity=Severity.MEDIUM,
            message="Date mismatch",
        ))

    return FieldComparison(discrepancies, total_difference)
