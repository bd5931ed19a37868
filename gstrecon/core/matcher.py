"""
Two-sided invoice matching.

Left invoices are walked in input order. Each one first tries an exact
lookup on its normalized key and takes the first right invoice in that
bucket that nothing has claimed yet. Failing that, unclaimed right invoices
are scored on corroborating evidence (same counterparty plus the same
digits in the invoice number, or the same counterparty plus the same total)
and the best candidate above the confidence floor wins.

Claimed right invoices are tracked by position in a set, so the inputs are
never mutated and each right invoice pairs with at most one left invoice.
A fuzzy pairing made early in the walk can claim a right invoice that a
later left invoice would have matched exactly.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Set, Tuple
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import (
    Discrepancy,
    DuplicateGroup,
    InvoicePair,
    MatchPolicy,
    MatchType,
    ReconciliationStatus,
    Severity,
    Side,
    UnmatchedInvoice,
)
from gstrecon.core.comparator import DEFAULT_POLICY, compare_invoices
from gstrecon.core.index import InvoiceIndex, KeyFunc, invoice_key

logger = logging.getLogger(__name__)

MISSING_IN_RIGHT_SUGGESTION = "Report this invoice in the counterpart filing"
MISSING_IN_LEFT_SUGGESTION = "Present only in the counterpart filing: book it or have it removed"


@dataclass
class MatchRun:
    """Raw outcome of one matching pass, in deterministic order."""
    pairs: List[InvoicePair] = field(default_factory=list)
    missing_in_right: List[UnmatchedInvoice] = field(default_factory=list)
    missing_in_left: List[UnmatchedInvoice] = field(default_factory=list)
    duplicates: List[DuplicateGroup] = field(default_factory=list)

    @property
    def matched(self) -> List[InvoicePair]:
        return [p for p in self.pairs if p.status == ReconciliationStatus.MATCHED]

    @property
    def mismatched(self) -> List[InvoicePair]:
        return [p for p in self.pairs if p.status == ReconciliationStatus.MISMATCHED]

    def outcomes(self) -> list:
        return [*self.pairs, *self.missing_in_right, *self.missing_in_left]


def score_fuzzy_candidate(
    left_digits: str,
    left_total: Decimal,
    right_digits: str,
    right_total: Decimal,
    policy: MatchPolicy = DEFAULT_POLICY,
) -> float:
    """Confidence for two invoices of the same counterparty GSTIN."""
    if left_digits and left_digits == right_digits:
        return policy.numeric_match_confidence
    if abs(left_total - right_total) < policy.fuzzy_amount_window:
        return policy.amount_match_confidence
    return 0.0


def find_fuzzy_match(
    left_index: InvoiceIndex,
    left_position: int,
    right_index: InvoiceIndex,
    consumed: Set[int],
    policy: MatchPolicy = DEFAULT_POLICY,
) -> Optional[Tuple[int, float]]:
    """Best unclaimed right position and its confidence, or None."""
    left = left_index.invoices[left_position]
    left_digits = left_index.digits[left_position]
    best: Optional[Tuple[int, float]] = None
    # only invoices of the same counterparty can corroborate a pairing
    for position in right_index.same_counterparty(left_index.gstins[left_position]):
        if position in consumed:
            continue
        confidence = score_fuzzy_candidate(
            left_digits,
            left.total_amount,
            right_index.digits[position],
            right_index.invoices[position].total_amount,
            policy,
        )
        if confidence < policy.min_confidence:
            continue
        # strict > keeps the first candidate on ties
        if best is None or confidence > best[1]:
            best = (position, confidence)
    return best


def _pair(
    left: Invoice,
    left_position: int,
    right: Invoice,
    right_position: int,
    tolerance: Decimal,
    policy: MatchPolicy,
    confidence: Optional[float] = None,
) -> InvoicePair:
    comparison = compare_invoices(left, right, tolerance, policy)
    status = ReconciliationStatus.MISMATCHED if comparison.discrepancies else ReconciliationStatus.MATCHED
    annotations = []
    if confidence is not None:
        annotations.append(Discrepancy(
            field="invoice_number",
            label="Invoice Number",
            left_value=left.invoice_number,
            right_value=right.invoice_number,
            severity=Severity.INFO,
            message=(
                f"Identifier mismatch: '{left.invoice_number}' vs '{right.invoice_number}' "
                f"(matched at confidence {confidence})"
            ),
        ))
    return InvoicePair(
        status=status,
        match_type=MatchType.FUZZY if confidence is not None else MatchType.EXACT,
        confidence=confidence if confidence is not None else 1.0,
        invoice_number=left.invoice_number,
        left_position=left_position,
        right_position=right_position,
        left=left,
        right=right,
        discrepancies=comparison.discrepancies,
        annotations=annotations,
        total_difference=comparison.total_difference,
    )


def match_invoices(
    left: Sequence[Invoice],
    right: Sequence[Invoice],
    tolerance: Decimal = Decimal("1"),
    key: KeyFunc = invoice_key,
    policy: Optional[MatchPolicy] = None,
) -> MatchRun:
    if left is None or right is None:
        raise TypeError("match_invoices requires two invoice collections, got None")
    policy = policy or DEFAULT_POLICY

    left_index = InvoiceIndex(left, key)
    right_index = InvoiceIndex(right, key)
    consumed: Set[int] = set()
    run = MatchRun(
        duplicates=left_index.duplicate_groups(Side.LEFT) + right_index.duplicate_groups(Side.RIGHT),
    )

    for left_position, inv in enumerate(left):
        left_key = left_index.keys[left_position]
        if not left_key:
            run.missing_in_right.append(UnmatchedInvoice(
                status=ReconciliationStatus.MISSING_IN_RIGHT,
                position=left_position,
                invoice=inv,
                suggestion="Invoice has no number and cannot be matched",
            ))
            continue

        exact = next((p for p in right_index.get(left_key) if p not in consumed), None)
        if exact is not None:
            consumed.add(exact)
            run.pairs.append(_pair(inv, left_position, right[exact], exact, tolerance, policy))
            continue

        fuzzy = find_fuzzy_match(left_index, left_position, right_index, consumed, policy)
        if fuzzy is not None:
            right_position, confidence = fuzzy
            consumed.add(right_position)
            run.pairs.append(_pair(inv, left_position, right[right_position], right_position, tolerance, policy, confidence))
            continue

        run.missing_in_right.append(UnmatchedInvoice(
            status=ReconciliationStatus.MISSING_IN_RIGHT,
            position=left_position,
            invoice=inv,
            suggestion=MISSING_IN_RIGHT_SUGGESTION,
        ))

    for right_position, inv in enumerate(right):
        if right_position in consumed:
            continue
        run.missing_in_left.append(UnmatchedInvoice(
            status=ReconciliationStatus.MISSING_IN_LEFT,
            position=right_position,
            invoice=inv,
            suggestion=MISSING_IN_LEFT_SUGGESTION,
        ))

    logger.debug(
        f"Matched {len(run.pairs)} pairs; {len(run.missing_in_right)} left-only, "
        f"{len(run.missing_in_left)} right-only"
    )
    return run
