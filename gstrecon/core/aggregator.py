from decimal import Decimal
from typing import Dict, Iterable, Optional, Union
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import (
    CounterpartyBreakdown,
    InvoicePair,
    MonthlyBreakdown,
    ReconciliationStatus,
    ReconciliationSummary,
    UnmatchedInvoice,
)
from gstrecon.schemas.tax import TaxHeads
from gstrecon.core.money import round_money
from gstrecon.core.normalize import extract_month, normalize_gstin

UNKNOWN_COUNTERPARTY = "Unknown"

Outcome = Union[InvoicePair, UnmatchedInvoice]


def counterparty_key(inv: Invoice) -> str:
    return normalize_gstin(inv.counterparty_gstin) or (inv.counterparty_name or "").strip() or UNKNOWN_COUNTERPARTY


def _stable_name(current: Optional[str], candidate: Optional[str]) -> Optional[str]:
    # alphabetical minimum, so the reported name does not depend on outcome order
    candidate = (candidate or "").strip() or None
    if current is None:
        return candidate
    if candidate is None:
        return current
    return min(current, candidate)


class ReconciliationAggregator:
    """
    Running totals over a stream of match outcomes.

    Every counter is a plain sum, so the fold is independent of the order
    outcomes arrive in and two partial aggregators can be merged.
    """

    def __init__(self):
        self.total_left = 0
        self.total_right = 0
        self.matched = 0
        self.mismatched = 0
        self.missing_in_right = 0
        self.missing_in_left = 0
        self.discrepancy_amount = Decimal("0")
        self.left_tax = {"cgst": Decimal("0"), "sgst": Decimal("0"), "igst": Decimal("0"), "cess": Decimal("0")}
        self.monthly: Dict[str, Dict[str, int]] = {}
        self.counterparties: Dict[str, Dict] = {}

    def add(self, outcome: Outcome) -> "ReconciliationAggregator":
        status = outcome.status
        if status == ReconciliationStatus.MISSING_IN_LEFT:
            self.total_right += 1
            self.missing_in_left += 1
            return self

        if isinstance(outcome, InvoicePair):
            left: Invoice = outcome.left
            self.total_left += 1
            self.total_right += 1
        else:
            left = outcome.invoice
            self.total_left += 1

        for head in self.left_tax:
            self.left_tax[head] += getattr(left, head)

        delta = Decimal("0")
        if status == ReconciliationStatus.MATCHED:
            self.matched += 1
            bucket = "matched"
        elif status == ReconciliationStatus.MISMATCHED:
            self.mismatched += 1
            delta = abs(outcome.total_difference)
            self.discrepancy_amount += delta
            bucket = "mismatched"
        else:
            self.missing_in_right += 1
            bucket = "missing"

        month = extract_month(left.invoice_date)
        if month:
            counts = self.monthly.setdefault(month, {"total": 0, "matched": 0, "mismatched": 0, "missing": 0})
            counts["total"] += 1
            counts[bucket] += 1

        key = counterparty_key(left)
        party = self.counterparties.get(key)
        if party is None:
            party = self.counterparties[key] = {
                "name": None,
                "gstin": normalize_gstin(left.counterparty_gstin),
                "total": 0, "matched": 0, "mismatched": 0, "missing": 0,
                "discrepancy_amount": Decimal("0"),
            }
        party["name"] = _stable_name(party["name"], left.counterparty_name)
        party["total"] += 1
        party[bucket] += 1
        party["discrepancy_amount"] += delta
        return self

    def add_all(self, outcomes: Iterable[Outcome]) -> "ReconciliationAggregator":
        for outcome in outcomes:
            self.add(outcome)
        return self

    def merge(self, other: "ReconciliationAggregator") -> "ReconciliationAggregator":
        for attr in ("total_left", "total_right", "matched", "mismatched",
                     "missing_in_right", "missing_in_left", "discrepancy_amount"):
            setattr(self, attr, getattr(self, attr) + getattr(other, attr))
        for head, amount in other.left_tax.items():
            self.left_tax[head] += amount
        for month, counts in other.monthly.items():
            mine = self.monthly.setdefault(month, {"total": 0, "matched": 0, "mismatched": 0, "missing": 0})
            for k, v in counts.items():
                mine[k] += v
        for key, party in other.counterparties.items():
            mine = self.counterparties.get(key)
            if mine is None:
                self.counterparties[key] = dict(party)
                continue
            mine["name"] = _stable_name(mine["name"], party["name"])
            for k in ("total", "matched", "mismatched", "missing", "discrepancy_amount"):
                mine[k] += party[k]
        return self

    def summary(self, duplicate_groups: int = 0) -> ReconciliationSummary:
        return ReconciliationSummary(
            total_left=self.total_left,
            total_right=self.total_right,
            matched=self.matched,
            mismatched=self.mismatched,
            missing_in_right=self.missing_in_right,
            missing_in_left=self.missing_in_left,
            duplicate_groups=duplicate_groups,
            total_discrepancy_amount=round_money(self.discrepancy_amount),
            left_tax=TaxHeads(**{h: round_money(v) for h, v in self.left_tax.items()}),
        )

    def monthly_breakdown(self) -> Dict[str, MonthlyBreakdown]:
        return {month: MonthlyBreakdown(**self.monthly[month]) for month in sorted(self.monthly)}

    def counterparty_breakdown(self) -> Dict[str, CounterpartyBreakdown]:
        breakdown = {}
        for key, party in self.counterparties.items():
            breakdown[key] = CounterpartyBreakdown(
                **{
                    **party,
                    "name": party["name"] or key,
                    "discrepancy_amount": round_money(party["discrepancy_amount"]),
                }
            )
        return breakdown


def aggregate_outcomes(outcomes: Iterable[Outcome], aggregator: Optional[ReconciliationAggregator] = None) -> ReconciliationAggregator:
    return (aggregator or ReconciliationAggregator()).add_all(outcomes)
