from decimal import Decimal
from typing import Any, Dict, Iterable, List, Union
from gstrecon.schemas.vendor import VendorRiskSummary, VendorRiskLevel
from gstrecon.schemas.reconciliation import InvoicePair, ReconciliationStatus, UnmatchedInvoice
from gstrecon.core.aggregator import counterparty_key
from gstrecon.core.money import round_money
from gstrecon.core.normalize import normalize_gstin

_RISK_ORDER = {VendorRiskLevel.HIGH: 0, VendorRiskLevel.MEDIUM: 1, VendorRiskLevel.LOW: 2}

def aggregate_vendor_risk(outcomes: Iterable[Union[InvoicePair, UnmatchedInvoice]]) -> List[VendorRiskSummary]:
    """
    Groups purchase-side match outcomes by supplier.
    DOES NOT perform any matching; right-only records carry no claim and are skipped.
    """
    vendor_map: Dict[str, Dict[str, Any]] = {}

    for outcome in outcomes:
        if outcome.status == ReconciliationStatus.MISSING_IN_LEFT:
            continue
        inv = outcome.left if isinstance(outcome, InvoicePair) else outcome.invoice
        key = counterparty_key(inv)

        if key not in vendor_map:
            vendor_map[key] = {
                "vendor_gstin": normalize_gstin(inv.counterparty_gstin),
                "vendor_name": inv.counterparty_name or "",
                "total_invoices": 0,
                "matched_count": 0,
                "mismatched_count": 0,
                "missing_in_2b_count": 0,
                "purchase_amount": Decimal("0"),
                "claimed_itc_amount": Decimal("0"),
                "risky_itc_amount": Decimal("0"),
            }

        data = vendor_map[key]
        itc = inv.total_tax
        data["total_invoices"] += 1
        data["purchase_amount"] += inv.total_amount
        data["claimed_itc_amount"] += itc

        if outcome.status == ReconciliationStatus.MATCHED:
            data["matched_count"] += 1
        elif outcome.status == ReconciliationStatus.MISMATCHED:
            data["mismatched_count"] += 1
            data["risky_itc_amount"] += itc
        else:
            data["missing_in_2b_count"] += 1
            data["risky_itc_amount"] += itc

    summaries = []
    for key, data in vendor_map.items():
        if data["missing_in_2b_count"] > 0:
            risk_level = VendorRiskLevel.HIGH
        elif data["mismatched_count"] > 0:
            risk_level = VendorRiskLevel.MEDIUM
        else:
            risk_level = VendorRiskLevel.LOW

        summaries.append(VendorRiskSummary(
            vendor_gstin=data["vendor_gstin"] or key,
            vendor_name=data["vendor_name"],
            total_invoices=data["total_invoices"],
            matched_count=data["matched_count"],
            mismatched_count=data["mismatched_count"],
            missing_in_2b_count=data["missing_in_2b_count"],
            purchase_amount=round_money(data["purchase_amount"]),
            claimed_itc_amount=round_money(data["claimed_itc_amount"]),
            risky_itc_amount=round_money(data["risky_itc_amount"]),
            vendor_risk_level=risk_level
        ))

    return sorted(summaries, key=lambda x: (_RISK_ORDER[x.vendor_risk_level], -x.risky_itc_amount, x.vendor_gstin))
