"""
GSTIN validation and invoice data-quality checks.

Nothing here raises on bad data: every problem becomes a ValidationIssue
so a reconciliation run can list them next to its match results.
"""
import re
from decimal import Decimal
from typing import List, Optional, Sequence
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.validation import GstinValidation, IssueType, Severity, ValidationIssue
from gstrecon.core.config import settings

STATE_CODES = {
    "01": "Jammu & Kashmir", "02": "Himachal Pradesh", "03": "Punjab",
    "04": "Chandigarh", "05": "Uttarakhand", "06": "Haryana",
    "07": "Delhi", "08": "Rajasthan", "09": "Uttar Pradesh",
    "10": "Bihar", "11": "Sikkim", "12": "Arunachal Pradesh",
    "13": "Nagaland", "14": "Manipur", "15": "Mizoram",
    "16": "Tripura", "17": "Meghalaya", "18": "Assam",
    "19": "West Bengal", "20": "Jharkhand", "21": "Odisha",
    "22": "Chhattisgarh", "23": "Madhya Pradesh", "24": "Gujarat",
    "25": "Daman & Diu", "26": "Dadra & Nagar Haveli",
    "27": "Maharashtra", "28": "Andhra Pradesh (Old)", "29": "Karnataka",
    "30": "Goa", "31": "Lakshadweep", "32": "Kerala",
    "33": "Tamil Nadu", "34": "Puducherry", "35": "Andaman & Nicobar",
    "36": "Telangana", "37": "Andhra Pradesh", "38": "Ladakh",
    "96": "Foreign Country", "97": "Other Territory",
}

ENTITY_TYPES = {
    "C": "Company", "P": "Person", "H": "HUF",
    "F": "Firm", "A": "AOP", "T": "Trust",
    "B": "BOI", "L": "Local Authority", "J": "Artificial Juridical Person",
    "G": "Government",
}

GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")
_CHECKSUM_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Effective rates (percent) that occur under the GST schedules
STANDARD_RATES = [Decimal(r) for r in ("0", "0.1", "0.25", "1", "1.5", "3", "5", "6", "7.5", "12", "14", "18", "28")]
RATE_SLACK = Decimal("0.5")
SPLIT_TAX_SLACK = Decimal("0.5")


def gstin_check_character(gstin: str) -> Optional[str]:
    """Mod-36 check character over the first 14 characters, None if any is out of alphabet."""
    total = 0
    for i, ch in enumerate(gstin[:14]):
        value = _CHECKSUM_CHARS.find(ch)
        if value < 0:
            return None
        product = value * (2 if i % 2 else 1)
        total += product // 36 + product % 36
    return _CHECKSUM_CHARS[(36 - total % 36) % 36]


def validate_gstin(raw: Optional[str]) -> GstinValidation:
    if not raw or not str(raw).strip():
        return GstinValidation(gstin="", errors=["GSTIN is required"])

    gstin = str(raw).strip().upper()
    result = GstinValidation(gstin=gstin)

    if len(gstin) != 15:
        result.errors.append(f"GSTIN must be 15 characters, got {len(gstin)}")
        return result

    if not GSTIN_PATTERN.match(gstin):
        result.errors.append("GSTIN format is invalid")
        if not re.match(r"^[0-9]{2}", gstin):
            result.errors.append("First 2 characters must be a state code (digits)")
        if not re.match(r"^.{2}[A-Z]{5}", gstin):
            result.errors.append("Characters 3-7 must be letters (part of PAN)")
        if not re.match(r"^.{7}[0-9]{4}", gstin):
            result.errors.append("Characters 8-11 must be digits (part of PAN)")
        if gstin[13] != "Z":
            result.errors.append('14th character must be "Z"')
        return result

    state_code = gstin[:2]
    if state_code not in STATE_CODES:
        result.errors.append(f"Invalid state code: {state_code}")
        return result

    result.state_code = state_code
    result.state_name = STATE_CODES[state_code]
    result.pan = gstin[2:12]
    result.entity_type = ENTITY_TYPES.get(gstin[5], "Unknown")

    if gstin_check_character(gstin) != gstin[14]:
        result.errors.append("GSTIN checksum digit is invalid")
        return result

    result.is_valid = True
    return result


def check_invoices(invoices: Sequence[Invoice], tolerance: Decimal = Decimal("1")) -> List[ValidationIssue]:
    if invoices is None:
        raise TypeError("check_invoices requires an invoice collection, got None")

    issues: List[ValidationIssue] = []

    def report(kind: IssueType, position: int, inv: Invoice, severity: Severity, message: str):
        issues.append(ValidationIssue(
            type=kind,
            position=position,
            invoice_number=inv.invoice_number,
            severity=severity,
            message=message,
        ))

    for position, inv in enumerate(invoices):
        if not inv.invoice_number:
            report(IssueType.MISSING_INVOICE_NUMBER, position, inv, Severity.HIGH, "Invoice number is missing")
        if not inv.invoice_date:
            report(IssueType.MISSING_DATE, position, inv, Severity.MEDIUM, "Invoice date is missing")

        if inv.counterparty_gstin:
            gstin = validate_gstin(inv.counterparty_gstin)
            if not gstin.is_valid:
                report(IssueType.INVALID_GSTIN, position, inv, Severity.HIGH, "; ".join(gstin.errors))

        if (inv.cgst > 0 or inv.sgst > 0) and inv.igst > 0:
            report(
                IssueType.TAX_TYPE_CONFLICT, position, inv, Severity.HIGH,
                "Both CGST/SGST and IGST applied. Use CGST+SGST for intra-state, IGST for inter-state.",
            )

        if (inv.cgst > 0 or inv.sgst > 0) and abs(inv.cgst - inv.sgst) > SPLIT_TAX_SLACK:
            report(
                IssueType.SPLIT_TAX_IMBALANCE, position, inv, Severity.MEDIUM,
                f"CGST ({inv.cgst}) and SGST ({inv.sgst}) should be equal",
            )

        tax = inv.cgst + inv.sgst + inv.igst + inv.cess
        computed_total = inv.taxable_value + tax
        if abs(computed_total - inv.total_amount) > tolerance:
            report(
                IssueType.TOTAL_MISMATCH, position, inv, Severity.MEDIUM,
                f"Total ({inv.total_amount}) does not equal taxable value plus taxes ({computed_total})",
            )

        gst = inv.cgst + inv.sgst + inv.igst
        if inv.taxable_value > 0 and gst > 0:
            rate = gst / inv.taxable_value * 100
            if not any(abs(rate - r) < RATE_SLACK for r in STANDARD_RATES):
                report(
                    IssueType.UNUSUAL_TAX_RATE, position, inv, Severity.LOW,
                    f"Unusual tax rate: {rate:.2f}%",
                )

        if inv.counterparty_gstin and inv.total_amount > settings.E_INVOICE_THRESHOLD:
            report(
                IssueType.E_INVOICE_CHECK, position, inv, Severity.INFO,
                f"High value invoice (Rs. {inv.total_amount:,.2f}) - ensure e-invoice compliance",
            )

    return issues
