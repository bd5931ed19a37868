"""
Canonical forms for the identity fields used by the matching engine.

Every function here is total: bad input maps to an empty/neutral value,
never to an exception.
"""
import re
from datetime import date, datetime
from typing import Optional

_SEPARATORS = re.compile(r"[\s\-/\\._]+")
_LEADING_ZEROS = re.compile(r"^0+(?=.)")
_NON_DIGITS = re.compile(r"[^0-9]")

_DMY = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_YMD = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})$")
_ISO_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")

# Month-name layouts found in portal downloads and Tally exports
_NAMED_MONTH_FORMATS = ("%d-%b-%Y", "%d %b %Y", "%d-%B-%Y", "%d %B %Y", "%d-%b-%y")


def normalize_invoice_number(raw: Optional[str]) -> str:
    """INV-001, inv 001 and INV/0001 all collapse to INV001; 00042 to 42."""
    if raw is None:
        return ""
    key = _SEPARATORS.sub("", str(raw).strip().upper())
    return _LEADING_ZEROS.sub("", key)


def digits_only(key: str) -> str:
    return _NON_DIGITS.sub("", key or "")


def normalize_gstin(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return str(raw).strip().upper()


def parse_invoice_date(raw: Optional[str]) -> Optional[date]:
    """Read day-first, year-first and month-name dates. Returns None when unreadable."""
    if not raw:
        return None
    text = str(raw).strip()

    stamp = _ISO_TIMESTAMP.match(text)
    if stamp:
        text = stamp.group(1)

    parts = None
    dmy = _DMY.match(text)
    if dmy:
        parts = (dmy.group(3), dmy.group(2), dmy.group(1))
    ymd = _YMD.match(text)
    if ymd:
        parts = (ymd.group(1), ymd.group(2), ymd.group(3))

    if parts:
        try:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None

    for fmt in _NAMED_MONTH_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(raw: Optional[str]) -> str:
    """
    Canonical YYYY-MM-DD for comparison.
    Unreadable values are returned trimmed so two identical oddities still compare equal.
    """
    if not raw:
        return ""
    parsed = parse_invoice_date(raw)
    if parsed is None:
        return str(raw).strip()
    return parsed.isoformat()


def extract_month(raw: Optional[str]) -> Optional[str]:
    parsed = parse_invoice_date(raw)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"
