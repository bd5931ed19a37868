import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
# Larger magnitudes are cell glitches (OCR, 1e40 exponents), not amounts
MAX_AMOUNT = Decimal("1e15")

# Currency symbols, thousands separators and stray spaces seen in exported registers
_NOISE = re.compile(r"[,\s₹$]|Rs\.?|INR", re.IGNORECASE)


def _in_range(amount: Decimal) -> Decimal:
    if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
        return ZERO
    return amount


def to_money(value: Any) -> Decimal:
    """
    Coerce a raw cell value to a Decimal amount.
    Anything that cannot be read as a finite number below MAX_AMOUNT becomes 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return _in_range(value)
    if isinstance(value, int):
        return _in_range(Decimal(value))
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        return _in_range(Decimal(str(value)))

    text = _NOISE.sub("", str(value))
    if not text:
        return ZERO
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return ZERO
    return _in_range(amount)


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
