from decimal import Decimal
from gstrecon.schemas.invoice import Invoice
from gstrecon.core.reconciliation import reconcile_sales
from gstrecon.core.money import to_money, round_money
from gstrecon.core.normalize import (
    digits_only,
    extract_month,
    normalize_date,
    normalize_gstin,
    normalize_invoice_number,
)

def test_invoice_number_collapses_case_and_separators():
    assert normalize_invoice_number("INV-001") == normalize_invoice_number("inv001") == "INV001"
    assert normalize_invoice_number("  inv 001 ") == "INV001"
    assert normalize_invoice_number("INV/2024/07") == "INV202407"
    assert normalize_invoice_number("inv.2024_07") == "INV202407"

def test_invoice_number_strips_leading_zeros():
    assert normalize_invoice_number("00042") == "42"
    assert normalize_invoice_number("0-0-42") == "42"
    # all-zero identifiers keep one zero instead of becoming unmatchable
    assert normalize_invoice_number("000") == "0"

def test_empty_identifiers_normalize_to_empty_string():
    assert normalize_invoice_number(None) == ""
    assert normalize_invoice_number("") == ""
    assert normalize_invoice_number("   ") == ""

def test_digits_only():
    assert digits_only("INV2024A7") == "20247"
    assert digits_only("ABC") == ""

def test_gstin_normalization():
    assert normalize_gstin(" 27aapfu0939f1zv ") == "27AAPFU0939F1ZV"
    assert normalize_gstin(None) == ""

def test_dates_normalize_to_iso():
    assert normalize_date("05/01/2024") == "2024-01-05"
    assert normalize_date("5.1.2024") == "2024-01-05"
    assert normalize_date("2024-1-5") == "2024-01-05"
    assert normalize_date("05-Jan-2024") == "2024-01-05"
    assert normalize_date("2024-01-05T10:30:00") == "2024-01-05"

def test_unreadable_dates_are_kept_trimmed():
    assert normalize_date(" sometime ") == "sometime"
    assert normalize_date("31/02/2024") == "31/02/2024"
    assert normalize_date(None) == ""

def test_extract_month():
    assert extract_month("15-03-2024") == "2024-03"
    assert extract_month("2024/11/02") == "2024-11"
    assert extract_month("not a date") is None
    assert extract_month(None) is None

def test_to_money_degrades_to_zero():
    assert to_money("1,234.50") == Decimal("1234.50")
    assert to_money("₹ 1,000") == Decimal("1000")
    assert to_money("Rs. 250") == Decimal("250")
    assert to_money(0.1) == Decimal("0.1")
    assert to_money(12) == Decimal("12")
    assert to_money("abc") == Decimal("0")
    assert to_money(None) == Decimal("0")
    assert to_money(float("nan")) == Decimal("0")
    assert to_money("") == Decimal("0")

def test_round_money_half_up():
    assert round_money(Decimal("10.005")) == Decimal("10.01")
    assert round_money(Decimal("-0.125")) == Decimal("-0.13")

def test_to_money_rejects_out_of_range_magnitudes():
    assert to_money("1e40") == Decimal("0")
    assert to_money("-1E40") == Decimal("0")
    assert to_money(Decimal("1e15")) == Decimal("0")
    assert to_money(10 ** 30) == Decimal("0")
    assert to_money("999999999999999.99") == Decimal("999999999999999.99")
    assert round_money(to_money("999999999999999.99")) == Decimal("999999999999999.99")

def test_reconciliation_survives_exponent_glitches():
    result = reconcile_sales(
        [Invoice(invoice_number="A1", total_amount="1e40")],
        [Invoice(invoice_number="A1", total_amount="5")],
    )
    assert result.summary.mismatched == 1
    assert result.mismatched[0].total_difference == Decimal("-5")
