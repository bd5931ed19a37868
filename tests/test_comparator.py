from decimal import Decimal
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import MatchPolicy, Severity
from gstrecon.core.comparator import amount_severity, compare_invoices

def inv(**kwargs):
    kwargs.setdefault("invoice_number", "INV-1")
    return Invoice(**kwargs)

def test_identical_invoices_have_no_discrepancies():
    a = inv(taxable_value=1000, cgst=90, sgst=90, total_amount=1180, counterparty_gstin="G1", invoice_date="2024-04-01")
    result = compare_invoices(a, a.model_copy())
    assert result.discrepancies == []
    assert result.total_difference == Decimal("0")

def test_severity_bands():
    assert amount_severity(Decimal("150")) == Severity.HIGH
    assert amount_severity(Decimal("-150")) == Severity.HIGH
    assert amount_severity(Decimal("100")) == Severity.MEDIUM
    assert amount_severity(Decimal("50")) == Severity.MEDIUM
    assert amount_severity(Decimal("10")) == Severity.LOW
    assert amount_severity(Decimal("2")) == Severity.LOW

def test_custom_bands():
    policy = MatchPolicy(high_severity_above=Decimal("1000"), medium_severity_above=Decimal("500"))
    assert amount_severity(Decimal("150"), policy) == Severity.LOW

def test_difference_equal_to_tolerance_is_not_reported():
    result = compare_invoices(inv(total_amount=1001), inv(total_amount=1000), tolerance=Decimal("1"))
    assert result.discrepancies == []
    assert result.total_difference == Decimal("1")

def test_every_amount_field_is_reported():
    left = inv(taxable_value=1000, cgst=90, sgst=90, igst=0, total_amount=1180)
    right = inv(taxable_value=800, cgst=72, sgst=72, igst=50, total_amount=994)
    result = compare_invoices(left, right)

    fields = [d.field for d in result.discrepancies]
    assert fields == ["taxable_value", "cgst", "sgst", "igst", "total_amount"]

    by_field = {d.field: d for d in result.discrepancies}
    assert by_field["taxable_value"].severity == Severity.HIGH
    assert by_field["taxable_value"].difference == Decimal("200.00")
    assert by_field["cgst"].severity == Severity.MEDIUM
    assert by_field["igst"].difference == Decimal("-50.00")
    assert by_field["total_amount"].left_value == 1180.0
    assert by_field["total_amount"].right_value == 994.0
    assert result.total_difference == Decimal("186")

def test_signed_total_difference_inside_tolerance():
    result = compare_invoices(inv(total_amount="999.50"), inv(total_amount=1000))
    assert result.discrepancies == []
    assert result.total_difference == Decimal("-0.50")

def test_gstin_comparison():
    same = compare_invoices(inv(counterparty_gstin="27aapfu0939f1zv"), inv(counterparty_gstin="27AAPFU0939F1ZV "))
    assert same.discrepancies == []

    one_missing = compare_invoices(inv(counterparty_gstin="27AAPFU0939F1ZV"), inv())
    assert one_missing.discrepancies == []

    different = compare_invoices(inv(counterparty_gstin="27AAPFU0939F1ZV"), inv(counterparty_gstin="29ABCDE1234F1ZW"))
    assert len(different.discrepancies) == 1
    assert different.discrepancies[0].field == "counterparty_gstin"
    assert different.discrepancies[0].severity == Severity.HIGH

def test_dates_compare_after_normalization():
    assert compare_invoices(inv(invoice_date="05/01/2024"), inv(invoice_date="2024-01-05")).discrepancies == []
    assert compare_invoices(inv(invoice_date="05/01/2024"), inv()).discrepancies == []

    result = compare_invoices(inv(invoice_date="05/01/2024"), inv(invoice_date="2024-01-06"))
    assert len(result.discrepancies) == 1
    assert result.discrepancies[0].field == "invoice_date"
    assert result.discrepancies[0].severity == Severity.MEDIUM
    assert result.discrepancies[0].left_value == "05/01/2024"
