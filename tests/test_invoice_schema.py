from datetime import date
from decimal import Decimal
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import MatchType
from gstrecon.core.matcher import match_invoices

def test_aliases_and_defaults():
    inv = Invoice(invoice_no="INV-1", gstin="27AAPFU0939F1ZV", date="2024-01-05", total="1180")
    assert inv.invoice_number == "INV-1"
    assert inv.counterparty_gstin == "27AAPFU0939F1ZV"
    assert inv.invoice_date == "2024-01-05"
    assert inv.total_amount == Decimal("1180")
    assert inv.taxable_value == Decimal("0")
    assert inv.counterparty_name is None

def test_unparseable_amounts_become_zero():
    inv = Invoice(invoice_number="X", taxable_value="1000USD", cgst="n/a", igst=None)
    assert inv.taxable_value == Decimal("0")
    assert inv.cgst == Decimal("0")
    assert inv.igst == Decimal("0")

def test_unknown_columns_go_to_extras():
    inv = Invoice(invoice_number="X", hsn_code="8471", narration="laptops")
    assert inv.extras == {"hsn_code": "8471", "narration": "laptops"}
    assert not hasattr(inv, "hsn_code")

def test_flags_and_dates():
    inv = Invoice(invoice_number="X", reverse_charge="Y", itc_eligible="N", invoice_date=date(2024, 3, 1))
    assert inv.reverse_charge is True
    assert inv.itc_eligible is False
    assert inv.invoice_date == "2024-03-01"

    blank = Invoice(invoice_number="X", reverse_charge="", itc_eligible="", counterparty_gstin="  ")
    assert blank.reverse_charge is False
    assert blank.itc_eligible is True
    assert blank.counterparty_gstin is None

def test_money_serializes_as_json_number():
    inv = Invoice(invoice_number="X", taxable_value="1000.50")
    assert inv.model_dump(mode="json")["taxable_value"] == 1000.5
    assert inv.model_dump()["taxable_value"] == Decimal("1000.50")

def test_numeric_invoice_numbers_from_spreadsheets():
    assert Invoice(invoice_number=42.0).invoice_number == "42"
    assert Invoice(invoice_number=42).invoice_number == "42"
    assert Invoice(invoice_number=42.5).invoice_number == "42.5"

    run = match_invoices([Invoice(invoice_number=42.0, total_amount=10)], [Invoice(invoice_number="42", total_amount=10)])
    assert run.pairs[0].match_type == MatchType.EXACT
