from decimal import Decimal
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.validation import IssueType, Severity
from gstrecon.core.validation import check_invoices, gstin_check_character, validate_gstin

VALID_GSTIN = "27AAPFU0939F1ZV"

def test_valid_gstin_is_decoded():
    result = validate_gstin(" 27aapfu0939f1zv ")
    assert result.is_valid
    assert result.errors == []
    assert result.gstin == VALID_GSTIN
    assert result.state_code == "27"
    assert result.state_name == "Maharashtra"
    assert result.pan == "AAPFU0939F"
    assert result.entity_type == "Firm"

def test_unknown_entity_type_still_valid():
    result = validate_gstin("29ABCDE1234F1ZW")
    assert result.is_valid
    assert result.state_name == "Karnataka"
    assert result.entity_type == "Unknown"

def test_check_character():
    assert gstin_check_character(VALID_GSTIN) == "V"
    assert gstin_check_character("29ABCDE1234F1Z") == "W"
    assert gstin_check_character("29abcde1234f1z") is None

def test_bad_checksum():
    result = validate_gstin("29ABCDE1234F1Z5")
    assert not result.is_valid
    assert result.errors == ["GSTIN checksum digit is invalid"]

def test_structural_errors():
    assert validate_gstin("").errors == ["GSTIN is required"]
    assert validate_gstin(None).errors == ["GSTIN is required"]

    short = validate_gstin("27AAPFU0939F1Z")
    assert short.errors == ["GSTIN must be 15 characters, got 14"]

    no_z = validate_gstin("27AAPFU0939F1XV")
    assert not no_z.is_valid
    assert "GSTIN format is invalid" in no_z.errors
    assert '14th character must be "Z"' in no_z.errors

    bad_state = validate_gstin("99AAPFU0939F1ZV")
    assert bad_state.errors == ["Invalid state code: 99"]

def issue_types(invoices):
    return [issue.type for issue in check_invoices(invoices)]

def test_clean_invoice_has_no_issues():
    clean = Invoice(
        invoice_number="INV-1", invoice_date="2024-04-01", counterparty_gstin=VALID_GSTIN,
        taxable_value=1000, cgst=90, sgst=90, total_amount=1180,
    )
    assert check_invoices([clean]) == []

def test_data_quality_checks():
    invoices = [
        Invoice(invoice_number="A", invoice_date="2024-04-01", taxable_value=1000, cgst=90, sgst=80, total_amount=1170),
        Invoice(invoice_number="B", invoice_date="2024-04-01", taxable_value=1000, igst=100, total_amount=1100),
        Invoice(invoice_number="C", invoice_date="2024-04-01", counterparty_gstin="BADGSTIN", total_amount=0),
        Invoice(
            invoice_number="D", invoice_date="2024-04-01", counterparty_gstin=VALID_GSTIN,
            taxable_value=60000, igst=10800, total_amount=70800,
        ),
    ]
    issues = check_invoices(invoices)
    by_position = {}
    for issue in issues:
        by_position.setdefault(issue.position, []).append(issue.type)

    assert IssueType.SPLIT_TAX_IMBALANCE in by_position[0]
    assert by_position[1] == [IssueType.UNUSUAL_TAX_RATE]
    assert by_position[2] == [IssueType.INVALID_GSTIN]
    assert by_position[3] == [IssueType.E_INVOICE_CHECK]
    assert issues[-1].severity == Severity.INFO
    assert {i.type: i.severity for i in issues}[IssueType.INVALID_GSTIN] == Severity.HIGH

def test_total_mismatch_respects_tolerance():
    inv = Invoice(invoice_number="A", invoice_date="2024-04-01", taxable_value=1000, igst=180, total_amount=1185)
    assert issue_types([inv]) == [IssueType.TOTAL_MISMATCH]
    assert check_invoices([inv], tolerance=Decimal("10")) == []
