from fastapi.testclient import TestClient
from gstrecon.main import app
from gstrecon.core.config import settings

client = TestClient(app)

G1 = "27AAPFU0939F1ZV"

def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

def test_sales_reconciliation():
    payload = {
        "sales": [
            {"invoice_no": "INV-001", "gstin": G1, "date": "01/04/2024", "taxable_value": "1,000.00",
             "cgst": 90, "sgst": 90, "total": 1180, "hsn_code": "8471"},
            {"invoice_no": "INV-2", "gstin": G1, "total": 5000},
        ],
        "gstr1": [
            {"invoice_number": "inv001", "counterparty_gstin": G1, "invoice_date": "2024-04-01",
             "taxable_value": 1000, "cgst": 90, "sgst": 90, "total_amount": 1180},
            {"invoice_number": "INV-9", "counterparty_gstin": G1, "total_amount": 5000},
        ],
    }
    response = client.post("/reconcile/sales", json=payload)
    assert response.status_code == 200
    data = response.json()

    assert data["summary"]["matched"] == 2
    assert data["summary"]["mismatched"] == 0
    exact, fuzzy = data["matched"]
    assert exact["match_type"] == "EXACT"
    assert exact["left"]["taxable_value"] == 1000.0
    assert exact["left"]["extras"] == {"hsn_code": "8471"}
    assert fuzzy["match_type"] == "FUZZY"
    assert fuzzy["confidence"] == 0.7
    assert fuzzy["annotations"][0]["severity"] == "INFO"

def test_tolerance_option():
    payload = {
        "sales": [{"invoice_number": "A1", "total_amount": 1005}],
        "gstr1": [{"invoice_number": "A1", "total_amount": 1000}],
        "options": {"toleranceAmount": 10},
    }
    data = client.post("/reconcile/sales", json=payload).json()
    assert data["summary"]["matched"] == 1

    payload["options"] = {"toleranceAmount": -1}
    assert client.post("/reconcile/sales", json=payload).status_code == 422

def test_purchase_reconciliation_accepts_gstr2_key():
    payload = {
        "purchases": [{"invoice_number": "1", "gstin": "G1", "cgst": 90, "sgst": 90, "total": 1180}],
        "gstr2": [{"invoice_number": "1", "gstin": "G1", "cgst": 90, "sgst": 90, "total": 1180}],
    }
    response = client.post("/reconcile/purchase", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["matched"] == 1
    assert data["itc_exposure"]["matched"]["cgst"] == 90.0
    assert data["supplier_risk"][0]["vendor_risk_level"] == "LOW"

def test_invoice_limit(monkeypatch):
    monkeypatch.setattr(settings, "MAX_INVOICES_PER_SIDE", 1)
    payload = {
        "sales": [{"invoice_number": "A"}, {"invoice_number": "B"}],
        "gstr1": [],
    }
    response = client.post("/reconcile/sales", json=payload)
    assert response.status_code == 413

def test_waterfall_endpoint():
    payload = {
        "liability": {"cgst": 100, "sgst": 100, "igst": 0},
        "credit": {"cgst": 60, "sgst": 0, "igst": 50},
    }
    response = client.post("/gstr3b/waterfall", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["cash_payable"] == {"cgst": 0.0, "sgst": 100.0, "igst": 0.0, "cess": 0.0, "total": 100.0}
    assert data["steps"]["igst_to_cgst"] == 50.0
    assert data["credit_balance"]["cgst"] == 10.0

def test_waterfall_rejects_negative_amounts():
    response = client.post("/gstr3b/waterfall", json={"liability": {"igst": -10}, "credit": {}})
    assert response.status_code == 422

def test_gstr3b_compute_endpoint():
    payload = {
        "period": "2024-04",
        "outward": [{"invoice_number": "S1", "taxable_value": 1000, "igst": 180}],
        "inward": [{"invoice_number": "P1", "igst": 100}],
    }
    response = client.post("/gstr3b/compute", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["period"] == "2024-04"
    assert data["payment"]["cash_payable"]["igst"] == 80.0

def test_validate_gstin_endpoint():
    ok = client.post("/validate/gstin", json={"gstin": G1}).json()
    assert ok["is_valid"] is True
    assert ok["state_name"] == "Maharashtra"

    bad = client.post("/validate/gstin", json={"gstin": "29ABCDE1234F1Z5"}).json()
    assert bad["is_valid"] is False
    assert bad["errors"]

def test_validation_issue_severity_serializes_as_enum_value():
    payload = {"sales": [{"invoice_number": "", "total_amount": 0}], "gstr1": []}
    issues = client.post("/reconcile/sales", json=payload).json()["validation_issues"]
    assert {i["type"]: i["severity"] for i in issues} == {
        "MISSING_INVOICE_NUMBER": "HIGH",
        "MISSING_DATE": "MEDIUM",
    }
