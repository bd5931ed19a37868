from decimal import Decimal
from enum import Enum
from pydantic import BaseModel
from gstrecon.schemas.invoice import Money

class VendorRiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

class VendorRiskSummary(BaseModel):
    vendor_gstin: str
    vendor_name: str = ""
    total_invoices: int
    matched_count: int
    mismatched_count: int
    missing_in_2b_count: int
    purchase_amount: Money = Decimal("0")
    claimed_itc_amount: Money = Decimal("0")
    # ITC claimed on invoices the supplier has not reported or reported differently
    risky_itc_amount: Money = Decimal("0")
    vendor_risk_level: VendorRiskLevel
