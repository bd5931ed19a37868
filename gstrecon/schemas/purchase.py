from pydantic import BaseModel, Field
from typing import List
from gstrecon.schemas.reconciliation import ReconciliationResult
from gstrecon.schemas.tax import TaxHeads
from gstrecon.schemas.vendor import VendorRiskSummary

class ItcExposure(BaseModel):
    claimed: TaxHeads = Field(default_factory=TaxHeads)
    available: TaxHeads = Field(default_factory=TaxHeads)
    matched: TaxHeads = Field(default_factory=TaxHeads)
    excess_claimed: TaxHeads = Field(default_factory=TaxHeads)
    unclaimed: TaxHeads = Field(default_factory=TaxHeads)

class PurchaseReconciliationResult(ReconciliationResult):
    """Purchase register (left) vs GSTR-2A/2B (right), plus the ITC position."""
    itc_exposure: ItcExposure = Field(default_factory=ItcExposure)
    supplier_risk: List[VendorRiskSummary] = Field(default_factory=list)
