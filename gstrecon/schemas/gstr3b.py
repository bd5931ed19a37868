from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from gstrecon.schemas.invoice import Invoice, Money
from gstrecon.schemas.tax import NonNegativeTaxHeads, TaxHeads, WaterfallResult

class SupplyBucket(BaseModel):
    taxable_value: Money = Decimal("0")
    tax: TaxHeads = Field(default_factory=TaxHeads)

class OutwardSupplies(BaseModel):
    """GSTR-3B table 3.1."""
    taxable: SupplyBucket = Field(default_factory=SupplyBucket)
    zero_rated: SupplyBucket = Field(default_factory=SupplyBucket)
    nil_rated_exempt: SupplyBucket = Field(default_factory=SupplyBucket)
    reverse_charge: SupplyBucket = Field(default_factory=SupplyBucket)
    total_liability: TaxHeads = Field(default_factory=TaxHeads)

class EligibleItc(BaseModel):
    """GSTR-3B table 4 (available credit only; reversals are not derived from invoices)."""
    reverse_charge: TaxHeads = Field(default_factory=TaxHeads)
    from_isd: TaxHeads = Field(default_factory=TaxHeads)
    all_other: TaxHeads = Field(default_factory=TaxHeads)
    net_itc: TaxHeads = Field(default_factory=TaxHeads)
    ineligible_count: int = 0

class Gstr3bRequest(BaseModel):
    period: Optional[str] = None
    outward: List[Invoice] = Field(default_factory=list)
    inward: List[Invoice] = Field(default_factory=list)
    brought_forward: NonNegativeTaxHeads = Field(default_factory=NonNegativeTaxHeads)

class Gstr3bComputation(BaseModel):
    period: Optional[str] = None
    outward_supplies: OutwardSupplies
    eligible_itc: EligibleItc
    credit_brought_forward: TaxHeads
    payment: WaterfallResult
