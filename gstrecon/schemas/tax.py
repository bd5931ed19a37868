from decimal import Decimal
from pydantic import BaseModel, Field, computed_field
from gstrecon.schemas.invoice import Money

class TaxHeads(BaseModel):
    """Amounts per GST head: CGST/SGST are the intra-state halves, IGST the inter-state head, cess the surcharge."""
    cgst: Money = Decimal("0")
    sgst: Money = Decimal("0")
    igst: Money = Decimal("0")
    cess: Money = Decimal("0")

    @computed_field
    @property
    def total(self) -> Money:
        return self.cgst + self.sgst + self.igst + self.cess

class NonNegativeTaxHeads(TaxHeads):
    cgst: Money = Field(Decimal("0"), ge=0)
    sgst: Money = Field(Decimal("0"), ge=0)
    igst: Money = Field(Decimal("0"), ge=0)
    cess: Money = Field(Decimal("0"), ge=0)

class WaterfallRequest(BaseModel):
    liability: NonNegativeTaxHeads = Field(default_factory=NonNegativeTaxHeads)
    credit: NonNegativeTaxHeads = Field(default_factory=NonNegativeTaxHeads)

class UtilizationSteps(BaseModel):
    """Credit moved at each of the eight offset steps, in statutory order."""
    igst_to_igst: Money = Decimal("0")
    igst_to_cgst: Money = Decimal("0")
    igst_to_sgst: Money = Decimal("0")
    cgst_to_cgst: Money = Decimal("0")
    cgst_to_igst: Money = Decimal("0")
    sgst_to_sgst: Money = Decimal("0")
    sgst_to_igst: Money = Decimal("0")
    cess_to_cess: Money = Decimal("0")

class WaterfallResult(BaseModel):
    liability: TaxHeads
    credit_available: TaxHeads
    steps: UtilizationSteps
    # Credit consumed, by the head the credit came from
    credit_utilized: TaxHeads
    # Credit consumed, by the head of the liability it discharged
    credit_applied: TaxHeads
    cash_payable: TaxHeads
    credit_balance: TaxHeads
    total_liability: Money
    total_credit_utilized: Money
    total_cash_payable: Money
    total_credit_balance: Money
