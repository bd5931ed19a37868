from enum import Enum
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from gstrecon.schemas.invoice import Invoice, Money
from gstrecon.schemas.tax import TaxHeads
from gstrecon.schemas.validation import Severity, ValidationIssue

class ReconciliationStatus(str, Enum):
    MATCHED = "MATCHED"
    MISMATCHED = "MISMATCHED"
    MISSING_IN_RIGHT = "MISSING_IN_RIGHT"
    MISSING_IN_LEFT = "MISSING_IN_LEFT"

class MatchType(str, Enum):
    EXACT = "EXACT"
    FUZZY = "FUZZY"

class Side(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"

class Discrepancy(BaseModel):
    field: str
    label: str
    left_value: Any = None
    right_value: Any = None
    difference: Optional[Money] = None
    severity: Severity
    message: Optional[str] = None

class InvoicePair(BaseModel):
    status: ReconciliationStatus
    match_type: MatchType = MatchType.EXACT
    confidence: float = 1.0
    invoice_number: str
    left_position: int
    right_position: int
    left: Invoice
    right: Invoice
    discrepancies: List[Discrepancy] = Field(default_factory=list)
    # Informational notes that never change the status (e.g. fuzzy identifier mismatch)
    annotations: List[Discrepancy] = Field(default_factory=list)
    total_difference: Money = Decimal("0")

class UnmatchedInvoice(BaseModel):
    status: ReconciliationStatus
    position: int
    invoice: Invoice
    severity: Severity = Severity.HIGH
    suggestion: str = "-"

class DuplicateGroup(BaseModel):
    side: Side
    key: str
    invoice_number: str
    count: int
    positions: List[int]
    invoices: List[Invoice]

class MatchPolicy(BaseModel):
    """
    Scoring and severity constants of the matching engine.
    The defaults are the production values; override only for experiments.
    """
    model_config = ConfigDict(frozen=True)

    numeric_match_confidence: float = 0.9
    amount_match_confidence: float = 0.7
    min_confidence: float = 0.7
    # Total-amount window for the amount-corroborated fuzzy tier.
    # Independent of the comparator tolerance so raising the tolerance never adds pairs.
    fuzzy_amount_window: Money = Decimal("1")
    high_severity_above: Money = Decimal("100")
    medium_severity_above: Money = Decimal("10")

class ReconciliationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tolerance_amount: Money = Field(Decimal("1"), alias="toleranceAmount", ge=0)
    policy: MatchPolicy = Field(default_factory=MatchPolicy)

class ReconciliationSummary(BaseModel):
    total_left: int = 0
    total_right: int = 0
    matched: int = 0
    mismatched: int = 0
    missing_in_right: int = 0
    missing_in_left: int = 0
    duplicate_groups: int = 0
    total_discrepancy_amount: Money = Decimal("0")
    # Tax charged on the left-side invoices, the liability input of the waterfall
    left_tax: TaxHeads = Field(default_factory=TaxHeads)

class MonthlyBreakdown(BaseModel):
    total: int = 0
    matched: int = 0
    mismatched: int = 0
    missing: int = 0

class CounterpartyBreakdown(BaseModel):
    name: str
    gstin: str = ""
    total: int = 0
    matched: int = 0
    mismatched: int = 0
    missing: int = 0
    discrepancy_amount: Money = Decimal("0")

class ReconciliationResult(BaseModel):
    summary: ReconciliationSummary
    matched: List[InvoicePair] = Field(default_factory=list)
    mismatched: List[InvoicePair] = Field(default_factory=list)
    missing_in_right: List[UnmatchedInvoice] = Field(default_factory=list)
    missing_in_left: List[UnmatchedInvoice] = Field(default_factory=list)
    duplicates: List[DuplicateGroup] = Field(default_factory=list)
    validation_issues: List[ValidationIssue] = Field(default_factory=list)
    monthly_breakdown: Dict[str, MonthlyBreakdown] = Field(default_factory=dict)
    counterparty_breakdown: Dict[str, CounterpartyBreakdown] = Field(default_factory=dict)
