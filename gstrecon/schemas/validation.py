from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional

class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

class IssueType(str, Enum):
    MISSING_INVOICE_NUMBER = "MISSING_INVOICE_NUMBER"
    MISSING_DATE = "MISSING_DATE"
    INVALID_GSTIN = "INVALID_GSTIN"
    TAX_TYPE_CONFLICT = "TAX_TYPE_CONFLICT"
    SPLIT_TAX_IMBALANCE = "SPLIT_TAX_IMBALANCE"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    UNUSUAL_TAX_RATE = "UNUSUAL_TAX_RATE"
    E_INVOICE_CHECK = "E_INVOICE_CHECK"

class ValidationIssue(BaseModel):
    type: IssueType
    position: int
    invoice_number: str = ""
    severity: Severity
    message: str

class GstinRequest(BaseModel):
    gstin: str

class GstinValidation(BaseModel):
    gstin: str
    is_valid: bool = False
    errors: List[str] = Field(default_factory=list)
    state_code: Optional[str] = None
    state_name: Optional[str] = None
    pan: Optional[str] = None
    entity_type: Optional[str] = None
