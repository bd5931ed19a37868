from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid
from enum import Enum

class AuditStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

class AuditAction(str, Enum):
    RECONCILE_SALES = "RECONCILE_SALES"
    RECONCILE_PURCHASE = "RECONCILE_PURCHASE"
    ITC_WATERFALL = "ITC_WATERFALL"
    GSTR3B_COMPUTE = "GSTR3B_COMPUTE"
    VALIDATE_GSTIN = "VALIDATE_GSTIN"
    HEALTH_CHECK = "HEALTH_CHECK"
    UNKNOWN = "UNKNOWN"

class AuditLogEntry(BaseModel):
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    endpoint: str
    method: str
    action_type: AuditAction
    tenant_id: str
    status_code: Optional[int] = None
    input_hash: Optional[str] = None
    output_hash: Optional[str] = None
    status: AuditStatus
