from abc import ABC, abstractmethod
from typing import List, Optional
from gstrecon.schemas.audit import AuditAction, AuditLogEntry
import logging

logger = logging.getLogger(__name__)

class AuditRepository(ABC):
    @abstractmethod
    def save(self, entry: AuditLogEntry):
        pass

    @abstractmethod
    def get_all(self) -> List[AuditLogEntry]:
        pass

class InMemoryAuditRepository(AuditRepository):
    """Append-only; entries are never updated or removed during the process lifetime."""

    def __init__(self):
        self._storage: List[AuditLogEntry] = []

    def save(self, entry: AuditLogEntry):
        self._storage.append(entry)
        logger.info(f"Audit Logged: {entry.model_dump_json()}")

    def get_all(self) -> List[AuditLogEntry]:
        return list(self._storage)

    def find(self, endpoint: str, action: Optional[AuditAction] = None) -> List[AuditLogEntry]:
        return [
            e for e in self._storage
            if e.endpoint == endpoint and (action is None or e.action_type == action)
        ]

# Global Accessor
audit_repo = InMemoryAuditRepository()
