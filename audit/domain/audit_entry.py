"""
Audit entry domain entity.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from core.domain.value_objects import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """An immutable record of one decision about a license."""

    id: uuid.UUID
    license_id: Optional[uuid.UUID]
    action: AuditAction
    machine_fingerprint: Optional[str]
    timestamp: datetime
    details: Dict = field(default_factory=dict, compare=False)
