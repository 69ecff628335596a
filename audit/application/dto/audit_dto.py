"""
Audit DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass
class AuditEntryDTO:
    """DTO for one audit entry."""

    id: uuid.UUID
    action: str
    machine_fingerprint: Optional[str]
    timestamp: datetime
    details: Dict = field(default_factory=dict)
