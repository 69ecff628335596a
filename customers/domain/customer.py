"""
Customer domain entity.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import Email


@dataclass(frozen=True)
class Customer:
    """Customer domain entity. Owns licenses."""

    id: uuid.UUID
    name: str
    email: Email
    company: Optional[str] = None
