"""
ValidateLicenseCommand.

Command to validate a license for a machine, activating the machine when
it has no slot yet.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ValidateLicenseCommand:
    """Command to validate a license key for a machine."""

    license_key: str
    machine_id: str
    client_info: Dict = field(default_factory=dict)
    timestamp: Optional[int] = None
