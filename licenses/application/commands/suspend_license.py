"""
SuspendLicenseCommand.
"""
from dataclasses import dataclass


@dataclass
class SuspendLicenseCommand:
    """Command to suspend a license."""

    license_key: str
