"""
ResumeLicenseCommand.
"""
from dataclasses import dataclass


@dataclass
class ResumeLicenseCommand:
    """Command to resume a suspended license."""

    license_key: str
