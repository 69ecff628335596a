"""
RevokeLicenseCommand.
"""
from dataclasses import dataclass


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license permanently."""

    license_key: str
