"""
RenewLicenseCommand.

Command to renew (extend) a license.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class RenewLicenseCommand:
    """Command to renew a license with a new expiration date."""

    license_key: str
    expiration_date: datetime
