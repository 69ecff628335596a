"""
GetLicenseStatusQuery.

Query to get a license and the machines activated on it.
"""
from dataclasses import dataclass


@dataclass
class GetLicenseStatusQuery:
    """Query to get license status for a license key."""

    license_key: str
