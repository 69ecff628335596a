"""
ListLicensesQuery.

Query to list licenses, optionally for one customer email.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ListLicensesQuery:
    """Query to list licenses. Without an email every license is listed."""

    customer_email: Optional[str] = None
