"""
IssueLicenseCommand.

Command to issue a new license for a customer and product.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    Unset values fall back to the product's defaults.
    """

    product_id: uuid.UUID
    customer_id: uuid.UUID
    expires_at: Optional[datetime] = None
    max_activations: Optional[int] = None
    features: Optional[List[str]] = None
    metadata: Optional[Dict] = None
    perpetual: bool = False
