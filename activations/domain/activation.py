"""
Activation domain entity.

This is the core domain entity representing a license activation.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict

from core.domain.value_objects import MachineFingerprint


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    A machine, identified only by its fingerprint, holding one
    activation slot of a license.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    machine_fingerprint: MachineFingerprint
    activated_at: datetime
    last_heartbeat: datetime
    client_info: Dict = field(default_factory=dict, compare=False)

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if not isinstance(self.machine_fingerprint, MachineFingerprint):
            raise ValueError("Machine fingerprint is required")


@dataclass(frozen=True)
class SlotAllocation:
    """Outcome of claiming a slot. ``created`` is False when the machine already held one."""

    activation: Activation
    created: bool
