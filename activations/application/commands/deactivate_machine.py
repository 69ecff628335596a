"""
DeactivateMachineCommand.

Command to release the activation slot held by a machine.
"""

from dataclasses import dataclass


@dataclass
class DeactivateMachineCommand:
    """Command to deactivate a machine on a license."""

    license_key: str
    machine_id: str
