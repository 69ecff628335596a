"""
Machine identity hashing.

Raw machine identities are reduced to a SHA-256 fingerprint before they
are stored, compared or logged.
"""

import hashlib

from core.domain.exceptions import InvalidMachineIdentityError
from core.domain.value_objects import MachineFingerprint


def hash_machine_identity(identity: str) -> MachineFingerprint:
    """
    Hash a raw machine identity.

    Args:
        identity: Machine identity as reported by the client

    Returns:
        MachineFingerprint (64 lowercase hex characters)

    Raises:
        InvalidMachineIdentityError: If the identity is empty
    """
    if not identity or not identity.strip():
        raise InvalidMachineIdentityError("Machine identity cannot be empty")
    return MachineFingerprint(hashlib.sha256(identity.encode("utf-8")).hexdigest())
