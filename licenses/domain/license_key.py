"""
License key generation.

Keys are four hyphen-joined segments of uppercase letters and digits,
drawn from the ``secrets`` CSPRNG.
"""

import re
import secrets
import string
import uuid

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_SEGMENTS = 4
KEY_SEGMENT_LENGTH = 4
LICENSE_KEY_PATTERN = re.compile(r"^[A-Z0-9]{4}(-[A-Z0-9]{4}){3}$")


def generate_license_key() -> str:
    """
    Generate a license key in format: XXXX-XXXX-XXXX-XXXX.

    Returns:
        Generated license key string
    """
    parts = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_SEGMENT_LENGTH))
        for _ in range(KEY_SEGMENTS)
    ]
    return "-".join(parts)


def generate_id() -> uuid.UUID:
    """Random record identifier, independent of any license key."""
    return uuid.uuid4()


def validate_license_key(key: str) -> str:
    """
    Check that ``key`` has the license key format.

    Args:
        key: Candidate license key

    Returns:
        The key unchanged

    Raises:
        ValueError: If the key is malformed
    """
    if not key or not LICENSE_KEY_PATTERN.match(key):
        raise ValueError(f"Invalid license key format: {key[:4] if key else ''}...")
    return key
