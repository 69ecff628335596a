"""
Attestation signer port (interface).
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class AttestationSigner(ABC):
    """Signs validation results so clients can verify them offline."""

    @abstractmethod
    def sign(self, payload: Dict[str, Any]) -> str:
        """
        Sign a payload.

        Args:
            payload: JSON-serializable claims

        Returns:
            Signed token carrying the payload and an expiry
        """
        pass

    @abstractmethod
    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Args:
            token: Token produced by ``sign``

        Returns:
            Decoded payload

        Raises:
            AttestationInvalidError: If the token is expired, malformed or
                was not signed with the configured key
        """
        pass
