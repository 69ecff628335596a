"""
JWT implementation of the AttestationSigner port.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import jwt
from django.conf import settings

from activations.ports.attestation_signer import AttestationSigner
from core.domain.exceptions import AttestationInvalidError
from licenses.domain.license import utc_now

logger = logging.getLogger(__name__)


class JWTAttestationSigner(AttestationSigner):
    """
    Signs validation results as short-lived HS256 JSON Web Tokens.

    Verification fails closed: any decoding problem, including an expired
    token or a token signed with another algorithm, raises
    AttestationInvalidError.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        algorithm: Optional[str] = None,
    ):
        self._secret = secret or settings.LICENSE_SIGNING_KEY
        self._ttl = timedelta(
            seconds=ttl_seconds if ttl_seconds is not None else settings.LICENSE_ATTESTATION_TTL_SECONDS
        )
        self._algorithm = algorithm or settings.LICENSE_ATTESTATION_ALGORITHM
        if not self._secret:
            raise ValueError("A signing key is required")

    def sign(self, payload: Dict[str, Any]) -> str:
        issued_at = utc_now()
        claims = dict(payload)
        claims["iat"] = issued_at
        claims["exp"] = issued_at + self._ttl
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        if not token:
            raise AttestationInvalidError("Attestation is missing")
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AttestationInvalidError("Attestation has expired") from e
        except jwt.InvalidTokenError as e:
            logger.info("Rejected attestation", extra={"reason": str(e)})
            raise AttestationInvalidError() from e
