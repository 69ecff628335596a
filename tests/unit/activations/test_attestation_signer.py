"""
Unit tests for JWTAttestationSigner.
"""

import time

import jwt
import pytest
from jwt.utils import base64url_encode

from activations.infrastructure.jwt_attestation_signer import JWTAttestationSigner
from core.domain.exceptions import AttestationInvalidError

SECRET = "signer-test-key-with-enough-entropy"

PAYLOAD = {
    "valid": True,
    "license_key": "ABCD-EFGH-JKLM-NPQR",
    "features": ["export"],
    "expiry": None,
}


class TestJWTAttestationSigner:
    """Tests for the attestation signer."""

    def test_sign_and_verify(self, signer):
        """Test a fresh attestation verifies and carries its claims."""
        token = signer.sign(PAYLOAD)

        claims = signer.verify(token)

        assert claims["license_key"] == PAYLOAD["license_key"]
        assert claims["features"] == ["export"]
        assert claims["expiry"] is None
        assert claims["exp"] - claims["iat"] == 3600

    def test_sign_does_not_mutate_payload(self, signer):
        payload = dict(PAYLOAD)

        signer.sign(payload)

        assert payload == PAYLOAD

    def test_expired_attestation(self):
        """Test an attestation past its TTL is rejected."""
        signer = JWTAttestationSigner(secret="k" * 32, ttl_seconds=-1, algorithm="HS256")

        with pytest.raises(AttestationInvalidError, match="expired"):
            signer.verify(signer.sign(PAYLOAD))

    def test_tampered_attestation(self, signer):
        """Test a modified payload is rejected."""
        header, payload, signature = signer.sign(PAYLOAD).split(".")
        forged_payload = base64url_encode(b'{"valid":true,"license_key":"X"}').decode()

        with pytest.raises(AttestationInvalidError):
            signer.verify(f"{header}.{forged_payload}.{signature}")

    def test_wrong_key(self, signer):
        """Test an attestation signed with another key is rejected."""
        other = JWTAttestationSigner(secret="another-key-" * 3, ttl_seconds=3600, algorithm="HS256")

        with pytest.raises(AttestationInvalidError):
            signer.verify(other.sign(PAYLOAD))

    def test_unsigned_token(self, signer):
        """Test an unsigned token is rejected."""
        token = jwt.encode(
            {**PAYLOAD, "iat": int(time.time()), "exp": int(time.time()) + 60},
            key=None,
            algorithm="none",
        )

        with pytest.raises(AttestationInvalidError):
            signer.verify(token)

    def test_missing_expiry_claim(self, signer):
        """Test a token without exp is rejected."""
        signer = JWTAttestationSigner(secret=SECRET, ttl_seconds=3600, algorithm="HS256")
        token = jwt.encode({**PAYLOAD, "iat": int(time.time())}, SECRET, algorithm="HS256")

        with pytest.raises(AttestationInvalidError):
            signer.verify(token)

    @pytest.mark.parametrize("token", ["", "not-a-token"])
    def test_garbage(self, signer, token):
        with pytest.raises(AttestationInvalidError):
            signer.verify(token)

    def test_requires_secret(self, settings):
        settings.LICENSE_SIGNING_KEY = ""

        with pytest.raises(ValueError):
            JWTAttestationSigner()

    def test_defaults_from_settings(self, settings):
        settings.LICENSE_ATTESTATION_TTL_SECONDS = 120

        signer = JWTAttestationSigner()
        claims = signer.verify(signer.sign(PAYLOAD))

        assert claims["exp"] - claims["iat"] == 120
