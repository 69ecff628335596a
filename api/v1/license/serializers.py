"""
Serializers for the client license API.
"""

from rest_framework import serializers


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for validate license request."""

    license_key = serializers.CharField(required=True, trim_whitespace=True)
    machine_id = serializers.CharField(required=True, trim_whitespace=False)
    timestamp = serializers.IntegerField(required=False, allow_null=True)
    client_info = serializers.JSONField(required=False, default=dict)

    def validate_machine_id(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.", code="blank")
        return value

    def validate_client_info(self, value):
        # Metadata only; anything but an object is dropped
        return value if isinstance(value, dict) else {}


class ValidationResultSerializer(serializers.Serializer):
    """Serializer for validation result. Unset fields are omitted by the view."""

    valid = serializers.BooleanField()
    reason = serializers.CharField(required=False)
    code = serializers.CharField(required=False)
    license_key = serializers.CharField(required=False)
    product_id = serializers.CharField(required=False)
    expiry = serializers.IntegerField(required=False, allow_null=True, help_text="Epoch seconds")
    features = serializers.ListField(child=serializers.CharField(), required=False)
    activation_id = serializers.CharField(required=False)
    max_activations = serializers.IntegerField(required=False)
    current_activations = serializers.IntegerField(required=False)
    signature = serializers.CharField(required=False)


class DeactivateRequestSerializer(serializers.Serializer):
    """Serializer for deactivate request."""

    license_key = serializers.CharField(required=True)
    machine_id = serializers.CharField(required=True, trim_whitespace=False)

    def validate_machine_id(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.", code="blank")
        return value


class DeactivationResultSerializer(serializers.Serializer):
    """Serializer for deactivate response."""

    released = serializers.BooleanField()
    reason = serializers.CharField(required=False)
    code = serializers.CharField(required=False)


class ActivationSerializer(serializers.Serializer):
    """Serializer for an activation. Only the fingerprint is exposed."""

    machine_fingerprint = serializers.CharField()
    activated_at = serializers.DateTimeField()
    last_heartbeat = serializers.DateTimeField()


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO (shared with the admin API)."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    product_id = serializers.UUIDField()
    customer_id = serializers.UUIDField()
    status = serializers.CharField()
    is_valid = serializers.BooleanField()
    max_activations = serializers.IntegerField()
    current_activations = serializers.IntegerField()
    features = serializers.ListField(child=serializers.CharField())
    issued_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField(allow_null=True)


class LicenseStatusResponseSerializer(LicenseSerializer):
    """Serializer for license status response."""

    activations = ActivationSerializer(many=True)


class VerifyAttestationRequestSerializer(serializers.Serializer):
    """Serializer for verify attestation request."""

    signature = serializers.CharField(required=True)


class VerifyAttestationResponseSerializer(serializers.Serializer):
    """Serializer for verify attestation response."""

    valid = serializers.BooleanField()
    payload = serializers.DictField()
