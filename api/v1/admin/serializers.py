"""
Serializers for the admin license API.
"""

from rest_framework import serializers

from api.v1.license.serializers import LicenseSerializer


class IssueLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for issue license request.

    Omitted values fall back to the product's defaults; ``perpetual``
    issues a license without expiry.
    """

    product_id = serializers.UUIDField(required=True)
    customer_id = serializers.UUIDField(required=True)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    perpetual = serializers.BooleanField(required=False, default=False)
    max_activations = serializers.IntegerField(required=False, min_value=1)
    features = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, allow_empty=True
    )
    metadata = serializers.DictField(required=False, allow_empty=True)

    def validate(self, attrs):
        if attrs.get("perpetual") and attrs.get("expires_at"):
            raise serializers.ValidationError("A perpetual license cannot have an expiry")
        return attrs


class IssuedLicenseSerializer(LicenseSerializer):
    """Serializer for an issued or updated license."""

    metadata = serializers.DictField()


class RenewLicenseRequestSerializer(serializers.Serializer):
    """Serializer for renew license request."""

    expires_at = serializers.DateTimeField(required=True)


class ReconcileResponseSerializer(serializers.Serializer):
    """Serializer for reconcile response."""

    license_key = serializers.CharField()
    previous = serializers.IntegerField()
    actual = serializers.IntegerField()
    changed = serializers.BooleanField()


class AuditEntrySerializer(serializers.Serializer):
    """Serializer for an audit entry."""

    id = serializers.UUIDField()
    action = serializers.CharField()
    machine_fingerprint = serializers.CharField(allow_null=True)
    timestamp = serializers.DateTimeField()
    details = serializers.DictField()


class LicenseListItemSerializer(serializers.Serializer):
    """Serializer for one row of a license listing."""

    license_key = serializers.CharField()
    product_name = serializers.CharField()
    customer_email = serializers.CharField(allow_blank=True)
    status = serializers.CharField()
    is_valid = serializers.BooleanField()
    expires_at = serializers.DateTimeField(allow_null=True)
    current_activations = serializers.IntegerField()
    max_activations = serializers.IntegerField()


class LicenseStatsSerializer(serializers.Serializer):
    total_licenses = serializers.IntegerField()
    active_licenses = serializers.IntegerField()
    expired_licenses = serializers.IntegerField()
    unique_customers = serializers.IntegerField()
    total_products = serializers.IntegerField()
    total_activations = serializers.IntegerField()


class ProductStatsSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    total_count = serializers.IntegerField()
    active_count = serializers.IntegerField()
    total_activations = serializers.IntegerField()


class LicenseReportSerializer(serializers.Serializer):
    """Serializer for the license report."""

    stats = LicenseStatsSerializer()
    product_stats = ProductStatsSerializer(many=True)
