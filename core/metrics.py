"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Validation metrics
license_validations_total = Counter(
    "license_validations_total",
    "License validation decisions",
    ["code"],
)

license_validation_duration_seconds = Histogram(
    "license_validation_duration_seconds",
    "Time spent deciding a validation",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)

activations_granted_total = Counter(
    "activations_granted_total",
    "New activation slots granted",
)

activations_released_total = Counter(
    "activations_released_total",
    "Activation slots released by deactivation",
)

activation_counts_reconciled_total = Counter(
    "activation_counts_reconciled_total",
    "License activation counters corrected by reconciliation",
)

attestations_issued_total = Counter(
    "attestations_issued_total",
    "Signed attestations issued",
)

# License lifecycle metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["product_id"],
)

license_status_changes_total = Counter(
    "license_status_changes_total",
    "Administrative license status changes",
    ["action"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
