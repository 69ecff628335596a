"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class InvalidLicenseStatusError(LicenseException):
    """Raised when a license operation is invalid for the current status."""

    def __init__(self, message: str = "Invalid license status"):
        super().__init__(message, code="INVALID_LICENSE_STATUS")


class InvalidExpiryError(LicenseException):
    """Raised when an expiry date is not usable for the requested operation."""

    def __init__(self, message: str = "Expiry date must be in the future"):
        super().__init__(message, code="INVALID_EXPIRY")


class ProductNotFoundError(DomainException):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class CustomerNotFoundError(DomainException):
    """Raised when a customer is not found."""

    def __init__(self, message: str = "Customer not found"):
        super().__init__(message, code="CUSTOMER_NOT_FOUND")


class ActivationException(DomainException):
    """Base exception for activation-related errors."""

    pass


class InvalidMachineIdentityError(ActivationException):
    """Raised when a machine identity is empty."""

    def __init__(self, message: str = "Invalid machine identity"):
        super().__init__(message, code="INVALID_MACHINE_IDENTITY")


class AttestationInvalidError(DomainException):
    """Raised when a signed attestation cannot be verified."""

    def __init__(self, message: str = "Invalid or expired attestation"):
        super().__init__(message, code="ATTESTATION_INVALID")
