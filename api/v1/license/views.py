"""
Client license API views.

These endpoints are used by licensed software to:
- Validate a license (activating the machine on first use)
- Deactivate a machine
- Inspect a license and its activations
- Verify a signed attestation
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.deactivate_machine import DeactivateMachineCommand
from activations.application.commands.validate_license import ValidateLicenseCommand
from activations.application.dto.activation_dto import (
    DeactivationResultDTO,
    ValidationResultDTO,
)
from activations.application.handlers.deactivate_machine_handler import DeactivateMachineHandler
from activations.application.handlers.validate_license_handler import (
    MISSING_FIELDS_REASON,
    TIMESTAMP_INVALID_REASON,
    ValidateLicenseHandler,
)
from activations.infrastructure.jwt_attestation_signer import JWTAttestationSigner
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.v1.license.serializers import (
    DeactivateRequestSerializer,
    DeactivationResultSerializer,
    LicenseStatusResponseSerializer,
    ValidateLicenseRequestSerializer,
    ValidationResultSerializer,
    VerifyAttestationRequestSerializer,
    VerifyAttestationResponseSerializer,
)
from audit.infrastructure.repositories.django_audit_repository import DjangoAuditRepository
from core.domain.value_objects import ValidationCode
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.handlers.get_license_status_handler import GetLicenseStatusHandler
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_audit_repo = DjangoAuditRepository()

tracer = get_tracer(__name__)

# Codes answered with 400; other failed validations are decided outcomes (200)
CLIENT_ERROR_CODES = {ValidationCode.MISSING_FIELDS.value, ValidationCode.TIMESTAMP_INVALID.value}

# Serializer error codes meaning a required field is absent or empty
MISSING_ERROR_CODES = {"required", "blank", "null"}


def _http_status(code) -> int:
    if code is None:
        return status.HTTP_200_OK
    if code in CLIENT_ERROR_CODES:
        return status.HTTP_400_BAD_REQUEST
    if code == ValidationCode.SERVER_ERROR.value:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_200_OK


def _rejected_request_response(errors) -> Response:
    """
    Answer a request the serializer rejected.

    Absent or blank fields win; otherwise an unparseable timestamp is
    reported as TIMESTAMP_INVALID.
    """
    codes = {detail.code for details in errors.values() for detail in details}
    if "timestamp" in errors and not codes & MISSING_ERROR_CODES:
        result = ValidationResultDTO(
            valid=False,
            reason=TIMESTAMP_INVALID_REASON,
            code=ValidationCode.TIMESTAMP_INVALID.value,
        )
    else:
        result = ValidationResultDTO(
            valid=False, reason=MISSING_FIELDS_REASON, code=ValidationCode.MISSING_FIELDS.value
        )
    return Response(result.to_dict(), status=status.HTTP_400_BAD_REQUEST)


class ValidateLicenseView(APIView):
    """View for validating licenses."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Validate a license key for a machine. A machine seen for the first time "
            "is activated if the license has a free slot. Successful results carry a "
            "signed attestation that expires after one hour."
        ),
        tags=["License API"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: ValidationResultSerializer,
            400: ValidationResultSerializer,
            429: {"description": "Rate limit exceeded"},
            500: ValidationResultSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a license for a machine."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for validate license."""
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")

            serializer = ValidateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "invalid_request")
                span.set_status(Status(StatusCode.ERROR, "Invalid request fields"))
                return _rejected_request_response(serializer.errors)

            data = serializer.validated_data
            handler = ValidateLicenseHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
                audit_repository=_audit_repo,
                signer=JWTAttestationSigner(),
            )
            result = await handler.handle(
                ValidateLicenseCommand(
                    license_key=data["license_key"],
                    machine_id=data["machine_id"],
                    client_info=data.get("client_info") or {},
                    timestamp=data.get("timestamp"),
                )
            )

            span.set_attribute("license.valid", result.valid)
            if result.code:
                span.set_attribute("license.code", result.code)
            if result.code == ValidationCode.SERVER_ERROR.value:
                span.set_status(Status(StatusCode.ERROR, result.reason))
            else:
                span.set_status(Status(StatusCode.OK))

            return Response(result.to_dict(), status=_http_status(result.code))


class DeactivateMachineView(APIView):
    """View for deactivating a machine."""

    @extend_schema(
        operation_id="deactivate_machine",
        summary="Deactivate Machine",
        description=(
            "Release the activation slot held by a machine. Unknown licenses and "
            "machines without an activation return released=false."
        ),
        tags=["License API"],
        request=DeactivateRequestSerializer,
        responses={
            200: DeactivationResultSerializer,
            400: DeactivationResultSerializer,
            500: DeactivationResultSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Deactivate a machine."""
        return async_to_sync(self._handle_deactivate)(request)

    async def _handle_deactivate(self, request: Request) -> Response:
        """Async handler for deactivate machine."""
        with tracer.start_as_current_span("deactivate_machine") as span:
            span.set_attribute("operation", "deactivate_machine")

            serializer = DeactivateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Missing required fields"))
                result = DeactivationResultDTO(
                    released=False,
                    reason=MISSING_FIELDS_REASON,
                    code=ValidationCode.MISSING_FIELDS.value,
                )
                return Response(result.to_dict(), status=status.HTTP_400_BAD_REQUEST)

            handler = DeactivateMachineHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
                audit_repository=_audit_repo,
            )
            result = await handler.handle(
                DeactivateMachineCommand(
                    license_key=serializer.validated_data["license_key"],
                    machine_id=serializer.validated_data["machine_id"],
                )
            )

            span.set_attribute("activation.released", result.released)
            return Response(result.to_dict(), status=_http_status(result.code))


class LicenseStatusView(APIView):
    """View for inspecting a license."""

    @extend_schema(
        operation_id="get_license_status",
        summary="License Status",
        description="Return a license and the machines currently activated on it.",
        tags=["License API"],
        parameters=[
            OpenApiParameter(
                name="license_key",
                type=str,
                location=OpenApiParameter.PATH,
                description="License key",
            ),
        ],
        responses={
            200: LicenseStatusResponseSerializer,
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request, license_key: str) -> Response:
        """Get license status."""
        return async_to_sync(self._handle_status)(request, license_key)

    async def _handle_status(self, request: Request, license_key: str) -> Response:
        """Async handler for license status."""
        with tracer.start_as_current_span("get_license_status") as span:
            span.set_attribute("operation", "get_license_status")

            handler = GetLicenseStatusHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            result = await handler.handle(GetLicenseStatusQuery(license_key=license_key))

            span.set_attribute("license.id", str(result.license.id))
            span.set_status(Status(StatusCode.OK))

            data = dict(vars(result.license))
            data["activations"] = [vars(activation) for activation in result.activations]
            return Response(LicenseStatusResponseSerializer(data).data)


class VerifyAttestationView(APIView):
    """View for verifying a signed attestation."""

    @extend_schema(
        operation_id="verify_attestation",
        summary="Verify Attestation",
        description="Verify a signature returned by a successful validation.",
        tags=["License API"],
        request=VerifyAttestationRequestSerializer,
        responses={
            200: VerifyAttestationResponseSerializer,
            400: {"description": "Invalid or expired attestation"},
        },
    )
    def post(self, request: Request) -> Response:
        """Verify an attestation."""
        serializer = VerifyAttestationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with tracer.start_as_current_span("verify_attestation") as span:
            payload = JWTAttestationSigner().verify(serializer.validated_data["signature"])
            span.set_status(Status(StatusCode.OK))

        return Response(VerifyAttestationResponseSerializer({"valid": True, "payload": payload}).data)
