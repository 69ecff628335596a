"""
Admin license API views.

These endpoints are used by operators to:
- Issue and list licenses
- Generate the license report
- Suspend, resume, revoke and renew licenses
- Reconcile activation counters
- Read the audit trail of a license

All of them require the X-Admin-Key header (see core.middleware.auth).
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.handlers.reconcile_activations_handler import (
    ReconcileActivationsHandler,
)
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.exceptions import APIError
from api.v1.admin.serializers import (
    AuditEntrySerializer,
    IssuedLicenseSerializer,
    IssueLicenseRequestSerializer,
    LicenseListItemSerializer,
    LicenseReportSerializer,
    ReconcileResponseSerializer,
    RenewLicenseRequestSerializer,
)
from audit.application.handlers.list_audit_entries_handler import ListAuditEntriesHandler
from audit.infrastructure.repositories.django_audit_repository import DjangoAuditRepository
from core.instrumentation import Status, StatusCode, get_tracer
from customers.infrastructure.repositories.django_customer_repository import (
    DjangoCustomerRepository,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.handlers.generate_license_report_handler import (
    GenerateLicenseReportHandler,
)
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    ResumeLicenseHandler,
    RevokeLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_audit_repo = DjangoAuditRepository()
_product_repo = DjangoProductRepository()
_customer_repo = DjangoCustomerRepository()

tracer = get_tracer(__name__)

ADMIN_KEY_PARAMETER = OpenApiParameter(
    name="X-Admin-Key",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Admin API key",
)

LICENSE_KEY_PARAMETER = OpenApiParameter(
    name="license_key",
    type=str,
    location=OpenApiParameter.PATH,
    description="License key",
)


def _license_response(license, status_code=status.HTTP_200_OK) -> Response:
    dto = LicenseDTO.from_entity(license)
    return Response(IssuedLicenseSerializer(vars(dto)).data, status=status_code)


class LicensesView(APIView):
    """View for issuing and listing licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List every license, or the licenses of one customer by email.",
        tags=["Admin API"],
        parameters=[
            ADMIN_KEY_PARAMETER,
            OpenApiParameter(
                name="email",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Customer email address",
            ),
        ],
        responses={
            200: LicenseListItemSerializer(many=True),
            401: {"description": "Invalid admin key"},
        },
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("operation", "list_licenses")

            email = request.query_params.get("email") or None
            span.set_attribute("filtered_by_email", email is not None)

            handler = ListLicensesHandler(
                license_repository=_license_repo,
                customer_repository=_customer_repo,
                product_repository=_product_repo,
            )
            items = await handler.handle(ListLicensesQuery(customer_email=email))

            span.set_attribute("licenses.count", len(items))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseListItemSerializer(items, many=True).data)

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Issue a license for a customer and product. Activation limit, "
            "validity and features default to the product's settings."
        ),
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssuedLicenseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid admin key"},
            404: {"description": "Product or customer not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")

            serializer = IssueLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            data = serializer.validated_data
            span.set_attribute("product.id", str(data["product_id"]))

            handler = IssueLicenseHandler(
                license_repository=_license_repo,
                product_repository=_product_repo,
                customer_repository=_customer_repo,
            )
            license = await handler.handle(
                IssueLicenseCommand(
                    product_id=data["product_id"],
                    customer_id=data["customer_id"],
                    expires_at=data.get("expires_at"),
                    max_activations=data.get("max_activations"),
                    features=data.get("features"),
                    metadata=data.get("metadata"),
                    perpetual=data.get("perpetual", False),
                )
            )

            span.set_attribute("license.id", str(license.id))
            span.set_status(Status(StatusCode.OK))
            return _license_response(license, status.HTTP_201_CREATED)


class _LifecycleView(APIView):
    """Shared POST handling for status transitions."""

    operation = ""
    handler_class = None
    command_class = None

    def post(self, request: Request, license_key: str) -> Response:
        return async_to_sync(self._handle)(license_key)

    async def _handle(self, license_key: str) -> Response:
        with tracer.start_as_current_span(f"{self.operation}_license") as span:
            span.set_attribute("operation", f"{self.operation}_license")
            handler = self.handler_class(license_repository=_license_repo)
            license = await handler.handle(self.command_class(license_key=license_key))
            span.set_attribute("license.status", license.status.value)
            span.set_status(Status(StatusCode.OK))
            return _license_response(license)


_lifecycle_responses = {
    200: IssuedLicenseSerializer,
    401: {"description": "Invalid admin key"},
    404: {"description": "License not found"},
    409: {"description": "Transition not allowed from the current status"},
}


class SuspendLicenseView(_LifecycleView):
    """View for suspending a license."""

    operation = "suspend"
    handler_class = SuspendLicenseHandler
    command_class = SuspendLicenseCommand

    @extend_schema(
        operation_id="suspend_license",
        summary="Suspend License",
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER, LICENSE_KEY_PARAMETER],
        request=None,
        responses=_lifecycle_responses,
    )
    def post(self, request: Request, license_key: str) -> Response:
        return super().post(request, license_key)


class ResumeLicenseView(_LifecycleView):
    """View for resuming a suspended license."""

    operation = "resume"
    handler_class = ResumeLicenseHandler
    command_class = ResumeLicenseCommand

    @extend_schema(
        operation_id="resume_license",
        summary="Resume License",
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER, LICENSE_KEY_PARAMETER],
        request=None,
        responses=_lifecycle_responses,
    )
    def post(self, request: Request, license_key: str) -> Response:
        return super().post(request, license_key)


class RevokeLicenseView(_LifecycleView):
    """View for revoking a license."""

    operation = "revoke"
    handler_class = RevokeLicenseHandler
    command_class = RevokeLicenseCommand

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description="Revocation is permanent.",
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER, LICENSE_KEY_PARAMETER],
        request=None,
        responses=_lifecycle_responses,
    )
    def post(self, request: Request, license_key: str) -> Response:
        return super().post(request, license_key)


class RenewLicenseView(APIView):
    """View for renewing a license."""

    @extend_schema(
        operation_id="renew_license",
        summary="Renew License",
        description="Set a new future expiry. An expired license becomes active again.",
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER, LICENSE_KEY_PARAMETER],
        request=RenewLicenseRequestSerializer,
        responses={**_lifecycle_responses, 400: {"description": "Expiry not in the future"}},
    )
    def post(self, request: Request, license_key: str) -> Response:
        """Renew a license."""
        serializer = RenewLicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return async_to_sync(self._handle_renew)(license_key, serializer.validated_data["expires_at"])

    async def _handle_renew(self, license_key: str, expires_at) -> Response:
        with tracer.start_as_current_span("renew_license") as span:
            span.set_attribute("operation", "renew_license")
            handler = RenewLicenseHandler(license_repository=_license_repo)
            license = await handler.handle(
                RenewLicenseCommand(license_key=license_key, expiration_date=expires_at)
            )
            span.set_status(Status(StatusCode.OK))
            return _license_response(license)


class ReconcileActivationsView(APIView):
    """View for reconciling a license's activation counter."""

    @extend_schema(
        operation_id="reconcile_activations",
        summary="Reconcile Activation Counter",
        description="Recount activation rows and correct the license counter if it drifted.",
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER, LICENSE_KEY_PARAMETER],
        request=None,
        responses={200: ReconcileResponseSerializer, 404: {"description": "License not found"}},
    )
    def post(self, request: Request, license_key: str) -> Response:
        """Reconcile activation counter."""
        handler = ReconcileActivationsHandler(
            license_repository=_license_repo,
            activation_repository=_activation_repo,
        )
        with tracer.start_as_current_span("reconcile_activations") as span:
            result = async_to_sync(handler.handle)(license_key)
            span.set_attribute("reconcile.changed", result.changed)

        return Response(
            ReconcileResponseSerializer(
                {
                    "license_key": result.license_key,
                    "previous": result.previous,
                    "actual": result.actual,
                    "changed": result.changed,
                }
            ).data
        )


class LicenseAuditView(APIView):
    """View for reading the audit trail of a license."""

    @extend_schema(
        operation_id="list_license_audit",
        summary="License Audit Trail",
        description="Audit entries for a license, newest first.",
        tags=["Admin API"],
        parameters=[
            ADMIN_KEY_PARAMETER,
            LICENSE_KEY_PARAMETER,
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Maximum number of entries (default 100, max 1000)",
            ),
        ],
        responses={200: AuditEntrySerializer(many=True), 404: {"description": "License not found"}},
    )
    def get(self, request: Request, license_key: str) -> Response:
        """List audit entries."""
        try:
            limit = int(request.query_params.get("limit", 100))
        except ValueError as e:
            raise APIError(detail="limit must be an integer", code="VALIDATION_ERROR") from e

        handler = ListAuditEntriesHandler(
            license_repository=_license_repo,
            audit_repository=_audit_repo,
        )
        entries = async_to_sync(handler.handle)(license_key, limit)
        return Response(AuditEntrySerializer([vars(entry) for entry in entries], many=True).data)


class LicenseReportView(APIView):
    """View for the license report."""

    @extend_schema(
        operation_id="license_report",
        summary="License Report",
        description=(
            "Totals across all licenses (active, expired, customers, activations) "
            "and per-product counts."
        ),
        tags=["Admin API"],
        parameters=[ADMIN_KEY_PARAMETER],
        responses={200: LicenseReportSerializer, 401: {"description": "Invalid admin key"}},
    )
    def get(self, request: Request) -> Response:
        """Generate the license report."""
        handler = GenerateLicenseReportHandler(
            license_repository=_license_repo,
            product_repository=_product_repo,
        )
        with tracer.start_as_current_span("license_report") as span:
            report = async_to_sync(handler.handle)()
            span.set_attribute("report.total_licenses", report.stats.total_licenses)

        return Response(LicenseReportSerializer(report).data)
