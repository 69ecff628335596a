"""
URL configuration for the admin license API.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("licenses/", views.LicensesView.as_view(), name="licenses"),
    path(
        "licenses/<str:license_key>/suspend",
        views.SuspendLicenseView.as_view(),
        name="suspend-license",
    ),
    path(
        "licenses/<str:license_key>/resume",
        views.ResumeLicenseView.as_view(),
        name="resume-license",
    ),
    path(
        "licenses/<str:license_key>/revoke",
        views.RevokeLicenseView.as_view(),
        name="revoke-license",
    ),
    path(
        "licenses/<str:license_key>/renew",
        views.RenewLicenseView.as_view(),
        name="renew-license",
    ),
    path(
        "licenses/<str:license_key>/reconcile",
        views.ReconcileActivationsView.as_view(),
        name="reconcile-activations",
    ),
    path(
        "licenses/<str:license_key>/audit",
        views.LicenseAuditView.as_view(),
        name="license-audit",
    ),
    path("reports/", views.LicenseReportView.as_view(), name="license-report"),
]
