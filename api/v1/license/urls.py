"""
URL configuration for the client license API.
"""

from django.urls import path

from api.v1.license import views

urlpatterns = [
    path("validate", views.ValidateLicenseView.as_view(), name="validate-license"),
    path("deactivate", views.DeactivateMachineView.as_view(), name="deactivate-machine"),
    path("status/<str:license_key>", views.LicenseStatusView.as_view(), name="license-status"),
    path("verify", views.VerifyAttestationView.as_view(), name="verify-attestation"),
]
