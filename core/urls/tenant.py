"""Tenant-focused URL patterns."""

from django.urls import path

from ..views import tenant

urlpatterns = [
    path("tenant/", tenant.TenantDashboardView.as_view(), name="tenant_dashboard"),
    path("tenant/unit/", tenant.TenantUnitInfoView.as_view(), name="tenant_unit"),
    path("tenant/payments/", tenant.TenantPaymentsView.as_view(), name="tenant_payments"),
    path(
        "tenant/payments/status/<str:checkout_request_id>/",
        tenant.TenantPaymentStatusView.as_view(),
        name="tenant_payment_status",
    ),
    path(
        "tenant/payments/<str:payment_id>/receipt/",
        tenant.TenantReceiptView.as_view(),
        name="tenant_payment_receipt",
    ),
    path("tenant/maintenance/", tenant.TenantMaintenanceView.as_view(), name="tenant_maintenance"),
    path("tenant/profile/", tenant.TenantProfileView.as_view(), name="tenant_profile"),
]
