"""Landlord-focused URL patterns."""

from django.urls import path

from ..views import landlord

urlpatterns = [
    path("landlord/", landlord.LandlordDashboardView.as_view(), name="landlord_dashboard"),
    path("landlord/properties/", landlord.LandlordPropertyListView.as_view(), name="landlord_properties"),
    path(
        "landlord/properties/add/",
        landlord.LandlordPropertyCreateView.as_view(),
        name="landlord_property_create",
    ),
    path(
        "landlord/properties/<str:property_id>/edit/",
        landlord.LandlordPropertyUpdateView.as_view(),
        name="landlord_property_edit",
    ),
    path(
        "landlord/properties/<str:property_id>/delete/",
        landlord.LandlordPropertyDeleteView.as_view(),
        name="landlord_property_delete",
    ),
    path(
        "landlord/properties/<str:property_id>/images/",
        landlord.LandlordPropertyImagesView.as_view(),
        name="landlord_property_images",
    ),
    path(
        "landlord/properties/<str:property_id>/units/",
        landlord.LandlordUnitListView.as_view(),
        name="landlord_property_units",
    ),
    path(
        "landlord/properties/<str:property_id>/units/add/",
        landlord.LandlordUnitCreateView.as_view(),
        name="landlord_unit_create",
    ),
    path("landlord/units/", landlord.LandlordUnitListView.as_view(), name="landlord_units"),
    path("landlord/units/<str:unit_id>/", landlord.LandlordUnitDetailView.as_view(), name="landlord_unit_detail"),
    path("landlord/units/<str:unit_id>/edit/", landlord.LandlordUnitUpdateView.as_view(), name="landlord_unit_edit"),
    path(
        "landlord/units/<str:unit_id>/delete/",
        landlord.LandlordUnitDeleteView.as_view(),
        name="landlord_unit_delete",
    ),
    path(
        "landlord/units/<str:unit_id>/images/",
        landlord.LandlordUnitImagesView.as_view(),
        name="landlord_unit_images",
    ),
    path("landlord/tenants/", landlord.LandlordTenantListView.as_view(), name="landlord_tenants"),
    path("landlord/tenants/add/", landlord.LandlordTenantCreateView.as_view(), name="landlord_tenant_create"),
    path(
        "landlord/tenants/<str:tenant_id>/edit/",
        landlord.LandlordTenantUpdateView.as_view(),
        name="landlord_tenant_edit",
    ),
    path(
        "landlord/tenants/<str:tenant_id>/remove-unit/",
        landlord.LandlordTenantRemoveUnitView.as_view(),
        name="landlord_tenant_remove_unit",
    ),
    path("landlord/payments/", landlord.LandlordPaymentListView.as_view(), name="landlord_payments"),
    path(
        "landlord/payments/export/",
        landlord.LandlordPaymentExportView.as_view(),
        name="landlord_payment_export",
    ),
    path(
        "landlord/payments/<str:payment_id>/receipt/",
        landlord.LandlordPaymentReceiptView.as_view(),
        name="landlord_payment_receipt",
    ),
    path("landlord/maintenance/", landlord.LandlordMaintenanceListView.as_view(), name="landlord_maintenance"),
    path(
        "landlord/maintenance/add/",
        landlord.LandlordMaintenanceCreateView.as_view(),
        name="landlord_maintenance_create",
    ),
    path(
        "landlord/maintenance/export/",
        landlord.LandlordMaintenanceExportView.as_view(),
        name="landlord_maintenance_export",
    ),
    path(
        "landlord/maintenance/<str:request_id>/edit/",
        landlord.LandlordMaintenanceUpdateView.as_view(),
        name="landlord_maintenance_edit",
    ),
    path(
        "landlord/maintenance/<str:request_id>/status/",
        landlord.LandlordMaintenanceStatusView.as_view(),
        name="landlord_maintenance_status",
    ),
    path(
        "landlord/maintenance/<str:request_id>/delete/",
        landlord.LandlordMaintenanceDeleteView.as_view(),
        name="landlord_maintenance_delete",
    ),
    path("landlord/reports/", landlord.LandlordReportsView.as_view(), name="landlord_reports"),
    path("landlord/settings/", landlord.LandlordSettingsView.as_view(), name="landlord_settings"),
]
