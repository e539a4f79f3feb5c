"""Aggregate URL patterns for the core application."""

from . import admin, api, landlord, public, tenant

urlpatterns = [
    *public.urlpatterns,
    *admin.urlpatterns,
    *landlord.urlpatterns,
    *tenant.urlpatterns,
    *api.urlpatterns,
]
