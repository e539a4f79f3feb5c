from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..utils.data_helpers import normalize_user
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantFilters(ListFilters):
    property_id: str = ""
    unit_id: str = ""
    status: str = ""

    PARAM_NAMES = {"property_id": "propertyId", "unit_id": "unitId"}


class TenantService(ApiService):
    """Landlord-side tenant management against ``/api/tenants``."""

    def list(self, filters: TenantFilters | None = None) -> Page:
        filters = filters or TenantFilters()
        logger.debug("Fetching tenants with filters: %s", filters)
        response = self.client.get("/api/tenants", params=filters.to_params(), fallback="Failed to fetch tenants")
        return Page.from_data(response.data, "tenants", normalize_user)

    def get(self, tenant_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/tenants/{tenant_id}", fallback="Failed to fetch tenant")
        return normalize_user(response.data["tenant"])

    def create(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Creating tenant: %s", payload.get("email"))
        response = self.client.post("/api/tenants", json=payload, fallback="Failed to create tenant")
        return normalize_user(response.data["tenant"]), response.message

    def update(self, tenant_id: Any, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        response = self.client.put(f"/api/tenants/{tenant_id}", json=payload, fallback="Failed to update tenant")
        return normalize_user(response.data["tenant"]), response.message

    def assign_unit(self, tenant_id: Any, payload: dict[str, Any]) -> str:
        response = self.client.post(
            f"/api/tenants/{tenant_id}/assign-unit",
            json=payload,
            fallback="Failed to assign unit",
        )
        return response.message

    def remove_unit(self, tenant_id: Any, payload: dict[str, Any] | None = None) -> str:
        response = self.client.post(
            f"/api/tenants/{tenant_id}/remove-unit",
            json=payload or {},
            fallback="Failed to remove unit",
        )
        return response.message

    def upload_documents(self, tenant_id: Any, documents: Iterable[Any]) -> tuple[list[Any], str]:
        files = [("documents", (doc.name, doc, getattr(doc, "content_type", None))) for doc in documents]
        response = self.client.post(
            f"/api/tenants/{tenant_id}/documents",
            files=files,
            fallback="Failed to upload documents",
        )
        return (response.data or {}).get("documents", []), response.message
