from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..utils.data_helpers import normalize_unit
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitFilters(ListFilters):
    property_id: str = ""
    unit_type: str = ""
    status: str = ""
    min_rent: str = ""
    max_rent: str = ""
    bedrooms: int | None = None

    PARAM_NAMES = {
        "property_id": "propertyId",
        "unit_type": "type",
        "min_rent": "minRent",
        "max_rent": "maxRent",
    }
    INT_FIELDS = frozenset({"page", "limit", "bedrooms"})


class UnitService(ApiService):
    """Unit CRUD against ``/api/units``."""

    def list(self, filters: UnitFilters | None = None) -> Page:
        filters = filters or UnitFilters()
        logger.debug("Fetching units with filters: %s", filters)
        response = self.client.get("/api/units", params=filters.to_params(), fallback="Failed to fetch units")
        return Page.from_data(response.data, "units", normalize_unit)

    def list_by_property(self, property_id: Any, *, page: int = 1, limit: int | None = None, status: str = "") -> Page:
        logger.debug("Fetching units for property: %s", property_id)
        response = self.client.get(
            f"/api/units/property/{property_id}",
            params={"page": page, "limit": limit, "status": status},
            fallback="Failed to fetch property units",
        )
        return Page.from_data(response.data, "units", normalize_unit)

    def get(self, unit_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/units/{unit_id}", fallback="Failed to fetch unit")
        return normalize_unit(response.data["unit"])

    def create(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Creating unit: %s", payload.get("unit_number"))
        response = self.client.post("/api/units", json=payload, fallback="Failed to create unit")
        return normalize_unit(response.data["unit"]), response.message

    def update(self, unit_id: Any, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Updating unit: %s", unit_id)
        response = self.client.put(f"/api/units/{unit_id}", json=payload, fallback="Failed to update unit")
        return normalize_unit(response.data["unit"]), response.message

    def delete(self, unit_id: Any) -> str:
        logger.debug("Deleting unit: %s", unit_id)
        return self.client.delete(f"/api/units/{unit_id}", fallback="Failed to delete unit").message

    def stats(self, unit_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/units/{unit_id}/stats", fallback="Failed to fetch unit stats")
        return response.data or {}

    def upload_images(self, unit_id: Any, images: Iterable[Any]) -> tuple[list[Any], str]:
        files = [("images", (image.name, image, getattr(image, "content_type", None))) for image in images]
        response = self.client.post(f"/api/units/{unit_id}/images", files=files, fallback="Failed to upload images")
        return (response.data or {}).get("images", []), response.message
