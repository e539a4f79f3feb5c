from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..utils.data_helpers import normalize_property
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyFilters(ListFilters):
    property_type: str = ""
    city: str = ""

    PARAM_NAMES = {"property_type": "propertyType"}


class PropertyService(ApiService):
    """Landlord property CRUD against ``/api/properties``."""

    def list(self, filters: PropertyFilters | None = None) -> Page:
        filters = filters or PropertyFilters()
        logger.debug("Fetching properties with filters: %s", filters)
        response = self.client.get(
            "/api/properties",
            params=filters.to_params(),
            fallback="Failed to fetch properties",
        )
        page = Page.from_data(response.data, "properties", normalize_property)
        logger.debug("Properties fetched: %d", len(page.items))
        return page

    def get(self, property_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/properties/{property_id}", fallback="Failed to fetch property")
        return normalize_property(response.data["property"])

    def create(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Creating property: %s", payload.get("name"))
        response = self.client.post("/api/properties", json=payload, fallback="Failed to create property")
        return normalize_property(response.data["property"]), response.message

    def update(self, property_id: Any, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Updating property: %s", property_id)
        response = self.client.put(
            f"/api/properties/{property_id}",
            json=payload,
            fallback="Failed to update property",
        )
        return normalize_property(response.data["property"]), response.message

    def delete(self, property_id: Any) -> str:
        logger.debug("Deleting property: %s", property_id)
        response = self.client.delete(f"/api/properties/{property_id}", fallback="Failed to delete property")
        return response.message

    def stats(self, property_id: Any) -> dict[str, Any]:
        response = self.client.get(
            f"/api/properties/{property_id}/stats",
            fallback="Failed to fetch property stats",
        )
        return response.data or {}

    def upload_images(self, property_id: Any, images: Iterable[Any]) -> tuple[list[Any], str]:
        files = [("images", (image.name, image, getattr(image, "content_type", None))) for image in images]
        logger.debug("Uploading %d property images: %s", len(files), property_id)
        response = self.client.post(
            f"/api/properties/{property_id}/images",
            files=files,
            fallback="Failed to upload images",
        )
        return (response.data or {}).get("images", []), response.message
