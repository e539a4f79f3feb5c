from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..api.client import Download
from ..utils.data_helpers import normalize_maintenance_request
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)

STATUS_CHOICES = (
    ("pending", "Pending"),
    ("in_progress", "In Progress"),
    ("resolved", "Resolved"),
    ("cancelled", "Cancelled"),
)
PRIORITY_CHOICES = (
    ("low", "Low Priority"),
    ("medium", "Medium Priority"),
    ("high", "High Priority"),
    ("urgent", "Urgent"),
)


@dataclass(frozen=True)
class MaintenanceFilters(ListFilters):
    status: str = ""
    priority: str = ""
    category: str = ""
    property_id: str = ""
    unit_id: str = ""

    PARAM_NAMES = {"property_id": "propertyId", "unit_id": "unitId"}


def _requests_page(data: Any) -> Page:
    key = "maintenanceRequests" if isinstance(data, dict) and "maintenanceRequests" in data else "requests"
    return Page.from_data(data, key, normalize_maintenance_request)


def _request_record(data: Any) -> dict[str, Any] | None:
    if isinstance(data, dict):
        record = data.get("maintenanceRequest") or data.get("request") or data
        return normalize_maintenance_request(record)
    return None


class MaintenanceService(ApiService):
    """Maintenance request tracking against ``/api/maintenance``."""

    def list(self, filters: MaintenanceFilters | None = None) -> Page:
        filters = filters or MaintenanceFilters()
        logger.debug("Fetching maintenance requests with filters: %s", filters)
        response = self.client.get(
            "/api/maintenance",
            params=filters.to_params(),
            fallback="Failed to fetch maintenance requests",
        )
        return _requests_page(response.data)

    def list_by_property(self, property_id: Any) -> Page:
        response = self.client.get(
            f"/api/maintenance/property/{property_id}",
            fallback="Failed to fetch maintenance requests",
        )
        return _requests_page(response.data)

    def list_by_unit(self, unit_id: Any) -> Page:
        response = self.client.get(
            f"/api/maintenance/unit/{unit_id}",
            fallback="Failed to fetch maintenance requests",
        )
        return _requests_page(response.data)

    def get(self, request_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/maintenance/{request_id}", fallback="Failed to fetch maintenance request")
        return _request_record(response.data)

    def create(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Creating maintenance request: %s", payload.get("title"))
        response = self.client.post("/api/maintenance", json=payload, fallback="Failed to create maintenance request")
        return _request_record(response.data), response.message

    def update(self, request_id: Any, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        response = self.client.put(
            f"/api/maintenance/{request_id}",
            json=payload,
            fallback="Failed to update maintenance request",
        )
        return _request_record(response.data), response.message

    def delete(self, request_id: Any) -> str:
        response = self.client.delete(
            f"/api/maintenance/{request_id}",
            fallback="Failed to delete maintenance request",
        )
        return response.message or "Maintenance request deleted successfully"

    def update_status(self, request_id: Any, status: str, response_notes: str = "") -> dict[str, Any]:
        if status not in dict(STATUS_CHOICES):
            raise ValueError(f"Unknown maintenance status: {status}")
        payload = {"status": status}
        if response_notes:
            payload["responseNotes"] = response_notes
        logger.debug("Updating maintenance %s status to %s", request_id, status)
        response = self.client.patch(
            f"/api/maintenance/{request_id}/status",
            json=payload,
            fallback="Failed to update maintenance status",
        )
        return _request_record(response.data)

    def assign(self, request_id: Any, technician_id: Any) -> dict[str, Any]:
        response = self.client.patch(
            f"/api/maintenance/{request_id}/assign",
            json={"technicianId": technician_id},
            fallback="Failed to assign maintenance request",
        )
        return _request_record(response.data)

    def upload_images(self, request_id: Any, images: Iterable[Any]) -> tuple[list[Any], str]:
        files = [("images", (image.name, image, getattr(image, "content_type", None))) for image in images]
        response = self.client.post(
            f"/api/maintenance/{request_id}/images",
            files=files,
            fallback="Failed to upload images",
        )
        return (response.data or {}).get("images", []), response.message

    def stats(self, property_id: Any = None) -> dict[str, Any]:
        response = self.client.get(
            "/api/maintenance/stats",
            params={"propertyId": property_id},
            fallback="Failed to fetch maintenance stats",
        )
        return response.data or {}

    def export(self, filters: MaintenanceFilters | None = None, fmt: str = "csv") -> Download:
        params = (filters or MaintenanceFilters()).to_params()
        params.pop("page", None)
        params.pop("limit", None)
        params["format"] = fmt
        return self.client.download(
            "/api/maintenance/export",
            params=params,
            default_filename=f"maintenance.{fmt}",
            fallback="Failed to export maintenance requests",
        )
