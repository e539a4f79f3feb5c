from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from ..api.client import Download
from ..utils.data_helpers import normalize_user
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserFilters(ListFilters):
    role: str = ""
    status: str = ""


def build_user_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Shape admin form data into the payload ``POST /api/users`` expects."""
    return {
        "firstName": data.get("firstName", ""),
        "lastName": data.get("lastName", ""),
        "email": (data.get("email") or "").lower(),
        "password": data.get("password", ""),
        "role": data.get("role"),
        "phone": data.get("phone") or "",
        "emergencyContactName": data.get("emergencyContactName") or "",
        "emergencyContactPhone": data.get("emergencyContactPhone") or "",
        "status": data.get("status") or "active",
    }


class UserService(ApiService):
    """Admin user management against ``/api/users``."""

    def list(self, filters: UserFilters | None = None) -> Page:
        filters = filters or UserFilters()
        logger.debug("Fetching users: %s", filters)
        response = self.client.get("/api/users", params=filters.to_params(), fallback="Failed to fetch users")
        page = Page.from_data(response.data, "users", normalize_user)
        logger.debug("Users fetched: count=%d total=%d", len(page.items), page.total)
        return page

    def by_role(self, role: str) -> Page:
        return self.list(UserFilters(role=role))

    def search(self, query: str, filters: UserFilters | None = None) -> Page:
        return self.list(replace(filters or UserFilters(), search=query))

    def paginated(self, page: int = 1, limit: int = 10, filters: UserFilters | None = None) -> Page:
        return self.list(replace(filters or UserFilters(), page=page, limit=limit))

    def stats(self) -> dict[str, Any]:
        response = self.client.get("/api/users/stats", fallback="Failed to fetch user statistics")
        return response.data or {}

    def get(self, user_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/users/{user_id}", fallback="Failed to fetch user")
        return normalize_user(response.data["user"])

    def create(self, data: dict[str, Any]) -> tuple[dict[str, Any], str]:
        payload = build_user_payload(data)
        logger.debug("Creating user: email=%s role=%s", payload["email"], payload["role"])
        response = self.client.post("/api/users", json=payload, fallback="Failed to create user")
        return normalize_user(response.data["user"]), response.message

    def update(self, user_id: Any, data: dict[str, Any]) -> tuple[dict[str, Any], str]:
        logger.debug("Updating user %s: %s", user_id, sorted(data))
        response = self.client.put(f"/api/users/{user_id}", json=data, fallback="Failed to update user")
        return normalize_user(response.data["user"]), response.message

    def delete(self, user_id: Any) -> str:
        logger.debug("Deleting user: %s", user_id)
        return self.client.delete(f"/api/users/{user_id}", fallback="Failed to delete user").message

    def reactivate(self, user_id: Any) -> tuple[dict[str, Any], str]:
        response = self.client.post(f"/api/users/{user_id}/reactivate", fallback="Failed to reactivate user")
        return normalize_user((response.data or {}).get("user")), response.message

    def reset_password(self, user_id: Any) -> tuple[str | None, str]:
        """Reset a user's password; returns the generated password when the API sends one."""
        response = self.client.post(
            f"/api/users/{user_id}/reset-password",
            fallback="Failed to reset user password",
        )
        return (response.data or {}).get("newPassword"), response.message

    def toggle_status(self, user_id: Any) -> tuple[dict[str, Any] | None, str]:
        response = self.client.post(
            f"/api/users/{user_id}/toggle-status",
            fallback="Failed to update user status",
        )
        return normalize_user((response.data or {}).get("user")), response.message

    def activity(self, user_id: Any, limit: int | None = None) -> list[dict[str, Any]]:
        response = self.client.get(
            f"/api/users/{user_id}/activity",
            params={"limit": limit},
            fallback="Failed to fetch user activity",
        )
        data = response.data or {}
        if isinstance(data, list):
            return data
        return data.get("activities") or data.get("activity") or []

    def export(self, filters: UserFilters | None = None, fmt: str = "csv") -> Download:
        params = (filters or UserFilters()).to_params()
        params.pop("page", None)
        params.pop("limit", None)
        params["format"] = fmt
        return self.client.download(
            "/api/users/export",
            params=params,
            default_filename=f"users.{fmt}",
            fallback="Failed to export users",
        )
