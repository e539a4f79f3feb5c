from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..api.client import ApiError
from ..utils.data_helpers import normalize_user
from .base import ApiService
from .user import build_user_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: dict[str, Any]
    token: str

    @property
    def role(self) -> str:
        return self.user.get("role", "")


class AuthService(ApiService):
    """Login, registration and account endpoints under ``/api/auth``."""

    def login(self, email: str, password: str, role: str, two_factor_token: str | None = None) -> AuthResult:
        payload = {"email": email.lower(), "password": password}
        if two_factor_token:
            payload["twoFactorToken"] = two_factor_token
        logger.debug("Attempting login for %s as %s (2FA=%s)", email, role, bool(two_factor_token))
        response = self.client.post("/api/auth/login", json=payload, fallback="Login failed")
        user = normalize_user(response.data["user"])
        if user.get("role") != role:
            raise ApiError(
                f"Account role mismatch. You selected {role} but your account is registered as {user.get('role')}."
            )
        logger.info("Login successful for user %s", user.get("id"))
        return AuthResult(user=user, token=response.data["token"])

    def register(self, data: dict[str, Any]) -> AuthResult:
        payload = build_user_payload(data)
        payload.pop("status")
        logger.debug("Attempting registration for %s as %s", payload["email"], payload["role"])
        response = self.client.post("/api/auth/register", json=payload, fallback="Registration failed")
        return AuthResult(user=normalize_user(response.data["user"]), token=response.data["token"])

    def profile(self) -> dict[str, Any]:
        response = self.client.get("/api/auth/profile", fallback="Failed to get profile")
        return normalize_user(response.data["user"])

    def update_profile(self, data: dict[str, Any]) -> tuple[dict[str, Any], str]:
        response = self.client.put("/api/auth/profile", json=data, fallback="Failed to update profile")
        return normalize_user(response.data["user"]), response.message

    def change_password(self, current_password: str, new_password: str) -> str:
        response = self.client.post(
            "/api/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
            fallback="Failed to change password",
        )
        return response.message

    def forgot_password(self, email: str) -> str:
        response = self.client.post(
            "/api/auth/forgot-password",
            json={"email": email.lower()},
            fallback="Failed to send password reset email",
        )
        return response.message

    def reset_password(self, token: str, new_password: str) -> str:
        response = self.client.post(
            "/api/auth/reset-password",
            json={"token": token, "newPassword": new_password},
            fallback="Failed to reset password",
        )
        return response.message

    # Two-factor authentication -----------------------------------------
    def two_factor_setup(self) -> dict[str, Any]:
        return self.client.post("/api/auth/2fa/setup", fallback="Failed to set up 2FA").data or {}

    def two_factor_enable(self, token: str) -> str:
        return self.client.post("/api/auth/2fa/enable", json={"token": token}, fallback="Failed to enable 2FA").message

    def two_factor_disable(self, token: str) -> str:
        return self.client.post("/api/auth/2fa/disable", json={"token": token}, fallback="Failed to disable 2FA").message

    def two_factor_status(self) -> bool:
        data = self.client.get("/api/auth/2fa/status", fallback="Failed to get 2FA status").data or {}
        return bool(data.get("enabled"))
