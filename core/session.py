"""Auth state for the signed-in user, kept in the Django session."""

from __future__ import annotations

import logging
from typing import Any

from .utils.data_helpers import normalize_user

logger = logging.getLogger(__name__)

TOKEN_KEY = "digiplot_token"
USER_KEY = "digiplot_user"
ROLE_KEY = "digiplot_role"

ROLES = ("admin", "landlord", "tenant")

DASHBOARD_URLS = {
    "admin": "admin_dashboard",
    "landlord": "landlord_dashboard",
    "tenant": "tenant_dashboard",
}


def store_auth(request, user: dict[str, Any], token: str) -> None:
    user = normalize_user(user)
    request.session.cycle_key()
    request.session[TOKEN_KEY] = token
    request.session[USER_KEY] = user
    request.session[ROLE_KEY] = user.get("role")
    logger.info("Session started for user %s (%s)", user.get("id"), user.get("role"))


def update_user(request, user: dict[str, Any]) -> None:
    request.session[USER_KEY] = normalize_user(user)


def clear_auth(request) -> None:
    request.session.flush()


def get_token(request) -> str | None:
    return request.session.get(TOKEN_KEY)


def get_user(request) -> dict[str, Any] | None:
    return request.session.get(USER_KEY)


def get_role(request) -> str | None:
    return request.session.get(ROLE_KEY)


def is_authenticated(request) -> bool:
    return bool(get_token(request) and get_user(request) and get_role(request))


def dashboard_url_name(role: str | None) -> str:
    return DASHBOARD_URLS.get(role or "", "login")
