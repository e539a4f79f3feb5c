"""HTTP client for the DigiPlot backend API.

Every backend response is wrapped in a ``{success, message, data}`` envelope.
``ApiClient`` unwraps it and turns any failure (transport error, non-2xx
status, ``success: false``) into an ``ApiError`` carrying a message that can
be shown to the user as-is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    """Raised when the backend rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self) -> str:
        return self.message

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class TwoFactorRequired(ApiError):
    """Login needs a two-factor token before the API issues a session."""


@dataclass(frozen=True)
class ApiResponse:
    message: str
    data: Any
    status_code: int


@dataclass(frozen=True)
class Download:
    content: bytes
    filename: str
    content_type: str


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop empty filters so only meaningful values reach the query string."""

    if not params:
        return {}
    return {key: value for key, value in params.items() if value}


def filename_from_disposition(header: str | None, default: str) -> str:
    if not header or "filename=" not in header:
        return default
    name = header.split("filename=", 1)[1].split(";", 1)[0].strip().strip('"')
    return name or default


class ApiClient:
    """Thin wrapper around ``requests.Session`` bound to one API token."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        config = settings.DIGIPLOT
        self.base_url = (base_url or config["API_BASE_URL"]).rstrip("/")
        self.timeout = timeout or config["API_TIMEOUT"]
        self.token = token
        self.session = session or requests.Session()

    @classmethod
    def for_request(cls, request) -> "ApiClient":
        from ..session import get_token

        return cls(token=get_token(request))

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # Core request ------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: Any = None,
        files: Any = None,
        fallback: str = DEFAULT_ERROR_MESSAGE,
    ) -> ApiResponse:
        query = clean_params(params)
        logger.debug("API %s %s params=%s", method, path, query)
        try:
            response = self.session.request(
                method,
                self.url(path),
                params=query or None,
                json=json,
                data=data,
                files=files,
                headers=self.headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiError(fallback) from exc

        payload = self._decode(response)
        if not response.ok:
            message = payload.get("message") or fallback
            logger.warning("API %s %s returned %s: %s", method, path, response.status_code, message)
            if payload.get("requires2FA"):
                raise TwoFactorRequired(
                    payload.get("message") or "Two-factor authentication required",
                    response.status_code,
                    payload,
                )
            raise ApiError(message, response.status_code, payload)

        if payload.get("success") is False:
            message = payload.get("message") or fallback
            logger.warning("API %s %s unsuccessful: %s", method, path, message)
            raise ApiError(message, response.status_code, payload)

        data_value = payload["data"] if "data" in payload else payload.get("_raw", payload)
        return ApiResponse(
            message=payload.get("message") or "",
            data=data_value,
            status_code=response.status_code,
        )

    def _decode(self, response: requests.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        if isinstance(body, dict):
            return body
        return {"_raw": body}

    def get(self, path: str, **kwargs) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> ApiResponse:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> ApiResponse:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> ApiResponse:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> ApiResponse:
        return self.request("DELETE", path, **kwargs)

    # Binary downloads --------------------------------------------------
    def download(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        default_filename: str = "download",
        fallback: str = DEFAULT_ERROR_MESSAGE,
    ) -> Download:
        query = clean_params(params)
        logger.debug("API download %s params=%s", path, query)
        try:
            response = self.session.get(
                self.url(path),
                params=query or None,
                headers=self.headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API download %s failed: %s", path, exc)
            raise ApiError(fallback) from exc

        if not response.ok:
            message = self._decode(response).get("message") or fallback
            logger.warning("API download %s returned %s: %s", path, response.status_code, message)
            raise ApiError(message, response.status_code)

        return Download(
            content=response.content,
            filename=filename_from_disposition(response.headers.get("Content-Disposition"), default_filename),
            content_type=response.headers.get("Content-Type", "application/octet-stream"),
        )
