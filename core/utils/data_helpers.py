"""Normalization and display helpers for API records.

API responses and older fixtures disagree on naming (``first_name`` vs
``firstName``). The ``normalize_*`` helpers guarantee the camelCase keys the
templates read while keeping every original key in place.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from django.utils import timezone

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {
    "KES": "KSh",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")

USER_FIELDS = (
    ("firstName", "first_name"),
    ("lastName", "last_name"),
    ("emergencyContactName", "emergency_contact_name"),
    ("emergencyContactPhone", "emergency_contact_phone"),
    ("leaseStartDate", "lease_start_date"),
    ("leaseEndDate", "lease_end_date"),
    ("securityDeposit", "security_deposit"),
    ("unitId", "unit_id"),
    ("propertyId", "property_id"),
    ("landlordId", "landlord_id"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
)

PROPERTY_FIELDS = (
    ("landlordId", "landlord_id"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
)

UNIT_FIELDS = (
    ("propertyId", "property_id"),
    ("rentAmount", "rent_amount"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
)

PAYMENT_FIELDS = (
    ("tenantId", "tenant_id"),
    ("unitId", "unit_id"),
    ("paymentDate", "payment_date"),
    ("mpesaTransactionId", "mpesa_transaction_id"),
    ("receiptUrl", "receipt_url"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
)

MAINTENANCE_FIELDS = (
    ("tenantId", "tenant_id"),
    ("unitId", "unit_id"),
    ("imageUrl", "image_url"),
    ("responseNotes", "response_notes"),
    ("createdAt", "created_at"),
    ("updatedAt", "updated_at"),
)

STATUS_COLORS = {
    "payment": {
        "successful": "green",
        "completed": "green",
        "failed": "red",
        "cancelled": "red",
        "pending": "yellow",
        "processing": "yellow",
    },
    "maintenance": {
        "resolved": "green",
        "completed": "green",
        "pending": "yellow",
        "in_progress": "blue",
        "in progress": "blue",
        "cancelled": "red",
    },
    "unit": {
        "occupied": "green",
        "vacant": "blue",
        "available": "blue",
        "maintenance": "yellow",
        "unavailable": "red",
    },
    "general": {
        "active": "green",
        "success": "green",
        "completed": "green",
        "inactive": "yellow",
        "pending": "yellow",
        "error": "red",
        "failed": "red",
        "cancelled": "red",
    },
}


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def camelize_keys(record: dict[str, Any] | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {to_camel(key): value for key, value in record.items()}


def snakeize_keys(record: dict[str, Any] | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {to_snake(key): value for key, value in record.items()}


def _with_aliases(record: dict[str, Any], pairs) -> dict[str, Any]:
    normalized = dict(record)
    for camel, snake in pairs:
        normalized[camel] = record.get(camel) or record.get(snake)
    return normalized


def normalize_user(user: dict[str, Any] | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return _with_aliases(user, USER_FIELDS)


def normalize_property(prop: dict[str, Any] | None) -> dict[str, Any] | None:
    if prop is None:
        return None
    normalized = _with_aliases(prop, PROPERTY_FIELDS)
    normalized["imageUrls"] = prop.get("imageUrls") or prop.get("image_urls") or []
    return normalized


def normalize_unit(unit: dict[str, Any] | None) -> dict[str, Any] | None:
    if unit is None:
        return None
    normalized = _with_aliases(unit, UNIT_FIELDS)
    normalized["imageUrls"] = unit.get("imageUrls") or unit.get("image_urls") or []
    return normalized


def normalize_payment(payment: dict[str, Any] | None) -> dict[str, Any] | None:
    if payment is None:
        return None
    normalized = _with_aliases(payment, PAYMENT_FIELDS)
    tenant = payment.get("tenant")
    if isinstance(tenant, dict):
        first = tenant.get("firstName") or tenant.get("first_name") or ""
        last = tenant.get("lastName") or tenant.get("last_name") or ""
        normalized["tenantName"] = f"{first} {last}".strip()
    else:
        normalized["tenantName"] = payment.get("tenant_name") or payment.get("tenantName")
    unit = payment.get("unit")
    prop = payment.get("property")
    normalized["unitName"] = (
        (unit.get("name") if isinstance(unit, dict) else None)
        or payment.get("unit_name")
        or payment.get("unitName")
    )
    normalized["propertyName"] = (
        (prop.get("name") if isinstance(prop, dict) else None)
        or payment.get("property_name")
        or payment.get("propertyName")
    )
    return normalized


def normalize_maintenance_request(request: dict[str, Any] | None) -> dict[str, Any] | None:
    if request is None:
        return None
    return _with_aliases(request, MAINTENANCE_FIELDS)


def full_name(user: dict[str, Any] | None) -> str:
    if not user:
        return ""
    first = user.get("firstName") or user.get("first_name") or ""
    last = user.get("lastName") or user.get("last_name") or ""
    return f"{first} {last}".strip() or user.get("email", "")


def format_currency(amount: Any, currency: str = "KES") -> str:
    """Render ``amount`` the way the dashboards show money, e.g. ``KSh 50,000``."""

    prefix = CURRENCY_SYMBOLS.get(currency, currency)
    if amount is None or isinstance(amount, bool):
        return f"{prefix} 0"
    try:
        value = Decimal(str(amount).replace(",", ""))
    except (InvalidOperation, ValueError):
        return f"{prefix} 0"
    if not value.is_finite():
        return f"{prefix} 0"

    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{abs(value):,.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    elif text.endswith("0"):
        text = text[:-1]
    sign = "-" if value < 0 else ""
    return f"{sign}{prefix} {text}"


def parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, (date, datetime)):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Invalid date: %r", value)
        return None


def format_date(value: Any, fmt: str | None = None) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return ""
    if fmt:
        return parsed.strftime(fmt)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def status_color(status: str | None, kind: str = "general") -> str:
    if not status:
        return "gray"
    table = STATUS_COLORS.get(kind, STATUS_COLORS["general"])
    return table.get(str(status).lower(), "gray")


def occupancy_rate(occupied: Any, total: Any) -> float:
    if not total:
        return 0
    return round((occupied / total) * 100, 1)


def time_greeting(now: datetime | None = None) -> dict[str, str]:
    hour = (now or timezone.localtime()).hour
    if hour < 12:
        return {"text": "morning", "icon": "sun"}
    if hour < 18:
        return {"text": "afternoon", "icon": "sunset"}
    return {"text": "evening", "icon": "moon"}
