"""Aggregate data required for the role dashboards and landlord reports.

Summary widgets must never take a page down: every fetch here swallows
``ApiError`` into an empty result and logs it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, TypeVar

from django.utils import timezone

from ..api.client import ApiClient, ApiError
from ..utils.data_helpers import occupancy_rate, parse_date
from .maintenance import MaintenanceFilters, MaintenanceService
from .payment import PaymentFilters, PaymentService
from .property import PropertyFilters, PropertyService
from .tenant import TenantFilters, TenantService
from .unit import UnitService
from .user import UserFilters, UserService

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_LIMIT = 100
RECENT_LIMIT = 5


def swallow(call: Callable[[], T], default: T, label: str) -> T:
    try:
        return call()
    except ApiError as exc:
        logger.warning("Dashboard fetch '%s' failed: %s", label, exc)
        return default


def to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")


def unit_count(prop: dict[str, Any]) -> int:
    units = prop.get("units")
    if isinstance(units, list):
        return len(units)
    return int(prop.get("totalUnits") or prop.get("total_units") or 0)


def is_successful(payment: dict[str, Any]) -> bool:
    return (payment.get("status") or "").lower() == "successful"


def revenue_in_month(payments: Iterable[dict[str, Any]], year: int, month: int) -> Decimal:
    total = Decimal("0")
    for payment in payments:
        paid_on = parse_date(payment.get("paymentDate"))
        if is_successful(payment) and paid_on and paid_on.year == year and paid_on.month == month:
            total += to_decimal(payment.get("amount"))
    return total


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_revenue_series(payments: list[dict[str, Any]], months: int = 6, today: date | None = None) -> list[dict[str, Any]]:
    """Successful revenue for the last ``months`` months, oldest first."""
    today = today or timezone.localdate()
    series = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        series.append(
            {
                "label": date(year, month, 1).strftime("%b %Y"),
                "revenue": revenue_in_month(payments, year, month),
            }
        )
    return series


def growth_rate(current: Decimal, previous: Decimal) -> float:
    if not previous:
        return 0.0
    return round(float((current - previous) / previous * 100), 1)


def sort_by_payment_date(payments: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    def key(payment):
        parsed = parse_date(payment.get("paymentDate"))
        if parsed is None:
            return ""
        return parsed.isoformat()

    return sorted(payments, key=key, reverse=True)


@dataclass(frozen=True)
class LandlordDashboardStats:
    total_properties: int
    total_units: int
    occupied_units: int
    total_tenants: int
    occupancy_rate: float
    monthly_revenue: Decimal
    pending_maintenance: int
    recent_payments: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class LandlordReport:
    total_revenue: Decimal
    monthly_revenue: Decimal
    previous_month_revenue: Decimal
    revenue_growth: float
    occupancy_rate: float
    total_units: int
    occupied_units: int
    pending_maintenance: int
    completed_maintenance: int
    successful_payments: int
    pending_payments: int
    revenue_series: list[dict[str, Any]]


class LandlordDashboardService:
    """Collect properties, tenants, payments and maintenance for one landlord."""

    def __init__(self, client: ApiClient, user: dict[str, Any]):
        self.client = client
        self.user = user or {}

    def properties(self) -> list[dict[str, Any]]:
        service = PropertyService(self.client)
        page = swallow(lambda: service.list(PropertyFilters(limit=SUMMARY_LIMIT)), None, "properties")
        return page.items if page else []

    def tenants(self) -> list[dict[str, Any]]:
        service = TenantService(self.client)
        page = swallow(lambda: service.list(TenantFilters(limit=SUMMARY_LIMIT)), None, "tenants")
        return page.items if page else []

    def payments(self) -> list[dict[str, Any]]:
        service = PaymentService(self.client)
        page = swallow(lambda: service.list(PaymentFilters(limit=SUMMARY_LIMIT)), None, "payments")
        return page.items if page else []

    def maintenance_requests(self) -> list[dict[str, Any]]:
        service = MaintenanceService(self.client)
        page = swallow(lambda: service.list(MaintenanceFilters(limit=SUMMARY_LIMIT)), None, "maintenance")
        return page.items if page else []

    def stats(
        self,
        properties: list[dict[str, Any]],
        tenants: list[dict[str, Any]],
        payments: list[dict[str, Any]],
        maintenance_requests: list[dict[str, Any]],
        today: date | None = None,
    ) -> LandlordDashboardStats:
        today = today or timezone.localdate()
        total_units = sum(unit_count(prop) for prop in properties)
        occupied_units = len(tenants)
        return LandlordDashboardStats(
            total_properties=len(properties),
            total_units=total_units,
            occupied_units=occupied_units,
            total_tenants=len(tenants),
            occupancy_rate=occupancy_rate(occupied_units, total_units),
            monthly_revenue=revenue_in_month(payments, today.year, today.month),
            pending_maintenance=sum(1 for req in maintenance_requests if req.get("status") == "pending"),
            recent_payments=sort_by_payment_date(payments)[:RECENT_LIMIT],
        )

    def build_context(self) -> dict[str, Any]:
        properties = self.properties()
        tenants = self.tenants()
        payments = self.payments()
        maintenance_requests = self.maintenance_requests()
        return {
            "properties": properties,
            "tenants": tenants,
            "payments": payments,
            "maintenance_requests": maintenance_requests,
            "pending_requests": [req for req in maintenance_requests if req.get("status") == "pending"][:RECENT_LIMIT],
            "stats": self.stats(properties, tenants, payments, maintenance_requests),
        }

    def report(self, today: date | None = None) -> LandlordReport:
        today = today or timezone.localdate()
        properties = self.properties()
        tenants = self.tenants()
        payments = self.payments()
        maintenance_requests = self.maintenance_requests()

        previous_year, previous_month = shift_month(today.year, today.month, -1)
        monthly = revenue_in_month(payments, today.year, today.month)
        previous = revenue_in_month(payments, previous_year, previous_month)
        total_units = sum(unit_count(prop) for prop in properties)
        return LandlordReport(
            total_revenue=sum((to_decimal(p.get("amount")) for p in payments if is_successful(p)), Decimal("0")),
            monthly_revenue=monthly,
            previous_month_revenue=previous,
            revenue_growth=growth_rate(monthly, previous),
            occupancy_rate=occupancy_rate(len(tenants), total_units),
            total_units=total_units,
            occupied_units=len(tenants),
            pending_maintenance=sum(1 for req in maintenance_requests if req.get("status") == "pending"),
            completed_maintenance=sum(
                1 for req in maintenance_requests if req.get("status") in {"resolved", "completed"}
            ),
            successful_payments=sum(1 for p in payments if is_successful(p)),
            pending_payments=sum(1 for p in payments if (p.get("status") or "").lower() == "pending"),
            revenue_series=monthly_revenue_series(payments, today=today),
        )


class AdminDashboardService:
    """User statistics and the most recent sign-ups for the admin dashboard."""

    def __init__(self, client: ApiClient):
        self.users = UserService(client)

    def stats(self) -> dict[str, Any]:
        return swallow(self.users.stats, {}, "user stats")

    def recent_users(self) -> list[dict[str, Any]]:
        page = swallow(lambda: self.users.list(UserFilters(limit=RECENT_LIMIT)), None, "recent users")
        return page.items if page else []

    def build_context(self) -> dict[str, Any]:
        return {"stats": self.stats(), "recent_users": self.recent_users()}


class TenantDashboardService:
    """Unit, payment and maintenance summary for the signed-in tenant."""

    def __init__(self, client: ApiClient, user: dict[str, Any]):
        self.client = client
        self.user = user or {}

    def unit(self) -> dict[str, Any] | None:
        unit_id = self.user.get("unitId")
        if not unit_id:
            return None
        service = UnitService(self.client)
        return swallow(lambda: service.get(unit_id), None, "tenant unit")

    def property(self, unit: dict[str, Any] | None) -> dict[str, Any] | None:
        property_id = (unit or {}).get("propertyId") or self.user.get("propertyId")
        if not property_id:
            return None
        service = PropertyService(self.client)
        return swallow(lambda: service.get(property_id), None, "tenant property")

    def payments(self) -> list[dict[str, Any]]:
        service = PaymentService(self.client)
        filters = PaymentFilters(tenant_id=str(self.user.get("id") or ""), limit=SUMMARY_LIMIT)
        page = swallow(lambda: service.list(filters), None, "tenant payments")
        return sort_by_payment_date(page.items) if page else []

    def maintenance_requests(self) -> list[dict[str, Any]]:
        service = MaintenanceService(self.client)
        page = swallow(lambda: service.list(MaintenanceFilters(limit=SUMMARY_LIMIT)), None, "tenant maintenance")
        return page.items if page else []

    def build_context(self) -> dict[str, Any]:
        unit = self.unit()
        payments = self.payments()
        requests = self.maintenance_requests()
        last_payment = next((p for p in payments if is_successful(p)), None)
        return {
            "unit": unit,
            "property": self.property(unit),
            "recent_payments": payments[:RECENT_LIMIT],
            "last_payment": last_payment,
            "maintenance_requests": requests[:RECENT_LIMIT],
            "pending_maintenance": sum(1 for req in requests if req.get("status") == "pending"),
            "monthly_rent": (unit or {}).get("rentAmount"),
        }
