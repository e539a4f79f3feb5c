from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..api.client import Download
from ..utils.data_helpers import normalize_payment
from .base import ApiService, ListFilters, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentFilters(ListFilters):
    tenant_id: str = ""
    unit_id: str = ""
    property_id: str = ""
    status: str = ""
    start_date: str = ""
    end_date: str = ""
    min_amount: str = ""
    max_amount: str = ""

    PARAM_NAMES = {
        "tenant_id": "tenantId",
        "unit_id": "unitId",
        "property_id": "propertyId",
        "start_date": "startDate",
        "end_date": "endDate",
        "min_amount": "minAmount",
        "max_amount": "maxAmount",
    }


@dataclass(frozen=True)
class PaymentInitiation:
    payment: dict[str, Any] | None
    checkout_request_id: str | None
    message: str


class PaymentService(ApiService):
    """Rent payments and M-Pesa STK push against ``/api/payments``."""

    def list(self, filters: PaymentFilters | None = None) -> Page:
        filters = filters or PaymentFilters()
        logger.debug("Fetching payments with filters: %s", filters)
        response = self.client.get("/api/payments", params=filters.to_params(), fallback="Failed to fetch payments")
        return Page.from_data(response.data, "payments", normalize_payment)

    def get(self, payment_id: Any) -> dict[str, Any]:
        response = self.client.get(f"/api/payments/{payment_id}", fallback="Failed to fetch payment")
        return normalize_payment(response.data["payment"])

    def create(self, payload: dict[str, Any]) -> PaymentInitiation:
        logger.debug("Creating payment: amount=%s", payload.get("amount"))
        response = self.client.post("/api/payments", json=payload, fallback="Failed to create payment")
        data = response.data or {}
        return PaymentInitiation(
            payment=normalize_payment(data.get("payment")),
            checkout_request_id=data.get("checkoutRequestId"),
            message=response.message,
        )

    def update(self, payment_id: Any, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        response = self.client.put(f"/api/payments/{payment_id}", json=payload, fallback="Failed to update payment")
        return normalize_payment(response.data["payment"]), response.message

    def stats(
        self,
        *,
        period: str = "",
        year: int | None = None,
        month: int | None = None,
        property_id: Any = None,
        unit_id: Any = None,
    ) -> dict[str, Any]:
        response = self.client.get(
            "/api/payments/stats",
            params={
                "period": period,
                "year": year,
                "month": month,
                "propertyId": property_id,
                "unitId": unit_id,
            },
            fallback="Failed to fetch payment stats",
        )
        return response.data or {}

    def mpesa_status(self, checkout_request_id: str) -> tuple[str | None, dict[str, Any] | None]:
        response = self.client.get(
            f"/api/payments/mpesa/status/{checkout_request_id}",
            fallback="Failed to check M-Pesa status",
        )
        data = response.data or {}
        return data.get("status"), normalize_payment(data.get("payment"))

    def receipt(self, payment_id: Any) -> Download:
        return self.client.download(
            f"/api/payments/{payment_id}/receipt",
            default_filename=f"receipt-{payment_id}.pdf",
            fallback="Failed to download receipt",
        )

    def export(self, filters: PaymentFilters | None = None, fmt: str = "csv") -> Download:
        params = (filters or PaymentFilters()).to_params()
        params.pop("page", None)
        params.pop("limit", None)
        params["format"] = fmt
        return self.client.download(
            "/api/payments/export",
            params=params,
            default_filename=f"payments.{fmt}",
            fallback="Failed to export payments",
        )
