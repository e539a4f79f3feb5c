import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.generic import TemplateView

from ..api.client import ApiError
from ..decorators import tenant_required
from ..forms import MaintenanceForm, PaymentForm, due_months, rent_month_choices
from ..forms.tenant import OVERDUE_WINDOW, month_start
from ..services.dashboard import SUMMARY_LIMIT, TenantDashboardService, is_successful
from ..services.maintenance import MaintenanceFilters, MaintenanceService
from ..services.payment import PaymentFilters, PaymentService
from ..services.property import PropertyService
from ..services.unit import UnitService
from ..utils.data_helpers import parse_date, time_greeting
from .base import AccountSettingsView, ApiViewMixin, download_response

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_KEY = "digiplot_checkout_request_id"


def paid_months(payments):
    months = set()
    for payment in payments:
        paid_on = parse_date(payment.get("paymentDate"))
        if paid_on and is_successful(payment):
            months.add(f"{paid_on:%Y-%m}")
    return months


class TenantUnitMixin:
    """Look up the signed-in tenant's unit, tolerating tenants without one."""

    def get_unit(self):
        if not hasattr(self, "_unit"):
            unit_id = self.current_user.get("unitId")
            self._unit = (
                self.fetch_optional(UnitService(self.get_client()).get, unit_id) if unit_id else None
            )
        return self._unit


@method_decorator(tenant_required, name="dispatch")
class TenantDashboardView(ApiViewMixin, TemplateView):
    template_name = "tenant/dashboard.html"
    service_class = TenantDashboardService

    def get_service(self) -> TenantDashboardService:
        return self.service_class(self.get_client(), self.current_user)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(self.get_service().build_context())
        context["greeting"] = time_greeting()
        return context


@method_decorator(tenant_required, name="dispatch")
class TenantUnitInfoView(TenantUnitMixin, ApiViewMixin, TemplateView):
    template_name = "tenant/unit.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        unit = self.get_unit()
        property_id = (unit or {}).get("propertyId") or self.current_user.get("propertyId")
        context.update(
            {
                "unit": unit,
                "property": self.fetch_optional(PropertyService(self.get_client()).get, property_id)
                if property_id
                else None,
            }
        )
        return context


@method_decorator(tenant_required, name="dispatch")
class TenantPaymentsView(TenantUnitMixin, ApiViewMixin, TemplateView):
    template_name = "tenant/payments.html"
    service_class = PaymentService

    @property
    def tenant_id(self):
        return str(self.current_user.get("id") or "")

    def get_paid_months(self):
        # Ignores the history filters and page. API errors propagate.
        if not hasattr(self, "_paid_months"):
            window_start = month_start(timezone.localdate(), -OVERDUE_WINDOW)
            filters = PaymentFilters(
                tenant_id=self.tenant_id,
                status="successful",
                start_date=f"{window_start:%Y-%m-%d}",
                limit=SUMMARY_LIMIT,
            )
            self._paid_months = paid_months(self.get_service().list(filters).items)
        return self._paid_months

    def build_form(self, data=None):
        unit = self.get_unit() or {}
        paid = self.get_paid_months()
        return PaymentForm(
            data,
            initial={"months": due_months(paid_months=paid)},
            month_choices=rent_month_choices(paid_months=paid),
            monthly_rent=unit.get("rentAmount") or 0,
        )

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = PaymentFilters.from_query(self.request.GET, tenant_id=self.tenant_id)
        page = self.fetch_page(self.get_service().list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "payments": page.items,
                "unit": self.get_unit(),
                "payment_form": kwargs.get("payment_form") or self.build_form(),
                "pending_checkout": self.request.session.get(CHECKOUT_SESSION_KEY),
            }
        )
        return context

    def post(self, request, *args, **kwargs):
        form = self.build_form(request.POST)
        if not form.is_valid():
            messages.error(request, "Please correct the payment details and try again.")
            return self.render_to_response(self.get_context_data(payment_form=form))
        unit = self.get_unit() or {}
        try:
            result = self.get_service().create(form.to_payload(unit_id=unit.get("id")))
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            messages.error(request, exc.message)
            return self.render_to_response(self.get_context_data(payment_form=form))
        if result.checkout_request_id:
            request.session[CHECKOUT_SESSION_KEY] = result.checkout_request_id
        messages.success(
            request,
            result.message or "Payment initiated. Check your phone to complete the M-Pesa payment.",
        )
        return redirect("tenant_payments")


@method_decorator(tenant_required, name="dispatch")
class TenantPaymentStatusView(ApiViewMixin, View):
    """Ask the API whether the last M-Pesa STK push has completed."""

    service_class = PaymentService

    def get_error_redirect(self):
        return redirect("tenant_payments")

    def get(self, request, checkout_request_id):
        status, _ = self.get_service().mpesa_status(checkout_request_id)
        if status in {"successful", "failed", "cancelled"}:
            request.session.pop(CHECKOUT_SESSION_KEY, None)
        if status == "successful":
            messages.success(request, "Payment received. Thank you!")
        elif status in {"failed", "cancelled"}:
            messages.error(request, "The M-Pesa payment did not go through. Please try again.")
        else:
            messages.info(request, "Your payment is still being processed.")
        return redirect("tenant_payments")


@method_decorator(tenant_required, name="dispatch")
class TenantReceiptView(ApiViewMixin, View):
    service_class = PaymentService

    def get_error_redirect(self):
        return redirect("tenant_payments")

    def get(self, request, payment_id):
        return download_response(self.get_service().receipt(payment_id))


@method_decorator(tenant_required, name="dispatch")
class TenantMaintenanceView(ApiViewMixin, TemplateView):
    template_name = "tenant/maintenance.html"
    service_class = MaintenanceService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = MaintenanceFilters.from_query(self.request.GET)
        page = self.fetch_page(self.get_service().list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "maintenance_requests": page.items,
                "maintenance_form": kwargs.get("maintenance_form") or MaintenanceForm(),
            }
        )
        return context

    def post(self, request, *args, **kwargs):
        form = MaintenanceForm(request.POST, request.FILES)
        if not form.is_valid():
            messages.error(request, "Please correct the highlighted errors and try again.")
            return self.render_to_response(self.get_context_data(maintenance_form=form))
        service = self.get_service()
        try:
            record, message = service.create(form.to_payload(self.current_user))
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            messages.error(request, exc.message)
            return self.render_to_response(self.get_context_data(maintenance_form=form))

        images = form.cleaned_data.get("images") or []
        if images and record and record.get("id"):
            try:
                service.upload_images(record["id"], images)
            except ApiError as exc:
                if exc.is_unauthorized:
                    raise
                logger.warning("Image upload for maintenance request %s failed: %s", record["id"], exc)
                messages.warning(request, "Your request was submitted but the photos could not be uploaded.")
        messages.success(request, message or "Maintenance request submitted successfully.")
        return redirect("tenant_maintenance")


@method_decorator(tenant_required, name="dispatch")
class TenantProfileView(AccountSettingsView):
    template_name = "tenant/profile.html"
    success_url_name = "tenant_profile"
    layout_template = "layouts/tenant.html"
