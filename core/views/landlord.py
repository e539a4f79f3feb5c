import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.utils.decorators import method_decorator
from django.views import View
from django.views.generic import FormView, TemplateView

from ..api.client import ApiError
from ..decorators import landlord_required
from ..forms import (
    LANDLORD_CATEGORY_CHOICES,
    PROPERTY_TYPE_CHOICES,
    UNIT_STATUS_CHOICES,
    UNIT_TYPE_CHOICES,
    ImageUploadForm,
    LandlordMaintenanceForm,
    PropertyForm,
    TenantForm,
    UnitForm,
)
from ..services.dashboard import LandlordDashboardService
from ..services.maintenance import PRIORITY_CHOICES, STATUS_CHOICES, MaintenanceFilters, MaintenanceService
from ..services.payment import PaymentFilters, PaymentService
from ..services.property import PropertyFilters, PropertyService
from ..services.tenant import TenantFilters, TenantService
from ..services.unit import UnitFilters, UnitService
from ..utils.data_helpers import time_greeting
from .base import AccountSettingsView, ApiViewMixin, download_response, flash_form_errors

logger = logging.getLogger(__name__)

CHOICE_LIMIT = 100


class LandlordFormView(ApiViewMixin, FormView):
    """Form page whose submission is sent to the API; API errors land on the form."""

    success_message = "Saved successfully."

    def submit(self, form):
        raise NotImplementedError

    def form_valid(self, form):
        try:
            message = self.submit(form)
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            form.add_error(None, exc.message)
            return self.form_invalid(form)
        messages.success(self.request, message or self.success_message)
        return redirect(self.get_success_url())

    def form_invalid(self, form):
        messages.error(self.request, "Please review the errors below.")
        return super().form_invalid(form)


class LandlordActionView(ApiViewMixin, View):
    """POST-only action that reports back through flash messages."""

    http_method_names = ["post"]
    redirect_url_name = "landlord_dashboard"

    def get_redirect(self):
        return redirect(self.redirect_url_name)

    def get_error_redirect(self):
        return self.get_redirect()


@method_decorator(landlord_required, name="dispatch")
class LandlordDashboardView(ApiViewMixin, TemplateView):
    template_name = "landlord/dashboard.html"
    service_class = LandlordDashboardService

    def get_service(self) -> LandlordDashboardService:
        return self.service_class(self.get_client(), self.current_user)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(self.get_service().build_context())
        context["greeting"] = time_greeting()
        return context


@method_decorator(landlord_required, name="dispatch")
class LandlordReportsView(ApiViewMixin, TemplateView):
    template_name = "landlord/reports.html"
    service_class = LandlordDashboardService

    def get_service(self) -> LandlordDashboardService:
        return self.service_class(self.get_client(), self.current_user)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        report = self.get_service().report()
        peak = max((point["revenue"] for point in report.revenue_series), default=0) or 1
        context.update(
            {
                "report": report,
                "revenue_series": [
                    {**point, "percent": round(float(point["revenue"]) / float(peak) * 100)}
                    for point in report.revenue_series
                ],
            }
        )
        return context


# Properties ------------------------------------------------------------


@method_decorator(landlord_required, name="dispatch")
class LandlordPropertyListView(ApiViewMixin, TemplateView):
    template_name = "landlord/properties.html"
    service_class = PropertyService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = PropertyFilters.from_query(self.request.GET)
        page = self.fetch_page(self.get_service().list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "properties": page.items,
                "property_type_choices": PROPERTY_TYPE_CHOICES,
                "image_form": ImageUploadForm(),
            }
        )
        return context


@method_decorator(landlord_required, name="dispatch")
class LandlordPropertyCreateView(LandlordFormView):
    template_name = "landlord/property_form.html"
    form_class = PropertyForm
    service_class = PropertyService
    success_url = reverse_lazy("landlord_properties")
    success_message = "Property created successfully."

    def submit(self, form):
        _, message = self.get_service().create(form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordPropertyUpdateView(LandlordFormView):
    template_name = "landlord/property_form.html"
    form_class = PropertyForm
    service_class = PropertyService
    success_url = reverse_lazy("landlord_properties")
    success_message = "Property updated successfully."

    def get_error_redirect(self):
        return redirect("landlord_properties")

    def get_property(self):
        if not hasattr(self, "_property"):
            self._property = self.get_service().get(self.kwargs["property_id"])
        return self._property

    def get_initial(self):
        return PropertyForm.initial_from_property(self.get_property())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["property"] = self.get_property()
        return context

    def submit(self, form):
        _, message = self.get_service().update(self.kwargs["property_id"], form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordPropertyDeleteView(LandlordActionView):
    service_class = PropertyService
    redirect_url_name = "landlord_properties"

    def post(self, request, property_id):
        message = self.get_service().delete(property_id)
        messages.success(request, message or "Property deleted successfully.")
        return self.get_redirect()


@method_decorator(landlord_required, name="dispatch")
class LandlordPropertyImagesView(LandlordActionView):
    service_class = PropertyService
    redirect_url_name = "landlord_properties"

    def post(self, request, property_id):
        form = ImageUploadForm(request.POST, request.FILES)
        if not form.is_valid():
            flash_form_errors(request, form)
            return self.get_redirect()
        _, message = self.get_service().upload_images(property_id, form.cleaned_data["images"])
        messages.success(request, message or "Images uploaded successfully.")
        return self.get_redirect()


# Units -----------------------------------------------------------------


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitListView(ApiViewMixin, TemplateView):
    template_name = "landlord/units.html"
    service_class = UnitService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.get_service()
        property_id = self.kwargs.get("property_id")
        filters = UnitFilters.from_query(self.request.GET)
        if property_id:
            page = self.fetch_page(
                service.list_by_property,
                property_id,
                page=filters.page,
                limit=filters.limit,
                status=filters.status,
            )
            context["property"] = self.fetch_optional(PropertyService(self.get_client()).get, property_id)
        else:
            page = self.fetch_page(service.list, filters)
        properties = self.fetch_page(PropertyService(self.get_client()).list, PropertyFilters(limit=CHOICE_LIMIT))
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "units": page.items,
                "property_id": property_id,
                "properties": properties.items,
                "unit_type_choices": UNIT_TYPE_CHOICES,
                "unit_status_choices": UNIT_STATUS_CHOICES,
                "image_form": ImageUploadForm(),
            }
        )
        return context


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitCreateView(LandlordFormView):
    template_name = "landlord/unit_form.html"
    form_class = UnitForm
    service_class = UnitService
    success_message = "Unit created successfully."

    def get_success_url(self):
        return reverse("landlord_property_units", kwargs={"property_id": self.kwargs["property_id"]})

    def get_error_redirect(self):
        return redirect("landlord_units")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["property"] = self.fetch_optional(
            PropertyService(self.get_client()).get, self.kwargs["property_id"]
        )
        return context

    def submit(self, form):
        _, message = self.get_service().create(form.to_payload(property_id=self.kwargs["property_id"]))
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitUpdateView(LandlordFormView):
    template_name = "landlord/unit_form.html"
    form_class = UnitForm
    service_class = UnitService
    success_message = "Unit updated successfully."

    def get_unit(self):
        if not hasattr(self, "_unit"):
            self._unit = self.get_service().get(self.kwargs["unit_id"])
        return self._unit

    def get_success_url(self):
        return reverse("landlord_unit_detail", kwargs={"unit_id": self.kwargs["unit_id"]})

    def get_error_redirect(self):
        return redirect("landlord_units")

    def get_initial(self):
        return UnitForm.initial_from_unit(self.get_unit())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["unit"] = self.get_unit()
        return context

    def submit(self, form):
        unit = self.get_unit()
        _, message = self.get_service().update(
            self.kwargs["unit_id"],
            form.to_payload(property_id=unit.get("propertyId")),
        )
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitDetailView(ApiViewMixin, TemplateView):
    template_name = "landlord/unit_detail.html"
    service_class = UnitService

    def get_error_redirect(self):
        return redirect("landlord_units")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        unit_id = self.kwargs["unit_id"]
        service = self.get_service()
        unit = service.get(unit_id)
        client = self.get_client()
        maintenance = self.fetch_optional(MaintenanceService(client).list_by_unit, unit_id)
        tenants = self.fetch_optional(TenantService(client).list, TenantFilters(unit_id=str(unit_id)))
        context.update(
            {
                "unit": unit,
                "property": self.fetch_optional(PropertyService(client).get, unit.get("propertyId"))
                if unit.get("propertyId")
                else None,
                "unit_stats": self.fetch_optional(service.stats, unit_id, default={}),
                "maintenance_requests": maintenance.items if maintenance else [],
                "tenants": tenants.items if tenants else [],
                "image_form": ImageUploadForm(),
            }
        )
        return context


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitDeleteView(LandlordActionView):
    service_class = UnitService
    redirect_url_name = "landlord_units"

    def post(self, request, unit_id):
        message = self.get_service().delete(unit_id)
        messages.success(request, message or "Unit deleted successfully.")
        return self.get_redirect()


@method_decorator(landlord_required, name="dispatch")
class LandlordUnitImagesView(LandlordActionView):
    service_class = UnitService

    def get_redirect(self):
        return redirect("landlord_unit_detail", unit_id=self.kwargs["unit_id"])

    def post(self, request, unit_id):
        form = ImageUploadForm(request.POST, request.FILES)
        if not form.is_valid():
            flash_form_errors(request, form)
            return self.get_redirect()
        _, message = self.get_service().upload_images(unit_id, form.cleaned_data["images"])
        messages.success(request, message or "Images uploaded successfully.")
        return self.get_redirect()


# Tenants ---------------------------------------------------------------


@method_decorator(landlord_required, name="dispatch")
class LandlordTenantListView(ApiViewMixin, TemplateView):
    template_name = "landlord/tenants.html"
    service_class = TenantService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = TenantFilters.from_query(self.request.GET)
        page = self.fetch_page(self.get_service().list, filters)
        context.update(self.paginated_context(page, filters))
        context["tenants"] = page.items
        return context


class TenantFormMixin:
    template_name = "landlord/tenant_form.html"
    form_class = TenantForm
    service_class = TenantService
    success_url = reverse_lazy("landlord_tenants")

    def get_error_redirect(self):
        return redirect("landlord_tenants")

    def unit_choices(self):
        units = self.fetch_page(
            UnitService(self.get_client()).list,
            UnitFilters(status="available", limit=CHOICE_LIMIT),
        )
        return list(units.items)

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["units"] = self.unit_choices()
        return kwargs


@method_decorator(landlord_required, name="dispatch")
class LandlordTenantCreateView(TenantFormMixin, LandlordFormView):
    success_message = "Tenant added successfully."

    def get_initial(self):
        initial = super().get_initial()
        if self.request.GET.get("unit"):
            initial["unit_id"] = self.request.GET["unit"]
        return initial

    def submit(self, form):
        _, message = self.get_service().create(form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordTenantUpdateView(TenantFormMixin, LandlordFormView):
    success_message = "Tenant updated successfully."

    def get_tenant(self):
        if not hasattr(self, "_tenant"):
            self._tenant = self.get_service().get(self.kwargs["tenant_id"])
        return self._tenant

    def unit_choices(self):
        units = super().unit_choices()
        tenant = self.get_tenant()
        current_unit_id = tenant.get("unitId")
        if current_unit_id and all(str(unit.get("id")) != str(current_unit_id) for unit in units):
            current = self.fetch_optional(UnitService(self.get_client()).get, current_unit_id)
            if current:
                units.insert(0, current)
        return units

    def get_initial(self):
        tenant = self.get_tenant()
        return {
            "first_name": tenant.get("firstName", ""),
            "last_name": tenant.get("lastName", ""),
            "email": tenant.get("email", ""),
            "phone": tenant.get("phone", ""),
            "id_number": tenant.get("idNumber") or tenant.get("id_number", ""),
            "emergency_contact_name": tenant.get("emergencyContactName", ""),
            "emergency_contact_phone": tenant.get("emergencyContactPhone", ""),
            "unit_id": str(tenant.get("unitId") or ""),
            "lease_start_date": (tenant.get("leaseStartDate") or "")[:10],
            "lease_end_date": (tenant.get("leaseEndDate") or "")[:10],
            "security_deposit": tenant.get("securityDeposit"),
            "monthly_rent": tenant.get("monthlyRent") or tenant.get("monthly_rent"),
            "status": tenant.get("status", "active"),
            "notes": tenant.get("notes", ""),
        }

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tenant"] = self.get_tenant()
        return context

    def submit(self, form):
        _, message = self.get_service().update(self.kwargs["tenant_id"], form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordTenantRemoveUnitView(LandlordActionView):
    service_class = TenantService
    redirect_url_name = "landlord_tenants"

    def post(self, request, tenant_id):
        message = self.get_service().remove_unit(tenant_id)
        messages.success(request, message or "Tenant removed from unit.")
        return self.get_redirect()


# Payments --------------------------------------------------------------


@method_decorator(landlord_required, name="dispatch")
class LandlordPaymentListView(ApiViewMixin, TemplateView):
    template_name = "landlord/payments.html"
    service_class = PaymentService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.get_service()
        filters = PaymentFilters.from_query(self.request.GET)
        page = self.fetch_page(service.list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "payments": page.items,
                "payment_stats": self.fetch_optional(
                    service.stats,
                    period=self.request.GET.get("period", "month"),
                    property_id=filters.property_id or None,
                    default={},
                ),
                "status_choices": [
                    ("successful", "Successful"),
                    ("pending", "Pending"),
                    ("failed", "Failed"),
                ],
            }
        )
        return context


@method_decorator(landlord_required, name="dispatch")
class LandlordPaymentExportView(ApiViewMixin, View):
    service_class = PaymentService

    def get_error_redirect(self):
        return redirect("landlord_payments")

    def get(self, request):
        filters = PaymentFilters.from_query(request.GET)
        return download_response(self.get_service().export(filters, fmt=request.GET.get("format", "csv")))


@method_decorator(landlord_required, name="dispatch")
class LandlordPaymentReceiptView(ApiViewMixin, View):
    service_class = PaymentService

    def get_error_redirect(self):
        return redirect("landlord_payments")

    def get(self, request, payment_id):
        return download_response(self.get_service().receipt(payment_id))


# Maintenance -----------------------------------------------------------


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceListView(ApiViewMixin, TemplateView):
    template_name = "landlord/maintenance.html"
    service_class = MaintenanceService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.get_service()
        filters = MaintenanceFilters.from_query(self.request.GET)
        page = self.fetch_page(service.list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "maintenance_requests": page.items,
                "maintenance_stats": self.fetch_optional(service.stats, filters.property_id or None, default={}),
                "status_choices": STATUS_CHOICES,
                "priority_choices": PRIORITY_CHOICES,
                "category_choices": LANDLORD_CATEGORY_CHOICES,
            }
        )
        return context


class MaintenanceFormMixin:
    template_name = "landlord/maintenance_form.html"
    form_class = LandlordMaintenanceForm
    service_class = MaintenanceService
    success_url = reverse_lazy("landlord_maintenance")

    def get_error_redirect(self):
        return redirect("landlord_maintenance")

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        client = self.get_client()
        kwargs["properties"] = self.fetch_page(
            PropertyService(client).list, PropertyFilters(limit=CHOICE_LIMIT)
        ).items
        kwargs["units"] = self.fetch_page(UnitService(client).list, UnitFilters(limit=CHOICE_LIMIT)).items
        return kwargs


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceCreateView(MaintenanceFormMixin, LandlordFormView):
    success_message = "Maintenance request created successfully."

    def submit(self, form):
        _, message = self.get_service().create(form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceUpdateView(MaintenanceFormMixin, LandlordFormView):
    success_message = "Maintenance request updated successfully."

    def get_request_record(self):
        if not hasattr(self, "_request_record"):
            self._request_record = self.get_service().get(self.kwargs["request_id"])
        return self._request_record

    def get_initial(self):
        record = self.get_request_record() or {}
        return {
            "property_id": str(record.get("propertyId") or record.get("property_id") or ""),
            "unit_id": str(record.get("unitId") or ""),
            "title": record.get("title", ""),
            "description": record.get("description", ""),
            "priority": record.get("priority", "medium"),
            "category": record.get("category", "general"),
            "tenant_name": record.get("tenantName") or record.get("tenant_name", ""),
            "tenant_phone": record.get("tenantPhone") or record.get("tenant_phone", ""),
            "tenant_email": record.get("tenantEmail") or record.get("tenant_email", ""),
            "reported_date": (record.get("reportedDate") or record.get("reported_date") or record.get("createdAt") or "")[
                :10
            ],
            "notes": record.get("notes", ""),
        }

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["maintenance_request"] = self.get_request_record()
        return context

    def submit(self, form):
        _, message = self.get_service().update(self.kwargs["request_id"], form.to_payload())
        return message


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceStatusView(LandlordActionView):
    service_class = MaintenanceService
    redirect_url_name = "landlord_maintenance"

    def post(self, request, request_id):
        status = request.POST.get("status", "")
        if status not in dict(STATUS_CHOICES):
            messages.error(request, "Please choose a valid status.")
            return self.get_redirect()
        self.get_service().update_status(request_id, status, request.POST.get("response_notes", "").strip())
        messages.success(request, "Maintenance status updated successfully.")
        return self.get_redirect()


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceDeleteView(LandlordActionView):
    service_class = MaintenanceService
    redirect_url_name = "landlord_maintenance"

    def post(self, request, request_id):
        messages.success(request, self.get_service().delete(request_id))
        return self.get_redirect()


@method_decorator(landlord_required, name="dispatch")
class LandlordMaintenanceExportView(ApiViewMixin, View):
    service_class = MaintenanceService

    def get_error_redirect(self):
        return redirect("landlord_maintenance")

    def get(self, request):
        filters = MaintenanceFilters.from_query(request.GET)
        return download_response(self.get_service().export(filters, fmt=request.GET.get("format", "csv")))


@method_decorator(landlord_required, name="dispatch")
class LandlordSettingsView(AccountSettingsView):
    success_url_name = "landlord_settings"
    layout_template = "layouts/landlord.html"
