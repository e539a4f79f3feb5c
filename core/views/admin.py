from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse_lazy
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.cache import never_cache
from django.views.generic import FormView, TemplateView

from ..api.client import ApiError
from ..decorators import admin_required
from ..forms import USER_STATUS_CHOICES, UserForm
from ..forms.auth import LOGIN_ROLE_CHOICES
from ..services.dashboard import AdminDashboardService
from ..services.property import PropertyFilters, PropertyService
from ..services.user import UserFilters, UserService
from ..utils.data_helpers import full_name, time_greeting
from .base import AccountSettingsView, ApiViewMixin, download_response


@method_decorator(admin_required, name="dispatch")
class AdminDashboardView(ApiViewMixin, TemplateView):
    template_name = "admin/dashboard.html"
    service_class = AdminDashboardService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(self.get_service().build_context())
        context["greeting"] = time_greeting()
        return context


@method_decorator(admin_required, name="dispatch")
class AdminUserListView(ApiViewMixin, TemplateView):
    template_name = "admin/users.html"
    service_class = UserService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.get_service()
        filters = UserFilters.from_query(self.request.GET)
        page = self.fetch_page(service.list, filters)
        context.update(self.paginated_context(page, filters))
        context.update(
            {
                "users": page.items,
                "total_users": page.total,
                "stats": self.fetch_optional(service.stats, default={}),
                "role_choices": LOGIN_ROLE_CHOICES,
                "status_choices": USER_STATUS_CHOICES,
            }
        )
        return context


@method_decorator(admin_required, name="dispatch")
class AdminUserCreateView(ApiViewMixin, FormView):
    template_name = "admin/user_form.html"
    form_class = UserForm
    service_class = UserService
    success_url = reverse_lazy("admin_users")

    def form_valid(self, form):
        try:
            user, message = self.get_service().create(form.to_payload())
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            form.add_error(None, exc.message)
            return self.form_invalid(form)
        messages.success(self.request, message or f"User {full_name(user)} created successfully.")
        return super().form_valid(form)

    def form_invalid(self, form):
        messages.error(self.request, "Please review the errors below.")
        return super().form_invalid(form)


@method_decorator(admin_required, name="dispatch")
class AdminUserUpdateView(ApiViewMixin, FormView):
    template_name = "admin/user_form.html"
    form_class = UserForm
    service_class = UserService
    success_url = reverse_lazy("admin_users")

    def get_error_redirect(self):
        return redirect("admin_users")

    def get_user_record(self):
        if not hasattr(self, "_user_record"):
            self._user_record = self.get_service().get(self.kwargs["user_id"])
        return self._user_record

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["is_edit"] = True
        return kwargs

    def get_initial(self):
        return UserForm.initial_from_user(self.get_user_record())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["edited_user"] = self.get_user_record()
        context["activity"] = self.fetch_optional(
            self.get_service().activity, self.kwargs["user_id"], limit=10, default=[]
        )
        return context

    def form_valid(self, form):
        try:
            _, message = self.get_service().update(self.kwargs["user_id"], form.to_payload())
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            form.add_error(None, exc.message)
            return self.form_invalid(form)
        messages.success(self.request, message or "User updated successfully.")
        return super().form_valid(form)

    def form_invalid(self, form):
        messages.error(self.request, "Please review the errors below.")
        return super().form_invalid(form)


class AdminUserActionView(ApiViewMixin, View):
    """POST-only action on one user; subclasses implement ``perform``."""

    http_method_names = ["post"]
    service_class = UserService

    def get_error_redirect(self):
        return redirect("admin_users")

    def post(self, request, user_id):
        message = self.perform(self.get_service(), user_id)
        messages.success(request, message)
        return redirect("admin_users")

    def perform(self, service, user_id):
        raise NotImplementedError


@method_decorator(admin_required, name="dispatch")
class AdminUserDeleteView(AdminUserActionView):
    def perform(self, service, user_id):
        return service.delete(user_id) or "User deleted successfully."


@method_decorator(admin_required, name="dispatch")
class AdminUserToggleStatusView(AdminUserActionView):
    def perform(self, service, user_id):
        _, message = service.toggle_status(user_id)
        return message or "User status updated."


@method_decorator(admin_required, name="dispatch")
class AdminUserReactivateView(AdminUserActionView):
    def perform(self, service, user_id):
        _, message = service.reactivate(user_id)
        return message or "User reactivated successfully."


@method_decorator(admin_required, name="dispatch")
@method_decorator(never_cache, name="dispatch")
class AdminUserResetPasswordView(AdminUserActionView):
    """Show the generated password once, in the response body."""

    template_name = "admin/password_reset_done.html"

    def post(self, request, user_id):
        new_password, message = self.get_service().reset_password(user_id)
        message = message or "Password reset successfully."
        if not new_password:
            messages.success(request, message)
            return redirect("admin_users")
        return render(request, self.template_name, {"message": message, "new_password": new_password})


@method_decorator(admin_required, name="dispatch")
class AdminUserExportView(ApiViewMixin, View):
    service_class = UserService

    def get_error_redirect(self):
        return redirect("admin_users")

    def get(self, request):
        filters = UserFilters.from_query(request.GET)
        return download_response(self.get_service().export(filters, fmt=request.GET.get("format", "csv")))


@method_decorator(admin_required, name="dispatch")
class AdminPropertyListView(ApiViewMixin, TemplateView):
    template_name = "admin/properties.html"
    service_class = PropertyService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = PropertyFilters.from_query(self.request.GET)
        page = self.fetch_page(self.get_service().list, filters)
        context.update(self.paginated_context(page, filters))
        context["properties"] = page.items
        return context


@method_decorator(admin_required, name="dispatch")
class AdminSettingsView(AccountSettingsView):
    success_url_name = "admin_settings"
    layout_template = "layouts/admin.html"
