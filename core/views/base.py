"""Shared plumbing for views that talk to the DigiPlot API."""

import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect
from django.views.generic import TemplateView

from ..api.client import ApiClient, ApiError
from ..forms import ChangePasswordForm, ProfileForm
from ..services.auth import AuthService
from ..services.base import Page
from ..session import clear_auth, dashboard_url_name, get_role, get_user, update_user
from ..utils.pagination import Pagination

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class ApiViewMixin:
    """Build services from the signed-in user's token and turn API failures into flash messages."""

    service_class = None

    def get_client(self) -> ApiClient:
        return ApiClient.for_request(self.request)

    def get_service(self):
        return self.service_class(self.get_client())

    @property
    def current_user(self):
        return get_user(self.request) or {}

    def get_error_redirect(self):
        return redirect(dashboard_url_name(get_role(self.request)))

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except ApiError as exc:
            if exc.is_unauthorized:
                logger.info("API rejected the session token; signing out")
                clear_auth(request)
                messages.error(request, SESSION_EXPIRED_MESSAGE)
                return redirect("login")
            messages.error(request, exc.message)
            return self.get_error_redirect()

    def fetch_page(self, call, *args, **kwargs) -> Page:
        """Run a list call, falling back to an empty page with an error banner."""
        try:
            return call(*args, **kwargs)
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            messages.error(self.request, exc.message)
            return Page.empty()

    def fetch_optional(self, call, *args, default=None, **kwargs):
        try:
            return call(*args, **kwargs)
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            logger.warning("Optional fetch failed: %s", exc)
            return default

    def paginated_context(self, page: Page, filters) -> dict:
        return {
            "pagination": Pagination.from_page(page, filters.limit),
            "filters": filters.as_dict(),
            "querystring": self.request.GET.copy(),
        }


def download_response(download) -> HttpResponse:
    response = HttpResponse(download.content, content_type=download.content_type)
    response["Content-Disposition"] = f'attachment; filename="{download.filename}"'
    return response


def flash_form_errors(request, form):
    for errors in form.errors.values():
        for error in errors:
            messages.error(request, error)


class AccountSettingsView(ApiViewMixin, TemplateView):
    """Profile, password and two-factor settings shared by every role."""

    template_name = "account/settings.html"
    service_class = AuthService
    success_url_name = None
    layout_template = "base.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.get_service()
        context.update(
            {
                "layout_template": self.layout_template,
                "profile_form": kwargs.get("profile_form")
                or ProfileForm(initial=ProfileForm.initial_from_user(self.current_user)),
                "password_form": kwargs.get("password_form") or ChangePasswordForm(),
                "two_factor_enabled": self.fetch_optional(service.two_factor_status, default=False),
                "two_factor_setup": kwargs.get("two_factor_setup"),
            }
        )
        return context

    def post(self, request, *args, **kwargs):
        service = self.get_service()
        form_type = request.POST.get("form_type", "profile")
        context_kwargs = {}
        try:
            if form_type == "profile":
                form = ProfileForm(request.POST)
                if form.is_valid():
                    user, message = service.update_profile(form.to_payload())
                    update_user(request, {**self.current_user, **(user or {})})
                    messages.success(request, message or "Profile updated successfully.")
                    return redirect(self.success_url_name)
                messages.error(request, "Please correct the highlighted errors and try again.")
                context_kwargs["profile_form"] = form
            elif form_type == "password":
                form = ChangePasswordForm(request.POST)
                if form.is_valid():
                    message = service.change_password(
                        form.cleaned_data["current_password"],
                        form.cleaned_data["new_password"],
                    )
                    messages.success(request, message or "Password updated successfully.")
                    return redirect(self.success_url_name)
                messages.error(request, "Please fix the errors in the password form and resubmit.")
                context_kwargs["password_form"] = form
            elif form_type == "two_factor_setup":
                context_kwargs["two_factor_setup"] = service.two_factor_setup()
            elif form_type == "two_factor_enable":
                messages.success(request, service.two_factor_enable(request.POST.get("token", "")) or "2FA enabled.")
                return redirect(self.success_url_name)
            elif form_type == "two_factor_disable":
                messages.success(request, service.two_factor_disable(request.POST.get("token", "")) or "2FA disabled.")
                return redirect(self.success_url_name)
        except ApiError as exc:
            if exc.is_unauthorized:
                raise
            messages.error(request, exc.message)
            if form_type.startswith("two_factor"):
                return redirect(self.success_url_name)
        return self.render_to_response(self.get_context_data(**context_kwargs))
