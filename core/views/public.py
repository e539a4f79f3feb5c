import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.generic import FormView, RedirectView

from ..api.client import ApiClient, ApiError, TwoFactorRequired
from ..forms import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from ..services.auth import AuthService
from ..session import ROLES, clear_auth, dashboard_url_name, get_role, is_authenticated, store_auth
from ..utils.data_helpers import full_name

logger = logging.getLogger(__name__)


def signed_in_role(request):
    """Role of a usable session, or None; stale sessions must not bounce between pages."""
    role = get_role(request)
    if is_authenticated(request) and role in ROLES:
        return role
    return None


class AuthServiceMixin:
    service_class = AuthService

    def get_service(self) -> AuthService:
        return self.service_class(ApiClient())

    def dispatch(self, request, *args, **kwargs):
        role = signed_in_role(request)
        if role:
            return redirect(dashboard_url_name(role))
        return super().dispatch(request, *args, **kwargs)


class SplashView(RedirectView):
    def get_redirect_url(self, *args, **kwargs):
        role = signed_in_role(self.request)
        return reverse_lazy(dashboard_url_name(role) if role else "login")


class LoginView(AuthServiceMixin, FormView):
    template_name = "auth/login.html"
    form_class = LoginForm

    def get_initial(self):
        initial = super().get_initial()
        role = self.request.GET.get("role")
        if role in ROLES:
            initial["role"] = role
        return initial

    def get_success_url(self):
        redirect_to = self.request.POST.get("next") or self.request.GET.get("next")
        if redirect_to and url_has_allowed_host_and_scheme(redirect_to, allowed_hosts={self.request.get_host()}):
            return redirect_to
        return reverse_lazy(dashboard_url_name(self.auth_result.role))

    def form_valid(self, form):
        data = form.cleaned_data
        try:
            self.auth_result = self.get_service().login(
                data["email"],
                data["password"],
                data["role"],
                data.get("two_factor_token") or None,
            )
        except TwoFactorRequired as exc:
            messages.info(self.request, exc.message)
            return self.render_to_response(self.get_context_data(form=form, requires_2fa=True))
        except ApiError as exc:
            messages.error(self.request, exc.message)
            return self.render_to_response(self.get_context_data(form=form))

        store_auth(self.request, self.auth_result.user, self.auth_result.token)
        messages.success(self.request, f"Welcome back, {full_name(self.auth_result.user)}!")
        return super().form_valid(form)

    def form_invalid(self, form):
        messages.error(self.request, "Please enter a valid email, password and role.")
        return self.render_to_response(self.get_context_data(form=form))


class LogoutView(RedirectView):
    pattern_name = "login"

    def get(self, request, *args, **kwargs):
        clear_auth(request)
        messages.info(request, "You have been signed out.")
        return super().get(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        return self.get(request, *args, **kwargs)


class RegisterView(AuthServiceMixin, FormView):
    template_name = "auth/register.html"
    form_class = RegisterForm

    def form_valid(self, form):
        try:
            result = self.get_service().register(form.to_payload())
        except ApiError as exc:
            form.add_error(None, exc.message)
            return self.form_invalid(form)
        store_auth(self.request, result.user, result.token)
        messages.success(self.request, "Registration successful. Welcome to DigiPlot!")
        return redirect(dashboard_url_name(result.role))

    def form_invalid(self, form):
        messages.error(self.request, "Please correct the highlighted errors.")
        return self.render_to_response(self.get_context_data(form=form))


class ForgotPasswordView(AuthServiceMixin, FormView):
    template_name = "auth/forgot_password.html"
    form_class = ForgotPasswordForm
    success_url = reverse_lazy("login")

    def form_valid(self, form):
        try:
            message = self.get_service().forgot_password(form.cleaned_data["email"])
        except ApiError as exc:
            messages.error(self.request, exc.message)
            return self.render_to_response(self.get_context_data(form=form))
        messages.success(self.request, message or "Password reset instructions have been sent to your email.")
        return super().form_valid(form)


class ResetPasswordView(AuthServiceMixin, FormView):
    template_name = "auth/reset_password.html"
    form_class = ResetPasswordForm
    success_url = reverse_lazy("login")

    def form_valid(self, form):
        try:
            message = self.get_service().reset_password(self.kwargs["token"], form.cleaned_data["password1"])
        except ApiError as exc:
            messages.error(self.request, exc.message)
            return self.render_to_response(self.get_context_data(form=form))
        messages.success(self.request, message or "Your password has been reset. Please sign in.")
        return super().form_valid(form)
