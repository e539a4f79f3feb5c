"""Public-facing URL patterns."""

from django.urls import path

from ..views import public

urlpatterns = [
    path("", public.SplashView.as_view(), name="splash"),
    path("login/", public.LoginView.as_view(), name="login"),
    path("logout/", public.LogoutView.as_view(), name="logout"),
    path("register/", public.RegisterView.as_view(), name="register"),
    path("forgot-password/", public.ForgotPasswordView.as_view(), name="forgot_password"),
    path("reset-password/<str:token>/", public.ResetPasswordView.as_view(), name="reset_password"),
]
