from functools import wraps

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import urlencode

from .session import dashboard_url_name, get_role, is_authenticated


def login_required(view_func):
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not is_authenticated(request):
            messages.info(request, "Please sign in to continue.")
            login_url = reverse("login")
            return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")
        return view_func(request, *args, **kwargs)

    return _wrapped_view


def role_required(*roles, message="You do not have permission to access that page."):
    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def _wrapped_view(request, *args, **kwargs):
            role = get_role(request)
            if role not in roles:
                messages.error(request, message)
                return redirect(dashboard_url_name(role))
            return view_func(request, *args, **kwargs)

        return _wrapped_view

    return decorator


admin_required = role_required("admin", message="Only administrators can access that page.")
landlord_required = role_required("landlord", message="Only landlord accounts can access that page.")
tenant_required = role_required("tenant", message="Only tenant accounts can access that page.")
