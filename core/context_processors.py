from .session import dashboard_url_name, get_role, get_user
from .utils.data_helpers import full_name


def session_user(request):
    """Expose the signed-in API user to every template."""
    user = get_user(request) if hasattr(request, "session") else None
    role = get_role(request) if hasattr(request, "session") else None
    return {
        "current_user": user,
        "current_user_name": full_name(user),
        "current_role": role,
        "dashboard_url_name": dashboard_url_name(role),
    }
