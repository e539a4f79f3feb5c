"""Authenticate DRF requests from the DigiPlot auth state in the session."""

from rest_framework.authentication import SessionAuthentication

from ..session import get_role, get_token, get_user, is_authenticated


class SessionUser:
    """Request user backed by the API user record stored in the session."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, data, token=None):
        self.data = data or {}
        self.token = token

    @property
    def id(self):
        return self.data.get("id")

    @property
    def role(self):
        return self.data.get("role")

    def __str__(self):
        return self.data.get("email") or str(self.id)


class ApiSessionAuthentication(SessionAuthentication):
    """Same CSRF rules as DRF's session auth, but the user comes from the API login."""

    def authenticate(self, request):
        django_request = request._request
        if not is_authenticated(django_request):
            return None
        self.enforce_csrf(django_request)
        user = dict(get_user(django_request))
        user.setdefault("role", get_role(django_request))
        token = get_token(django_request)
        return SessionUser(user, token), token
