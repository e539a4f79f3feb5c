"""JSON endpoints served through Django REST framework."""

from django.urls import path

from ..api.views import CurrentUserView, MaintenanceStatusView

urlpatterns = [
    path("api/session/me/", CurrentUserView.as_view(), name="api_session_me"),
    path(
        "api/maintenance/<str:request_id>/status/",
        MaintenanceStatusView.as_view(),
        name="api_maintenance_status",
    ),
]
