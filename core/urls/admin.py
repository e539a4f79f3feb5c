"""Admin console URL patterns."""

from django.urls import path

from ..views import admin

urlpatterns = [
    path("admin/", admin.AdminDashboardView.as_view(), name="admin_dashboard"),
    path("admin/users/", admin.AdminUserListView.as_view(), name="admin_users"),
    path("admin/users/add/", admin.AdminUserCreateView.as_view(), name="admin_user_create"),
    path("admin/users/export/", admin.AdminUserExportView.as_view(), name="admin_user_export"),
    path("admin/users/<str:user_id>/edit/", admin.AdminUserUpdateView.as_view(), name="admin_user_edit"),
    path("admin/users/<str:user_id>/delete/", admin.AdminUserDeleteView.as_view(), name="admin_user_delete"),
    path(
        "admin/users/<str:user_id>/toggle-status/",
        admin.AdminUserToggleStatusView.as_view(),
        name="admin_user_toggle_status",
    ),
    path(
        "admin/users/<str:user_id>/reactivate/",
        admin.AdminUserReactivateView.as_view(),
        name="admin_user_reactivate",
    ),
    path(
        "admin/users/<str:user_id>/reset-password/",
        admin.AdminUserResetPasswordView.as_view(),
        name="admin_user_reset_password",
    ),
    path("admin/properties/", admin.AdminPropertyListView.as_view(), name="admin_properties"),
    path("admin/settings/", admin.AdminSettingsView.as_view(), name="admin_settings"),
]
