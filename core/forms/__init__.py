from .admin import USER_STATUS_CHOICES, UserForm
from .auth import ChangePasswordForm, ForgotPasswordForm, LoginForm, ProfileForm, RegisterForm, ResetPasswordForm
from .landlord import (
    LANDLORD_CATEGORY_CHOICES,
    PROPERTY_AMENITY_CHOICES,
    PROPERTY_TYPE_CHOICES,
    UNIT_STATUS_CHOICES,
    UNIT_TYPE_CHOICES,
    ImageUploadForm,
    LandlordMaintenanceForm,
    PropertyForm,
    TenantForm,
    UnitForm,
)
from .tenant import TENANT_CATEGORY_CHOICES, MaintenanceForm, PaymentForm, due_months, rent_month_choices

__all__ = [
    "LoginForm",
    "RegisterForm",
    "ForgotPasswordForm",
    "ResetPasswordForm",
    "ChangePasswordForm",
    "ProfileForm",
    "UserForm",
    "USER_STATUS_CHOICES",
    "PropertyForm",
    "UnitForm",
    "TenantForm",
    "LandlordMaintenanceForm",
    "ImageUploadForm",
    "MaintenanceForm",
    "PaymentForm",
    "rent_month_choices",
    "due_months",
    "PROPERTY_TYPE_CHOICES",
    "PROPERTY_AMENITY_CHOICES",
    "UNIT_TYPE_CHOICES",
    "UNIT_STATUS_CHOICES",
    "LANDLORD_CATEGORY_CHOICES",
    "TENANT_CATEGORY_CHOICES",
]
