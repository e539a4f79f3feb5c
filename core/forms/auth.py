from django import forms

from .base import apply_css_classes

LOGIN_ROLE_CHOICES = [
    ("tenant", "Tenant"),
    ("landlord", "Landlord"),
    ("admin", "Administrator"),
]
REGISTER_ROLE_CHOICES = LOGIN_ROLE_CHOICES[:2]
MIN_PASSWORD_LENGTH = 8


def check_password_pair(form, cleaned_data, password_field, confirm_field):
    password = cleaned_data.get(password_field)
    confirm = cleaned_data.get(confirm_field)
    if password and confirm and password != confirm:
        form.add_error(confirm_field, "Passwords do not match")


class LoginForm(forms.Form):
    email = forms.EmailField(widget=forms.EmailInput(attrs={"placeholder": "you@example.com"}))
    password = forms.CharField(widget=forms.PasswordInput)
    role = forms.ChoiceField(choices=LOGIN_ROLE_CHOICES, initial="tenant")
    two_factor_token = forms.CharField(required=False, max_length=8, label="Authentication code")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)


class RegisterForm(forms.Form):
    first_name = forms.CharField(max_length=100)
    last_name = forms.CharField(max_length=100)
    email = forms.EmailField()
    phone = forms.CharField(max_length=20)
    role = forms.ChoiceField(choices=REGISTER_ROLE_CHOICES, initial="tenant")
    emergency_contact_name = forms.CharField(max_length=100, required=False)
    emergency_contact_phone = forms.CharField(max_length=20, required=False)
    password1 = forms.CharField(
        label="Password",
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput,
        error_messages={"min_length": "Password must be at least 8 characters long"},
    )
    password2 = forms.CharField(label="Confirm Password", widget=forms.PasswordInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)

    def clean(self):
        cleaned_data = super().clean()
        check_password_pair(self, cleaned_data, "password1", "password2")
        return cleaned_data

    def to_payload(self):
        data = self.cleaned_data
        return {
            "firstName": data["first_name"].strip(),
            "lastName": data["last_name"].strip(),
            "email": data["email"],
            "password": data["password1"],
            "role": data["role"],
            "phone": data["phone"].strip(),
            "emergencyContactName": data.get("emergency_contact_name", ""),
            "emergencyContactPhone": data.get("emergency_contact_phone", ""),
        }


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)


class ResetPasswordForm(forms.Form):
    password1 = forms.CharField(
        label="New Password",
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput,
        error_messages={"min_length": "Password must be at least 8 characters long"},
    )
    password2 = forms.CharField(label="Confirm Password", widget=forms.PasswordInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)

    def clean(self):
        cleaned_data = super().clean()
        check_password_pair(self, cleaned_data, "password1", "password2")
        return cleaned_data


class ChangePasswordForm(forms.Form):
    current_password = forms.CharField(widget=forms.PasswordInput)
    new_password = forms.CharField(
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput,
        error_messages={"min_length": "Password must be at least 8 characters long"},
    )
    confirm_password = forms.CharField(widget=forms.PasswordInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)

    def clean(self):
        cleaned_data = super().clean()
        check_password_pair(self, cleaned_data, "new_password", "confirm_password")
        current = cleaned_data.get("current_password")
        new = cleaned_data.get("new_password")
        if current and new and current == new:
            self.add_error("new_password", "New password must be different from the current password")
        return cleaned_data


class ProfileForm(forms.Form):
    first_name = forms.CharField(max_length=100)
    last_name = forms.CharField(max_length=100)
    phone = forms.CharField(max_length=20, required=False)
    emergency_contact_name = forms.CharField(max_length=100, required=False)
    emergency_contact_phone = forms.CharField(max_length=20, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)

    @classmethod
    def initial_from_user(cls, user):
        user = user or {}
        return {
            "first_name": user.get("firstName", ""),
            "last_name": user.get("lastName", ""),
            "phone": user.get("phone", ""),
            "emergency_contact_name": user.get("emergencyContactName", ""),
            "emergency_contact_phone": user.get("emergencyContactPhone", ""),
        }

    def to_payload(self):
        data = self.cleaned_data
        return {
            "firstName": data["first_name"].strip(),
            "lastName": data["last_name"].strip(),
            "phone": data.get("phone", ""),
            "emergencyContactName": data.get("emergency_contact_name", ""),
            "emergencyContactPhone": data.get("emergency_contact_phone", ""),
        }
