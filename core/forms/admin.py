from django import forms

from .auth import LOGIN_ROLE_CHOICES, MIN_PASSWORD_LENGTH
from .base import EMAIL_PATTERN, apply_css_classes

USER_STATUS_CHOICES = [
    ("active", "Active"),
    ("inactive", "Inactive"),
    ("suspended", "Suspended"),
]


class UserForm(forms.Form):
    """Create or edit a user from the admin console.

    A password is mandatory for new users only; on edit a blank password
    keeps the current one and is left out of the payload.
    """

    first_name = forms.CharField(max_length=100, error_messages={"required": "First name is required"})
    last_name = forms.CharField(max_length=100, error_messages={"required": "Last name is required"})
    email = forms.CharField(max_length=254, error_messages={"required": "Email is required"})
    phone = forms.CharField(max_length=20, required=False)
    role = forms.ChoiceField(choices=LOGIN_ROLE_CHOICES, error_messages={"required": "Role is required"})
    status = forms.ChoiceField(choices=USER_STATUS_CHOICES, initial="active")
    emergency_contact_name = forms.CharField(max_length=100, required=False)
    emergency_contact_phone = forms.CharField(max_length=20, required=False)
    password = forms.CharField(required=False, widget=forms.PasswordInput(render_value=False))
    confirm_password = forms.CharField(required=False, widget=forms.PasswordInput(render_value=False))

    def __init__(self, *args, is_edit=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.is_edit = is_edit
        apply_css_classes(self)

    @classmethod
    def initial_from_user(cls, user):
        user = user or {}
        return {
            "first_name": user.get("firstName", ""),
            "last_name": user.get("lastName", ""),
            "email": user.get("email", ""),
            "phone": user.get("phone", ""),
            "role": user.get("role", "tenant"),
            "status": user.get("status", "active"),
            "emergency_contact_name": user.get("emergencyContactName", ""),
            "emergency_contact_phone": user.get("emergencyContactPhone", ""),
        }

    def clean_first_name(self):
        value = self.cleaned_data["first_name"].strip()
        if not value:
            raise forms.ValidationError("First name is required")
        return value

    def clean_last_name(self):
        value = self.cleaned_data["last_name"].strip()
        if not value:
            raise forms.ValidationError("Last name is required")
        return value

    def clean_email(self):
        email = self.cleaned_data["email"].strip()
        if not EMAIL_PATTERN.match(email):
            raise forms.ValidationError("Invalid email format")
        return email

    def clean_phone(self):
        phone = (self.cleaned_data.get("phone") or "").strip()
        if phone and len(phone) < 10:
            raise forms.ValidationError("Phone number should be at least 10 digits")
        return phone

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get("password") or ""
        confirm = cleaned_data.get("confirm_password") or ""
        if not self.is_edit and not password:
            self.add_error("password", "Password is required")
        elif password and len(password) < MIN_PASSWORD_LENGTH:
            self.add_error("password", "Password must be at least 8 characters")
        if password and password != confirm:
            self.add_error("confirm_password", "Passwords do not match")
        return cleaned_data

    def to_payload(self):
        data = self.cleaned_data
        payload = {
            "firstName": data["first_name"],
            "lastName": data["last_name"],
            "email": data["email"].lower(),
            "phone": data.get("phone") or "",
            "role": data["role"],
            "status": data.get("status") or "active",
            "emergencyContactName": data.get("emergency_contact_name") or "",
            "emergencyContactPhone": data.get("emergency_contact_phone") or "",
        }
        if data.get("password"):
            payload["password"] = data["password"]
        return payload
