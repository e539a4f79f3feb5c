import re
from datetime import date

from django import forms
from django.utils import timezone

from .base import MultipleImageField, apply_css_classes

TENANT_CATEGORY_CHOICES = [
    ("plumbing", "Plumbing"),
    ("electrical", "Electrical"),
    ("hvac", "Heating/Cooling"),
    ("appliances", "Appliances"),
    ("security", "Security"),
    ("structural", "Structural"),
    ("cleaning", "Cleaning"),
    ("pest_control", "Pest Control"),
    ("other", "Other"),
]

TENANT_PRIORITY_CHOICES = [
    ("low", "Low Priority"),
    ("medium", "Medium Priority"),
    ("high", "High Priority"),
    ("emergency", "Emergency"),
]

PAYMENT_METHOD_CHOICES = [
    ("mpesa", "M-Pesa"),
    ("card", "Card"),
]

KENYAN_PHONE_PATTERN = re.compile(r"^(\+254|254|0)?[17]\d{8}$")
CARD_NUMBER_PATTERN = re.compile(r"^\d{16}$")
EXPIRY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
CVV_PATTERN = re.compile(r"^\d{3,4}$")


OVERDUE_WINDOW = 3


def month_start(today, offset=0):
    index = today.year * 12 + (today.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def rent_month_choices(today=None, paid_months=(), count=12, overdue_window=OVERDUE_WINDOW):
    """Unpaid months from ``overdue_window`` months back through ``count`` months ahead.

    Months before the current one are labelled as overdue.
    """
    today = today or timezone.localdate()
    choices = []
    for offset in range(-overdue_window, count):
        start = month_start(today, offset)
        key = f"{start:%Y-%m}"
        if key in paid_months:
            continue
        label = f"{start:%B %Y}"
        if offset < 0:
            label = f"{label} (overdue)"
        choices.append((key, label))
    return choices


def due_months(today=None, paid_months=(), overdue_window=OVERDUE_WINDOW):
    """Keys of the unpaid overdue months plus the current month when it is unpaid."""
    choices = rent_month_choices(today, paid_months, count=1, overdue_window=overdue_window)
    return [key for key, _ in choices]


class MaintenanceForm(forms.Form):
    title = forms.CharField(
        max_length=100,
        error_messages={"required": "Please enter a title for your maintenance request."},
    )
    description = forms.CharField(
        max_length=500,
        widget=forms.Textarea(attrs={"rows": 4}),
        error_messages={"required": "Please provide a description of the issue."},
    )
    category = forms.ChoiceField(
        choices=[("", "Select a category")] + TENANT_CATEGORY_CHOICES,
        error_messages={"required": "Please select a category for your request."},
    )
    priority = forms.ChoiceField(choices=TENANT_PRIORITY_CHOICES, initial="medium")
    location = forms.CharField(
        max_length=100,
        error_messages={"required": "Please specify the location of the issue."},
    )
    images = MultipleImageField(required=False, label="Photos")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["location"].widget.attrs["placeholder"] = "e.g., Kitchen sink"
        apply_css_classes(self)

    def to_payload(self, user=None):
        data = self.cleaned_data
        user = user or {}
        payload = {
            "title": data["title"].strip(),
            "description": data["description"].strip(),
            "category": data["category"],
            "priority": data["priority"],
            "location": data["location"].strip(),
        }
        if user.get("unitId"):
            payload["unitId"] = user["unitId"]
        if user.get("propertyId"):
            payload["propertyId"] = user["propertyId"]
        return payload


class PaymentForm(forms.Form):
    months = forms.MultipleChoiceField(
        widget=forms.CheckboxSelectMultiple,
        error_messages={"required": "Please select at least one month to pay for."},
    )
    payment_method = forms.ChoiceField(choices=PAYMENT_METHOD_CHOICES, initial="mpesa", widget=forms.RadioSelect)
    mpesa_phone = forms.CharField(max_length=20, required=False, label="M-Pesa phone number")
    card_number = forms.CharField(max_length=23, required=False)
    expiry_date = forms.CharField(max_length=5, required=False, label="Expiry (MM/YY)")
    cvv = forms.CharField(max_length=4, required=False, label="CVV")
    holder_name = forms.CharField(max_length=150, required=False, label="Card holder name")

    def __init__(self, *args, month_choices=None, monthly_rent=0, **kwargs):
        super().__init__(*args, **kwargs)
        self.monthly_rent = monthly_rent or 0
        self.fields["months"].choices = month_choices if month_choices is not None else rent_month_choices()
        self.fields["mpesa_phone"].widget.attrs["placeholder"] = "07XX XXX XXX"
        apply_css_classes(self, {"payment_method": "form-check-input"})

    def clean(self):
        cleaned_data = super().clean()
        method = cleaned_data.get("payment_method")
        if method == "mpesa":
            phone = (cleaned_data.get("mpesa_phone") or "").replace(" ", "")
            if not phone:
                self.add_error("mpesa_phone", "Please enter your M-Pesa phone number.")
            elif not KENYAN_PHONE_PATTERN.match(phone):
                self.add_error("mpesa_phone", "Please enter a valid Kenyan phone number.")
            else:
                cleaned_data["mpesa_phone"] = phone
        elif method == "card":
            card_fields = ("card_number", "expiry_date", "cvv", "holder_name")
            if not all((cleaned_data.get(name) or "").strip() for name in card_fields):
                raise forms.ValidationError("Please fill in all card details.")
            card_number = cleaned_data["card_number"].replace(" ", "")
            if not CARD_NUMBER_PATTERN.match(card_number):
                self.add_error("card_number", "Please enter a valid 16-digit card number.")
            if not EXPIRY_PATTERN.match(cleaned_data["expiry_date"]):
                self.add_error("expiry_date", "Please enter a valid expiry date (MM/YY).")
            if not CVV_PATTERN.match(cleaned_data["cvv"]):
                self.add_error("cvv", "Please enter a valid CVV.")
            cleaned_data["card_number"] = card_number
        return cleaned_data

    def total(self):
        return len(self.cleaned_data.get("months") or []) * float(self.monthly_rent)

    def to_payload(self, unit_id=None):
        data = self.cleaned_data
        payload = {
            "amount": self.total(),
            "paymentMethod": data["payment_method"],
            "months": data["months"],
        }
        if unit_id:
            payload["unitId"] = unit_id
        if data["payment_method"] == "mpesa":
            payload["phoneNumber"] = data["mpesa_phone"]
        return payload
