from django import forms
from django.utils import timezone

from .base import EMAIL_PATTERN, MultipleImageField, apply_css_classes, as_number, clean_optional_email

PROPERTY_TYPE_CHOICES = [
    ("residential", "Residential"),
    ("commercial", "Commercial"),
    ("mixed", "Mixed Use"),
    ("industrial", "Industrial"),
]

PROPERTY_AMENITY_CHOICES = [
    (amenity, amenity)
    for amenity in (
        "WiFi",
        "Parking",
        "Security",
        "Swimming Pool",
        "Gym",
        "Elevator",
        "Laundry",
        "Garden",
        "Balcony",
        "Air Conditioning",
        "Heating",
        "Generator",
        "CCTV",
        "Intercom",
        "Playground",
    )
]

UNIT_TYPE_CHOICES = [
    ("apartment", "Apartment"),
    ("studio", "Studio"),
    ("single_room", "Single Room"),
    ("bedsitter", "Bedsitter"),
    ("one_bedroom", "One Bedroom"),
    ("two_bedroom", "Two Bedroom"),
    ("three_bedroom", "Three Bedroom"),
    ("penthouse", "Penthouse"),
    ("duplex", "Duplex"),
    ("office", "Office Space"),
    ("shop", "Shop/Retail"),
]

UNIT_STATUS_CHOICES = [
    ("available", "Available"),
    ("occupied", "Occupied"),
    ("maintenance", "Under Maintenance"),
    ("unavailable", "Unavailable"),
]

UNIT_AMENITY_CHOICES = [
    (amenity, amenity)
    for amenity in (
        "Balcony",
        "Air Conditioning",
        "Heating",
        "Furnished",
        "Semi-Furnished",
        "Kitchen Appliances",
        "Washer/Dryer",
        "Parking Space",
        "Storage",
        "Garden Access",
        "Sea View",
        "City View",
        "High-Speed Internet",
        "Cable TV",
        "Security System",
    )
]

UTILITY_CHOICES = [
    (utility, utility)
    for utility in (
        "Water",
        "Electricity",
        "Gas",
        "Internet",
        "Cable TV",
        "Garbage Collection",
        "Security",
        "Maintenance",
    )
]

TENANT_STATUS_CHOICES = [
    ("active", "Active"),
    ("inactive", "Inactive"),
    ("pending", "Pending"),
]

MAINTENANCE_PRIORITY_CHOICES = [
    ("low", "Low Priority"),
    ("medium", "Medium Priority"),
    ("high", "High Priority"),
    ("urgent", "Urgent"),
]

LANDLORD_CATEGORY_CHOICES = [
    ("general", "General Maintenance"),
    ("plumbing", "Plumbing"),
    ("electrical", "Electrical"),
    ("heating", "Heating/Cooling"),
    ("appliances", "Appliances"),
    ("security", "Security"),
    ("internet", "Internet/Cable"),
    ("ac", "Air Conditioning"),
]


def record_choices(records, label, placeholder):
    choices = [("", placeholder)]
    for record in records or []:
        choices.append((str(record.get("id")), label(record)))
    return choices


def unit_label(unit):
    name = unit.get("name") or unit.get("unitNumber") or unit.get("unit_number") or unit.get("id")
    property_name = unit.get("propertyName") or unit.get("property_name")
    return f"{property_name} · Unit {name}" if property_name else f"Unit {name}"


class PropertyForm(forms.Form):
    name = forms.CharField(max_length=150, error_messages={"required": "Property name is required"})
    address = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 2}),
        error_messages={"required": "Address is required"},
    )
    city = forms.CharField(max_length=100, error_messages={"required": "City is required"})
    state = forms.CharField(max_length=100, required=False)
    postal_code = forms.CharField(max_length=20, required=False)
    country = forms.CharField(max_length=100, initial="Kenya", required=False)
    description = forms.CharField(widget=forms.Textarea(attrs={"rows": 4}), required=False)
    property_type = forms.ChoiceField(choices=PROPERTY_TYPE_CHOICES, initial="residential")
    year_built = forms.IntegerField(required=False)
    total_floors = forms.IntegerField(required=False, min_value=0)
    parking_spaces = forms.IntegerField(required=False, min_value=0)
    amenities = forms.MultipleChoiceField(
        choices=PROPERTY_AMENITY_CHOICES,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )
    contact_phone = forms.CharField(max_length=20, required=False)
    contact_email = forms.CharField(max_length=254, required=False)
    manager_name = forms.CharField(max_length=150, required=False)
    manager_phone = forms.CharField(max_length=20, required=False)
    manager_email = forms.CharField(max_length=254, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["name"].widget.attrs["placeholder"] = "e.g., Sunset Apartments"
        self.fields["city"].widget.attrs["placeholder"] = "e.g., Nairobi"
        apply_css_classes(self)

    @classmethod
    def initial_from_property(cls, prop):
        prop = prop or {}
        initial = {name: prop.get(name) for name in cls.base_fields if prop.get(name) not in (None, "")}
        initial.setdefault("country", "Kenya")
        initial.setdefault("property_type", "residential")
        return initial

    def clean_name(self):
        value = self.cleaned_data["name"].strip()
        if not value:
            raise forms.ValidationError("Property name is required")
        return value

    def clean_address(self):
        value = self.cleaned_data["address"].strip()
        if not value:
            raise forms.ValidationError("Address is required")
        return value

    def clean_city(self):
        value = self.cleaned_data["city"].strip()
        if not value:
            raise forms.ValidationError("City is required")
        return value

    def clean_country(self):
        return (self.cleaned_data.get("country") or "").strip() or "Kenya"

    def clean_contact_email(self):
        return clean_optional_email(self.cleaned_data.get("contact_email"))

    def clean_manager_email(self):
        return clean_optional_email(self.cleaned_data.get("manager_email"))

    def clean_year_built(self):
        year = self.cleaned_data.get("year_built")
        if year is not None and not 1800 <= year <= timezone.localdate().year:
            raise forms.ValidationError("Please enter a valid year")
        return year

    def to_payload(self):
        return {key: value for key, value in self.cleaned_data.items()}


class UnitForm(forms.Form):
    unit_number = forms.CharField(max_length=50, error_messages={"required": "Unit number is required"})
    unit_type = forms.ChoiceField(choices=UNIT_TYPE_CHOICES, initial="apartment")
    bedrooms = forms.IntegerField(required=False)
    bathrooms = forms.IntegerField(required=False)
    size_sqft = forms.IntegerField(required=False, label="Size (sq ft)")
    rent_amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        error_messages={"required": "Valid rent amount is required"},
    )
    security_deposit = forms.DecimalField(max_digits=12, decimal_places=2, required=False)
    status = forms.ChoiceField(choices=UNIT_STATUS_CHOICES, initial="available")
    floor_number = forms.IntegerField(required=False)
    description = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)
    amenities = forms.MultipleChoiceField(
        choices=UNIT_AMENITY_CHOICES,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )
    utilities_included = forms.MultipleChoiceField(
        choices=UTILITY_CHOICES,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)

    @classmethod
    def initial_from_unit(cls, unit):
        unit = unit or {}
        initial = {name: unit.get(name) for name in cls.base_fields if unit.get(name) not in (None, "")}
        if "rent_amount" not in initial and unit.get("rentAmount") is not None:
            initial["rent_amount"] = unit["rentAmount"]
        return initial

    def clean_unit_number(self):
        value = self.cleaned_data["unit_number"].strip()
        if not value:
            raise forms.ValidationError("Unit number is required")
        return value

    def clean_rent_amount(self):
        rent = self.cleaned_data.get("rent_amount")
        if rent is None or rent <= 0:
            raise forms.ValidationError("Valid rent amount is required")
        return rent

    def clean_bedrooms(self):
        bedrooms = self.cleaned_data.get("bedrooms")
        if bedrooms is not None and bedrooms < 0:
            raise forms.ValidationError("Bedrooms cannot be negative")
        return bedrooms

    def clean_bathrooms(self):
        bathrooms = self.cleaned_data.get("bathrooms")
        if bathrooms is not None and bathrooms < 0:
            raise forms.ValidationError("Bathrooms cannot be negative")
        return bathrooms

    def clean_size_sqft(self):
        size = self.cleaned_data.get("size_sqft")
        if size is not None and size <= 0:
            raise forms.ValidationError("Size must be greater than 0")
        return size

    def clean_security_deposit(self):
        deposit = self.cleaned_data.get("security_deposit")
        if deposit is not None and deposit < 0:
            raise forms.ValidationError("Security deposit cannot be negative")
        return deposit

    def to_payload(self, property_id=None):
        data = self.cleaned_data
        payload = {
            "unit_number": data["unit_number"],
            "unit_type": data["unit_type"],
            "bedrooms": data.get("bedrooms") or 0,
            "bathrooms": data.get("bathrooms") or 0,
            "size_sqft": data.get("size_sqft") or 0,
            "rent_amount": as_number(data["rent_amount"]),
            "security_deposit": as_number(data.get("security_deposit")) or 0,
            "status": data["status"],
            "floor_number": data.get("floor_number") or 1,
            "description": data.get("description", ""),
            "amenities": data.get("amenities", []),
            "utilities_included": data.get("utilities_included", []),
        }
        if property_id:
            payload["property_id"] = property_id
        return payload


class TenantForm(forms.Form):
    first_name = forms.CharField(max_length=100, error_messages={"required": "First name is required"})
    last_name = forms.CharField(max_length=100, error_messages={"required": "Last name is required"})
    email = forms.CharField(max_length=254, error_messages={"required": "Email is required"})
    phone = forms.CharField(max_length=20, error_messages={"required": "Phone number is required"})
    id_number = forms.CharField(max_length=30, label="ID Number", error_messages={"required": "ID number is required"})
    emergency_contact_name = forms.CharField(max_length=100, required=False)
    emergency_contact_phone = forms.CharField(max_length=20, required=False)
    unit_id = forms.ChoiceField(label="Unit", error_messages={"required": "Please select a unit"})
    lease_start_date = forms.DateField(
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={"required": "Lease start date is required"},
    )
    lease_end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), required=False)
    security_deposit = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        error_messages={"required": "Please enter a valid security deposit amount"},
    )
    monthly_rent = forms.DecimalField(max_digits=12, decimal_places=2, required=False)
    status = forms.ChoiceField(choices=TENANT_STATUS_CHOICES, initial="active")
    notes = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)

    def __init__(self, *args, units=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.units = {str(unit.get("id")): unit for unit in units or []}
        self.fields["unit_id"].choices = record_choices(units, unit_label, "Select a unit")
        apply_css_classes(self)

    def clean_email(self):
        email = self.cleaned_data["email"].strip()
        if not EMAIL_PATTERN.match(email):
            raise forms.ValidationError("Please enter a valid email address")
        return email.lower()

    def clean_security_deposit(self):
        deposit = self.cleaned_data.get("security_deposit")
        if deposit is None or deposit < 0:
            raise forms.ValidationError("Please enter a valid security deposit amount")
        return deposit

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get("lease_start_date")
        end = cleaned_data.get("lease_end_date")
        if start and end and end < start:
            self.add_error("lease_end_date", "Lease end date cannot be before the start date")
        return cleaned_data

    def to_payload(self):
        data = self.cleaned_data
        unit = self.units.get(data["unit_id"], {})
        monthly_rent = data.get("monthly_rent")
        if monthly_rent is None:
            monthly_rent = unit.get("rentAmount")
        return {
            "first_name": data["first_name"].strip(),
            "last_name": data["last_name"].strip(),
            "email": data["email"],
            "phone": data["phone"].strip(),
            "id_number": data["id_number"].strip(),
            "emergency_contact_name": data.get("emergency_contact_name", ""),
            "emergency_contact_phone": data.get("emergency_contact_phone", ""),
            "unit_id": data["unit_id"],
            "property_id": unit.get("propertyId") or "",
            "lease_start_date": data["lease_start_date"].isoformat(),
            "lease_end_date": data["lease_end_date"].isoformat() if data.get("lease_end_date") else "",
            "security_deposit": as_number(data["security_deposit"]),
            "monthly_rent": as_number(monthly_rent),
            "status": data["status"],
            "notes": data.get("notes", ""),
        }


class LandlordMaintenanceForm(forms.Form):
    property_id = forms.ChoiceField(label="Property", error_messages={"required": "Please select a property"})
    unit_id = forms.ChoiceField(label="Unit", error_messages={"required": "Please select a unit"})
    title = forms.CharField(max_length=100, error_messages={"required": "Request title is required"})
    description = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 4}),
        error_messages={"required": "Description is required"},
    )
    priority = forms.ChoiceField(choices=MAINTENANCE_PRIORITY_CHOICES, initial="medium")
    category = forms.ChoiceField(choices=LANDLORD_CATEGORY_CHOICES, initial="general")
    tenant_name = forms.CharField(max_length=150, required=False)
    tenant_phone = forms.CharField(max_length=20, required=False)
    tenant_email = forms.CharField(max_length=254, required=False)
    reported_date = forms.DateField(
        widget=forms.DateInput(attrs={"type": "date"}),
        error_messages={"required": "Reported date is required"},
    )
    notes = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)

    def __init__(self, *args, properties=None, units=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["property_id"].choices = record_choices(
            properties, lambda prop: prop.get("name") or prop.get("id"), "Select a property"
        )
        self.fields["unit_id"].choices = record_choices(units, unit_label, "Select a unit")
        self.fields["reported_date"].initial = timezone.localdate
        apply_css_classes(self)

    def clean_tenant_email(self):
        return clean_optional_email(self.cleaned_data.get("tenant_email"))

    def to_payload(self):
        data = dict(self.cleaned_data)
        data["reported_date"] = data["reported_date"].isoformat()
        return data


class ImageUploadForm(forms.Form):
    images = MultipleImageField(label="Images")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        apply_css_classes(self)
