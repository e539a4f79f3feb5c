import re

from django import forms

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LOOSE_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

MAX_IMAGE_SIZE = 5 * 1024 * 1024
MAX_IMAGES = 5


def apply_css_classes(form, overrides=None):
    """Give every widget the Bootstrap class the templates expect."""
    overrides = overrides or {}
    for name, field in form.fields.items():
        widget = field.widget
        if name in overrides:
            css_class = overrides[name]
        elif isinstance(widget, (forms.CheckboxSelectMultiple, forms.CheckboxInput)):
            css_class = "form-check-input"
        elif isinstance(widget, forms.Select):
            css_class = "form-select"
        else:
            css_class = "form-control"
        existing_class = widget.attrs.get("class", "")
        widget.attrs["class"] = f"{existing_class} {css_class}".strip()


def clean_optional_email(value, pattern=LOOSE_EMAIL_PATTERN):
    value = (value or "").strip()
    if value and not pattern.search(value):
        raise forms.ValidationError("Please enter a valid email address")
    return value


def as_number(value):
    """JSON-safe number for Decimal form values."""
    if value is None:
        return None
    return float(value)


class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleImageField(forms.ImageField):
    """Image field accepting several files, each checked by Pillow."""

    def __init__(self, *args, max_files=MAX_IMAGES, max_size=MAX_IMAGE_SIZE, **kwargs):
        self.max_files = max_files
        self.max_size = max_size
        kwargs.setdefault("widget", MultipleFileInput(attrs={"accept": "image/*"}))
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single_clean = super().clean
        if isinstance(data, (list, tuple)):
            files = [single_clean(item, initial) for item in data if item]
        elif data:
            files = [single_clean(data, initial)]
        else:
            files = []
        if self.required and not files:
            raise forms.ValidationError(self.error_messages["required"], code="required")
        if len(files) > self.max_files:
            raise forms.ValidationError(f"You can upload at most {self.max_files} images.")
        for upload in files:
            if upload.size > self.max_size:
                raise forms.ValidationError(
                    f"{upload.name} is larger than {self.max_size // (1024 * 1024)}MB."
                )
        return files
