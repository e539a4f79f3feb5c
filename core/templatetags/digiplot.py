from django import template
from django.conf import settings

from ..utils import data_helpers

register = template.Library()


@register.filter
def currency(amount):
    return data_helpers.format_currency(amount, settings.DIGIPLOT["CURRENCY"])


@register.filter
def date_display(value, fmt=None):
    return data_helpers.format_date(value, fmt)


@register.filter
def status_color(status, kind="general"):
    return data_helpers.status_color(status, kind)


@register.filter
def full_name(user):
    return data_helpers.full_name(user)


@register.filter
def get_item(mapping, key):
    if not mapping:
        return None
    return mapping.get(key)


@register.simple_tag(takes_context=True)
def page_url(context, page):
    """Current query string with ``page`` replaced."""
    query = context["request"].GET.copy()
    query["page"] = page
    return f"?{query.urlencode()}"
