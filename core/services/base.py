from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, ClassVar, Mapping

from django.conf import settings

from ..api.client import ApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """One page of a list endpoint, with records already normalized."""

    items: list[dict[str, Any]]
    total: int
    page: int
    total_pages: int

    @classmethod
    def empty(cls) -> "Page":
        return cls(items=[], total=0, page=1, total_pages=1)

    @classmethod
    def from_data(
        cls,
        data: Any,
        key: str,
        normalizer: Callable[[dict[str, Any]], dict[str, Any] | None] | None = None,
    ) -> "Page":
        if isinstance(data, list):
            raw_items, meta = data, {}
        else:
            meta = data or {}
            raw_items = meta.get(key) or meta.get("items") or []
        items = [normalizer(item) for item in raw_items] if normalizer else list(raw_items)
        items = [item for item in items if item]
        return cls(
            items=items,
            total=int(meta.get("total", len(items)) or 0),
            page=int(meta.get("page", 1) or 1),
            total_pages=int(meta.get("totalPages", meta.get("total_pages", 1)) or 1),
        )


def parse_positive_int(raw: Any, default: int | None) -> int | None:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class ListFilters:
    """Value object holding pagination and filter parameters for list calls.

    Subclasses add their own fields; ``PARAM_NAMES`` maps a field to the
    query-string name the API expects when it differs from the field name.
    """

    page: int = 1
    limit: int = 10
    search: str = ""

    PARAM_NAMES: ClassVar[dict[str, str]] = {}
    INT_FIELDS: ClassVar[frozenset[str]] = frozenset({"page", "limit"})

    @classmethod
    def from_query(cls, data: Mapping[str, Any], **overrides: Any) -> "ListFilters":
        """Return validated filter parameters from raw request data."""
        default_limit = settings.DIGIPLOT["PAGE_SIZE"]
        values: dict[str, Any] = {}
        for field in fields(cls):
            raw = data.get(field.name)
            if raw is None:
                raw = data.get(cls.PARAM_NAMES.get(field.name, field.name))
            if field.name == "page":
                values["page"] = parse_positive_int(raw, 1)
            elif field.name == "limit":
                values["limit"] = parse_positive_int(raw, default_limit)
            elif field.name in cls.INT_FIELDS:
                values[field.name] = parse_positive_int(raw, None)
            else:
                values[field.name] = (raw or "").strip() if isinstance(raw, str) or raw is None else raw
        values.update(overrides)
        return cls(**values)

    def to_params(self) -> dict[str, Any]:
        return {
            self.PARAM_NAMES.get(name, name): value
            for name, value in asdict(self).items()
            if value not in (None, "")
        }

    def as_dict(self) -> dict[str, Any]:
        """Current filter values keyed by field name, for re-rendering forms."""
        return asdict(self)


class ApiService:
    """Base class for services wrapping one backend resource."""

    def __init__(self, client: ApiClient):
        self.client = client
