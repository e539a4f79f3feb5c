from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    """Previous/next state for a page of API results."""

    page: int
    total_pages: int
    total: int
    limit: int

    @classmethod
    def build(cls, page: int | None, total_pages: int | None, total: int | None, limit: int) -> "Pagination":
        pages = max(int(total_pages or 1), 1)
        current = min(max(int(page or 1), 1), pages)
        return cls(page=current, total_pages=pages, total=max(int(total or 0), 0), limit=max(int(limit), 1))

    @classmethod
    def from_page(cls, result, limit: int) -> "Pagination":
        return cls.build(result.page, result.total_pages, result.total, limit)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def previous_page(self) -> int:
        return max(self.page - 1, 1)

    @property
    def next_page(self) -> int:
        return min(self.page + 1, self.total_pages)

    @property
    def page_range(self) -> range:
        return range(1, self.total_pages + 1)

    @property
    def start_index(self) -> int:
        if not self.total:
            return 0
        return (self.page - 1) * self.limit + 1

    @property
    def end_index(self) -> int:
        return min(self.page * self.limit, self.total)

    @property
    def is_paginated(self) -> bool:
        return self.total_pages > 1
