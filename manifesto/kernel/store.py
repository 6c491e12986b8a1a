"""Pagination containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page:
    """Pagination metadata; page numbers are 1-based."""

    number: int = 0
    size: int = 0
    total: int = 0
    pages: int = 0


@dataclass
class Paginated(Generic[T]):
    """A page of items together with its metadata."""

    items: list[T] = field(default_factory=list)
    page: Page = field(default_factory=Page)
    empty: bool = True

    def has_next(self) -> bool:
        """Return True if a page follows the current one."""
        return self.page.number < self.page.pages

    def has_previous(self) -> bool:
        """Return True if a page precedes the current one."""
        return self.page.number > 1


@dataclass
class PaginationOptions:
    """Requested page number (1-based) and page size."""

    page: int = 1
    page_size: int = 0


def _truncating_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def new_paginated(items: list[T], page: int, size: int, total: int) -> Paginated[T]:
    """Build a paginated result, computing the page count by ceiling division."""
    items = list(items)
    pages = _truncating_div(total + size - 1, size) if size > 0 else 0
    return Paginated(
        items=items,
        page=Page(number=page, size=size, total=total, pages=pages),
        empty=not items,
    )