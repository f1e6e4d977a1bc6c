"""Fixed-size page windows over a filtered listing collection."""

import math
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel

from protea.utils.config import AppConfig

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of results."""
    items: list[T]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def clamp_page(current_page: int, total_pages: int) -> int:
    return max(1, min(current_page, total_pages))


def paginate(items: Sequence[T], page_size: int = AppConfig.LISTINGS_PAGE_SIZE, current_page: int = 1) -> Page[T]:
    """Slice ``items`` into the page ``current_page`` after clamping it.

    Raises ValueError for a non-positive page size.
    """
    total_pages = total_pages_for(len(items), page_size)
    page = clamp_page(current_page, total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total_items=len(items),
        total_pages=total_pages,
        current_page=page,
        page_size=page_size,
    )


class Paginator:
    """Current page for a view; re-clamped whenever the item set changes."""

    def __init__(self, page_size: int = AppConfig.LISTINGS_PAGE_SIZE):
        total_pages_for(0, page_size)
        self.page_size = page_size
        self.current_page = 1

    def page(self, items: Sequence[T]) -> Page[T]:
        result = paginate(items, self.page_size, self.current_page)
        self.current_page = result.current_page
        return result

    def go_to(self, page_number: int, items: Sequence[T]) -> Page[T]:
        self.current_page = page_number
        return self.page(items)

    def next(self, items: Sequence[T]) -> Page[T]:
        return self.go_to(self.current_page + 1, items)

    def previous(self, items: Sequence[T]) -> Page[T]:
        return self.go_to(self.current_page - 1, items)

    def reset(self) -> None:
        self.current_page = 1
