from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from evalboard.errors import RenderError


class _HasCategory(Protocol):
    @property
    def category(self) -> str: ...


T = TypeVar("T", bound=_HasCategory)


@dataclass(frozen=True)
class Page(Generic[T]):
    index: int
    categories: tuple[str, ...]
    data: tuple[T, ...]
    range_start: int  # 1-based, inclusive
    range_end: int  # 1-based, inclusive
    total_categories: int


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)


def paginate(categories: Sequence[str], data: Sequence[T], page_size: int) -> list[Page[T]]:
    """
    Split ordered categories into pages of page_size. Each page gets every
    item whose category is on it, in the original item order.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise RenderError(f"page_size must be a positive integer, got {page_size!r}")

    total = len(categories)
    pages: list[Page[T]] = []
    for i in range(page_count(total, page_size)):
        start = i * page_size
        end = min(start + page_size, total)
        cats = tuple(categories[start:end])
        on_page = set(cats)
        pages.append(
            Page(
                index=i,
                categories=cats,
                data=tuple(d for d in data if d.category in on_page),
                range_start=start + 1,
                range_end=end,
                total_categories=total,
            )
        )
    return pages
