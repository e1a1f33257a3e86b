from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    current_page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def paginate(items: Sequence[T], page: int, per_page: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice ``items`` for 1-based ``page``; out of range pages clamp to the nearest one."""
    if per_page < 1:
        raise ValueError("per_page must be positive")
    total_pages = max(1, math.ceil(len(items) / per_page))
    current = min(max(1, int(page)), total_pages)
    start = (current - 1) * per_page
    return Page(items=list(items[start:start + per_page]), current_page=current, total_pages=total_pages)
