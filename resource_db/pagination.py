from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

DEFAULT_ITEMS_PER_PAGE = 10

Items = Union[pd.DataFrame, Sequence[Dict[str, Any]]]


@dataclass(frozen=True)
class Page:
    items: List[Dict[str, Any]] = field(default_factory=list)
    page_number: int = 1
    page_size: int = DEFAULT_ITEMS_PER_PAGE
    total_items: int = 0
    total_pages: int = 1

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def start_index(self) -> int:
        return (self.page_number - 1) * self.page_size


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default


def total_pages_for(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(max(0, total_items) / page_size))


def clamp_page(page_number: object, total_pages: int) -> int:
    return max(1, min(_as_int(page_number, 1), total_pages))


def paginate(records: Items, page_number: object = 1, page_size: object = DEFAULT_ITEMS_PER_PAGE) -> Page:
    size = _as_int(page_size, DEFAULT_ITEMS_PER_PAGE)
    if size < 1:
        size = DEFAULT_ITEMS_PER_PAGE
    total_items = len(records)
    total_pages = total_pages_for(total_items, size)
    current = clamp_page(page_number, total_pages)
    start = (current - 1) * size

    if isinstance(records, pd.DataFrame):
        chunk = records.iloc[start : start + size]
        items = chunk.to_dict(orient="records") if not chunk.empty else []
    else:
        items = [dict(r) for r in list(records)[start : start + size]]

    return Page(items=items, page_number=current, page_size=size, total_items=total_items, total_pages=total_pages)


def page_window(page: Page, radius: int = 2) -> List[int]:
    """Page numbers to show around the current one in pagination controls."""
    radius = max(0, radius)
    first = max(1, page.page_number - radius)
    last = min(page.total_pages, page.page_number + radius)
    return list(range(first, last + 1))


def page_payload(page: Page) -> Dict[str, Any]:
    return {
        "items": page.items,
        "page": page.page_number,
        "page_size": page.page_size,
        "total_items": page.total_items,
        "total_pages": page.total_pages,
    }
