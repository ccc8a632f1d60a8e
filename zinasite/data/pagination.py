"""
Pagination engine.

Both realization strategies share one window computation so a page from the
hosted backend (ranged retrieval) and a page sliced from the gateway's full
listing are identical for the same dataset.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 9
MAX_PAGE_SIZE = 24


@dataclass(frozen=True)
class PageWindow:
    """Zero-based offset plus limit for one page."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def last_index(self) -> int:
        """Inclusive end index, the form ranged queries expect."""
        return self.offset + self.limit - 1


def _parse_int(value: Any) -> int | None:
    """Leading-integer parse; None for anything non-numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def compute_window(page: Any = DEFAULT_PAGE, page_size: Any = DEFAULT_PAGE_SIZE) -> PageWindow:
    """
    Clamp (page, page_size) into a valid window. Never raises.

    page falls back to 1 when non-numeric and is at least 1.
    page_size falls back to 9 when non-numeric and is clamped to [1, 24].
    """
    p = _parse_int(page)
    size = _parse_int(page_size)
    p = DEFAULT_PAGE if p is None else max(1, p)
    size = DEFAULT_PAGE_SIZE if size is None else min(MAX_PAGE_SIZE, max(1, size))
    return PageWindow(page=p, page_size=size)


def slice_window(items: Sequence[T], window: PageWindow) -> Tuple[List[T], int]:
    """Materialize-then-slice: returns (items in window, total)."""
    total = len(items)
    return list(items[window.offset:window.offset + window.limit]), total
