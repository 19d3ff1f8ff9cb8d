"""Page/page_size/offset handling for list endpoints.

Query values arrive as raw strings. Anything unusable falls back to the
defaults instead of failing the request, and out-of-range pages produce an
empty slice.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

T = TypeVar("T")

# At most 18 digits; int() rejects very long digit strings
_LEADING_INT = re.compile(r"\s*([+-]?\d{1,18})")


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int
    offset: int
    limit: int


@dataclass(frozen=True)
class Page(Generic[T]):
    data: list[T]
    total: int
    total_pages: int


def _leading_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))


def _positive_int(raw: Optional[str]) -> Optional[int]:
    value = _leading_int(raw)
    if value is None or value <= 0:
        return None
    return value


def _non_negative_int(raw: Optional[str]) -> Optional[int]:
    value = _leading_int(raw)
    if value is None or value < 0:
        return None
    return value


def parse_pagination(
    raw_page: Optional[str],
    raw_page_size: Optional[str],
    raw_offset: Optional[str] = None,
) -> PageRequest:
    """Sanitize raw pagination parameters.

    ``raw_page_size`` is the ``page_size`` parameter, or ``limit`` when the
    caller only sent that. An explicit offset only matters when no page was
    sent; the returned offset is always recomputed from the page.
    """
    page_size = _positive_int(raw_page_size) or DEFAULT_PAGE_SIZE
    page_size = max(1, min(page_size, MAX_PAGE_SIZE))

    page = _positive_int(raw_page) or DEFAULT_PAGE

    if not raw_page:
        offset = _non_negative_int(raw_offset)
        if offset is not None:
            page = offset // page_size + 1

    return PageRequest(
        page=page,
        page_size=page_size,
        offset=(page - 1) * page_size,
        limit=page_size,
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    total = len(items)
    total_pages = 0 if total == 0 else math.ceil(total / page_size)
    start = (page - 1) * page_size
    return Page(data=list(items[start:start + page_size]), total=total, total_pages=total_pages)
