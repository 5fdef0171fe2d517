from __future__ import annotations

from typing import Optional

DEFAULT_PAGE = 0
DEFAULT_PER_PAGE = 10

# Range of a SQLite INTEGER.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_int64(value: Optional[str]) -> Optional[int]:
    """Parse `value` as a signed 64-bit integer; None when missing, malformed or out of range."""
    if value is None:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    if not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


# PUBLIC_INTERFACE
def normalize_page(value: Optional[str]) -> int:
    """
    Return a zero-indexed page number parsed from user input.

    Missing, unparseable, out-of-range or negative input falls back to
    DEFAULT_PAGE.
    """
    page = parse_int64(value)
    if page is None or page < 0:
        return DEFAULT_PAGE
    return page


# PUBLIC_INTERFACE
def normalize_per_page(value: Optional[str]) -> int:
    """
    Return a page size parsed from user input.

    Missing, unparseable, out-of-range or non-positive input falls back to
    DEFAULT_PER_PAGE.
    """
    per_page = parse_int64(value)
    if per_page is None or per_page <= 0:
        return DEFAULT_PER_PAGE
    return per_page


# PUBLIC_INTERFACE
def page_offset(page: int, per_page: int) -> int:
    """Return `page * per_page`, clamped to INT64_MAX so it can always be bound."""
    return min(page * per_page, INT64_MAX)
