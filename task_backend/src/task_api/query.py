from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import InvalidFilterError
from .pagination import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    normalize_page,
    normalize_per_page,
    page_offset,
    parse_int64,
)

TABLE = "tasks"
SELECT_ALL = f"SELECT * FROM {TABLE}"

# Upper bound used when the client leaves a timestamp range open.
MAX_TIMESTAMP = "9999999999999"

# Defaults filled in by the HTTP layer before a search. Empty values mean
# "leave the key out".
SEARCH_DEFAULTS: Dict[str, str] = {
    "page": str(DEFAULT_PAGE),
    "perPage": str(DEFAULT_PER_PAGE),
    "dueByFrom": "-1",
    "addedOnFrom": "-1",
    "dueByTo": MAX_TIMESTAMP,
    "addedOnTo": MAX_TIMESTAMP,
    "id": "",
    "status": "",
}


# PUBLIC_INTERFACE
class FilterKey(str, Enum):
    """Search keys that translate into a WHERE predicate."""

    ID = "id"
    STATUS = "status"
    ADDED_ON_FROM = "addedOnFrom"
    ADDED_ON_TO = "addedOnTo"
    DUE_BY_FROM = "dueByFrom"
    DUE_BY_TO = "dueByTo"

    @property
    def column(self) -> str:
        name = self.value
        if name.endswith("From"):
            return name[: -len("From")]
        if name.endswith("To"):
            return name[: -len("To")]
        return name

    @property
    def operator(self) -> str:
        if self.value.endswith("From"):
            return ">="
        if self.value.endswith("To"):
            return "<="
        return "="

    @property
    def predicate(self) -> str:
        return f"{self.column} {self.operator} ?"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Filter:
    """A single typed search predicate."""

    key: FilterKey
    value: Union[int, str]

    @classmethod
    def parse(cls, key: FilterKey, raw: str) -> "Filter":
        """
        Convert a raw query-string value to the column's type.

        Raises:
            InvalidFilterError: if a numeric key carries a value that is not
                a 64-bit integer.
        """
        if key is FilterKey.STATUS:
            return cls(key, raw)
        value = parse_int64(raw)
        if value is None:
            raise InvalidFilterError(key.value, raw)
        return cls(key, value)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class SearchQuery:
    """Parameterized SQL statement ready for execution."""

    sql: str
    params: Tuple[Union[int, str], ...]


# PUBLIC_INTERFACE
def parse_filters(params: Mapping[str, str]) -> List[Filter]:
    """
    Build typed filters from a raw search map.

    Keys outside FilterKey (including page/perPage) are skipped.
    """
    known = {k.value: k for k in FilterKey}
    filters: List[Filter] = []
    for name, raw in params.items():
        key = known.get(name)
        if key is None:
            continue
        filters.append(Filter.parse(key, raw))
    return filters


# PUBLIC_INTERFACE
def build_search_query(filters: Iterable[Filter], page: int, per_page: int) -> SearchQuery:
    """
    Translate filters into `SELECT * FROM tasks [WHERE ...] LIMIT ? OFFSET ?`.

    Predicates are AND-ed together. Values are never formatted into the SQL
    text; they are returned as bound parameters in statement order.
    """
    clauses: List[str] = []
    values: List[Union[int, str]] = []
    for f in filters:
        clauses.append(f.key.predicate)
        values.append(f.value)

    where_sql = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    sql = f"{SELECT_ALL}{where_sql} LIMIT ? OFFSET ?"
    return SearchQuery(sql=sql, params=(*values, per_page, page_offset(page, per_page)))


# PUBLIC_INTERFACE
def search_query_from_params(params: Mapping[str, str]) -> SearchQuery:
    """Parse a raw search map, normalize its pagination and build the statement."""
    page = normalize_page(params.get("page"))
    per_page = normalize_per_page(params.get("perPage"))
    return build_search_query(parse_filters(params), page, per_page)


# PUBLIC_INTERFACE
def with_search_defaults(params: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """
    Fill in SEARCH_DEFAULTS for supported keys missing from params.

    Unsupported keys are dropped, and keys whose final value is empty are
    left out.
    """
    merged: Dict[str, str] = {}
    for key, default in SEARCH_DEFAULTS.items():
        value = params.get(key)
        if value is None or value == "":
            value = default
        if value != "":
            merged[key] = value
    return merged
