"""
Row filtering.

Filtering is a pure function over rows already loaded from the store, so it
can be tested without a database. A row is anything with a ``data`` mapping
(column name to raw value) and an ``is_reviewed`` flag. The three filter
axes combine with AND and an unset axis matches every row.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar

from csvreview.errors import InvalidFilterSyntax, InvalidInput

R = TypeVar("R")

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


def _contains(value: Any, needle: str) -> bool:
    return needle in str(value).lower()


@dataclass(frozen=True)
class RowFilter:
    reviewed_only: Optional[bool] = None
    search_term: Optional[str] = None
    column_filters: Optional[Mapping[str, Any]] = None

    def matches(self, data: Mapping[str, Any], is_reviewed: bool) -> bool:
        if self.reviewed_only is not None and bool(is_reviewed) != self.reviewed_only:
            return False

        if self.search_term:
            needle = self.search_term.lower()
            if not any(value is not None and _contains(value, needle) for value in data.values()):
                return False

        if self.column_filters:
            for column, wanted in self.column_filters.items():
                # Falsy filter values place no constraint on the column
                if not wanted:
                    continue
                if not _contains(data.get(column) or "", str(wanted).lower()):
                    return False

        return True


def filter_rows(rows: Iterable[R], row_filter: RowFilter) -> List[R]:
    """Return the rows matching ``row_filter``, keeping their order"""
    return [row for row in rows if row_filter.matches(row.data, row.is_reviewed)]


def parse_column_filters(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse the ``columnFilters`` query value.

    Args:
        raw: JSON object text mapping column names to filter values

    Returns:
        The parsed mapping, or None when no filter was given

    Raises:
        InvalidFilterSyntax: If the value is not valid JSON or not an object
    """
    if raw is None or not raw.strip():
        return None
    try:
        filters = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidFilterSyntax(f"columnFilters is not valid JSON: {e.msg}")
    if not isinstance(filters, dict):
        raise InvalidFilterSyntax()
    return filters


def parse_reviewed_only(raw: Optional[str]) -> Optional[bool]:
    """
    Parse the ``reviewedOnly`` query value.

    A missing or blank value leaves the review axis unset.

    Raises:
        InvalidInput: If the value is neither true nor false
    """
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidInput("reviewedOnly must be true or false")
