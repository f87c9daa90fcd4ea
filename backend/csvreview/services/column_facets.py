"""Distinct value sets per column, used to populate filter dropdowns."""
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set


def build_column_facets(headers: Sequence[str], rows_data: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """
    Collect the sorted distinct non-empty values of every header column.

    Args:
        headers: Column names of the file
        rows_data: Row mappings of the whole (unfiltered) file

    Returns:
        Mapping of column name to sorted distinct values
    """
    seen: Dict[str, Set[str]] = {header: set() for header in headers}
    for data in rows_data:
        for header, values in seen.items():
            value = data.get(header)
            if value is None or value == "":
                continue
            values.add(str(value))
    return {header: sorted(values) for header, values in seen.items()}
