"""
SQL fragment helpers shared by the crud layer.

Both helpers are pure: they only assemble statement text and the matching
positional parameter list ($1, $2, ...). Executing the statement is left to
app.core.database.execute_sql.
"""

import enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.core.errors import BadRequestError


class FilterKind(str, enum.Enum):
    """
    Predicate emitted for a search filter.

    - MIN: column >= value
    - MAX: column <= value
    - FLAG: column > 0 when the filter is True, no predicate otherwise
    - CONTAINS: case-insensitive substring match; an empty string matches anything
    """
    MIN = "min"
    MAX = "max"
    FLAG = "flag"
    CONTAINS = "contains"


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of a partial UPDATE.

    Args:
        data: Fields to change, e.g. {"firstName": "Aliya", "age": 32}
        js_to_sql: External name -> column name for fields stored under a
            different name, e.g. {"firstName": "first_name"}

    Returns:
        ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Raises:
        BadRequestError: If data is empty
    """
    if not data:
        raise BadRequestError("No data")

    js_to_sql = js_to_sql or {}
    cols = [
        f'"{js_to_sql.get(name, name)}"=${idx}'
        for idx, name in enumerate(data, start=1)
    ]

    return ", ".join(cols), list(data.values())


def sql_for_filters(
    filters: Optional[Mapping[str, Any]],
    filter_columns: Mapping[str, Tuple[str, FilterKind]]
) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause of a search query.

    Predicates are emitted in the order of ``filter_columns`` and joined with
    AND. Filters that are missing or None (or an empty
    CONTAINS string) contribute nothing.

    Args:
        filters: Search values keyed by filter name, e.g. {"minSalary": 2}
        filter_columns: Filter name -> (column, kind),
            e.g. {"minSalary": ("j.salary", FilterKind.MIN)}

    Returns:
        (" WHERE j.salary >= $1", [2]), or ("", []) when nothing applies

    Raises:
        BadRequestError: If a MIN filter exceeds the MAX filter on the same column
    """
    filters = filters or {}
    _check_bounds(filters, filter_columns)

    where_expressions: List[str] = []
    values: List[Any] = []

    for name, (column, kind) in filter_columns.items():
        value = filters.get(name)
        if value is None:
            continue

        if kind == FilterKind.FLAG:
            if value is True:
                where_expressions.append(f"{column} > 0")
        elif kind == FilterKind.CONTAINS:
            if value == "":
                continue
            values.append(f"%{value}%")
            where_expressions.append(f"LOWER({column}) LIKE LOWER(${len(values)})")
        elif kind == FilterKind.MIN:
            values.append(value)
            where_expressions.append(f"{column} >= ${len(values)}")
        elif kind == FilterKind.MAX:
            values.append(value)
            where_expressions.append(f"{column} <= ${len(values)}")

    if not where_expressions:
        return "", values

    return " WHERE " + " AND ".join(where_expressions), values


def _check_bounds(
    filters: Mapping[str, Any],
    filter_columns: Mapping[str, Tuple[str, FilterKind]]
) -> None:
    """Reject a lower bound greater than the upper bound on the same column."""
    lower: Dict[str, Tuple[str, Any]] = {}
    upper: Dict[str, Tuple[str, Any]] = {}

    for name, (column, kind) in filter_columns.items():
        value = filters.get(name)
        if value is None:
            continue
        if kind == FilterKind.MIN:
            lower[column] = (name, value)
        elif kind == FilterKind.MAX:
            upper[column] = (name, value)

    for column, (min_name, min_value) in lower.items():
        if column in upper:
            max_name, max_value = upper[column]
            if min_value > max_value:
                raise BadRequestError(f"{min_name} cannot be greater than {max_name}")
