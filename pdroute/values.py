"""Typed access to the values of one input row.

A row maps column names to Python values. The column descriptions come
from :func:`pdroute.columns.fetch_column_info`, which records whether a
column exists and what SQL type it has.
"""

from __future__ import annotations

import calendar
import datetime
import json
from collections.abc import Mapping
from typing import Any

from pdroute.columns import ColumnInfo, column_found
from pdroute.errors import DataError

_UINT32_MAX = 2**32 - 1

_ANY_INTEGER = frozenset({"SMALLINT", "INTEGER", "BIGINT"})
_ANY_NUMERICAL = _ANY_INTEGER | {"REAL", "FLOAT", "NUMERIC"}
_ARRAY_KINDS = (list, tuple, set, frozenset)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _value(row: Mapping[str, Any], info: ColumnInfo) -> Any:
    return row.get(info.name)


def _not_null(row: Mapping[str, Any], info: ColumnInfo) -> Any:
    value = _value(row, info)
    if value is None:
        raise DataError(f"Unexpected Null value in column {info.name}")
    return value


def interval_to_seconds(value: datetime.timedelta) -> int:
    """Whole seconds of an interval; fractions of a second are dropped."""
    if not isinstance(value, datetime.timedelta):
        raise TypeError(f"expected a timedelta, got {type(value).__name__}")
    return value.days * 86400 + value.seconds


def timestamp_to_seconds(value: datetime.datetime) -> int:
    """Seconds since the epoch of a timestamp read as UTC wall time."""
    if not isinstance(value, datetime.datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    return calendar.timegm(value.timetuple())


def _big_int(row: Mapping[str, Any], info: ColumnInfo) -> int:
    value = _not_null(row, info)
    if info.sql_type not in _ANY_INTEGER:
        raise DataError(
            f"Unexpected type in column type of {info.name}. Expected ANY-INTEGER"
        )
    return int(value)


def _float8(row: Mapping[str, Any], info: ColumnInfo) -> float:
    value = _not_null(row, info)
    if info.sql_type not in _ANY_NUMERICAL:
        raise DataError(
            f"Unexpected type in column type of {info.name}. Expected ANY-NUMERICAL"
        )
    return float(value)


def get_anyinteger(row: Mapping[str, Any], info: ColumnInfo, opt_value: int) -> int:
    """The integer in the column, or ``opt_value`` when the column is absent."""
    return _big_int(row, info) if column_found(info) else opt_value


def get_anynumerical(
    row: Mapping[str, Any], info: ColumnInfo, opt_value: float
) -> float:
    """The number in the column, or ``opt_value`` when the column is absent."""
    return _float8(row, info) if column_found(info) else opt_value


def get_interval(row: Mapping[str, Any], info: ColumnInfo, opt_value: int) -> int:
    """Seconds of the interval in the column, or ``opt_value``.

    Negative results are rejected.
    """
    if column_found(info):
        raw = _not_null(row, info)
        if info.sql_type != "INTERVAL" or not isinstance(raw, datetime.timedelta):
            raise DataError(
                f"Unexpected type value in column '{info.name}'. Expected INTERVALOID"
            )
        value = interval_to_seconds(raw)
    else:
        value = opt_value
    if value < 0:
        raise DataError(f"Unexpected negative value in column '{info.name}'")
    return value


def get_timestamp(row: Mapping[str, Any], info: ColumnInfo, opt_value: int) -> int:
    """Epoch seconds of the timestamp in the column, or ``opt_value``."""
    if not column_found(info):
        return opt_value
    raw = _not_null(row, info)
    if info.sql_type != "TIMESTAMP" or not isinstance(raw, datetime.datetime):
        raise DataError(
            f"Unexpected type value in column '{info.name}'. Expected 1114"
        )
    return timestamp_to_seconds(raw)


def get_char(row: Mapping[str, Any], info: ColumnInfo, opt_value: str) -> str:
    """The single character in a CHAR column.

    A null value gives ``opt_value`` unless the column is strict.
    """
    if info.sql_type != "CHAR":
        raise DataError(
            f"Unexpected type in column type of {info.name}. Expected CHAR"
        )
    value = _value(row, info)
    if value is None:
        if info.strict:
            raise DataError(f"Unexpected Null value in column {info.name}")
        return opt_value
    text = str(value)
    return text[0] if text else opt_value


def get_jsonb(row: Mapping[str, Any], info: ColumnInfo) -> str:
    """The JSON text in the column; ``"{}"`` when it is absent or null."""
    if not column_found(info):
        return "{}"
    value = _value(row, info)
    if value is None:
        return "{}"
    if isinstance(value, (str, bytes)):
        return value.decode() if isinstance(value, bytes) else value
    return json.dumps(value)


def _integer_array(value: Any) -> list[int]:
    """Elements of a one-dimensional integer array; empty arrays allowed."""
    if not isinstance(value, _ARRAY_KINDS):
        raise DataError("Expected array of ANY-INTEGER")
    elements = list(value)
    if not elements:
        return []
    if any(isinstance(e, _ARRAY_KINDS) for e in elements):
        raise DataError("One dimension expected")
    if any(e is not None and not _is_int(e) for e in elements):
        raise DataError("Expected array of ANY-INTEGER")
    if any(e is None for e in elements):
        raise DataError("NULL value found in Array!")
    return [int(e) for e in elements]


def get_any_positive_array(row: Mapping[str, Any], info: ColumnInfo) -> list[int]:
    """The array in the column; every element must be zero or more."""
    if not column_found(info):
        return []
    value = _value(row, info)
    if value is None:
        return []
    data = _integer_array(value)
    if any(e < 0 for e in data):
        raise DataError(f"Unexpected negative value in array '{info.name}'")
    return data


def get_uint_array(row: Mapping[str, Any], info: ColumnInfo) -> list[int]:
    """The array in the column, each element taken as an unsigned 32-bit value."""
    value = _value(row, info) if column_found(info) else None
    if value is None:
        return []
    return [e & _UINT32_MAX for e in _integer_array(value)]


def get_uint_unordered_set(row: Mapping[str, Any], info: ColumnInfo) -> set[int]:
    """The distinct elements of the array; each must fit in 32 unsigned bits."""
    value = _value(row, info) if column_found(info) else None
    if value is None:
        return set()
    data = _integer_array(value)
    if any(e < 0 or e > _UINT32_MAX for e in data):
        raise DataError("Illegal value found on array")
    return set(data)