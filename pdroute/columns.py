"""Column descriptions for tabular input and checks of their SQL types."""

from __future__ import annotations

import datetime
import decimal
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from pdroute.errors import DataError

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ColumnType(Enum):
    """The kind of value a column is expected to hold.

    Several names are aliases of a base kind and share its type check.
    """

    ANY_INTEGER = "any-integer"
    ANY_UINT = "any-uint"
    TINTERVAL = "tinterval"
    ANY_NUMERICAL = "any-numerical"
    TEXT = "text"
    CHAR1 = "char1"
    ANY_INTEGER_ARRAY = "any-integer-array"
    ANY_POSITIVE_ARRAY = "any-positive-array"
    POSITIVE_INTEGER = "positive-integer"
    INTEGER = "integer"
    JSONB = "jsonb"
    INTEGER_ARRAY = "integer-array"
    ANY_UINT_ARRAY = "any-uint-array"
    TIMESTAMP = "timestamp"
    INTERVAL = "interval"

    # aliases
    ID = "any-integer"
    MATRIX_INDEX = "any-integer"
    TTIMESTAMP = "any-integer"
    IDX = "any-uint"
    PAMOUNT = "any-uint"
    COORDINATE = "any-numerical"
    SPEED = "any-numerical"


@dataclass(frozen=True)
class ColumnInfo:
    """Describes one expected column.

    ``position`` and ``sql_type`` are filled in once the column is found.
    """

    name: str
    etype: ColumnType
    strict: bool = False
    position: int | None = None
    sql_type: str | None = None


_ALIASES = {
    "INT2": "SMALLINT",
    "INT4": "INTEGER",
    "INT": "INTEGER",
    "INT8": "BIGINT",
    "FLOAT4": "REAL",
    "FLOAT8": "FLOAT",
    "DOUBLE PRECISION": "FLOAT",
    "BPCHAR": "CHAR",
    "CHARACTER": "CHAR",
    "TIMESTAMP WITHOUT TIME ZONE": "TIMESTAMP",
    "TIMESTAMP WITH TIME ZONE": "TIMESTAMPTZ",
    "INT2[]": "SMALLINT[]",
    "INT4[]": "INTEGER[]",
    "INT[]": "INTEGER[]",
    "INT8[]": "BIGINT[]",
}

_ANY_INTEGER = frozenset({"SMALLINT", "INTEGER", "BIGINT"})
_ANY_NUMERICAL = _ANY_INTEGER | {"REAL", "FLOAT", "NUMERIC"}
_SMALL_INTEGER = frozenset({"SMALLINT", "INTEGER"})
_ANY_INTEGER_ARRAY = frozenset({"SMALLINT[]", "INTEGER[]", "BIGINT[]"})
_INTEGER_ARRAY = frozenset({"SMALLINT[]", "INTEGER[]"})

_ACCEPTED: dict[ColumnType, tuple[frozenset[str], str]] = {
    ColumnType.ANY_INTEGER: (_ANY_INTEGER, "ANY-INTEGER"),
    ColumnType.TINTERVAL: (_ANY_INTEGER, "ANY-INTEGER"),
    ColumnType.ANY_UINT: (_ANY_INTEGER, "ANY-INTEGER"),
    ColumnType.ANY_NUMERICAL: (_ANY_NUMERICAL, "ANY-NUMERICAL"),
    ColumnType.TEXT: (frozenset({"TEXT"}), "TEXT"),
    ColumnType.CHAR1: (frozenset({"CHAR"}), "TEXT"),
    ColumnType.ANY_INTEGER_ARRAY: (_ANY_INTEGER_ARRAY, "ANY-INTEGER-ARRAY"),
    ColumnType.ANY_POSITIVE_ARRAY: (_ANY_INTEGER_ARRAY, "ANY-INTEGER-ARRAY"),
    ColumnType.POSITIVE_INTEGER: (_SMALL_INTEGER, "SMALLINT or INTEGER"),
    ColumnType.INTEGER: (_SMALL_INTEGER, "SMALLINT or INTEGER"),
    ColumnType.JSONB: (frozenset({"JSONB"}), "JSONB"),
    ColumnType.INTEGER_ARRAY: (_INTEGER_ARRAY, "INTEGER-ARRAY"),
    ColumnType.ANY_UINT_ARRAY: (_INTEGER_ARRAY, "INTEGER-ARRAY"),
    ColumnType.TIMESTAMP: (frozenset({"TIMESTAMP"}), "TIMESTAMP"),
    ColumnType.INTERVAL: (frozenset({"INTERVAL"}), "INTERVAL"),
}


def _normalize(sql_type: str) -> str:
    name = " ".join(sql_type.split()).upper()
    return _ALIASES.get(name, name)


def column_found(info: ColumnInfo) -> bool:
    """True when the column was located in the input."""
    return info.position is not None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _fits_int32(value: int) -> bool:
    return _INT32_MIN <= value <= _INT32_MAX


def _infer(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "BOOLEAN"
    if _is_int(value):
        return "INTEGER" if _fits_int32(value) else "BIGINT"
    if isinstance(value, float):
        return "FLOAT"
    if isinstance(value, decimal.Decimal):
        return "NUMERIC"
    if isinstance(value, str):
        return "CHAR" if len(value) == 1 else "TEXT"
    if isinstance(value, datetime.datetime):
        return "TIMESTAMP" if value.tzinfo is None else "TIMESTAMPTZ"
    if isinstance(value, datetime.timedelta):
        return "INTERVAL"
    if isinstance(value, Mapping):
        return "JSONB"
    if isinstance(value, (list, tuple, set, frozenset)):
        if all(_is_int(e) for e in value):
            return "INTEGER[]" if all(_fits_int32(e) for e in value) else "BIGINT[]"
        return "ARRAY"
    return type(value).__name__.upper()


def infer_column_types(row: Mapping[str, Any]) -> dict[str, str | None]:
    """Guess the SQL type of every column of a row from its Python value.

    A ``None`` value gives no type.
    """
    return {name: _infer(value) for name, value in row.items()}


def _check_type(info: ColumnInfo) -> None:
    try:
        accepted, expected = _ACCEPTED[info.etype]
    except KeyError:
        raise DataError(
            f"Case not found in column '{info.name}' Please inform the developers"
        ) from None
    if info.sql_type not in accepted:
        raise DataError(
            f"Unexpected type in column '{info.name}'. Expected {expected}"
        )


def fetch_column_info(
    column_types: Mapping[str, str | None], info: Iterable[ColumnInfo]
) -> list[ColumnInfo]:
    """Locate each described column and check its type.

    ``column_types`` maps column names, in column order, to SQL type names.
    Returns the descriptions with ``position`` and ``sql_type`` filled in
    for the columns that exist.
    """
    positions = {name: pos for pos, name in enumerate(column_types)}
    result = []
    for coldata in info:
        position = positions.get(coldata.name)
        if position is None:
            if coldata.strict:
                raise DataError(f"Column '{coldata.name}' not Found")
            result.append(replace(coldata, position=None, sql_type=None))
            continue
        sql_type = column_types[coldata.name]
        if sql_type is None:
            raise DataError(f"Type of column '{coldata.name}' not Found")
        found = replace(coldata, position=position, sql_type=_normalize(sql_type))
        _check_type(found)
        result.append(found)
    return result