"""Read whole tables of input rows into solver records.

A table is an iterable of rows. Each row maps column names to Python
values. Column types are inferred from the values: the first value in a
column that is not ``None`` decides its SQL type. A column that holds
only ``None`` takes the type its description expects.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pdroute.base_matrix import MatrixCell
from pdroute.columns import (
    ColumnInfo,
    ColumnType,
    fetch_column_info,
    infer_column_types,
)
from pdroute.fetchers import (
    OrderRow,
    TimeMultiplier,
    VehicleRow,
    VroomBreak,
    VroomJob,
    VroomShipment,
    VroomVehicle,
    fetch_breaks,
    fetch_jobs,
    fetch_orders,
    fetch_pd_matrix,
    fetch_shipments,
    fetch_time_multipliers,
    fetch_timewindows,
    fetch_vehicles,
    fetch_vroom_matrix,
    fetch_vroom_vehicles,
)
from pdroute.vroom_matrix import VroomMatrixCell

T = TypeVar("T")
Row = Mapping[str, Any]
Rows = Iterable[Row]
Fetcher = Callable[[Row, Sequence[ColumnInfo], bool], T]

_CANONICAL: dict[ColumnType, str] = {
    ColumnType.ANY_INTEGER: "BIGINT",
    ColumnType.TINTERVAL: "BIGINT",
    ColumnType.ANY_UINT: "BIGINT",
    ColumnType.ANY_NUMERICAL: "FLOAT",
    ColumnType.TEXT: "TEXT",
    ColumnType.CHAR1: "CHAR",
    ColumnType.ANY_INTEGER_ARRAY: "BIGINT[]",
    ColumnType.ANY_POSITIVE_ARRAY: "BIGINT[]",
    ColumnType.POSITIVE_INTEGER: "INTEGER",
    ColumnType.INTEGER: "INTEGER",
    ColumnType.JSONB: "JSONB",
    ColumnType.INTEGER_ARRAY: "INTEGER[]",
    ColumnType.ANY_UINT_ARRAY: "INTEGER[]",
    ColumnType.TIMESTAMP: "TIMESTAMP",
    ColumnType.INTERVAL: "INTERVAL",
}


def _column_types(
    rows: Sequence[Row], info: Sequence[ColumnInfo]
) -> dict[str, str | None]:
    types: dict[str, str | None] = {}
    for row in rows:
        for name, sql_type in infer_column_types(row).items():
            if types.get(name) is None:
                types[name] = sql_type
    expected = {col.name: col.etype for col in info}
    for name, sql_type in types.items():
        if sql_type is None and name in expected:
            types[name] = _CANONICAL.get(expected[name])
    return types


def get_data(
    rows: Rows, flag: bool, info: Sequence[ColumnInfo], fetcher: Fetcher[T]
) -> list[T]:
    """Check the columns of ``rows`` against ``info`` and fetch every row."""
    table = list(rows)
    if not table:
        return []
    columns = fetch_column_info(_column_types(table, info), info)
    return [fetcher(row, columns, flag) for row in table]


def _time_type(use_timestamps: bool) -> ColumnType:
    return ColumnType.TIMESTAMP if use_timestamps else ColumnType.TTIMESTAMP


def _interval_type(use_timestamps: bool) -> ColumnType:
    return ColumnType.INTERVAL if use_timestamps else ColumnType.TINTERVAL


# ---------------------------------------------------------------- pick & deliver


def get_time_multipliers(rows: Rows, use_timestamps: bool) -> list[TimeMultiplier]:
    """Read ``start_time`` (or ``start_value``) and ``multiplier``."""
    info = [
        ColumnInfo(
            "start_time" if use_timestamps else "start_value",
            _time_type(use_timestamps),
            True,
        ),
        ColumnInfo("multiplier", ColumnType.ANY_NUMERICAL, True),
    ]
    return get_data(rows, use_timestamps, info, fetch_time_multipliers)


def get_matrix(rows: Rows, use_timestamps: bool) -> list[MatrixCell]:
    """Read ``start_vid, end_vid`` and ``travel_time`` (or ``agg_cost``)."""
    info = [
        ColumnInfo("start_vid", ColumnType.ID, True),
        ColumnInfo("end_vid", ColumnType.ID, True),
        ColumnInfo(
            "travel_time" if use_timestamps else "agg_cost",
            _interval_type(use_timestamps),
            True,
        ),
    ]
    return get_data(rows, use_timestamps, info, fetch_pd_matrix)


def get_orders(
    rows: Rows, is_euclidean: bool, use_timestamps: bool
) -> list[OrderRow]:
    """Read pickup and delivery orders, by node id or by coordinates."""
    ts = use_timestamps
    info = [
        ColumnInfo("id", ColumnType.ID, True),
        ColumnInfo("amount", ColumnType.PAMOUNT, True),
        ColumnInfo("p_id", ColumnType.ID, not is_euclidean),
        ColumnInfo("p_x", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("p_y", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("p_tw_open" if ts else "p_open", _time_type(ts), True),
        ColumnInfo("p_tw_close" if ts else "p_close", _time_type(ts), True),
        ColumnInfo("p_t_service" if ts else "p_service", _interval_type(ts), False),
        ColumnInfo("d_id", ColumnType.ID, not is_euclidean),
        ColumnInfo("d_x", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("d_y", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("d_tw_open" if ts else "d_open", _time_type(ts), True),
        ColumnInfo("d_tw_close" if ts else "d_close", _time_type(ts), True),
        ColumnInfo("d_t_service" if ts else "d_service", _interval_type(ts), False),
    ]
    return get_data(rows, is_euclidean, info, fetch_orders)


def get_vehicles(
    rows: Rows, is_euclidean: bool, use_timestamps: bool, with_stops: bool
) -> list[VehicleRow]:
    """Read vehicles; ``stops`` is required only when ``with_stops``."""
    ts = use_timestamps
    info = [
        ColumnInfo("id", ColumnType.ID, True),
        ColumnInfo("capacity", ColumnType.PAMOUNT, True),
        ColumnInfo("number", ColumnType.PAMOUNT, False),
        ColumnInfo("speed", ColumnType.SPEED, False),
        ColumnInfo("s_id", ColumnType.ID, not is_euclidean),
        ColumnInfo("s_x", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("s_y", ColumnType.COORDINATE, is_euclidean),
        ColumnInfo("s_tw_open" if ts else "s_open", _time_type(ts), False),
        ColumnInfo("s_tw_close" if ts else "s_close", _time_type(ts), False),
        ColumnInfo("s_t_service" if ts else "s_service", _interval_type(ts), False),
        ColumnInfo("e_id", ColumnType.ID, False),
        ColumnInfo("e_x", ColumnType.COORDINATE, False),
        ColumnInfo("e_y", ColumnType.COORDINATE, False),
        ColumnInfo("e_tw_open" if ts else "e_open", _time_type(ts), False),
        ColumnInfo("e_tw_close" if ts else "e_close", _time_type(ts), False),
        ColumnInfo("e_t_service" if ts else "e_service", _interval_type(ts), False),
        ColumnInfo("stops", ColumnType.ANY_POSITIVE_ARRAY, with_stops),
    ]
    return get_data(rows, is_euclidean, info, fetch_vehicles)


# ---------------------------------------------------------------- optimizer input


def get_vroom_matrix(rows: Rows, use_timestamps: bool) -> list[VroomMatrixCell]:
    """Read ``start_id, end_id, duration`` and an optional ``cost``."""
    info = [
        ColumnInfo("start_id", ColumnType.MATRIX_INDEX, True),
        ColumnInfo("end_id", ColumnType.MATRIX_INDEX, True),
        ColumnInfo("duration", _interval_type(use_timestamps), True),
        ColumnInfo("cost", ColumnType.INTEGER, False),
    ]
    return get_data(rows, use_timestamps, info, fetch_vroom_matrix)


def get_breaks(rows: Rows | None, use_timestamps: bool) -> list[VroomBreak]:
    """Read breaks; no table gives no breaks."""
    if rows is None:
        return []
    info = [
        ColumnInfo("id", ColumnType.IDX, True),
        ColumnInfo("vehicle_id", ColumnType.IDX, True),
        ColumnInfo("service", _interval_type(use_timestamps), False),
        ColumnInfo("data", ColumnType.JSONB, False),
    ]
    return get_data(rows, use_timestamps, info, fetch_breaks)


def get_timewindows(
    rows: Rows | None, use_timestamps: bool, is_shipment: bool
) -> dict[tuple[int, str], list[tuple[int, int]]]:
    """Time windows grouped by ``(id, kind)``; ``kind`` is needed for shipments."""
    if rows is None:
        return {}
    info = [
        ColumnInfo("id", ColumnType.ANY_INTEGER, True),
        ColumnInfo("tw_open", _time_type(use_timestamps), True),
        ColumnInfo("tw_close", _time_type(use_timestamps), True),
        ColumnInfo("kind", ColumnType.CHAR1, is_shipment),
    ]
    windows: dict[tuple[int, str], list[tuple[int, int]]] = {}
    for tw in get_data(rows, is_shipment, info, fetch_timewindows):
        windows.setdefault((tw.id, tw.kind), []).append(tw.tw)
    return windows


def get_jobs(rows: Rows | None, use_timestamps: bool) -> list[VroomJob]:
    """Read jobs; no table gives no jobs."""
    if rows is None:
        return []
    info = [
        ColumnInfo("id", ColumnType.IDX, True),
        ColumnInfo("location_id", ColumnType.MATRIX_INDEX, True),
        ColumnInfo("setup", _interval_type(use_timestamps), False),
        ColumnInfo("service", _interval_type(use_timestamps), False),
        ColumnInfo("delivery", ColumnType.ANY_POSITIVE_ARRAY, False),
        ColumnInfo("pickup", ColumnType.ANY_POSITIVE_ARRAY, False),
        ColumnInfo("skills", ColumnType.ANY_UINT_ARRAY, False),
        ColumnInfo("priority", ColumnType.POSITIVE_INTEGER, False),
        ColumnInfo("data", ColumnType.JSONB, False),
    ]
    return get_data(rows, use_timestamps, info, fetch_jobs)


def get_shipments(rows: Rows | None, use_timestamps: bool) -> list[VroomShipment]:
    """Read shipments; no table gives no shipments."""
    if rows is None:
        return []
    it = _interval_type(use_timestamps)
    info = [
        ColumnInfo("id", ColumnType.IDX, True),
        ColumnInfo("p_location_id", ColumnType.MATRIX_INDEX, True),
        ColumnInfo("p_setup", it, False),
        ColumnInfo("p_service", it, False),
        ColumnInfo("d_location_id", ColumnType.MATRIX_INDEX, True),
        ColumnInfo("d_setup", it, False),
        ColumnInfo("d_service", it, False),
        ColumnInfo("amount", ColumnType.ANY_POSITIVE_ARRAY, False),
        ColumnInfo("skills", ColumnType.ANY_UINT_ARRAY, False),
        ColumnInfo("priority", ColumnType.POSITIVE_INTEGER, False),
        ColumnInfo("p_data", ColumnType.JSONB, False),
        ColumnInfo("d_data", ColumnType.JSONB, False),
    ]
    return get_data(rows, use_timestamps, info, fetch_shipments)


def get_vroom_vehicles(rows: Rows, use_timestamps: bool) -> list[VroomVehicle]:
    """Read optimizer vehicles."""
    info = [
        ColumnInfo("id", ColumnType.IDX, True),
        ColumnInfo("start_id", ColumnType.MATRIX_INDEX, False),
        ColumnInfo("end_id", ColumnType.MATRIX_INDEX, False),
        ColumnInfo("capacity", ColumnType.ANY_POSITIVE_ARRAY, False),
        ColumnInfo("skills", ColumnType.ANY_UINT_ARRAY, False),
        ColumnInfo("tw_open", _time_type(use_timestamps), False),
        ColumnInfo("tw_close", _time_type(use_timestamps), False),
        ColumnInfo("speed_factor", ColumnType.ANY_NUMERICAL, False),
        ColumnInfo("max_tasks", ColumnType.POSITIVE_INTEGER, False),
        ColumnInfo("data", ColumnType.JSONB, False),
    ]
    return get_data(rows, use_timestamps, info, fetch_vroom_vehicles)