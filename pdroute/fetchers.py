"""Turn one input row into the record a solver works with.

Each fetcher takes a row (a mapping of column names to values), the
column descriptions returned by :func:`pdroute.columns.fetch_column_info`
in the order the fetcher expects, and a flag whose meaning depends on
the fetcher.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pdroute.base_matrix import MatrixCell
from pdroute.columns import ColumnInfo, ColumnType, column_found
from pdroute.errors import DataError
from pdroute.values import (
    get_any_positive_array,
    get_anyinteger,
    get_anynumerical,
    get_char,
    get_interval,
    get_jsonb,
    get_timestamp,
    get_uint_unordered_set,
)
from pdroute.vroom_matrix import VroomMatrixCell

Row = Mapping[str, Any]
Info = Sequence[ColumnInfo]

_INT32_MAX = 2**31 - 1
_UINT32_MAX = 2**32 - 1
_INT64_MAX = 2**63 - 1
_MAX_PRIORITY = 100


@dataclass
class TimeMultiplier:
    """A travel-time multiplier valid from ``start_time`` onwards."""

    start_time: int
    multiplier: float


@dataclass
class OrderRow:
    """A pickup and delivery order as read from the input."""

    id: int
    demand: int
    pick_node_id: int
    pick_x: float
    pick_y: float
    pick_open_t: int
    pick_close_t: int
    pick_service_t: int
    deliver_node_id: int
    deliver_x: float
    deliver_y: float
    deliver_open_t: int
    deliver_close_t: int
    deliver_service_t: int


@dataclass
class VehicleRow:
    """A vehicle as read from the input."""

    id: int
    capacity: int
    cant_v: int
    speed: float
    start_node_id: int
    start_x: float
    start_y: float
    start_open_t: int
    start_close_t: int
    start_service_t: int
    end_node_id: int
    end_x: float
    end_y: float
    end_open_t: int
    end_close_t: int
    end_service_t: int
    stops: list[int] = field(default_factory=list)


@dataclass
class VroomBreak:
    id: int
    vehicle_id: int
    service: int
    data: str


@dataclass
class VroomTimeWindow:
    """A time window of a job, shipment part (``kind`` 'p' or 'd') or break."""

    id: int
    kind: str
    tw: tuple[int, int]


@dataclass
class VroomJob:
    id: int
    location_id: int
    setup: int
    service: int
    pickup: list[int]
    delivery: list[int]
    skills: set[int]
    priority: int
    data: str


@dataclass
class VroomShipment:
    id: int
    p_location_id: int
    p_setup: int
    p_service: int
    d_location_id: int
    d_setup: int
    d_service: int
    amount: list[int]
    skills: set[int]
    priority: int
    p_data: str
    d_data: str


@dataclass
class VroomVehicle:
    id: int
    start_id: int
    end_id: int
    capacity: list[int]
    skills: set[int]
    tw: tuple[int, int]
    speed_factor: float
    max_tasks: int
    data: str


def _get_value(row: Row, info: ColumnInfo, opt_value: int) -> int:
    """Integer value of a column, reading intervals and timestamps as seconds."""
    if info.etype is ColumnType.INTERVAL:
        return get_interval(row, info, opt_value)
    if info.etype is ColumnType.TIMESTAMP:
        return get_timestamp(row, info, opt_value)
    return get_anyinteger(row, info, opt_value)


def check_pairs(lhs: ColumnInfo, rhs: ColumnInfo) -> None:
    """Both columns of a pair must exist, or neither."""
    if not column_found(lhs) and column_found(rhs):
        raise DataError(
            f"Column found: '{rhs.name}', missing column: '{lhs.name}'"
        )
    if not column_found(rhs) and column_found(lhs):
        raise DataError(
            f"Column found: '{lhs.name}', missing column: '{rhs.name}'"
        )


# ---------------------------------------------------------------- pick & deliver


def fetch_pd_matrix(row: Row, info: Info, flag: bool = False) -> MatrixCell:
    """Read ``start_vid, end_vid, cost``."""
    return MatrixCell(
        from_vid=_get_value(row, info[0], -1),
        to_vid=_get_value(row, info[1], -1),
        cost=_get_value(row, info[2], 0),
    )


def fetch_time_multipliers(
    row: Row, info: Info, flag: bool = False
) -> TimeMultiplier:
    """Read ``start_time, multiplier``."""
    return TimeMultiplier(
        start_time=_get_value(row, info[0], 0),
        multiplier=get_anynumerical(row, info[1], 1.0),
    )


def _order_error(message: str, order_id: int) -> DataError:
    return DataError(message, f"Check order id #:{order_id}")


def fetch_orders(row: Row, info: Info, is_euclidean: bool = False) -> OrderRow:
    """Read one pickup and delivery order."""
    if is_euclidean:
        check_pairs(info[3], info[4])
        check_pairs(info[9], info[10])

    order_id = _get_value(row, info[0], -1)
    demand = _get_value(row, info[1], 0)
    if demand == 0:
        raise _order_error(
            f"Unexpected zero value found on column'{info[1].name}' of orders",
            order_id,
        )

    pick_node_id = 0 if is_euclidean else _get_value(row, info[2], -1)
    pick_x = get_anynumerical(row, info[3], 0.0) if is_euclidean else 0.0
    pick_y = get_anynumerical(row, info[4], 0.0) if is_euclidean else 0.0
    pick_open = _get_value(row, info[5], -1)
    pick_close = _get_value(row, info[6], -1)
    if pick_close < pick_open:
        raise _order_error(
            f"Invalid time window found: '{info[6].name}' < '{info[5].name}'",
            order_id,
        )
    pick_service = _get_value(row, info[7], 0)
    if pick_service < 0:
        raise _order_error(
            f"Unexpected negative value found on column'{info[7].name}' of orders",
            order_id,
        )

    deliver_node_id = 0 if is_euclidean else _get_value(row, info[8], -1)
    deliver_x = get_anynumerical(row, info[9], 0.0) if is_euclidean else 0.0
    deliver_y = get_anynumerical(row, info[10], 0.0) if is_euclidean else 0.0
    deliver_open = _get_value(row, info[11], -1)
    deliver_close = _get_value(row, info[12], -1)
    if deliver_close < deliver_open:
        raise _order_error(
            f"Invalid time window found: '{info[12].name}' < '{info[11].name}'",
            order_id,
        )
    deliver_service = _get_value(row, info[13], 0)

    return OrderRow(
        id=order_id,
        demand=demand,
        pick_node_id=pick_node_id,
        pick_x=pick_x,
        pick_y=pick_y,
        pick_open_t=pick_open,
        pick_close_t=pick_close,
        pick_service_t=pick_service,
        deliver_node_id=deliver_node_id,
        deliver_x=deliver_x,
        deliver_y=deliver_y,
        deliver_open_t=deliver_open,
        deliver_close_t=deliver_close,
        deliver_service_t=deliver_service,
    )


def fetch_vehicles(row: Row, info: Info, is_euclidean: bool = False) -> VehicleRow:
    """Read one vehicle; missing end values default to the start values."""
    if is_euclidean:
        check_pairs(info[5], info[6])
        check_pairs(info[11], info[12])

    start_node_id = 0 if is_euclidean else _get_value(row, info[4], -1)
    start_x = get_anynumerical(row, info[5], 0.0) if is_euclidean else 0.0
    start_y = get_anynumerical(row, info[6], 0.0) if is_euclidean else 0.0
    start_open = _get_value(row, info[7], 0)
    start_close = _get_value(row, info[8], _INT64_MAX)

    return VehicleRow(
        id=_get_value(row, info[0], -1),
        capacity=_get_value(row, info[1], _UINT32_MAX),
        cant_v=_get_value(row, info[2], 1),
        speed=get_anynumerical(row, info[3], 1.0),
        start_node_id=start_node_id,
        start_x=start_x,
        start_y=start_y,
        start_open_t=start_open,
        start_close_t=start_close,
        start_service_t=_get_value(row, info[9], 0),
        end_node_id=0 if is_euclidean else _get_value(row, info[10], start_node_id),
        end_x=get_anynumerical(row, info[11], start_x) if is_euclidean else 0.0,
        end_y=get_anynumerical(row, info[12], start_y) if is_euclidean else 0.0,
        end_open_t=_get_value(row, info[13], start_open),
        end_close_t=_get_value(row, info[14], start_close),
        end_service_t=_get_value(row, info[15], 0),
        stops=get_any_positive_array(row, info[16]),
    )


# ---------------------------------------------------------------- optimizer input


def fetch_vroom_matrix(row: Row, info: Info, flag: bool = False) -> VroomMatrixCell:
    """Read ``start_id, end_id, duration, cost``; cost defaults to duration."""
    duration = _get_value(row, info[2], 0)
    return VroomMatrixCell(
        start_id=_get_value(row, info[0], -1),
        end_id=_get_value(row, info[1], -1),
        duration=duration,
        cost=_get_value(row, info[3], duration),
    )


def fetch_breaks(row: Row, info: Info, flag: bool = False) -> VroomBreak:
    return VroomBreak(
        id=_get_value(row, info[0], 0),
        vehicle_id=_get_value(row, info[1], 0),
        service=_get_value(row, info[2], 0),
        data=get_jsonb(row, info[3]),
    )


def fetch_timewindows(
    row: Row, info: Info, is_shipment: bool = False
) -> VroomTimeWindow:
    """Read a time window; shipments also need a ``kind`` of 'p' or 'd'."""
    tw_id = _get_value(row, info[0], 0)
    kind = get_char(row, info[3], " ") if is_shipment else " "
    if is_shipment and kind not in ("p", "d"):
        raise DataError(f"Invalid kind '{kind}', Expecting 'p' or 'd'")

    tw_open = _get_value(row, info[1], 0)
    tw_close = _get_value(row, info[2], 0)
    if tw_open > tw_close:
        raise DataError(
            f"Invalid time window found: '{info[2].name}' < '{info[1].name}'"
        )
    return VroomTimeWindow(id=tw_id, kind=kind, tw=(tw_open, tw_close))


def _check_priority(priority: int, info: ColumnInfo) -> None:
    if priority > _MAX_PRIORITY:
        raise DataError(
            f"Invalid value in column '{info.name}'. Maximum value allowed 100"
        )


def fetch_jobs(row: Row, info: Info, flag: bool = False) -> VroomJob:
    job = VroomJob(
        id=_get_value(row, info[0], 0),
        location_id=_get_value(row, info[1], 0),
        setup=_get_value(row, info[2], 0),
        service=_get_value(row, info[3], 0),
        pickup=get_any_positive_array(row, info[5]),
        delivery=get_any_positive_array(row, info[4]),
        skills=get_uint_unordered_set(row, info[6]),
        priority=_get_value(row, info[7], 0),
        data=get_jsonb(row, info[8]),
    )
    _check_priority(job.priority, info[7])
    return job


def fetch_shipments(row: Row, info: Info, flag: bool = False) -> VroomShipment:
    shipment = VroomShipment(
        id=_get_value(row, info[0], 0),
        p_location_id=_get_value(row, info[1], 0),
        p_setup=_get_value(row, info[2], 0),
        p_service=_get_value(row, info[3], 0),
        d_location_id=_get_value(row, info[4], 0),
        d_setup=_get_value(row, info[5], 0),
        d_service=_get_value(row, info[6], 0),
        amount=get_any_positive_array(row, info[7]),
        skills=get_uint_unordered_set(row, info[8]),
        priority=_get_value(row, info[9], 0),
        p_data=get_jsonb(row, info[10]),
        d_data=get_jsonb(row, info[11]),
    )
    _check_priority(shipment.priority, info[9])
    return shipment


def fetch_vroom_vehicles(row: Row, info: Info, flag: bool = False) -> VroomVehicle:
    """Read a vehicle; it needs a start location, an end location or both."""
    vehicle_id = _get_value(row, info[0], 0)
    start_id = _get_value(row, info[1], -1)
    end_id = _get_value(row, info[2], -1)
    capacity = get_any_positive_array(row, info[3])
    skills = get_uint_unordered_set(row, info[4])

    tw_open = _get_value(row, info[5], 0)
    tw_close = _get_value(row, info[6], _UINT32_MAX)
    if tw_open > tw_close:
        raise DataError(
            f"Invalid time window found: '{info[6].name}' < '{info[5].name}'"
        )

    speed_factor = get_anynumerical(row, info[7], 1.0)
    max_tasks = _get_value(row, info[8], _INT32_MAX)
    data = get_jsonb(row, info[9])

    if not (column_found(info[1]) or column_found(info[2])):
        raise DataError(
            f"Missing column(s): '{info[1].name}' and/or '{info[2].name}' must exist"
        )
    if speed_factor <= 0.0:
        raise DataError(
            f"Invalid negative or zero value in column '{info[7].name}'"
        )

    return VroomVehicle(
        id=vehicle_id,
        start_id=start_id,
        end_id=end_id,
        capacity=capacity,
        skills=skills,
        tw=(tw_open, tw_close),
        speed_factor=speed_factor,
        max_tasks=max_tasks,
        data=data,
    )