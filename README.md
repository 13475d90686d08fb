# pdroute

Building blocks for pickup-and-delivery vehicle routing problems:
travel-time matrices, and validation of the tabular input that describes
orders, vehicles, matrices, time multipliers, jobs, shipments, breaks and
time windows.

The package has no dependencies outside the standard library.

## Install

```
pip install pdroute
```

To run the test suite:

```
pip install "pdroute[test]"
pytest
```

## Travel-time matrices

`pdroute.base_matrix.BaseMatrix` builds a square matrix of travel times
from `MatrixCell(from_vid, to_vid, cost)` rows, keeping only the cells whose
two nodes are among the node identifiers given. Each cost is multiplied by
`multiplier` and truncated to an integer. A cell with no row takes the value
of the opposite direction when that one is known; the diagonal is zero;
anything still unknown holds `pdroute.base_matrix.INFINITY`.

```python
from pdroute.base_matrix import BaseMatrix, MatrixCell

cells = [MatrixCell(1, 2, 10), MatrixCell(2, 3, 5), MatrixCell(1, 3, 30)]
matrix = BaseMatrix(cells, {1, 2, 3}, 1.0)

matrix.has_no_infinity()            # True
matrix.obeys_triangle_inequality()  # False: 1 -> 3 is longer than 1 -> 2 -> 3
matrix.fix_triangle_inequality(0)   # number of cells shortened
matrix.obeys_triangle_inequality()  # True
matrix.get_index(3)                 # 2
matrix.get_original_id(0)           # 1
print(matrix)                       # every cell, with internal and original ids
```

Identifiers are kept sorted in `matrix.ids`; an identifier's position there
is its row and column in `matrix.time_matrix`. `get_index` and
`get_original_id` raise `pdroute.errors.InternalError` for an identifier or
index the matrix does not hold. `fix_triangle_inequality` shortens one
offending cell per cycle and stops once none is left or the cycle count
exceeds the matrix size.

`BaseMatrix.from_euclidean(points, multiplier)` takes a mapping from
`(x, y)` coordinates to node identifiers and fills the matrix with
Euclidean distances (see `pdroute.base_matrix.get_distance`).

## Duration and cost matrices

`pdroute.vroom_matrix.VroomMatrix` keeps a duration matrix and a cost matrix
side by side, built from `VroomMatrixCell(start_id, end_id, duration, cost)`
rows. Each duration is divided by `scaling_factor` and rounded half away
from zero. Missing cells are filled from the opposite direction and the
diagonal is zero; if any cell is still unknown, the constructor raises
`pdroute.errors.DataError`.

```python
from pdroute.vroom_matrix import VroomMatrix, VroomMatrixCell

m = VroomMatrix([VroomMatrixCell(1, 2, 10, 7)], {1, 2}, 1.0)
m.duration_matrix()  # [[0, 10], [10, 0]]
m.cost_matrix()      # [[0, 7], [7, 0]]
```

## Input rows

A table is an iterable of rows; a row is a plain mapping from column name to
value. The functions in `pdroute.getters` check that the required columns
are there and have acceptable types, and return typed records from
`pdroute.fetchers`:

| getter | record |
| --- | --- |
| `get_orders(rows, is_euclidean, use_timestamps)` | `OrderRow` |
| `get_vehicles(rows, is_euclidean, use_timestamps, with_stops)` | `VehicleRow` |
| `get_matrix(rows, use_timestamps)` | `pdroute.base_matrix.MatrixCell` |
| `get_time_multipliers(rows, use_timestamps)` | `TimeMultiplier` |
| `get_vroom_matrix(rows, use_timestamps)` | `pdroute.vroom_matrix.VroomMatrixCell` |
| `get_jobs(rows, use_timestamps)` | `VroomJob` |
| `get_shipments(rows, use_timestamps)` | `VroomShipment` |
| `get_breaks(rows, use_timestamps)` | `VroomBreak` |
| `get_vroom_vehicles(rows, use_timestamps)` | `VroomVehicle` |
| `get_timewindows(rows, use_timestamps, is_shipment)` | dict of `(id, kind)` to a list of `(open, close)` |

`get_jobs`, `get_shipments`, `get_breaks` and `get_timewindows` accept
`None` for "no table" and then return an empty result.

```python
from pdroute.getters import get_orders

rows = [
    {"id": 1, "amount": 10,
     "p_id": 100, "p_open": 0, "p_close": 50, "p_service": 2,
     "d_id": 200, "d_open": 20, "d_close": 90, "d_service": 3},
]
orders = get_orders(rows, is_euclidean=False, use_timestamps=False)
orders[0].pick_close_t  # 50
```

With `use_timestamps=True` the time columns take their timestamp names
(`p_tw_open`, `p_tw_close`, `p_t_service`, and so on) and hold
`datetime.datetime` and `datetime.timedelta` values; these are turned into
whole seconds, timestamps being read as UTC wall time. With
`is_euclidean=True` orders and vehicles are located by `*_x`/`*_y`
coordinates instead of node identifiers.

Column types are inferred from the Python values: the first value in a
column that is not `None` decides its SQL type (an `int` is `INTEGER` or
`BIGINT`, a `float` is `FLOAT`, a one-character `str` is `CHAR`, a mapping
is `JSONB`, a list of ints is an integer array, and so on). The lower-level
pieces are available directly:

- `pdroute.columns`: `ColumnType`, `ColumnInfo`, `infer_column_types`,
  `fetch_column_info` and `column_found`.
- `pdroute.values`: typed readers such as `get_anyinteger`,
  `get_anynumerical`, `get_interval`, `get_timestamp`, `get_char`,
  `get_jsonb` and the array readers, plus `interval_to_seconds` and
  `timestamp_to_seconds`.
- `pdroute.fetchers`: one `fetch_*` function per record kind, and
  `check_pairs` for columns that must appear together.
- `pdroute.getters.get_data`: runs any fetcher over a table.

Invalid data raises `pdroute.errors.DataError`; its `hint` attribute, when
set, says which record was at fault (for example `Check order id #:1`).

## Supporting pieces

- `pdroute.messages.Messages` collects text in three streams, `log`,
  `notice` and `error`, with `get_log`, `get_notice`, `get_error`,
  `has_error` and `clear`.
- `pdroute.identifier.Identifier` pairs an internal index `idx` with an
  original `id`.
- `pdroute.errors` defines `AssertFailedError`, `DataError` and
  `InternalError`, and `get_backtrace(msg)` describes the current call stack.

## What this package does not do

It does not solve routing problems. There is no model of orders and fleets,
no construction of initial solutions, no optimizer, and no command-line
tool. It does not connect to a database either: rows have to be supplied as
Python mappings by the caller.