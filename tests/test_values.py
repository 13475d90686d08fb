import datetime
import json
import re
from decimal import Decimal

import pytest

from pdroute.columns import ColumnInfo, ColumnType, fetch_column_info, infer_column_types
from pdroute.errors import DataError
from pdroute.values import (
    get_any_positive_array,
    get_anyinteger,
    get_anynumerical,
    get_char,
    get_interval,
    get_jsonb,
    get_timestamp,
    get_uint_array,
    get_uint_unordered_set,
    interval_to_seconds,
    timestamp_to_seconds,
)


def _info(row, name, etype, strict=False):
    (info,) = fetch_column_info(
        infer_column_types(row), [ColumnInfo(name, etype, strict)]
    )
    return info


def _raises(message):
    return pytest.raises(DataError, match=re.escape(message))


def test_interval_to_seconds_whole_and_fraction():
    assert interval_to_seconds(datetime.timedelta(seconds=90)) == 90
    assert interval_to_seconds(datetime.timedelta(days=2)) == 2 * 86400
    assert interval_to_seconds(datetime.timedelta(seconds=5, microseconds=999999)) == 5


def test_timestamp_epoch_and_round_trip():
    assert timestamp_to_seconds(datetime.datetime(1970, 1, 1)) == 0
    moment = datetime.datetime(2021, 6, 15, 13, 45, 30)
    seconds = timestamp_to_seconds(moment)
    back = datetime.datetime.fromtimestamp(seconds, datetime.timezone.utc)
    assert back.replace(tzinfo=None) == moment


def test_get_anyinteger_found_and_missing():
    row = {"id": 42}
    info = _info(row, "id", ColumnType.ID)
    assert get_anyinteger(row, info, -1) == 42
    missing = _info({}, "id", ColumnType.ID)
    assert get_anyinteger({}, missing, -1) == -1


def test_get_anyinteger_null_and_wrong_type():
    info = ColumnInfo("id", ColumnType.ID, position=0, sql_type="BIGINT")
    assert get_anyinteger({"id": 7}, info, 0) == 7
    with pytest.raises(DataError) as null_error:
        get_anyinteger({"id": None}, info, 0)
    assert "Unexpected Null value in column id" in str(null_error.value)
    text = ColumnInfo("id", ColumnType.ID, position=0, sql_type="TEXT")
    with pytest.raises(DataError) as type_error:
        get_anyinteger({"id": "x"}, text, 0)
    assert "Expected ANY-INTEGER" in str(type_error.value)


def test_get_anynumerical_values():
    row = {"speed": 3, "factor": Decimal("2.5")}
    assert get_anynumerical(row, _info(row, "speed", ColumnType.SPEED), 1.0) == 3.0
    assert get_anynumerical(row, _info(row, "factor", ColumnType.SPEED), 1.0) == 2.5
    assert get_anynumerical({}, _info({}, "speed", ColumnType.SPEED), 1.0) == 1.0


def test_get_interval_found_default_and_negative():
    row = {"service": datetime.timedelta(minutes=2)}
    info = _info(row, "service", ColumnType.INTERVAL)
    assert get_interval(row, info, 0) == interval_to_seconds(row["service"])
    assert get_interval({}, _info({}, "service", ColumnType.INTERVAL), 7) == 7
    negative = {"service": datetime.timedelta(seconds=-5)}
    with _raises("Unexpected negative value in column 'service'"):
        get_interval(negative, _info(negative, "service", ColumnType.INTERVAL), 0)
    with _raises("Unexpected negative value in column 'service'"):
        get_interval({}, _info({}, "service", ColumnType.INTERVAL), -1)


def test_get_timestamp_found_missing_and_wrong_type():
    moment = datetime.datetime(2020, 1, 2, 3, 4, 5)
    row = {"open": moment}
    info = _info(row, "open", ColumnType.TIMESTAMP)
    assert get_timestamp(row, info, 0) == timestamp_to_seconds(moment)
    assert get_timestamp({}, _info({}, "open", ColumnType.TIMESTAMP), 11) == 11
    wrong = ColumnInfo("open", ColumnType.TTIMESTAMP, position=0, sql_type="BIGINT")
    with _raises("Unexpected type value in column 'open'. Expected 1114"):
        get_timestamp({"open": 5}, wrong, 0)


def test_get_char_cases():
    row = {"kind": "p"}
    assert get_char(row, _info(row, "kind", ColumnType.CHAR1), " ") == "p"
    loose = ColumnInfo("kind", ColumnType.CHAR1, False, 0, "CHAR")
    assert get_char({"kind": None}, loose, "d") == "d"
    strict = ColumnInfo("kind", ColumnType.CHAR1, True, 0, "CHAR")
    with _raises("Unexpected Null value in column kind"):
        get_char({"kind": None}, strict, " ")
    wrong = ColumnInfo("kind", ColumnType.CHAR1, True, 0, "TEXT")
    with _raises("Expected CHAR"):
        get_char({"kind": "pick"}, wrong, " ")


def test_get_jsonb():
    data = {"a": [1, 2]}
    row = {"data": data}
    text = get_jsonb(row, _info(row, "data", ColumnType.JSONB))
    assert json.loads(text) == data
    assert get_jsonb({}, _info({}, "data", ColumnType.JSONB)) == "{}"


def test_positive_array_values_and_empty():
    row = {"amount": [3, 0, 5]}
    info = _info(row, "amount", ColumnType.ANY_POSITIVE_ARRAY)
    assert get_any_positive_array(row, info) == [3, 0, 5]
    missing = _info({}, "amount", ColumnType.ANY_POSITIVE_ARRAY)
    assert get_any_positive_array({}, missing) == []
    empty = {"amount": []}
    assert get_any_positive_array(
        empty, _info(empty, "amount", ColumnType.ANY_POSITIVE_ARRAY)
    ) == []


@pytest.mark.parametrize(
    "values, message",
    [
        ([1, -2], "Unexpected negative value in array 'amount'"),
        ([[1], [2]], "One dimension expected"),
        ([1, None], "NULL value found in Array!"),
        ([1.5], "Expected array of ANY-INTEGER"),
    ],
)
def test_positive_array_errors(values, message):
    info = ColumnInfo("amount", ColumnType.ANY_POSITIVE_ARRAY, False, 0, "BIGINT[]")
    assert get_any_positive_array({"amount": [1, 2]}, info) == [1, 2]
    with pytest.raises(DataError) as excinfo:
        get_any_positive_array({"amount": values}, info)
    assert message in str(excinfo.value)


def test_uint_array_wraps_negative():
    row = {"skills": [1, -1]}
    info = _info(row, "skills", ColumnType.ANY_UINT_ARRAY)
    assert get_uint_array(row, info) == [1, 2**32 - 1]
    assert get_uint_array({}, _info({}, "skills", ColumnType.ANY_UINT_ARRAY)) == []


def test_uint_set_distinct_and_illegal():
    row = {"skills": [1, 2, 2]}
    info = _info(row, "skills", ColumnType.ANY_UINT_ARRAY)
    assert get_uint_unordered_set(row, info) == {1, 2}
    assert get_uint_unordered_set(
        {}, _info({}, "skills", ColumnType.ANY_UINT_ARRAY)
    ) == set()
    wide = ColumnInfo("skills", ColumnType.ANY_UINT_ARRAY, False, 0, "INTEGER[]")
    with _raises("Illegal value found on array"):
        get_uint_unordered_set({"skills": [2**32]}, wide)
    with _raises("Illegal value found on array"):
        get_uint_unordered_set({"skills": [-3]}, wide)