import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from recordflow.envelope import ScalarKind, coerce, render
from recordflow.exceptions import TypeMismatchError


@pytest.mark.parametrize(
    "kind,value,expected",
    [
        (ScalarKind.TEXT, "abc", "abc"),
        (ScalarKind.INTEGER, 123, "123"),
        (ScalarKind.INTEGER, -7, "-7"),
        (ScalarKind.DECIMAL, Decimal("10.50"), "10.50"),
        (ScalarKind.DECIMAL, 0.1, "0.1"),
        (ScalarKind.BOOLEAN, True, "true"),
        (
            ScalarKind.TIMESTAMP,
            datetime(2020, 5, 6, 7, 8, 9, tzinfo=timezone(timedelta(hours=-3))),
            "2020-05-06T07:08:09-03:00",
        ),
    ],
)
def test_render_canonical_text(kind: ScalarKind, value: Any, expected: str) -> None:
    assert render(kind, value, "field") == expected


@pytest.mark.parametrize(
    "kind,value",
    [
        (ScalarKind.INTEGER, "123"),
        (ScalarKind.INTEGER, True),
        (ScalarKind.TEXT, 5),
        (ScalarKind.TIMESTAMP, datetime(2020, 1, 1, 12, 0)),
        (ScalarKind.DECIMAL, Decimal("Infinity")),
        (ScalarKind.TIMESTAMP, "2020-01-01"),
    ],
)
def test_render_rejects_values_of_another_kind(kind: ScalarKind, value: Any) -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        render(kind, value, "outer.field")

    assert exc_info.value.path == "outer.field"
    assert exc_info.value.target == kind.value


@pytest.mark.parametrize(
    "source,text,target,target_type,expected",
    [
        (ScalarKind.TEXT, "123", ScalarKind.INTEGER, int, 123),
        (ScalarKind.TEXT, "-12.5e1", ScalarKind.DECIMAL, Decimal, Decimal("-125")),
        (ScalarKind.TEXT, "2.5", ScalarKind.DECIMAL, float, 2.5),
        (ScalarKind.TEXT, "TRUE", ScalarKind.BOOLEAN, bool, True),
        (ScalarKind.TEXT, "false", ScalarKind.BOOLEAN, bool, False),
        (ScalarKind.INTEGER, "123", ScalarKind.TEXT, str, "123"),
        (ScalarKind.BOOLEAN, "true", ScalarKind.TEXT, str, "true"),
        (ScalarKind.INTEGER, "42", ScalarKind.DECIMAL, Decimal, Decimal("42")),
        (ScalarKind.INTEGER, "42", ScalarKind.INTEGER, int, 42),
    ],
)
def test_coerce_rules(source: ScalarKind, text: str, target: ScalarKind, target_type: Any, expected: Any) -> None:
    result = coerce(source, text, target, target_type, "field")

    assert result == expected
    assert type(result) is type(expected)


def test_text_without_offset_reads_as_utc_timestamp() -> None:
    result = coerce(ScalarKind.TEXT, "2020-01-02T03:04:05", ScalarKind.TIMESTAMP, datetime, "at")

    assert result == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_timestamp_keeps_its_offset() -> None:
    written = datetime(2020, 1, 2, 3, 4, 5, 6, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    result = coerce(ScalarKind.TIMESTAMP, render(ScalarKind.TIMESTAMP, written, "at"), ScalarKind.TIMESTAMP, datetime, "at")

    assert result == written
    assert result.utcoffset() == timedelta(hours=5, minutes=30)


@pytest.mark.parametrize(
    "source,text,target",
    [
        (ScalarKind.TEXT, "0123x", ScalarKind.INTEGER),
        (ScalarKind.TEXT, "1_000", ScalarKind.INTEGER),
        (ScalarKind.TEXT, " 12", ScalarKind.INTEGER),
        (ScalarKind.TEXT, "1,5", ScalarKind.DECIMAL),
        (ScalarKind.TEXT, "NaN", ScalarKind.DECIMAL),
        (ScalarKind.TEXT, "yes", ScalarKind.BOOLEAN),
        (ScalarKind.TEXT, "tomorrow", ScalarKind.TIMESTAMP),
        (ScalarKind.DECIMAL, "1.5", ScalarKind.INTEGER),
        (ScalarKind.BOOLEAN, "true", ScalarKind.INTEGER),
        (ScalarKind.TIMESTAMP, "2020-01-01T00:00:00+00:00", ScalarKind.DECIMAL),
        (ScalarKind.OBJECT, None, ScalarKind.TEXT),
    ],
)
def test_coerce_failures_name_both_kinds(source: ScalarKind, text: str, target: ScalarKind) -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        coerce(source, text, target, object, "a.b")

    assert exc_info.value.path == "a.b"
    assert exc_info.value.source == source.value
    assert exc_info.value.target == target.value
    assert f"{source.value} to {target.value}" in str(exc_info.value)


def test_naive_timestamp_is_rejected_on_write() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        render(ScalarKind.TIMESTAMP, datetime(2020, 1, 2, 3, 4, 5), "at")

    assert exc_info.value.path == "at"
    assert "offset" in str(exc_info.value)


@pytest.mark.parametrize("value,text", [(float("inf"), "inf"), (float("-inf"), "-inf")])
def test_infinite_floats_round_trip(value: float, text: str) -> None:
    rendered = render(ScalarKind.DECIMAL, value, "score")

    assert rendered == text
    assert coerce(ScalarKind.DECIMAL, rendered, ScalarKind.DECIMAL, float, "score") == value


def test_nan_float_is_stored_and_read_back() -> None:
    rendered = render(ScalarKind.DECIMAL, float("nan"), "score")

    assert rendered == "nan"
    assert math.isnan(coerce(ScalarKind.DECIMAL, rendered, ScalarKind.DECIMAL, float, "score"))


def test_non_finite_text_reads_as_float_but_not_as_decimal() -> None:
    assert coerce(ScalarKind.TEXT, "Infinity", ScalarKind.DECIMAL, float, "score") == float("inf")

    with pytest.raises(TypeMismatchError):
        coerce(ScalarKind.DECIMAL, "inf", ScalarKind.DECIMAL, Decimal, "score")
