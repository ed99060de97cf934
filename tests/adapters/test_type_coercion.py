import datetime as dt
from decimal import Decimal

import pytest

from odbcadapter.adapters.types import (
    TypeFamily,
    coerce_row,
    coerce_value,
    describe_columns,
    resolve_type_family,
)


@pytest.mark.parametrize(
    "type_code, family",
    [
        ("BYTE", TypeFamily.INTEGER),
        ("COUNTER", TypeFamily.INTEGER),
        ("integer", TypeFamily.INTEGER),
        ("SMALLINT", TypeFamily.INTEGER),
        ("CURRENCY", TypeFamily.FLOAT),
        ("DECIMAL", TypeFamily.FLOAT),
        ("REAL", TypeFamily.FLOAT),
        ("DOUBLE", TypeFamily.FLOAT),
        ("BIT", TypeFamily.BOOLEAN),
        ("DATETIME", TypeFamily.TIMESTAMP),
        ("VARCHAR", TypeFamily.TEXT),
        ("LONGCHAR", TypeFamily.TEXT),
        (int, TypeFamily.INTEGER),
        (Decimal, TypeFamily.FLOAT),
        (bool, TypeFamily.BOOLEAN),
        (dt.datetime, TypeFamily.TIMESTAMP),
        (str, TypeFamily.TEXT),
        (None, TypeFamily.TEXT),
    ],
)
def test_resolve_type_family(type_code, family):
    assert resolve_type_family(type_code) is family


def test_bit_values_are_exact_booleans():
    assert coerce_value(TypeFamily.BOOLEAN, "1") is True
    assert coerce_value(TypeFamily.BOOLEAN, "0") is False
    assert coerce_value(TypeFamily.BOOLEAN, True) is True
    assert coerce_value(TypeFamily.BOOLEAN, False) is False
    assert coerce_value(TypeFamily.BOOLEAN, "yes") is False


def test_numeric_coercion():
    assert coerce_value(TypeFamily.INTEGER, "42") == 42
    assert coerce_value(TypeFamily.FLOAT, "9.75") == 9.75
    assert isinstance(coerce_value(TypeFamily.FLOAT, Decimal("3")), float)


def test_timestamps_are_parsed_as_utc():
    parsed = coerce_value(TypeFamily.TIMESTAMP, "2024-03-01 10:30:00")
    assert parsed == dt.datetime(2024, 3, 1, 10, 30, tzinfo=dt.timezone.utc)
    native = coerce_value(TypeFamily.TIMESTAMP, dt.datetime(2024, 3, 1, 10, 30))
    assert native.tzinfo is dt.timezone.utc


def test_nulls_and_text_pass_through():
    assert coerce_value(TypeFamily.INTEGER, None) is None
    assert coerce_value(TypeFamily.TEXT, "1") == "1"


def test_coerce_row_uses_column_metadata_not_values():
    columns = describe_columns([("flag", "BIT"), ("code", "VARCHAR"), ("n", "SMALLINT")])
    assert coerce_row(columns, ("1", "1", "1")) == {"flag": True, "code": "1", "n": 1}


def test_describe_columns_without_result_set():
    assert describe_columns(None) == []
