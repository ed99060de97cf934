import datetime as dt
from decimal import Decimal

import pytest

from odbcadapter.dialects import MSSQLDialect
from odbcadapter.errors import QuerySyntaxError
from odbcadapter.query import Collection, Field, ValueKind


class Money:
    def __init__(self, amount):
        self.amount = amount

    def __str__(self):
        return f"{self.amount} O'Dollars"


def test_mssql_dialect_quotes_identifiers():
    dialect = MSSQLDialect()
    assert dialect.escape_identifier("Orders") == "[Orders]"
    assert dialect.escape_identifier("weird]name") == "[weird]]name]"


def test_escape_field_prefers_alias():
    dialect = MSSQLDialect()
    orders = Collection("Orders")
    assert dialect.escape_field(Field("Orders", orders.aliased("o"))) == "[o].[Orders]"
    assert dialect.escape_field(orders.field("total")) == "[Orders].[total]"
    assert dialect.escape_field(Field("total")) == "[total]"
    assert dialect.escape_field(Field("*", orders.aliased("o"))) == "[o].*"


@pytest.mark.parametrize(
    "text, literal",
    [
        ("plain", "'plain'"),
        ("O'Brien", "'O''Brien'"),
        ("''", "''''''"),
        ("'; DROP TABLE x; --", "'''; DROP TABLE x; --'"),
        ("", "''"),
    ],
)
def test_escape_value_doubles_single_quotes(text, literal):
    dialect = MSSQLDialect()
    rendered = dialect.escape_value(text)
    assert rendered == literal
    assert rendered[1:-1].replace("''", "'") == text


def test_escape_value_scalars():
    dialect = MSSQLDialect()
    assert dialect.escape_value(None) == "NULL"
    assert dialect.escape_value(True) == "TRUE"
    assert dialect.escape_value(False) == "FALSE"
    assert dialect.escape_value(42) == "42"
    assert dialect.escape_value(-1.5) == "-1.5"
    assert dialect.escape_value(Decimal("10.25")) == "10.25"
    assert dialect.escape_value(dt.date(2024, 2, 29)) == "'2024-02-29'"


def test_escape_value_rejects_non_finite_numbers():
    with pytest.raises(QuerySyntaxError):
        MSSQLDialect().escape_value(float("nan"))


def test_escape_value_objects_use_string_form():
    assert MSSQLDialect().escape_value(Money(5)) == "'5 O''Dollars'"


def test_timestamps_render_as_utc():
    dialect = MSSQLDialect()
    naive = dt.datetime(2024, 1, 1, 10, 0, 0)
    aware = dt.datetime(2024, 1, 1, 12, 0, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    west = dt.datetime(2023, 12, 31, 23, 0, 0, tzinfo=dt.timezone(dt.timedelta(hours=-11)))
    assert dialect.escape_value(naive) == "'2024-01-01 10:00:00'"
    assert dialect.escape_value(aware) == dialect.escape_value(naive)
    assert dialect.escape_value(west) == "'2024-01-01 10:00:00'"


def test_every_value_kind_has_a_rule():
    dialect = MSSQLDialect()
    assert set(dialect._renderers) == set(ValueKind)


def test_render_regex_always_fails():
    with pytest.raises(QuerySyntaxError, match="Regular expressions not supported"):
        MSSQLDialect().render_regex("[name]", "^a")


def test_limit_clause():
    dialect = MSSQLDialect()
    assert dialect.limit_clause(None, None).prefix == ""
    assert dialect.limit_clause(10, None).prefix == "TOP 10"
    assert dialect.limit_clause(None, 5).suffix == "OFFSET 5 ROWS"
    clause = dialect.limit_clause(10, 5)
    assert clause.prefix == ""
    assert clause.suffix == "OFFSET 5 ROWS FETCH NEXT 10 ROWS ONLY"


def test_insert_header_lists_columns():
    header = MSSQLDialect().insert_header("[Orders]", ["name", "total"])
    assert header == "INSERT INTO [Orders] ([name], [total])"
