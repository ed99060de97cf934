"""
Native column type families and result cell coercion.

ODBC catalogs report type names (``COUNTER``, ``BIT``...) while pyodbc
reports the Python type it materialises in ``cursor.description``; both are
accepted as type codes.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Sequence


class TypeFamily(Enum):
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    TEXT = "text"


NATIVE_TYPE_NAMES: Mapping[str, TypeFamily] = {
    "BYTE": TypeFamily.INTEGER,
    "COUNTER": TypeFamily.INTEGER,
    "INTEGER": TypeFamily.INTEGER,
    "INT": TypeFamily.INTEGER,
    "SMALLINT": TypeFamily.INTEGER,
    "TINYINT": TypeFamily.INTEGER,
    "BIGINT": TypeFamily.INTEGER,
    "CURRENCY": TypeFamily.FLOAT,
    "MONEY": TypeFamily.FLOAT,
    "SMALLMONEY": TypeFamily.FLOAT,
    "DECIMAL": TypeFamily.FLOAT,
    "NUMERIC": TypeFamily.FLOAT,
    "REAL": TypeFamily.FLOAT,
    "DOUBLE": TypeFamily.FLOAT,
    "FLOAT": TypeFamily.FLOAT,
    "BIT": TypeFamily.BOOLEAN,
    "DATETIME": TypeFamily.TIMESTAMP,
    "DATETIME2": TypeFamily.TIMESTAMP,
    "SMALLDATETIME": TypeFamily.TIMESTAMP,
}

NATIVE_PYTHON_TYPES: Mapping[type, TypeFamily] = {
    bool: TypeFamily.BOOLEAN,
    int: TypeFamily.INTEGER,
    float: TypeFamily.FLOAT,
    Decimal: TypeFamily.FLOAT,
    dt.datetime: TypeFamily.TIMESTAMP,
}


def resolve_type_family(type_code: Any) -> TypeFamily:
    if isinstance(type_code, str):
        return NATIVE_TYPE_NAMES.get(type_code.strip().upper(), TypeFamily.TEXT)
    if isinstance(type_code, type):
        return NATIVE_PYTHON_TYPES.get(type_code, TypeFamily.TEXT)
    return TypeFamily.TEXT


def parse_utc_timestamp(raw: Any) -> dt.datetime:
    if isinstance(raw, dt.datetime):
        value = raw
    else:
        value = dt.datetime.fromisoformat(str(raw).strip())
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def coerce_value(family: TypeFamily, raw: Any) -> Any:
    if raw is None:
        return None
    if family is TypeFamily.INTEGER:
        return int(raw)
    if family is TypeFamily.FLOAT:
        return float(raw)
    if family is TypeFamily.BOOLEAN:
        return raw is True or str(raw) == "1"
    if family is TypeFamily.TIMESTAMP:
        return parse_utc_timestamp(raw)
    return raw


def describe_columns(description: Sequence[Sequence[Any]] | None) -> list[tuple[str, TypeFamily]]:
    """
    Map a DB-API ``cursor.description`` to ``(name, family)`` pairs.
    """

    if not description:
        return []
    return [(column[0], resolve_type_family(column[1])) for column in description]


def coerce_row(columns: Sequence[tuple[str, TypeFamily]], row: Sequence[Any]) -> dict[str, Any]:
    return {name: coerce_value(family, raw) for (name, family), raw in zip(columns, row)}
