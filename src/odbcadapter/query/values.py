"""
Closed set of literal kinds understood by the dialect escaping rules.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    DATE = "date"
    OBJECT = "object"


def classify_value(value: Any) -> ValueKind:
    """
    Resolve the literal kind of ``value``.

    Order matters: ``bool`` is an ``int`` subclass and ``datetime`` is a
    ``date`` subclass, so the narrower checks come first.
    """

    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, dt.datetime):
        return ValueKind.TIMESTAMP
    if isinstance(value, dt.date):
        return ValueKind.DATE
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    return ValueKind.OBJECT


def to_utc(value: dt.datetime) -> dt.datetime:
    """
    Return the UTC instant for ``value``; naive datetimes are taken as UTC.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)
