"""
SQL Server / Access dialect used over ODBC.
"""

from __future__ import annotations

import datetime as dt
import math
from decimal import Decimal
from typing import Any, Callable, Final, Mapping, Sequence

from ..errors import QuerySyntaxError
from ..query.elements import Field
from ..query.values import ValueKind, classify_value, to_utc
from .base import DialectCapabilities, LimitClause

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT: Final[str] = "%Y-%m-%d"


class MSSQLDialect:
    """
    Bracket-quoted identifiers, single-quoted literals and ``TOP``/``OFFSET`` paging.
    """

    name: Final[str] = "mssql"
    capabilities: Final[DialectCapabilities] = DialectCapabilities(
        requires_order_for_offset=True,
    )

    def __init__(self) -> None:
        self._renderers: Mapping[ValueKind, Callable[[Any], str]] = {
            ValueKind.NULL: self._render_null,
            ValueKind.BOOLEAN: self._render_boolean,
            ValueKind.NUMBER: self._render_number,
            ValueKind.TEXT: self._render_text,
            ValueKind.TIMESTAMP: self._render_timestamp,
            ValueKind.DATE: self._render_date,
            ValueKind.OBJECT: self._render_object,
        }

    # Identifiers -------------------------------------------------------
    def escape_identifier(self, name: str) -> str:
        escaped = name.replace("]", "]]")
        return f"[{escaped}]"

    def escape_field(self, field: Field) -> str:
        escaped = "*" if field.name == "*" else self.escape_identifier(field.name)
        if field.collection is not None:
            escaped = f"{self.escape_identifier(field.collection.reference)}.{escaped}"
        return escaped

    # Literals ----------------------------------------------------------
    def escape_value(self, value: Any) -> str:
        return self._renderers[classify_value(value)](value)

    def _render_null(self, value: None) -> str:
        return "NULL"

    def _render_boolean(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    def _render_number(self, value: Any) -> str:
        if isinstance(value, Decimal):
            finite = value.is_finite()
        else:
            finite = not isinstance(value, float) or math.isfinite(value)
        if not finite:
            raise QuerySyntaxError(f"Non-finite number {value!r} cannot be rendered as a literal")
        return str(value)

    def _render_text(self, value: str) -> str:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def _render_timestamp(self, value: dt.datetime) -> str:
        return self._render_text(to_utc(value).strftime(TIMESTAMP_FORMAT))

    def _render_date(self, value: dt.date) -> str:
        return self._render_text(value.strftime(DATE_FORMAT))

    def _render_object(self, value: Any) -> str:
        return self._render_text(str(value))

    # Statement shapes --------------------------------------------------
    def limit_clause(self, limit: int | None, offset: int | None) -> LimitClause:
        if offset is None:
            if limit is None:
                return LimitClause()
            return LimitClause(prefix=f"TOP {limit}")
        suffix = f"OFFSET {offset} ROWS"
        if limit is not None:
            suffix += f" FETCH NEXT {limit} ROWS ONLY"
        return LimitClause(suffix=suffix)

    def insert_header(self, table: str, columns: Sequence[str]) -> str:
        column_list = ", ".join(self.escape_identifier(column) for column in columns)
        return f"INSERT INTO {table} ({column_list})"

    def render_regex(self, field_sql: str, pattern: Any) -> str:
        raise QuerySyntaxError("Regular expressions not supported in ODBC")

    def identity_query(self) -> str:
        return "SELECT @@IDENTITY AS ID"

    def begin_statement(self) -> str:
        return "BEGIN TRANSACTION"

    def commit_statement(self) -> str:
        return "COMMIT TRANSACTION"

    def rollback_statement(self) -> str:
        return "ROLLBACK TRANSACTION"
