"""
Dialect strategy interfaces describing SQL rendering behaviors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from ..query.elements import Field


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing backend capabilities.
    """

    requires_order_for_offset: bool = False


@dataclass(frozen=True)
class LimitClause:
    """
    Paging fragments placed after ``SELECT`` (prefix) and at the end (suffix).
    """

    prefix: str = ""
    suffix: str = ""


class Dialect(Protocol):
    """
    Strategy interface consumed by the shared SQL generator.

    A dialect only supplies what differs between engines: identifier quoting,
    literal escaping, paging syntax, the insert header and predicates it may
    not be able to express.
    """

    @property
    def name(self) -> str: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    def escape_identifier(self, name: str) -> str: ...

    def escape_field(self, field: Field) -> str: ...

    def escape_value(self, value: Any) -> str: ...

    def limit_clause(self, limit: int | None, offset: int | None) -> LimitClause: ...

    def insert_header(self, table: str, columns: Sequence[str]) -> str: ...

    def render_regex(self, field_sql: str, pattern: Any) -> str: ...

    def identity_query(self) -> str: ...

    def begin_statement(self) -> str: ...

    def commit_statement(self) -> str: ...

    def rollback_statement(self) -> str: ...
