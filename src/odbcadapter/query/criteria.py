"""
Criteria implementation providing a chainable, immutable query description.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from .elements import Collection, Field, Join, Order
from .expressions import Q


class Criteria:
    """
    Engine-independent description of a query against one collection.

    Builder methods never mutate; each returns a new ``Criteria`` so an
    instance handed to the generator cannot change underneath it.
    """

    def __init__(
        self,
        collection: Collection,
        *,
        where: Optional[Q] = None,
        fields: Tuple[Field, ...] = (),
        joins: Tuple[Join, ...] = (),
        ordering: Tuple[Order, ...] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        distinct: bool = False,
    ) -> None:
        self.collection = collection
        self._where = where or Q()
        self._fields = fields
        self._joins = joins
        self._ordering = ordering
        self._limit = limit
        self._offset = offset
        self._distinct = distinct

    # Public API --------------------------------------------------------
    def filter(self, **lookups: Any) -> "Criteria":
        return self._clone(where=self._add_q(Q(**lookups)))

    def exclude(self, **lookups: Any) -> "Criteria":
        return self._clone(where=self._add_q(~Q(**lookups)))

    def where(self, q_object: Q) -> "Criteria":
        return self._clone(where=self._add_q(q_object))

    def fields(self, *fields: Field | str) -> "Criteria":
        resolved = tuple(self._resolve_field(field) for field in fields)
        return self._clone(fields=self._fields + resolved)

    def join(self, collection: Collection, on: Q, kind: str = "INNER") -> "Criteria":
        return self._clone(joins=self._joins + (Join(collection, on, kind),))

    def order_by(self, *fields: Field | str) -> "Criteria":
        ordering = []
        for field in fields:
            descending = False
            if isinstance(field, str) and field.startswith("-"):
                descending = True
                field = field[1:]
            ordering.append(Order(self._resolve_field(field), descending))
        return self._clone(ordering=tuple(ordering))

    def limit(self, value: int) -> "Criteria":
        if value < 0:
            raise ValueError("limit() requires a non-negative value.")
        return self._clone(limit=value)

    def offset(self, value: int) -> "Criteria":
        if value < 0:
            raise ValueError("offset() requires a non-negative value.")
        return self._clone(offset=value)

    def distinct(self, value: bool = True) -> "Criteria":
        return self._clone(distinct=value)

    # Read-only state consumed by the generator ------------------------
    @property
    def predicate(self) -> Q:
        return self._where

    @property
    def projection(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def joins(self) -> Tuple[Join, ...]:
        return self._joins

    @property
    def ordering(self) -> Tuple[Order, ...]:
        return self._ordering

    @property
    def max_results(self) -> Optional[int]:
        return self._limit

    @property
    def skip(self) -> Optional[int]:
        return self._offset

    @property
    def is_distinct(self) -> bool:
        return self._distinct

    # Internal helpers --------------------------------------------------
    def _resolve_field(self, field: Field | str) -> Field:
        if isinstance(field, Field):
            return field
        return Field(field)

    def _add_q(self, q_object: Q) -> Q:
        if self._where.is_empty():
            return q_object
        return self._where & q_object

    def _clone(self, **overrides: Any) -> "Criteria":
        params = {
            "where": overrides.get("where", self._where),
            "fields": overrides.get("fields", self._fields),
            "joins": overrides.get("joins", self._joins),
            "ordering": overrides.get("ordering", self._ordering),
            "limit": overrides.get("limit", self._limit),
            "offset": overrides.get("offset", self._offset),
            "distinct": overrides.get("distinct", self._distinct),
        }
        return Criteria(self.collection, **params)
