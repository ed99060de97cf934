"""
Predicate tree primitives used by criteria filters and join conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List

from .elements import Field


AND = "AND"
OR = "OR"

OPERATORS = ("eq", "ne", "lt", "lte", "gt", "gte", "like", "in", "between", "isnull", "regex")


@dataclass(frozen=True)
class Predicate:
    """
    A single comparison between a field and a value.

    ``value`` may itself be a :class:`Field` to compare two columns, which is
    how join conditions are usually expressed.
    """

    field: Field
    operator: str = "eq"
    value: Any = None

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported lookup '{self.operator}'")


def _lookup_to_predicate(lookup: str, value: Any) -> Predicate:
    if "__" in lookup:
        name, operator = lookup.rsplit("__", 1)
    else:
        name, operator = lookup, "eq"
    return Predicate(Field(name), operator, value)


def _normalize_items(items: Iterable[tuple[str, Any]]) -> List[Predicate]:
    return [_lookup_to_predicate(lookup, value) for lookup, value in items]


class Q:
    """
    Boolean expression container similar to Django-style Q objects.

    Children are :class:`Predicate` instances or nested ``Q`` objects.
    Keyword lookups such as ``Q(age__gte=18)`` produce unqualified fields,
    which the generator qualifies with the base collection once a join is present.
    """

    def __init__(self, *children: Any, **lookups: Any) -> None:
        self.children: List[Any] = []
        for child in children:
            if not isinstance(child, (Predicate, Q)):
                raise TypeError(f"Q children must be Predicate or Q, got {type(child).__name__}")
            self.children.append(child)
        if lookups:
            self.children.extend(_normalize_items(lookups.items()))
        self.connector = AND
        self.negated = False

    def __or__(self, other: "Q") -> "Q":
        return self._combine(other, OR)

    def __and__(self, other: "Q") -> "Q":
        return self._combine(other, AND)

    def __invert__(self) -> "Q":
        q = self._clone()
        q.negated = not q.negated
        return q

    def __repr__(self) -> str:
        prefix = "NOT " if self.negated else ""
        return f"<Q {prefix}{self.connector} {self.children!r}>"

    # Internal helpers -------------------------------------------------
    def _clone(self) -> "Q":
        clone = Q()
        clone.children = list(self.children)
        clone.connector = self.connector
        clone.negated = self.negated
        return clone

    def _combine(self, other: "Q", connector: str) -> "Q":
        if other.is_empty():
            return self._clone()
        if self.is_empty():
            return other._clone()
        q = Q()
        q.children = [self._clone(), other._clone()]
        q.connector = connector
        return q

    def is_empty(self) -> bool:
        return not self.children

    def predicates(self) -> Iterable[Predicate]:
        for child in self.children:
            if isinstance(child, Q):
                yield from child.predicates()
            else:
                yield child
