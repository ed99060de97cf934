"""
Engine-independent references to tables, columns, aggregates and joins.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .expressions import Q


AGGREGATE_OPERATIONS = ("count", "sum", "avg", "min", "max")
JOIN_KINDS = ("INNER", "LEFT", "RIGHT", "FULL")


@dataclass(frozen=True)
class Collection:
    """
    A named table or view, optionally aliased for use in joins.
    """

    name: str
    alias: str | None = None

    def field(self, name: str) -> "Field":
        return Field(name, self)

    def aliased(self, alias: str) -> "Collection":
        return replace(self, alias=alias)

    @property
    def reference(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class Field:
    name: str
    collection: Collection | None = None


@dataclass(frozen=True)
class Aggregate:
    """
    Aggregate operation applied to a field; ``COUNT`` may omit the field.
    """

    operation: str
    field: Field | None = None
    distinct: bool = False

    def __post_init__(self) -> None:
        operation = self.operation.lower()
        if operation not in AGGREGATE_OPERATIONS:
            raise ValueError(f"Unsupported aggregate operation '{self.operation}'")
        if self.field is None and operation != "count":
            raise ValueError(f"Aggregate '{operation}' requires a target field.")
        object.__setattr__(self, "operation", operation)


@dataclass(frozen=True)
class Join:
    collection: Collection
    on: "Q"
    kind: str = "INNER"

    def __post_init__(self) -> None:
        kind = self.kind.upper()
        if kind not in JOIN_KINDS:
            raise ValueError(f"Unsupported join kind '{self.kind}'")
        object.__setattr__(self, "kind", kind)


@dataclass(frozen=True)
class Order:
    field: Field
    descending: bool = False
