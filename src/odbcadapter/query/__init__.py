"""
Query construction and SQL generation APIs.
"""

from .criteria import Criteria
from .elements import Aggregate, Collection, Field, Join, Order
from .expressions import Predicate, Q
from .generator import SQLGenerator
from .values import ValueKind, classify_value

__all__ = [
    "Aggregate",
    "Collection",
    "Criteria",
    "Field",
    "Join",
    "Order",
    "Predicate",
    "Q",
    "SQLGenerator",
    "ValueKind",
    "classify_value",
]
