"""
odbcadapter public package initialization.

Renders engine-independent criteria to SQL Server SQL, runs it over an ODBC
connection and normalizes result rows and driver errors.
"""

from .errors import (  # noqa: F401
    AdapterConfigurationError,
    AuthError,
    ConstraintError,
    DataConnectionError,
    DataError,
    QueryError,
    QuerySyntaxError,
    UnknownCollectionError,
    UnknownFieldError,
)
from .query import Aggregate, Collection, Criteria, Field, Predicate, Q, SQLGenerator  # noqa: F401
from .dialects import MSSQLDialect  # noqa: F401
from .adapters import ConnectionConfig, ConnectionState, ODBCAdapter  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Aggregate",
    "Collection",
    "Criteria",
    "Field",
    "Predicate",
    "Q",
    "SQLGenerator",
    "MSSQLDialect",
    "ConnectionConfig",
    "ConnectionState",
    "ODBCAdapter",
    "DataError",
    "DataConnectionError",
    "AdapterConfigurationError",
    "AuthError",
    "ConstraintError",
    "UnknownCollectionError",
    "UnknownFieldError",
    "QueryError",
    "QuerySyntaxError",
]
