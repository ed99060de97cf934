"""
Error taxonomy shared by the SQL generator and the ODBC adapter.
"""

from __future__ import annotations


class DataError(RuntimeError):
    """Base error for every failure surfaced by odbcadapter."""

    def __init__(
        self,
        message: str,
        *,
        sqlstate: str | None = None,
        driver_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate
        self.driver_message = driver_message


class DataConnectionError(DataError):
    """Raised when the data source cannot be reached or the adapter is closed."""


class AdapterConfigurationError(DataConnectionError):
    """Raised when configuration or the ODBC driver module is invalid."""


class AuthError(DataError):
    """
    Raised for SQLSTATE 42000.

    The driver reports syntax errors and access violations under the same
    code, so this category also covers plain SQL mistakes.
    """


class ConstraintError(DataError):
    """Raised when an integrity constraint rejects a statement."""


class UnknownCollectionError(DataError):
    """Raised when a statement references a table or view that does not exist."""


class UnknownFieldError(DataError):
    """Raised when a statement references a column that does not exist."""


class QueryError(DataError):
    """Raised for any native failure without a more specific category."""


class QuerySyntaxError(DataError):
    """Raised by the generator for constructs the dialect cannot express."""


__all__ = [
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
