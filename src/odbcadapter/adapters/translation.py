"""
Translation of native ODBC SQLSTATE codes into the typed error taxonomy.
"""

from __future__ import annotations

from typing import Callable, Mapping

from ..errors import (
    AuthError,
    ConstraintError,
    DataConnectionError,
    DataError,
    QueryError,
    UnknownCollectionError,
    UnknownFieldError,
)

_Rule = tuple[Callable[..., DataError], str]

SQLSTATE_RULES: Mapping[str, _Rule] = {
    "IM002": (DataConnectionError, "Data source name not found and no default driver specified: {msg}"),
    "IM003": (DataConnectionError, "Specified driver could not be loaded: {msg}"),
    "IM014": (DataConnectionError, "Invalid name of File DSN: {msg}"),
    "IM015": (DataConnectionError, "Corrupt file data source: {msg}"),
    "42000": (AuthError, "Syntax error or access violation: {msg}"),
    "23000": (ConstraintError, "{msg}"),
    "S1000": (ConstraintError, "{msg}"),
    "S0002": (UnknownCollectionError, "Table not valid: {msg}"),
    "42S02": (UnknownCollectionError, "Table not valid: {msg}"),
    "07001": (UnknownFieldError, "Field not valid: {msg}"),
    "42S22": (UnknownFieldError, "Field not valid: {msg}"),
}


def translate_error(sqlstate: str | None, message: str) -> DataError:
    """
    Build the typed error for a native failure; unknown codes become ``QueryError``.
    """

    error_cls, template = SQLSTATE_RULES.get((sqlstate or "").upper(), (QueryError, "{msg}"))
    return error_cls(template.format(msg=message), sqlstate=sqlstate, driver_message=message)


def error_details(exc: BaseException) -> tuple[str | None, str]:
    """
    Extract ``(sqlstate, message)`` from a DB-API driver exception.

    pyodbc raises errors whose ``args`` are ``(sqlstate, message)``.
    """

    args = getattr(exc, "args", ())
    if len(args) >= 2 and isinstance(args[0], str):
        return args[0], str(args[1])
    if len(args) == 1:
        return None, str(args[0])
    return None, str(exc)
