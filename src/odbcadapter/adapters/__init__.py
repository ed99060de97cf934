"""
Database adapter interfaces and the ODBC implementation.
"""

from .base import ConnectionConfig, ConnectionState, DatabaseAdapter
from .odbc import ODBCAdapter
from .translation import translate_error
from .types import TypeFamily, coerce_value, resolve_type_family

__all__ = [
    "ConnectionConfig",
    "ConnectionState",
    "DatabaseAdapter",
    "ODBCAdapter",
    "TypeFamily",
    "coerce_value",
    "resolve_type_family",
    "translate_error",
]
