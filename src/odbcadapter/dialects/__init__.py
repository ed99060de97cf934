"""
Dialect strategy registry.
"""

from .base import Dialect, DialectCapabilities, LimitClause
from .mssql import MSSQLDialect

__all__ = ["Dialect", "DialectCapabilities", "LimitClause", "MSSQLDialect"]
