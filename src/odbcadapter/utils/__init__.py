"""
Utility helpers shared across odbcadapter packages.
"""

from .logging import configure_logging, get_logger, time_call
from .performance import QueryTracker, resolve_slow_query_ms

__all__ = ["QueryTracker", "configure_logging", "get_logger", "resolve_slow_query_ms", "time_call"]
