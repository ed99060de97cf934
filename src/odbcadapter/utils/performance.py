"""
Slow-query thresholds and per-statement tracking.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

SLOW_QUERY_ENV = "ODBCADAPTER_SLOW_QUERY_MS"


def resolve_slow_query_ms(*, default: int = 100, override: int | None = None) -> int:
    if override is not None:
        return override
    value = os.getenv(SLOW_QUERY_ENV)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class QueryStat:
    sql: str
    count: int = 0
    total_ms: float = 0.0
    total_rows: int = 0

    def record(self, elapsed_ms: float, rows: int | None) -> None:
        self.count += 1
        self.total_ms += elapsed_ms
        if rows is not None and rows > 0:
            self.total_rows += rows

    @property
    def average_ms(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_ms / self.count


@dataclass
class QueryTracker:
    """
    Observes rendered statements with their elapsed time and cardinality.

    Purely observational; attaching a tracker never changes adapter behavior.
    """

    stats: dict[str, QueryStat] = field(default_factory=dict)

    def record(self, sql: str, elapsed_ms: float, rows: int | None) -> None:
        normalized_sql = self._normalize_sql(sql)
        stat = self.stats.setdefault(normalized_sql, QueryStat(sql=normalized_sql))
        stat.record(elapsed_ms, rows)

    def summary(self) -> List[dict[str, object]]:
        return [
            {
                "sql": stat.sql,
                "count": stat.count,
                "total_ms": stat.total_ms,
                "average_ms": stat.average_ms,
                "rows": stat.total_rows,
            }
            for stat in self.stats.values()
        ]

    def reset(self) -> None:
        self.stats.clear()

    @staticmethod
    def _normalize_sql(sql: str) -> str:
        return " ".join(sql.strip().split())
