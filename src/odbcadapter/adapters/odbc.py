"""
ODBC database adapter implementation.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator, Mapping, Sequence

from ..dialects.mssql import MSSQLDialect
from ..errors import AdapterConfigurationError, DataConnectionError
from ..query import Aggregate, Collection, Criteria, SQLGenerator
from ..security.redaction import redact_params
from ..utils import QueryTracker, get_logger, resolve_slow_query_ms, time_call
from .base import ConnectionConfig, ConnectionState, DatabaseAdapter
from .translation import error_details, translate_error
from .types import coerce_row, describe_columns

Parameters = Sequence[Any] | Mapping[str, Any]


def _load_driver():
    try:
        import pyodbc

        return pyodbc
    except ImportError:
        return None


class ODBCAdapter(DatabaseAdapter):
    """
    Adapter owning one pyodbc connection to a SQL Server family database.

    The connection is opened by the constructor; a failure raises the
    translated error and no adapter is returned.

    An adapter is a single-writer object: statements run synchronously on one
    connection and ``save`` reads ``@@IDENTITY`` right after its insert, so
    no other statement may interleave on the same instance. Concurrent
    callers need one adapter each.
    """

    def __init__(
        self,
        config: ConnectionConfig | str,
        user: str | None = None,
        password: str | None = None,
        *,
        logger: logging.Logger | None = None,
        tracker: QueryTracker | None = None,
        slow_query_ms: int | None = None,
    ) -> None:
        self.dialect = MSSQLDialect()
        self.generator = SQLGenerator(self.dialect)
        self.logger = logger or get_logger("adapters.odbc")
        self.tracker = tracker
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)
        self.config = ConnectionConfig.coerce(config, user, password)
        self._state = ConnectionState.UNINITIALIZED
        self._connection: Any = None
        self._driver: Any = None
        self._connect()

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def _connect(self) -> None:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("pyodbc is required to use ODBCAdapter.")

        options: dict[str, Any] = {"autocommit": self.config.autocommit}
        if self.config.timeout:
            options["timeout"] = self.config.timeout

        self.logger.info(
            "Connecting to ODBC source %s (autocommit=%s)",
            self.config.descriptive_label(),
            self.config.autocommit,
        )

        try:
            connection = driver.connect(self.config.connection_string, **options)
        except driver.Error as exc:
            raise translate_error(*error_details(exc)) from exc

        self._driver = driver
        self._connection = connection
        self._state = ConnectionState.CONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connection(self) -> Any:
        return self._connection

    def set_logger(self, logger: logging.Logger) -> None:
        self.logger = logger

    def close(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None
                self._state = ConnectionState.CLOSED

    def __enter__(self) -> "ODBCAdapter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_connection(self) -> Any:
        if self._connection is None:
            raise DataConnectionError("ODBCAdapter is closed.")
        return self._connection

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def query(self, sql: str, parameters: Parameters | None = None) -> list[dict[str, Any]]:
        return self._run("odbc.query", sql, parameters, fetch=True)

    def execute(self, sql: str, parameters: Parameters | None = None) -> int:
        return self._run("odbc.execute", sql, parameters, fetch=False)

    def _run(
        self,
        name: str,
        sql: str,
        parameters: Parameters | None,
        *,
        fetch: bool,
        coerce: bool = True,
    ) -> Any:
        if parameters is not None and not isinstance(parameters, Mapping):
            parameters = list(parameters)
        statement = sql
        if parameters:
            statement = self.generator.interpolate_parameters(sql, parameters)
        connection = self._ensure_connection()
        # Logs and the tracker see the template only, never the bound literals.
        with time_call(
            name,
            self.logger,
            sql=sql,
            params=redact_params(parameters),
            threshold_ms=self.slow_query_ms,
        ) as timer:
            cursor = None
            try:
                cursor = connection.cursor()
                cursor.execute(statement)
                if fetch:
                    result: Any = self._fetch_rows(cursor, coerce=coerce)
                    timer.set_rows(len(result))
                else:
                    result = cursor.rowcount
                    timer.set_rows(result)
            except self._driver.Error as exc:
                raise translate_error(*error_details(exc)) from exc
            finally:
                self._close_cursor(cursor)
        if self.tracker is not None:
            self.tracker.record(sql, timer.elapsed_ms, timer.rows)
        return result

    def _close_cursor(self, cursor: Any) -> None:
        if cursor is None:
            return
        try:
            cursor.close()
        except self._driver.Error as exc:
            self.logger.debug("Failed to close cursor: %s", exc)

    @staticmethod
    def _fetch_rows(cursor: Any, *, coerce: bool = True) -> list[dict[str, Any]]:
        description = cursor.description
        if not description:
            return []
        if not coerce:
            names = [column[0] for column in description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        columns = describe_columns(description)
        return [coerce_row(columns, row) for row in cursor.fetchall()]

    @staticmethod
    def _first_cell(rows: list[dict[str, Any]]) -> Any:
        if not rows:
            return None
        return next(iter(rows[0].values()), None)

    # ------------------------------------------------------------------ #
    # Criteria operations
    # ------------------------------------------------------------------ #
    def collection(self, name: str, alias: str | None = None) -> Collection:
        return Collection(name, alias)

    def criteria(self, collection: Collection | str) -> Criteria:
        if isinstance(collection, str):
            collection = Collection(collection)
        return Criteria(collection)

    def find(self, criteria: Criteria) -> list[dict[str, Any]]:
        return self.query(self.generator.generate_select(criteria))

    def count(self, criteria: Criteria) -> int:
        value = self._first_cell(self.query(self.generator.generate_count(criteria)))
        return int(value) if value is not None else 0

    def aggregate(self, aggregate: Aggregate, criteria: Criteria) -> Any:
        return self._first_cell(self.query(self.generator.generate_aggregate(aggregate, criteria)))

    def save(
        self,
        values: Mapping[str, Any],
        collection: Collection | str,
        sequence: str | None = None,
    ) -> int | None:
        """
        Insert one row and return its identity value, or ``None`` when none was generated.

        ``sequence`` is accepted for interface parity with sequence-based
        engines and ignored; identity columns need no sequence name.
        """

        self.execute(self.generator.generate_insert(values, self._as_collection(collection)))
        # @@IDENTITY is numeric(38,0); float coercion would truncate bigint ids.
        rows = self._run(
            "odbc.identity", self.dialect.identity_query(), None, fetch=True, coerce=False
        )
        identity = self._first_cell(rows)
        if identity:
            return int(identity)
        return None

    def save_multiple(
        self, values_list: Sequence[Mapping[str, Any]], collection: Collection | str
    ) -> None:
        self.execute(
            self.generator.generate_multiple_insert(values_list, self._as_collection(collection))
        )

    def update(self, values: Mapping[str, Any], criteria: Criteria) -> int:
        return self.execute(self.generator.generate_update(values, criteria))

    def delete(self, criteria: Criteria) -> int:
        return self.execute(self.generator.generate_delete(criteria))

    @staticmethod
    def _as_collection(collection: Collection | str) -> Collection:
        if isinstance(collection, str):
            return Collection(collection)
        return collection

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def begin_transaction(self) -> None:
        self.execute(self.dialect.begin_statement())
        self._state = ConnectionState.IN_TRANSACTION

    def commit(self) -> None:
        self.execute(self.dialect.commit_statement())
        self._state = ConnectionState.CONNECTED

    def rollback(self) -> None:
        self.execute(self.dialect.rollback_statement())
        self._state = ConnectionState.CONNECTED

    @contextmanager
    def transaction(self) -> Generator["ODBCAdapter", None, None]:
        self.begin_transaction()
        try:
            yield self
        except Exception:
            self.rollback()
            raise
        else:
            self.commit()
