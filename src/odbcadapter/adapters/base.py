"""
Adapter protocol definitions and connection configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

from ..dialects.base import Dialect
from ..errors import AdapterConfigurationError
from ..security.dsns import DSNConfig, ODBCConnectionString, parse_dsn

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


class ConnectionState(Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    IN_TRANSACTION = "in_transaction"
    CLOSED = "closed"


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise AdapterConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def _pop_bool(query: dict[str, str], key: str) -> bool | None:
    if key not in query:
        return None
    return _parse_bool(query.pop(key), key=key)


def _pop_int(query: dict[str, str], key: str) -> int | None:
    if key not in query:
        return None
    return _parse_int(query.pop(key), key=key)


@dataclass
class ConnectionConfig:
    """
    Normalized connection configuration for the ODBC adapter.

    ``autocommit`` defaults to ``True`` so that transactions are governed by
    explicit ``BEGIN TRANSACTION`` statements rather than the driver.
    """

    connection_string: str
    autocommit: bool = True
    timeout: int | None = None
    options: dict[str, Any] | None = None
    dsn: DSNConfig | None = None
    odbc: ODBCConnectionString | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a config from a URL such as ``mssql://user:pw@host:1433/db?driver=...``.

        Query arguments other than ``driver``, ``autocommit`` and ``timeout``
        are passed through as ODBC connection attributes.
        """

        parsed = parse_dsn(dsn)
        query = dict(parsed.query)

        parsed_autocommit = _pop_bool(query, "autocommit")
        parsed_timeout = _pop_int(query, "timeout")
        driver = query.pop("driver", None) or DEFAULT_ODBC_DRIVER

        odbc = ODBCConnectionString({"DRIVER": driver})
        if parsed.host:
            server = parsed.host
            if parsed.port:
                server += f",{parsed.port}"
            odbc.set("SERVER", server)
        if parsed.database:
            odbc.set("DATABASE", parsed.database)
        user = kwargs.pop("user", None) or parsed.username
        password = kwargs.pop("password", None) or parsed.password
        if user:
            odbc.set("UID", user)
        if password:
            odbc.set("PWD", password)
        for key, value in query.items():
            odbc.set(key, value)

        return cls._build(odbc, parsed_autocommit, parsed_timeout, dsn=parsed, **kwargs)

    @classmethod
    def from_odbc(cls, connection_string: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a config from a raw ODBC string such as ``DSN=Sales;UID=app``.
        """

        try:
            odbc = ODBCConnectionString.parse(connection_string)
        except ValueError as exc:
            raise AdapterConfigurationError(str(exc)) from exc
        user = kwargs.pop("user", None)
        password = kwargs.pop("password", None)
        if user:
            odbc.set("UID", user)
        if password:
            odbc.set("PWD", password)
        return cls._build(odbc, None, None, **kwargs)

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a config from an environment variable holding a URL or ODBC string.
        """

        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.coerce(value, source=env_var, **kwargs)

    @classmethod
    def coerce(
        cls,
        value: "ConnectionConfig | str",
        user: str | None = None,
        password: str | None = None,
        **kwargs: Any,
    ) -> "ConnectionConfig":
        if isinstance(value, ConnectionConfig):
            return value
        if "://" in value:
            return cls.from_dsn(value, user=user, password=password, **kwargs)
        return cls.from_odbc(value, user=user, password=password, **kwargs)

    @classmethod
    def _build(
        cls,
        odbc: ODBCConnectionString,
        parsed_autocommit: bool | None,
        parsed_timeout: int | None,
        **kwargs: Any,
    ) -> "ConnectionConfig":
        options: dict[str, Any] = dict(kwargs.pop("options", None) or {})
        for key, value in options.items():
            odbc.set(key, str(value))

        autocommit = kwargs.pop("autocommit", parsed_autocommit)
        if autocommit is None:
            autocommit = True
        timeout = kwargs.pop("timeout", parsed_timeout)

        return cls(
            connection_string=odbc.render(),
            autocommit=autocommit,
            timeout=timeout,
            options=options or None,
            odbc=odbc,
            **kwargs,
        )

    def redacted_dsn(self) -> str:
        """
        Return a connection descriptor safe for logging (credentials removed).
        """

        if self.dsn:
            return self.dsn.redacted()
        if self.odbc:
            return self.odbc.redacted()
        return ODBCConnectionString.parse(self.connection_string).redacted()

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted


class DatabaseAdapter(Protocol):
    """
    Adapter interface exposing database operations used by callers.
    """

    dialect: Dialect
    slow_query_ms: int

    @property
    def state(self) -> ConnectionState: ...

    def close(self) -> None:
        """
        Close underlying resources. Implementations should be idempotent.
        """

    def query(
        self, sql: str, parameters: Sequence[Any] | Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """
        Execute a statement and return coerced result rows.
        """

    def execute(
        self, sql: str, parameters: Sequence[Any] | Mapping[str, Any] | None = None
    ) -> int:
        """
        Execute a statement without a result set and return the affected row count.
        """

    def begin_transaction(self) -> None:
        """
        Start a transaction on the connection.
        """

    def commit(self) -> None:
        """
        Commit the current transaction.
        """

    def rollback(self) -> None:
        """
        Roll back the current transaction.
        """
