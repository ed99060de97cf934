"""Security helpers for odbcadapter."""

from .dsns import DSNConfig, ODBCConnectionString, parse_dsn
from .redaction import redact_params, redact_value

__all__ = ["DSNConfig", "ODBCConnectionString", "parse_dsn", "redact_params", "redact_value"]
