"""DSN parsing, ODBC connection-string handling and redaction utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qs, unquote, urlencode, urlparse

from .redaction import REDACTED_VALUE, is_sensitive_key


@dataclass
class DSNConfig:
    driver: str
    username: Optional[str]
    password: Optional[str]
    host: Optional[str]
    port: Optional[int]
    database: Optional[str]
    path: str
    query: dict[str, str]

    def redacted(self) -> str:
        """
        Return the DSN with credentials redacted but structure preserved.
        """

        netloc = ""
        if self.username:
            netloc += self.username
            if self.password:
                netloc += ":***"
            netloc += "@"
        if self.host:
            netloc += self.host
        if self.port:
            netloc += f":{self.port}"

        query = {
            key: REDACTED_VALUE if is_sensitive_key(key) else value
            for key, value in self.query.items()
        }
        query_string = urlencode(query) if query else ""

        result = f"{self.driver}://"
        if netloc:
            result += netloc
        result += self.path or ""
        if query_string:
            result += f"?{query_string}"
        return result


def parse_dsn(dsn: str) -> DSNConfig:
    parsed = urlparse(dsn)
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    return DSNConfig(
        driver=parsed.scheme,
        username=unquote(parsed.username) if parsed.username else None,
        password=unquote(parsed.password) if parsed.password else None,
        host=parsed.hostname,
        port=parsed.port,
        database=parsed.path.lstrip("/") or None,
        path=parsed.path or "",
        query=query,
    )


@dataclass
class ODBCConnectionString:
    """
    Ordered ``KEY=value;`` attribute list accepted by ODBC drivers.

    Values containing ``;`` or braces are wrapped in braces, with ``}``
    doubled, which is the ODBC escaping rule.
    """

    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "ODBCConnectionString":
        attributes: dict[str, str] = {}
        idx = 0
        length = len(text)
        while idx < length:
            eq = text.find("=", idx)
            if eq == -1:
                if text[idx:].strip():
                    raise ValueError(f"Malformed ODBC connection string segment: {text[idx:]!r}")
                break
            key = text[idx:eq].strip()
            idx = eq + 1
            if idx < length and text[idx] == "{":
                value_chars = []
                idx += 1
                while idx < length:
                    char = text[idx]
                    if char == "}":
                        if idx + 1 < length and text[idx + 1] == "}":
                            value_chars.append("}")
                            idx += 2
                            continue
                        idx += 1
                        break
                    value_chars.append(char)
                    idx += 1
                else:
                    raise ValueError("Unterminated brace in ODBC connection string.")
                value = "".join(value_chars)
                semi = text.find(";", idx)
                idx = length if semi == -1 else semi + 1
            else:
                semi = text.find(";", idx)
                end = length if semi == -1 else semi
                value = text[idx:end].strip()
                idx = end + 1
            if key:
                attributes[key] = value
        return cls(attributes)

    def get(self, key: str) -> Optional[str]:
        wanted = key.upper()
        for name, value in self.attributes.items():
            if name.upper() == wanted:
                return value
        return None

    def set(self, key: str, value: str) -> None:
        wanted = key.upper()
        for name in list(self.attributes):
            if name.upper() == wanted:
                self.attributes[name] = value
                return
        self.attributes[key] = value

    def render(self) -> str:
        return "".join(f"{key}={_quote_value(value)};" for key, value in self.attributes.items())

    def redacted(self) -> str:
        return "".join(
            f"{key}={REDACTED_VALUE if _is_secret_attribute(key) else _quote_value(value)};"
            for key, value in self.attributes.items()
        )


def _is_secret_attribute(key: str) -> bool:
    return key.upper() == "PWD" or is_sensitive_key(key)


def _quote_value(value: str) -> str:
    if any(char in value for char in ";{}") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value
