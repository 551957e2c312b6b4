"""
Dialect table.

Each supported engine is a Dialect tag plus a DialectProfile holding the
per-engine pieces the builders need: type map, timestamp rendering and parsing,
schema introspection query, and the text overlays applied to generic
statements. Builders look the profile up by tag; nothing here performs I/O.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping

from sqlnorm.metadata.descriptors import SemanticType


class Dialect(str, enum.Enum):
    """Supported SQL engines."""

    SQLITE = "sqlite"
    MYSQL = "mysql"


_FRACTION = re.compile(r"\.(\d+)")
_INT_DISPLAY_WIDTH = re.compile(r"^(tinyint|smallint|mediumint|int|bigint)\((\d+)\)", re.IGNORECASE)


def _as_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return raw.decode("utf-8")
    return str(raw).strip()


def _utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _sqlite_timestamp(value: datetime) -> str:
    # Naive values are taken as UTC. Seven fractional digits keep the
    # round-trip form stable regardless of the microsecond value.
    value = _utc_naive(value)
    return f"{value.isoformat(timespec='seconds')}.{value.microsecond:06d}0Z"


def _parse_sqlite_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    else:
        text = _as_text(raw)
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _mysql_timestamp(value: datetime) -> str:
    return _utc_naive(value).isoformat(sep=" ", timespec="seconds")


def _parse_mysql_timestamp(raw: Any) -> datetime:
    value = raw if isinstance(raw, datetime) else datetime.fromisoformat(_as_text(raw))
    return _utc_naive(value).replace(microsecond=0)


def _double_quotes(text: str) -> str:
    return text.replace("'", "''")


def _mysql_escape(text: str) -> str:
    # The default sql_mode treats backslash as an escape character inside literals.
    return _double_quotes(text.replace("\\", "\\\\"))


def _sqlite_table_info(table: str) -> str:
    return f"PRAGMA table_info({table});"


def _mysql_table_info(table: str) -> str:
    escaped = _mysql_escape(table)
    return (
        "SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_DEFAULT, COLUMN_KEY, EXTRA "
        "FROM INFORMATION_SCHEMA.COLUMNS "
        f"WHERE TABLE_NAME = '{escaped}' AND TABLE_SCHEMA = DATABASE() "
        "ORDER BY ORDINAL_POSITION;"
    )


def _sqlite_delete(text: str) -> str:
    if text.endswith(";"):
        text = text[:-1]
    return f"{text} RETURNING *;"


def _mysql_delete(text: str) -> str:
    return f"{text} SELECT ROW_COUNT();"


def _mysql_truncate(text: str, table: str) -> str:
    # MySQL has no DELETE ... RETURNING; check for a row first so the cursor
    # yields one row exactly when the table was not empty.
    return f"SELECT 1 FROM {table} LIMIT 1; DELETE FROM {table};"


def _same_type(live: str, expected: str) -> bool:
    return live.strip().lower() == expected.strip().lower()


def _mysql_same_type(live: str, expected: str) -> bool:
    # Servers before 8.0.19 report integer display widths, e.g. int(11).
    def normalize(text: str) -> str:
        text = text.strip().lower()
        match = _INT_DISPLAY_WIDTH.match(text)
        if match and match.group(1) != "tinyint":
            text = match.group(1) + text[match.end() :]
        return text

    return normalize(live) == normalize(expected)


def _identity(text: str) -> str:
    return text


def _keep_truncate(text: str, table: str) -> str:
    return text


@dataclass(frozen=True)
class DialectProfile:
    """Per-dialect functions and constants consumed by the SQL builders."""

    dialect: Dialect
    type_map: Mapping[SemanticType, str]
    format_timestamp: Callable[[datetime], str]
    parse_timestamp: Callable[[Any], datetime]
    table_info: Callable[[str], str]
    insert_trailer: str
    escape_text: Callable[[str], str] = _double_quotes
    backslash_escapes: bool = False
    empty_insert_template: str = "INSERT INTO {table} DEFAULT VALUES;"
    finish_create: Callable[[str], str] = _identity
    finish_delete: Callable[[str], str] = _identity
    finish_truncate: Callable[[str, str], str] = _keep_truncate
    types_match: Callable[[str, str], bool] = _same_type
    supports_alter_type: bool = False
    alter_type_template: str = "ALTER TABLE {table} ALTER COLUMN {column} TYPE {type};"


SQLITE = DialectProfile(
    dialect=Dialect.SQLITE,
    type_map={
        SemanticType.INT32: "INTEGER",
        SemanticType.TEXT: "TEXT",
        SemanticType.BOOL: "BOOLEAN",
        SemanticType.TIMESTAMP: "TEXT",
        SemanticType.FLOAT64: "REAL",
    },
    format_timestamp=_sqlite_timestamp,
    parse_timestamp=_parse_sqlite_timestamp,
    table_info=_sqlite_table_info,
    insert_trailer=" SELECT last_insert_rowid();",
    finish_delete=_sqlite_delete,
)

MYSQL = DialectProfile(
    dialect=Dialect.MYSQL,
    type_map={
        SemanticType.INT32: "INT",
        SemanticType.TEXT: "VARCHAR(255)",
        SemanticType.BOOL: "TINYINT(1)",
        SemanticType.TIMESTAMP: "DATETIME",
        SemanticType.FLOAT64: "DOUBLE",
    },
    format_timestamp=_mysql_timestamp,
    parse_timestamp=_parse_mysql_timestamp,
    table_info=_mysql_table_info,
    insert_trailer=" SELECT LAST_INSERT_ID();",
    escape_text=_mysql_escape,
    backslash_escapes=True,
    empty_insert_template="INSERT INTO {table} () VALUES ();",
    finish_create=lambda text: text.replace("AUTOINCREMENT", "AUTO_INCREMENT"),
    finish_delete=_mysql_delete,
    finish_truncate=_mysql_truncate,
    types_match=_mysql_same_type,
    supports_alter_type=True,
    alter_type_template="ALTER TABLE {table} MODIFY COLUMN {column} {type};",
)

_PROFILES: Dict[Dialect, DialectProfile] = {
    Dialect.SQLITE: SQLITE,
    Dialect.MYSQL: MYSQL,
}


def profile_for(dialect: Dialect) -> DialectProfile:
    """Look up the profile for a dialect tag (accepts the tag's string value)."""
    return _PROFILES[Dialect(dialect)]


__all__ = ["Dialect", "DialectProfile", "SQLITE", "MYSQL", "profile_for"]
