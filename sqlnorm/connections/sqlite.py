"""
Embedded-engine binding over the standard library ``sqlite3`` module.

The driver runs in autocommit mode; begin_transaction issues an explicit BEGIN
and the Transaction handle issues COMMIT / ROLLBACK.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Tuple

from sqlnorm.connections.base import NormConnection, parse_connection_string
from sqlnorm.exceptions import ConfigurationError
from sqlnorm.sql.dialects import Dialect


def sqlite_target(connection_string: str) -> Tuple[str, bool]:
    """
    Translate a ``Data Source=...;`` connection string into ``sqlite3.connect`` arguments.

    Returns
    -------
    tuple[str, bool]
        The database argument and whether it is a URI.
    """
    options = parse_connection_string(connection_string)
    source = options.get("data source")
    if not source:
        raise ConfigurationError("SQLite connection string has no Data Source")

    if source.lower() == ":memory:":
        return ":memory:", False

    shared = options.get("cache", "").lower() == "shared"
    if options.get("mode", "").lower() == "memory":
        return f"file:{source}?mode=memory&cache=shared", True

    uri = Path(source).resolve().as_uri() + "?mode=rwc"
    if shared:
        uri += "&cache=shared"
    return uri, True


class SqliteConnection(NormConnection):
    """Connection to a SQLite file or in-memory database."""

    dialect = Dialect.SQLITE

    def _open(self) -> sqlite3.Connection:
        database, uri = sqlite_target(self.connection_string)
        return sqlite3.connect(database, uri=uri, isolation_level=None)

    def _begin(self) -> None:
        self._require_handle().execute("BEGIN")

    def _commit(self) -> None:
        self._require_handle().execute("COMMIT")

    def _rollback(self) -> None:
        self._require_handle().execute("ROLLBACK")


__all__ = ["SqliteConnection", "sqlite_target"]
