"""
Networked-engine binding over ``mysql-connector-python``.

Opening the connection is retried with exponential backoff for transient
connection errors. The session runs with autocommit enabled; begin_transaction
starts an explicit transaction on the same session.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sqlnorm.connections.base import NormConnection, parse_connection_string
from sqlnorm.metadata.registry import MetadataRegistry
from sqlnorm.sql.dialects import Dialect

_KEY_ALIASES = {
    "server": "host",
    "host": "host",
    "user": "user",
    "username": "user",
    "uid": "user",
    "password": "password",
    "pwd": "password",
    "database": "database",
    "port": "port",
}


def mysql_connect_kwargs(connection_string: str) -> Dict[str, Any]:
    """Map ``server=...;user=...;`` pairs onto ``mysql.connector.connect`` keyword arguments."""
    kwargs: Dict[str, Any] = {}
    for key, value in parse_connection_string(connection_string).items():
        name = _KEY_ALIASES.get(key)
        if name is None:
            continue
        kwargs[name] = int(value) if name == "port" else value
    return kwargs


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((mysql_errors.InterfaceError, mysql_errors.OperationalError)),
    reraise=True,
)
def _connect(**kwargs: Any) -> Any:
    """
    Open a mysql.connector connection with automatic retry.

    Raises
    ------
    mysql.connector.errors.Error
        If the connection fails after all retry attempts.
    """
    return mysql.connector.connect(**kwargs)


class MySqlConnection(NormConnection):
    """Connection to a MySQL (or compatible) server."""

    dialect = Dialect.MYSQL

    def __init__(
        self,
        connection_string: str,
        registry: Optional[MetadataRegistry] = None,
        connect_attempts: int = 3,
    ) -> None:
        super().__init__(connection_string, registry)
        self.connect_attempts = connect_attempts

    def _open(self) -> Any:
        connect = _connect.retry_with(stop=stop_after_attempt(self.connect_attempts))
        return connect(autocommit=True, **mysql_connect_kwargs(self.connection_string))

    def _begin(self) -> None:
        self._require_handle().start_transaction()

    def _commit(self) -> None:
        self._require_handle().commit()

    def _rollback(self) -> None:
        self._require_handle().rollback()


__all__ = ["MySqlConnection", "mysql_connect_kwargs"]
