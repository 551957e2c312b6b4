"""
MySQL binding behavior that does not need a server: connection arguments,
retry policy and transaction delegation, with mysql.connector.connect patched.
"""

from __future__ import annotations

from typing import Any, Dict, List

import mysql.connector
import pytest
from mysql.connector import errors as mysql_errors

from sqlnorm.connections import mysql as mysql_binding
from sqlnorm.connections.mysql import MySqlConnection
from sqlnorm.exceptions import ProviderIncompatibleError
from sqlnorm.sql import builder
from sqlnorm.sql.dialects import Dialect
from sqlnorm.sql.payload import SqlPayload

CONNECTION_STRING = "server=db;user=app;password=secret;database=norm;port=3307;"


class FakeCursor:
    def __init__(self, handle: "FakeHandle") -> None:
        self._handle = handle
        self.description = None
        self._rows: List[tuple] = []

    def execute(self, statement: str) -> None:
        self._handle.statements.append(statement)
        if statement.startswith("SELECT"):
            self.description = [("value",)]
            self._rows = [(self._handle.scalar,)]
        else:
            self.description = None
            self._rows = []

    def fetchall(self) -> List[tuple]:
        return self._rows

    def close(self) -> None:
        pass


class FakeHandle:
    def __init__(self) -> None:
        self.statements: List[str] = []
        self.calls: List[str] = []
        self.scalar: Any = 1
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def start_transaction(self) -> None:
        self.calls.append("start_transaction")

    def commit(self) -> None:
        self.calls.append("commit")

    def rollback(self) -> None:
        self.calls.append("rollback")

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mysql_binding._connect.retry, "sleep", lambda seconds: None)


@pytest.fixture()
def handle(monkeypatch: pytest.MonkeyPatch) -> FakeHandle:
    fake = FakeHandle()
    received: Dict[str, Any] = {}

    def connect(**kwargs: Any) -> FakeHandle:
        received.update(kwargs)
        return fake

    monkeypatch.setattr(mysql.connector, "connect", connect)
    fake.received = received  # type: ignore[attr-defined]
    return fake


def test_connect_passes_mapped_arguments_with_autocommit(handle: FakeHandle) -> None:
    connection = MySqlConnection(CONNECTION_STRING).connect()

    assert connection.is_open
    assert handle.received == {  # type: ignore[attr-defined]
        "host": "db",
        "user": "app",
        "password": "secret",
        "database": "norm",
        "port": 3307,
        "autocommit": True,
    }
    connection.close()
    assert handle.closed


def test_transient_errors_are_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = []

    def flaky(**kwargs: Any) -> FakeHandle:
        attempts.append(kwargs)
        if len(attempts) < 3:
            raise mysql_errors.InterfaceError(msg="server went away")
        return FakeHandle()

    monkeypatch.setattr(mysql.connector, "connect", flaky)

    MySqlConnection(CONNECTION_STRING, connect_attempts=3).connect()

    assert len(attempts) == 3


def test_retries_stop_after_configured_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = []

    def down(**kwargs: Any) -> FakeHandle:
        attempts.append(kwargs)
        raise mysql_errors.OperationalError(msg="connection refused")

    monkeypatch.setattr(mysql.connector, "connect", down)

    with pytest.raises(mysql_errors.OperationalError):
        MySqlConnection(CONNECTION_STRING, connect_attempts=2).connect()
    assert len(attempts) == 2


def test_access_errors_are_not_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = []

    def denied(**kwargs: Any) -> FakeHandle:
        attempts.append(kwargs)
        raise mysql_errors.ProgrammingError(msg="access denied")

    monkeypatch.setattr(mysql.connector, "connect", denied)

    with pytest.raises(mysql_errors.ProgrammingError):
        MySqlConnection(CONNECTION_STRING).connect()
    assert len(attempts) == 1


def test_transactions_delegate_to_driver(handle: FakeHandle) -> None:
    connection = MySqlConnection(CONNECTION_STRING).connect()

    with connection.begin_transaction():
        pass
    transaction = connection.begin_transaction()
    transaction.rollback()

    assert handle.calls == ["start_transaction", "commit", "start_transaction", "rollback"]


def test_multi_statement_payload_runs_each_statement(handle: FakeHandle) -> None:
    connection = MySqlConnection(CONNECTION_STRING).connect()
    handle.scalar = 7

    payload = SqlPayload("INSERT INTO Posts (title) VALUES ('a;b'); SELECT LAST_INSERT_ID();", "Posts", Dialect.MYSQL)

    assert connection.execute_scalar(payload) == 7
    assert handle.statements == ["INSERT INTO Posts (title) VALUES ('a;b')", "SELECT LAST_INSERT_ID()"]


def test_embedded_payload_is_rejected(handle: FakeHandle) -> None:
    connection = MySqlConnection(CONNECTION_STRING).connect()
    payload = builder.add_column(Dialect.SQLITE, "Posts", "description", "TEXT")

    with pytest.raises(ProviderIncompatibleError):
        connection.execute_non_query(payload)
