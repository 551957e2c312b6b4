from __future__ import annotations

import pytest

from sqlnorm.config import Settings
from sqlnorm.connections import ConnectionBuilder, MySqlConnection, SqliteConnection
from sqlnorm.connections.base import parse_connection_string
from sqlnorm.connections.mysql import mysql_connect_kwargs
from sqlnorm.connections.sqlite import sqlite_target
from sqlnorm.exceptions import ConfigurationError, ProviderIncompatibleError
from sqlnorm.sql.dialects import Dialect


@pytest.mark.parametrize(
    "configure",
    [
        lambda b: b.set_hostname("localhost"),
        lambda b: b.set_username("test"),
        lambda b: b.set_password("password"),
        lambda b: b.set_database("testdb"),
        lambda b: b.set_port(3306),
    ],
)
def test_networked_options_are_rejected_for_embedded(configure) -> None:
    with pytest.raises(ProviderIncompatibleError):
        configure(ConnectionBuilder(Dialect.SQLITE))


@pytest.mark.parametrize(
    "configure",
    [
        lambda b: b.set_explicit_data_source("app.db"),
        lambda b: b.use_in_memory_data_source(),
    ],
)
def test_embedded_options_are_rejected_for_networked(configure) -> None:
    with pytest.raises(ProviderIncompatibleError):
        configure(ConnectionBuilder(Dialect.MYSQL))


def test_networked_connection_string_keeps_call_order() -> None:
    builder = (
        ConnectionBuilder(Dialect.MYSQL)
        .set_hostname("localhost")
        .set_username("test")
        .set_password("password")
        .set_database("testdb")
    )
    assert builder.connection_string == "server=localhost;user=test;password=password;database=testdb;"

    builder.set_port(3307)
    assert builder.connection_string.endswith("port=3307;")


@pytest.mark.parametrize(
    "source, expected",
    [
        (":memory:", "Data Source=:memory:"),
        ("Shared;Mode=Memory;Cache=Shared", "Data Source=Shared;Mode=Memory;Cache=Shared"),
        ("app.db", "Data Source=app.db;Mode=ReadWriteCreate;Cache=Shared"),
    ],
)
def test_embedded_connection_strings(source: str, expected: str) -> None:
    assert ConnectionBuilder(Dialect.SQLITE).set_explicit_data_source(source).connection_string == expected


def test_later_data_source_replaces_earlier() -> None:
    builder = ConnectionBuilder(Dialect.SQLITE).set_explicit_data_source("app.db").use_in_memory_data_source()
    assert builder.connection_string == "Data Source=:memory:"


def test_build_returns_dialect_binding_without_connecting() -> None:
    embedded = ConnectionBuilder(Dialect.SQLITE).use_in_memory_data_source().build()
    networked = ConnectionBuilder(Dialect.MYSQL).set_hostname("db.invalid").build()

    assert isinstance(embedded, SqliteConnection)
    assert isinstance(networked, MySqlConnection)
    assert not embedded.is_open
    assert not networked.is_open


def test_embedded_build_requires_data_source() -> None:
    with pytest.raises(ConfigurationError):
        ConnectionBuilder(Dialect.SQLITE).build()


def test_from_settings_for_embedded() -> None:
    settings = Settings(dialect="sqlite", data_source="norm.db")
    builder = ConnectionBuilder.from_settings(settings)
    assert builder.dialect is Dialect.SQLITE
    assert builder.connection_string == "Data Source=norm.db;Mode=ReadWriteCreate;Cache=Shared"


def test_from_settings_for_networked() -> None:
    settings = Settings(
        dialect="mysql",
        db_host="db",
        db_port=3307,
        db_user="app",
        db_password="secret",
        db_name="norm",
        connect_attempts=5,
    )
    connection = ConnectionBuilder.from_settings(settings).build()

    assert connection.connection_string == "server=db;user=app;password=secret;database=norm;port=3307;"
    assert connection.connect_attempts == 5


def test_parse_connection_string_lowercases_keys() -> None:
    assert parse_connection_string("Data Source=a.db;Mode=Memory;;junk") == {
        "data source": "a.db",
        "mode": "Memory",
    }


def test_mysql_connect_kwargs() -> None:
    assert mysql_connect_kwargs("server=db;user=app;password=p=w;database=norm;port=3307;charset=x;") == {
        "host": "db",
        "user": "app",
        "password": "p=w",
        "database": "norm",
        "port": 3307,
    }


def test_sqlite_targets(tmp_path) -> None:
    assert sqlite_target("Data Source=:memory:") == (":memory:", False)
    assert sqlite_target("Data Source=Shared;Mode=Memory;Cache=Shared") == (
        "file:Shared?mode=memory&cache=shared",
        True,
    )
    database, uri = sqlite_target(f"Data Source={tmp_path / 'a.db'};Mode=ReadWriteCreate;Cache=Shared")
    assert uri is True
    assert database.startswith("file:")
    assert database.endswith("a.db?mode=rwc&cache=shared")
    with pytest.raises(ConfigurationError):
        sqlite_target("Mode=Memory")
