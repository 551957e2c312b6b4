"""
Fluent, validating connection configurator.

    connection = (
        ConnectionBuilder(Dialect.MYSQL)
        .set_hostname("localhost")
        .set_username("test")
        .set_password("password")
        .set_database("testdb")
        .build_and_connect()
    )

Each option belongs to one dialect; using it with the other raises
ProviderIncompatibleError. MySQL options are concatenated as ``key=value;``
pairs in call order. A SQLite builder holds exactly one data source; setting a
new one replaces the previous.
"""

from __future__ import annotations

from typing import Optional

from sqlnorm.config import Settings
from sqlnorm.connections.base import NormConnection
from sqlnorm.connections.mysql import MySqlConnection
from sqlnorm.connections.sqlite import SqliteConnection
from sqlnorm.exceptions import ConfigurationError, ProviderIncompatibleError
from sqlnorm.metadata.registry import MetadataRegistry
from sqlnorm.sql.dialects import Dialect


class ConnectionBuilder:
    def __init__(self, dialect: Dialect, registry: Optional[MetadataRegistry] = None) -> None:
        self.dialect = Dialect(dialect)
        self._registry = registry
        self._data_source: Optional[str] = None
        self._pairs: list = []
        self._connect_attempts = 3

    @classmethod
    def from_settings(
        cls, settings: Settings, registry: Optional[MetadataRegistry] = None
    ) -> "ConnectionBuilder":
        """Seed a builder from environment-driven Settings."""
        builder = cls(Dialect(settings.dialect), registry)
        if builder.dialect is Dialect.SQLITE:
            return builder.set_explicit_data_source(settings.data_source)
        builder._connect_attempts = settings.connect_attempts
        builder.set_hostname(settings.db_host).set_username(settings.db_user)
        if settings.db_password:
            builder.set_password(settings.db_password)
        return builder.set_database(settings.db_name).set_port(settings.db_port)

    def _require(self, dialect: Dialect, option: str) -> None:
        if self.dialect is not dialect:
            raise ProviderIncompatibleError(f"You cannot use {option} in: {self.dialect.value}")

    # -- SQLite ------------------------------------------------------------

    def set_explicit_data_source(self, data_source: str) -> "ConnectionBuilder":
        """File path, ``:memory:`` or a shared-cache memory source (``Name;Mode=Memory;Cache=Shared``)."""
        self._require(Dialect.SQLITE, "a file data source")
        self._data_source = data_source
        return self

    def use_in_memory_data_source(self) -> "ConnectionBuilder":
        self._require(Dialect.SQLITE, "an in-memory data source")
        self._data_source = ":memory:"
        return self

    # -- MySQL -------------------------------------------------------------

    def _add_pair(self, key: str, value: object, option: str) -> "ConnectionBuilder":
        self._require(Dialect.MYSQL, option)
        self._pairs.append(f"{key}={value};")
        return self

    def set_hostname(self, hostname: str) -> "ConnectionBuilder":
        return self._add_pair("server", hostname, "a hostname")

    def set_username(self, username: str) -> "ConnectionBuilder":
        return self._add_pair("user", username, "a username")

    def set_password(self, password: str) -> "ConnectionBuilder":
        return self._add_pair("password", password, "a password")

    def set_database(self, database: str) -> "ConnectionBuilder":
        return self._add_pair("database", database, "a database")

    def set_port(self, port: int) -> "ConnectionBuilder":
        return self._add_pair("port", int(port), "a port")

    # -- build -------------------------------------------------------------

    @property
    def connection_string(self) -> str:
        if self.dialect is Dialect.MYSQL:
            return "".join(self._pairs)
        if self._data_source is None:
            return ""
        source = self._data_source
        if source.lower() == ":memory:" or "mode=memory" in source.lower():
            return f"Data Source={source}"
        return f"Data Source={source};Mode=ReadWriteCreate;Cache=Shared"

    def build(self, auto_connect: bool = False) -> NormConnection:
        connection: NormConnection
        if self.dialect is Dialect.SQLITE:
            if self._data_source is None:
                raise ConfigurationError("A SQLite connection needs a data source")
            connection = SqliteConnection(self.connection_string, self._registry)
        else:
            connection = MySqlConnection(
                self.connection_string, self._registry, connect_attempts=self._connect_attempts
            )
        return connection.connect() if auto_connect else connection

    def build_and_connect(self) -> NormConnection:
        return self.build(auto_connect=True)


__all__ = ["ConnectionBuilder"]
