"""
Pytest configuration for sqlnorm.

Provides fixtures for:
- In-memory SQLite connections for unit tests
- MySQL connectivity probing and connections for integration tests
- Settings isolation from the developer's environment
"""

from __future__ import annotations

import os
from typing import Generator

import mysql.connector
import pytest

from sqlnorm.config import Settings, get_settings
from sqlnorm.connections import ConnectionBuilder, NormConnection
from sqlnorm.sql.dialects import Dialect


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """get_settings() is lru_cached; reset it around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sqlite_connection() -> Generator[NormConnection, None, None]:
    """
    Private in-memory SQLite connection, closed after the test.
    """
    connection = ConnectionBuilder(Dialect.SQLITE).use_in_memory_data_source().build_and_connect()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        dialect="mysql",
        db_host=os.getenv("NORM_DB_HOST", "localhost"),
        db_port=int(os.getenv("NORM_DB_PORT", "3306")),
        db_user=os.getenv("NORM_DB_USER", "test"),
        db_password=os.getenv("NORM_DB_PASSWORD", "password"),
        db_name=os.getenv("NORM_DB_NAME", "testdb"),
        connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def mysql_available(test_settings: Settings) -> bool:
    """
    Check if the MySQL server is reachable.

    Used to conditionally skip integration tests when the server is not available.
    """
    try:
        conn = mysql.connector.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            user=test_settings.db_user,
            password=test_settings.db_password,
            database=test_settings.db_name,
            connection_timeout=5,
        )
    except mysql.connector.Error:
        return False
    try:
        cur = conn.cursor()
        cur.execute("SELECT 1;")
        cur.fetchone()
        cur.close()
    finally:
        conn.close()
    return True


@pytest.fixture()
def mysql_connection(
    test_settings: Settings, mysql_available: bool
) -> Generator[NormConnection, None, None]:
    """
    Provide a MySQL connection for integration tests.

    Skips tests if the server is not available.
    """
    if not mysql_available:
        pytest.skip("MySQL not available for integration tests")

    connection = ConnectionBuilder.from_settings(test_settings).build_and_connect()
    try:
        yield connection
    finally:
        connection.close()
