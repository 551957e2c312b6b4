"""
Connections package for sqlnorm.

Centralizes database connectivity concerns: the abstract connection contract,
the SQLite and MySQL bindings, and the fluent builder that produces them. Keep
this layer focused on I/O and resource management; SQL text is produced by
sqlnorm.sql.
"""

from sqlnorm.connections.base import DriverConnection, NormConnection, parse_connection_string
from sqlnorm.connections.builder import ConnectionBuilder
from sqlnorm.connections.cursor import RowCursor
from sqlnorm.connections.mysql import MySqlConnection
from sqlnorm.connections.sqlite import SqliteConnection
from sqlnorm.connections.transaction import Transaction

__all__ = [
    "ConnectionBuilder",
    "DriverConnection",
    "MySqlConnection",
    "NormConnection",
    "RowCursor",
    "SqliteConnection",
    "Transaction",
    "parse_connection_string",
]
