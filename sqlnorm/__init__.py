"""
sqlnorm - a small annotation-driven ORM core for SQLite and MySQL.

Record types are pydantic models whose fields carry storage metadata:

- Column / PrimaryKey / Reference markers inside typing.Annotated
- a collection_name class decorator naming the backing table

From that metadata the package synthesizes dialect-specific SQL, reconciles the
live table schema with the record definition, and exposes per-type CRUD through
``connection.collection(RecordType)``.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sqlnorm.config import Settings, get_settings
from sqlnorm.connections import (
    ConnectionBuilder,
    MySqlConnection,
    NormConnection,
    RowCursor,
    SqliteConnection,
    Transaction,
)
from sqlnorm.context import CollectionContext
from sqlnorm.exceptions import (
    ConfigurationError,
    ConnectionClosedError,
    FieldAssignmentError,
    MissingCollectionNameError,
    NormError,
    ProviderIncompatibleError,
    TransactionStateError,
    UnsupportedPredicateError,
    UnsupportedSemanticTypeError,
)
from sqlnorm.metadata import MetadataRegistry, default_registry
from sqlnorm.models import Column, NormEntity, PrimaryKey, Reference, collection_name
from sqlnorm.sql import Dialect, SqlPayload, eq, field
from sqlnorm.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Records
    "NormEntity",
    "Column",
    "PrimaryKey",
    "Reference",
    "collection_name",
    "MetadataRegistry",
    "default_registry",
    # SQL
    "Dialect",
    "SqlPayload",
    "field",
    "eq",
    # Connections
    "ConnectionBuilder",
    "NormConnection",
    "SqliteConnection",
    "MySqlConnection",
    "RowCursor",
    "Transaction",
    "CollectionContext",
    # Errors
    "NormError",
    "ConfigurationError",
    "ConnectionClosedError",
    "FieldAssignmentError",
    "MissingCollectionNameError",
    "ProviderIncompatibleError",
    "TransactionStateError",
    "UnsupportedPredicateError",
    "UnsupportedSemanticTypeError",
    # Logging
    "configure_logging",
    "get_logger",
]
