"""
Exception hierarchy for sqlnorm.

Every error raised by the library itself derives from NormError. Driver errors
(sqlite3.Error, mysql.connector.Error) are never wrapped and reach the caller as-is.
"""

from __future__ import annotations

from typing import Any


class NormError(Exception):
    """Base exception for all sqlnorm errors."""


class ConfigurationError(NormError, ValueError):
    """Raised when a connection is built from an incomplete configuration."""


class MissingCollectionNameError(NormError):
    """Raised when a record type without a collection name reaches the SQL builder."""

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        super().__init__(f"Collection name not found for type {entity_type.__name__}")


class UnsupportedSemanticTypeError(NormError, TypeError):
    """Raised when a column's declared type has no mapping in the target dialect."""

    def __init__(self, column_name: str, python_type: Any, dialect: str) -> None:
        self.column_name = column_name
        self.python_type = python_type
        self.dialect = dialect
        type_name = getattr(python_type, "__name__", repr(python_type))
        super().__init__(
            f"Type {type_name} of column '{column_name}' is not supported by {dialect}"
        )


class UnsupportedPredicateError(NormError):
    """Raised when the predicate compiler meets a node other than And / Equals."""


class ProviderIncompatibleError(NormError):
    """Raised on payload/connection or builder-option/dialect mismatches."""


class TransactionStateError(NormError):
    """Raised when a finished transaction is used again."""


class ConnectionClosedError(NormError):
    """Raised when a statement is issued on a connection that is not open."""


class FieldAssignmentError(NormError):
    """
    Raised when a database value cannot be converted onto a record field.

    The underlying conversion error is chained as ``__cause__``.
    """

    def __init__(self, field_name: str, value: Any) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Error setting field '{field_name}' with value '{value}' "
            f"(type {type(value).__name__})"
        )


__all__ = [
    "NormError",
    "ConfigurationError",
    "MissingCollectionNameError",
    "UnsupportedSemanticTypeError",
    "UnsupportedPredicateError",
    "ProviderIncompatibleError",
    "TransactionStateError",
    "ConnectionClosedError",
    "FieldAssignmentError",
]
