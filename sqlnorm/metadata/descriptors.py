"""
Descriptor types produced by the metadata registry.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple


class SemanticType(str, enum.Enum):
    """Storage-independent column type tag."""

    INT32 = "int32"
    TEXT = "text"
    BOOL = "bool"
    TIMESTAMP = "timestamp"
    FLOAT64 = "float64"


_PYTHON_TYPES = {
    bool: SemanticType.BOOL,
    int: SemanticType.INT32,
    str: SemanticType.TEXT,
    datetime: SemanticType.TIMESTAMP,
    float: SemanticType.FLOAT64,
}


def semantic_type_for(python_type: Any) -> Optional[SemanticType]:
    """Tag for a (non-optional) python type, or None when it has no mapping."""
    return _PYTHON_TYPES.get(python_type)


def _to_bool(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true"):
            return True
        if lowered in ("0", "false"):
            return False
        raise ValueError(f"cannot interpret {value!r} as a boolean")
    return bool(int(value))


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Metadata for one column-bearing field of a record type.

    Attributes
    ----------
    field_name : str
        Attribute name on the record class.
    column_name : str
        Storage column name from the Column annotation.
    python_type : Any
        Declared field type with Optional stripped.
    semantic_type : SemanticType | None
        Tag used by the dialect type maps; None when the python type has no tag.
    nullable : bool
        Whether the field was declared Optional.
    primary_key : bool
        Whether the field carries PrimaryKey.
    auto_increment : bool
        PrimaryKey(auto_increment=...); always False for non-key columns.
    """

    field_name: str
    column_name: str
    python_type: Any
    semantic_type: Optional[SemanticType]
    nullable: bool = False
    primary_key: bool = False
    auto_increment: bool = False

    def coerce(self, value: Any) -> Any:
        """
        Convert a driver value to the field's python type.

        Timestamps are returned unchanged when already a datetime; textual
        timestamps are dialect specific and parsed by the caller.
        """
        if value is None:
            return None
        if self.semantic_type is SemanticType.INT32:
            return int(value)
        if self.semantic_type is SemanticType.TEXT:
            if isinstance(value, (bytes, bytearray)):
                return value.decode("utf-8")
            return str(value)
        if self.semantic_type is SemanticType.BOOL:
            return _to_bool(value)
        if self.semantic_type is SemanticType.FLOAT64:
            return float(value)
        return value


@dataclass(frozen=True)
class ReferenceDescriptor:
    """A field pointing at another record type through ``column_name``."""

    field_name: str
    column_name: str
    target_type: Any


@dataclass(frozen=True)
class EntityDescriptor:
    """Everything the SQL layer needs to know about a record type."""

    entity_type: type
    table_name: str
    explicit_name: bool
    columns: Tuple[ColumnDescriptor, ...]
    primary_key: Optional[ColumnDescriptor]
    references: Tuple[ReferenceDescriptor, ...] = ()

    @property
    def insertable_columns(self) -> Tuple[ColumnDescriptor, ...]:
        """Columns emitted by INSERT: everything but the primary key."""
        return tuple(column for column in self.columns if not column.primary_key)

    def column_for_field(self, field_name: str) -> Optional[ColumnDescriptor]:
        for column in self.columns:
            if column.field_name == field_name:
                return column
        return None

    def column_named(self, column_name: str) -> Optional[ColumnDescriptor]:
        for column in self.columns:
            if column.column_name == column_name:
                return column
        return None


__all__ = [
    "SemanticType",
    "semantic_type_for",
    "ColumnDescriptor",
    "ReferenceDescriptor",
    "EntityDescriptor",
]
