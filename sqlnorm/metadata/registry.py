"""
Memoized reflection over record types.

The registry turns a pydantic model class carrying Column / PrimaryKey /
Reference annotations into descriptors. Every lookup is computed once per type
and then served from a cache, so callers always receive the same descriptor
instances for a given type.

Caches are append-only. Values are computed outside the lock and published with
setdefault under it: two threads racing on first touch may both compute, but
only the first result is ever stored and returned.
"""
from __future__ import annotations

import threading
import types
import typing
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from sqlnorm.exceptions import NormError
from sqlnorm.metadata.annotations import Column, PrimaryKey, Reference, declared_collection_name
from sqlnorm.metadata.descriptors import (
    ColumnDescriptor,
    EntityDescriptor,
    ReferenceDescriptor,
    semantic_type_for,
)

V = TypeVar("V")


def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Strip ``Optional[X]`` / ``X | None`` down to X, reporting nullability."""
    origin = typing.get_origin(annotation)
    union_types = (typing.Union,)
    if hasattr(types, "UnionType"):
        union_types = (typing.Union, types.UnionType)
    if origin in union_types:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        nullable = len(args) != len(typing.get_args(annotation))
        if len(args) == 1:
            return args[0], nullable
    return annotation, False


def _model_fields(entity_type: type) -> Dict[str, Any]:
    fields = getattr(entity_type, "model_fields", None)
    if fields is None:
        raise TypeError(f"{entity_type!r} is not a pydantic model")
    return fields


def _first(metadata: Any, marker: type) -> Any:
    for item in metadata:
        if isinstance(item, marker):
            return item
    return None


class MetadataRegistry:
    """
    Per-type descriptor cache.

    A single module-level instance (``default_registry``) serves the whole
    process unless a connection is handed its own.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table_names: Dict[type, str] = {}
        self._columns: Dict[type, Tuple[ColumnDescriptor, ...]] = {}
        self._primary_keys: Dict[type, Optional[ColumnDescriptor]] = {}
        self._references: Dict[type, Tuple[ReferenceDescriptor, ...]] = {}
        self._descriptors: Dict[type, EntityDescriptor] = {}

    def _get_or_add(self, cache: Dict[type, V], entity_type: type, factory: Callable[[type], V]) -> V:
        try:
            return cache[entity_type]
        except KeyError:
            pass
        value = factory(entity_type)
        with self._lock:
            return cache.setdefault(entity_type, value)

    def table_name(self, entity_type: type) -> str:
        """Collection name declared on the type, else the type's simple name."""
        return self._get_or_add(
            self._table_names,
            entity_type,
            lambda t: declared_collection_name(t) or t.__name__,
        )

    def columns(self, entity_type: type) -> Tuple[ColumnDescriptor, ...]:
        """Column-annotated fields in declaration order."""
        return self._get_or_add(self._columns, entity_type, self._reflect_columns)

    def primary_key(self, entity_type: type) -> Optional[ColumnDescriptor]:
        """First column carrying PrimaryKey, or None."""
        return self._get_or_add(
            self._primary_keys,
            entity_type,
            lambda t: next((c for c in self.columns(t) if c.primary_key), None),
        )

    def references(self, entity_type: type) -> Tuple[ReferenceDescriptor, ...]:
        return self._get_or_add(self._references, entity_type, self._reflect_references)

    def descriptor(self, entity_type: type) -> EntityDescriptor:
        """Assemble (once) the full descriptor from the memoized parts."""
        return self._get_or_add(self._descriptors, entity_type, self._build_descriptor)

    def _build_descriptor(self, entity_type: type) -> EntityDescriptor:
        columns = self.columns(entity_type)
        if not columns:
            raise NormError(f"{entity_type.__name__} declares no Column-annotated fields")
        return EntityDescriptor(
            entity_type=entity_type,
            table_name=self.table_name(entity_type),
            explicit_name=declared_collection_name(entity_type) is not None,
            columns=columns,
            primary_key=self.primary_key(entity_type),
            references=self.references(entity_type),
        )

    @staticmethod
    def _reflect_columns(entity_type: type) -> Tuple[ColumnDescriptor, ...]:
        columns = []
        for field_name, info in _model_fields(entity_type).items():
            column = _first(info.metadata, Column)
            if column is None:
                continue
            key = _first(info.metadata, PrimaryKey)
            python_type, nullable = _unwrap_optional(info.annotation)
            columns.append(
                ColumnDescriptor(
                    field_name=field_name,
                    column_name=column.name,
                    python_type=python_type,
                    semantic_type=semantic_type_for(python_type),
                    nullable=nullable,
                    primary_key=key is not None,
                    auto_increment=bool(key and key.auto_increment),
                )
            )
        return tuple(columns)

    @staticmethod
    def _reflect_references(entity_type: type) -> Tuple[ReferenceDescriptor, ...]:
        references = []
        for field_name, info in _model_fields(entity_type).items():
            reference = _first(info.metadata, Reference)
            if reference is None:
                continue
            target_type, _ = _unwrap_optional(info.annotation)
            references.append(
                ReferenceDescriptor(
                    field_name=field_name,
                    column_name=reference.column_name,
                    target_type=target_type,
                )
            )
        return tuple(references)


default_registry = MetadataRegistry()


__all__ = ["MetadataRegistry", "default_registry"]
