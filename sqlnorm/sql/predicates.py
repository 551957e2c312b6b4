"""
Predicate expression trees and their compiler.

Predicates are built with a small DSL:

    from sqlnorm.sql.predicates import field

    predicate = (field("title") == "Test") & (field("id") == 1)

or, with attribute access checked against the record type:

    p = FieldSet(Post)
    predicate = p.id == inserted.id

Only equality leaves joined by AND compile to SQL. Or / Not nodes can be built
(``|`` and ``~``) but the compiler rejects them, as it rejects any other object.
A right-hand side given as a zero-argument callable is evaluated when the
predicate is compiled.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from sqlnorm.exceptions import UnsupportedPredicateError
from sqlnorm.metadata.descriptors import EntityDescriptor
from sqlnorm.metadata.registry import MetadataRegistry, default_registry
from sqlnorm.sql.dialects import Dialect
from sqlnorm.sql.formatter import format_value


class Predicate:
    """Base class for expression nodes; provides the ``&``, ``|`` and ``~`` operators."""

    def __and__(self, other: "Predicate") -> "And":
        return And(self, other)

    def __or__(self, other: "Predicate") -> "Or":
        return Or(self, other)

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any


@dataclass(frozen=True)
class And(Predicate):
    left: Predicate
    right: Predicate


@dataclass(frozen=True)
class Or(Predicate):
    left: Predicate
    right: Predicate


@dataclass(frozen=True)
class Not(Predicate):
    operand: Predicate


class FieldRef:
    """Reference to a record field; ``==`` builds an Equals node."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __eq__(self, value: Any) -> Equals:  # type: ignore[override]
        return Equals(self.name, value)

    def __ne__(self, value: Any) -> Not:  # type: ignore[override]
        return Not(Equals(self.name, value))

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return f"FieldRef({self.name!r})"


def field(name: str) -> FieldRef:
    return FieldRef(name)


def eq(name: str, value: Any) -> Equals:
    return Equals(name, value)


class FieldSet:
    """Attribute-style field references validated against a record type."""

    def __init__(self, entity_type: type, registry: Optional[MetadataRegistry] = None) -> None:
        self._entity_type = entity_type
        self._registry = registry or default_registry

    def __getattr__(self, name: str) -> FieldRef:
        if name.startswith("_"):
            raise AttributeError(name)
        for column in self._registry.columns(self._entity_type):
            if column.field_name == name:
                return FieldRef(name)
        raise AttributeError(f"{self._entity_type.__name__} has no column field '{name}'")


def _resolve_value(value: Any) -> Any:
    if callable(value) and not isinstance(value, type):
        return value()
    return value


def _walk(node: Any, descriptor: EntityDescriptor, dialect: Dialect, conditions: List[str]) -> None:
    if isinstance(node, And):
        _walk(node.left, descriptor, dialect, conditions)
        _walk(node.right, descriptor, dialect, conditions)
    elif isinstance(node, Equals):
        column = descriptor.column_for_field(node.field) or descriptor.column_named(node.field)
        if column is None:
            raise UnsupportedPredicateError(
                f"Field '{node.field}' is not a column of {descriptor.entity_type.__name__}"
            )
        literal = format_value(_resolve_value(node.value), dialect)
        conditions.append(f"{column.column_name} = {literal}")
    else:
        raise UnsupportedPredicateError(f"Expression type {type(node).__name__} is not supported.")


def compile_predicate(predicate: Any, descriptor: EntityDescriptor, dialect: Dialect) -> str:
    """Compile ``predicate`` to the body of a WHERE clause."""
    conditions: List[str] = []
    _walk(predicate, descriptor, dialect, conditions)
    return " AND ".join(conditions)


__all__ = [
    "Predicate",
    "Equals",
    "And",
    "Or",
    "Not",
    "FieldRef",
    "FieldSet",
    "field",
    "eq",
    "compile_predicate",
]
