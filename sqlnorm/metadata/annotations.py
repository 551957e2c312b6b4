"""
Metadata annotations for record types.

Column, PrimaryKey and Reference are markers placed inside ``typing.Annotated``
on pydantic fields; collection_name is a class decorator naming the table.

    @collection_name("Posts")
    class Post(NormEntity):
        id: Annotated[int, Column("id"), PrimaryKey()] = 0
        title: Annotated[str, Column("title")] = ""
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

COLLECTION_NAME_ATTR = "__collection_name__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class Column:
    """Maps a field onto the storage column ``name``."""

    name: str


@dataclass(frozen=True)
class PrimaryKey:
    """Marks the identity column. Only meaningful together with Column."""

    auto_increment: bool = True


@dataclass(frozen=True)
class Reference:
    """
    Marks a field as a reference to another record type stored in ``column_name``.

    References are recorded in the descriptor but never emitted as columns.
    """

    column_name: str


def collection_name(name: str) -> Callable[[T], T]:
    """Class decorator declaring the table a record type is stored in."""

    def decorator(cls: T) -> T:
        setattr(cls, COLLECTION_NAME_ATTR, name)
        return cls

    return decorator


def declared_collection_name(entity_type: type) -> Optional[str]:
    """Collection name declared directly on ``entity_type`` (not inherited)."""
    return vars(entity_type).get(COLLECTION_NAME_ATTR)


__all__ = [
    "Column",
    "PrimaryKey",
    "Reference",
    "collection_name",
    "declared_collection_name",
]
