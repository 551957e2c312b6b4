"""
Record base class.

NormEntity is a mutable pydantic model. Equality and hashing only look at
column-bearing fields, and timestamps are compared at second granularity so a
record read back from storage equals the one that was written.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict

from sqlnorm.metadata.registry import default_registry


def _truncate_timestamp(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


class NormEntity(BaseModel):
    """
    Base class for all mapped records.

    Subclasses must give every field a default so the type can be default
    constructed when a row is materialized.
    """

    model_config = ConfigDict(
        validate_assignment=False,
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    def _column_values(self) -> Tuple[Any, ...]:
        return tuple(
            getattr(self, column.field_name, None)
            for column in default_registry.columns(type(self))
        )

    def __eq__(self, other: object) -> bool:
        if other is None or type(other) is not type(self):
            return False
        for mine, theirs in zip(self._column_values(), other._column_values()):  # type: ignore[attr-defined]
            if isinstance(mine, datetime) and isinstance(theirs, datetime):
                if _truncate_timestamp(mine) != _truncate_timestamp(theirs):
                    return False
            elif mine != theirs:
                return False
        return True

    def __hash__(self) -> int:
        parts = []
        for value in self._column_values():
            if isinstance(value, datetime):
                parts.append(_truncate_timestamp(value).isoformat())
            else:
                parts.append(value)
        return hash((type(self), *parts))

    def _set_id(self, value: Any) -> None:
        """Receive the engine-reported identity after an insert."""
        primary_key = default_registry.primary_key(type(self))
        if primary_key is None:
            return
        setattr(self, primary_key.field_name, primary_key.coerce(value))


__all__ = ["NormEntity"]
