"""
Transaction handle.

A Transaction is owned by the caller: nothing in the library commits or rolls
back on its behalf, except CollectionContext.insert_many, which commits. Used as
a context manager it commits on a clean exit and rolls back on an exception.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlnorm.exceptions import TransactionStateError

if TYPE_CHECKING:
    from sqlnorm.connections.base import NormConnection


class Transaction:
    def __init__(self, connection: "NormConnection") -> None:
        self._connection = connection
        self._state = "active"

    @property
    def connection(self) -> "NormConnection":
        return self._connection

    @property
    def active(self) -> bool:
        return self._state == "active"

    def _ensure_active(self) -> None:
        if not self.active:
            raise TransactionStateError(f"Transaction already {self._state}")

    def commit(self) -> None:
        self._ensure_active()
        self._connection._commit()
        self._state = "committed"

    def rollback(self) -> None:
        self._ensure_active()
        self._connection._rollback()
        self._state = "rolled back"

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.active:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()


__all__ = ["Transaction"]
