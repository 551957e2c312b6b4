"""
Abstract connection contract shared by the SQLite and MySQL bindings.

Concrete connections only open the driver handle and drive transactions; the
statement loop, dialect checks, result materialization and the per-type
collection cache live here so both engines behave identically.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from sqlnorm.connections.cursor import RowCursor
from sqlnorm.connections.transaction import Transaction
from sqlnorm.context import CollectionContext
from sqlnorm.exceptions import ConnectionClosedError, ProviderIncompatibleError
from sqlnorm.metadata.registry import MetadataRegistry, default_registry
from sqlnorm.sql.dialects import Dialect
from sqlnorm.sql.payload import SqlPayload
from sqlnorm.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class DriverConnection(Protocol):
    """The slice of a DB-API 2.0 connection the library relies on."""

    def cursor(self) -> Any:
        ...

    def close(self) -> None:
        ...


def parse_connection_string(connection_string: str) -> Dict[str, str]:
    """
    Parse ``key=value;`` pairs into a dict with lower-cased keys.

    Later occurrences of a key win. Values are kept verbatim (no unquoting).
    """
    options: Dict[str, str] = {}
    for part in connection_string.split(";"):
        if not part.strip() or "=" not in part:
            continue
        key, value = part.split("=", 1)
        options[key.strip().lower()] = value.strip()
    return options


class NormConnection(abc.ABC):
    """
    A single database session bound to one dialect.

    Not thread-safe: callers must not issue concurrent operations on the same
    connection.

    Attributes
    ----------
    dialect : Dialect
        Engine this connection talks to; payloads for other dialects are refused.
    connection_string : str
        ``key=value;`` pairs produced by ConnectionBuilder.
    registry : MetadataRegistry
        Descriptor source for collections opened on this connection.
    """

    dialect: Dialect

    def __init__(self, connection_string: str, registry: Optional[MetadataRegistry] = None) -> None:
        self.connection_string = connection_string
        self.registry = registry or default_registry
        self._handle: Optional[DriverConnection] = None
        self._collections: Dict[type, CollectionContext[Any]] = {}

    # -- lifecycle ---------------------------------------------------------

    @abc.abstractmethod
    def _open(self) -> DriverConnection:  # pragma: no cover - interface only
        """Open and return the driver connection."""
        raise NotImplementedError

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def connect(self) -> "NormConnection":
        """Open the connection (idempotent) and return self."""
        if self._handle is None:
            self._handle = self._open()
            log.info(f"[CONNECT] {self.dialect.value}", extra={"dialect": self.dialect.value})
        return self

    def close(self) -> None:
        """Release the driver handle. Pending transactions are not committed."""
        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            self._handle = None
            self._collections.clear()
            log.info(f"[CLOSE] {self.dialect.value}", extra={"dialect": self.dialect.value})

    def __enter__(self) -> "NormConnection":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- transactions ------------------------------------------------------

    @abc.abstractmethod
    def _begin(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _commit(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _rollback(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    def begin_transaction(self) -> Transaction:
        self._require_handle()
        self._begin()
        return Transaction(self)

    # -- execution ---------------------------------------------------------

    def _require_handle(self) -> DriverConnection:
        if self._handle is None:
            raise ConnectionClosedError(f"{type(self).__name__} is not open; call connect() first")
        return self._handle

    def _check_payload(self, payload: Any) -> SqlPayload:
        if not isinstance(payload, SqlPayload) or payload.dialect != self.dialect:
            raise ProviderIncompatibleError(
                "You attempted to pass execution properties that do not match the connection type"
            )
        return payload

    def _run(self, payload: Any) -> Tuple[List[str], List[Sequence[Any]]]:
        """
        Execute every statement of ``payload`` in order on one driver cursor.

        Returns the column names and rows of the last statement that produced a
        result set (empty lists when none did).
        """
        payload = self._check_payload(payload)
        handle = self._require_handle()
        columns: List[str] = []
        rows: List[Sequence[Any]] = []

        cursor = handle.cursor()
        try:
            for statement in payload.statements():
                log.debug(statement, extra={"table": payload.table, "dialect": self.dialect.value})
                cursor.execute(statement)
                if cursor.description is not None:
                    columns = [description[0] for description in cursor.description]
                    rows = list(cursor.fetchall())
        finally:
            cursor.close()
        return columns, rows

    def execute_non_query(self, payload: SqlPayload) -> None:
        self._run(payload)

    def execute_query(self, payload: SqlPayload) -> RowCursor:
        columns, rows = self._run(payload)
        return RowCursor(columns, rows)

    def query(self, payload: SqlPayload) -> List[Dict[str, Any]]:
        """Execute and materialize every row as a ``{column: value}`` dict."""
        return self.execute_query(payload).fetchall()

    def execute_scalar(self, payload: SqlPayload, transaction: Optional[Transaction] = None) -> Any:
        """First column of the first row of the last result set, or None."""
        if transaction is not None:
            if transaction.connection is not self:
                raise ProviderIncompatibleError("Transaction belongs to a different connection")
            transaction._ensure_active()
        columns, rows = self._run(payload)
        if not rows or not columns:
            return None
        return rows[0][0]

    # -- collections -------------------------------------------------------

    def collection(self, entity_type: type) -> CollectionContext[Any]:
        """
        Collection façade for ``entity_type``.

        The first request per type reconciles the table schema; the façade is
        then cached on this connection.
        """
        context = self._collections.get(entity_type)
        if context is None:
            context = CollectionContext.create(self, entity_type)
            self._collections[entity_type] = context
        return context


__all__ = [
    "DriverConnection",
    "NormConnection",
    "parse_connection_string",
]
