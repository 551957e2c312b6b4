"""
Collection façade: CRUD over one record type on one connection.

Obtain one through ``connection.collection(Post)``; the first request per type
reconciles the table schema with the record definition.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlnorm.exceptions import FieldAssignmentError
from sqlnorm.metadata.descriptors import ColumnDescriptor, EntityDescriptor, SemanticType
from sqlnorm.schema.reconciler import reconcile
from sqlnorm.sql import builder
from sqlnorm.sql.dialects import Dialect
from sqlnorm.sql.formatter import parse_timestamp
from sqlnorm.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlnorm.connections.base import NormConnection
    from sqlnorm.connections.transaction import Transaction

T = TypeVar("T")

log = get_logger(__name__)


class CollectionContext(Generic[T]):
    def __init__(self, connection: "NormConnection", entity_type: Type[T], descriptor: EntityDescriptor) -> None:
        self._connection = connection
        self._entity_type = entity_type
        self._descriptor = descriptor

    @classmethod
    def create(cls, connection: "NormConnection", entity_type: Type[T]) -> "CollectionContext[T]":
        """Reconcile the backing table, then return a façade bound to it."""
        descriptor = connection.registry.descriptor(entity_type)
        reconcile(connection, descriptor)
        return cls(connection, entity_type, descriptor)

    @property
    def connection(self) -> "NormConnection":
        return self._connection

    @property
    def descriptor(self) -> EntityDescriptor:
        return self._descriptor

    @property
    def dialect(self) -> Dialect:
        return self._connection.dialect

    # -- writes ------------------------------------------------------------

    def insert(self, entity: T, transaction: Optional["Transaction"] = None) -> T:
        """Insert ``entity`` and set its primary key from the engine-reported identity."""
        payload = builder.insert(self.dialect, self._descriptor, entity)
        identity = self._connection.execute_scalar(payload, transaction)
        if identity is not None and self._descriptor.primary_key is not None:
            self._assign_identity(entity, identity)
        return entity

    def _assign_identity(self, entity: Any, identity: Any) -> None:
        set_id = getattr(entity, "_set_id", None)
        if callable(set_id):
            set_id(identity)
            return
        primary_key = self._descriptor.primary_key
        setattr(entity, primary_key.field_name, primary_key.coerce(identity))

    def insert_many(self, entities: Iterable[T]) -> List[T]:
        """
        Insert every entity inside one transaction and commit.

        A failing insert propagates as-is; the transaction is left open and is
        not rolled back here.
        """
        transaction = self.begin_transaction()
        inserted = [self.insert(entity, transaction) for entity in entities]
        transaction.commit()
        log.debug(
            f"[INSERT_MANY] {len(inserted)} rows into {self._descriptor.table_name}",
            extra={"table": self._descriptor.table_name, "rows": len(inserted)},
        )
        return inserted

    def remove(self, entity: T) -> bool:
        """True when the engine reports at least one affected row."""
        payload = builder.delete(self.dialect, self._descriptor, entity)
        with self._connection.execute_query(payload) as cursor:
            return cursor.fetchone() is not None

    def truncate(self) -> bool:
        """Delete every row; False when the table was already empty."""
        payload = builder.truncate(self.dialect, self._descriptor)
        with self._connection.execute_query(payload) as cursor:
            return cursor.fetchone() is not None

    # -- reads -------------------------------------------------------------

    def find_one(self, predicate: Any) -> Optional[T]:
        payload = builder.select(self.dialect, self._descriptor, predicate)
        with self._connection.execute_query(payload) as cursor:
            row = cursor.fetchone()
        if row is None:
            return None
        return self._materialize(row)

    def _materialize(self, row: Dict[str, Any]) -> T:
        entity = self._entity_type.model_construct()  # type: ignore[attr-defined]
        for column in self._descriptor.columns:
            value = row.get(column.column_name)
            if value is None:
                continue
            try:
                setattr(entity, column.field_name, self._convert(column, value))
            except (TypeError, ValueError) as exc:
                raise FieldAssignmentError(column.field_name, value) from exc
        return entity

    def _convert(self, column: ColumnDescriptor, value: Any) -> Any:
        if column.semantic_type is SemanticType.TIMESTAMP:
            return parse_timestamp(value, self.dialect)
        return column.coerce(value)

    def begin_transaction(self) -> "Transaction":
        return self._connection.begin_transaction()


__all__ = ["CollectionContext"]
