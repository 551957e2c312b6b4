"""
Schema reconciliation.

On first access to a record type through a connection, the declared columns
are compared with what the live table actually holds and the difference is
applied with ALTER TABLE statements:

- live column with no declared counterpart: dropped
- declared column whose live type differs: altered in place where the dialect
  can (MySQL), otherwise dropped and re-added with the declared type (SQLite,
  which loses that column's data)
- declared column missing from the table: added

Planning is a pure function so it can be inspected without a database.
Execution errors are not caught: the caller sees the driver error.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional

from sqlnorm.metadata.descriptors import EntityDescriptor
from sqlnorm.sql import builder
from sqlnorm.sql.dialects import Dialect, profile_for
from sqlnorm.sql.payload import SqlPayload
from sqlnorm.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlnorm.connections.base import NormConnection

log = get_logger(__name__)

_NAME_KEYS = ("name", "column_name")
_TYPE_KEYS = ("type", "column_type")


@dataclass(frozen=True)
class LiveColumn:
    """A column as reported by the database."""

    name: str
    type: str


def _text(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    if isinstance(value, str):
        return value
    return None


def _lookup(row: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    lowered = {str(key).lower(): value for key, value in row.items()}
    for key in keys:
        if key in lowered:
            return _text(lowered[key])
    return None


def read_live_columns(rows: Iterable[Mapping[str, Any]]) -> List[LiveColumn]:
    """
    Convert ``PRAGMA table_info`` or ``INFORMATION_SCHEMA.COLUMNS`` rows.

    Keys are matched case-insensitively; rows missing a textual name or type are
    skipped.
    """
    columns: List[LiveColumn] = []
    for row in rows:
        name = _lookup(row, _NAME_KEYS)
        sql_type = _lookup(row, _TYPE_KEYS)
        if name is None or sql_type is None:
            continue
        columns.append(LiveColumn(name=name, type=sql_type))
    return columns


def plan_reconcile(
    dialect: Dialect, descriptor: EntityDescriptor, live_columns: Iterable[LiveColumn]
) -> List[SqlPayload]:
    """Statements that bring the live table in line with ``descriptor``, in execution order."""
    profile = profile_for(dialect)
    table = descriptor.table_name
    live_columns = list(live_columns)
    plan: List[SqlPayload] = []

    for live in live_columns:
        column = descriptor.column_named(live.name)
        if column is None:
            plan.append(builder.drop_column(dialect, table, live.name))
            continue

        expected = builder.column_type(dialect, column)
        if profile.types_match(live.type, expected):
            continue

        if profile.supports_alter_type:
            plan.append(builder.alter_type(dialect, table, live.name, expected))
        else:
            plan.append(builder.drop_column(dialect, table, live.name))
            plan.append(builder.add_column(dialect, table, live.name, expected))

    live_names = {live.name for live in live_columns}
    for column in descriptor.columns:
        if column.column_name not in live_names:
            plan.append(
                builder.add_column(dialect, table, column.column_name, builder.column_type(dialect, column))
            )

    return plan


def reconcile(connection: "NormConnection", descriptor: EntityDescriptor) -> List[SqlPayload]:
    """
    Create the table if needed, diff it against ``descriptor`` and apply the plan.

    Returns the ALTER statements that were executed (empty when already aligned).
    """
    dialect = connection.dialect
    connection.execute_non_query(builder.create_collection(dialect, descriptor))

    rows = connection.query(builder.table_info(dialect, descriptor))
    plan = plan_reconcile(dialect, descriptor, read_live_columns(rows))

    for payload in plan:
        log.info(
            f"[RECONCILE] {payload.text}",
            extra={"table": payload.table, "dialect": dialect.value},
        )
        connection.execute_non_query(payload)

    if not plan:
        log.debug(f"[RECONCILE] {descriptor.table_name} up to date", extra={"table": descriptor.table_name})
    return plan


__all__ = ["LiveColumn", "read_live_columns", "plan_reconcile", "reconcile"]
