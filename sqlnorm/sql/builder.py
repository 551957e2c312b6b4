"""
SQL synthesis.

Every builder is a pure function of (dialect, descriptor, inputs) returning a
SqlPayload. The generic statement is rendered first and the dialect profile then
applies its overlay (token substitution, trailers), so both engines share one
skeleton per statement.
"""

from __future__ import annotations

from typing import Any

from sqlnorm.exceptions import MissingCollectionNameError, NormError, UnsupportedSemanticTypeError
from sqlnorm.metadata.descriptors import ColumnDescriptor, EntityDescriptor
from sqlnorm.sql.dialects import Dialect, profile_for
from sqlnorm.sql.formatter import format_value, quote_text
from sqlnorm.sql.payload import SqlPayload
from sqlnorm.sql.predicates import compile_predicate


def _require_table(descriptor: EntityDescriptor) -> str:
    if not descriptor.explicit_name:
        raise MissingCollectionNameError(descriptor.entity_type)
    return descriptor.table_name


def column_type(dialect: Dialect, column: ColumnDescriptor) -> str:
    """Storage type of ``column`` in ``dialect``."""
    profile = profile_for(dialect)
    sql_type = profile.type_map.get(column.semantic_type) if column.semantic_type else None
    if sql_type is None:
        raise UnsupportedSemanticTypeError(column.column_name, column.python_type, profile.dialect.value)
    return sql_type


def create_collection(dialect: Dialect, descriptor: EntityDescriptor) -> SqlPayload:
    """``CREATE TABLE IF NOT EXISTS`` for the record type."""
    table = _require_table(descriptor)
    profile = profile_for(dialect)

    definitions = []
    for column in descriptor.columns:
        parts = [column.column_name, column_type(dialect, column)]
        if column.primary_key:
            parts.append("PRIMARY KEY")
            if column.auto_increment:
                parts.append("AUTOINCREMENT")
        definitions.append(" ".join(parts))

    text = f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(definitions)});"
    return SqlPayload(profile.finish_create(text), table, profile.dialect)


def table_info(dialect: Dialect, descriptor: EntityDescriptor) -> SqlPayload:
    """Live-schema introspection query for the record's table."""
    table = _require_table(descriptor)
    profile = profile_for(dialect)
    return SqlPayload(profile.table_info(table), table, profile.dialect)


def insert(dialect: Dialect, descriptor: EntityDescriptor, entity: Any) -> SqlPayload:
    """
    ``INSERT`` of every non-key column, followed by the dialect's identity query.

    Executed as a scalar, the payload yields the newly assigned primary key.
    """
    table = _require_table(descriptor)
    profile = profile_for(dialect)
    columns = descriptor.insertable_columns
    if not columns:
        text = profile.empty_insert_template.format(table=table)
        return SqlPayload(text, table, profile.dialect).append(profile.insert_trailer)

    names = ", ".join(column.column_name for column in columns)
    values = ", ".join(
        format_value(getattr(entity, column.field_name, None), dialect) for column in columns
    )
    payload = SqlPayload(f"INSERT INTO {table} ({names}) VALUES ({values});", table, profile.dialect)
    return payload.append(profile.insert_trailer)


def delete(dialect: Dialect, descriptor: EntityDescriptor, entity: Any) -> SqlPayload:
    """``DELETE`` by primary key with a trailer that makes the cursor yield a row."""
    table = _require_table(descriptor)
    profile = profile_for(dialect)
    key = descriptor.primary_key
    if key is None:
        raise NormError(f"{descriptor.entity_type.__name__} has no primary key to delete by")

    key_value = getattr(entity, key.field_name, None)
    if key_value is None:
        raise NormError(f"{descriptor.entity_type.__name__}.{key.field_name} is not set; cannot delete")
    text = f"DELETE FROM {table} WHERE {key.column_name} = {quote_text(str(key_value), profile.dialect)};"
    return SqlPayload(profile.finish_delete(text), table, profile.dialect)


def truncate(dialect: Dialect, descriptor: EntityDescriptor) -> SqlPayload:
    """Remove every row; the cursor yields one row per deleted record."""
    table = _require_table(descriptor)
    profile = profile_for(dialect)
    text = f"DELETE FROM {table} RETURNING *;"
    return SqlPayload(profile.finish_truncate(text, table), table, profile.dialect)


def select(dialect: Dialect, descriptor: EntityDescriptor, predicate: Any) -> SqlPayload:
    """``SELECT *`` filtered by a compiled predicate."""
    table = _require_table(descriptor)
    profile = profile_for(dialect)
    where = compile_predicate(predicate, descriptor, profile.dialect)
    return SqlPayload(f"SELECT * FROM {table} WHERE {where};", table, profile.dialect)


def alter_type(dialect: Dialect, table: str, column: str, sql_type: str) -> SqlPayload:
    profile = profile_for(dialect)
    text = profile.alter_type_template.format(table=table, column=column, type=sql_type)
    return SqlPayload(text, table, profile.dialect)


def add_column(dialect: Dialect, table: str, column: str, sql_type: str) -> SqlPayload:
    return SqlPayload(f"ALTER TABLE {table} ADD COLUMN {column} {sql_type};", table, Dialect(dialect))


def drop_column(dialect: Dialect, table: str, column: str) -> SqlPayload:
    return SqlPayload(f"ALTER TABLE {table} DROP COLUMN {column};", table, Dialect(dialect))


__all__ = [
    "column_type",
    "create_collection",
    "table_info",
    "insert",
    "delete",
    "truncate",
    "select",
    "alter_type",
    "add_column",
    "drop_column",
]
