"""
Integration tests against a real MySQL server.

These tests verify that:
1. Schema reconciliation creates and alters tables on the server
2. CRUD through a collection round-trips every semantic type
3. Transactions commit and roll back on the server session

Configure the server with NORM_DB_HOST / NORM_DB_PORT / NORM_DB_USER /
NORM_DB_PASSWORD / NORM_DB_NAME; tests skip when it is unreachable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

import pytest

from sqlnorm.models import Column, NormEntity, PrimaryKey, collection_name
from sqlnorm.schema import reconcile
from sqlnorm.sql import SqlPayload, builder
from sqlnorm.sql.dialects import Dialect
from sqlnorm.sql.predicates import field

pytestmark = pytest.mark.integration

NEW_YEAR = datetime(2024, 1, 1)


@collection_name("norm_it_posts")
class Post(NormEntity):
    id: Annotated[int, Column("id"), PrimaryKey()] = 0
    title: Annotated[str, Column("title")] = ""
    description: Annotated[str, Column("description")] = ""
    created_at: Annotated[datetime, Column("created_at")] = NEW_YEAR


@collection_name("norm_it_posts")
class PostV1(NormEntity):
    id: Annotated[int, Column("id"), PrimaryKey()] = 0
    title: Annotated[str, Column("title")] = ""


@collection_name("norm_it_metrics")
class Metric(NormEntity):
    id: Annotated[int, Column("id"), PrimaryKey()] = 0
    name: Annotated[str, Column("name")] = ""
    enabled: Annotated[bool, Column("enabled")] = False
    ratio: Annotated[float, Column("ratio")] = 0.0
    note: Annotated[Optional[str], Column("note")] = None


def _drop(connection, table: str) -> None:
    connection.execute_non_query(SqlPayload(f"DROP TABLE IF EXISTS {table};", table, Dialect.MYSQL))


@pytest.fixture()
def mysql(mysql_connection):
    for table in ("norm_it_posts", "norm_it_metrics"):
        _drop(mysql_connection, table)
    yield mysql_connection
    for table in ("norm_it_posts", "norm_it_metrics"):
        _drop(mysql_connection, table)


class TestReconcile:
    def test_create_then_add_column(self, mysql) -> None:
        assert reconcile(mysql, mysql.registry.descriptor(PostV1)) == []

        plan = reconcile(mysql, mysql.registry.descriptor(Post))

        assert [payload.text for payload in plan] == [
            "ALTER TABLE norm_it_posts ADD COLUMN description VARCHAR(255);",
            "ALTER TABLE norm_it_posts ADD COLUMN created_at DATETIME;",
        ]
        assert reconcile(mysql, mysql.registry.descriptor(Post)) == []

    def test_type_change_is_altered_in_place(self, mysql) -> None:
        mysql.execute_non_query(
            SqlPayload(
                "CREATE TABLE norm_it_posts (id INT PRIMARY KEY AUTO_INCREMENT, title INT);",
                "norm_it_posts",
                Dialect.MYSQL,
            )
        )

        plan = reconcile(mysql, mysql.registry.descriptor(PostV1))

        assert [payload.text for payload in plan] == [
            "ALTER TABLE norm_it_posts MODIFY COLUMN title VARCHAR(255);"
        ]


class TestCrud:
    def test_insert_find_remove(self, mysql) -> None:
        posts = mysql.collection(Post)
        inserted = posts.insert(Post(title="Test", description="d", created_at=NEW_YEAR))

        assert inserted.id == 1
        assert posts.find_one(field("id") == inserted.id) == inserted
        assert posts.remove(inserted) is True
        assert posts.find_one(field("id") == inserted.id) is None

    def test_round_trip_of_every_semantic_type(self, mysql) -> None:
        metrics = mysql.collection(Metric)
        inserted = metrics.insert(Metric(name="O'Hara", enabled=True, ratio=0.25))

        found = metrics.find_one(field("name") == "O'Hara")

        assert found == inserted
        assert found.enabled is True
        assert found.note is None

    def test_backslashes_round_trip(self, mysql) -> None:
        metrics = mysql.collection(Metric)
        inserted = metrics.insert(Metric(name="C:\\temp\\", note="a\\'b"))

        found = metrics.find_one(field("id") == inserted.id)

        assert found.name == "C:\\temp\\"
        assert found.note == "a\\'b"

    def test_truncate(self, mysql) -> None:
        posts = mysql.collection(Post)
        assert posts.truncate() is False
        posts.insert_many([Post(title="a"), Post(title="b")])
        assert posts.truncate() is True
        assert posts.find_one(field("title") == "a") is None

    def test_create_statement_matches_server_schema(self, mysql) -> None:
        mysql.collection(Post)
        rows = mysql.query(builder.table_info(Dialect.MYSQL, mysql.registry.descriptor(Post)))
        assert [row["COLUMN_NAME"] for row in rows] == ["id", "title", "description", "created_at"]


class TestTransactions:
    def test_rollback_discards_insert(self, mysql) -> None:
        posts = mysql.collection(Post)
        transaction = posts.begin_transaction()
        posts.insert(Post(title="rolled back"), transaction)
        transaction.rollback()

        assert posts.find_one(field("title") == "rolled back") is None

    def test_commit_keeps_insert(self, mysql) -> None:
        posts = mysql.collection(Post)
        with posts.begin_transaction() as transaction:
            inserted = posts.insert(Post(title="kept"), transaction)

        assert posts.find_one(field("id") == inserted.id) == inserted
