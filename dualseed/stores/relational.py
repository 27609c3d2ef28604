"""
PostgreSQL side of the dual write.

A single autocommit psycopg2 connection is opened per run and reused for
every statement. Each batch insert is one ``INSERT ... VALUES`` statement
built with ``execute_values``.
"""

import logging
from typing import Iterable, Mapping, Sequence

import psycopg2
from psycopg2 import sql
from psycopg2.extras import execute_values

from ..config import PostgresSettings

logger = logging.getLogger(__name__)


CREATE_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS "customer" (
      "_id"        UUID                        NOT NULL DEFAULT GEN_RANDOM_UUID(),
      "_tz"        TIMESTAMP(3) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP(3),
      "name"       VARCHAR(200)                NOT NULL,
      "doc_number" VARCHAR(20)                 NOT NULL,
      PRIMARY KEY ("_id")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "product" (
      "_id"         UUID                        NOT NULL DEFAULT GEN_RANDOM_UUID(),
      "_tz"         TIMESTAMP(3) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP(3),
      "name"        VARCHAR(200)                NOT NULL,
      "description" TEXT                        NOT NULL DEFAULT '',
      "unit_price"  NUMERIC(10, 2)              NOT NULL DEFAULT 0,
      PRIMARY KEY ("_id")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "sale" (
      "_id"         UUID                        NOT NULL DEFAULT GEN_RANDOM_UUID(),
      "_tz"         TIMESTAMP(3) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP(3),
      "customer_id" UUID                        NOT NULL,
      "created_at"  TIMESTAMP(3) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP(3),
      "canceled_at" TIMESTAMP(3) WITH TIME ZONE     NULL,
      "status"      VARCHAR(20)                 NOT NULL DEFAULT 'budget',
      PRIMARY KEY ("_id"),
      FOREIGN KEY ("customer_id") REFERENCES "customer" ("_id")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "sale_product" (
      "_id"        UUID NOT NULL DEFAULT GEN_RANDOM_UUID(),
      "sale_id"    UUID NOT NULL,
      "product_id" UUID NOT NULL,
      "index"      INT  NOT NULL,
      "quantity"   INT  NOT NULL,
      PRIMARY KEY ("_id"),
      FOREIGN KEY ("sale_id")    REFERENCES "sale" ("_id"),
      FOREIGN KEY ("product_id") REFERENCES "product" ("_id")
    )
    """,
)


class RelationalStore:
    """Thin wrapper around a psycopg2 connection."""

    def __init__(self, connection):
        self.connection = connection

    @classmethod
    def connect(cls, settings: PostgresSettings) -> "RelationalStore":
        """Open an autocommit connection and check it with ``SELECT 1``."""
        connection = psycopg2.connect(
            host=settings.hostname,
            port=settings.port,
            user=settings.username,
            password=settings.password,
            dbname=settings.database,
        )
        connection.autocommit = True
        store = cls(connection)
        store.ping()
        logger.info(f"Connected to PostgreSQL at {settings.hostname}:{settings.port}")
        return store

    def ping(self) -> None:
        with self.connection.cursor() as cur:
            cur.execute("SELECT 1")

    def create_tables(self) -> None:
        with self.connection.cursor() as cur:
            for statement in CREATE_TABLES:
                cur.execute(statement)

    def delete_all(self, table: str) -> int:
        """Delete every row of ``table`` and return the number deleted."""
        with self.connection.cursor() as cur:
            cur.execute(sql.SQL("DELETE FROM {}").format(sql.Identifier(table)))
            return cur.rowcount

    def insert_many(
        self,
        table: str,
        columns: Sequence[str],
        records: Iterable[Mapping]
    ) -> int:
        """
        Insert ``records`` projected onto ``columns`` in one statement.

        Keys of a record that are not in ``columns`` are ignored.
        """
        rows = [tuple(record[column] for column in columns) for record in records]
        if not rows:
            return 0
        statement = sql.SQL("INSERT INTO {} ({}) VALUES %s").format(
            sql.Identifier(table),
            sql.SQL(", ").join(map(sql.Identifier, columns)),
        )
        with self.connection.cursor() as cur:
            execute_values(cur, statement, rows, page_size=len(rows))
        return len(rows)

    def count(self, table: str) -> int:
        with self.connection.cursor() as cur:
            cur.execute(sql.SQL("SELECT COUNT(*) FROM {}").format(sql.Identifier(table)))
            return cur.fetchone()[0]

    def close(self) -> None:
        self.connection.close()
