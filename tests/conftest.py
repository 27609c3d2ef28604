"""
Pytest configuration and shared fixtures.

The stores are replaced by in-memory fakes that implement the same methods
as ``RelationalStore`` and ``DocumentStore``. The relational fake enforces
the foreign keys of the real schema, so writes in the wrong order fail the
same way they would against PostgreSQL.
"""

import sys
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


class ForeignKeyViolation(Exception):
    pass


FOREIGN_KEYS = {
    "sale": [("customer_id", "customer")],
    "sale_product": [("sale_id", "sale"), ("product_id", "product")],
}


class FakeRelationalStore:
    """In-memory stand-in for RelationalStore."""

    def __init__(self):
        self.tables = defaultdict(list)
        self.tables_created = 0
        self.calls = []
        self.fail_on = None
        self.closed = False

    def create_tables(self):
        self.tables_created += 1
        self.calls.append(("create_tables",))

    def delete_all(self, table):
        self.calls.append(("delete_all", table))
        deleted = len(self.tables[table])
        self.tables[table] = []
        return deleted

    def insert_many(self, table, columns, records):
        if self.fail_on == table:
            raise RuntimeError(f"insert into {table} failed")
        rows = [{column: record[column] for column in columns} for record in records]
        for column, parent in FOREIGN_KEYS.get(table, []):
            parent_ids = {row["_id"] for row in self.tables[parent]}
            for row in rows:
                if row[column] not in parent_ids:
                    raise ForeignKeyViolation(f"{table}.{column}={row[column]}")
        self.tables[table].extend(rows)
        self.calls.append(("insert_many", table, len(rows)))
        return len(rows)

    def ids(self, table):
        return {row["_id"] for row in self.tables[table]}

    def count(self, table):
        return len(self.tables[table])

    def close(self):
        self.closed = True


class FakeDocumentStore:
    """In-memory stand-in for DocumentStore."""

    def __init__(self):
        self.collections = defaultdict(list)
        self.calls = []
        self.closed = False

    def insert_many(self, collection, documents):
        documents = [dict(document) for document in documents]
        self.collections[collection].extend(documents)
        self.calls.append(("insert_many", collection, len(documents)))
        return len(documents)

    def ids(self, collection):
        return {document["_id"] for document in self.collections[collection]}

    def count(self, collection):
        return len(self.collections[collection])

    def close(self):
        self.closed = True


@pytest.fixture
def relational_store():
    return FakeRelationalStore()


@pytest.fixture
def document_store():
    return FakeDocumentStore()


@pytest.fixture
def entity_log():
    from dualseed.utils.logging_utils import EntityLogger
    return EntityLogger()


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def sample_customers(now):
    """Two customers, one legal entity and one individual."""
    from dualseed.data_generator.schemas import Customer

    return [
        Customer(
            id="6f1c8a52-7a4e-4f0e-9f62-0d1c1b6c1a01",
            tz=now,
            name="Acme Corp",
            doc_number="12.345.678.9012-34",
        ),
        Customer(
            id="6f1c8a52-7a4e-4f0e-9f62-0d1c1b6c1a02",
            tz=now,
            name="Jane Doe",
            doc_number="123.456.789-01",
        ),
    ]


@pytest.fixture
def sample_products(now):
    from dualseed.data_generator.schemas import Product

    return [
        Product(
            id=f"0b7e4d3a-1c2f-4a5b-8c9d-00000000000{i}",
            tz=now,
            name=f"Product {i}",
            description="A fine product",
            unit_price=Decimal("19.99") * i,
        )
        for i in range(1, 4)
    ]


@pytest.fixture
def sample_sale(now, sample_customers, sample_products):
    from dualseed.data_generator.schemas import Sale, SaleItem

    return Sale(
        id="a3d5e7f9-0000-4000-8000-000000000001",
        tz=now,
        customer_id=sample_customers[0].id,
        created_at=now - timedelta(days=30),
        canceled_at=None,
        status="sold",
        items=[
            SaleItem(product_id=sample_products[2].id, quantity=3),
            SaleItem(product_id=sample_products[0].id, quantity=1),
        ],
    )
