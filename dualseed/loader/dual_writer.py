"""
Dual-Store Writer

Writes each generated collection to PostgreSQL and MongoDB, chunk by chunk.
For every chunk the relational insert runs first, then the document insert,
and the next chunk starts only after both have returned.

There is no transaction spanning the two stores. If a write fails, the
error propagates and whatever chunks were already written stay written, so
the stores can disagree after a failed run. Re-run the seeder to recover.

Only the relational store is cleaned before a run. Documents from earlier
runs are left in place and accumulate.
"""

import logging
import uuid
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..data_generator.schemas import Customer, Product, Sale, SaleProduct
from ..utils.chunking import BATCH_SIZE, chunk_list
from ..utils.logging_utils import EntityLogger

logger = logging.getLogger(__name__)


CUSTOMER_COLUMNS = ("_id", "_tz", "name", "doc_number")
PRODUCT_COLUMNS = ("_id", "_tz", "name", "description", "unit_price")
SALE_COLUMNS = ("_id", "_tz", "customer_id", "created_at", "canceled_at", "status")
SALE_PRODUCT_COLUMNS = ("_id", "sale_id", "product_id", "index", "quantity")

# Children before parents
CLEAN_ORDER = ("sale_product", "sale", "customer", "product")


class WriteSummary(NamedTuple):
    kind: str
    records: int
    chunks: int


def split_sale(sale: Sale) -> Tuple[dict, List[SaleProduct]]:
    """
    Split a sale into its flat record and its normalized line item rows.

    Returns:
        Tuple of (sale record without ``_items``, one SaleProduct per item)
    """
    record = sale.to_record()
    record.pop("_items")
    rows = [
        SaleProduct(
            id=str(uuid.uuid4()),
            sale_id=sale.id,
            product_id=item.product_id,
            index=index,
            quantity=item.quantity,
        )
        for index, item in enumerate(sale.items)
    ]
    return record, rows


class DualStoreWriter:
    """
    Persists generated entities into both stores.

    Usage:
        writer = DualStoreWriter(relational, document, log)
        writer.clean()
        writer.insert_customers(customers)
        writer.insert_products(products)
        writer.insert_sales(sales)
    """

    def __init__(
        self,
        relational,
        document,
        log: Optional[EntityLogger] = None,
        batch_size: int = BATCH_SIZE
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.relational = relational
        self.document = document
        self.log = log or EntityLogger()
        self.batch_size = batch_size

    def clean(self) -> None:
        """Delete all seeded rows from the relational store."""
        for table in CLEAN_ORDER:
            deleted = self.relational.delete_all(table)
            logger.debug(f"Cleared table {table} ({deleted} rows)")
        self.log.warning(
            "document store is not cleaned; documents from previous runs are kept"
        )
        self.log.step("clean")

    def _write_chunk(self, kind: str, columns: Sequence[str], rows: List[dict],
                     documents: List[dict]) -> None:
        self.relational.insert_many(kind, columns, rows)
        self.document.insert_many(kind, documents)

    def _insert_simple(self, kind: str, columns: Sequence[str], entities) -> WriteSummary:
        chunks = chunk_list(entities, self.batch_size)
        for index, chunk in enumerate(chunks):
            records = [entity.to_record() for entity in chunk]
            self._write_chunk(kind, columns, records, records)
            self.log.chunk_written(kind, index, len(chunk))
        self.log.inserted(kind, len(entities))
        return WriteSummary(kind, len(entities), len(chunks))

    def insert_customers(self, customers: Sequence[Customer]) -> WriteSummary:
        return self._insert_simple("customer", CUSTOMER_COLUMNS, customers)

    def insert_products(self, products: Sequence[Product]) -> WriteSummary:
        return self._insert_simple("product", PRODUCT_COLUMNS, products)

    def insert_sales(self, sales: Sequence[Sale]) -> Tuple[WriteSummary, WriteSummary]:
        """
        Insert sales and their line item rows.

        The relational store gets flat sale rows plus ``sale_product`` rows;
        the document store gets the full sale documents (items embedded)
        plus the same ``sale_product`` documents.

        Returns:
            Tuple of (sale summary, sale_product summary)
        """
        sale_chunks = chunk_list(sales, self.batch_size)
        line_count = 0
        line_chunks = 0

        for index, chunk in enumerate(sale_chunks):
            flat_sales = []
            sale_products: List[SaleProduct] = []
            for sale in chunk:
                record, rows = split_sale(sale)
                flat_sales.append(record)
                sale_products.extend(rows)

            self._write_chunk("sale", SALE_COLUMNS, flat_sales,
                              [sale.to_record() for sale in chunk])
            self.log.chunk_written("sale", index, len(chunk))

            for line_chunk in chunk_list(sale_products, self.batch_size):
                records = [row.to_record() for row in line_chunk]
                self._write_chunk("sale_product", SALE_PRODUCT_COLUMNS, records, records)
                self.log.chunk_written("sale_product", line_chunks, len(line_chunk))
                line_chunks += 1
            line_count += len(sale_products)

        self.log.inserted("sale", len(sales))
        self.log.inserted("sale_product", line_count)
        return (
            WriteSummary("sale", len(sales), len(sale_chunks)),
            WriteSummary("sale_product", line_count, line_chunks),
        )
