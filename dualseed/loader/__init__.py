"""Writing generated data into both stores."""

from .dual_writer import (
    CLEAN_ORDER,
    CUSTOMER_COLUMNS,
    PRODUCT_COLUMNS,
    SALE_COLUMNS,
    SALE_PRODUCT_COLUMNS,
    DualStoreWriter,
    WriteSummary,
    split_sale,
)

__all__ = [
    "CLEAN_ORDER",
    "CUSTOMER_COLUMNS",
    "PRODUCT_COLUMNS",
    "SALE_COLUMNS",
    "SALE_PRODUCT_COLUMNS",
    "DualStoreWriter",
    "WriteSummary",
    "split_sale",
]
