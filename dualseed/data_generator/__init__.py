"""Data generator package for creating seed data."""

from .factories import make_customer, make_product, make_sale
from .generator import GeneratedData, SeedDataGenerator, bulk_make
from .schemas import (
    Customer,
    Product,
    Sale,
    SaleItem,
    SaleProduct,
    SaleStatus,
)

__all__ = [
    "make_customer",
    "make_product",
    "make_sale",
    "bulk_make",
    "GeneratedData",
    "SeedDataGenerator",
    "Customer",
    "Product",
    "Sale",
    "SaleItem",
    "SaleProduct",
    "SaleStatus",
]
