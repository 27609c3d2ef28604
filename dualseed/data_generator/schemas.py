"""
Data schemas for the seeded entities.

Every entity is a frozen Pydantic model. Field names are Python-friendly
(``id``, ``tz``, ``items``) while the store-facing names keep the leading
underscore used as the primary key convention in both stores (``_id``,
``_tz``, ``_items``). Use ``to_record()`` to get the store-facing dict.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Lower bound for Sale.created_at
EPOCH_FLOOR = datetime(2020, 1, 1, tzinfo=timezone.utc)

# Legal entities: 12.345.678.9012-34
LEGAL_DOC_NUMBER = re.compile(r"^\d{2}\.\d{3}\.\d{3}\.\d{4}-\d{2}$")
# Individuals: 123.456.789-01
INDIVIDUAL_DOC_NUMBER = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")

MIN_UNIT_PRICE = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("9999.99")
MAX_QUANTITY = 50


class SaleStatus(str, Enum):
    """Possible states of a sale."""
    BUDGET = "budget"
    SOLD = "sold"
    DELIVERED = "delivered"


class StoreModel(BaseModel):
    """Base for everything written to the stores."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(..., alias="_id", description="UUID4 primary key")

    def to_record(self) -> dict:
        """Return the store-facing representation (aliased keys)."""
        return self.model_dump(by_alias=True)


class Customer(StoreModel):
    """
    Customer record.

    ``doc_number`` is either a legal-entity or an individual tax number; the
    two formats are mutually exclusive.
    """
    tz: datetime = Field(..., alias="_tz", description="Creation timestamp")
    name: str = Field(..., max_length=200, description="Display (company) name")
    doc_number: str = Field(..., max_length=20, description="Formatted document number")

    @field_validator("doc_number")
    @classmethod
    def doc_number_must_match_a_format(cls, v):
        if not (LEGAL_DOC_NUMBER.match(v) or INDIVIDUAL_DOC_NUMBER.match(v)):
            raise ValueError(f"doc_number {v!r} matches neither document format")
        return v

    @property
    def is_legal_entity(self) -> bool:
        return LEGAL_DOC_NUMBER.match(self.doc_number) is not None


class Product(StoreModel):
    """Catalog product."""
    tz: datetime = Field(..., alias="_tz", description="Creation timestamp")
    name: str = Field(..., max_length=200, description="Product display name")
    description: str = Field("", description="Free-text description")
    unit_price: Decimal = Field(
        ...,
        ge=MIN_UNIT_PRICE,
        le=MAX_UNIT_PRICE,
        decimal_places=2,
        description="Price per unit",
    )


class SaleItem(BaseModel):
    """Line item embedded in a Sale."""
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(..., description="Reference to the product")
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY, description="Units sold")


class Sale(StoreModel):
    """
    Sale with its embedded line items.

    The relational store keeps the items in ``sale_product``; the document
    store keeps them embedded under ``_items``.
    """
    tz: datetime = Field(..., alias="_tz", description="Creation timestamp")
    customer_id: str = Field(..., description="Reference to the customer")
    created_at: datetime = Field(..., description="Business date of the sale")
    canceled_at: Optional[datetime] = Field(None, description="Cancellation date, if any")
    status: SaleStatus = Field(SaleStatus.BUDGET.value, description="Current sale status")
    items: List[SaleItem] = Field(default_factory=list, alias="_items")

    @model_validator(mode="after")
    def dates_must_be_ordered(self):
        if self.created_at < EPOCH_FLOOR:
            raise ValueError(f"created_at {self.created_at} is before {EPOCH_FLOOR}")
        if self.created_at >= self.tz:
            raise ValueError("created_at must be before the sale's creation timestamp")
        if self.canceled_at is not None and not (
            self.created_at <= self.canceled_at <= self.tz
        ):
            raise ValueError("canceled_at must fall between created_at and now")
        return self


class SaleProduct(StoreModel):
    """Normalized line item row derived from a Sale."""
    sale_id: str = Field(..., description="Reference to the owning sale")
    product_id: str = Field(..., description="Reference to the product")
    index: int = Field(..., ge=0, description="Zero-based position within the sale")
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
