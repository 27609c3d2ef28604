"""
Entity factories.

Each factory returns one new, fully populated entity with a fresh UUID and
the current UTC timestamp. Text comes from Faker, numeric draws from the
``random`` module; both are seeded together by ``seed()``.
"""

import random
import re
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Sequence

from faker import Faker

from ..errors import GenerationError
from ..utils.logging_utils import EntityLogger
from .schemas import (
    EPOCH_FLOOR,
    MAX_QUANTITY,
    Customer,
    Product,
    Sale,
    SaleItem,
    SaleStatus,
)


fake = Faker()

# Probability that a sale gets a cancellation date
CANCEL_PROBABILITY = 0.1
# Upper bound for the number of distinct products in one sale
MAX_ITEMS_PER_SALE = 10
# unit_price is drawn in cents from this range
PRICE_CENTS_RANGE = (1, 999_999)

_LEGAL_GROUPS = re.compile(r"(\d\d)(\d{3})(\d{3})(\d{4})(\d\d).*")
_INDIVIDUAL_GROUPS = re.compile(r"(\d{3})(\d{3})(\d{3})(\d\d).*")


def seed(value: int) -> None:
    """Seed both Faker and ``random`` for reproducible draws."""
    random.seed(value)
    Faker.seed(value)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def make_doc_number(is_legal: bool) -> str:
    """
    Build a formatted document number from the digits of a random UUID.

    The hex encoding of the UUID text always yields far more than the 14
    digits the legal-entity format needs.
    """
    digits = re.sub(r"\D", "", str(uuid.uuid4()).encode("utf-8").hex())
    pattern = _LEGAL_GROUPS if is_legal else _INDIVIDUAL_GROUPS
    match = pattern.match(digits)
    if match is None:
        raise GenerationError(f"not enough digits for a document number: {digits!r}")
    if is_legal:
        return "{}.{}.{}.{}-{}".format(*match.groups())
    return "{}.{}.{}-{}".format(*match.groups())


def make_customer(log: Optional[EntityLogger] = None) -> Customer:
    """Create one customer, legal entity or individual with equal odds."""
    is_legal = random.random() > 0.5
    customer = Customer(
        id=_new_id(),
        tz=_now(),
        name=fake.company(),
        doc_number=make_doc_number(is_legal),
    )
    if log:
        log.entity_created("customer", customer.id)
    return customer


def make_product(log: Optional[EntityLogger] = None) -> Product:
    """Create one product with a price between 0.01 and 9999.99."""
    cents = random.randint(*PRICE_CENTS_RANGE)
    product = Product(
        id=_new_id(),
        tz=_now(),
        name=fake.catch_phrase(),
        description=fake.sentence(nb_words=15),
        unit_price=Decimal(cents).scaleb(-2),
    )
    if log:
        log.entity_created("product", product.id)
    return product


def _between(start: datetime, end: datetime) -> datetime:
    return start + (end - start) * random.random()


def make_sale(
    customers: Sequence[Customer],
    products: Sequence[Product],
    log: Optional[EntityLogger] = None
) -> Sale:
    """
    Create one sale for a random customer with 1-10 distinct products.

    Only ids from ``customers`` and ``products`` are referenced. Items keep
    the order the products have in ``products``.

    Raises:
        GenerationError: If either collection is empty
    """
    if not customers or not products:
        raise GenerationError("sales need at least one customer and one product")

    customer = random.choice(customers)

    target = min(random.randint(1, MAX_ITEMS_PER_SALE), len(products))
    indexes = set()
    while len(indexes) < target:
        indexes.add(random.randrange(len(products)))

    now = _now()
    created_at = _between(EPOCH_FLOOR, now - timedelta(days=1))
    canceled_at = None
    if random.random() < CANCEL_PROBABILITY:
        canceled_at = _between(created_at, now)

    sale = Sale(
        id=_new_id(),
        tz=now,
        customer_id=customer.id,
        created_at=created_at,
        canceled_at=canceled_at,
        status=random.choice(list(SaleStatus)),
        items=[
            SaleItem(product_id=product.id, quantity=random.randint(1, MAX_QUANTITY))
            for index, product in enumerate(products)
            if index in indexes
        ],
    )
    if log:
        log.entity_created("sale", sale.id, items=len(sale.items))
    return sale
