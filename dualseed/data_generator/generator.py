"""
Bulk generation of seed data.

Factories are fanned out over a thread pool and joined per entity kind.
Customers and products are generated first; sales are generated only once
both collections are complete in memory, since every sale references them.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import Callable, List, NamedTuple, Optional, TypeVar

from tqdm import tqdm

from ..utils.logging_utils import EntityLogger
from .factories import make_customer, make_product, make_sale
from .schemas import Customer, Product, Sale

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 16


def bulk_make(
    factory: Callable[[], T],
    count: int,
    kind: str,
    log: Optional[EntityLogger] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    progress: bool = False
) -> List[T]:
    """
    Call ``factory`` ``count`` times concurrently and collect the results.

    Results come back in completion order. If any call raises, calls that
    have not started yet are cancelled and the exception propagates.

    Args:
        factory: Zero-argument callable producing one entity
        count: Number of entities to produce
        kind: Entity kind, used for logging and the progress bar
        log: Progress logger
        max_workers: Upper bound on concurrent factory calls
        progress: Show a tqdm progress bar

    Returns:
        List of ``count`` entities
    """
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be positive, got {max_workers}")

    if log:
        log.bulk_started(kind, count)

    items: List[T] = []
    if count:
        with ThreadPoolExecutor(max_workers=min(count, max_workers)) as executor:
            futures = [executor.submit(factory) for _ in range(count)]
            try:
                for future in tqdm(as_completed(futures), total=count, desc=kind,
                                   disable=not progress):
                    items.append(future.result())
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    if log:
        log.bulk_finished(kind, len(items))
    return items


class GeneratedData(NamedTuple):
    customers: List[Customer]
    products: List[Product]
    sales: List[Sale]


class SeedDataGenerator:
    """
    Generates the customers, products and sales of one seeding run.

    Attributes:
        num_customers: Number of customers to generate
        num_products: Number of products to generate
        num_sales: Number of sales to generate
        max_workers: Concurrency cap for each bulk generation
    """

    def __init__(
        self,
        num_customers: int = 500,
        num_products: int = 500,
        num_sales: int = 500,
        log: Optional[EntityLogger] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        progress: bool = False
    ):
        self.num_customers = num_customers
        self.num_products = num_products
        self.num_sales = num_sales
        self.log = log or EntityLogger()
        self.max_workers = max_workers
        self.progress = progress

        self.customers: List[Customer] = []
        self.products: List[Product] = []
        self.sales: List[Sale] = []

    def _bulk(self, factory: Callable[[], T], count: int, kind: str) -> List[T]:
        return bulk_make(
            factory,
            count,
            kind,
            log=self.log,
            max_workers=self.max_workers,
            progress=self.progress,
        )

    def generate_customers(self) -> List[Customer]:
        self.customers = self._bulk(partial(make_customer, log=self.log),
                                    self.num_customers, "customer")
        return self.customers

    def generate_products(self) -> List[Product]:
        self.products = self._bulk(partial(make_product, log=self.log),
                                   self.num_products, "product")
        return self.products

    def generate_sales(self) -> List[Sale]:
        """Generate sales against the customers and products generated so far."""
        customers = tuple(self.customers)
        products = tuple(self.products)
        self.sales = self._bulk(partial(make_sale, customers, products, log=self.log),
                                self.num_sales, "sale")
        return self.sales

    def generate_all(self) -> GeneratedData:
        """
        Generate all entities in dependency order.

        Returns:
            GeneratedData with customers, products and sales
        """
        # Order matters! Customers and products must exist before sales
        self.generate_customers()
        self.generate_products()
        self.generate_sales()
        return GeneratedData(self.customers, self.products, self.sales)
