"""
Seeding Pipeline

Runs one full seeding pass against both stores:

    create tables -> clean -> generate customers -> generate products
    -> generate sales -> [validate] -> insert customers -> insert products
    -> insert sales

There are no retries and no checkpoints. Any failure aborts the run; re-run
from the top.

Usage:
    dualseed --customers 500 --products 500 --sales 500
    python -m dualseed --validate --progress
"""

import logging
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import List, Optional

import click

from .config import load_settings
from .data_generator import factories
from .data_generator.generator import DEFAULT_MAX_WORKERS, GeneratedData, SeedDataGenerator
from .loader.dual_writer import DualStoreWriter, WriteSummary
from .quality.validators import validate_all
from .stores import DocumentStore, RelationalStore
from .utils.chunking import BATCH_SIZE
from .utils.logging_utils import EntityLogger, configure_logging

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Knobs for one run. Defaults reproduce the standard seed."""
    num_customers: int = 500
    num_products: int = 500
    num_sales: int = 500
    batch_size: int = BATCH_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    validate: bool = False
    progress: bool = False


@dataclass
class PipelineResult:
    data: GeneratedData
    summaries: List[WriteSummary] = field(default_factory=list)


def run_pipeline(
    relational,
    document,
    options: Optional[PipelineOptions] = None,
    log: Optional[EntityLogger] = None
) -> PipelineResult:
    """
    Generate one dataset and write it into both stores.

    Args:
        relational: Connected relational store (see ``RelationalStore``)
        document: Connected document store (see ``DocumentStore``)
        options: Counts, batch size and concurrency settings
        log: Progress logger

    Returns:
        PipelineResult with the generated entities and write summaries
    """
    options = options or PipelineOptions()
    log = log or EntityLogger()

    relational.create_tables()
    log.step("create_tables")

    writer = DualStoreWriter(relational, document, log, batch_size=options.batch_size)
    writer.clean()

    generator = SeedDataGenerator(
        num_customers=options.num_customers,
        num_products=options.num_products,
        num_sales=options.num_sales,
        log=log,
        max_workers=options.max_workers,
        progress=options.progress,
    )
    data = generator.generate_all()

    if options.validate:
        validate_all(
            data.customers,
            data.products,
            data.sales,
            requested={
                "customer": options.num_customers,
                "product": options.num_products,
                "sale": options.num_sales,
            },
        )
        log.step("validate")

    summaries = [
        writer.insert_customers(data.customers),
        writer.insert_products(data.products),
    ]
    summaries.extend(writer.insert_sales(data.sales))

    log.step("main")
    return PipelineResult(data=data, summaries=summaries)


# =============================================================================
# CLI Interface
# =============================================================================

@click.command()
@click.option('--customers', '-c', default=500, type=click.IntRange(min=0),
              help='Number of customers to generate')
@click.option('--products', '-p', default=500, type=click.IntRange(min=0),
              help='Number of products to generate')
@click.option('--sales', '-s', default=500, type=click.IntRange(min=0),
              help='Number of sales to generate')
@click.option('--batch-size', '-b', default=BATCH_SIZE, type=click.IntRange(min=1),
              help='Records per insert batch')
@click.option('--max-workers', '-w', default=DEFAULT_MAX_WORKERS, type=click.IntRange(min=1),
              help='Concurrent factory calls during generation')
@click.option('--seed', default=None, type=int,
              help='Random seed (reproducible only with --max-workers 1)')
@click.option('--validate', is_flag=True, help='Run data quality checks before inserting')
@click.option('--progress/--no-progress', default=False, help='Show progress bars')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
def main(customers, products, sales, batch_size, max_workers, seed, validate, progress,
         log_level):
    """
    Seed MongoDB and PostgreSQL with the same synthetic sales data.

    Store connections are configured through MONGO_* and POSTGRES_*
    environment variables (or a .env file).

    Example:
        dualseed --customers 1000 --sales 5000 --validate
    """
    configure_logging(log_level)

    if seed is not None:
        factories.seed(seed)

    options = PipelineOptions(
        num_customers=customers,
        num_products=products,
        num_sales=sales,
        batch_size=batch_size,
        max_workers=max_workers,
        validate=validate,
        progress=progress,
    )

    try:
        # every store opened so far is closed, even if another close fails
        with ExitStack() as stack:
            settings = load_settings()
            relational = RelationalStore.connect(settings.postgres)
            stack.callback(relational.close)
            document = DocumentStore.connect(settings.mongo)
            stack.callback(document.close)
            run_pipeline(relational, document, options, EntityLogger())
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)


if __name__ == '__main__':
    main()
