"""
Data Quality Validators

Checks run over the generated entities before they are written. They catch
broken generation logic early, before half of it lands in one store and not
the other.

Checks are grouped into suites per entity kind:
1. Uniqueness of primary keys
2. Format checks (document numbers)
3. Range checks (prices, quantities, dates)
4. Referential integrity (customer and product references)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from ..data_generator.schemas import (
    EPOCH_FLOOR,
    INDIVIDUAL_DOC_NUMBER,
    LEGAL_DOC_NUMBER,
    MAX_QUANTITY,
    MAX_UNIT_PRICE,
    MIN_UNIT_PRICE,
    Customer,
    Product,
    Sale,
    SaleStatus,
)
from ..errors import DataQualityError

logger = logging.getLogger(__name__)


class CheckSeverity(Enum):
    """Severity levels for data quality issues."""
    WARNING = "warning"   # Log but continue
    ERROR = "error"       # Fail the run
    INFO = "info"         # Informational only


@dataclass
class QualityCheckResult:
    """Result of a data quality check."""
    check_name: str
    passed: bool
    severity: CheckSeverity
    message: str
    failed_count: int = 0
    total_count: int = 0

    @property
    def failed_percentage(self) -> float:
        return self.failed_count / self.total_count * 100 if self.total_count else 0.0

    def __str__(self):
        status = "PASSED" if self.passed else "FAILED"
        return (f"{status} [{self.severity.value.upper()}] {self.check_name}: "
                f"{self.message} ({self.failed_count}/{self.total_count} = "
                f"{self.failed_percentage:.2f}%)")


class DataQualityValidator:
    """
    Data quality validator for a list of entities.

    Usage:
        validator = DataQualityValidator(customers, "customer")
        validator.check_unique_ids()

        if not validator.all_passed():
            raise DataQualityError(validator.get_summary())
    """

    def __init__(self, records: Sequence, table_name: str = "unknown"):
        self.records = records
        self.table_name = table_name
        self.results: List[QualityCheckResult] = []

    @property
    def total_count(self) -> int:
        return len(self.records)

    def check(
        self,
        check_name: str,
        predicate: Callable[[object], bool],
        message: str,
        severity: CheckSeverity = CheckSeverity.ERROR
    ) -> QualityCheckResult:
        """
        Count the records for which ``predicate`` is false.

        Args:
            check_name: Name reported in the result
            predicate: Returns True for a valid record
            message: Description of the rule
            severity: How to treat failures

        Returns:
            Check result
        """
        failed = sum(1 for record in self.records if not predicate(record))
        result = QualityCheckResult(
            check_name=check_name,
            passed=failed == 0,
            severity=severity,
            message=message,
            failed_count=failed,
            total_count=self.total_count,
        )
        self.results.append(result)
        return result

    def check_unique_ids(self, severity: CheckSeverity = CheckSeverity.ERROR) -> QualityCheckResult:
        """Check that every record has a distinct ``id``."""
        duplicates = self.total_count - len({record.id for record in self.records})
        result = QualityCheckResult(
            check_name="unique_id",
            passed=duplicates == 0,
            severity=severity,
            message="Uniqueness check for '_id'",
            failed_count=duplicates,
            total_count=self.total_count,
        )
        self.results.append(result)
        return result

    def check_referential_integrity(
        self,
        check_name: str,
        references: Callable[[object], Iterable[str]],
        valid_ids: Iterable[str],
        severity: CheckSeverity = CheckSeverity.ERROR
    ) -> QualityCheckResult:
        """
        Check that every id referenced by a record exists in ``valid_ids``.

        Args:
            check_name: Name reported in the result
            references: Returns the ids a record refers to
            valid_ids: Ids of the referenced collection
            severity: How to treat failures
        """
        valid = set(valid_ids)
        return self.check(
            check_name,
            lambda record: all(ref in valid for ref in references(record)),
            "Referenced ids must exist in the referenced collection",
            severity,
        )

    def check_generated_count(
        self,
        requested: int,
        severity: CheckSeverity = CheckSeverity.ERROR
    ) -> QualityCheckResult:
        """Check that bulk generation produced exactly ``requested`` records."""
        difference = abs(requested - self.total_count)
        result = QualityCheckResult(
            check_name="generated_count",
            passed=difference == 0,
            severity=severity,
            message=f"Expected {requested} {self.table_name} records, got {self.total_count}",
            failed_count=difference,
            total_count=self.total_count,
        )
        self.results.append(result)
        return result

    def all_passed(self, include_warnings: bool = False) -> bool:
        """
        Check if all quality checks passed.

        Args:
            include_warnings: If True, warnings count as failures
        """
        for result in self.results:
            if not result.passed:
                if result.severity == CheckSeverity.ERROR:
                    return False
                if include_warnings and result.severity == CheckSeverity.WARNING:
                    return False
        return True

    def get_summary(self) -> str:
        """Get a summary of all check results."""
        passed_count = sum(1 for r in self.results if r.passed)
        lines = [
            f"Data Quality Report for {self.table_name}",
            "=" * 50,
            f"Total records: {self.total_count}",
            f"Checks passed: {passed_count}/{len(self.results)}",
            "",
        ]
        lines.extend(str(result) for result in self.results)
        return "\n".join(lines)

    def log_results(self):
        """Log all results using the logging module."""
        logger.info(f"Data Quality Results for {self.table_name}")

        for result in self.results:
            if result.passed:
                logger.info(str(result))
            elif result.severity == CheckSeverity.WARNING:
                logger.warning(str(result))
            else:
                logger.error(str(result))


# =============================================================================
# PRE-BUILT VALIDATION SUITES
# =============================================================================

def _doc_number_consistent(customer: Customer) -> bool:
    legal = LEGAL_DOC_NUMBER.match(customer.doc_number) is not None
    individual = INDIVIDUAL_DOC_NUMBER.match(customer.doc_number) is not None
    return legal != individual


def validate_customers(
    customers: Sequence[Customer],
    requested: Optional[int] = None
) -> DataQualityValidator:
    """Run standard validation suite for customers."""
    validator = DataQualityValidator(customers, "customer")
    if requested is not None:
        validator.check_generated_count(requested)
    validator.check_unique_ids()
    validator.check(
        "doc_number_format",
        _doc_number_consistent,
        "doc_number must match exactly one of the legal/individual formats",
    )
    return validator


def validate_products(
    products: Sequence[Product],
    requested: Optional[int] = None
) -> DataQualityValidator:
    """Run standard validation suite for products."""
    validator = DataQualityValidator(products, "product")
    if requested is not None:
        validator.check_generated_count(requested)
    validator.check_unique_ids()
    validator.check(
        "range_unit_price",
        lambda p: MIN_UNIT_PRICE <= p.unit_price <= MAX_UNIT_PRICE,
        f"unit_price must be in range [{MIN_UNIT_PRICE}, {MAX_UNIT_PRICE}]",
    )
    validator.check(
        "scale_unit_price",
        lambda p: p.unit_price == p.unit_price.quantize(MIN_UNIT_PRICE),
        "unit_price must have at most 2 fractional digits",
    )
    return validator


def validate_sales(
    sales: Sequence[Sale],
    customers: Sequence[Customer],
    products: Sequence[Product],
    now: Optional[datetime] = None,
    requested: Optional[int] = None
) -> DataQualityValidator:
    """Run standard validation suite for sales and their line items."""
    now = now or datetime.now(timezone.utc)
    statuses = {status.value for status in SaleStatus}

    validator = DataQualityValidator(sales, "sale")
    if requested is not None:
        validator.check_generated_count(requested)
    validator.check_unique_ids()
    validator.check(
        "range_created_at",
        lambda s: EPOCH_FLOOR <= s.created_at < now,
        f"created_at must be in [{EPOCH_FLOOR.isoformat()}, now)",
    )
    validator.check(
        "range_canceled_at",
        lambda s: s.canceled_at is None or s.created_at <= s.canceled_at <= now,
        "canceled_at must be empty or between created_at and now",
    )
    validator.check(
        "valid_values_status",
        lambda s: s.status in statuses,
        f"status must be one of {sorted(statuses)}",
    )
    validator.check(
        "range_quantity",
        lambda s: all(1 <= item.quantity <= MAX_QUANTITY for item in s.items),
        f"Item quantities must be in range [1, {MAX_QUANTITY}]",
    )
    validator.check(
        "distinct_products",
        lambda s: len({item.product_id for item in s.items}) == len(s.items),
        "A sale must not list the same product twice",
    )
    validator.check(
        "has_items",
        lambda s: len(s.items) > 0,
        "Sales should have at least one item",
        severity=CheckSeverity.WARNING,
    )
    validator.check_referential_integrity(
        "ref_integrity_customer_id",
        lambda s: [s.customer_id],
        (c.id for c in customers),
    )
    validator.check_referential_integrity(
        "ref_integrity_product_id",
        lambda s: [item.product_id for item in s.items],
        (p.id for p in products),
    )
    return validator


def validate_all(
    customers,
    products,
    sales,
    requested: Optional[Mapping[str, int]] = None
) -> List[DataQualityValidator]:
    """
    Run every suite, log the results and fail on ERROR-severity problems.

    Args:
        customers: Generated customers
        products: Generated products
        sales: Generated sales
        requested: Requested count per kind ("customer", "product", "sale");
            kinds missing from the mapping are not count-checked

    Raises:
        DataQualityError: If any ERROR-severity check failed
    """
    requested = requested or {}
    validators = [
        validate_customers(customers, requested.get("customer")),
        validate_products(products, requested.get("product")),
        validate_sales(sales, customers, products, requested=requested.get("sale")),
    ]
    for validator in validators:
        validator.log_results()

    failed = [v for v in validators if not v.all_passed()]
    if failed:
        raise DataQualityError("\n\n".join(v.get_summary() for v in failed))
    return validators
