"""Data quality validators package."""

from .validators import (
    DataQualityValidator,
    QualityCheckResult,
    CheckSeverity,
    validate_customers,
    validate_products,
    validate_sales,
    validate_all,
)

__all__ = [
    "DataQualityValidator",
    "QualityCheckResult",
    "CheckSeverity",
    "validate_customers",
    "validate_products",
    "validate_sales",
    "validate_all",
]
