"""Tests for the data quality validators."""

from datetime import timedelta

import pytest


class TestDataQualityValidator:
    """Tests for the generic validator."""

    def test_check_counts_failures(self, sample_products):
        """Test that failed records are counted."""
        from dualseed.quality.validators import DataQualityValidator

        validator = DataQualityValidator(sample_products, "product")
        result = validator.check("cheap", lambda p: p.unit_price < 40, "price < 40")

        assert not result.passed
        assert result.failed_count == 1
        assert result.total_count == 3
        assert round(result.failed_percentage, 2) == 33.33

    def test_unique_ids(self, sample_products):
        """Test duplicate id detection."""
        from dualseed.quality.validators import DataQualityValidator

        validator = DataQualityValidator(sample_products + sample_products[:1])
        result = validator.check_unique_ids()

        assert not result.passed
        assert result.failed_count == 1

    def test_warnings_do_not_fail_by_default(self, sample_products):
        """Test severity handling in all_passed."""
        from dualseed.quality.validators import CheckSeverity, DataQualityValidator

        validator = DataQualityValidator(sample_products)
        validator.check("never", lambda p: False, "always fails",
                        severity=CheckSeverity.WARNING)

        assert validator.all_passed()
        assert not validator.all_passed(include_warnings=True)

    def test_generated_count(self, sample_products):
        """Test the exact generated-count check."""
        from dualseed.quality.validators import DataQualityValidator

        validator = DataQualityValidator(sample_products, "product")

        assert validator.check_generated_count(3).passed
        short = validator.check_generated_count(5)
        assert not short.passed
        assert short.failed_count == 2
        assert "Expected 5 product records, got 3" in short.message

    def test_summary_lists_results(self, sample_customers):
        """Test the text report."""
        from dualseed.quality.validators import validate_customers

        summary = validate_customers(sample_customers).get_summary()

        assert "Data Quality Report for customer" in summary
        assert "Checks passed: 2/2" in summary


class TestSuites:
    """Tests for the pre-built suites."""

    def test_generated_data_passes(self):
        """Test that freshly generated data passes every suite."""
        from dualseed.data_generator.generator import SeedDataGenerator
        from dualseed.quality.validators import validate_all

        customers, products, sales = SeedDataGenerator(
            num_customers=30, num_products=30, num_sales=60
        ).generate_all()

        validators = validate_all(customers, products, sales)

        assert all(v.all_passed() for v in validators)

    def test_dangling_references_fail(self, sample_customers, sample_products, sample_sale):
        """Test that references outside the collections are reported."""
        from dualseed.quality.validators import validate_sales

        validator = validate_sales([sample_sale], sample_customers[1:], sample_products[:1])
        failed = {r.check_name for r in validator.results if not r.passed}

        assert failed == {"ref_integrity_customer_id", "ref_integrity_product_id"}

    def test_duplicate_products_fail(self, now, sample_customers, sample_products):
        """Test that a sale listing a product twice is reported."""
        from dualseed.data_generator.schemas import Sale, SaleItem
        from dualseed.quality.validators import validate_sales

        sale = Sale(
            id="dup",
            tz=now,
            customer_id=sample_customers[0].id,
            created_at=now - timedelta(days=3),
            items=[
                SaleItem(product_id=sample_products[0].id, quantity=1),
                SaleItem(product_id=sample_products[0].id, quantity=2),
            ],
        )

        validator = validate_sales([sale], sample_customers, sample_products)

        assert not validator.all_passed()

    def test_validate_all_raises(self, sample_customers, sample_products, sample_sale):
        """Test that ERROR failures raise DataQualityError."""
        from dualseed.errors import DataQualityError
        from dualseed.quality.validators import validate_all

        with pytest.raises(DataQualityError, match="ref_integrity_customer_id"):
            validate_all(sample_customers[1:], sample_products, [sample_sale])

    def test_suites_check_requested_counts(self, sample_customers, sample_products,
                                           sample_sale):
        """Test that each suite compares its collection with the requested count."""
        from dualseed.quality.validators import (
            validate_customers,
            validate_products,
            validate_sales,
        )

        assert validate_customers(sample_customers, requested=2).all_passed()
        assert not validate_products(sample_products, requested=4).all_passed()
        sales = validate_sales([sample_sale], sample_customers, sample_products, requested=1)
        assert "generated_count" in {r.check_name for r in sales.results}
        assert sales.all_passed()

    def test_suites_skip_count_without_request(self, sample_customers):
        """Test that the count check only runs when a count is requested."""
        from dualseed.quality.validators import validate_customers

        validator = validate_customers(sample_customers)

        assert "generated_count" not in {r.check_name for r in validator.results}

    def test_validate_all_count_mismatch_raises(self, sample_customers, sample_products,
                                                sample_sale):
        """Test that a short collection fails the run."""
        from dualseed.errors import DataQualityError
        from dualseed.quality.validators import validate_all

        with pytest.raises(DataQualityError, match="generated_count"):
            validate_all(
                sample_customers,
                sample_products,
                [sample_sale],
                requested={"customer": 2, "product": 3, "sale": 2},
            )
