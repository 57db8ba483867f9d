"""
Unit tests for domain entities.
"""
import pytest
from decimal import Decimal

from internal.domain.product import Product, ProductFilter
from internal.domain.errors import (
    DomainError,
    DuplicateProductNameError,
    NullInputError,
    ProductNotFoundError,
)


class TestProduct:
    """Tests for Product entity."""

    def test_create_product_defaults(self):
        """Test that a new product is active and has no id."""
        product = Product(name="Widget", price=Decimal("9.99"))

        assert product.id is None
        assert product.active is True
        assert product.description is None

    def test_negative_price_is_accepted(self):
        """Test that the entity does not validate the price."""
        product = Product(name="Widget", price=Decimal("-1"))

        assert product.price == Decimal("-1")

    def test_apply_changes_keeps_identity_and_active_flag(self):
        """Test that only name, description and price are overwritten."""
        product = Product(id=5, name="Old", description="x", price=Decimal("1"), active=False)

        product.apply_changes(name="New", description="d", price=Decimal("5"))

        assert product == Product(
            id=5, name="New", description="d", price=Decimal("5"), active=False,
        )


class TestProductFilter:
    """Tests for ProductFilter matching."""

    def test_empty_filter_matches_everything(self):
        """Test that unset fields do not constrain."""
        assert ProductFilter().matches(Product(id=3, name="Anything"))

    def test_name_filter_is_exact(self):
        """Test that names must match exactly."""
        product_filter = ProductFilter(name="Widget")

        assert product_filter.matches(Product(name="Widget"))
        assert not product_filter.matches(Product(name="widget"))

    def test_id_and_name_both_apply(self):
        """Test that every set field must match."""
        product_filter = ProductFilter(id=1, name="Widget")

        assert product_filter.matches(Product(id=1, name="Widget"))
        assert not product_filter.matches(Product(id=2, name="Widget"))


class TestDomainErrors:
    """Tests for domain error messages."""

    def test_duplicate_name_error(self):
        """Test duplicate name error carries the name."""
        error = DuplicateProductNameError("Widget")

        assert isinstance(error, DomainError)
        assert error.name == "Widget"
        assert error.code == "duplicate_name"
        assert "already exists" in str(error)

    def test_null_input_error(self):
        """Test null input error names the argument."""
        error = NullInputError("candidate")

        assert error.argument == "candidate"
        assert "candidate" in error.message

    def test_not_found_error(self):
        """Test not found error carries the id."""
        error = ProductNotFoundError(99)

        assert error.product_id == 99
        assert "99" in error.message
