"""
Product validation schema and helper tests.
"""

import pytest

from erp_ui.data.demo_records import DEMO_PRODUCTS
from erp_ui.models.common import Err, Ok
from erp_ui.models.product import (
    ProductFilters,
    ProductStats,
    calculate_margin,
    is_low_stock,
    is_out_of_stock,
    product_to_form,
    validate_product,
)

VALID = {
    "name": "Marteau",
    "description": "",
    "reference": "MAR-01",
    "sku": "",
    "cost_price": "10",
    "selling_price": "15,50",
    "stock_quantity": "5",
    "min_stock_level": "2",
    "max_stock_level": "50",
    "category": "Outillage",
    "brand": "",
    "weight": "",
    "dimensions": "30x10x4",
    "is_active": True,
}


def test_valid_product():
    """Test a complete product form."""
    result = validate_product(VALID)

    assert isinstance(result, Ok)
    record = result.value
    assert record.selling_price == 15.5
    assert record.stock_quantity == 5
    assert record.description is None
    assert record.sku is None
    assert record.brand is None
    assert record.weight is None
    assert record.is_active is True


def test_selling_below_cost():
    """Test that the selling price must cover the cost price."""
    result = validate_product({**VALID, "cost_price": "20", "selling_price": "15"})

    assert isinstance(result, Err)
    assert result.error == {
        "selling_price": "Le prix de vente doit être supérieur ou égal au prix de coût"
    }


def test_max_below_min():
    """Test that the maximum stock must not be below the minimum."""
    result = validate_product({**VALID, "min_stock_level": "10", "max_stock_level": "5", "stock_quantity": "1"})

    assert isinstance(result, Err)
    assert result.error == {
        "max_stock_level": "Le stock maximum doit être supérieur ou égal au stock minimum"
    }


def test_stock_above_max():
    """Test that the stock must not exceed the maximum."""
    result = validate_product({**VALID, "stock_quantity": "51"})

    assert isinstance(result, Err)
    assert result.error == {
        "stock_quantity": "La quantité en stock ne peut pas dépasser le stock maximum"
    }


def test_field_errors_before_cross_checks():
    """Test that field errors are reported without cross-field errors."""
    result = validate_product({**VALID, "name": "", "cost_price": "99"})

    assert isinstance(result, Err)
    assert result.error == {"name": "Le nom du produit est requis"}


def test_invalid_dimensions():
    """Test the LxWxH dimensions format."""
    result = validate_product({**VALID, "dimensions": "30 par 10"})

    assert isinstance(result, Err)
    assert result.error == {
        "dimensions": 'Les dimensions doivent être au format "LxWxH" (ex: 10x5x3)'
    }


def test_negative_stock():
    """Test that stock levels are non-negative integers."""
    result = validate_product({**VALID, "stock_quantity": "-1"})

    assert isinstance(result, Err)
    assert result.error == {
        "stock_quantity": "La quantité en stock doit être un entier positif"
    }


def test_product_to_form_round_trip():
    """Test that a stored product converts back into valid form values."""
    form = product_to_form(DEMO_PRODUCTS[0])

    assert form["name"] == "Vis inox 4x40"
    assert form["cost_price"] == "8.5"
    assert form["stock_quantity"] == "120"
    assert form["is_active"] is True
    assert isinstance(validate_product(form), Ok)


def test_product_to_form_defaults():
    """Test the values used for a new product."""
    form = product_to_form({})

    assert form["name"] == ""
    assert form["cost_price"] == "0"
    assert form["max_stock_level"] == "1000"
    assert form["weight"] == ""
    assert form["is_active"] is True


@pytest.mark.parametrize(
    "cost, selling, expected",
    [(100, 150, 50.0), (10, 10, 0.0), (0, 25, 0.0), (8, 6, -25.0)],
)
def test_calculate_margin(cost, selling, expected):
    """Test margins relative to the cost price."""
    assert calculate_margin(cost, selling) == pytest.approx(expected)


def test_stock_helpers():
    """Test the low and out of stock thresholds."""
    assert is_low_stock(5, 5)
    assert is_low_stock(4, 5)
    assert not is_low_stock(6, 5)
    assert is_out_of_stock(0)
    assert not is_out_of_stock(1)


def test_filters_match():
    """Test product filters against the demo products."""
    filters = ProductFilters(search="perceuse")
    assert [p["id"] for p in DEMO_PRODUCTS if filters.matches(p)] == ["p-0002"]

    filters = ProductFilters(is_active=False)
    assert [p["id"] for p in DEMO_PRODUCTS if filters.matches(p)] == ["p-0003"]

    filters = ProductFilters(low_stock=True, category="Outillage")
    assert [p["id"] for p in DEMO_PRODUCTS if filters.matches(p)] == ["p-0002"]
    assert filters.active_count == 2

    filters = ProductFilters(min_price=20, max_price=100)
    assert [p["id"] for p in DEMO_PRODUCTS if filters.matches(p)] == ["p-0003"]


def test_stats_from_rows():
    """Test the aggregates of the demo products."""
    stats = ProductStats.from_rows(DEMO_PRODUCTS)

    assert stats.total_products == 3
    assert stats.active_products == 2
    assert stats.inactive_products == 1
    assert stats.low_stock_count == 2
    assert stats.out_of_stock_count == 1
    assert stats.categories_count == 3
    assert stats.total_value == pytest.approx(8.5 * 120 + 129.0 * 4)
