import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from datetime import date
from decimal import Decimal

from pricing.errors import ValidationError
from pricing.records import (
    category_rule_from_row,
    load_catalog,
    parse_date,
    parse_discount,
    product_from_row,
    variant_from_row,
)

SEED = os.path.join(os.path.dirname(__file__), "..", "data", "seed.json")


def test_load_catalog():
    """Проверка загрузки каталога из seed.json"""
    catalog = load_catalog(SEED)

    assert len(catalog.products) == 5
    assert len(catalog.variants) == 5
    assert len(catalog.category_discounts) == 3
    assert catalog.products[0].base_price == Decimal("19.99")
    assert [v.id for v in catalog.variants_of("p2")] == ["v1", "v2"]


def test_product_row_parsing():
    product = product_from_row(
        {
            "id": 7,
            "name": "Case",
            "base_price": "24.50",
            "category_id": 3,
            "discount_percentage": "10",
            "discount_start_date": "2025-01-01",
            "discount_end_date": "2025-01-31T23:59:59Z",
            "in_stock": "4",
        }
    )

    assert product.id == "7"
    assert product.category_id == "3"
    assert product.base_price == Decimal("24.50")
    assert product.discount_percentage == Decimal("10")
    assert product.discount_end_date == date(2025, 1, 31)
    assert product.in_stock == 4


def test_empty_discount_fields_are_unset():
    product = product_from_row({"id": 1, "base_price": 10, "discount_percentage": "", "discount_start_date": ""})
    assert product.discount_percentage is None
    assert product.discount_start_date is None


def test_product_zero_discount_is_explicit():
    product = product_from_row({"id": 1, "base_price": 10, "discount_percentage": 0})
    assert product.discount_percentage == Decimal("0")


def test_legacy_variant_zero_discount_means_unset():
    """В старых строках вариантов 0 и "" неотличимы: оба -> скидка товара"""
    legacy = variant_from_row({"id": 1, "product_id": 2, "discount_percentage": 0})
    current = variant_from_row({"id": 1, "product_id": 2, "discount_percentage": 0}, legacy=False)

    assert legacy.discount_percentage is None
    assert current.discount_percentage == Decimal("0")


def test_variant_row_parsing():
    variant = variant_from_row(
        {
            "id": 5,
            "product_id": 2,
            "price_adjustment": "-3.50",
            "discount_percentage": "30",
            "stock": 6,
            "variant_name": "Color",
            "variant_value": "Clear",
        }
    )

    assert variant.product_id == "2"
    assert variant.price_adjustment == Decimal("-3.50")
    assert variant.discount_percentage == Decimal("30")
    assert variant.stock == 6


def test_category_rule_row_parsing():
    rule = category_rule_from_row(
        {"category_id": 4, "discount_percentage": 15, "is_active": False, "start_date": "2025-03-01", "end_date": None}
    )

    assert rule.id == "4"
    assert rule.discount_percentage == Decimal("15")
    assert rule.is_active is False
    assert rule.end_date is None


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("FALSE", False), ("0", False), (0, False), ("true", True), ("1", True), (1, True), (None, True)],
)
def test_category_rule_is_active_from_text(raw, expected):
    rule = category_rule_from_row({"category_id": "c", "discount_percentage": 10, "is_active": raw})
    assert rule.is_active is expected


@pytest.mark.parametrize("raw", ["no", "2", "yes please"])
def test_category_rule_is_active_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        category_rule_from_row({"category_id": "c", "discount_percentage": 10, "is_active": raw})


def test_bad_values_raise():
    with pytest.raises(ValidationError):
        product_from_row({"id": 1, "base_price": "-1"})
    with pytest.raises(ValidationError):
        parse_discount("101")
    with pytest.raises(ValidationError):
        parse_date("31/01/2025")
