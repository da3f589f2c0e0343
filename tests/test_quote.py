import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from datetime import date
from decimal import Decimal

from Checkout_Service.quote import payment_lines, quote_cart, quote_repair, quote_summary
from pricing.category_discounts import resolve_category_discounts
from pricing.config import PricingConfig
from pricing.delivery import DeliveryMethod
from pricing.domain import Cart, CartLine
from pricing.errors import NotFoundError, ValidationError
from pricing.records import load_catalog

catalog = load_catalog(os.path.join(os.path.dirname(__file__), "..", "data", "seed.json"))
NOW = date(2025, 3, 15)
CATEGORY_MAP = resolve_category_discounts(catalog.category_discounts, now=NOW)


@pytest.fixture
def cart():
    return Cart(id="c1", user_id="u1", items=(CartLine("p2", "v2", 2), CartLine("p1", None, 1)))


def test_cart_quote_with_shipping(cart):
    """Чехол Clear 18.55 × 2 + защитное стекло 18.99 + доставка 9.99"""
    quote = quote_cart(cart, catalog, CATEGORY_MAP, DeliveryMethod.SHIPPING, now=NOW, config=PricingConfig())

    assert [line.unit_price for line in quote.lines] == [Decimal("18.55"), Decimal("18.99")]
    assert quote.subtotal == Decimal("56.09")
    assert quote.delivery == Decimal("9.99")
    assert quote.tax == Decimal("0.00")
    assert quote.total == Decimal("66.08")


def test_in_store_has_no_delivery(cart):
    quote = quote_cart(cart, catalog, CATEGORY_MAP, "in_store", now=NOW, config=PricingConfig())
    assert quote.delivery == Decimal("0")
    assert quote.total == Decimal("56.09")


def test_free_shipping_threshold(cart):
    config = PricingConfig(free_shipping_threshold=Decimal("50"))
    quote = quote_cart(cart, catalog, CATEGORY_MAP, DeliveryMethod.SHIPPING, now=NOW, config=config)

    assert quote.delivery == Decimal("0")
    assert quote.total == Decimal("56.09")


def test_tax_is_added_on_subtotal(cart):
    config = PricingConfig(tax_rate=Decimal("0.08"))
    quote = quote_cart(cart, catalog, CATEGORY_MAP, DeliveryMethod.SHIPPING, now=NOW, config=config)

    assert quote.tax == Decimal("4.49")
    assert quote.total == Decimal("70.57")


def test_repair_quote():
    """Экран Original (без своей скидки) и батарея: обе услуги со скидкой категории 10%"""
    quote = quote_repair([("p3", "v3"), ("p4", None)], catalog, CATEGORY_MAP, now=NOW, config=PricingConfig())

    assert [line.unit_price for line in quote.lines] == [Decimal("188.10"), Decimal("62.10")]
    assert all(line.quantity == 1 for line in quote.lines)
    assert quote.lines[0].name == "iPhone 13 Screen Repair (Original)"
    assert quote.total == Decimal("250.20")


def test_quote_errors_propagate():
    bad_variant = Cart(id="c2", user_id="u1", items=(CartLine("p1", "v1", 1),))
    unknown = Cart(id="c3", user_id="u1", items=(CartLine("p404", None, 1),))
    zero_qty = Cart(id="c4", user_id="u1", items=(CartLine("p1", None, 0),))

    with pytest.raises(ValidationError):
        quote_cart(bad_variant, catalog, CATEGORY_MAP, now=NOW, config=PricingConfig())
    with pytest.raises(NotFoundError):
        quote_cart(unknown, catalog, CATEGORY_MAP, now=NOW, config=PricingConfig())
    with pytest.raises(ValidationError):
        quote_cart(zero_qty, catalog, CATEGORY_MAP, now=NOW, config=PricingConfig())
    with pytest.raises(ValidationError):
        quote_repair([("p3", None)], catalog, CATEGORY_MAP, "drone", now=NOW, config=PricingConfig())


def test_payment_lines_in_cents(cart):
    quote = quote_cart(cart, catalog, CATEGORY_MAP, DeliveryMethod.SHIPPING, now=NOW, config=PricingConfig())
    lines = payment_lines(quote)

    assert [(line["price_data"]["unit_amount"], line["quantity"]) for line in lines] == [(1855, 2), (1899, 1), (999, 1)]
    assert lines[0]["price_data"]["currency"] == "usd"
    assert lines[0]["price_data"]["product_data"]["name"] == "Silicone Case (Clear)"


def test_quote_summary_strings(cart):
    quote = quote_cart(cart, catalog, CATEGORY_MAP, DeliveryMethod.SHIPPING, now=NOW, config=PricingConfig())
    summary = quote_summary(quote)

    assert summary["total"] == "$66.08"
    assert summary["delivery_method"] == "shipping"
    assert summary["lines"][0]["original_unit_price"] == "$26.50"
    assert summary["lines"][0]["discount_percentage"] == "30"
