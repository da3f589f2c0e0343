import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from datetime import date
from decimal import Decimal

from pricing.category_discounts import category_discount_for, is_rule_active, resolve_category_discounts
from pricing.domain import CategoryDiscountRule, Product
from pricing.errors import ValidationError

NOW = date(2025, 3, 15)


@pytest.fixture
def rules():
    return (
        CategoryDiscountRule("r1", "accessories", Decimal("5")),
        CategoryDiscountRule("r2", "accessories", Decimal("12"), start_date=date(2025, 3, 1), end_date=date(2025, 3, 31)),
        CategoryDiscountRule("r3", "repair", Decimal("20"), is_active=False),
        CategoryDiscountRule("r4", "repair", Decimal("8"), end_date=date(2025, 3, 14)),
        CategoryDiscountRule("r5", "refurbished", Decimal("3"), start_date=date(2025, 3, 16)),
    )


def test_highest_active_rule_wins(rules):
    discounts = resolve_category_discounts(rules, now=NOW)
    assert discounts == {"accessories": Decimal("12")}


def test_rules_follow_the_calendar(rules):
    april = resolve_category_discounts(rules, now=date(2025, 4, 1))
    before = resolve_category_discounts(rules, now=date(2025, 3, 14))

    assert april == {"accessories": Decimal("5"), "refurbished": Decimal("3")}
    assert before["repair"] == Decimal("8")


def test_inactive_flag_disables_rule(rules):
    assert not is_rule_active(rules[2], NOW)


def test_category_discount_for_product():
    discounts = {"accessories": Decimal("12")}
    case = Product(id="p1", name="Case", base_price=Decimal("10"), category_id="accessories")
    loose = Product(id="p2", name="Part", base_price=Decimal("10"))
    other = Product(id="p3", name="Phone", base_price=Decimal("10"), category_id="refurbished")

    assert category_discount_for(case, discounts) == Decimal("12")
    assert category_discount_for(loose, discounts) == Decimal("0")
    assert category_discount_for(other, discounts) == Decimal("0")


def test_out_of_range_rule_raises():
    bad = (CategoryDiscountRule("r9", "accessories", Decimal("150")),)
    with pytest.raises(ValidationError):
        resolve_category_discounts(bad, now=NOW)


def test_rule_window_includes_both_ends():
    rule = CategoryDiscountRule("r6", "repair", Decimal("10"), start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))

    assert is_rule_active(rule, date(2025, 3, 1))
    assert is_rule_active(rule, date(2025, 3, 31))
    assert not is_rule_active(rule, date(2025, 4, 1))
