from datetime import tzinfo
from decimal import Decimal
from functools import reduce
from typing import Dict, Iterable, Optional

from .discounts import Moment, is_window_active, validate_percentage
from .domain import CategoryDiscountRule, Product
from .money import ZERO


def is_rule_active(rule: CategoryDiscountRule, now: Moment, tz: Optional[tzinfo] = None) -> bool:
    return rule.is_active and is_window_active(rule.start_date, rule.end_date, now, tz)


def resolve_category_discounts(
    rules: Iterable[CategoryDiscountRule],
    *,
    now: Moment,
    tz: Optional[tzinfo] = None,
) -> Dict[str, Decimal]:
    """
    Карта category_id -> процент скидки.
    Из активных на дату now правил для категории берётся наибольшее.
    """
    active = tuple(filter(lambda r: is_rule_active(r, now, tz), rules))

    def keep_highest(acc: Dict[str, Decimal], rule: CategoryDiscountRule) -> Dict[str, Decimal]:
        pct = validate_percentage(rule.discount_percentage, "category discount")
        if pct <= acc.get(rule.category_id, ZERO):
            return acc
        return {**acc, rule.category_id: pct}

    return reduce(keep_highest, active, {})


def category_discount_for(product: Product, discount_map: Dict[str, Decimal]) -> Decimal:
    if not product.category_id:
        return ZERO
    return discount_map.get(product.category_id, ZERO)
