from datetime import tzinfo
from decimal import Decimal
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .category_discounts import category_discount_for
from .discounts import Moment
from .domain import PricedLineItem, Product
from .line_items import build_line_item


## ленивый генератор товаров со скидкой на дату now (страница "Акции")
## цена считается заново для каждого товара, ничего не кэшируется
def iter_on_offer(
    products: Iterable[Product],
    category_map: Dict[str, Decimal],
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> Iterator[Tuple[Product, PricedLineItem]]:
    for product in products:
        priced = build_line_item(
            product,
            None,
            category_discount_for(product, category_map),
            now=now,
            currency=currency,
            tz=tz,
        )
        if priced.is_discounted:
            yield (product, priced)


## топ-k предложений по проценту скидки, сортировка только в конце
def lazy_best_deals(
    products: Iterable[Product],
    category_map: Dict[str, Decimal],
    k: int,
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> Iterator[Tuple[Product, PricedLineItem]]:
    offers = iter_on_offer(products, category_map, now=now, currency=currency, tz=tz)
    ranked = sorted(offers, key=lambda pair: pair[1].effective_discount_percentage, reverse=True)
    for pair in ranked[:k]:
        yield pair
