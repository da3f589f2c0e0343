import asyncio
from datetime import tzinfo
from decimal import Decimal
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from .category_discounts import category_discount_for
from .discounts import Moment
from .domain import PricedLineItem, Product
from .line_items import build_line_item

# Внешний источник скидок категорий: (category_ids) -> {category_id: percent}
CategoryDiscountFetcher = Callable[[List[str]], Awaitable[Dict[str, Decimal]]]


# ============ Скидки категорий для списка товаров ============


async def with_category_discounts_async(
    products: Iterable[Product], fetch: CategoryDiscountFetcher
) -> List[Tuple[Product, Decimal]]:
    """
    Дополняет товары скидкой их категории.
    Источник опрашивается один раз по уникальным category_id.
    """
    products = list(products)
    category_ids = sorted({p.category_id for p in products if p.category_id})

    if not category_ids:
        return [(p, Decimal("0")) for p in products]

    discount_map = await fetch(category_ids)
    return [(p, category_discount_for(p, discount_map)) for p in products]


# ============ Параллельный расчёт цен витрины ============


async def price_listing_async(
    products: Iterable[Product],
    fetch: CategoryDiscountFetcher,
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> List[Tuple[Product, PricedLineItem]]:
    """
    Считает цену каждого товара витрины.
    Порядок результата совпадает с порядком товаров.
    """
    decorated = await with_category_discounts_async(products, fetch)

    async def price_one(product: Product, category_pct: Decimal) -> Tuple[Product, PricedLineItem]:
        await asyncio.sleep(0)
        return (
            product,
            build_line_item(product, None, category_pct, now=now, currency=currency, tz=tz),
        )

    tasks = [price_one(p, pct) for p, pct in decorated]
    return list(await asyncio.gather(*tasks))


# ============ Синхронная обёртка ============


def run_price_listing(
    products: Iterable[Product],
    fetch: CategoryDiscountFetcher,
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> List[Tuple[Product, PricedLineItem]]:
    """Синхронная обёртка для использования в UI"""
    return asyncio.run(price_listing_async(products, fetch, now=now, currency=currency, tz=tz))
