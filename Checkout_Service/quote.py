import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from pricing.category_discounts import category_discount_for
from pricing.compose import pipe
from pricing.config import PricingConfig, get_config
from pricing.delivery import DeliveryMethod, delivery_surcharge, parse_delivery_method
from pricing.discounts import Moment
from pricing.domain import Cart, CartLine, Catalog, PricedLineItem
from pricing.line_items import build_line_item, lookup
from pricing.money import format_money, round_money, to_minor_units
from pricing.totals import validate_quantity, compute_total

logger = logging.getLogger(__name__)


# ============ Строки расчёта ============


@dataclass(frozen=True)
class QuotedLine:
    product_id: str
    variant_id: Optional[str]
    name: str
    quantity: int
    price: PricedLineItem

    @property
    def unit_price(self) -> Decimal:
        return self.price.unit_price


@dataclass(frozen=True)
class Quote:
    lines: Tuple[QuotedLine, ...]
    delivery_method: DeliveryMethod
    subtotal: Decimal
    delivery: Decimal
    tax: Decimal
    total: Decimal
    currency: str


def price_lines(
    items: Iterable[CartLine],
    catalog: Catalog,
    category_map: Dict[str, Decimal],
    *,
    now: Moment,
    config: PricingConfig,
) -> Tuple[QuotedLine, ...]:
    """Каждая строка корзины -> QuotedLine; ошибка любой строки прерывает расчёт"""

    def price_one(item: CartLine) -> QuotedLine:
        validate_quantity(item.quantity)
        product, variant = lookup(catalog, item.product_id, item.variant_id)
        priced = build_line_item(
            product,
            variant,
            category_discount_for(product, category_map),
            now=now,
            currency=config.currency,
            tz=config.tzinfo,
        )
        name = f"{product.name} ({variant.variant_value})" if variant and variant.variant_value else product.name
        return QuotedLine(product.id, item.variant_id, name, item.quantity, priced)

    return tuple(map(price_one, items))


def build_quote(lines: Tuple[QuotedLine, ...], delivery_method, config: PricingConfig) -> Quote:
    """
    subtotal и total считаются compute_total: одно округление на всю сумму.
    Налог (tax_rate, по умолчанию 0) начисляется на subtotal отдельной строкой.
    """
    method = parse_delivery_method(delivery_method)
    subtotal = compute_total(lines, 0, config.currency)
    delivery = delivery_surcharge(method, subtotal, config)
    tax = round_money(subtotal * config.tax_rate, config.currency)
    total = compute_total(lines, delivery + tax, config.currency)

    return Quote(
        lines=lines,
        delivery_method=method,
        subtotal=subtotal,
        delivery=delivery,
        tax=tax,
        total=total,
        currency=config.currency,
    )


# ============ Сценарии: корзина и запись на ремонт ============


def quote_cart(
    cart: Cart,
    catalog: Catalog,
    category_map: Dict[str, Decimal],
    delivery_method=DeliveryMethod.IN_STORE,
    *,
    now: Moment,
    config: Optional[PricingConfig] = None,
) -> Quote:
    config = config or get_config()
    pipeline = pipe(
        lambda items: price_lines(items, catalog, category_map, now=now, config=config),
        lambda lines: build_quote(lines, delivery_method, config),
    )
    quote = pipeline(cart.items)
    logger.debug("Cart %s quoted: %d lines, total %s", cart.id, len(quote.lines), quote.total)
    return quote


def quote_repair(
    selections: Iterable[Tuple[str, Optional[str]]],
    catalog: Catalog,
    category_map: Dict[str, Decimal],
    delivery_method=DeliveryMethod.IN_STORE,
    *,
    now: Moment,
    config: Optional[PricingConfig] = None,
) -> Quote:
    """
    Расчёт для мастера записи на ремонт.
    selections: пары (id услуги/запчасти, id варианта или None), каждая услуга в одном экземпляре.
    """
    config = config or get_config()
    items = tuple(CartLine(pid, vid, 1) for pid, vid in selections)
    quote = build_quote(
        price_lines(items, catalog, category_map, now=now, config=config),
        delivery_method,
        config,
    )
    logger.debug("Repair quoted: %d services, total %s", len(quote.lines), quote.total)
    return quote


# ============ Представления расчёта ============


def payment_lines(quote: Quote) -> List[dict]:
    """Позиции для платёжного провайдера: цена за единицу в минимальных единицах валюты"""
    currency = quote.currency.lower()
    lines = [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": line.name},
                "unit_amount": to_minor_units(line.unit_price, quote.currency),
            },
            "quantity": line.quantity,
        }
        for line in quote.lines
    ]
    if quote.delivery > 0:
        lines.append(
            {
                "price_data": {
                    "currency": currency,
                    "product_data": {"name": "Shipping"},
                    "unit_amount": to_minor_units(quote.delivery, quote.currency),
                },
                "quantity": 1,
            }
        )
    return lines


def quote_summary(quote: Quote) -> dict:
    """Сводка для экрана подтверждения"""
    fmt = lambda amount: format_money(amount, quote.currency)
    return {
        "lines": [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit_price": fmt(line.price.unit_price),
                "original_unit_price": fmt(line.price.original_unit_price),
                "discount_percentage": str(line.price.effective_discount_percentage),
            }
            for line in quote.lines
        ],
        "delivery_method": quote.delivery_method.value,
        "subtotal": fmt(quote.subtotal),
        "delivery": fmt(quote.delivery),
        "tax": fmt(quote.tax),
        "total": fmt(quote.total),
    }
