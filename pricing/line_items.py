from datetime import tzinfo
from typing import Optional, Tuple

from .discounts import Moment, discounted_amount, effective_discount
from .domain import Catalog, PricedLineItem, Product, Variant
from .errors import NotFoundError, ValidationError
from .ftypes import Either, Maybe
from .money import MoneyLike
from .variants import ensure_variant_of, resolve_unit_price


def build_line_item(
    product: Optional[Product],
    variant: Optional[Variant],
    category_discount_percentage: Optional[MoneyLike],
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> PricedLineItem:
    """
    Итоговая цена единицы товара:
      original_unit_price — цена до скидки (база + поправка варианта)
      effective_discount_percentage — max(скидка варианта/товара в окне, скидка категории)
      unit_price — original_unit_price со скидкой, half-up до центов
    Чистая функция: одинаковые аргументы и now дают одинаковый результат.
    """
    if product is None:
        raise NotFoundError("Cannot price a line item without a product")
    ensure_variant_of(product, variant)

    resolved = resolve_unit_price(product, variant)
    percentage = effective_discount(
        resolved.discount_percentage,
        category_discount_percentage,
        resolved.window_start,
        resolved.window_end,
        now=now,
        tz=tz,
    )

    return PricedLineItem(
        unit_price=discounted_amount(resolved.pre_discount_price, percentage, currency),
        original_unit_price=resolved.pre_discount_price,
        effective_discount_percentage=percentage,
    )


def try_build_line_item(
    product: Optional[Product],
    variant: Optional[Variant],
    category_discount_percentage: Optional[MoneyLike],
    *,
    now: Moment,
    currency: str = "USD",
    tz: Optional[tzinfo] = None,
) -> Either:
    """Вариант build_line_item для UI: ошибка цены возвращается в Left"""
    return Either.attempt(
        build_line_item,
        product,
        variant,
        category_discount_percentage,
        now=now,
        currency=currency,
        tz=tz,
    )


# ============ Поиск по каталогу ============


def safe_product(catalog: Catalog, product_id: str) -> Maybe[Product]:
    found = next((p for p in catalog.products if p.id == product_id), None)
    return Maybe(found)


def safe_variant(catalog: Catalog, variant_id: Optional[str]) -> Maybe[Variant]:
    if variant_id is None:
        return Maybe.nothing()
    return Maybe(next((v for v in catalog.variants if v.id == variant_id), None))


def lookup(catalog: Catalog, product_id: str, variant_id: Optional[str] = None) -> Tuple[Product, Optional[Variant]]:
    """Товар и вариант по id; неизвестный id -> NotFoundError"""
    product = safe_product(catalog, product_id).get_or_else(None)
    if product is None:
        raise NotFoundError(f"Product '{product_id}' not found")

    if variant_id is None:
        return product, None

    variant = safe_variant(catalog, variant_id).get_or_else(None)
    if variant is None:
        raise NotFoundError(f"Variant '{variant_id}' not found")
    if variant.product_id != product.id:
        raise ValidationError(
            f"Variant '{variant_id}' does not belong to product '{product_id}'",
            "FOREIGN_VARIANT",
        )
    return product, variant
