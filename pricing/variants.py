from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from .domain import DiscountSource, Product, ResolvedPrice, Variant
from .discounts import validate_percentage
from .errors import NotFoundError, ValidationError
from .ftypes import Maybe
from .money import ZERO, to_decimal, to_money

# (источник, процент, начало окна, конец окна)
_Selection = Tuple[DiscountSource, Optional[Decimal], Optional[date], Optional[date]]

_NO_DISCOUNT: _Selection = (DiscountSource.NONE, None, None, None)


def _own_discount(entity) -> bool:
    # Скидка задана, если поле не None; явный 0 тоже считается заданным
    return entity.discount_percentage is not None


def select_discount(product: Product, variant: Optional[Variant] = None) -> _Selection:
    """
    Выбор источника скидки:
      вариант со своей скидкой -> скидка и окно варианта
      иначе -> скидка и окно товара (даже если вариант выбран)
    Скидки не складываются.
    """
    from_variant = (
        Maybe(variant)
        .filter(_own_discount)
        .map(lambda v: (DiscountSource.VARIANT, v.discount_percentage, v.discount_start_date, v.discount_end_date))
    )
    from_product = lambda: (
        Maybe(product)
        .filter(_own_discount)
        .map(lambda p: (DiscountSource.PRODUCT, p.discount_percentage, p.discount_start_date, p.discount_end_date))
    )
    return from_variant.or_else(from_product).get_or_else(_NO_DISCOUNT)


def ensure_variant_of(product: Product, variant: Optional[Variant]) -> None:
    if variant is not None and variant.product_id != product.id:
        raise ValidationError(
            f"Variant {variant.id} belongs to product {variant.product_id}, not {product.id}",
            "FOREIGN_VARIANT",
        )


def resolve_unit_price(product: Optional[Product], variant: Optional[Variant] = None) -> ResolvedPrice:
    """Цена до скидки и применимая скидка для товара и (необязательного) варианта"""
    if product is None:
        raise NotFoundError("Product is required to resolve a price")

    base = to_money(product.base_price, "base_price")
    adjustment = to_decimal(variant.price_adjustment, "price_adjustment") if variant is not None else ZERO
    pre_discount = base + adjustment
    if pre_discount < ZERO:
        raise ValidationError(
            f"Variant adjustment {adjustment} makes the price of product {product.id} negative",
            "NEGATIVE_PRICE",
        )

    source, percentage, start, end = select_discount(product, variant)
    return ResolvedPrice(
        pre_discount_price=pre_discount,
        discount_percentage=validate_percentage(percentage),
        window_start=start,
        window_end=end,
        source=source,
    )
