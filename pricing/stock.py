from enum import Enum
from typing import Optional

from .domain import Cart, CartLine, Catalog, Product, Variant
from .errors import PricingError
from .ftypes import Either
from .line_items import lookup


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def available_stock(product: Product, variant: Optional[Variant] = None) -> int:
    """Выбранный вариант хранит свой остаток; без варианта — остаток товара"""
    return variant.stock if variant is not None else product.in_stock


def stock_status(quantity: int, low_stock_threshold: int = 10) -> StockStatus:
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def validate_cart_stock(cart: Cart, catalog: Catalog) -> Either[dict, Cart]:
    """
    Проверяет корзину перед оформлением:
    - товар и вариант существуют
    - у товара с вариантами вариант выбран
    - хватает остатка
    Возвращает Either[error, cart]
    """

    def validate_line(line: CartLine) -> Either[dict, CartLine]:
        try:
            product, variant = lookup(catalog, line.product_id, line.variant_id)
        except PricingError as exc:
            return Either.left(exc.as_dict())

        if variant is None and catalog.variants_of(product.id):
            return Either.left({"error": f"Product {product.id} requires a variant"})
        if available_stock(product, variant) < line.quantity:
            return Either.left({"error": f"Not enough stock for {product.id}"})
        return Either.right(line)

    errors = [r.value for r in map(validate_line, cart.items) if r.is_left]
    if errors:
        return Either.left(errors[0])
    return Either.right(cart)
