from typing import Optional

from .domain import Cart, CartLine
from .totals import validate_quantity


def _same_line(line: CartLine, product_id: str, variant_id: Optional[str]) -> bool:
    return line.product_id == product_id and line.variant_id == variant_id


def add_to_cart(cart: Cart, product_id: str, qty: int, variant_id: Optional[str] = None) -> Cart:
    """Возвращает новый Cart; одинаковые товар+вариант складываются в одну строку"""
    validate_quantity(qty)

    existing = next((line for line in cart.items if _same_line(line, product_id, variant_id)), None)
    if existing:
        updated_items = tuple(
            CartLine(line.product_id, line.variant_id, line.quantity + qty)
            if _same_line(line, product_id, variant_id)
            else line
            for line in cart.items
        )
    else:
        updated_items = cart.items + (CartLine(product_id, variant_id, qty),)

    return Cart(id=cart.id, user_id=cart.user_id, items=updated_items)


def remove_from_cart(cart: Cart, product_id: str, variant_id: Optional[str] = None) -> Cart:
    filtered = tuple(filter(lambda line: not _same_line(line, product_id, variant_id), cart.items))
    return Cart(id=cart.id, user_id=cart.user_id, items=filtered)


def update_quantity(cart: Cart, product_id: str, qty: int, variant_id: Optional[str] = None) -> Cart:
    """Новое количество строки; 0 удаляет строку"""
    if qty == 0:
        return remove_from_cart(cart, product_id, variant_id)
    validate_quantity(qty)
    updated_items = tuple(
        CartLine(line.product_id, line.variant_id, qty) if _same_line(line, product_id, variant_id) else line
        for line in cart.items
    )
    return Cart(id=cart.id, user_id=cart.user_id, items=updated_items)
