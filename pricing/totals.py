from decimal import Decimal
from functools import reduce
from typing import Iterable

from .errors import ValidationError
from .money import ZERO, MoneyLike, round_money, to_money


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"quantity must be an integer, got {quantity!r}", "INVALID_QUANTITY")
    if quantity <= 0:
        raise ValidationError(f"quantity must be positive, got {quantity}", "INVALID_QUANTITY")
    return quantity


def line_subtotal(line) -> Decimal:
    """unit_price * quantity без округления"""
    return to_money(line.unit_price, "unit_price") * validate_quantity(line.quantity)


def compute_total(lines: Iterable, delivery_surcharge: MoneyLike = 0, currency: str = "USD") -> Decimal:
    """
    Сумма заказа/ремонта: sum(unit_price * quantity) + доставка.
    Округляется один раз в конце: три позиции по 19.995 дают 59.99, а не 60.00.
    lines — любые объекты с unit_price и quantity (OrderLine, QuotedLine).
    """
    surcharge = to_money(delivery_surcharge, "delivery_surcharge")
    # tuple() — чтобы ошибка в любой позиции всплыла до суммирования
    subtotals = tuple(map(line_subtotal, lines))
    raw_total = reduce(lambda acc, amount: acc + amount, subtotals, ZERO) + surcharge
    return round_money(raw_total, currency)
