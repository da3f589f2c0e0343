from decimal import Decimal
from enum import Enum

from .config import PricingConfig
from .errors import ValidationError
from .money import ZERO, MoneyLike, to_money


class DeliveryMethod(str, Enum):
    PICKUP = "pickup"
    IN_STORE = "in_store"
    SHIPPING = "shipping"


def parse_delivery_method(value) -> DeliveryMethod:
    if isinstance(value, DeliveryMethod):
        return value
    try:
        return DeliveryMethod(str(value))
    except ValueError:
        raise ValidationError(f"Unknown delivery method: {value!r}", "INVALID_DELIVERY_METHOD") from None


def delivery_surcharge(method, subtotal: MoneyLike, config: PricingConfig) -> Decimal:
    """
    Доплата за доставку: только для shipping.
    Если задан free_shipping_threshold, при subtotal >= порога доставка бесплатна.
    """
    if parse_delivery_method(method) is not DeliveryMethod.SHIPPING:
        return ZERO

    amount = to_money(subtotal, "subtotal")
    threshold = config.free_shipping_threshold
    if threshold is not None and amount >= threshold:
        return ZERO
    return config.shipping_cost
