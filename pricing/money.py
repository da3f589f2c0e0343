from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from .errors import ValidationError

MoneyLike = Union[Decimal, int, str, float]

# Количество знаков минимальной единицы валюты
MINOR_UNITS = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "KZT": 2,
    "JPY": 0,
}

_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "KZT": "₸", "JPY": "¥"}

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: MoneyLike, field: str = "value") -> Decimal:
    """
    Приводит число к Decimal без двоичного дрейфа.
    float проходит через str(): 19.99 -> Decimal("19.99"), а не 19.989999...
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got bool")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field} is not a number: {value!r}") from None
    else:
        raise ValidationError(f"{field} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    return result


def to_money(value: MoneyLike, field: str = "amount") -> Decimal:
    """Денежная сумма: конечная и неотрицательная"""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise ValidationError(f"{field} must be non-negative, got {amount}")
    return amount


def minor_units(currency: str) -> int:
    code = (currency or "").upper()
    if code not in MINOR_UNITS:
        raise ValidationError(f"Unsupported currency: {currency!r}", "UNSUPPORTED_CURRENCY")
    return MINOR_UNITS[code]


def round_money(amount: Decimal, currency: str = "USD") -> Decimal:
    """Округление half-up до минимальной единицы валюты (2 знака для USD/EUR)"""
    exponent = Decimal(1).scaleb(-minor_units(currency))
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal, currency: str = "USD") -> int:
    """149.99 USD -> 14999 (центы, как ждёт платёжный провайдер)"""
    return int(round_money(amount, currency).scaleb(minor_units(currency)))


def format_money(amount: Decimal, currency: str = "USD") -> str:
    """
    Строка для отображения.
    Округляет тем же half-up, что и ядро, поэтому уже округлённая сумма не меняется.
    """
    places = minor_units(currency)
    symbol = _SYMBOLS.get(currency.upper(), currency.upper() + " ")
    return f"{symbol}{round_money(amount, currency):,.{places}f}"
