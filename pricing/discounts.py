from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Optional, Union

from .errors import ValidationError
from .money import HUNDRED, ZERO, MoneyLike, round_money, to_decimal, to_money

Moment = Union[date, datetime]


# ============ Момент оценки ============


def evaluation_date(now: Moment, tz: Optional[tzinfo] = None) -> date:
    """
    Календарная дата, по которой сверяются окна скидок.
    Aware datetime переводится в зону магазина (UTC по умолчанию),
    naive datetime считается уже заданным в этой зоне.
    """
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            return now.astimezone(tz or timezone.utc).date()
        return now.date()
    if isinstance(now, date):
        return now
    raise ValidationError(f"now must be a date or datetime, got {type(now).__name__}")


def is_window_active(
    window_start: Optional[date],
    window_end: Optional[date],
    now: Moment,
    tz: Optional[tzinfo] = None,
) -> bool:
    """Окно включает обе границы; отсутствующая граница не ограничивает"""
    if window_start is not None and window_end is not None and window_start > window_end:
        raise ValidationError(
            f"Discount window starts after it ends: {window_start} > {window_end}",
            "INVALID_WINDOW",
        )
    today = evaluation_date(now, tz)
    if window_start is not None and today < window_start:
        return False
    if window_end is not None and today > window_end:
        return False
    return True


# ============ Проценты ============


def validate_percentage(value: Optional[MoneyLike], field: str = "discount_percentage") -> Decimal:
    """None -> 0; всё вне [0, 100] — ValidationError, без молчаливого обрезания"""
    if value is None:
        return ZERO
    pct = to_decimal(value, field)
    if pct < ZERO or pct > HUNDRED:
        raise ValidationError(f"{field} must be within [0, 100], got {pct}", "PERCENT_OUT_OF_RANGE")
    return pct


def effective_discount(
    candidate_percentage: Optional[MoneyLike],
    category_percentage: Optional[MoneyLike],
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    *,
    now: Moment,
    tz: Optional[tzinfo] = None,
) -> Decimal:
    """
    Итоговый процент скидки: max(кандидат, если окно активно, иначе 0; категория).
    Неактивный кандидат не обнуляет скидку категории.
    """
    candidate = validate_percentage(candidate_percentage, "candidate_percentage")
    category = validate_percentage(category_percentage, "category_percentage")

    active = candidate if candidate > ZERO and is_window_active(window_start, window_end, now, tz) else ZERO
    return max(active, category)


def discounted_amount(amount: MoneyLike, percentage: MoneyLike, currency: str = "USD") -> Decimal:
    """
    amount * (1 - p/100), не меньше нуля, half-up до минимальной единицы валюты.
    При p == 0 сумма возвращается как есть.
    """
    base = to_money(amount, "amount")
    pct = validate_percentage(percentage, "percentage")

    if pct == ZERO:
        return base
    if pct == HUNDRED:
        return round_money(ZERO, currency)

    reduced = base * (HUNDRED - pct) / HUNDRED
    return round_money(max(reduced, ZERO), currency)


def has_discount(product_percentage: Optional[MoneyLike] = None, category_percentage: Optional[MoneyLike] = None) -> bool:
    return (
        validate_percentage(product_percentage) > ZERO
        or validate_percentage(category_percentage, "category_percentage") > ZERO
    )
