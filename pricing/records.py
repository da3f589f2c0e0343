import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from .domain import Catalog, CategoryDiscountRule, Product, Variant
from .discounts import validate_percentage
from .errors import ValidationError
from .money import to_decimal, to_money

logger = logging.getLogger(__name__)


# ============ Разбор полей строк БД ============


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_date(value: Any, field: str = "date") -> Optional[date]:
    """
    "2025-01-31" или "2025-01-31T23:00:00Z" -> date.
    Для меток времени берётся календарная дата в том виде, как она записана.
    """
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValidationError(f"{field} is not an ISO date: {value!r}", "INVALID_DATE") from None


def parse_discount(value: Any, field: str = "discount_percentage", zero_means_unset: bool = False) -> Optional[Decimal]:
    """
    Пустое значение -> None (скидка не задана).
    zero_means_unset: в старых строках вариантов 0 и "" неотличимы, оба значат "нет своей скидки".
    """
    if _is_blank(value):
        return None
    pct = validate_percentage(value, field)
    if zero_means_unset and pct == 0:
        logger.warning("Legacy %s=0 treated as unset", field)
        return None
    return pct


_FLAGS = {"true": True, "1": True, "false": False, "0": False}


def parse_flag(value: Any, field: str = "flag", default: bool = False) -> bool:
    """bool, 0/1 или строки "true"/"false"/"1"/"0"; всё остальное -> ValidationError"""
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    key = str(value).strip().lower()
    if key not in _FLAGS:
        raise ValidationError(f"{field} is not a boolean: {value!r}", "INVALID_FLAG")
    return _FLAGS[key]


def _stock(value: Any) -> int:
    if _is_blank(value):
        return 0
    return int(to_decimal(value, "stock"))


# ============ Строки -> доменные объекты ============


def product_from_row(row: Mapping[str, Any]) -> Product:
    return Product(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        base_price=to_money(row.get("base_price", 0), "base_price"),
        category_id=None if _is_blank(row.get("category_id")) else str(row["category_id"]),
        discount_percentage=parse_discount(row.get("discount_percentage")),
        discount_start_date=parse_date(row.get("discount_start_date"), "discount_start_date"),
        discount_end_date=parse_date(row.get("discount_end_date"), "discount_end_date"),
        in_stock=_stock(row.get("in_stock")),
    )


def variant_from_row(row: Mapping[str, Any], legacy: bool = True) -> Variant:
    return Variant(
        id=str(row["id"]),
        product_id=str(row["product_id"]),
        price_adjustment=to_decimal(row.get("price_adjustment") or 0, "price_adjustment"),
        discount_percentage=parse_discount(row.get("discount_percentage"), zero_means_unset=legacy),
        discount_start_date=parse_date(row.get("discount_start_date"), "discount_start_date"),
        discount_end_date=parse_date(row.get("discount_end_date"), "discount_end_date"),
        stock=_stock(row.get("stock")),
        variant_name=str(row.get("variant_name") or ""),
        variant_value=str(row.get("variant_value") or ""),
    )


def category_rule_from_row(row: Mapping[str, Any]) -> CategoryDiscountRule:
    return CategoryDiscountRule(
        id=str(row.get("id", row["category_id"])),
        category_id=str(row["category_id"]),
        discount_percentage=validate_percentage(row.get("discount_percentage"), "discount_percentage"),
        is_active=parse_flag(row.get("is_active"), "is_active", default=True),
        start_date=parse_date(row.get("start_date"), "start_date"),
        end_date=parse_date(row.get("end_date"), "end_date"),
    )


def load_catalog(path: str) -> Catalog:
    """Загружает seed.json и возвращает иммутабельный каталог"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)

    catalog = Catalog(
        products=tuple(map(product_from_row, data.get("products", []))),
        variants=tuple(map(variant_from_row, data.get("variants", []))),
        category_discounts=tuple(map(category_rule_from_row, data.get("category_discounts", []))),
    )
    logger.debug(
        "Loaded catalog from %s: %d products, %d variants, %d category rules",
        path,
        len(catalog.products),
        len(catalog.variants),
        len(catalog.category_discounts),
    )
    return catalog
