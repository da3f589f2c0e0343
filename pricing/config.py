from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingConfig:
    """
    Настройки магазина, влияющие на расчёт цены.
    discount_timezone — в какой зоне трактуются календарные даты окон скидок.
    """

    currency: str = "USD"
    discount_timezone: str = "UTC"
    shipping_cost: Decimal = Decimal("9.99")
    free_shipping_threshold: Optional[Decimal] = None
    tax_rate: Decimal = Decimal("0")
    low_stock_threshold: int = 10

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.discount_timezone)


_ENV_PREFIX = "REPAIR_PRICING_"
_TOOL_KEY = "repair_pricing"


def _find_pyproject(start_dir: Path) -> Path | None:
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / "pyproject.toml"
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return {}


def _to_decimal(value: Any, default: Optional[Decimal], key: str = "value") -> Optional[Decimal]:
    if value is None or value == "":
        return default
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        result = None
    if result is None or not result.is_finite():
        logger.warning("Invalid %s %r, using default %s", key, value, default)
        return default
    return result


def _tax_rate(value: Any) -> Decimal:
    rate = _to_decimal(value, Decimal("0"), "tax_rate")
    if not Decimal("0") <= rate <= Decimal("1"):
        logger.warning("tax_rate %s is outside [0, 1], using 0", rate)
        return Decimal("0")
    return rate


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _timezone_name(value: Any) -> str:
    name = str(value or "UTC")
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown discount timezone %r, falling back to UTC", name)
        return "UTC"
    return name


def _from_sources(raw: Dict[str, Any]) -> PricingConfig:
    def pick(key: str, default: Any) -> Any:
        return os.getenv(f"{_ENV_PREFIX}{key.upper()}", raw.get(key, default))

    currency = str(pick("currency", "USD")).upper()
    timezone = _timezone_name(pick("discount_timezone", "UTC"))
    shipping_cost = _to_decimal(pick("shipping_cost", "9.99"), Decimal("9.99"), "shipping_cost")
    threshold = _to_decimal(pick("free_shipping_threshold", None), None, "free_shipping_threshold")
    low_stock = _to_int(pick("low_stock_threshold", 10), 10)

    return PricingConfig(
        currency=currency,
        discount_timezone=timezone,
        shipping_cost=max(Decimal("0"), shipping_cost),
        free_shipping_threshold=threshold,
        tax_rate=_tax_rate(pick("tax_rate", "0")),
        low_stock_threshold=max(0, low_stock),
    )


@lru_cache(maxsize=32)
def load_config(start_dir: str | os.PathLike[str] | None = None) -> PricingConfig:
    root = Path(start_dir or os.getcwd()).resolve()
    pyproject = _find_pyproject(root)
    if pyproject is None:
        return _from_sources({})

    parsed = _load_toml(pyproject)
    tool = parsed.get("tool", {}) if isinstance(parsed, dict) else {}
    section = tool.get(_TOOL_KEY, {}) if isinstance(tool, dict) else {}
    return _from_sources(section if isinstance(section, dict) else {})


def get_config() -> PricingConfig:
    return load_config(os.getcwd())


def refresh_config(start_dir: str | os.PathLike[str] | None = None) -> PricingConfig:
    load_config.cache_clear()
    return load_config(start_dir)
