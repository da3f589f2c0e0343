from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    base_price: Decimal
    category_id: Optional[str] = None
    discount_percentage: Optional[Decimal] = None  # None = скидка не задана
    discount_start_date: Optional[date] = None
    discount_end_date: Optional[date] = None
    in_stock: int = 0


@dataclass(frozen=True)
class Variant:
    id: str
    product_id: str
    price_adjustment: Decimal = Decimal("0")  # со знаком
    discount_percentage: Optional[Decimal] = None
    discount_start_date: Optional[date] = None
    discount_end_date: Optional[date] = None
    stock: int = 0
    variant_name: str = ""
    variant_value: str = ""


@dataclass(frozen=True)
class CategoryDiscountRule:
    id: str
    category_id: str
    discount_percentage: Decimal
    is_active: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class DiscountSource(str, Enum):
    VARIANT = "variant"
    PRODUCT = "product"
    NONE = "none"


@dataclass(frozen=True)
class ResolvedPrice:
    pre_discount_price: Decimal
    discount_percentage: Decimal
    window_start: Optional[date]
    window_end: Optional[date]
    source: DiscountSource


@dataclass(frozen=True)
class PricedLineItem:
    unit_price: Decimal
    original_unit_price: Decimal
    effective_discount_percentage: Decimal

    @property
    def is_discounted(self) -> bool:
        return self.effective_discount_percentage > 0

    @property
    def savings(self) -> Decimal:
        return self.original_unit_price - self.unit_price


@dataclass(frozen=True)
class OrderLine:
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class CartLine:
    product_id: str
    variant_id: Optional[str]
    quantity: int


@dataclass(frozen=True)
class Cart:
    id: str
    user_id: str
    items: Tuple[CartLine, ...] = ()


@dataclass(frozen=True)
class Catalog:
    products: Tuple[Product, ...] = ()
    variants: Tuple[Variant, ...] = ()
    category_discounts: Tuple[CategoryDiscountRule, ...] = ()

    def variants_of(self, product_id: str) -> Tuple[Variant, ...]:
        return tuple(v for v in self.variants if v.product_id == product_id)
