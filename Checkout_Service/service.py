import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from pricing.category_discounts import category_discount_for, resolve_category_discounts
from pricing.config import PricingConfig, get_config
from pricing.delivery import DeliveryMethod
from pricing.discounts import Moment
from pricing.domain import Cart, Catalog, PricedLineItem, Product
from pricing.lazy import iter_on_offer
from pricing.line_items import build_line_item, lookup
from pricing.stock import StockStatus, available_stock, stock_status

from Checkout_Service.quote import Quote, quote_cart, quote_repair

logger = logging.getLogger(__name__)


class PricingService:
    """
    Фасад над чистым ядром для экранов каталога, корзины и ремонта.
    Если now не передан, берётся текущее время в UTC; ядро часы не читает.
    """

    def __init__(self, catalog: Catalog, config: Optional[PricingConfig] = None):
        self.catalog = catalog
        self.config = config or get_config()

    def _now(self, now: Optional[Moment]) -> Moment:
        return now if now is not None else datetime.now(timezone.utc)

    def category_discounts(self, now: Optional[Moment] = None) -> Dict[str, Decimal]:
        """Активные скидки категорий; считаются заново при каждом вызове"""
        return resolve_category_discounts(
            self.catalog.category_discounts, now=self._now(now), tz=self.config.tzinfo
        )

    def price(self, product_id: str, variant_id: Optional[str] = None, now: Optional[Moment] = None) -> PricedLineItem:
        moment = self._now(now)
        product, variant = lookup(self.catalog, product_id, variant_id)
        category_pct = category_discount_for(product, self.category_discounts(moment))
        priced = build_line_item(
            product,
            variant,
            category_pct,
            now=moment,
            currency=self.config.currency,
            tz=self.config.tzinfo,
        )
        logger.debug(
            "Priced %s/%s: %s -> %s (%s%%)",
            product_id,
            variant_id,
            priced.original_unit_price,
            priced.unit_price,
            priced.effective_discount_percentage,
        )
        return priced

    def availability(self, product_id: str, variant_id: Optional[str] = None) -> Tuple[int, StockStatus]:
        product, variant = lookup(self.catalog, product_id, variant_id)
        qty = available_stock(product, variant)
        return qty, stock_status(qty, self.config.low_stock_threshold)

    def offers(self, now: Optional[Moment] = None) -> List[Tuple[Product, PricedLineItem]]:
        moment = self._now(now)
        return list(
            iter_on_offer(
                self.catalog.products,
                self.category_discounts(moment),
                now=moment,
                currency=self.config.currency,
                tz=self.config.tzinfo,
            )
        )

    def quote_cart(self, cart: Cart, delivery_method=DeliveryMethod.IN_STORE, now: Optional[Moment] = None) -> Quote:
        moment = self._now(now)
        return quote_cart(
            cart,
            self.catalog,
            self.category_discounts(moment),
            delivery_method,
            now=moment,
            config=self.config,
        )

    def quote_repair(
        self,
        selections: Iterable[Tuple[str, Optional[str]]],
        delivery_method=DeliveryMethod.IN_STORE,
        now: Optional[Moment] = None,
    ) -> Quote:
        moment = self._now(now)
        return quote_repair(
            selections,
            self.catalog,
            self.category_discounts(moment),
            delivery_method,
            now=moment,
            config=self.config,
        )
