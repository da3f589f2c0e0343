import sys
import os
import logging
from datetime import date

import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from pricing.cart import add_to_cart, remove_from_cart
from pricing.config import get_config
from pricing.delivery import DeliveryMethod
from pricing.domain import Cart
from pricing.errors import PricingError
from pricing.ftypes import Either
from pricing.money import format_money
from pricing.records import load_catalog
from Checkout_Service.service import PricingService
from pricing.stock import StockStatus, validate_cart_stock
from Checkout_Service.quote import quote_summary

logger = logging.getLogger(__name__)


# ============ Данные ============
@st.cache_data
def get_catalog():
    return load_catalog("data/seed.json")


@st.cache_resource
def get_service():
    return PricingService(get_catalog(), get_config())


st.set_page_config(
    page_title="Repair Shop Pricing",
    page_icon="🛠️",
    layout="wide",
    initial_sidebar_state="expanded",
)

service = get_service()
catalog = service.catalog
config = service.config

if "cart" not in st.session_state:
    st.session_state.cart = Cart(id="cart_default", user_id="admin", items=())


def money(amount) -> str:
    return format_money(amount, config.currency)


DELIVERY_LABELS = {
    DeliveryMethod.PICKUP: "🙋 Самовывоз",
    DeliveryMethod.IN_STORE: "🏪 В мастерской",
    DeliveryMethod.SHIPPING: f"📦 Доставка ({money(config.shipping_cost)})",
}

STOCK_LABELS = {
    StockStatus.IN_STOCK: "✅ В наличии",
    StockStatus.LOW_STOCK: "⚠️ Осталось мало",
    StockStatus.OUT_OF_STOCK: "❌ Нет в наличии",
}


# ============ HEADER ============
st.title("🛠️ Цены: аксессуары, запчасти, ремонт")

with st.sidebar:
    st.header("📂 Навигация")
    page = st.radio(
        "Раздел:",
        ["🏪 Каталог", "🛒 Корзина", "🔧 Ремонт", "🏷️ Акции"],
        label_visibility="collapsed",
    )
    st.divider()
    evaluation_day = st.date_input("Дата расчёта", value=date.today(), key="eval_day")
    st.caption(f"Окна скидок сверяются по зоне {config.discount_timezone}")


# ============ PAGE: КАТАЛОГ ============
if page == "🏪 Каталог":
    st.header("🏪 Каталог")

    for p in catalog.products:
        variants = catalog.variants_of(p.id)
        with st.container():
            cols = st.columns([4, 3, 2, 2, 2])
            with cols[0]:
                st.markdown(f"**{p.name}**")
                st.caption(f"📂 {p.category_id or '—'}")
            with cols[1]:
                options = [None] + [v.id for v in variants]
                variant_id = st.selectbox(
                    "Вариант",
                    options,
                    format_func=lambda vid: "—"
                    if vid is None
                    else next(f"{v.variant_name}: {v.variant_value}" for v in variants if v.id == vid),
                    key=f"variant_{p.id}",
                    disabled=not variants,
                    label_visibility="collapsed",
                )
            result = Either.attempt(service.price, p.id, variant_id, evaluation_day)
            with cols[2]:
                if result.is_right:
                    priced = result.value
                    st.write(money(priced.unit_price))
                    if priced.is_discounted:
                        st.caption(f"~~{money(priced.original_unit_price)}~~ −{priced.effective_discount_percentage}%")
                else:
                    st.error(str(result.value))
            with cols[3]:
                qty, status = service.availability(p.id, variant_id)
                st.write(STOCK_LABELS[status])
                if status is StockStatus.LOW_STOCK:
                    st.caption(f"{qty} шт.")
            with cols[4]:
                needs_variant = bool(variants) and variant_id is None
                if st.button("➕ В корзину", key=f"add_{p.id}", disabled=needs_variant or qty <= 0):
                    st.session_state.cart = add_to_cart(st.session_state.cart, p.id, 1, variant_id)
                    st.success(f"✅ {p.name}")
            st.divider()


# ============ PAGE: КОРЗИНА ============
elif page == "🛒 Корзина":
    st.header("🛒 Корзина")
    cart = st.session_state.cart

    if not cart.items:
        st.info("🛍️ Корзина пуста. Перейдите в каталог!")
    else:
        method = st.radio(
            "Способ получения",
            list(DeliveryMethod),
            format_func=DELIVERY_LABELS.get,
            horizontal=True,
        )
        try:
            quote = service.quote_cart(cart, method, evaluation_day)
        except PricingError as exc:
            logger.warning("Cart %s cannot be quoted: %s", cart.id, exc)
            st.error(f"❌ {exc.explanation}")
        else:
            summary = quote_summary(quote)
            for line, item in zip(summary["lines"], cart.items):
                cols = st.columns([5, 2, 2, 1])
                with cols[0]:
                    st.write(f"**{line['name']}**")
                with cols[1]:
                    st.write(f"× {line['quantity']}")
                with cols[2]:
                    st.write(line["unit_price"])
                with cols[3]:
                    if st.button("🗑️", key=f"remove_{item.product_id}_{item.variant_id}"):
                        st.session_state.cart = remove_from_cart(cart, item.product_id, item.variant_id)
                        st.rerun()

            st.divider()
            st.write(f"Подытог: {summary['subtotal']}")
            st.write(f"Доставка: {summary['delivery']}")
            if quote.tax > 0:
                st.write(f"Налог: {summary['tax']}")
            st.markdown(f"### 💰 Итого: **{summary['total']}**")

            if st.button("✅ Проверить остатки", type="primary"):
                checked = validate_cart_stock(cart, catalog)
                if checked.is_right:
                    st.success("✅ Все позиции в наличии")
                else:
                    st.error(f"❌ {checked.value['error']}")


# ============ PAGE: РЕМОНТ ============
elif page == "🔧 Ремонт":
    st.header("🔧 Запись на ремонт")

    repairs = tuple(p for p in catalog.products if p.category_id == "repair")
    chosen = st.multiselect("Услуги", [p.id for p in repairs], format_func=lambda pid: next(p.name for p in repairs if p.id == pid))

    selections = []
    for pid in chosen:
        variants = catalog.variants_of(pid)
        vid = None
        if variants:
            vid = st.selectbox(
                f"Качество: {pid}",
                [v.id for v in variants],
                format_func=lambda x: next(v.variant_value for v in variants if v.id == x),
                key=f"repair_variant_{pid}",
            )
        selections.append((pid, vid))

    method = st.radio("Как передадите устройство", list(DeliveryMethod), format_func=DELIVERY_LABELS.get)

    if selections:
        try:
            quote = service.quote_repair(selections, method, evaluation_day)
        except PricingError as exc:
            st.error(f"❌ {exc.explanation}")
        else:
            for line in quote.lines:
                st.write(f"• {line.name}: {money(line.unit_price)}")
            st.markdown(f"### Ориентировочная стоимость: **{money(quote.total)}**")


# ============ PAGE: АКЦИИ ============
elif page == "🏷️ Акции":
    st.header("🏷️ Товары со скидкой")
    offers = service.offers(evaluation_day)

    if not offers:
        st.warning("На выбранную дату скидок нет.")
    for product, priced in offers:
        cols = st.columns([5, 2, 2])
        with cols[0]:
            st.write(f"**{product.name}**")
        with cols[1]:
            st.write(f"−{priced.effective_discount_percentage}%")
        with cols[2]:
            st.write(f"{money(priced.unit_price)} ~~{money(priced.original_unit_price)}~~")
