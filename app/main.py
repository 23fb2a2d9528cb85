import sys
import os
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from shopcart.config import Config, configure_logging
from shopcart.coupon import DISCOUNT_TYPES
from shopcart.discount import effective_discount_rate, line_total
from shopcart.domain import Coupon, DiscountTier
from shopcart.formatters import format_percentage, format_price
from shopcart.notifications import NotificationQueue
from shopcart.service import (
    CartService,
    CatalogService,
    CouponService,
    watch_selected_coupon,
)
from shopcart.state import StateStore
from shopcart.storage import JsonFileStore, load_seed


# ============ Инициализация ============
@st.cache_data
def get_seed():
    return load_seed(Config.SEED_PATH)


configure_logging()

st.set_page_config(
    page_title="Shopcart",
    page_icon="🛒",
    layout="wide",
)

if "store" not in st.session_state:
    store = StateStore(JsonFileStore(Config.STORE_PATH))
    store.seed(*get_seed())
    st.session_state.store = store
    st.session_state.notifications = NotificationQueue(ttl=Config.NOTIFICATION_TTL)
    watch_selected_coupon(store, st.session_state.notifications.add)

store = st.session_state.store
queue = st.session_state.notifications

catalog = CatalogService(store, notify=queue.add)
coupons = CouponService(store, notify=queue.add)
cart = CartService(store, notify=queue.add)


def show_notifications():
    for n in queue.active():
        if n.type == "error":
            st.error(n.message)
        elif n.type == "warning":
            st.warning(n.message)
        else:
            st.success(n.message)


# ============ SIDEBAR - Навигация ============
with st.sidebar:
    st.header("🛒 Shopcart")
    page = st.radio(
        "Раздел:",
        ["🛍️ Магазин", "⚙️ Администрирование"],
        label_visibility="collapsed",
    )
    st.divider()
    st.metric("Товаров в корзине", cart.total_item_count)


# ============ PAGE: МАГАЗИН ============
if page == "🛍️ Магазин":
    show_notifications()
    col_products, col_cart = st.columns([3, 2])

    with col_products:
        st.header("🏪 Товары")
        term = st.text_input("🔍 Поиск", key="search")
        found = catalog.search(term)
        st.caption(f"Всего товаров: {len(found)}")

        for p in found:
            left = cart.remaining_stock(p)
            cols = st.columns([4, 2, 2, 2])
            with cols[0]:
                st.markdown(f"**{p.name}**")
                if p.discounts:
                    st.caption(
                        ", ".join(
                            f"от {t.quantity} шт: {format_percentage(t.rate)}"
                            for t in p.discounts
                        )
                    )
            with cols[1]:
                st.write(format_price(p.price))
            with cols[2]:
                st.write("Нет в наличии" if left <= 0 else f"Осталось {left} шт")
            with cols[3]:
                if st.button("➕ В корзину", key=f"add_{p.id}", disabled=left <= 0):
                    cart.add_to_cart(p)
                    st.rerun()

    with col_cart:
        st.header("🛒 Корзина")
        if not cart.cart:
            st.info("Корзина пуста")
        else:
            current = cart.cart
            for line in current:
                pid = line.product.id
                rate = effective_discount_rate(line, current)
                cols = st.columns([4, 1, 1, 1, 3])
                with cols[0]:
                    st.write(f"**{line.product.name}**")
                with cols[1]:
                    if st.button("−", key=f"dec_{pid}"):
                        cart.update_quantity(pid, line.quantity - 1)
                        st.rerun()
                with cols[2]:
                    st.write(line.quantity)
                with cols[3]:
                    if st.button("+", key=f"inc_{pid}"):
                        cart.update_quantity(pid, line.quantity + 1)
                        st.rerun()
                with cols[4]:
                    st.write(format_price(line_total(line, current)))
                    if rate > 0:
                        st.caption(f"-{format_percentage(rate)}")
                if st.button("🗑️ Удалить", key=f"remove_{pid}"):
                    cart.remove_from_cart(pid)
                    st.rerun()

            st.divider()
            st.subheader("🎟️ Купон")
            codes = [c.code for c in coupons.coupons]
            selected = cart.selected_coupon
            choice = st.selectbox(
                "Купон",
                ["—"] + codes,
                index=(codes.index(selected.code) + 1) if selected else 0,
                label_visibility="collapsed",
            )
            if choice == "—" and selected:
                cart.remove_coupon()
                st.rerun()
            elif choice != "—" and (not selected or selected.code != choice):
                picked = next(c for c in coupons.coupons if c.code == choice)
                cart.apply_coupon(picked)
                st.rerun()

            totals = cart.totals
            st.divider()
            st.write(f"Сумма: {format_price(totals.total_before_discount)}")
            if totals.total_discount > 0:
                st.write(f"Скидка: -{format_price(totals.total_discount)}")
            st.markdown(f"### Итого: **{format_price(totals.total_after_discount)}**")

            if st.button("✅ Оформить заказ", type="primary", use_container_width=True):
                cart.complete_order()
                st.balloons()
                st.rerun()


# ============ PAGE: АДМИНИСТРИРОВАНИЕ ============
elif page == "⚙️ Администрирование":
    show_notifications()
    tab_products, tab_coupons = st.tabs(["📦 Товары", "🎟️ Купоны"])

    with tab_products:
        st.subheader("📦 Товары")
        for p in catalog.products:
            with st.expander(f"{p.name} — {format_price(p.price)}, остаток {p.stock}"):
                with st.form(key=f"edit_{p.id}"):
                    name = st.text_input("Название", p.name)
                    price = st.number_input("Цена", value=p.price, step=100)
                    stock = st.number_input("Остаток", value=p.stock, step=1)
                    if st.form_submit_button("💾 Сохранить"):
                        catalog.update_product(
                            p.id, {"name": name, "price": int(price), "stock": int(stock)}
                        )
                        st.rerun()

                for idx, tier in enumerate(p.discounts):
                    cols = st.columns([4, 1])
                    with cols[0]:
                        st.write(
                            f"от {tier.quantity} шт: {format_percentage(tier.rate)}"
                        )
                    with cols[1]:
                        if st.button("✖", key=f"tier_rm_{p.id}_{idx}"):
                            catalog.remove_discount_tier(p.id, idx)
                            st.rerun()

                cols = st.columns([2, 2, 1])
                with cols[0]:
                    tier_qty = st.number_input(
                        "Порог, шт", value=10, step=1, key=f"tier_q_{p.id}"
                    )
                with cols[1]:
                    tier_pct = st.number_input(
                        "Скидка, %", value=10, step=1, key=f"tier_r_{p.id}"
                    )
                with cols[2]:
                    if st.button("➕ Скидка", key=f"tier_add_{p.id}"):
                        catalog.add_discount_tier(
                            p.id, DiscountTier(int(tier_qty), tier_pct / 100)
                        )
                        st.rerun()

                if st.button("🗑️ Удалить товар", key=f"del_{p.id}"):
                    catalog.remove_product(p.id)
                    st.rerun()

        st.divider()
        st.markdown("##### Новый товар")
        with st.form(key="new_product", clear_on_submit=True):
            name = st.text_input("Название")
            price = st.number_input("Цена", value=0, step=100)
            stock = st.number_input("Остаток", value=0, step=1)
            if st.form_submit_button("➕ Добавить"):
                catalog.add_product(
                    {"name": name, "price": int(price), "stock": int(stock)}
                )
                st.rerun()

    with tab_coupons:
        st.subheader("🎟️ Купоны")
        for c in coupons.coupons:
            cols = st.columns([3, 2, 2, 1])
            with cols[0]:
                st.write(f"**{c.name}**")
            with cols[1]:
                st.code(c.code)
            with cols[2]:
                st.write(
                    format_price(int(c.discount_value), "text")
                    if c.discount_type == "amount"
                    else f"{c.discount_value}%"
                )
            with cols[3]:
                if st.button("🗑️", key=f"coupon_rm_{c.code}"):
                    coupons.remove_coupon(c.code)
                    st.rerun()

        st.divider()
        with st.form(key="new_coupon", clear_on_submit=True):
            name = st.text_input("Название купона")
            code = st.text_input("Код").upper()
            discount_type = st.selectbox("Тип", DISCOUNT_TYPES)
            value = st.number_input("Значение", value=0, step=1)
            if st.form_submit_button("➕ Создать купон"):
                coupons.add_coupon(Coupon(name, code, discount_type, value))
                st.rerun()
