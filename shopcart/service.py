import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

from . import cart as cart_ops
from . import catalog as catalog_ops
from . import coupon as coupon_ops
from .discount import cart_totals, remaining_stock, total_item_count
from .domain import Cart, CartSession, Coupon, DiscountTier, Order, Product, Totals
from .errors import Failure
from .ftypes import Either
from .state import CART, COUPONS, PRODUCTS, SELECTED_COUPON, StateStore

logger = logging.getLogger(__name__)

NotifyFn = Callable[[str, str], None]


def _silent(message: str, type: str) -> None:
    pass


def watch_selected_coupon(store: StateStore, notify: NotifyFn) -> Callable[[], None]:
    """
    Предупреждает, когда из реестра пропадает купон, выбранный в корзине.
    Возвращает функцию отписки.
    """

    def on_coupons(key: str, registry: Tuple[Coupon, ...]) -> None:
        code = store.session().selected_coupon_code
        if code is None or coupon_ops.is_coupon_code_exists(code, registry):
            return
        logger.info("Selected coupon %s left the registry", code)
        notify(f"Выбранный купон {code} больше недоступен.", "warning")

    return store.subscribe(COUPONS, on_coupons)


class _Facade:
    def __init__(self, store: StateStore, notify: Optional[NotifyFn] = None):
        self.store = store
        self.notify = notify or _silent

    def _reject(self, key: str, failure: Failure) -> bool:
        logger.info("%s rejected: %s", key, failure.kind.value)
        self.notify(failure.message, "error")
        return False

    def _accept(self, write: Callable[[], None], success_message: Optional[str]) -> bool:
        write()
        if success_message:
            self.notify(success_message, "success")
        return True

    def _commit(
        self, result: Either, key: str, success_message: Optional[str] = None
    ) -> bool:
        """
        Left -> сообщение об ошибке, состояние не трогаем.
        Right -> сохраняем новое значение ключа.
        """
        return result.fold(
            lambda failure: self._reject(key, failure),
            lambda value: self._accept(
                lambda: self.store.set(key, value), success_message
            ),
        )


class CartService(_Facade):
    """Фасад корзины: товары, купон, оформление заказа"""

    def __init__(
        self,
        store: StateStore,
        notify: Optional[NotifyFn] = None,
        next_order_id: Callable[[], str] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(store, notify)
        self.next_order_id = next_order_id or cart_ops.OrderNumberGenerator()
        self.now = now

    @property
    def cart(self) -> Cart:
        return self.store.session().lines

    @property
    def selected_coupon(self) -> Optional[Coupon]:
        return coupon_ops.resolve_selected_coupon(
            self.store.session(), self.store.get(COUPONS)
        ).get_or_else(None)

    @property
    def totals(self) -> Totals:
        return cart_totals(self.cart, self.selected_coupon)

    @property
    def total_item_count(self) -> int:
        return total_item_count(self.cart)

    def remaining_stock(self, product: Product) -> int:
        return remaining_stock(product, self.cart)

    def _commit_lines(self, result: Either, success_message: str = None) -> bool:
        def write(lines: Cart) -> None:
            session = self.store.session()
            self.store.set_session(
                CartSession(lines=lines, selected_coupon_code=session.selected_coupon_code)
            )

        return result.fold(
            lambda failure: self._reject(CART, failure),
            lambda lines: self._accept(lambda: write(lines), success_message),
        )

    def add_to_cart(self, product: Product) -> bool:
        return self._commit_lines(
            cart_ops.add_item(product, self.cart), "Товар добавлен в корзину"
        )

    def remove_from_cart(self, product_id: str) -> None:
        self._commit_lines(Either.right(cart_ops.remove_item(product_id, self.cart)))

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        return self._commit_lines(
            cart_ops.update_quantity(product_id, quantity, self.cart)
        )

    def apply_coupon(self, coupon: Coupon) -> bool:
        return coupon_ops.validate_coupon_application(coupon, self.cart).fold(
            lambda failure: self._reject(SELECTED_COUPON, failure),
            lambda _: self._accept(
                lambda: self.store.set_session(
                    coupon_ops.select_coupon(self.store.session(), coupon.code)
                ),
                "Купон применён.",
            ),
        )

    def remove_coupon(self) -> None:
        self.store.set_session(coupon_ops.select_coupon(self.store.session(), None))

    def clear_cart(self) -> None:
        self.store.set_session(cart_ops.clear(self.store.session()))

    def complete_order(self) -> Order:
        """Оформляет заказ, сбрасывает корзину и купон, возвращает заказ"""
        result = cart_ops.checkout(
            self.store.session(),
            self.store.get(COUPONS),
            self.next_order_id,
            self.now().isoformat(),
        )
        order, session = result.value
        self.store.set_session(session)
        logger.info(
            "Order %s placed, total %d", order.id, order.totals.total_after_discount
        )
        self.notify(f"Заказ оформлен. Номер заказа: {order.id}", "success")
        return order


class CouponService(_Facade):
    """Фасад реестра купонов"""

    @property
    def coupons(self) -> Tuple[Coupon, ...]:
        return self.store.get(COUPONS)

    @property
    def coupon_count(self) -> int:
        return len(self.coupons)

    def add_coupon(self, coupon: Coupon) -> bool:
        return self._commit(
            coupon_ops.add_coupon(coupon, self.coupons), COUPONS, "Купон добавлен."
        )

    def remove_coupon(self, code: str) -> bool:
        """Удаление из реестра и сброс выбора, если он ссылался на этот купон"""
        if not self._commit(coupon_ops.remove_coupon(code, self.coupons), COUPONS):
            return False
        self.store.set_session(
            coupon_ops.release_selection(self.store.session(), code)
        )
        self.notify("Купон удалён.", "success")
        return True


class CatalogService(_Facade):
    """Фасад каталога товаров"""

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.store.get(PRODUCTS)

    @property
    def product_count(self) -> int:
        return len(self.products)

    def search(self, term: str) -> Tuple[Product, ...]:
        return catalog_ops.filter_products_by_search(self.products, term)

    def add_product(self, draft: dict) -> bool:
        return self._commit(
            catalog_ops.add_product(draft, self.products), PRODUCTS, "Товар добавлен."
        )

    def update_product(self, product_id: str, updates: dict) -> bool:
        return self._commit(
            catalog_ops.update_product(product_id, updates, self.products),
            PRODUCTS,
            "Товар изменён.",
        )

    def remove_product(self, product_id: str) -> bool:
        return self._commit(
            catalog_ops.remove_product(product_id, self.products),
            PRODUCTS,
            "Товар удалён.",
        )

    def update_stock(self, product_id: str, new_stock: int) -> bool:
        return self._commit(
            catalog_ops.update_stock(product_id, new_stock, self.products),
            PRODUCTS,
            "Остаток изменён.",
        )

    def add_discount_tier(self, product_id: str, tier: DiscountTier) -> bool:
        return self._commit(
            catalog_ops.add_discount_tier(product_id, tier, self.products),
            PRODUCTS,
            "Правило скидки добавлено.",
        )

    def remove_discount_tier(self, product_id: str, index: int) -> bool:
        return self._commit(
            catalog_ops.remove_discount_tier(product_id, index, self.products),
            PRODUCTS,
            "Правило скидки удалено.",
        )
