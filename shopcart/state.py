import logging
from typing import Any, Callable, Dict, Tuple

from .domain import CartSession, Coupon, Product
from .serialization import (
    cart_from_list,
    cart_to_list,
    coupons_from_list,
    coupons_to_list,
    products_from_list,
    products_to_list,
)
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

PRODUCTS = "products"
COUPONS = "coupons"
CART = "cart"
SELECTED_COUPON = "selectedCoupon"

# ключ -> (в хранилище, из хранилища, значение по умолчанию)
CODECS: Dict[str, Tuple[Callable, Callable, Any]] = {
    PRODUCTS: (products_to_list, products_from_list, ()),
    COUPONS: (coupons_to_list, coupons_from_list, ()),
    CART: (cart_to_list, cart_from_list, ()),
    SELECTED_COUPON: (lambda code: code, lambda raw: raw, None),
}

Handler = Callable[[str, Any], None]


class StateStore:
    """
    Явный контейнер общего состояния: get / set / subscribe.
    Передаётся в сервисы, движок о нём не знает.
    Значения хранятся типизированными, в backend уходят простые словари.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self.subscribers: Tuple[Tuple[str, Handler], ...] = ()
        self._cache: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        if key not in self._cache:
            _, decode, default = CODECS[key]
            raw = self.backend.get(key)
            self._cache[key] = default if raw is None else decode(raw)
        return self._cache[key]

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: Dict[str, Any]) -> None:
        """
        Записывает несколько ключей; все значения кодируются до первой записи,
        поэтому ошибка кодирования не оставляет состояние наполовину изменённым.
        """
        encoded = {key: CODECS[key][0](value) for key, value in values.items()}
        for key, raw in encoded.items():
            self.backend.set(key, raw)
            self._cache[key] = values[key]
        for key, value in values.items():
            self._publish(key, value)

    def subscribe(self, key: str, handler: Handler) -> Callable[[], None]:
        """Подписка на изменения ключа; возвращает функцию отписки"""
        entry = (key, handler)
        self.subscribers = self.subscribers + (entry,)

        def unsubscribe() -> None:
            self.subscribers = tuple(s for s in self.subscribers if s is not entry)

        return unsubscribe

    def _publish(self, key: str, value: Any) -> None:
        for name, handler in self.subscribers:
            if name == key:
                handler(key, value)

    # ============ Сессия корзины ============

    def session(self) -> CartSession:
        return CartSession(
            lines=self.get(CART), selected_coupon_code=self.get(SELECTED_COUPON)
        )

    def set_session(self, session: CartSession) -> None:
        self.set_many(
            {CART: session.lines, SELECTED_COUPON: session.selected_coupon_code}
        )

    def seed(self, products: Tuple[Product, ...], coupons: Tuple[Coupon, ...]) -> None:
        """Заполняет каталог и купоны, если в хранилище их ещё нет"""
        missing = {}
        if self.backend.get(PRODUCTS) is None:
            missing[PRODUCTS] = products
        if self.backend.get(COUPONS) is None:
            missing[COUPONS] = coupons
        if missing:
            logger.info("Seeding store keys: %s", ", ".join(sorted(missing)))
            self.set_many(missing)
