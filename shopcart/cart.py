import time
from typing import Callable, Optional, Tuple

from .coupon import resolve_selected_coupon
from .discount import cart_totals, remaining_stock
from .domain import Cart, CartLine, CartSession, Coupon, Order, Product
from .errors import ErrorKind, Failure, fail
from .ftypes import Either


# ============ Операции с корзиной (чистые функции) ============


def find_line(product_id: str, cart: Cart) -> Optional[CartLine]:
    return next((line for line in cart if line.product.id == product_id), None)


def add_item(product: Product, cart: Cart) -> Either[Failure, Cart]:
    """
    Добавляет одну штуку товара.
    Новая строка дописывается в конец, существующая увеличивается ровно на 1.
    """
    if remaining_stock(product, cart) <= 0:
        return fail(ErrorKind.OUT_OF_STOCK, "Товара нет в наличии!")

    existing = find_line(product.id, cart)
    if existing is None:
        return Either.right(cart + (CartLine(product=product, quantity=1),))

    new_quantity = existing.quantity + 1
    if new_quantity > product.stock:
        return fail(
            ErrorKind.STOCK_EXCEEDED,
            f"На складе только {product.stock} шт.",
        )

    return Either.right(
        tuple(
            CartLine(product=line.product, quantity=new_quantity)
            if line.product.id == product.id
            else line
            for line in cart
        )
    )


def remove_item(product_id: str, cart: Cart) -> Cart:
    """Удаляет строку товара; отсутствие строки не ошибка"""
    return tuple(filter(lambda line: line.product.id != product_id, cart))


def update_quantity(
    product_id: str, new_quantity: int, cart: Cart
) -> Either[Failure, Cart]:
    """
    Устанавливает количество (абсолютно, не дельтой).
    new_quantity <= 0 означает удаление строки.
    Склад проверяется по снимку товара в строке.
    """
    if new_quantity <= 0:
        return Either.right(remove_item(product_id, cart))

    line = find_line(product_id, cart)
    if line is None:
        return fail(ErrorKind.LINE_NOT_FOUND, "Этого товара нет в корзине.")

    if new_quantity > line.product.stock:
        return fail(
            ErrorKind.STOCK_EXCEEDED,
            f"На складе только {line.product.stock} шт.",
        )

    return Either.right(
        tuple(
            CartLine(product=l.product, quantity=new_quantity)
            if l.product.id == product_id
            else l
            for l in cart
        )
    )


def clear(session: CartSession) -> CartSession:
    """Пустая корзина и сброс купона одним значением"""
    return CartSession()


# ============ Оформление заказа ============


class OrderNumberGenerator:
    """
    Номера заказов вида ORD-<epoch ms>.
    Если часы не сдвинулись с прошлого вызова, берём следующее значение,
    номера в пределах сессии не повторяются.
    """

    def __init__(self, clock: Callable[[], float] = time.time, prefix: str = "ORD"):
        self._clock = clock
        self._prefix = prefix
        self._last = 0

    def __call__(self) -> str:
        stamp = int(self._clock() * 1000)
        if stamp <= self._last:
            stamp = self._last + 1
        self._last = stamp
        return f"{self._prefix}-{stamp}"


def checkout(
    session: CartSession,
    coupons: Tuple[Coupon, ...],
    next_order_id: Callable[[], str],
    ts: str,
) -> Either[Failure, Tuple[Order, CartSession]]:
    """
    Оформляет корзину -> Right((Order, пустая сессия)).
    Заказ фиксирует строки, купон и итоги на момент оформления;
    корзина и купон сбрасываются вместе.
    """
    coupon = resolve_selected_coupon(session, coupons).get_or_else(None)
    order = Order(
        id=next_order_id(),
        lines=session.lines,
        coupon_code=coupon.code if coupon else None,
        totals=cart_totals(session.lines, coupon),
        ts=str(ts),
    )
    return Either.right((order, clear(session)))
