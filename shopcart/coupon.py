from typing import Optional, Tuple

from .discount import cart_totals
from .domain import Cart, CartSession, Coupon
from .errors import ErrorKind, Failure, fail
from .ftypes import Either, Maybe

COUPON_MINIMUM_TOTAL = 10000

DISCOUNT_TYPES = ("amount", "percentage")


# ============ Поиск ============


def find_coupon_by_code(code: str, coupons: Tuple[Coupon, ...]) -> Maybe[Coupon]:
    """Точное совпадение кода, с учётом регистра"""
    return Maybe.of(next((c for c in coupons if c.code == code), None))


def is_coupon_code_exists(code: str, coupons: Tuple[Coupon, ...]) -> bool:
    return any(c.code == code for c in coupons)


# ============ CRUD ============


def add_coupon(
    coupon: Coupon, coupons: Tuple[Coupon, ...]
) -> Either[Failure, Tuple[Coupon, ...]]:
    if is_coupon_code_exists(coupon.code, coupons):
        return fail(ErrorKind.DUPLICATE_CODE, "Купон с таким кодом уже существует.")
    return Either.right(coupons + (coupon,))


def remove_coupon(
    code: str, coupons: Tuple[Coupon, ...]
) -> Either[Failure, Tuple[Coupon, ...]]:
    """
    Удаляет купон из реестра.
    Сброс выбранного купона выполняет вызывающий код (см. release_selection).
    """
    if not is_coupon_code_exists(code, coupons):
        return fail(ErrorKind.NOT_FOUND, "Такого купона не существует.")
    return Either.right(tuple(filter(lambda c: c.code != code, coupons)))


# ============ Применимость ============


def validate_coupon_application(coupon: Coupon, cart: Cart) -> Either[Failure, bool]:
    """
    Процентный купон доступен только при сумме (после скидок по товарам, без купона)
    от 10 000. Для купона на сумму порога нет. Сам купон здесь не применяется.
    """
    item_total = cart_totals(cart, None).total_after_discount
    if item_total < COUPON_MINIMUM_TOTAL and coupon.discount_type == "percentage":
        return fail(
            ErrorKind.MINIMUM_NOT_MET,
            "Процентный купон действует при покупке от 10 000.",
        )
    return Either.right(True)


# ============ Слабая ссылка на выбранный купон ============


def resolve_selected_coupon(
    session: CartSession, coupons: Tuple[Coupon, ...]
) -> Maybe[Coupon]:
    """Выбранный купон, если его код ещё есть в реестре"""
    if session.selected_coupon_code is None:
        return Maybe.nothing()
    return find_coupon_by_code(session.selected_coupon_code, coupons)


def release_selection(session: CartSession, removed_code: str) -> CartSession:
    """Сбрасывает выбор, если он указывал на удалённый купон"""
    if session.selected_coupon_code != removed_code:
        return session
    return CartSession(lines=session.lines, selected_coupon_code=None)


def select_coupon(session: CartSession, code: Optional[str]) -> CartSession:
    return CartSession(lines=session.lines, selected_coupon_code=code)
