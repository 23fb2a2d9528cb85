from decimal import Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Iterable, Optional, Union

from .domain import Cart, CartLine, Coupon, DiscountTier, Product, Totals

BULK_PURCHASE_THRESHOLD = 10
BULK_PURCHASE_BONUS = Decimal("0.05")
MAX_DISCOUNT_RATE = Decimal("0.5")


# ============ Округление ============


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """float через str, чтобы 0.1 + 0.05 давало ровно 0.15"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Union[int, float, Decimal]) -> int:
    """
    Округление до целого, половина округляется от нуля (2.5 -> 3, -2.5 -> -3).
    Применяется один раз к итоговому произведению, не к цене за штуку.
    """
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ============ Ставки скидок ============


def quantity_discount_rate(tiers: Iterable[DiscountTier], quantity: int) -> float:
    """
    Максимальная ставка среди порогов, которые достигнуты (tier.quantity <= quantity).
    Порядок порогов не важен; ставки не суммируются.
    """
    return reduce(
        lambda best, t: t.rate if quantity >= t.quantity and t.rate > best else best,
        tiers,
        0,
    )


def has_bulk_purchase(cart: Cart) -> bool:
    """Хотя бы одна строка с количеством >= 10: условие на всю корзину"""
    return any(line.quantity >= BULK_PURCHASE_THRESHOLD for line in cart)


def _effective_rate(line: CartLine, cart: Cart) -> Decimal:
    base = to_decimal(quantity_discount_rate(line.product.discounts, line.quantity))
    bonus = BULK_PURCHASE_BONUS if has_bulk_purchase(cart) else Decimal(0)
    return min(base + bonus, MAX_DISCOUNT_RATE)


def effective_discount_rate(line: CartLine, cart: Cart) -> float:
    """
    Ставка по порогам товара + бонус 5% за крупную покупку.
    Потолок 0.5 абсолютный и применяется после сложения.
    """
    return float(_effective_rate(line, cart))


# ============ Суммы ============


def line_total(line: CartLine, cart: Cart) -> int:
    gross = line.product.price * line.quantity
    return round_half_up(gross * (1 - _effective_rate(line, cart)))


def total_before_discount(cart: Cart) -> int:
    return round_half_up(
        reduce(lambda acc, l: acc + l.product.price * l.quantity, cart, 0)
    )


def total_after_item_discount(cart: Cart) -> int:
    return reduce(lambda acc, l: acc + line_total(l, cart), cart, 0)


def apply_coupon_discount(total: int, coupon: Optional[Coupon]) -> int:
    """
    amount: вычитаем сумму, не ниже нуля.
    percentage: total * (1 - value/100), тоже не ниже нуля (value > 100 даёт 0).
    """
    if coupon is None:
        return total

    value = to_decimal(coupon.discount_value)
    if coupon.discount_type == "amount":
        return round_half_up(max(Decimal(0), total - value))

    return max(0, round_half_up(total * (1 - value / 100)))


def cart_totals(cart: Cart, coupon: Optional[Coupon] = None) -> Totals:
    before = total_before_discount(cart)
    after = round_half_up(apply_coupon_discount(total_after_item_discount(cart), coupon))
    return Totals(
        total_before_discount=before,
        total_after_discount=after,
        total_discount=before - after,
    )


# ============ Склад ============


def quantity_in_cart(product_id: str, cart: Cart) -> int:
    line = next((l for l in cart if l.product.id == product_id), None)
    return line.quantity if line else 0


def remaining_stock(product: Product, cart: Cart) -> int:
    """
    Остаток = склад - количество в корзине.
    Отрицательное значение возможно только до отклонения мутации, на него нельзя опираться.
    """
    return product.stock - quantity_in_cart(product.id, cart)


def total_item_count(cart: Cart) -> int:
    return reduce(lambda acc, l: acc + l.quantity, cart, 0)
