from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class DiscountTier:
    quantity: int  # порог: скидка действует при quantity >= порога
    rate: float  # доля, (0, 1]


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int
    stock: int
    discounts: Tuple[DiscountTier, ...] = ()


@dataclass(frozen=True)
class CartLine:
    product: Product  # снимок товара на момент добавления
    quantity: int


# Корзина: упорядоченный кортеж строк, уникальных по product.id
Cart = Tuple[CartLine, ...]


@dataclass(frozen=True)
class Coupon:
    name: str
    code: str
    discount_type: str  # "amount" | "percentage"
    discount_value: float


@dataclass(frozen=True)
class Totals:
    total_before_discount: int
    total_after_discount: int
    total_discount: int


@dataclass(frozen=True)
class CartSession:
    """
    Корзина + выбранный купон.
    Купон хранится только по коду (слабая ссылка), объект берётся из реестра купонов.
    """

    lines: Cart = ()
    selected_coupon_code: Optional[str] = None


@dataclass(frozen=True)
class Order:
    id: str
    lines: Cart
    coupon_code: Optional[str]
    totals: Totals
    ts: str


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    type: str  # "error" | "success" | "warning"
    created_at: float
