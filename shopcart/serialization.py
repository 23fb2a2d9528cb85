"""
Преобразование записей в простые словари и обратно.
Имена полей совпадают с документом хранилища: discountType, discountValue и т.д.
"""

from typing import Tuple

from .domain import Cart, CartLine, Coupon, DiscountTier, Product


def tier_to_dict(tier: DiscountTier) -> dict:
    return {"quantity": tier.quantity, "rate": tier.rate}


def tier_from_dict(d: dict) -> DiscountTier:
    return DiscountTier(quantity=int(d["quantity"]), rate=float(d["rate"]))


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
        "discounts": [tier_to_dict(t) for t in product.discounts],
    }


def product_from_dict(d: dict) -> Product:
    return Product(
        id=str(d["id"]),
        name=str(d["name"]),
        price=int(d["price"]),
        stock=int(d["stock"]),
        discounts=tuple(map(tier_from_dict, d.get("discounts", []))),
    )


def coupon_to_dict(coupon: Coupon) -> dict:
    return {
        "name": coupon.name,
        "code": coupon.code,
        "discountType": coupon.discount_type,
        "discountValue": coupon.discount_value,
    }


def coupon_from_dict(d: dict) -> Coupon:
    return Coupon(
        name=str(d["name"]),
        code=str(d["code"]),
        discount_type=str(d["discountType"]),
        discount_value=d["discountValue"],
    )


def cart_to_list(cart: Cart) -> list:
    return [
        {"product": product_to_dict(line.product), "quantity": line.quantity}
        for line in cart
    ]


def cart_from_list(items: list) -> Cart:
    return tuple(
        CartLine(product=product_from_dict(i["product"]), quantity=int(i["quantity"]))
        for i in items
    )


def products_to_list(products: Tuple[Product, ...]) -> list:
    return [product_to_dict(p) for p in products]


def products_from_list(items: list) -> Tuple[Product, ...]:
    return tuple(map(product_from_dict, items))


def coupons_to_list(coupons: Tuple[Coupon, ...]) -> list:
    return [coupon_to_dict(c) for c in coupons]


def coupons_from_list(items: list) -> Tuple[Coupon, ...]:
    return tuple(map(coupon_from_dict, items))
