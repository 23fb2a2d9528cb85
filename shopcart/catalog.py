import time
from dataclasses import replace
from typing import Callable, Iterable, Optional, Tuple

from .domain import DiscountTier, Product
from .errors import ErrorKind, Failure, fail
from .ftypes import Either, Maybe

UPDATABLE_FIELDS = ("name", "price", "stock", "discounts")

Products = Tuple[Product, ...]
Tiers = Tuple[DiscountTier, ...]


# ============ Поиск ============


def find_product(products: Products, product_id: str) -> Maybe[Product]:
    """Безопасный поиск товара по ID"""
    return Maybe.of(next((p for p in products if p.id == product_id), None))


def filter_products_by_search(products: Products, term: str) -> Products:
    """Поиск по названию без учёта регистра; пустой запрос возвращает всё"""
    if not term.strip():
        return products
    needle = term.lower()
    return tuple(filter(lambda p: needle in p.name.lower(), products))


# ============ Валидация ============


def _validate_fields(fields: dict) -> Optional[Either]:
    """Проверяет только переданные поля; None, если всё в порядке"""
    if "name" in fields and not str(fields["name"] or "").strip():
        return fail(ErrorKind.INVALID_NAME, "Введите название товара.")
    if "price" in fields and (fields["price"] is None or fields["price"] < 0):
        return fail(ErrorKind.INVALID_PRICE, "Цена должна быть не меньше 0.")
    if "stock" in fields and (fields["stock"] is None or fields["stock"] < 0):
        return fail(ErrorKind.INVALID_STOCK, "Остаток должен быть не меньше 0.")
    return None


def validate_discount_tier(tier: DiscountTier) -> Either[Failure, DiscountTier]:
    if tier.quantity <= 0:
        return fail(
            ErrorKind.INVALID_TIER_QUANTITY, "Порог скидки должен быть не меньше 1."
        )
    if tier.rate <= 0 or tier.rate > 1:
        return fail(ErrorKind.INVALID_TIER_RATE, "Ставка скидки должна быть в (0, 1].")
    return Either.right(tier)


def normalize_tiers(tiers: Iterable[DiscountTier]) -> Either[Failure, Tiers]:
    """
    Проверяет каждый порог, запрещает повтор количества,
    возвращает пороги по возрастанию количества.
    """
    tiers = tuple(tiers)
    seen = set()
    for tier in tiers:
        checked = validate_discount_tier(tier)
        if checked.is_left:
            return checked
        if tier.quantity in seen:
            return fail(
                ErrorKind.DUPLICATE_TIER_QUANTITY,
                f"Скидка для количества {tier.quantity} уже существует.",
            )
        seen.add(tier.quantity)
    return Either.right(tuple(sorted(tiers, key=lambda t: t.quantity)))


# ============ Идентификаторы ============


def new_product_id(products: Products, clock: Callable[[], float] = time.time) -> str:
    """p<epoch ms>, со сдвигом при совпадении с уже занятым ID"""
    taken = {p.id for p in products}
    stamp = int(clock() * 1000)
    while f"p{stamp}" in taken:
        stamp += 1
    return f"p{stamp}"


# ============ CRUD ============


def add_product(
    draft: dict,
    products: Products,
    id_factory: Callable[[Products], str] = new_product_id,
) -> Either[Failure, Products]:
    """
    draft: поля товара без id: name, price, stock, discounts (необязательно).
    ID назначается здесь, товар дописывается в конец каталога.
    """
    # отсутствующее поле проверяется как пустое
    fields = {k: draft.get(k) for k in ("name", "price", "stock")}
    error = _validate_fields(fields)
    if error is not None:
        return error

    return normalize_tiers(tuple(draft.get("discounts", ()))).map(
        lambda tiers: products
        + (Product(id=id_factory(products), discounts=tiers, **fields),)
    )


def update_product(
    product_id: str, updates: dict, products: Products
) -> Either[Failure, Products]:
    """Поверхностное слияние: меняются только переданные поля"""
    if find_product(products, product_id).is_none():
        return fail(ErrorKind.NOT_FOUND, "Такого товара не существует.")

    changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
    error = _validate_fields(changes)
    if error is not None:
        return error

    def merge(fields: dict) -> Products:
        return tuple(
            replace(p, **fields) if p.id == product_id else p for p in products
        )

    if "discounts" not in changes:
        return Either.right(merge(changes))

    return normalize_tiers(tuple(changes["discounts"])).map(
        lambda tiers: merge({**changes, "discounts": tiers})
    )


def remove_product(product_id: str, products: Products) -> Either[Failure, Products]:
    """Строки корзин хранят снимки и не затрагиваются"""
    if find_product(products, product_id).is_none():
        return fail(ErrorKind.NOT_FOUND, "Такого товара не существует.")
    return Either.right(tuple(filter(lambda p: p.id != product_id, products)))


def update_stock(
    product_id: str, new_stock: int, products: Products
) -> Either[Failure, Products]:
    if new_stock < 0:
        return fail(ErrorKind.INVALID_STOCK, "Остаток должен быть не меньше 0.")
    return update_product(product_id, {"stock": new_stock}, products)


# ============ Пороги скидок ============


def add_discount_tier(
    product_id: str, tier: DiscountTier, products: Products
) -> Either[Failure, Products]:
    """
    Добавляет порог и сортирует пороги по возрастанию количества.
    Сортировка только для отображения: выбор ставки от порядка не зависит.
    """
    found = find_product(products, product_id)
    if found.is_none():
        return fail(ErrorKind.NOT_FOUND, "Такого товара не существует.")

    current = found.map(lambda p: p.discounts).get_or_else(())
    return (
        validate_discount_tier(tier)
        .bind(lambda t: normalize_tiers(current + (t,)))
        .bind(lambda tiers: update_product(product_id, {"discounts": tiers}, products))
    )


def remove_discount_tier(
    product_id: str, index: int, products: Products
) -> Either[Failure, Products]:
    found = find_product(products, product_id)
    if found.is_none():
        return fail(ErrorKind.NOT_FOUND, "Такого товара не существует.")

    tiers = found.map(lambda p: p.discounts).get_or_else(())
    if index < 0 or index >= len(tiers):
        return fail(ErrorKind.INDEX_OUT_OF_RANGE, "Такого правила скидки не существует.")

    remaining = tuple(t for i, t in enumerate(tiers) if i != index)
    return update_product(product_id, {"discounts": remaining}, products)
