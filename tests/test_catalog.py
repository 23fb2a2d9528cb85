import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from shopcart.catalog import (
    add_discount_tier,
    add_product,
    filter_products_by_search,
    find_product,
    new_product_id,
    remove_discount_tier,
    remove_product,
    update_product,
    update_stock,
)
from shopcart.domain import DiscountTier, Product
from shopcart.errors import ErrorKind


@pytest.fixture
def products():
    return (
        Product(id="p1", name="Phone", price=10000, stock=5, discounts=(DiscountTier(10, 0.1),)),
        Product(id="p2", name="Laptop", price=50000, stock=2),
    )


def fixed_id(_products):
    return "p-new"


# ============ Добавление ============


@pytest.mark.parametrize(
    "draft, kind",
    [
        ({"name": "   ", "price": 1, "stock": 1}, ErrorKind.INVALID_NAME),
        ({"name": "", "price": 1, "stock": 1}, ErrorKind.INVALID_NAME),
        ({"name": "X", "price": -1, "stock": 1}, ErrorKind.INVALID_PRICE),
        ({"name": "X", "price": 1, "stock": -1}, ErrorKind.INVALID_STOCK),
        ({"price": 1, "stock": 1}, ErrorKind.INVALID_NAME),
        ({"name": None, "price": 1, "stock": 1}, ErrorKind.INVALID_NAME),
        ({"name": "X", "stock": 1}, ErrorKind.INVALID_PRICE),
        ({"name": "X", "price": 1}, ErrorKind.INVALID_STOCK),
        (
            {"name": "X", "price": 1, "stock": 1, "discounts": [DiscountTier(0, 0.1)]},
            ErrorKind.INVALID_TIER_QUANTITY,
        ),
        (
            {"name": "X", "price": 1, "stock": 1, "discounts": [DiscountTier(2, 7.0)]},
            ErrorKind.INVALID_TIER_RATE,
        ),
        (
            {
                "name": "X",
                "price": 1,
                "stock": 1,
                "discounts": [DiscountTier(2, 0.1), DiscountTier(2, 0.2)],
            },
            ErrorKind.DUPLICATE_TIER_QUANTITY,
        ),
    ],
)
def test_add_product_validation(products, draft, kind):
    result = add_product(draft, products, fixed_id)
    assert result.error.kind == kind


def test_add_product_appends_with_fresh_id(products):
    draft = {"name": "Tablet", "price": 0, "stock": 0, "discounts": [DiscountTier(3, 0.05)]}
    result = add_product(draft, products, fixed_id)
    added = result.value[-1]
    assert result.value[:2] == products
    assert added == Product(
        id="p-new", name="Tablet", price=0, stock=0, discounts=(DiscountTier(3, 0.05),)
    )


def test_add_product_sorts_discount_tiers(products):
    draft = {
        "name": "Tablet",
        "price": 100,
        "stock": 1,
        "discounts": [DiscountTier(10, 0.2), DiscountTier(3, 0.05)],
    }
    added = add_product(draft, products, fixed_id).value[-1]
    assert added.discounts == (DiscountTier(3, 0.05), DiscountTier(10, 0.2))


def test_add_then_remove_restores_catalog(products):
    with_new = add_product({"name": "Tablet", "price": 100, "stock": 1}, products).value
    new_id = with_new[-1].id
    assert new_id not in {p.id for p in products}
    assert remove_product(new_id, with_new).value == products


def test_new_product_id_skips_taken_ids():
    clock = lambda: 1.0
    assert new_product_id((), clock) == "p1000"
    taken = (Product(id="p1000", name="A", price=1, stock=1),)
    assert new_product_id(taken, clock) == "p1001"


# ============ Изменение ============


def test_update_product_merges_present_fields(products):
    result = update_product("p2", {"price": 45000, "id": "hacked"}, products)
    updated = find_product(result.value, "p2").get_or_else(None)
    assert updated.price == 45000
    assert updated.name == "Laptop"
    assert updated.stock == 2
    assert result.value[0] == products[0]


def test_update_product_failures(products):
    assert update_product("nope", {"price": 1}, products).error.kind == ErrorKind.NOT_FOUND
    assert update_product("p1", {"name": " "}, products).error.kind == ErrorKind.INVALID_NAME
    assert update_product("p1", {"price": -5}, products).error.kind == ErrorKind.INVALID_PRICE


@pytest.mark.parametrize(
    "discounts, kind",
    [
        ([DiscountTier(5, 0.1), DiscountTier(5, 0.3)], ErrorKind.DUPLICATE_TIER_QUANTITY),
        ([DiscountTier(0, 0.1)], ErrorKind.INVALID_TIER_QUANTITY),
        ([DiscountTier(5, 0.1), DiscountTier(8, 7.0)], ErrorKind.INVALID_TIER_RATE),
        ([DiscountTier(5, 0)], ErrorKind.INVALID_TIER_RATE),
    ],
)
def test_update_product_rejects_bad_discounts(products, discounts, kind):
    result = update_product("p1", {"discounts": discounts}, products)
    assert result.error.kind == kind


def test_update_product_sorts_discounts(products):
    result = update_product(
        "p2", {"discounts": [DiscountTier(20, 0.2), DiscountTier(5, 0.05)]}, products
    )
    updated = find_product(result.value, "p2").get_or_else(None)
    assert updated.discounts == (DiscountTier(5, 0.05), DiscountTier(20, 0.2))
    assert update_product("p1", {"discounts": []}, products).is_right


def test_remove_product_not_found(products):
    assert remove_product("nope", products).error.kind == ErrorKind.NOT_FOUND


def test_update_stock(products):
    assert update_stock("p1", -1, products).error.kind == ErrorKind.INVALID_STOCK
    assert update_stock("nope", 3, products).error.kind == ErrorKind.NOT_FOUND
    result = update_stock("p1", 0, products)
    assert find_product(result.value, "p1").get_or_else(None).stock == 0


# ============ Пороги скидок ============


def test_add_discount_tier_sorts_ascending(products):
    result = add_discount_tier("p1", DiscountTier(5, 0.05), products)
    tiers = find_product(result.value, "p1").get_or_else(None).discounts
    assert tiers == (DiscountTier(5, 0.05), DiscountTier(10, 0.1))


@pytest.mark.parametrize(
    "product_id, tier, kind",
    [
        ("nope", DiscountTier(5, 0.1), ErrorKind.NOT_FOUND),
        ("p1", DiscountTier(0, 0.1), ErrorKind.INVALID_TIER_QUANTITY),
        ("p1", DiscountTier(5, 0), ErrorKind.INVALID_TIER_RATE),
        ("p1", DiscountTier(5, 1.5), ErrorKind.INVALID_TIER_RATE),
        ("p1", DiscountTier(10, 0.3), ErrorKind.DUPLICATE_TIER_QUANTITY),
    ],
)
def test_add_discount_tier_failures(products, product_id, tier, kind):
    assert add_discount_tier(product_id, tier, products).error.kind == kind


def test_full_rate_tier_is_allowed(products):
    assert add_discount_tier("p2", DiscountTier(1, 1.0), products).is_right


def test_remove_discount_tier(products):
    assert remove_discount_tier("nope", 0, products).error.kind == ErrorKind.NOT_FOUND
    assert remove_discount_tier("p1", 1, products).error.kind == ErrorKind.INDEX_OUT_OF_RANGE
    assert remove_discount_tier("p1", -1, products).error.kind == ErrorKind.INDEX_OUT_OF_RANGE

    result = remove_discount_tier("p1", 0, products)
    assert find_product(result.value, "p1").get_or_else(None).discounts == ()


# ============ Поиск ============


def test_filter_products_by_search(products):
    assert filter_products_by_search(products, "  ") == products
    assert filter_products_by_search(products, "LAP") == (products[1],)
    assert filter_products_by_search(products, "tv") == ()
