import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from shopcart.config import Config
from shopcart.errors import ErrorKind, Failure, fail
from shopcart.formatters import format_percentage, format_price
from shopcart.ftypes import Either, Maybe


# ТЕСТЫ Maybe
def test_maybe_of_and_get_or_else():
    assert Maybe.of(42).get_or_else(0) == 42
    assert Maybe.of(None).is_none()
    assert Maybe.nothing().get_or_else("x") == "x"
    assert Maybe.some(10).map(lambda x: x * 2).get_or_else(0) == 20
    assert Maybe.nothing().map(lambda x: x * 2).is_none()


# ТЕСТЫ Either
def test_either_failure_payload():
    result = fail(ErrorKind.NOT_FOUND, "нет")
    assert result.is_left
    assert result.error == Failure(ErrorKind.NOT_FOUND, "нет")
    assert str(result.error) == "нет"
    assert result.get_or_else("default") == "default"


def test_either_map_and_bind_skip_left():
    ok = Either.right(5)
    assert ok.map(lambda x: x * 2).value == 10
    assert ok.bind(lambda x: Either.right(x + 3)).value == 8
    assert ok.error is None

    bad = fail(ErrorKind.INVALID_PRICE, "цена")
    assert bad.map(lambda x: x * 2) is bad
    assert bad.bind(lambda x: Either.right(x)) is bad


# ТЕСТЫ форматирования
def test_format_price():
    assert format_price(10000) == f"{Config.CURRENCY_SYMBOL}10,000"
    assert format_price(1234567, "text") == f"1,234,567{Config.CURRENCY_SUFFIX}"


def test_format_percentage():
    assert format_percentage(0.1) == "10%"
    assert format_percentage(0.25) == "25%"


def test_either_fold_picks_branch():
    ok = Either.right(3)
    bad = fail(ErrorKind.NOT_FOUND, "нет")
    assert ok.fold(lambda e: "left", lambda v: v + 1) == 4
    assert bad.fold(lambda e: e.kind, lambda v: v) == ErrorKind.NOT_FOUND
