# shopcart/ftypes.py
# Lookups return Maybe, validated mutations return Either[Failure, new state].

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Результат поиска в каталоге или реестре купонов.
    None внутри означает «не найдено».
    """

    value: Optional[T]

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[None]":
        return Maybe(None)

    @staticmethod
    def of(value: Optional[T]) -> "Maybe[T]":
        return Maybe(value)

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        """Поле найденного объекта, например found.map(lambda p: p.discounts)"""
        if self.is_none():
            return Maybe.nothing()
        return Maybe.some(fn(self.value))

    def get_or_else(self, default: U) -> T | U:
        return default if self.is_none() else self.value

    def __repr__(self) -> str:
        return "Nothing" if self.is_none() else f"Some({self.value})"


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """
    Результат изменяющей операции движка.

    Left: Failure (вид ошибки + текст для пользователя), состояние не меняется.
    Right: новое значение коллекции (каталог, реестр купонов, строки корзины).

    Цепочки проверок строятся через bind, построение результата через map,
    сервисы разбирают итог через fold.
    """

    is_left: bool
    value: Union[L, R]

    @staticmethod
    def left(value: L) -> "Either[L, R]":
        return Either(True, value)

    @staticmethod
    def right(value: R) -> "Either[L, R]":
        return Either(False, value)

    @property
    def is_right(self) -> bool:
        return not self.is_left

    @property
    def error(self) -> Optional[L]:
        """Failure из Left или None для Right"""
        return self.value if self.is_left else None  # type: ignore[return-value]

    def map(self, fn: Callable[[R], U]) -> "Either[L, U]":
        if self.is_left:
            return self  # type: ignore[return-value]
        return Either.right(fn(self.value))

    def bind(self, fn: Callable[[R], "Either[L, U]"]) -> "Either[L, U]":
        if self.is_left:
            return self  # type: ignore[return-value]
        return fn(self.value)

    def fold(self, on_left: Callable[[L], U], on_right: Callable[[R], U]) -> U:
        return on_left(self.value) if self.is_left else on_right(self.value)

    def get_or_else(self, default: U) -> R | U:
        return default if self.is_left else self.value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Left({self.value})" if self.is_left else f"Right({self.value})"
