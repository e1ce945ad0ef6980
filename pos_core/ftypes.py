# pos_core/ftypes.py
# Maybe and Either used by the cart, catalog and checkout code.
# Rejections travel as Either.left({"error": ...}) instead of exceptions.

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Необязательное значение: Maybe.some(x) или Maybe.nothing().
    Используется для поиска товара по id/SKU и последней транзакции.
    """

    value: Optional[T]

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[None]":
        return Maybe(None)

    @staticmethod
    def first(items: Iterable[T], predicate: Callable[[T], bool]) -> "Maybe[T]":
        """Первый элемент, удовлетворяющий предикату"""
        return Maybe(next((item for item in items if predicate(item)), None))

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        return Maybe.some(fn(self.value)) if self.is_some() else Maybe.nothing()

    def bind(self, fn: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        return fn(self.value) if self.is_some() else Maybe.nothing()

    def to_either(self, error: L) -> "Either[L, T]":
        return Either.right(self.value) if self.is_some() else Either.left(error)

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default

    def __repr__(self) -> str:
        return f"Some({self.value})" if self.is_some() else "Nothing"


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """
    Left: отказ (обычно dict с ключом "error"), Right: результат.
    """

    is_left: bool
    value: Union[L, R]

    @staticmethod
    def left(value: L) -> "Either[L, R]":
        return Either(True, value)

    @staticmethod
    def right(value: R) -> "Either[L, R]":
        return Either(False, value)

    @staticmethod
    def fail(message: str, **extra) -> "Either[dict, R]":
        """Left({"error": message, ...})"""
        return Either(True, {"error": message, **extra})

    @property
    def is_right(self) -> bool:
        return not self.is_left

    @property
    def error(self) -> Optional[str]:
        """Текст ошибки для Left-словаря, иначе None"""
        if self.is_left and isinstance(self.value, dict):
            return self.value.get("error")
        return None

    def map(self, fn: Callable[[R], U]) -> "Either[L, U]":
        return Either.right(fn(self.value)) if self.is_right else self  # type: ignore[return-value]

    def bind(self, fn: Callable[[R], "Either[L, U]"]) -> "Either[L, U]":
        return fn(self.value) if self.is_right else self  # type: ignore[return-value]

    def fold(self, on_left: Callable[[L], U], on_right: Callable[[R], U]) -> U:
        return on_left(self.value) if self.is_left else on_right(self.value)  # type: ignore[arg-type]

    def get_or_else(self, default: U) -> R | U:
        return self.value if self.is_right else default  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Left({self.value})" if self.is_left else f"Right({self.value})"
