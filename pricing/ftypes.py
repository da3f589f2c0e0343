# pricing/ftypes.py
# Maybe и Either для вызывающего кода, которому удобнее значения, чем исключения.
# Само ядро бросает PricingError; Either.attempt превращает такой вызов в значение.

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Tuple, Type, TypeVar, Union

from .errors import PricingError

T = TypeVar("T")
U = TypeVar("U")
L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Необязательное значение.
    Maybe.some(value) / Maybe.nothing(); None внутри всегда означает Nothing.
    """

    value: Optional[T]

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[None]":
        return Maybe(None)

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        return Maybe.some(fn(self.value)) if self.is_some() else Maybe.nothing()

    def bind(self, fn: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        return fn(self.value) if self.is_some() else Maybe.nothing()

    def filter(self, predicate: Callable[[T], bool]) -> "Maybe[T]":
        return self if self.is_some() and predicate(self.value) else Maybe.nothing()

    def or_else(self, other: Callable[[], "Maybe[T]"]) -> "Maybe[T]":
        return self if self.is_some() else other()

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default

    def __repr__(self) -> str:
        return f"Some({self.value})" if self.is_some() else "Nothing"


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """
    Left — ошибка (обычно PricingError), Right — результат.
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
    def attempt(
        fn: Callable[..., R],
        *args,
        errors: Tuple[Type[Exception], ...] = (PricingError,),
        **kwargs,
    ) -> "Either[Exception, R]":
        """Вызывает fn; перечисленные исключения попадают в Left, остальные летят дальше"""
        try:
            return Either.right(fn(*args, **kwargs))
        except errors as exc:
            return Either.left(exc)

    @property
    def is_right(self) -> bool:
        return not self.is_left

    def map(self, fn: Callable[[R], U]) -> "Either[L, U]":
        return Either.right(fn(self.value)) if not self.is_left else self  # type: ignore[return-value]

    def bind(self, fn: Callable[[R], "Either[L, U]"]) -> "Either[L, U]":
        return fn(self.value) if not self.is_left else self  # type: ignore[return-value]

    def get_or_else(self, default: U) -> R | U:
        return self.value if not self.is_left else default  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Left({self.value})" if self.is_left else f"Right({self.value})"
