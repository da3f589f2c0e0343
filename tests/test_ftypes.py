import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from decimal import Decimal

from pricing.errors import NotFoundError, ValidationError
from pricing.ftypes import Either, Maybe
from pricing.money import to_money


# ТЕСТЫ Maybe
def test_maybe_some_and_none_behavior():
    just = Maybe.some(42)
    nothing = Maybe.nothing()

    assert not just.is_none()
    assert nothing.is_none()
    assert just.get_or_else(0) == 42
    assert nothing.get_or_else(0) == 0


def test_maybe_filter_and_or_else():
    discount = Maybe.some(Decimal("30"))

    assert discount.filter(lambda d: d > 0).get_or_else(None) == Decimal("30")
    assert discount.filter(lambda d: d > 50).is_none()
    assert Maybe.nothing().or_else(lambda: Maybe.some(15)).get_or_else(0) == 15
    assert discount.or_else(lambda: Maybe.some(15)).get_or_else(0) == Decimal("30")


def test_maybe_map_and_bind():
    maybe_val = Maybe.some(10)

    assert maybe_val.map(lambda x: x * 2).get_or_else(0) == 20
    assert maybe_val.bind(lambda x: Maybe.some(x + 5)).get_or_else(0) == 15
    assert Maybe.nothing().map(lambda x: x * 2).is_none()


# ТЕСТЫ Either
def test_either_left_and_right_behavior():
    right_val = Either.right(100)
    left_val = Either.left("error")

    assert right_val.is_right
    assert not left_val.is_right
    assert right_val.get_or_else(0) == 100
    assert left_val.get_or_else(0) == 0


def test_either_attempt_catches_pricing_errors():
    ok = Either.attempt(to_money, "12.50")
    failed = Either.attempt(to_money, "-1")

    assert ok.value == Decimal("12.50")
    assert failed.is_left
    assert isinstance(failed.value, ValidationError)
    assert failed.value.as_dict()["category"] == "VALIDATION"


def test_either_attempt_lets_other_errors_through():
    def boom():
        raise KeyError("not a pricing error")

    with pytest.raises(KeyError):
        Either.attempt(boom)


def test_either_map_and_bind():
    val = Either.right(5)

    assert val.map(lambda x: x * 2).get_or_else(0) == 10
    assert val.bind(lambda x: Either.right(x + 3)).get_or_else(0) == 8
    assert Either.left(NotFoundError("p1")).map(lambda x: x * 2).is_left
