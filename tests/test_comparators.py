import pytest
from pydantic import ValidationError

from pairflow.comparators import (
    comparing,
    natural_order,
    reverse_order,
    reversed_comparator,
)


def test_natural_and_reverse_order():
    assert natural_order(1, 2) < 0
    assert natural_order(2, 1) > 0
    assert natural_order("a", "a") == 0
    assert reverse_order(1, 2) > 0


def test_comparing_uses_key_function():
    by_len = comparing(len)
    assert by_len("aa", "b") > 0
    assert by_len("a", "b") == 0
    assert comparing(len, reverse_order)("aa", "b") < 0


def test_reversed_comparator():
    assert reversed_comparator(natural_order)(1, 2) > 0


def test_comparing_requires_callable():
    with pytest.raises(ValidationError):
        comparing(None)


def test_natural_order_is_shared_with_sequences():
    from pairflow.core import sequence, types

    assert natural_order is types.natural_order
    assert sequence.natural_order is natural_order
