import pytest
from pairflow.core.types import Pair


def test_pair_structural_equality():
    assert Pair(1, "a") == Pair(1, "a")
    assert Pair(1, "a") != Pair(1, "b")
    assert hash(Pair(1, "a")) == hash(Pair(1, "a"))


def test_pair_unpacks_and_names_slots():
    key, value = Pair("k", 42)
    assert key == "k"
    assert value == 42
    assert Pair("k", 42).key == "k"
    assert Pair("k", 42).value == 42


def test_pair_is_immutable():
    pair = Pair(1, "a")
    with pytest.raises(AttributeError):
        pair.key = 2


def test_with_key_and_with_value_build_new_pairs():
    pair = Pair(1, "a")
    assert pair.with_key(2) == Pair(2, "a")
    assert pair.with_value("b") == Pair(1, "b")
    assert pair == Pair(1, "a")
