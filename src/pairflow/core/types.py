"""Reusable type definitions for pairflow.

This module provides the ``Pair`` value type and the callable aliases used
across the package for type safety and validation.

Type Aliases:
    KeyPredicate / ValuePredicate: Single-argument predicates over one slot.
    BiPredicate: Predicate over ``(key, value)``.
    BiFunction: Function over ``(key, value)`` returning anything.
    BiConsumer: Side-effecting callback over ``(key, value)``.
    Comparator: ``cmp(a, b)`` returning a negative, zero or positive int.
    NonNegativeInt: ``int`` constrained to ``>= 0`` for windowing counts.
"""

import typing as tp
from typing import Annotated, Callable, Generic, NamedTuple, TypeVar

import annotated_types as at

__all__ = [
    "Pair",
    "K",
    "V",
    "R",
    "KeyPredicate",
    "ValuePredicate",
    "BiPredicate",
    "BiFunction",
    "BiConsumer",
    "Comparator",
    "NonNegativeInt",
    "natural_order",
    "as_pairs",
]

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")


class Pair(NamedTuple, Generic[K, V]):
    """Immutable key/value association.

    Equality and hashing are structural over ``(key, value)``. Being a tuple,
    a pair unpacks directly: ``k, v = pair``.
    """

    key: K
    value: V

    def with_key(self, key: tp.Any) -> "Pair":
        """Return a new pair with ``key`` replaced."""
        return Pair(key, self.value)

    def with_value(self, value: tp.Any) -> "Pair":
        """Return a new pair with ``value`` replaced."""
        return Pair(self.key, value)


KeyPredicate = Callable[[tp.Any], tp.Any]
ValuePredicate = Callable[[tp.Any], tp.Any]
BiPredicate = Callable[[tp.Any, tp.Any], tp.Any]
BiFunction = Callable[[tp.Any, tp.Any], tp.Any]
BiConsumer = Callable[[tp.Any, tp.Any], tp.Any]
Comparator = Callable[[tp.Any, tp.Any], int]

# Windowing counts for skip/limit
NonNegativeInt = Annotated[int, at.Ge(0)]


def natural_order(a: tp.Any, b: tp.Any) -> int:
    """Compare two values with ``<`` in their natural order."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def as_pairs(items: tp.Iterable) -> tp.Iterator[Pair]:
    """Lazily turn an iterable of ``Pair`` objects or 2-tuples into pairs.

    Raises:
        TypeError: When an element does not unpack into exactly two items.
    """
    for item in items:
        yield item if isinstance(item, Pair) else Pair(*item)
