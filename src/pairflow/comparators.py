"""Comparator helpers.

A comparator is a two-argument callable ``cmp(a, b)`` returning a negative
int when ``a`` orders before ``b``, zero when they tie, and a positive int
otherwise. Pipelines turn them into sort keys with ``functools.cmp_to_key``.

Examples:
    >>> from pairflow import of_pairs
    >>> from pairflow.comparators import comparing, reverse_order
    >>> of_pairs("b", 2, "a", 1).sorted_by_key(reverse_order).keys().to_list()
    ['b', 'a']
    >>> of_pairs("bb", 1, "a", 2).sorted_by_key(comparing(len)).keys().to_list()
    ['a', 'bb']
"""

import typing as tp

from pydantic import validate_call

from pairflow.core.types import Comparator, natural_order

__all__ = ["natural_order", "reverse_order", "comparing", "reversed_comparator"]


def reverse_order(a: tp.Any, b: tp.Any) -> int:
    """Natural order, reversed."""
    return natural_order(b, a)


@validate_call
def comparing(
    key_fn: tp.Callable[[tp.Any], tp.Any], comparator: Comparator = natural_order
) -> Comparator:
    """Build a comparator that compares ``key_fn(a)`` with ``key_fn(b)``.

    Args:
        key_fn: Extracts the sort key from each value.
        comparator: Comparator applied to the extracted keys.

    Returns:
        A new comparator.
    """

    def compare(a: tp.Any, b: tp.Any) -> int:
        return comparator(key_fn(a), key_fn(b))

    return compare


@validate_call
def reversed_comparator(comparator: Comparator) -> Comparator:
    """Return ``comparator`` with its order flipped."""

    def compare(a: tp.Any, b: tp.Any) -> int:
        return comparator(b, a)

    return compare
