"""Tagged step variants that make up a pair pipeline.

A :class:`~pairflow.pipeline.PairPipeline` is a source plus an ordered tuple
of steps. Nothing here runs when a step is created: each step only records
the caller's callable (validated by Pydantic at construction time) and knows
how to wrap an upstream iterator of :class:`Pair` into a downstream one.
Terminal operations chain ``apply`` over all steps and pull from the result.

Step variants:
    - **Filter**: keep pairs whose key, value or both satisfy a predicate
    - **MapKey / MapValue**: rebuild pairs with one slot replaced
    - **FlatMap**: expand each pair into a nested pipeline and concatenate
    - **Sorted**: materialize upstream and sort by key or value
    - **Skip / Limit**: lazy windowing
    - **Distinct**: drop repeated pairs, keep first occurrences
    - **Peek**: call a side-effecting callback and pass pairs through
"""

import typing as tp
from functools import cmp_to_key
from itertools import chain, islice

from pydantic import BaseModel, ConfigDict, Field

from pairflow.core.types import (
    BiConsumer,
    BiFunction,
    BiPredicate,
    Comparator,
    KeyPredicate,
    NonNegativeInt,
    Pair,
    ValuePredicate,
)

__all__ = [
    "Step",
    "FilterKey",
    "FilterValue",
    "Filter",
    "MapKey",
    "MapValue",
    "FlatMap",
    "SortedByKey",
    "SortedByValue",
    "Skip",
    "Limit",
    "Distinct",
    "Peek",
]


class Step(BaseModel):
    """Base class for pipeline steps."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def name(self) -> str:
        return type(self).__name__

    def apply(self, pairs: tp.Iterator[Pair]) -> tp.Iterator[Pair]:
        raise NotImplementedError


class FilterKey(Step):
    predicate: KeyPredicate = Field(..., description="Predicate over the key.")

    def apply(self, pairs):
        predicate = self.predicate
        return (pair for pair in pairs if predicate(pair.key))


class FilterValue(Step):
    predicate: ValuePredicate = Field(..., description="Predicate over the value.")

    def apply(self, pairs):
        predicate = self.predicate
        return (pair for pair in pairs if predicate(pair.value))


class Filter(Step):
    predicate: BiPredicate = Field(..., description="Predicate over (key, value).")

    def apply(self, pairs):
        predicate = self.predicate
        return (pair for pair in pairs if predicate(pair.key, pair.value))


class MapKey(Step):
    mapper: tp.Callable[[tp.Any], tp.Any] = Field(
        ..., description="Function producing the new key from the old one."
    )

    def apply(self, pairs):
        mapper = self.mapper
        return (Pair(mapper(pair.key), pair.value) for pair in pairs)


class MapValue(Step):
    mapper: tp.Callable[[tp.Any], tp.Any] = Field(
        ..., description="Function producing the new value from the old one."
    )

    def apply(self, pairs):
        mapper = self.mapper
        return (Pair(pair.key, mapper(pair.value)) for pair in pairs)


class FlatMap(Step):
    """Expand every pair into a nested pipeline of pairs.

    ``mapper(key, value)`` must return something iterable over pairs, normally
    a ``PairPipeline``. Nested pipelines are drained in encounter order, and
    each one is consumed by the expansion.
    """

    mapper: BiFunction = Field(
        ..., description="Function returning the nested pipeline for (key, value)."
    )

    def apply(self, pairs):
        mapper = self.mapper
        nested = (mapper(pair.key, pair.value) for pair in pairs)
        return (Pair(*pair) for pair in chain.from_iterable(nested))


class SortedByKey(Step):
    """Sort pairs by key. Upstream must be finite.

    Python's sort is stable, so pairs comparing equal keep encounter order.
    """

    comparator: Comparator = Field(..., description="cmp(a, b) over keys.")

    def apply(self, pairs):
        comparator = self.comparator
        ordering = cmp_to_key(lambda a, b: comparator(a.key, b.key))
        # sorted() must only run once the terminal operation pulls
        yield from sorted(pairs, key=ordering)


class SortedByValue(Step):
    """Sort pairs by value. Upstream must be finite."""

    comparator: Comparator = Field(..., description="cmp(a, b) over values.")

    def apply(self, pairs):
        comparator = self.comparator
        ordering = cmp_to_key(lambda a, b: comparator(a.value, b.value))
        yield from sorted(pairs, key=ordering)


class Skip(Step):
    n: NonNegativeInt = Field(..., description="Number of leading pairs to drop.")

    def apply(self, pairs):
        return islice(pairs, self.n, None)


class Limit(Step):
    n: NonNegativeInt = Field(..., description="Maximum number of pairs to keep.")

    def apply(self, pairs):
        return islice(pairs, self.n)


class Distinct(Step):
    """Drop pairs equal to one already seen.

    Hashable pairs are tracked in a set. Pairs holding an unhashable key or
    value fall back to a linear equality scan.
    """

    def apply(self, pairs):
        seen: set = set()
        seen_unhashable: list = []
        for pair in pairs:
            try:
                if pair in seen:
                    continue
                seen.add(pair)
            except TypeError:
                if pair in seen_unhashable:
                    continue
                seen_unhashable.append(pair)
            yield pair


class Peek(Step):
    action: BiConsumer = Field(..., description="Callback invoked with (key, value).")

    def apply(self, pairs):
        action = self.action
        for pair in pairs:
            action(pair.key, pair.value)
            yield pair
