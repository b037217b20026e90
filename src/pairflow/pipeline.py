"""Lazy, single-use pipelines over key/value pairs.

A :class:`PairPipeline` wraps one source iterable of pairs and an ordered
tuple of :mod:`~pairflow.core.steps`. Intermediate operations never touch the
source: they append a step, hand the source over to a new pipeline, and mark
the old handle as consumed. Terminal operations chain every step's generator
over the source, pull elements, and return a concrete result.

Operation families:
    - **Intermediate**: ``distinct``, ``peek``, ``skip``, ``limit``,
      ``filter_key``, ``filter_value``, ``filter``, ``map_key``,
      ``map_value``, ``flat_map``, ``sorted_by_key``, ``sorted_by_value``
    - **Pair-shape exits** (lazy, return a ``Seq``/``NumericSeq``): ``map``,
      ``map_to_double``, ``map_to_int``, ``map_to_long``,
      ``flat_map_to_obj``, ``flat_map_to_double``, ``flat_map_to_int``,
      ``flat_map_to_long``, ``keys``, ``values``, ``pairs``
    - **Terminal**: ``all_match``, ``any_match``, ``none_match``, ``count``,
      ``max_by_key``, ``max_by_value``, ``min_by_key``, ``min_by_value``,
      ``for_each``, ``for_each_ordered``, ``collect``, ``to_dict``,
      ``to_list``, iteration

Every operation, intermediate or terminal, may be invoked once per handle.
A second call raises :class:`~pairflow.core.errors.PipelineConsumedError`.
Missing callables or comparators and negative counts are rejected by Pydantic
when the operation is called, before anything is consumed. Errors raised by
the caller's own callables propagate unchanged from the terminal operation.

Examples:
    >>> from pairflow import from_pairs
    >>> p = from_pairs([(1, "a"), (2, "b"), (1, "a"), (3, "c")])
    >>> p.distinct().filter_key(lambda k: k > 1).keys().to_list()
    [2, 3]
"""

import logging
import typing as tp
from itertools import chain

from pydantic import validate_call

from pairflow.collectors import Collector, to_dict, to_list
from pairflow.comparators import natural_order
from pairflow.core import steps
from pairflow.core.config import settings
from pairflow.core.errors import PipelineConsumedError
from pairflow.core.sequence import NumericSeq, Seq
from pairflow.core.steps import Step
from pairflow.core.types import (
    BiConsumer,
    BiFunction,
    BiPredicate,
    Comparator,
    K,
    KeyPredicate,
    NonNegativeInt,
    Pair,
    V,
    ValuePredicate,
    as_pairs,
)
from pairflow.logger.logger import logger

__all__ = ["PairPipeline"]


class PairPipeline(tp.Generic[K, V]):
    """Lazy, single-use pipeline of :class:`Pair` elements.

    Pipelines are normally built with the adapters in :mod:`pairflow.adapters`
    (``from_mapping``, ``from_multi_mapping``, ``from_extractors``,
    ``of_pairs``, ...) rather than directly.

    Args:
        source: Iterable of ``Pair`` objects or 2-tuples. It is not iterated
            until a terminal operation runs; tuples become pairs as they are
            pulled.
        chain: Steps applied to the source, in order.
    """

    def __init__(
        self, source: tp.Iterable[Pair], chain: tp.Sequence[Step] = ()
    ):
        self._source = as_pairs(source)
        self._steps: tuple[Step, ...] = tuple(chain)
        self._consumed = False

    @classmethod
    def _handover(
        cls, source: tp.Iterable[Pair], chain: tuple[Step, ...]
    ) -> "PairPipeline":
        # Source is already normalized by the pipeline handing it over
        pipeline = cls.__new__(cls)
        pipeline._source = source
        pipeline._steps = chain
        pipeline._consumed = False
        return pipeline

    def __repr__(self) -> str:
        names = ", ".join(step.name for step in self._steps)
        state = "consumed" if self._consumed else "open"
        return f"PairPipeline(steps=[{names}], {state})"

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def consumed(self) -> bool:
        return self._consumed

    # --- Internals ---
    def _claim(self, operation: str) -> None:
        if self._consumed:
            raise PipelineConsumedError("PairPipeline", operation)
        self._consumed = True

    def _append(self, operation: str, step: Step) -> "PairPipeline":
        self._claim(operation)
        if settings.TRACE and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Appending step {step.name} ({len(self._steps) + 1} total)")
        return self._handover(self._source, self._steps + (step,))

    def _pull(self) -> tp.Iterator[Pair]:
        pairs = iter(self._source)
        for step in self._steps:
            pairs = step.apply(pairs)
        yield from pairs

    def _evaluate(self, operation: str) -> tp.Iterator[Pair]:
        """Claim the pipeline and return its lazy iterator of pairs."""
        self._claim(operation)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Evaluating pipeline for '{operation}' over "
                f"{len(self._steps)} step(s): {[step.name for step in self._steps]}"
            )
        return self._pull()

    # --- Intermediate operations ---
    def distinct(self) -> "PairPipeline[K, V]":
        """Drop pairs equal to an earlier pair, keeping first occurrences."""
        return self._append("distinct", steps.Distinct())

    def peek(self, action: BiConsumer) -> "PairPipeline[K, V]":
        """Call ``action(key, value)`` for each pair as it flows past."""
        return self._append("peek", steps.Peek(action=action))

    def skip(self, n: NonNegativeInt) -> "PairPipeline[K, V]":
        return self._append("skip", steps.Skip(n=n))

    def limit(self, n: NonNegativeInt) -> "PairPipeline[K, V]":
        return self._append("limit", steps.Limit(n=n))

    def filter_key(self, predicate: KeyPredicate) -> "PairPipeline[K, V]":
        return self._append("filter_key", steps.FilterKey(predicate=predicate))

    def filter_value(self, predicate: ValuePredicate) -> "PairPipeline[K, V]":
        return self._append("filter_value", steps.FilterValue(predicate=predicate))

    def filter(self, predicate: BiPredicate) -> "PairPipeline[K, V]":
        return self._append("filter", steps.Filter(predicate=predicate))

    def map_key(self, mapper: tp.Callable[[K], tp.Any]) -> "PairPipeline":
        """Replace each key with ``mapper(key)``; values are kept."""
        return self._append("map_key", steps.MapKey(mapper=mapper))

    def map_value(self, mapper: tp.Callable[[V], tp.Any]) -> "PairPipeline":
        """Replace each value with ``mapper(value)``; keys are kept."""
        return self._append("map_value", steps.MapValue(mapper=mapper))

    def flat_map(self, mapper: BiFunction) -> "PairPipeline":
        """Replace each pair with the pairs of ``mapper(key, value)``.

        ``mapper`` returns a nested ``PairPipeline`` (or any iterable of
        2-tuples). Nested results are concatenated in encounter order.
        """
        return self._append("flat_map", steps.FlatMap(mapper=mapper))

    def sorted_by_key(
        self, comparator: Comparator = natural_order
    ) -> "PairPipeline[K, V]":
        """Sort by key. Materializes the whole upstream when evaluated.

        The sort is stable: pairs whose keys compare equal keep their order.
        """
        return self._append(
            "sorted_by_key", steps.SortedByKey(comparator=comparator)
        )

    def sorted_by_value(
        self, comparator: Comparator = natural_order
    ) -> "PairPipeline[K, V]":
        """Sort by value. Materializes the whole upstream when evaluated."""
        return self._append(
            "sorted_by_value", steps.SortedByValue(comparator=comparator)
        )

    # --- Pair-shape exits ---
    def pairs(self) -> Seq:
        """Lazy ``Seq`` of the pairs themselves."""
        return Seq(self._evaluate("pairs"))

    def keys(self) -> Seq:
        return Seq(pair.key for pair in self._evaluate("keys"))

    def values(self) -> Seq:
        return Seq(pair.value for pair in self._evaluate("values"))

    @validate_call
    def map(self, mapper: BiFunction) -> Seq:
        """Lazy ``Seq`` of ``mapper(key, value)``; the pair shape is dropped."""
        return Seq(mapper(k, v) for k, v in self._evaluate("map"))

    @validate_call
    def map_to_double(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(
            (mapper(k, v) for k, v in self._evaluate("map_to_double")),
            dtype="float64",
        )

    @validate_call
    def map_to_int(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(
            (mapper(k, v) for k, v in self._evaluate("map_to_int")), dtype="int32"
        )

    @validate_call
    def map_to_long(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(
            (mapper(k, v) for k, v in self._evaluate("map_to_long")), dtype="int64"
        )

    def _flatten(self, operation: str, mapper: BiFunction) -> tp.Iterator:
        nested = (mapper(k, v) for k, v in self._evaluate(operation))
        return chain.from_iterable(nested)

    @validate_call
    def flat_map_to_obj(self, mapper: BiFunction) -> Seq:
        """Concatenate the iterables returned by ``mapper(key, value)``."""
        return Seq(self._flatten("flat_map_to_obj", mapper))

    @validate_call
    def flat_map_to_double(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(self._flatten("flat_map_to_double", mapper), dtype="float64")

    @validate_call
    def flat_map_to_int(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(self._flatten("flat_map_to_int", mapper), dtype="int32")

    @validate_call
    def flat_map_to_long(self, mapper: BiFunction) -> NumericSeq:
        return NumericSeq(self._flatten("flat_map_to_long", mapper), dtype="int64")

    # --- Terminal operations ---
    def __iter__(self) -> tp.Iterator[Pair]:
        return self._evaluate("__iter__")

    @validate_call
    def all_match(self, predicate: BiPredicate) -> bool:
        """True if every pair matches; stops at the first mismatch.

        An empty pipeline matches vacuously.
        """
        return all(predicate(k, v) for k, v in self._evaluate("all_match"))

    @validate_call
    def any_match(self, predicate: BiPredicate) -> bool:
        """True if some pair matches; stops at the first match."""
        return any(predicate(k, v) for k, v in self._evaluate("any_match"))

    @validate_call
    def none_match(self, predicate: BiPredicate) -> bool:
        """True if no pair matches; stops at the first match."""
        return not any(predicate(k, v) for k, v in self._evaluate("none_match"))

    def count(self) -> int:
        return sum(1 for _ in self._evaluate("count"))

    def _extreme(
        self, operation: str, comparator: Comparator, slot: int, sign: int
    ) -> tp.Optional[Pair]:
        # Strict comparison keeps the first extremal pair on ties
        pairs = self._evaluate(operation)
        best = next(pairs, None)
        if best is None:
            return None
        for pair in pairs:
            if sign * comparator(pair[slot], best[slot]) > 0:
                best = pair
        return best

    @validate_call
    def max_by_key(self, comparator: Comparator = natural_order) -> tp.Optional[Pair]:
        """Pair with the largest key, or ``None`` if empty. Ties keep the first."""
        return self._extreme("max_by_key", comparator, 0, 1)

    @validate_call
    def max_by_value(
        self, comparator: Comparator = natural_order
    ) -> tp.Optional[Pair]:
        """Pair with the largest value, or ``None`` if empty. Ties keep the first."""
        return self._extreme("max_by_value", comparator, 1, 1)

    @validate_call
    def min_by_key(self, comparator: Comparator = natural_order) -> tp.Optional[Pair]:
        """Pair with the smallest key, or ``None`` if empty. Ties keep the first."""
        return self._extreme("min_by_key", comparator, 0, -1)

    @validate_call
    def min_by_value(
        self, comparator: Comparator = natural_order
    ) -> tp.Optional[Pair]:
        """Pair with the smallest value, or ``None`` if empty. Ties keep the first."""
        return self._extreme("min_by_value", comparator, 1, -1)

    @validate_call
    def for_each(self, action: BiConsumer) -> None:
        """Call ``action(key, value)`` for every pair.

        Evaluation is sequential, so this already follows encounter order;
        use :meth:`for_each_ordered` when the order matters to the caller.
        """
        for k, v in self._evaluate("for_each"):
            action(k, v)

    @validate_call
    def for_each_ordered(self, action: BiConsumer) -> None:
        """Call ``action(key, value)`` for every pair, in encounter order."""
        for k, v in self._evaluate("for_each_ordered"):
            action(k, v)

    @validate_call
    def collect(self, collector: Collector) -> tp.Any:
        """Reduce the pairs with ``collector``.

        Args:
            collector: A :class:`~pairflow.collectors.Collector`, for example
                ``to_dict()`` or ``grouping_by_key(counting())``.

        Returns:
            Whatever the collector's finisher produces.
        """
        return collector.evaluate(self._evaluate("collect"))

    def to_dict(
        self, merge: tp.Optional[tp.Callable[[tp.Any, tp.Any], tp.Any]] = None
    ) -> dict:
        """Shortcut for ``collect(to_dict(merge))``."""
        return self.collect(to_dict(merge))

    def to_list(self) -> list[Pair]:
        """Shortcut for ``collect(to_list())``."""
        return self.collect(to_list())
