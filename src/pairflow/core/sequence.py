"""Single-use lazy sequences.

``Seq`` is the plain-value exit of a pair pipeline: ``keys()``, ``values()``,
``map()`` and the ``flat_map_to_*`` family all return one. ``NumericSeq`` is
the numeric specialization behind ``map_to_double``/``map_to_int``/
``map_to_long``; it coerces every element to a numpy dtype and adds numeric
reductions.

Both follow the pipeline's consumption rule: a sequence may be used by one
operation. Intermediate operations hand the source over to a new sequence,
terminal operations drain it. Any further call raises
:class:`~pairflow.core.errors.PipelineConsumedError`.

Examples:
    >>> from pairflow.core.sequence import Seq, NumericSeq
    >>> Seq(range(10)).filter(lambda x: x % 2).map(str).to_list()
    ['1', '3', '5', '7', '9']
    >>> NumericSeq([1, 2, 3], dtype="float64").average()
    2.0
"""

import numbers
import typing as tp
from functools import cmp_to_key
from itertools import chain, islice

import numpy as np
from pydantic import BaseModel, Field, validate_call

from pairflow.collectors import Collector
from pairflow.core.errors import PipelineConsumedError
from pairflow.core.types import Comparator, NonNegativeInt, natural_order

__all__ = ["Seq", "NumericSeq", "SummaryStatistics"]

T = tp.TypeVar("T")

_MISSING = object()


def _deferred(
    source: tp.Iterable, transform: tp.Callable[[tp.Iterator], tp.Iterator]
) -> tp.Iterator:
    # Generator body runs only on first pull
    yield from transform(iter(source))


class Seq(tp.Generic[T]):
    """Lazy, single-use sequence of arbitrary values."""

    _kind = "Seq"

    def __init__(self, source: tp.Iterable[T]):
        self._source = source
        self._consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "open"
        return f"{self._kind}({state})"

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _claim(self, operation: str) -> tp.Iterable:
        if self._consumed:
            raise PipelineConsumedError(self._kind, operation)
        self._consumed = True
        return self._source

    def _take(self, operation: str) -> tp.Iterator[T]:
        return iter(self._claim(operation))

    def _spawn(self, source: tp.Iterable) -> "Seq":
        return type(self)(source)

    def _derive(
        self, operation: str, transform: tp.Callable[[tp.Iterator], tp.Iterator]
    ) -> "Seq":
        self._claim(operation)
        return self._spawn(_deferred(self._elements(), transform))

    def _elements(self) -> tp.Iterator[T]:
        # Already claimed by the caller; read the source lazily
        yield from self._source

    # --- Intermediate operations ---
    @validate_call
    def map(self, mapper: tp.Callable[[tp.Any], tp.Any]):
        self._claim("map")
        return Seq(_deferred(self._elements(), lambda it: map(mapper, it)))

    @validate_call
    def filter(self, predicate: tp.Callable[[tp.Any], tp.Any]):
        return self._derive("filter", lambda it: (x for x in it if predicate(x)))

    @validate_call
    def flat_map(self, mapper: tp.Callable[[tp.Any], tp.Iterable]):
        self._claim("flat_map")
        return Seq(
            _deferred(
                self._elements(),
                lambda it: chain.from_iterable(mapper(x) for x in it),
            )
        )

    @validate_call
    def peek(self, action: tp.Callable[[tp.Any], tp.Any]):
        def _peek(it):
            for x in it:
                action(x)
                yield x

        return self._derive("peek", _peek)

    @validate_call
    def skip(self, n: NonNegativeInt):
        return self._derive("skip", lambda it: islice(it, n, None))

    @validate_call
    def limit(self, n: NonNegativeInt):
        return self._derive("limit", lambda it: islice(it, n))

    def distinct(self) -> "Seq[T]":
        def _distinct(it):
            seen: set = set()
            seen_unhashable: list = []
            for x in it:
                try:
                    if x in seen:
                        continue
                    seen.add(x)
                except TypeError:
                    if x in seen_unhashable:
                        continue
                    seen_unhashable.append(x)
                yield x

        return self._derive("distinct", _distinct)

    @validate_call
    def sorted(self, comparator: Comparator = natural_order):
        return self._derive(
            "sorted", lambda it: iter(sorted(it, key=cmp_to_key(comparator)))
        )

    # --- Terminal operations ---
    def __iter__(self) -> tp.Iterator[T]:
        return self._take("__iter__")

    def to_list(self) -> list[T]:
        return list(self._take("to_list"))

    def count(self) -> int:
        return sum(1 for _ in self._take("count"))

    def first(self) -> T | None:
        """Return the first element, or ``None`` when the sequence is empty."""
        return next(self._take("first"), None)

    @validate_call
    def reduce(
        self,
        function: tp.Callable[[tp.Any, tp.Any], tp.Any],
        initial: tp.Any = _MISSING,
    ) -> tp.Any:
        """Fold elements left to right.

        Without ``initial`` an empty sequence reduces to ``None``.
        """
        it = self._take("reduce")
        if initial is _MISSING:
            initial = next(it, _MISSING)
            if initial is _MISSING:
                return None
        result = initial
        for x in it:
            result = function(result, x)
        return result

    @validate_call
    def any_match(self, predicate: tp.Callable[[tp.Any], tp.Any]) -> bool:
        return any(predicate(x) for x in self._take("any_match"))

    @validate_call
    def all_match(self, predicate: tp.Callable[[tp.Any], tp.Any]) -> bool:
        return all(predicate(x) for x in self._take("all_match"))

    @validate_call
    def none_match(self, predicate: tp.Callable[[tp.Any], tp.Any]) -> bool:
        return not any(predicate(x) for x in self._take("none_match"))

    @validate_call
    def for_each(self, action: tp.Callable[[tp.Any], tp.Any]) -> None:
        for x in self._take("for_each"):
            action(x)

    @validate_call
    def max(self, comparator: Comparator = natural_order) -> T | None:
        """Largest element under ``comparator``; the first one wins ties."""
        it = self._take("max")
        best = next(it, _MISSING)
        if best is _MISSING:
            return None
        for x in it:
            if comparator(x, best) > 0:
                best = x
        return best

    @validate_call
    def min(self, comparator: Comparator = natural_order) -> T | None:
        """Smallest element under ``comparator``; the first one wins ties."""
        it = self._take("min")
        best = next(it, _MISSING)
        if best is _MISSING:
            return None
        for x in it:
            if comparator(x, best) < 0:
                best = x
        return best

    @validate_call
    def collect(self, collector: Collector) -> tp.Any:
        """Reduce the elements with a :class:`~pairflow.collectors.Collector`."""
        return collector.evaluate(self._take("collect"))


class SummaryStatistics(BaseModel):
    """Aggregate statistics of a numeric sequence."""

    count: int = Field(..., ge=0, description="Number of elements.")
    sum: float = Field(..., description="Sum of all elements (0 when empty).")
    min: tp.Optional[float] = Field(None, description="Smallest element.")
    max: tp.Optional[float] = Field(None, description="Largest element.")
    average: tp.Optional[float] = Field(None, description="Arithmetic mean.")


class NumericSeq(Seq):
    """Lazy, single-use sequence of numbers of one numpy dtype.

    Each element is coerced with ``numpy.dtype(dtype).type`` as it is pulled,
    so ``int32``/``int64`` truncate floats toward zero, and an out-of-range
    integer raises ``OverflowError``. Only real numbers are accepted: strings,
    complex numbers and other objects raise ``TypeError`` instead of being
    parsed. Elements are yielded as Python scalars.

    Args:
        source: Iterable of numbers.
        dtype: Any value accepted by ``numpy.dtype``. Defaults to ``float64``.
    """

    _kind = "NumericSeq"

    def __init__(self, source: tp.Iterable, dtype: tp.Any = "float64"):
        super().__init__(source)
        self.dtype = np.dtype(dtype)
        if self.dtype.kind not in "iuf":
            raise ValueError(f"NumericSeq requires a numeric dtype, got '{dtype}'.")

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "open"
        return f"NumericSeq(dtype={self.dtype.name}, {state})"

    def _spawn(self, source: tp.Iterable) -> "NumericSeq":
        return NumericSeq(source, dtype=self.dtype)

    def _coerce(self, it: tp.Iterator) -> tp.Iterator:
        scalar = self.dtype.type
        for x in it:
            if not isinstance(x, numbers.Real):
                raise TypeError(
                    f"{self._kind} expects real numbers, got {type(x).__name__} "
                    f"{x!r}."
                )
            yield scalar(x).item()

    def _take(self, operation: str) -> tp.Iterator:
        return self._coerce(super()._take(operation))

    def _elements(self) -> tp.Iterator:
        return self._coerce(super()._elements())

    def map_to_obj(self, mapper: tp.Callable[[tp.Any], tp.Any]) -> Seq:
        """Leave the numeric specialization; same as ``Seq.map``."""
        return Seq.map(self, mapper)

    @validate_call
    def map(self, mapper: tp.Callable[[tp.Any], tp.Any]):
        return self._derive("map", lambda it: map(mapper, it))

    def to_numpy(self) -> np.ndarray:
        return np.fromiter(self._take("to_numpy"), dtype=self.dtype)

    def sum(self) -> int | float:
        values = np.fromiter(self._take("sum"), dtype=self.dtype)
        return values.sum().item()

    def average(self) -> float | None:
        """Arithmetic mean, or ``None`` when the sequence is empty."""
        values = np.fromiter(self._take("average"), dtype=self.dtype)
        if values.size == 0:
            return None
        return float(values.mean())

    def summary_statistics(self) -> SummaryStatistics:
        values = np.fromiter(self._take("summary_statistics"), dtype=self.dtype)
        if values.size == 0:
            return SummaryStatistics(count=0, sum=0.0)
        return SummaryStatistics(
            count=int(values.size),
            sum=float(values.sum()),
            min=float(values.min()),
            max=float(values.max()),
            average=float(values.mean()),
        )
