"""Construction adapters for :class:`~pairflow.pipeline.PairPipeline`.

Each source shape has its own constructor; none of them iterates the source
or calls an extractor. Reading starts when a terminal operation pulls from
the pipeline.

Adapters:
    - ``from_mapping``: one pair per mapping entry
    - ``from_multi_mapping``: one pair per (key, value) occurrence of a
      mapping from keys to collections of values
    - ``from_pairs``: any iterable of 2-tuples
    - ``from_extractors``: source elements plus key/value extractor functions
    - ``from_keys``: source elements as keys plus a value function
    - ``of_pairs``: up to three literal key/value pairs
    - ``from_series``: a pandas Series, index label to cell value

Examples:
    >>> from pairflow.adapters import from_multi_mapping, of_pairs
    >>> from_multi_mapping({"a": [1, 1], "b": [2]}).to_list()
    [Pair(key='a', value=1), Pair(key='a', value=1), Pair(key='b', value=2)]
    >>> of_pairs(1, "x", 2, "y").count()
    2
"""

import typing as tp
from collections.abc import Iterable, Mapping

import pandas as pd
from pydantic import validate_call

from pairflow.core.types import Pair
from pairflow.pipeline import PairPipeline

__all__ = [
    "from_mapping",
    "from_multi_mapping",
    "from_pairs",
    "from_extractors",
    "from_keys",
    "of_pairs",
    "from_series",
]

_MAX_LITERAL_PAIRS = 3


def _identity(x: tp.Any) -> tp.Any:
    return x


def _require(source: tp.Any, kind: type, adapter: str) -> None:
    if not isinstance(source, kind):
        raise TypeError(
            f"{adapter}() expects a {kind.__name__}, got {type(source).__name__}."
        )


def _mapping_entries(mapping: Mapping) -> tp.Iterator[Pair]:
    for key, value in mapping.items():
        yield Pair(key, value)


def _multi_mapping_entries(multi_mapping: Mapping) -> tp.Iterator[Pair]:
    for key, values in multi_mapping.items():
        for value in values:
            yield Pair(key, value)


def _extract(
    source: Iterable,
    key_fn: tp.Callable[[tp.Any], tp.Any],
    value_fn: tp.Callable[[tp.Any], tp.Any],
) -> tp.Iterator[Pair]:
    for element in source:
        yield Pair(key_fn(element), value_fn(element))


def from_mapping(mapping: Mapping) -> PairPipeline:
    """Pipeline with one pair per entry of ``mapping``, in its iteration order."""
    _require(mapping, Mapping, "from_mapping")
    return PairPipeline(_mapping_entries(mapping))


def from_multi_mapping(multi_mapping: Mapping) -> PairPipeline:
    """Pipeline with one pair per (key, value) occurrence.

    Args:
        multi_mapping: Mapping from each key to an iterable of values, e.g. a
            ``defaultdict(list)``. Duplicate values are kept, in the order the
            collection stores them.

    Returns:
        A new pipeline.
    """
    _require(multi_mapping, Mapping, "from_multi_mapping")
    return PairPipeline(_multi_mapping_entries(multi_mapping))


def from_pairs(pairs: Iterable) -> PairPipeline:
    """Pipeline over an iterable of ``Pair`` objects or 2-tuples.

    Passing a ``Seq`` (for example ``other.pairs()``) hands its elements over
    without evaluating it.
    """
    _require(pairs, Iterable, "from_pairs")
    return PairPipeline(pairs)


@validate_call
def from_extractors(
    source: tp.Any,
    key_fn: tp.Callable[[tp.Any], tp.Any],
    value_fn: tp.Callable[[tp.Any], tp.Any] = _identity,
) -> PairPipeline:
    """Pipeline with one pair per source element.

    Args:
        source: Iterable of source elements.
        key_fn: Extracts the key of each element.
        value_fn: Extracts the value of each element. Defaults to the
            element itself.

    Returns:
        A new pipeline. Extractors run only when a terminal operation pulls.
    """
    _require(source, Iterable, "from_extractors")
    return PairPipeline(_extract(source, key_fn, value_fn))


@validate_call
def from_keys(
    source: tp.Any, value_fn: tp.Callable[[tp.Any], tp.Any]
) -> PairPipeline:
    """Pipeline keyed by the source elements, valued by ``value_fn(element)``."""
    _require(source, Iterable, "from_keys")
    return PairPipeline(_extract(source, _identity, value_fn))


def of_pairs(*keys_and_values: tp.Any) -> PairPipeline:
    """Pipeline of up to three literal pairs given as ``k1, v1, k2, v2, ...``.

    Raises:
        TypeError: If the arguments do not form whole pairs or name more than
            three pairs.
    """
    if len(keys_and_values) % 2:
        raise TypeError(
            f"of_pairs() takes keys and values in pairs, got {len(keys_and_values)} "
            "arguments."
        )
    if len(keys_and_values) > 2 * _MAX_LITERAL_PAIRS:
        raise TypeError(
            f"of_pairs() takes at most {_MAX_LITERAL_PAIRS} pairs; use from_pairs() "
            "for longer sequences."
        )
    it = iter(keys_and_values)
    return PairPipeline(tuple(Pair(key, value) for key, value in zip(it, it)))


def from_series(series: pd.Series) -> PairPipeline:
    """Pipeline over a pandas ``Series``: index label as key, cell as value."""
    _require(series, pd.Series, "from_series")
    return PairPipeline(_mapping_entries(series))
