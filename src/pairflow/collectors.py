"""Collectors: caller-defined reductions over pairs.

A :class:`Collector` describes a mutable reduction in three parts: a
``supplier`` creating an empty accumulator, an ``accumulator`` folding one
element into it, and a ``finisher`` turning the accumulator into the result.
``PairPipeline.collect`` drives it over :class:`~pairflow.core.types.Pair`
elements. Collectors work over any element type, so ``Seq.collect`` accepts
them too.

Built-in collectors:
    - ``to_list``: list of pairs
    - ``to_dict``: ``{key: value}``, duplicate keys rejected unless merged
    - ``to_multi_dict``: ``{key: [values...]}``
    - ``grouping_by_key``: ``{key: downstream result}``
    - ``counting``: number of elements
    - ``to_series`` / ``to_frame``: pandas objects

Examples:
    >>> from pairflow import of_pairs
    >>> from pairflow.collectors import to_dict
    >>> of_pairs(1, "x", 2, "y").map_value(str.upper).collect(to_dict())
    {1: 'X', 2: 'Y'}
"""

import typing as tp

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, validate_call

__all__ = [
    "Collector",
    "to_list",
    "to_dict",
    "to_multi_dict",
    "grouping_by_key",
    "counting",
    "to_series",
    "to_frame",
]


def _identity(x: tp.Any) -> tp.Any:
    return x


class Collector(BaseModel):
    """Mutable reduction over a sequence of elements.

    ``combiner`` merges two partial accumulators. Evaluation is sequential,
    so it is never called by pairflow itself; it is kept so collectors can be
    reused by callers that split work.
    """

    supplier: tp.Callable[[], tp.Any] = Field(
        ..., description="Creates a new, empty accumulator."
    )
    accumulator: tp.Callable[[tp.Any, tp.Any], tp.Any] = Field(
        ...,
        description=(
            "Folds one element into the accumulator. A non-None return value "
            "replaces the accumulator."
        ),
    )
    finisher: tp.Callable[[tp.Any], tp.Any] = Field(
        _identity, description="Turns the final accumulator into the result."
    )
    combiner: tp.Optional[tp.Callable[[tp.Any, tp.Any], tp.Any]] = Field(
        None, description="Merges two accumulators."
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def evaluate(self, elements: tp.Iterable) -> tp.Any:
        container = self.supplier()
        accumulate = self.accumulator
        for element in elements:
            replaced = accumulate(container, element)
            if replaced is not None:
                container = replaced
        return self.finisher(container)


def to_list() -> Collector:
    return Collector(supplier=list, accumulator=list.append)


@validate_call
def to_dict(
    merge: tp.Optional[tp.Callable[[tp.Any, tp.Any], tp.Any]] = None,
) -> Collector:
    """Collect pairs into a ``dict``.

    Args:
        merge: Resolves a duplicate key as ``merge(old_value, new_value)``.
            Without it a duplicate key raises ``ValueError``.

    Returns:
        Collector producing ``{key: value}`` in encounter order.
    """

    def accumulate(container: dict, pair) -> None:
        key, value = pair
        if key in container:
            if merge is None:
                raise ValueError(
                    f"Duplicate key {key!r} (attempted merging values "
                    f"{container[key]!r} and {value!r})."
                )
            value = merge(container[key], value)
        container[key] = value

    return Collector(supplier=dict, accumulator=accumulate)


def to_multi_dict() -> Collector:
    """Collect pairs into ``{key: [value, ...]}``, keeping every value."""

    def accumulate(container: dict, pair) -> None:
        key, value = pair
        container.setdefault(key, []).append(value)

    return Collector(supplier=dict, accumulator=accumulate)


@validate_call
def grouping_by_key(downstream: tp.Optional[Collector] = None) -> Collector:
    """Group pairs by key and reduce each group's pairs with ``downstream``.

    Args:
        downstream: Collector applied to the pairs of each key. Defaults to
            :func:`to_list`.

    Returns:
        Collector producing ``{key: downstream result}``.
    """
    downstream = downstream or to_list()

    def accumulate(container: dict, pair) -> None:
        container.setdefault(pair[0], []).append(pair)

    def finish(container: dict) -> dict:
        return {key: downstream.evaluate(group) for key, group in container.items()}

    return Collector(supplier=dict, accumulator=accumulate, finisher=finish)


def counting() -> Collector:
    def accumulate(total: int, _element) -> int:
        return total + 1

    return Collector(supplier=int, accumulator=accumulate)


def to_series(name: tp.Optional[str] = None) -> Collector:
    """Collect pairs into a ``pandas.Series`` indexed by key."""

    def finish(pairs: list) -> pd.Series:
        if not pairs:
            return pd.Series(dtype=object, name=name)
        keys, values = zip(*pairs)
        return pd.Series(list(values), index=list(keys), name=name)

    return Collector(supplier=list, accumulator=list.append, finisher=finish)


def to_frame(columns: tp.Tuple[str, str] = ("key", "value")) -> Collector:
    """Collect pairs into a two-column ``pandas.DataFrame``."""
    if len(columns) != 2:
        raise ValueError(f"to_frame() needs exactly two column names, got {columns}.")

    def finish(pairs: list) -> pd.DataFrame:
        return pd.DataFrame([tuple(pair) for pair in pairs], columns=list(columns))

    return Collector(supplier=list, accumulator=list.append, finisher=finish)
