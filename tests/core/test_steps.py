import pytest
from pydantic import ValidationError

from pairflow.core import steps
from pairflow.core.types import Pair


@pytest.fixture
def sample_pairs():
    return [Pair(1, "a"), Pair(2, "b"), Pair(1, "a"), Pair(3, "c")]


def test_steps_reject_missing_callables():
    with pytest.raises(ValidationError):
        steps.FilterKey(predicate=None)
    with pytest.raises(ValidationError):
        steps.MapValue(mapper=None)
    with pytest.raises(ValidationError):
        steps.SortedByKey(comparator=None)


def test_window_steps_reject_negative_counts():
    with pytest.raises(ValidationError):
        steps.Skip(n=-1)
    with pytest.raises(ValidationError):
        steps.Limit(n=-5)


def test_steps_are_frozen():
    step = steps.Limit(n=2)
    with pytest.raises(ValidationError):
        step.n = 3


def test_step_name_is_variant_name():
    assert steps.Distinct().name == "Distinct"
    assert steps.Peek(action=print).name == "Peek"


def test_apply_is_lazy():
    calls = []
    step = steps.MapKey(mapper=lambda k: calls.append(k) or k)
    result = step.apply(iter([Pair(1, "a")]))
    assert calls == []
    assert list(result) == [Pair(1, "a")]
    assert calls == [1]


def test_sorted_step_defers_materialization():
    pulled = []

    def source():
        for pair in [Pair(2, "b"), Pair(1, "a")]:
            pulled.append(pair)
            yield pair

    step = steps.SortedByKey(comparator=lambda a, b: (a > b) - (a < b))
    result = step.apply(source())
    assert pulled == []
    assert list(result) == [Pair(1, "a"), Pair(2, "b")]


def test_distinct_handles_unhashable_values():
    pairs = [Pair(1, [1]), Pair(1, [1]), Pair(2, [2])]
    assert list(steps.Distinct().apply(iter(pairs))) == [Pair(1, [1]), Pair(2, [2])]


def test_filter_variants(sample_pairs):
    assert list(steps.FilterKey(predicate=lambda k: k > 1).apply(iter(sample_pairs))) == [
        Pair(2, "b"),
        Pair(3, "c"),
    ]
    assert list(
        steps.FilterValue(predicate=lambda v: v == "a").apply(iter(sample_pairs))
    ) == [Pair(1, "a"), Pair(1, "a")]
    assert list(
        steps.Filter(predicate=lambda k, v: k == 2 or v == "c").apply(iter(sample_pairs))
    ) == [Pair(2, "b"), Pair(3, "c")]


def test_flat_map_accepts_plain_tuples():
    step = steps.FlatMap(mapper=lambda k, v: [(k, v), (k + 1, v)])
    assert list(step.apply(iter([Pair(1, "a")]))) == [Pair(1, "a"), Pair(2, "a")]
