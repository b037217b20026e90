import numpy as np
import pytest
from pydantic import ValidationError

from pairflow.core.errors import PipelineConsumedError
from pairflow.core.sequence import NumericSeq, Seq, SummaryStatistics


def test_seq_chains_lazily():
    seen = []
    seq = Seq(range(10)).peek(seen.append).filter(lambda x: x % 2).map(str)
    assert seen == []
    assert seq.limit(2).to_list() == ["1", "3"]
    # limit stops pulling once satisfied
    assert seen == [0, 1, 2, 3]


def test_seq_is_single_use():
    seq = Seq([1, 2, 3])
    assert seq.count() == 3
    assert seq.consumed
    with pytest.raises(PipelineConsumedError):
        seq.to_list()


def test_intermediate_operation_consumes_seq():
    seq = Seq([1, 2, 3])
    seq.map(lambda x: x * 2)
    with pytest.raises(PipelineConsumedError):
        seq.map(lambda x: x * 2)


def test_seq_rejects_bad_arguments():
    with pytest.raises(ValidationError):
        Seq([1]).map(None)
    with pytest.raises(ValidationError):
        Seq([1]).skip(-1)


def test_seq_window_distinct_sorted():
    assert Seq([3, 1, 3, 2]).distinct().to_list() == [3, 1, 2]
    assert Seq([3, 1, 2]).sorted().to_list() == [1, 2, 3]
    assert Seq([3, 1, 2]).sorted(lambda a, b: b - a).to_list() == [3, 2, 1]
    assert Seq(range(5)).skip(3).to_list() == [3, 4]


def test_seq_terminal_reductions():
    assert Seq([1, 2, 3]).reduce(lambda a, b: a + b) == 6
    assert Seq([1, 2, 3]).reduce(lambda a, b: a + b, 10) == 16
    assert Seq([]).reduce(lambda a, b: a + b) is None
    assert Seq([]).first() is None
    assert Seq([4, 5]).first() == 4
    assert Seq([1, 2]).flat_map(lambda x: [x, x]).to_list() == [1, 1, 2, 2]


def test_seq_quantifiers_short_circuit():
    seen = []
    assert Seq([1, 2, 3]).peek(seen.append).any_match(lambda x: x == 2)
    assert seen == [1, 2]
    assert Seq([]).all_match(lambda x: False)
    assert Seq([1, 2]).none_match(lambda x: x > 5)


def test_seq_min_max_keep_first_on_ties():
    words = ["bb", "aa", "c"]
    by_len = lambda a, b: len(a) - len(b)
    assert Seq(words).max(by_len) == "bb"
    assert Seq(["c", "bb", "d"]).min(by_len) == "c"
    assert Seq([]).max() is None


def test_numeric_seq_coerces_to_dtype():
    assert NumericSeq([1.9, -1.9], dtype="int32").to_list() == [1, -1]
    assert NumericSeq([1, 2], dtype="float64").to_list() == [1.0, 2.0]


def test_numeric_seq_rejects_non_numeric_dtype():
    with pytest.raises(ValueError):
        NumericSeq([], dtype="object")


def test_numeric_seq_reductions():
    assert NumericSeq([1, 2, 3], dtype="int64").sum() == 6
    assert NumericSeq([1, 2, 3], dtype="float64").average() == 2.0
    assert NumericSeq([], dtype="float64").average() is None
    assert NumericSeq([], dtype="int64").sum() == 0

    array = NumericSeq([1, 2], dtype="int32").to_numpy()
    assert isinstance(array, np.ndarray)
    assert array.dtype == np.int32


def test_numeric_seq_derived_keeps_dtype():
    seq = NumericSeq([1, 2, 3, 4], dtype="int64").filter(lambda x: x > 1).map(lambda x: x * 1.5)
    assert isinstance(seq, NumericSeq)
    assert seq.dtype == np.int64
    assert seq.to_list() == [3, 4, 6]


def test_numeric_seq_map_to_obj_leaves_specialization():
    seq = NumericSeq([1, 2], dtype="int64").map_to_obj(lambda x: f"#{x}")
    assert type(seq) is Seq
    assert seq.to_list() == ["#1", "#2"]


def test_summary_statistics():
    stats = NumericSeq([2, 4, 6], dtype="int64").summary_statistics()
    assert stats == SummaryStatistics(count=3, sum=12.0, min=2.0, max=6.0, average=4.0)

    empty = NumericSeq([], dtype="int64").summary_statistics()
    assert empty.count == 0
    assert empty.min is None
    assert empty.average is None


@pytest.mark.parametrize("bad", ["1.5", b"7", 1 + 2j, None])
def test_numeric_seq_rejects_non_real_values(bad):
    with pytest.raises(TypeError, match="expects real numbers"):
        NumericSeq([1, bad], dtype="float64").to_list()


def test_numeric_seq_out_of_range_integer():
    with pytest.raises(OverflowError):
        NumericSeq([2**31], dtype="int32").to_list()


def test_reduce_and_collect_validate_arguments():
    with pytest.raises(ValidationError):
        Seq([1]).reduce(None)
    with pytest.raises(ValidationError):
        Seq([1]).collect(None)


def test_numpy_scalars_are_real_numbers():
    assert NumericSeq([np.int16(3), np.float32(0.5)], dtype="float64").to_list() == [
        3.0,
        0.5,
    ]
