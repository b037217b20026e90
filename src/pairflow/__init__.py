"""Lazy, composable pipelines over key/value pairs."""

from pairflow.adapters import (
    from_extractors,
    from_keys,
    from_mapping,
    from_multi_mapping,
    from_pairs,
    from_series,
    of_pairs,
)
from pairflow.core import NumericSeq, Pair, PipelineConsumedError, Seq
from pairflow.pipeline import PairPipeline

__all__ = [
    "PairPipeline",
    "Pair",
    "Seq",
    "NumericSeq",
    "PipelineConsumedError",
    "from_mapping",
    "from_multi_mapping",
    "from_pairs",
    "from_extractors",
    "from_keys",
    "of_pairs",
    "from_series",
]
