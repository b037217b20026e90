"""Core building blocks: the pair type, pipeline steps and lazy sequences."""

from pairflow.core.errors import PipelineConsumedError
from pairflow.core.sequence import NumericSeq, Seq, SummaryStatistics
from pairflow.core.types import Pair

__all__ = [
    "Pair",
    "PipelineConsumedError",
    "Seq",
    "NumericSeq",
    "SummaryStatistics",
]
