"""Processors for trace data transformation and analysis."""

from .file_processor import TraceFileProcessor
from .trace_normalizer import TraceNormalizer, to_profile, validate_trace_format
from .stack_builder import CallStackAggregator
from .hot_path_ranker import HotPathRanker, merge_small_stacks

__all__ = [
    "TraceFileProcessor",
    "TraceNormalizer",
    "CallStackAggregator",
    "HotPathRanker",
    "merge_small_stacks",
    "to_profile",
    "validate_trace_format",
]
