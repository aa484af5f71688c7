"""Core components for trace profiling."""

from .profiler import TraceProfiler
from .config import ProfileConfig, SCHEMA_VERSION
from .types import CollapsedStack, ExecutionStep, HotPath, ParsedTrace, Profile, ProfileResult

__all__ = [
    "TraceProfiler",
    "ProfileConfig",
    "SCHEMA_VERSION",
    "CollapsedStack",
    "ExecutionStep",
    "HotPath",
    "ParsedTrace",
    "Profile",
    "ProfileResult",
]
