"""
Stylus Trace Studio - gas profiling for Arbitrum Stylus transactions
"""

__version__ = "0.1.0"

from .core.profiler import TraceProfiler
from .core.config import ProfileConfig, SCHEMA_VERSION
from .core.types import CollapsedStack, HotPath, ParsedTrace, Profile

__all__ = ["TraceProfiler", "ProfileConfig", "SCHEMA_VERSION", "CollapsedStack", "HotPath", "ParsedTrace", "Profile"]
