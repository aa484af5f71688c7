"""
Type definitions for trace profiling.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import MAX_STEP_DEPTH
from .errors import InvalidFormat
from ..extractors.hostio_extractor import HostIoStats


def _unsigned(data: Dict[str, Any], key: str) -> int:
    """Read an optional non-negative integer field, defaulting to 0."""
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidFormat(f"Field '{key}' must be a non-negative integer, got {value!r}")
    return value


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidFormat(f"Field '{key}' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class ExecutionStep:
    """A single instruction-level record from the tracer."""
    pc: int = 0
    gas: int = 0
    gas_cost: int = 0
    op: Optional[str] = None
    depth: int = 0
    function: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'ExecutionStep':
        """
        Build a step from a raw step object.

        Every field is optional. The gas cost is read from 'gas_cost' or,
        failing that, from 'gasCost'.

        Args:
            data: Raw step value from the trace

        Returns:
            ExecutionStep

        Raises:
            InvalidFormat: If the value is not an object, a field has the wrong
                           type, or the depth exceeds MAX_STEP_DEPTH
        """
        if not isinstance(data, dict):
            raise InvalidFormat(f"Step must be a JSON object, got {type(data).__name__}")

        cost_key = 'gas_cost' if data.get('gas_cost') is not None else 'gasCost'

        depth = _unsigned(data, 'depth')
        if depth > MAX_STEP_DEPTH:
            raise InvalidFormat(f"Field 'depth' exceeds the maximum call depth {MAX_STEP_DEPTH}, got {depth}")

        return cls(
            pc=_unsigned(data, 'pc'),
            gas=_unsigned(data, 'gas'),
            gas_cost=_unsigned(data, cost_key),
            op=_optional_str(data, 'op'),
            depth=depth,
            function=_optional_str(data, 'function'),
        )


@dataclass
class ParsedTrace:
    """
    Normalized trace ready for aggregation.

    execution_steps is kept in execution order; stack reconstruction
    depends on it.
    """
    transaction_hash: str
    total_gas_used: int
    execution_steps: List[ExecutionStep]
    hostio_stats: HostIoStats
    dropped_steps: int = 0

    def step_gas_total(self) -> int:
        """Sum of all positive step gas costs."""
        return sum(step.gas_cost for step in self.execution_steps if step.gas_cost > 0)


@dataclass
class CollapsedStack:
    """A semicolon-joined call path and the gas accumulated on it."""
    stack: str
    weight: int

    def to_line(self) -> str:
        """Format as a collapsed stack line, e.g. "main;execute;storage_read 1000"."""
        return f"{self.stack} {self.weight}"


@dataclass
class HotPath:
    """A top-ranked stack with its share of total gas."""
    stack: str
    gas: int
    percentage: float
    source_hint: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'stack': self.stack,
            'gas': self.gas,
            'percentage': self.percentage,
        }
        if self.source_hint is not None:
            data['source_hint'] = self.source_hint
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HotPath':
        return cls(
            stack=data['stack'],
            gas=data['gas'],
            percentage=data['percentage'],
            source_hint=data.get('source_hint'),
        )


@dataclass
class HostIoSummary:
    """Serialized view of host-interaction statistics."""
    total_calls: int
    by_type: Dict[str, int]
    total_hostio_gas: int

    @classmethod
    def from_stats(cls, stats: HostIoStats) -> 'HostIoSummary':
        return cls(
            total_calls=stats.total_calls(),
            by_type=stats.to_map(),
            total_hostio_gas=stats.total_gas(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_calls': self.total_calls,
            'by_type': dict(self.by_type),
            'total_hostio_gas': self.total_hostio_gas,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HostIoSummary':
        return cls(
            total_calls=data['total_calls'],
            by_type=dict(data['by_type']),
            total_hostio_gas=data['total_hostio_gas'],
        )


@dataclass(frozen=True)
class Profile:
    """The persisted profile document."""
    version: str
    transaction_hash: str
    total_gas: int
    hostio_summary: HostIoSummary
    hot_paths: List[HotPath]
    generated_at: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'version': self.version,
            'transaction_hash': self.transaction_hash,
            'total_gas': self.total_gas,
            'hostio_summary': self.hostio_summary.to_dict(),
            'hot_paths': [hot_path.to_dict() for hot_path in self.hot_paths],
            'generated_at': self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Profile':
        """Create Profile from dictionary. Unknown keys are ignored."""
        return cls(
            version=data['version'],
            transaction_hash=data['transaction_hash'],
            total_gas=data['total_gas'],
            hostio_summary=HostIoSummary.from_dict(data['hostio_summary']),
            hot_paths=[HotPath.from_dict(item) for item in data['hot_paths']],
            generated_at=data['generated_at'],
        )


@dataclass
class ProfileResult:
    """Everything produced by one profiling run."""
    parsed_trace: ParsedTrace
    stacks: List[CollapsedStack]
    hot_paths: List[HotPath]
    profile: Profile
    total_gas_backfilled: bool = False
