"""
Host-interaction (HostIO) extraction from raw Stylus/EVM traces.
"""

import logging
from collections import Counter
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..core.config import INK_PER_GAS

logger = logging.getLogger(__name__)

# Same aliases the trace normalizer accepts for the step list
STEP_FIELDS = ('structLogs', 'struct_logs', 'steps', 'trace')
HOSTIO_FIELDS = ('hostio', 'hostioEvents', 'hostio_events')


class HostIoType(Enum):
    """Closed set of host interaction kinds."""
    STORAGE_LOAD = 'storage_load'
    STORAGE_STORE = 'storage_store'
    CALL = 'call'
    STATIC_CALL = 'static_call'
    DELEGATE_CALL = 'delegate_call'
    CREATE = 'create'
    LOG = 'log'
    SELF_DESTRUCT = 'self_destruct'
    ACCOUNT_BALANCE = 'account_balance'
    BLOCK_HASH = 'block_hash'
    OTHER = 'other'

    @property
    def path_name(self) -> str:
        """Frame name used under the 'hostio' root, e.g. StorageLoad."""
        return ''.join(part.capitalize() for part in self.value.split('_'))


# EVM opcodes and Stylus hostio names, both matched lowercase
HOSTIO_NAMES: Dict[str, HostIoType] = {
    'sload': HostIoType.STORAGE_LOAD,
    'storage_load_bytes32': HostIoType.STORAGE_LOAD,
    'sstore': HostIoType.STORAGE_STORE,
    'storage_store_bytes32': HostIoType.STORAGE_STORE,
    'storage_cache_bytes32': HostIoType.STORAGE_STORE,
    'storage_flush_cache': HostIoType.STORAGE_STORE,
    'call': HostIoType.CALL,
    'callcode': HostIoType.CALL,
    'call_contract': HostIoType.CALL,
    'staticcall': HostIoType.STATIC_CALL,
    'static_call_contract': HostIoType.STATIC_CALL,
    'delegatecall': HostIoType.DELEGATE_CALL,
    'delegate_call_contract': HostIoType.DELEGATE_CALL,
    'create': HostIoType.CREATE,
    'create2': HostIoType.CREATE,
    'create1': HostIoType.CREATE,
    'emit_log': HostIoType.LOG,
    'selfdestruct': HostIoType.SELF_DESTRUCT,
    'balance': HostIoType.ACCOUNT_BALANCE,
    'selfbalance': HostIoType.ACCOUNT_BALANCE,
    'account_balance': HostIoType.ACCOUNT_BALANCE,
    'blockhash': HostIoType.BLOCK_HASH,
    'block_hash': HostIoType.BLOCK_HASH,
    **{f'log{i}': HostIoType.LOG for i in range(5)},
}


class HostIoStats:
    """Per-kind counts and the total gas attributed to host interactions."""

    def __init__(self, counts: Optional[Dict[HostIoType, int]] = None, total_gas: int = 0):
        self._counts: Counter = Counter()
        for kind, count in (counts or {}).items():
            self._counts[kind] += count
        self._total_gas = total_gas

    def record(self, kind: HostIoType, gas: int = 0) -> None:
        """Count one event of the given kind."""
        self._counts[kind] += 1
        self._total_gas += gas

    def count_for_type(self, kind: HostIoType) -> int:
        return self._counts.get(kind, 0)

    def total_calls(self) -> int:
        return sum(self._counts.values())

    def total_gas(self) -> int:
        return self._total_gas

    def to_map(self) -> Dict[str, int]:
        """Counts keyed by kind name, non-zero kinds only, in enum order."""
        return {kind.value: self._counts[kind] for kind in HostIoType if self._counts.get(kind, 0) > 0}

    def __eq__(self, other) -> bool:
        if not isinstance(other, HostIoStats):
            return NotImplemented
        return self.to_map() == other.to_map() and self._total_gas == other._total_gas

    def __repr__(self) -> str:
        return f"HostIoStats(by_type={self.to_map()}, total_gas={self._total_gas})"


def classify_event(entry: Dict[str, Any]) -> Optional[HostIoType]:
    """
    Classify a single raw trace entry.

    Stylus tracer entries (those carrying startInk/endInk) with an unknown
    name are host calls of kind OTHER. Ordinary EVM opcodes that are not in
    the table are not host interactions at all.

    Args:
        entry: Raw step or hostio event object

    Returns:
        HostIoType or None if the entry is not a host interaction
    """
    for key in ('function', 'name', 'op'):
        name = entry.get(key)
        if isinstance(name, str) and name:
            kind = HOSTIO_NAMES.get(name.lower())
            if kind is not None:
                return kind

    if 'startInk' in entry and 'endInk' in entry:
        return HostIoType.OTHER
    return None


def event_gas(entry: Dict[str, Any]) -> int:
    """
    Gas attributed to a single host interaction entry.

    Uses the reported gas cost when there is one, otherwise converts the
    ink consumed between startInk and endInk into gas.
    """
    for key in ('gas_cost', 'gasCost'):
        value = entry.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value

    start_ink = entry.get('startInk')
    end_ink = entry.get('endInk')
    if isinstance(start_ink, int) and isinstance(end_ink, int) and start_ink > end_ink:
        return (start_ink - end_ink) // INK_PER_GAS
    return 0


def _candidate_entries(raw_trace: Any) -> Iterable[Any]:
    if isinstance(raw_trace, list):
        yield from raw_trace
        return
    if not isinstance(raw_trace, dict):
        return

    for field in STEP_FIELDS:
        steps = raw_trace.get(field)
        if isinstance(steps, list):
            yield from steps
            break

    for field in HOSTIO_FIELDS:
        events = raw_trace.get(field)
        if isinstance(events, list):
            yield from events


def extract_hostio_events(raw_trace: Any) -> HostIoStats:
    """
    Scan a raw trace for host interactions.

    Looks at every entry of the step list (or the bare array) and at any
    dedicated hostio event list. Never fails; unrecognized shapes yield
    empty statistics.

    Args:
        raw_trace: Raw JSON value of the trace

    Returns:
        HostIoStats
    """
    stats = HostIoStats()
    for entry in _candidate_entries(raw_trace):
        if not isinstance(entry, dict):
            continue
        kind = classify_event(entry)
        if kind is not None:
            stats.record(kind, event_gas(entry))

    logger.debug("Classified %d HostIO events (%d gas)", stats.total_calls(), stats.total_gas())
    return stats
