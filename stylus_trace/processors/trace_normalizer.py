"""
Trace normalizer: raw debug_traceTransaction output to ParsedTrace.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from ..core.config import SCHEMA_VERSION
from ..core.errors import InvalidFormat
from ..core.types import ExecutionStep, HostIoSummary, HotPath, ParsedTrace, Profile
from ..extractors.hostio_extractor import extract_hostio_events

logger = logging.getLogger(__name__)

# Aliases tried in order; tracers and RPC providers disagree on naming
GAS_FIELDS = ('gasUsed', 'gas_used', 'totalGas', 'total_gas')
STEP_FIELDS = ('structLogs', 'struct_logs', 'steps', 'trace')


def parse_gas_value(value: str) -> int:
    """
    Parse a gas value encoded as a decimal or 0x-prefixed hex string.
    
    Args:
        value: String such as "1000" or "0x3e8"
        
    Returns:
        Gas as an integer
        
    Raises:
        InvalidFormat: If the string is neither valid decimal nor valid hex
    """
    text = value.strip()
    if text.startswith('0x'):
        digits = text[2:]
        if digits and all(c in '0123456789abcdefABCDEF' for c in digits):
            return int(digits, 16)
        raise InvalidFormat(f"Invalid hex gas value: {value!r}")
    if text and all(c in '0123456789' for c in text):
        return int(text)
    raise InvalidFormat(f"Invalid decimal gas value: {value!r}")


class TraceNormalizer:
    """Normalizes heterogeneous raw trace shapes into a ParsedTrace."""
    
    def parse_trace(self, tx_hash: str, raw_trace: Any) -> ParsedTrace:
        """
        Parse raw trace JSON from the Stylus tracer.
        
        Args:
            tx_hash: Transaction hash being profiled
            raw_trace: Raw JSON value (object, or bare array of steps)
            
        Returns:
            ParsedTrace ready for aggregation
            
        Raises:
            InvalidFormat: If the trace is neither an object nor an array, has
                           neither a gas field nor a step list, or every
                           element of a non-empty step list is malformed
        """
        logger.debug("Parsing trace for transaction: %s", tx_hash)
        
        if isinstance(raw_trace, dict):
            trace_obj = raw_trace
        elif isinstance(raw_trace, list):
            logger.warning("Trace is array format, wrapping as structLogs")
            trace_obj = {'structLogs': raw_trace}
        else:
            raise InvalidFormat(
                f"Trace must be a JSON object or array, got {type(raw_trace).__name__}"
            )
        
        _check_expected_fields(trace_obj)
        total_gas_used = self.extract_total_gas(trace_obj)
        execution_steps, dropped = self.extract_execution_steps(trace_obj)
        logger.debug("Parsed %d execution steps (%d dropped)", len(execution_steps), dropped)
        
        hostio_stats = extract_hostio_events(raw_trace)
        logger.debug(
            "Found %d HostIO calls consuming %d gas",
            hostio_stats.total_calls(),
            hostio_stats.total_gas()
        )
        
        return ParsedTrace(
            transaction_hash=tx_hash,
            total_gas_used=total_gas_used,
            execution_steps=execution_steps,
            hostio_stats=hostio_stats,
            dropped_steps=dropped,
        )
    
    @staticmethod
    def extract_total_gas(trace_obj: Dict[str, Any]) -> int:
        """
        Extract total gas used from a trace object.
        
        Tries each alias in GAS_FIELDS; the first value that is a
        non-negative integer or a parseable decimal/hex string wins.
        
        Returns:
            Total gas, or 0 when no field yields a value. Callers that need
            a real figure recompute it from the step gas costs.
        """
        for field in GAS_FIELDS:
            if field not in trace_obj:
                continue
            gas_value = trace_obj[field]
            if isinstance(gas_value, int) and not isinstance(gas_value, bool) and gas_value >= 0:
                return gas_value
            if isinstance(gas_value, str):
                try:
                    return parse_gas_value(gas_value)
                except InvalidFormat as e:
                    logger.warning("Ignoring field '%s': %s", field, e)
        
        logger.warning(
            "Gas field not found in trace (tried %s), will calculate from steps",
            ', '.join(GAS_FIELDS)
        )
        return 0
    
    @staticmethod
    def extract_execution_steps(trace_obj: Dict[str, Any]) -> Tuple[List[ExecutionStep], int]:
        """
        Extract execution steps from the first step-list alias that holds an array.
        
        Returns:
            Tuple of (steps in execution order, number of malformed steps dropped)
        """
        for field in STEP_FIELDS:
            steps_value = trace_obj.get(field)
            if isinstance(steps_value, list):
                return TraceNormalizer.parse_steps_array(steps_value, field)
        
        logger.warning("No execution steps found in trace (tried %s)", ', '.join(STEP_FIELDS))
        return [], 0
    
    @staticmethod
    def parse_steps_array(steps_array: List[Any], field: str = 'structLogs') -> Tuple[List[ExecutionStep], int]:
        """
        Parse an array of raw steps, dropping malformed entries.
        
        Raises:
            InvalidFormat: If the array is non-empty and no entry parses
        """
        steps = []
        dropped = 0
        first_error = None
        
        for index, step_value in enumerate(steps_array):
            try:
                steps.append(ExecutionStep.from_dict(step_value))
            except InvalidFormat as e:
                dropped += 1
                if first_error is None:
                    first_error = f"step {index}: {e}"
                logger.warning("Failed to parse step %d: %s", index, e)
        
        if not steps and steps_array:
            raise InvalidFormat(
                f"All {len(steps_array)} execution steps in '{field}' failed to parse "
                f"(first error at {first_error})"
            )
        
        return steps, dropped


def validate_trace_format(raw_trace: Any) -> None:
    """
    Quick structural check without a full parse.
    
    Args:
        raw_trace: Raw JSON to validate
        
    Raises:
        InvalidFormat: If the value is not an object or carries neither a gas
                       field nor a step list
    """
    if not isinstance(raw_trace, dict):
        raise InvalidFormat(f"Expected JSON object, got {type(raw_trace).__name__}")
    _check_expected_fields(raw_trace)


def _check_expected_fields(trace_obj: Dict[str, Any]) -> None:
    has_gas = any(field in trace_obj for field in GAS_FIELDS)
    has_steps = any(field in trace_obj for field in STEP_FIELDS)
    
    if not has_gas and not has_steps:
        raise InvalidFormat(
            "Trace does not contain expected fields (gas: "
            f"{', '.join(GAS_FIELDS)}; steps: {', '.join(STEP_FIELDS)})"
        )


def to_profile(parsed_trace: ParsedTrace, hot_paths: List[HotPath]) -> Profile:
    """
    Assemble the versioned output profile.
    
    Args:
        parsed_trace: Parsed trace data
        hot_paths: Ranked hot paths from the ranker
        
    Returns:
        Profile ready for JSON serialization
    """
    return Profile(
        version=SCHEMA_VERSION,
        transaction_hash=parsed_trace.transaction_hash,
        total_gas=parsed_trace.total_gas_used,
        hostio_summary=HostIoSummary.from_stats(parsed_trace.hostio_stats),
        hot_paths=list(hot_paths),
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
