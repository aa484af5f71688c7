"""
Call-stack aggregation: flat depth-annotated steps to collapsed stacks.

Collapsed stacks are the input format for flamegraph rendering:
"parent;child;grandchild weight", e.g. "main;execute_tx;storage_read 1000"
means main called execute_tx which called storage_read, consuming 1000 gas.
"""

import logging
from collections import defaultdict
from typing import DefaultDict, List

from ..core.types import CollapsedStack, ParsedTrace
from ..extractors.hostio_extractor import HostIoType

logger = logging.getLogger(__name__)

UNKNOWN_OPERATION = 'unknown'
# Tracers do not name a frame on call entry, so intermediate frames are
# recorded under this placeholder
PLACEHOLDER_FRAME = 'call'
HOSTIO_ROOT = 'hostio'


def update_call_stack(call_stack: List[str], new_depth: int) -> None:
    """
    Bring the call stack to the given depth in place.
    
    Returning from calls truncates the stack; entering calls pushes
    placeholder frames until the stack is as deep as the step.
    """
    if new_depth < len(call_stack):
        del call_stack[new_depth:]
    while len(call_stack) < new_depth:
        call_stack.append(PLACEHOLDER_FRAME)


def build_stack_string(call_stack: List[str], operation: str) -> str:
    """Join the frames and the current operation with ';'."""
    if not call_stack:
        return operation
    return ';'.join(call_stack + [operation])


class CallStackAggregator:
    """Reconstructs call paths from step depths and sums gas per unique path."""
    
    def build_collapsed_stacks(self, parsed_trace: ParsedTrace) -> List[CollapsedStack]:
        """
        Build collapsed stacks from a parsed trace.
        
        Walks the steps in execution order, tracking the call stack from
        the depth values, and accumulates each positive step gas cost on
        the full path of the step. Host interactions are then added as
        synthetic 'hostio;<kind>' paths.
        
        Args:
            parsed_trace: Parsed trace data from the normalizer
            
        Returns:
            One CollapsedStack per unique path, in no particular order
        """
        logger.debug(
            "Building collapsed stacks from %d execution steps",
            len(parsed_trace.execution_steps)
        )
        
        stack_map: DefaultDict[str, int] = defaultdict(int)
        call_stack: List[str] = []
        
        for step in parsed_trace.execution_steps:
            operation = step.function or step.op or UNKNOWN_OPERATION
            
            update_call_stack(call_stack, step.depth)
            
            # Zero-cost steps must not create empty paths
            if step.gas_cost > 0:
                stack_map[build_stack_string(call_stack, operation)] += step.gas_cost
        
        self.add_hostio_stacks(stack_map, parsed_trace)
        
        stacks = [CollapsedStack(stack, weight) for stack, weight in stack_map.items()]
        logger.debug("Built %d unique collapsed stacks", len(stacks))
        return stacks
    
    @staticmethod
    def add_hostio_stacks(stack_map: DefaultDict[str, int], parsed_trace: ParsedTrace) -> None:
        """
        Add one synthetic stack per host interaction kind that occurred.
        
        Per-event gas is not recorded, so the total HostIO gas is
        apportioned by call count: total_gas * count // total_calls.
        The floor division can leave a remainder unattributed.
        """
        stats = parsed_trace.hostio_stats
        total_calls = max(stats.total_calls(), 1)
        
        for hostio_type in HostIoType:
            count = stats.count_for_type(hostio_type)
            if count > 0:
                weight = stats.total_gas() * count // total_calls
                stack_map[f"{HOSTIO_ROOT};{hostio_type.path_name}"] += weight
