"""
Main trace profiler orchestrator.
"""

import logging
from typing import Any, Optional

from ..core.config import ProfileConfig
from ..core.types import ProfileResult
from ..processors import (
    TraceFileProcessor,
    TraceNormalizer,
    CallStackAggregator,
    HotPathRanker,
    merge_small_stacks,
    to_profile
)
from ..rpc import RpcClient

logger = logging.getLogger(__name__)


class TraceProfiler:
    """Main orchestrator for trace profiling."""

    def __init__(self, config: Optional[ProfileConfig] = None, rpc_client: Optional[RpcClient] = None):
        """
        Initialize the TraceProfiler.

        Args:
            config: ProfileConfig; defaults are used if None
            rpc_client: Client used by profile_transaction. Created lazily
                        from config.rpc_url when not given.
        """
        self.config = config or ProfileConfig()
        self._rpc_client = rpc_client

        # Initialize components
        self.file_processor = TraceFileProcessor()
        self.normalizer = TraceNormalizer()
        self.aggregator = CallStackAggregator()
        self.ranker = HotPathRanker()

    @property
    def rpc_client(self) -> RpcClient:
        if self._rpc_client is None:
            self._rpc_client = RpcClient(self.config.rpc_url, timeout=self.config.rpc_timeout)
        return self._rpc_client

    def profile_transaction(self, tx_hash: str) -> ProfileResult:
        """
        Fetch a transaction trace over RPC and profile it.

        Args:
            tx_hash: Transaction hash to profile
        """
        raw_trace = self.rpc_client.debug_trace_transaction(tx_hash)
        return self.profile_raw_trace(tx_hash, raw_trace)

    def profile_trace_file(self, file_path: str, tx_hash: str = 'unknown') -> ProfileResult:
        """
        Profile a trace previously saved to a JSON file.

        Args:
            file_path: Path to the trace JSON file
            tx_hash: Transaction hash to record in the profile
        """
        raw_trace = self.file_processor.load_trace(file_path)
        return self.profile_raw_trace(tx_hash, raw_trace)

    def profile_raw_trace(self, tx_hash: str, raw_trace: Any) -> ProfileResult:
        """
        Run the full pipeline on an in-memory raw trace.

        Steps: normalize, backfill total gas if needed, build collapsed
        stacks, optionally merge small stacks, rank hot paths and assemble
        the profile.

        Args:
            tx_hash: Transaction hash being profiled
            raw_trace: Raw trace value (object or array)

        Returns:
            ProfileResult
        """
        # Pass 1: Normalize the raw trace
        parsed = self.normalizer.parse_trace(tx_hash, raw_trace)

        # Pass 2: Recover total gas when the trace does not carry it
        backfilled = False
        if parsed.total_gas_used == 0 and parsed.execution_steps and self.config.backfill_total_gas:
            parsed.total_gas_used = parsed.step_gas_total()
            backfilled = True
            logger.info("Total gas backfilled from step costs: %d", parsed.total_gas_used)

        # Pass 3: Aggregate steps into collapsed stacks
        stacks = self.aggregator.build_collapsed_stacks(parsed)
        if self.config.merge_threshold > 0:
            stacks = merge_small_stacks(stacks, self.config.merge_threshold)
        stacks = self.ranker.rank_stacks(stacks)

        # Pass 4: Rank hot paths and assemble the profile
        hot_paths = self.ranker.calculate_hot_paths(stacks, parsed.total_gas_used, self.config.top_paths)
        profile = to_profile(parsed, hot_paths)

        logger.info(
            "Profiled %s: %d steps, %d unique stacks, %d hot paths",
            tx_hash, len(parsed.execution_steps), len(stacks), len(hot_paths)
        )

        return ProfileResult(
            parsed_trace=parsed,
            stacks=stacks,
            hot_paths=hot_paths,
            profile=profile,
            total_gas_backfilled=backfilled,
        )
