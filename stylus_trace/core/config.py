"""
Configuration defaults for trace profiling.
"""

# Version of the profile JSON schema written by this package
SCHEMA_VERSION = "1.0.0"

DEFAULT_RPC_URL = "http://localhost:8547"
DEFAULT_RPC_TIMEOUT = 30  # seconds
DEFAULT_TOP_PATHS = 20

# EVM call depth limit (1024) plus the top-level frame; deeper steps are malformed
MAX_STEP_DEPTH = 1025

# Stylus meters execution in ink; one unit of gas buys this much ink
INK_PER_GAS = 10000


class ProfileConfig:
    """Configuration for trace profiling."""
    
    def __init__(
        self,
        top_paths: int = DEFAULT_TOP_PATHS,
        merge_threshold: int = 0,
        backfill_total_gas: bool = True,
        rpc_url: str = DEFAULT_RPC_URL,
        rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    ):
        """
        Initialize trace profiling configuration.
        
        Args:
            top_paths: Number of hot paths to keep in the profile.
                       Default: 20
            
            merge_threshold: Stacks weighing less than this are folded into a
                             single "other" stack before ranking and rendering.
                             Default: 0 (no merging)
            
            backfill_total_gas: If True and the trace carries no usable gas
                                field, total gas is recomputed as the sum of
                                positive step gas costs.
                                Default: True
            
            rpc_url: JSON-RPC endpoint used to fetch transaction traces
            
            rpc_timeout: Timeout in seconds for the trace request
        """
        if top_paths < 0:
            raise ValueError(f"top_paths must be >= 0, got {top_paths}")
        if merge_threshold < 0:
            raise ValueError(f"merge_threshold must be >= 0, got {merge_threshold}")
        if rpc_timeout <= 0:
            raise ValueError(f"rpc_timeout must be positive, got {rpc_timeout}")
        
        self.top_paths = top_paths
        self.merge_threshold = merge_threshold
        self.backfill_total_gas = backfill_total_gas
        self.rpc_url = rpc_url
        self.rpc_timeout = rpc_timeout
