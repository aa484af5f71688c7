"""RPC client for communicating with Arbitrum Nitro nodes."""

from .client import RpcClient, normalize_tx_hash

__all__ = ["RpcClient", "normalize_tx_hash"]
