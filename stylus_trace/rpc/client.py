"""
JSON-RPC client for fetching traces from an Arbitrum Nitro node.
"""

import logging
from typing import Any, Dict

import requests

from ..core.config import DEFAULT_RPC_TIMEOUT
from ..core.errors import (
    InvalidResponse,
    RequestFailed,
    RpcError,
    TracerNotSupported,
    TransactionNotFound,
)

logger = logging.getLogger(__name__)

TRACER_NAME = 'stylusTracer'


def normalize_tx_hash(tx_hash: str) -> str:
    """Ensure the transaction hash carries a 0x prefix."""
    tx_hash = tx_hash.strip()
    return tx_hash if tx_hash.startswith('0x') else f'0x{tx_hash}'


def build_trace_request(tx_hash: str, request_id: int = 1) -> Dict[str, Any]:
    """JSON-RPC payload for debug_traceTransaction with the Stylus tracer."""
    return {
        'jsonrpc': '2.0',
        'id': request_id,
        'method': 'debug_traceTransaction',
        'params': [tx_hash, {'tracer': TRACER_NAME}],
    }


def map_rpc_error(error: Dict[str, Any], tx_hash: str) -> RpcError:
    """
    Map a JSON-RPC error object to an exception.
    
    -32000 with "not found" in the message means the node does not know the
    transaction; -32601 means the tracer (or debug namespace) is missing.
    """
    code = error.get('code')
    message = str(error.get('message', ''))
    
    if code == -32000 and 'not found' in message.lower():
        return TransactionNotFound(tx_hash)
    if code == -32601:
        return TracerNotSupported(f"Method not supported by node: {message}")
    return InvalidResponse(f"{code}: {message}")


class RpcClient:
    """Fetches raw trace data over HTTP JSON-RPC."""
    
    def __init__(self, rpc_url: str, timeout: float = DEFAULT_RPC_TIMEOUT, session=None):
        """
        Initialize the client.
        
        Args:
            rpc_url: Endpoint URL, e.g. "http://localhost:8547"
            timeout: Request timeout in seconds
            session: Optional requests.Session to reuse
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.session = session or requests.Session()
    
    def debug_trace_transaction(self, tx_hash: str) -> Any:
        """
        Fetch the trace for a transaction using debug_traceTransaction.
        
        Args:
            tx_hash: Transaction hash (with or without 0x prefix)
            
        Returns:
            Raw trace value from the 'result' field
            
        Raises:
            RequestFailed: If the HTTP request fails or the body is not JSON
            InvalidResponse: On non-2xx status or a malformed JSON-RPC reply
            TransactionNotFound: If the node does not know the transaction
            TracerNotSupported: If the node does not support the tracer
        """
        tx_hash = normalize_tx_hash(tx_hash)
        logger.info("Fetching trace for transaction: %s", tx_hash)
        
        payload = build_trace_request(tx_hash)
        logger.debug("RPC request: %s", payload)
        
        try:
            response = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestFailed(f"Request to {self.rpc_url} failed: {e}") from e
        
        if not response.ok:
            raise InvalidResponse(f"HTTP {response.status_code}: {response.text}")
        
        try:
            body = response.json()
        except ValueError as e:
            raise RequestFailed(f"Response from {self.rpc_url} is not JSON: {e}") from e
        
        if not isinstance(body, dict):
            raise InvalidResponse(f"Expected a JSON-RPC object, got {type(body).__name__}")
        
        if body.get('error') is not None:
            error = body['error']
            if not isinstance(error, dict):
                raise InvalidResponse(f"Malformed error field: {error!r}")
            raise map_rpc_error(error, tx_hash)
        
        if body.get('result') is None:
            raise InvalidResponse("Missing result field")
        
        return body['result']
