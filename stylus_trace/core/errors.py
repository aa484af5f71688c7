"""
Exception hierarchy for trace profiling.
"""


class StylusTraceError(Exception):
    """Base class for all errors raised by this package."""


# Parsing

class ParseError(StylusTraceError):
    """Raised when a trace or profile document cannot be interpreted."""


class InvalidFormat(ParseError, ValueError):
    """Input is structurally unrecognizable or entirely unparseable."""


class UnsupportedVersion(ParseError):
    """A profile document was written with an incompatible schema version."""
    
    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"Unsupported profile version '{found}' (expected {expected})")


# Transport

class RpcError(StylusTraceError):
    """Raised when fetching a trace from the RPC endpoint fails."""


class RequestFailed(RpcError):
    """The HTTP request itself failed (connection, timeout, bad body)."""


class InvalidResponse(RpcError):
    """The endpoint answered, but not with a usable JSON-RPC result."""


class TransactionNotFound(RpcError):
    """The endpoint does not know the requested transaction."""
    
    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Transaction not found: {tx_hash}")


class TracerNotSupported(RpcError):
    """The endpoint does not expose debug_traceTransaction with stylusTracer."""
    
    def __init__(self, message: str = "debug_traceTransaction/stylusTracer is not supported by this node"):
        super().__init__(message)


# Rendering

class FlamegraphError(StylusTraceError):
    """Raised when a flamegraph cannot be produced."""


class EmptyStacks(FlamegraphError):
    """There are no stacks to render."""
    
    def __init__(self):
        super().__init__("No stacks to render")


class RendererNotFound(FlamegraphError):
    """No flame-layout binary was found on PATH."""


class GenerationFailed(FlamegraphError):
    """The flame-layout renderer failed or produced no SVG."""


# Output

class OutputError(StylusTraceError):
    """Raised when a profile or image cannot be written or read back."""
