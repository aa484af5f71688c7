"""
Unit tests for stylus_trace.rpc.client module.
"""
from unittest.mock import Mock

import pytest
import requests

from stylus_trace.core.errors import (
    InvalidResponse,
    RequestFailed,
    TracerNotSupported,
    TransactionNotFound,
)
from stylus_trace.rpc.client import (
    RpcClient,
    build_trace_request,
    map_rpc_error,
    normalize_tx_hash,
)

RPC_URL = "http://localhost:8547"


def make_response(body=None, status_code=200, json_error=None):
    response = Mock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = "" if body is None else str(body)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


def make_client(response=None, post_error=None):
    session = Mock()
    if post_error is not None:
        session.post.side_effect = post_error
    else:
        session.post.return_value = response
    return RpcClient(RPC_URL, timeout=5, session=session), session


class TestRequestHelpers:

    def test_normalize_adds_prefix(self):
        assert normalize_tx_hash("abc123") == "0xabc123"

    def test_normalize_keeps_prefix(self):
        assert normalize_tx_hash(" 0xabc123 ") == "0xabc123"

    def test_trace_request_payload(self):
        assert build_trace_request("0xabc") == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "debug_traceTransaction",
            "params": ["0xabc", {"tracer": "stylusTracer"}],
        }


class TestMapRpcError:

    def test_transaction_not_found(self):
        error = map_rpc_error({"code": -32000, "message": "transaction not found"}, "0xabc")
        assert isinstance(error, TransactionNotFound)
        assert error.tx_hash == "0xabc"

    def test_method_not_found(self):
        error = map_rpc_error({"code": -32601, "message": "the method debug_traceTransaction does not exist"}, "0xabc")
        assert isinstance(error, TracerNotSupported)

    def test_other_errors(self):
        error = map_rpc_error({"code": -32000, "message": "execution timeout"}, "0xabc")
        assert isinstance(error, InvalidResponse)
        assert "execution timeout" in str(error)


class TestDebugTraceTransaction:

    def test_returns_result(self, sample_trace):
        client, session = make_client(make_response({"jsonrpc": "2.0", "id": 1, "result": sample_trace}))

        assert client.debug_trace_transaction("abc") == sample_trace

        session.post.assert_called_once_with(
            RPC_URL,
            json=build_trace_request("0xabc"),
            timeout=5,
        )

    def test_connection_error(self):
        client, _ = make_client(post_error=requests.ConnectionError("refused"))

        with pytest.raises(RequestFailed):
            client.debug_trace_transaction("0xabc")

    def test_timeout(self):
        client, _ = make_client(post_error=requests.Timeout("slow"))

        with pytest.raises(RequestFailed):
            client.debug_trace_transaction("0xabc")

    def test_http_error_status(self):
        client, _ = make_client(make_response("bad gateway", status_code=502))

        with pytest.raises(InvalidResponse) as exc_info:
            client.debug_trace_transaction("0xabc")
        assert "HTTP 502" in str(exc_info.value)

    def test_body_not_json(self):
        client, _ = make_client(make_response(json_error=ValueError("Expecting value")))

        with pytest.raises(RequestFailed):
            client.debug_trace_transaction("0xabc")

    def test_body_not_an_object(self):
        client, _ = make_client(make_response([1, 2, 3]))

        with pytest.raises(InvalidResponse):
            client.debug_trace_transaction("0xabc")

    def test_error_field(self):
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "transaction not found"}}
        client, _ = make_client(make_response(body))

        with pytest.raises(TransactionNotFound):
            client.debug_trace_transaction("0xabc")

    def test_missing_result(self):
        client, _ = make_client(make_response({"jsonrpc": "2.0", "id": 1}))

        with pytest.raises(InvalidResponse) as exc_info:
            client.debug_trace_transaction("0xabc")
        assert "Missing result field" in str(exc_info.value)
