"""
Pytest configuration and shared fixtures for trace profiler tests.
"""
import json
import pytest


@pytest.fixture
def sample_struct_logs():
    """geth-style structLogs: a top-level frame that makes one nested CALL."""
    return [
        {"pc": 0, "op": "PUSH1", "gas": 30000, "gasCost": 3, "depth": 1},
        {"pc": 2, "op": "SLOAD", "gas": 29997, "gasCost": 2100, "depth": 1},
        {"pc": 3, "op": "CALL", "gas": 27897, "gasCost": 100, "depth": 1},
        {"pc": 0, "op": "PUSH1", "gas": 20000, "gasCost": 3, "depth": 2},
        {"pc": 2, "op": "SSTORE", "gas": 19997, "gasCost": 5000, "depth": 2},
        {"pc": 3, "op": "STOP", "gas": 14997, "gasCost": 0, "depth": 2},
        {"pc": 4, "op": "POP", "gas": 27000, "gasCost": 2, "depth": 1},
        {"pc": 5, "op": "STOP", "gas": 26998, "gasCost": 0, "depth": 1},
    ]


@pytest.fixture
def sample_trace(sample_struct_logs):
    """Complete trace object as returned by debug_traceTransaction."""
    return {
        "gasUsed": 30000,
        "failed": False,
        "returnValue": "",
        "structLogs": sample_struct_logs,
    }


@pytest.fixture
def stylus_hostio_trace():
    """Stylus tracer output: hostio entries with ink accounting."""
    return {
        "gasUsed": "0x2710",
        "steps": [
            {"function": "user_entrypoint", "gasCost": 400, "depth": 0},
            {"function": "transfer", "gasCost": 600, "depth": 1},
        ],
        "hostio": [
            {"name": "storage_load_bytes32", "startInk": 1000000, "endInk": 790000},
            {"name": "storage_load_bytes32", "startInk": 790000, "endInk": 580000},
            {"name": "storage_store_bytes32", "startInk": 580000, "endInk": 380000},
            {"name": "read_args", "startInk": 380000, "endInk": 370000},
        ],
    }


@pytest.fixture
def sample_trace_file(tmp_path, sample_trace):
    """Write the sample trace to a temporary JSON file."""
    trace_file = tmp_path / "trace.json"
    with open(trace_file, "w") as f:
        json.dump(sample_trace, f)
    return str(trace_file)


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file and return a helper function."""
    def _create_file(data, name=None):
        file_path = tmp_path / (name or f"test_{id(data)}.json")
        with open(file_path, "w") as f:
            json.dump(data, f)
        return str(file_path)
    
    return _create_file
