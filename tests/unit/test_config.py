"""
Unit tests for stylus_trace.core.config module.
"""
import pytest

from stylus_trace.core.config import DEFAULT_RPC_URL, ProfileConfig


class TestProfileConfig:

    def test_defaults(self):
        config = ProfileConfig()
        assert config.top_paths == 20
        assert config.merge_threshold == 0
        assert config.backfill_total_gas is True
        assert config.rpc_url == DEFAULT_RPC_URL
        assert config.rpc_timeout == 30

    def test_top_paths_zero_allowed(self):
        assert ProfileConfig(top_paths=0).top_paths == 0

    @pytest.mark.parametrize("kwargs", [
        {"top_paths": -1},
        {"merge_threshold": -5},
        {"rpc_timeout": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ProfileConfig(**kwargs)
