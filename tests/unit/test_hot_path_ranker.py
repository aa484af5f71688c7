"""
Unit tests for stylus_trace.processors.hot_path_ranker module.
"""
import math
import random

import pytest

from stylus_trace.core.types import CollapsedStack, HotPath
from stylus_trace.processors.hot_path_ranker import HotPathRanker, merge_small_stacks


@pytest.fixture
def ranker():
    return HotPathRanker()


@pytest.fixture
def stacks():
    return [
        CollapsedStack("main;compute", 2000),
        CollapsedStack("main;execute", 5000),
        CollapsedStack("main;storage", 3000),
        CollapsedStack("main;log", 0),
    ]


class TestCalculateHotPaths:
    """Tests for HotPathRanker.calculate_hot_paths()."""

    def test_sorted_by_weight_descending(self, ranker, stacks):
        hot_paths = ranker.calculate_hot_paths(stacks, 10000, 10)

        assert [hp.stack for hp in hot_paths] == [
            "main;execute", "main;storage", "main;compute", "main;log"
        ]

    def test_truncates_to_top_n(self, ranker, stacks):
        hot_paths = ranker.calculate_hot_paths(stacks, 10000, 2)

        assert hot_paths == [
            HotPath(stack="main;execute", gas=5000, percentage=50.0),
            HotPath(stack="main;storage", gas=3000, percentage=30.0),
        ]

    def test_top_n_zero(self, ranker, stacks):
        assert ranker.calculate_hot_paths(stacks, 10000, 0) == []

    def test_zero_total_gas_yields_zero_percentage(self, ranker, stacks):
        hot_paths = ranker.calculate_hot_paths(stacks, 0, 10)

        assert all(hp.percentage == 0.0 for hp in hot_paths)
        assert all(math.isfinite(hp.percentage) for hp in hot_paths)

    def test_empty_input(self, ranker):
        assert ranker.calculate_hot_paths([], 100000, 10) == []

    def test_ties_broken_by_stack_name(self, ranker):
        tied = [
            CollapsedStack("hostio;StorageStore", 2400),
            CollapsedStack("hostio;Call", 2400),
            CollapsedStack("hostio;StorageLoad", 2400),
        ]

        hot_paths = ranker.calculate_hot_paths(tied, 7200, 3)

        assert [hp.stack for hp in hot_paths] == [
            "hostio;Call", "hostio;StorageLoad", "hostio;StorageStore"
        ]

    def test_deterministic_for_any_input_order(self, ranker):
        base = [CollapsedStack(f"path_{i % 7}_{i}", (i % 3) * 10) for i in range(30)]
        expected = ranker.calculate_hot_paths(base, 1000, 12)

        rng = random.Random(7)
        for _ in range(5):
            shuffled = base[:]
            rng.shuffle(shuffled)
            assert ranker.calculate_hot_paths(shuffled, 1000, 12) == expected


class TestRankStacks:
    """Tests for HotPathRanker.rank_stacks()."""

    def test_does_not_modify_input(self, ranker, stacks):
        original = list(stacks)
        ranker.rank_stacks(stacks)
        assert stacks == original

    def test_full_ordering(self, ranker, stacks):
        ranked = ranker.rank_stacks(stacks)
        assert [s.weight for s in ranked] == [5000, 3000, 2000, 0]


class TestMergeSmallStacks:
    """Tests for merge_small_stacks()."""

    def test_merges_below_threshold(self):
        stacks = [
            CollapsedStack("big_stack", 1000),
            CollapsedStack("small_stack_1", 10),
            CollapsedStack("small_stack_2", 15),
            CollapsedStack("medium_stack", 500),
        ]

        merged = merge_small_stacks(stacks, 100)

        assert len(merged) == 3
        other = next(s for s in merged if s.stack == "other")
        assert other.weight == 25

    def test_no_other_when_nothing_folded(self):
        stacks = [CollapsedStack("a", 100), CollapsedStack("b", 200)]

        assert merge_small_stacks(stacks, 50) == stacks

    def test_no_other_when_folded_weight_is_zero(self):
        stacks = [CollapsedStack("a", 100), CollapsedStack("hostio;Call", 0)]

        assert merge_small_stacks(stacks, 50) == [CollapsedStack("a", 100)]

    def test_threshold_zero_keeps_everything(self):
        stacks = [CollapsedStack("a", 0), CollapsedStack("b", 1)]

        assert merge_small_stacks(stacks, 0) == stacks

    def test_existing_other_absorbs_folded_weight(self):
        stacks = [CollapsedStack("other", 500), CollapsedStack("a", 5), CollapsedStack("b", 400)]

        merged = merge_small_stacks(stacks, 100)

        assert merged == [CollapsedStack("other", 505), CollapsedStack("b", 400)]

    @pytest.mark.parametrize("threshold", [0, 1, 5, 50, 500, 10**9])
    def test_weight_conserved(self, threshold):
        stacks = [CollapsedStack(f"s{i}", w) for i, w in enumerate([0, 1, 3, 7, 50, 51, 499, 500, 2000])]

        merged = merge_small_stacks(stacks, threshold)

        assert sum(s.weight for s in merged) == sum(s.weight for s in stacks)
        assert len({s.stack for s in merged}) == len(merged)
