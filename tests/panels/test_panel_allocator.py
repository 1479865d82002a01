# File: tests/panels/test_panel_allocator.py
"""Unit tests for panel allocation and offcut reuse."""

import logging

import pytest

from fence_layout.config.layout_config import LayoutConfig
from fence_layout.core.fence_types import Leftover, LeftoverPool
from fence_layout.panels.panel_allocator import (
    count_stock_panels,
    find_leftover_for_cut,
    fit_panels,
    fit_runs,
    needs_auto_even_spacing,
)
from fence_layout.utils.logging_config import TRACE

from conftest import assert_tiles


class TestFixedLengthMode:
    """Full panels plus one remainder."""

    def test_exact_panel_length(self, empty_pool):
        """One full panel, no remainder, no warning."""
        result = fit_panels("run_1", 2390.0, False, empty_pool)

        assert len(result.segments) == 1
        assert result.segments[0].length_mm == 2390.0
        assert not result.segments[0].is_remainder
        assert result.warnings == []
        assert result.joint_positions == []
        assert result.new_leftovers == []

    def test_short_remainder_warns_and_keeps_offcut(self, empty_pool):
        """2500mm: 2390 + 110, warning, 1980mm offcut from the fresh cut."""
        result = fit_panels("run_1", 2500.0, False, empty_pool)

        assert [s.length_mm for s in result.segments] == pytest.approx([2390.0, 110.0])
        assert result.segments[1].is_remainder
        assert result.segments[1].uses_leftover_id is None
        assert len(result.warnings) == 1
        assert "0.11m" in result.warnings[0]
        assert [l.length_mm for l in result.new_leftovers] == pytest.approx([1980.0])
        assert [l.length_mm for l in result.pool.available()] == pytest.approx([1980.0])
        assert result.joint_positions == [2390.0]

    def test_remainder_from_existing_offcut(self):
        """1500mm cut from a 2000mm offcut leaves 200mm scrap."""
        pool = LeftoverPool.of([Leftover(id="old", length_mm=2000.0)])

        result = fit_panels("run_1", 1500.0, False, pool)

        assert len(result.segments) == 1
        assert result.segments[0].uses_leftover_id == "old"
        assert result.segments[0].is_remainder
        assert result.warnings == []
        assert result.new_leftovers == []
        assert result.pool.available() == []
        assert result.pool.get("old").consumed

    def test_remainder_below_epsilon_is_dropped(self, empty_pool):
        result = fit_panels("run_1", 4780.3, False, empty_pool)

        assert len(result.segments) == 2
        assert all(not s.is_remainder for s in result.segments)
        assert result.joint_positions == [2390.0]

    def test_joints_at_every_panel_multiple(self, empty_pool):
        result = fit_panels("run_1", 7500.0, False, empty_pool)

        assert result.joint_positions == [2390.0, 4780.0, 7170.0]
        assert_tiles(result.segments, 7500.0)

    def test_segment_ids_are_deterministic(self, empty_pool):
        result = fit_panels("run_9", 5000.0, False, empty_pool)
        assert [s.id for s in result.segments] == ["run_9_seg_0", "run_9_seg_1", "run_9_seg_2"]

    def test_residual_too_short_is_scrap(self, empty_pool):
        """A 2000mm piece from fresh stock leaves 90mm: nothing registered."""
        result = fit_panels("run_1", 2000.0, False, empty_pool)

        assert result.new_leftovers == []
        assert len(result.pool) == 0


class TestEvenSpacingMode:
    """Equal segments along the run."""

    def test_equal_segments(self, empty_pool):
        result = fit_panels("run_1", 5000.0, True, empty_pool)

        assert len(result.segments) == 3
        for seg in result.segments:
            assert seg.length_mm == pytest.approx(5000.0 / 3)
        assert result.joint_positions == pytest.approx([5000.0 / 3, 10000.0 / 3])
        assert_tiles(result.segments, 5000.0)

    def test_short_run_gets_one_segment(self, empty_pool):
        result = fit_panels("run_1", 1000.0, True, empty_pool)

        assert len(result.segments) == 1
        assert result.joint_positions == []
        # 2390 - 1000 - 300
        assert [l.length_mm for l in result.new_leftovers] == pytest.approx([1090.0])

    def test_exact_multiple_needs_no_cut(self, empty_pool):
        result = fit_panels("run_1", 4780.0, True, empty_pool)

        assert len(result.segments) == 2
        assert all(s.uses_leftover_id is None for s in result.segments)
        assert result.new_leftovers == []

    def test_offcuts_from_this_run_wait_for_next_run(self, empty_pool):
        """Each cut in a run draws on the pool as it stood before the run."""
        result = fit_panels("run_1", 3000.0, True, empty_pool)

        # Two 1500mm pieces, both from fresh stock, each leaving 590mm
        assert all(s.uses_leftover_id is None for s in result.segments)
        assert [l.length_mm for l in result.new_leftovers] == pytest.approx([590.0, 590.0])

    def test_last_segment_ends_at_run_length(self, empty_pool):
        result = fit_panels("run_1", 10000.1, True, empty_pool)
        assert result.segments[-1].end_mm == 10000.1

    def test_no_warning_for_even_spacing(self, empty_pool):
        result = fit_panels("run_1", 2500.0, True, empty_pool)
        assert result.warnings == []


class TestLeftoverMatching:
    """Greedy largest-first offcut selection."""

    def test_largest_qualifying_offcut_wins(self):
        pool = LeftoverPool.of([
            Leftover(id="small", length_mm=900.0),
            Leftover(id="large", length_mm=1800.0),
            Leftover(id="medium", length_mm=1200.0),
        ])
        chosen = find_leftover_for_cut(500.0, pool)
        assert chosen.id == "large"

    def test_buffer_must_fit(self):
        pool = LeftoverPool.of([Leftover(id="tight", length_mm=799.0)])
        assert find_leftover_for_cut(500.0, pool) is None

        pool = LeftoverPool.of([Leftover(id="exact", length_mm=800.0)])
        assert find_leftover_for_cut(500.0, pool).id == "exact"

    def test_ties_keep_pool_order(self):
        pool = LeftoverPool.of([
            Leftover(id="first", length_mm=1000.0),
            Leftover(id="second", length_mm=1000.0),
        ])
        assert find_leftover_for_cut(400.0, pool).id == "first"

    def test_consumed_offcuts_are_skipped(self):
        pool = LeftoverPool.of([Leftover(id="gone", length_mm=2000.0, consumed=True)])
        assert find_leftover_for_cut(100.0, pool) is None

    def test_conservation(self):
        """New offcut = old length - piece - buffer."""
        pool = LeftoverPool.of([Leftover(id="old", length_mm=2200.0)])

        result = fit_panels("run_1", 900.0, False, pool)

        assert result.segments[0].uses_leftover_id == "old"
        assert [l.length_mm for l in result.new_leftovers] == pytest.approx([2200.0 - 900.0 - 300.0])

    def test_input_pool_is_not_mutated(self):
        pool = LeftoverPool.of([Leftover(id="old", length_mm=2000.0)])

        result = fit_panels("run_1", 1500.0, False, pool)

        assert not pool.get("old").consumed
        assert len(pool) == 1
        assert result.pool is not pool


class TestFitRuns:
    """Threading one pool through several runs."""

    def test_offcut_from_first_run_feeds_second(self):
        results, pool = fit_runs([
            ("run_1", 2500.0, False),   # leaves a 1980mm offcut
            ("run_2", 1500.0, False),   # takes it, 180mm scrap
        ])

        second = results[1].segments[0]
        assert second.uses_leftover_id == results[0].new_leftovers[0].id
        assert pool.available() == []

    def test_order_decides_who_gets_the_offcut(self):
        start = LeftoverPool.of([Leftover(id="old", length_mm=2000.0)])

        results_ab, _ = fit_runs([("a", 1000.0, False), ("b", 1200.0, False)], start)
        results_ba, _ = fit_runs([("b", 1200.0, False), ("a", 1000.0, False)], start)

        assert results_ab[0].segments[0].uses_leftover_id == "old"
        assert results_ba[0].segments[0].uses_leftover_id == "old"
        assert results_ab[1].segments[0].uses_leftover_id != "old"

    def test_deterministic(self):
        runs = [("r1", 2500.0, False), ("r2", 5000.0, True), ("r3", 700.0, False)]
        start = LeftoverPool.of([Leftover(id="x", length_mm=1500.0)])

        first, pool_1 = fit_runs(runs, start)
        second, pool_2 = fit_runs(runs, start)

        assert [r.segments for r in first] == [r.segments for r in second]
        assert pool_1.to_dict() == pool_2.to_dict()

    def test_no_offcut_used_twice(self):
        results, pool = fit_runs([
            ("r1", 500.0, False),
            ("r2", 500.0, False),
            ("r3", 500.0, False),
            ("r4", 500.0, False),
        ])
        used = [s.uses_leftover_id for r in results for s in r.segments if s.uses_leftover_id]
        assert len(used) == len(set(used))
        for leftover_id in used:
            assert pool.get(leftover_id).consumed


class TestTiling:
    """Segments always partition the run."""

    @pytest.mark.parametrize("length", [1.0, 299.0, 2389.4, 2390.0, 2391.0, 4780.0, 12345.6])
    @pytest.mark.parametrize("even", [False, True])
    def test_tiles_run(self, length, even):
        result = fit_panels("run", length, even, LeftoverPool())
        assert_tiles(result.segments, length)


class TestEdgeCases:

    @pytest.mark.parametrize("length", [0.0, -10.0, float("nan"), float("inf")])
    def test_unusable_length(self, length, empty_pool):
        result = fit_panels("run_1", length, False, empty_pool)
        assert result.segments == []
        assert len(result.warnings) == 1

    def test_custom_stock_length(self, empty_pool):
        config = LayoutConfig(panel_length_mm=1800.0)
        result = fit_panels("run_1", 3600.0, False, empty_pool, config)
        assert [s.length_mm for s in result.segments] == [1800.0, 1800.0]


class TestHelpers:

    def test_needs_auto_even_spacing(self):
        assert needs_auto_even_spacing(2500.0)
        assert not needs_auto_even_spacing(2390.0)
        assert not needs_auto_even_spacing(3000.0)
        assert not needs_auto_even_spacing(0.0)

    def test_count_stock_panels(self):
        pool = LeftoverPool.of([Leftover(id="old", length_mm=2000.0)])
        result = fit_panels("run_1", 3890.0, False, pool)
        # One full panel from stock, the 1500mm remainder from the offcut
        assert count_stock_panels(result.segments) == 1

    def test_cuts_logged_at_trace(self, caplog):
        caplog.set_level(TRACE, logger="fence_layout.panels.panel_allocator")

        fit_panels("run_1", 2500.0, False, LeftoverPool())

        cuts = [r for r in caplog.records if r.levelno == TRACE]
        assert len(cuts) == 1
        assert "kept 1980.0mm offcut" in cuts[0].getMessage()

    def test_cuts_hidden_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="fence_layout.panels.panel_allocator")
        fit_panels("run_1", 2500.0, False, LeftoverPool())
        assert not [r for r in caplog.records if r.levelno == TRACE]
