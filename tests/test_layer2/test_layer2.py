"""Tests for Layer 2: marching squares and stitching over real fields."""

# Import stages to trigger registration
import territory.engine.layer0.s0_01_source_filter
import territory.engine.layer0.s0_02_grid_bounds
import territory.engine.layer1.s1_01_dominance_grid
import territory.engine.layer2.s2_01_marching_squares
import territory.engine.layer2.s2_02_segment_stitching

import math

import numpy as np

from territory.engine.context import TerritoryContext
from territory.engine.pipeline import Pipeline
from territory.engine.registry import Layer, get_registry
from tests.conftest import POCKET, RING, SINGLE_SOURCE


def _run_to_contours(sources, config) -> TerritoryContext:
    ctx = TerritoryContext(sources=list(sources), config=config)
    pipeline = Pipeline()
    for layer in (Layer.SOURCES, Layer.FIELD, Layer.CONTOURS):
        pipeline.run_layer(ctx, layer)
    return ctx


def test_layer2_registers_2_stages():
    assert [s.id for s in get_registry().get_layer(Layer.CONTOURS)] == ["S2.01", "S2.02"]


def test_single_source_traces_one_closed_loop(fine_config):
    ctx = _run_to_contours(SINGLE_SOURCE, fine_config)
    assert ctx.dropped_chains == 0
    assert len(ctx.loops) == 1
    loop = ctx.loops[0]
    assert loop.faction_id == "A"
    assert loop.area > 0
    radii = np.hypot(loop.points[:, 0], loop.points[:, 1])
    assert np.all(np.abs(radii - 100 * math.sqrt(0.7)) < 10)


def test_segments_recorded_per_faction(fine_config):
    ctx = _run_to_contours(POCKET, fine_config)
    assert set(ctx.segments) == {"A", "B"}
    assert all(ctx.segments[f] for f in ("A", "B"))


def test_pocket_yields_three_loops(fine_config):
    ctx = _run_to_contours(POCKET, fine_config)
    assert ctx.dropped_chains == 0
    assert sorted(lp.faction_id for lp in ctx.loops) == ["A", "A", "B"]


def test_ring_yields_inner_and_outer_loop(fine_config):
    ctx = _run_to_contours(RING, fine_config)
    assert len(ctx.loops) == 2
    areas = sorted(lp.area for lp in ctx.loops)
    assert areas[0] < areas[1]


def test_loops_have_no_duplicate_closing_vertex(fine_config):
    ctx = _run_to_contours(SINGLE_SOURCE, fine_config)
    points = ctx.loops[0].points
    assert np.hypot(*(points[0] - points[-1])) > 1e-9
