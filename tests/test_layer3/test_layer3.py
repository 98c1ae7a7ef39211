"""Tests for Layer 3: hierarchy, shape assembly and debug circles."""

# Import stages to trigger registration
import territory.engine.layer0.s0_01_source_filter
import territory.engine.layer0.s0_02_grid_bounds
import territory.engine.layer1.s1_01_dominance_grid
import territory.engine.layer2.s2_01_marching_squares
import territory.engine.layer2.s2_02_segment_stitching
import territory.engine.layer3.s3_01_contour_hierarchy
import territory.engine.layer3.s3_02_shape_assembly
import territory.engine.layer3.s3_03_debug_circles

import numpy as np

from territory.engine.config import TerritoryConfig
from territory.engine.context import ContourLoop, TerritoryContext
from territory.engine.layer3.s3_01_contour_hierarchy import assign_fill_parity, assign_parents
from territory.engine.pipeline import Pipeline
from territory.engine.registry import Layer, get_registry
from territory.utils.geometry import circle_points, polygon_area, signed_area
from tests.conftest import POCKET, SEPARATE_PAIR


def _loop(faction_id, radius, center=(0.0, 0.0)) -> ContourLoop:
    points = circle_points(center, radius, 32)
    return ContourLoop(faction_id=faction_id, points=points, area=polygon_area(points))


def test_layer3_registers_3_stages():
    layer3 = get_registry().get_layer(Layer.TOPOLOGY)
    assert [s.id for s in layer3] == ["S3.01", "S3.02", "S3.03"]
    assert "debug" in get_registry().get("S3.03").tags


def test_assign_parents_picks_smallest_container():
    loops = [_loop("A", 100), _loop("A", 50), _loop("B", 20), _loop("B", 20, (500, 0))]
    assign_parents(loops)
    assert [lp.parent for lp in loops] == [-1, 0, 1, -1]
    assert [lp.depth for lp in loops] == [0, 1, 2, 0]


def test_fill_parity_alternates_within_faction():
    loops = [_loop("A", 100), _loop("A", 80), _loop("A", 60), _loop("A", 40)]
    assign_parents(loops)
    assign_fill_parity(loops)
    assert [lp.is_hole for lp in loops] == [False, True, False, True]
    assert loops[1].owner == 0
    assert loops[3].owner == 2


def test_fill_parity_ignores_other_factions():
    # A outer, B island overlapping A's hole from outside, A hole inside B
    loops = [_loop("A", 100), _loop("B", 50), _loop("A", 45)]
    assign_parents(loops)
    assign_fill_parity(loops)
    assert [lp.depth for lp in loops] == [0, 1, 2]
    assert [lp.is_hole for lp in loops] == [False, False, True]
    assert loops[2].owner == 0


def test_equal_area_loops_are_not_nested():
    loops = [_loop("A", 30), _loop("B", 30)]
    assign_parents(loops)
    assert [lp.parent for lp in loops] == [-1, -1]


def test_full_pipeline_builds_oriented_shapes(fine_config):
    ctx = TerritoryContext(sources=list(POCKET), config=fine_config)
    Pipeline().run(ctx)

    assert ctx.errors == {}
    assert {"S3.01", "S3.02"} <= ctx.completed_transforms
    assert "S3.03" not in ctx.completed_transforms
    assert ctx.debug_shapes == []

    a = next(t for t in ctx.territories if t.faction_id == "A")
    shape = a.shapes[0]
    assert signed_area(shape.outer_loop) > 0
    assert all(signed_area(h) < 0 for h in shape.hole_loops)


def test_debug_circles_per_valid_source():
    config = TerritoryConfig(cell_size=10, debug_mode=True, debug_circle_segments=16)
    ctx = TerritoryContext(sources=list(SEPARATE_PAIR), config=config)
    Pipeline().run(ctx)

    assert "S3.03" in ctx.completed_transforms
    assert len(ctx.debug_shapes) == 2
    circle = ctx.debug_shapes[1]
    assert circle.faction_id == "B"
    assert circle.center == (300, 0)
    assert circle.points.shape == (16, 2)
    np.testing.assert_allclose(np.hypot(circle.points[:, 0] - 300, circle.points[:, 1]), 50)
