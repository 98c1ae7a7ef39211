"""S2.01: Faction Field + Marching Squares.

The tracer input for faction F is the node strength where F won the node and 0
everywhere else. Gating by dominance keeps neighbouring factions' contours apart
except where dominance itself changes hands.
"""

from __future__ import annotations

import logging

from territory.engine.context import TerritoryContext
from territory.engine.registry import Layer, transform
from territory.utils.contour import trace_segments

logger = logging.getLogger(__name__)


@transform(
    id="S2.01",
    layer=Layer.CONTOURS,
    dependencies=["S1.01"],
    description="Trace per-faction threshold crossings with marching squares",
)
def marching_squares(ctx: TerritoryContext) -> None:
    grid = ctx.grid
    if grid is None:
        return

    cfg = ctx.config
    for faction_id in ctx.factions:
        field = grid.faction_field(faction_id)
        segments = trace_segments(
            field,
            grid.xs,
            grid.ys,
            cfg.contour_threshold,
            cfg.interpolation_epsilon,
        )
        ctx.segments[faction_id] = segments
        logger.debug("Faction %r: %d contour segments", faction_id, len(segments))
