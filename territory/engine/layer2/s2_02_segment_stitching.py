"""S2.02: Segment Stitching.

Joins each faction's segments into closed loops. Open chains are dropped rather
than drawn half-finished; the next recompute starts from scratch anyway.
"""

from __future__ import annotations

import logging

from territory.engine.context import ContourLoop, TerritoryContext
from territory.engine.registry import Layer, transform
from territory.utils.contour import stitch_segments
from territory.utils.geometry import polygon_area

logger = logging.getLogger(__name__)


@transform(
    id="S2.02",
    layer=Layer.CONTOURS,
    dependencies=["S2.01"],
    description="Stitch contour segments into closed loops per faction",
)
def segment_stitching(ctx: TerritoryContext) -> None:
    epsilon = ctx.config.stitch_epsilon_cells * ctx.cell_size
    if epsilon <= 0:
        return

    for faction_id in ctx.factions:
        segments = ctx.segments.get(faction_id)
        if not segments:
            continue
        loops, dropped = stitch_segments(segments, epsilon)
        ctx.dropped_chains += dropped
        if dropped:
            logger.warning("Faction %r: dropped %d unclosed contour chain(s)", faction_id, dropped)
        for points in loops:
            ctx.loops.append(
                ContourLoop(faction_id=faction_id, points=points, area=polygon_area(points))
            )
