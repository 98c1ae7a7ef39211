"""S3.01: Contour Hierarchy.

Parent of a loop = the smallest-area loop, across all factions, containing a few
of its vertices (ray casting). Depth counts all enclosing loops.

Fill vs. hole uses even/odd parity over enclosing loops of the same faction, and
a hole is cut from its nearest same-faction ancestor. Where neighbouring
factions' contours stay apart this is exactly the parity of ``depth``; it also
stays right when strong fields put a neighbour's contour a sliver outside the
hole it fills.
"""

from __future__ import annotations

import logging

from territory.engine.context import ContourLoop, TerritoryContext
from territory.engine.registry import Layer, transform
from territory.utils.geometry import loop_inside_loop

logger = logging.getLogger(__name__)


def assign_parents(loops: list[ContourLoop], samples: int = 3) -> None:
    """Set ``parent`` and ``depth`` on every loop in place."""
    by_area = sorted(range(len(loops)), key=lambda k: loops[k].area)

    for i, loop in enumerate(loops):
        loop.parent = -1
        for j in by_area:
            candidate = loops[j]
            # Strictly larger, so the parent relation can never cycle
            if j == i or candidate.area <= loop.area:
                continue
            if loop_inside_loop(loop.points, candidate.points, samples):
                loop.parent = j
                break

    for loop in loops:
        depth = 0
        k = loop.parent
        while k >= 0:
            depth += 1
            k = loops[k].parent
        loop.depth = depth


def assign_fill_parity(loops: list[ContourLoop]) -> None:
    """Set ``is_hole`` and ``owner`` from same-faction nesting parity."""
    for loop in loops:
        same: list[int] = []
        k = loop.parent
        while k >= 0:
            if loops[k].faction_id == loop.faction_id:
                same.append(k)
            k = loops[k].parent
        loop.is_hole = len(same) % 2 == 1
        loop.owner = same[0] if loop.is_hole else -1


@transform(
    id="S3.01",
    layer=Layer.TOPOLOGY,
    dependencies=["S2.02"],
    description="Nest contour loops into fills and holes by containment",
)
def contour_hierarchy(ctx: TerritoryContext) -> None:
    if not ctx.loops:
        return

    assign_parents(ctx.loops, ctx.config.containment_samples)
    assign_fill_parity(ctx.loops)

    holes = sum(1 for lp in ctx.loops if lp.is_hole)
    logger.debug(
        "Hierarchy: %d loops, %d holes, max depth %d",
        len(ctx.loops),
        holes,
        max(lp.depth for lp in ctx.loops),
    )
