"""S3.02: Shape Assembly.

Every fill loop becomes one TerritoryShape carrying the holes cut from it.
Outer loops are wound counter-clockwise and holes clockwise; shapes are ordered
largest first within each faction.
"""

from __future__ import annotations

from collections.abc import Hashable

import numpy as np
from numpy.typing import NDArray

from territory.engine.context import TerritoryContext
from territory.engine.registry import Layer, transform
from territory.models.territory import FactionTerritory, TerritoryShape
from territory.utils.color import color_for_faction
from territory.utils.geometry import winding_direction


def _oriented(points: NDArray[np.float64], direction: int) -> NDArray[np.float64]:
    if winding_direction(points) == -direction:
        return points[::-1].copy()
    return points


@transform(
    id="S3.02",
    layer=Layer.TOPOLOGY,
    dependencies=["S3.01"],
    description="Assemble per-faction shapes with holes and display colors",
)
def shape_assembly(ctx: TerritoryContext) -> None:
    shapes: dict[Hashable, list[tuple[float, TerritoryShape]]] = {}

    for i, loop in enumerate(ctx.loops):
        if loop.is_hole:
            continue
        holes = [
            _oriented(other.points, -1)
            for other in ctx.loops
            if other.is_hole and other.owner == i
        ]
        shape = TerritoryShape(
            faction_id=loop.faction_id,
            outer_loop=_oriented(loop.points, 1),
            hole_loops=holes,
        )
        shapes.setdefault(loop.faction_id, []).append((loop.area, shape))

    ctx.territories = []
    for faction_id in ctx.factions:
        entries = shapes.get(faction_id)
        if not entries:
            continue
        entries.sort(key=lambda e: e[0], reverse=True)
        ctx.territories.append(
            FactionTerritory(
                faction_id=faction_id,
                color=color_for_faction(faction_id, ctx.faction_colors),
                shapes=[shape for _, shape in entries],
            )
        )
