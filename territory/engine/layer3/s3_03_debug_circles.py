"""S3.03: Debug Radius Circles.

One polygonal circle per valid source at its raw influence radius. Only runs
in debug mode and never touches the territory shapes.
"""

from __future__ import annotations

from territory.engine.context import TerritoryContext
from territory.engine.registry import Layer, transform
from territory.models.territory import DebugCircle
from territory.utils.color import color_for_faction
from territory.utils.geometry import circle_points


@transform(
    id="S3.03",
    layer=Layer.TOPOLOGY,
    dependencies=["S0.01"],
    description="Emit source radius circles as diagnostic shapes",
    tags={"debug"},
)
def debug_circles(ctx: TerritoryContext) -> None:
    segments = ctx.config.debug_circle_segments
    ctx.debug_shapes = [
        DebugCircle(
            faction_id=s.faction_id,
            color=color_for_faction(s.faction_id, ctx.faction_colors),
            center=s.position,
            radius=s.radius,
            points=circle_points(s.position, s.radius, segments),
        )
        for s in ctx.valid_sources
    ]
