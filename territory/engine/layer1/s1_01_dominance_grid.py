"""S1.01: Dominance Grid.

Samples every grid node once and keeps only the winning faction and its
strength. Equal strengths go to the faction that sorts first.
"""

from __future__ import annotations

from territory.engine.context import DominanceGrid, TerritoryContext
from territory.engine.registry import Layer, transform
from territory.utils.field import sample_dominance

# Grid rows sampled per vectorized band; cancellation is polled between bands
_BAND_ROWS = 32


@transform(
    id="S1.01",
    layer=Layer.FIELD,
    dependencies=["S0.02"],
    description="Sample the winning faction and its strength at every grid node",
)
def dominance_grid(ctx: TerritoryContext) -> None:
    if ctx.is_empty or len(ctx.xs) == 0:
        return

    winner, strength = sample_dominance(
        ctx.groups,
        ctx.factions,
        ctx.xs,
        ctx.ys,
        band_rows=_BAND_ROWS,
        should_cancel=ctx.should_cancel,
    )
    ctx.grid = DominanceGrid(
        xs=ctx.xs,
        ys=ctx.ys,
        factions=list(ctx.factions),
        winner=winner,
        strength=strength,
    )
