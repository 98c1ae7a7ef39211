"""S0.02: Grid Bounds & Resolution.

Bounds are the union of every source circle plus a fixed padding, so the field
is zero along the whole grid border and every contour closes. The cell size is
coarsened when nodes x sources would exceed the configured work budget.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from territory.engine.context import TerritoryContext
from territory.engine.registry import Layer, transform

logger = logging.getLogger(__name__)


def adaptive_cell_size(
    width: float,
    height: float,
    num_sources: int,
    cell_size: float,
    max_work: int,
    min_cell_size: float,
    max_cell_size: float,
) -> float:
    """Cell size keeping (rows+1) * (cols+1) * sources near ``max_work``."""
    if max_work <= 0:
        return cell_size
    cols = math.ceil(max(1.0, width) / cell_size)
    rows = math.ceil(max(1.0, height) / cell_size)
    work = (rows + 1) * (cols + 1) * max(1, num_sources)
    if work <= max_work:
        return cell_size
    factor = math.sqrt(work / max_work)
    upper = max(cell_size, max_cell_size)
    return min(upper, max(min_cell_size, cell_size * factor))


@transform(
    id="S0.02",
    layer=Layer.SOURCES,
    dependencies=["S0.01"],
    description="Compute padded bounds and grid node coordinates",
)
def grid_bounds(ctx: TerritoryContext) -> None:
    if ctx.is_empty:
        return

    cfg = ctx.config
    pad = cfg.boundary_padding
    min_x = min(s.x - s.radius for s in ctx.valid_sources) - pad
    min_y = min(s.y - s.radius for s in ctx.valid_sources) - pad
    max_x = max(s.x + s.radius for s in ctx.valid_sources) + pad
    max_y = max(s.y + s.radius for s in ctx.valid_sources) + pad
    ctx.bounds = (min_x, min_y, max_x, max_y)

    width = max_x - min_x
    height = max_y - min_y
    cell = adaptive_cell_size(
        width,
        height,
        ctx.num_sources,
        cfg.cell_size,
        cfg.max_work,
        cfg.min_cell_size,
        cfg.max_cell_size,
    )
    if cell != cfg.cell_size:
        logger.info("Coarsened cell size %.1f -> %.1f for %d sources", cfg.cell_size, cell, ctx.num_sources)
    ctx.cell_size = cell

    cols = max(1, math.ceil(width / cell))
    rows = max(1, math.ceil(height / cell))
    ctx.xs = min_x + np.arange(cols + 1, dtype=np.float64) * cell
    ctx.ys = min_y + np.arange(rows + 1, dtype=np.float64) * cell
