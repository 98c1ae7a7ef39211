"""TerritoryContext: the per-call state object flowing through all transforms.

One context is created for every recompute and dropped once the result has been
built, so nothing computed here outlives a single call.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from territory.engine.config import TerritoryConfig
from territory.models.territory import DebugCircle, FactionTerritory, TerritoryResult

Point = tuple[float, float]
Segment = tuple[Point, Point]


def faction_sort_key(faction_id: Hashable) -> tuple[str, Any]:
    """Deterministic ordering for opaque faction keys, also across key types."""
    return (type(faction_id).__name__, faction_id)


@dataclass(frozen=True)
class InfluenceSource:
    """A point projecting a quadratic-falloff field for one faction."""

    x: float
    y: float
    radius: float
    power: float
    faction_id: Hashable = "neutral"

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def is_valid(self) -> bool:
        values = (self.x, self.y, self.radius, self.power)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.radius > 0 and self.power > 0


@dataclass
class DominanceGrid:
    """Winning faction and its strength at every grid node.

    ``winner`` holds an index into ``factions`` or -1 for unclaimed nodes.
    Arrays are indexed ``[row, col]`` with row along ``ys``.
    """

    xs: NDArray[np.float64]
    ys: NDArray[np.float64]
    factions: list[Hashable]
    winner: NDArray[np.int32]
    strength: NDArray[np.float64]

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.ys), len(self.xs))

    def winner_at(self, row: int, col: int) -> Hashable | None:
        idx = int(self.winner[row, col])
        return None if idx < 0 else self.factions[idx]

    def faction_field(self, faction_id: Hashable) -> NDArray[np.float64]:
        """Strength where ``faction_id`` already dominates, zero elsewhere."""
        try:
            idx = self.factions.index(faction_id)
        except ValueError:
            return np.zeros(self.shape)
        return np.where(self.winner == idx, self.strength, 0.0)


@dataclass
class ContourLoop:
    """A closed contour of one faction's field. The closing edge is implicit."""

    faction_id: Hashable
    points: NDArray[np.float64]
    area: float = 0.0
    # Index of the smallest enclosing loop across all factions, -1 at top level
    parent: int = -1
    # Number of enclosing loops across all factions
    depth: int = 0
    # Fill or hole, decided by same-faction nesting parity
    is_hole: bool = False
    # Index of the fill loop this hole is cut from
    owner: int = -1

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class TerritoryContext:
    """Shared state flowing through the entire pipeline."""

    # Sources as supplied by the catalog, before filtering
    sources: list[InfluenceSource] = field(default_factory=list)
    config: TerritoryConfig = field(default_factory=TerritoryConfig)
    # Explicit per-faction display colors (#rrggbb)
    faction_colors: dict[Hashable, str] = field(default_factory=dict)
    # Polled between grid row bands; returning True aborts the computation
    should_cancel: Callable[[], bool] | None = None

    # --- Layer 0: sources ---
    valid_sources: list[InfluenceSource] = field(default_factory=list)
    groups: dict[Hashable, list[InfluenceSource]] = field(default_factory=dict)
    factions: list[Hashable] = field(default_factory=list)
    # (min_x, min_y, max_x, max_y) including padding
    bounds: tuple[float, float, float, float] | None = None
    cell_size: float = 0.0
    xs: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    ys: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))

    # --- Layer 1: field ---
    grid: DominanceGrid | None = None

    # --- Layer 2: contours ---
    segments: dict[Hashable, list[Segment]] = field(default_factory=dict)
    loops: list[ContourLoop] = field(default_factory=list)
    dropped_chains: int = 0

    # --- Layer 3: topology / output ---
    territories: list[FactionTerritory] = field(default_factory=list)
    debug_shapes: list[DebugCircle] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def num_sources(self) -> int:
        return len(self.valid_sources)

    @property
    def is_empty(self) -> bool:
        return not self.valid_sources

    def to_result(self) -> TerritoryResult:
        grid_shape = self.grid.shape if self.grid is not None else (0, 0)
        return TerritoryResult(
            territories=list(self.territories),
            debug_shapes=list(self.debug_shapes),
            errors=dict(self.errors),
            cell_size=self.cell_size,
            grid_shape=grid_shape,
            dropped_chains=self.dropped_chains,
        )
