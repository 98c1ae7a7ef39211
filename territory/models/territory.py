"""Output models handed to the shape sink."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon


def _points_to_list(points: NDArray[np.float64]) -> list[list[float]]:
    return [[float(x), float(y)] for x, y in points]


@dataclass
class TerritoryShape:
    """One connected region of a faction: a filled outer loop minus its holes."""

    faction_id: Hashable
    outer_loop: NDArray[np.float64]
    hole_loops: list[NDArray[np.float64]] = field(default_factory=list)

    @property
    def polygon(self) -> Polygon:
        return Polygon(self.outer_loop, list(self.hole_loops))

    @property
    def area(self) -> float:
        return float(self.polygon.area)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outer_loop": _points_to_list(self.outer_loop),
            "hole_loops": [_points_to_list(h) for h in self.hole_loops],
        }


@dataclass
class FactionTerritory:
    """All regions of one faction plus its resolved display color."""

    faction_id: Hashable
    color: str
    shapes: list[TerritoryShape] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "faction_id": self.faction_id,
            "color": self.color,
            "shapes": [s.to_dict() for s in self.shapes],
        }


@dataclass
class DebugCircle:
    """Raw influence radius of one source, emitted only in debug mode."""

    faction_id: Hashable
    color: str
    center: tuple[float, float]
    radius: float
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "faction_id": self.faction_id,
            "color": self.color,
            "center": [float(self.center[0]), float(self.center[1])],
            "radius": float(self.radius),
            "points": _points_to_list(self.points),
        }


@dataclass
class TerritoryResult:
    """Complete output of one recompute. Owned by the caller."""

    territories: list[FactionTerritory] = field(default_factory=list)
    debug_shapes: list[DebugCircle] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    cell_size: float = 0.0
    grid_shape: tuple[int, int] = (0, 0)
    dropped_chains: int = 0
    cancelled: bool = False

    @property
    def is_empty(self) -> bool:
        return not any(t.shapes for t in self.territories)

    @property
    def shape_count(self) -> int:
        return sum(len(t.shapes) for t in self.territories)

    def for_faction(self, faction_id: Hashable) -> FactionTerritory | None:
        for territory in self.territories:
            if territory.faction_id == faction_id:
                return territory
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "territories": [t.to_dict() for t in self.territories],
            "debug_shapes": [d.to_dict() for d in self.debug_shapes],
            "errors": dict(self.errors),
            "cell_size": self.cell_size,
            "grid_shape": list(self.grid_shape),
            "dropped_chains": self.dropped_chains,
            "cancelled": self.cancelled,
        }
