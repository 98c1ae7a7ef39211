"""Territory configuration: grid resolution, contour policy and stitching tolerances."""

from __future__ import annotations

import math
from dataclasses import dataclass

from territory.engine.errors import ConfigurationError


@dataclass
class TerritoryConfig:
    """Controls grid sampling, contour tracing and debug output."""

    # Grid resolution in canvas units
    cell_size: float = 25.0

    # Marching squares iso-level
    contour_threshold: float = 0.3

    # Margin added around the union of source circles
    boundary_padding: float = 50.0

    # Emit source radius circles as auxiliary shapes
    debug_mode: bool = False

    # Endpoint match distance for stitching, in grid cells
    stitch_epsilon_cells: float = 1.5

    # Below this value difference an edge crossing snaps to the edge midpoint
    interpolation_epsilon: float = 0.001

    # Child vertices sampled for the point-in-polygon containment test
    containment_samples: int = 3

    # Grid coarsening budget: nodes * sources. 0 disables coarsening.
    max_work: int = 1_200_000
    min_cell_size: float = 5.0
    max_cell_size: float = 100.0

    # Polygon segments for debug radius circles
    debug_circle_segments: int = 64

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError on values that can only be programming mistakes."""
        if not math.isfinite(self.cell_size) or self.cell_size <= 0:
            raise ConfigurationError(f"cell_size must be positive, got {self.cell_size!r}")
        if not 0.0 < self.contour_threshold < 1.0:
            raise ConfigurationError(
                f"contour_threshold must lie in (0, 1), got {self.contour_threshold!r}"
            )
        if not math.isfinite(self.boundary_padding) or self.boundary_padding < 0:
            raise ConfigurationError(
                f"boundary_padding must be non-negative, got {self.boundary_padding!r}"
            )
        if self.stitch_epsilon_cells <= 0:
            raise ConfigurationError(
                f"stitch_epsilon_cells must be positive, got {self.stitch_epsilon_cells!r}"
            )
        if self.interpolation_epsilon < 0:
            raise ConfigurationError(
                f"interpolation_epsilon must be non-negative, got {self.interpolation_epsilon!r}"
            )
        if self.containment_samples < 1:
            raise ConfigurationError(
                f"containment_samples must be at least 1, got {self.containment_samples!r}"
            )
        if self.max_work < 0:
            raise ConfigurationError(f"max_work must be non-negative, got {self.max_work!r}")
        if self.min_cell_size <= 0 or self.max_cell_size < self.min_cell_size:
            raise ConfigurationError(
                f"invalid cell size clamp [{self.min_cell_size!r}, {self.max_cell_size!r}]"
            )
        if self.debug_circle_segments < 3:
            raise ConfigurationError(
                f"debug_circle_segments must be at least 3, got {self.debug_circle_segments!r}"
            )

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> TerritoryConfig:
        """Build a config from environment settings, with keyword overrides on top."""
        if settings is None:
            from territory.config import settings as env_settings

            settings = env_settings

        values = {
            "cell_size": settings.territory_cell_size,
            "contour_threshold": settings.territory_contour_threshold,
            "boundary_padding": settings.territory_boundary_padding,
            "debug_mode": settings.territory_debug_mode,
        }
        values.update(overrides)
        return cls(**values)
