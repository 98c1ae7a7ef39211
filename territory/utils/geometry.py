"""Leaf-node geometry helpers. No engine imports.

Loops are (N, 2) arrays without a repeated closing vertex.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def signed_area(points: NDArray[np.float64]) -> float:
    """Shoelace formula for signed area. Positive = CCW, Negative = CW (y up)."""
    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def polygon_area(points: NDArray[np.float64]) -> float:
    return abs(signed_area(points))


def winding_direction(points: NDArray[np.float64]) -> int:
    """Return 1 for CCW, -1 for CW, 0 if degenerate."""
    sa = signed_area(points)
    if sa > 0:
        return 1
    elif sa < 0:
        return -1
    return 0


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def point_in_polygon(point: tuple[float, float], polygon_points: NDArray[np.float64]) -> bool:
    """Even-odd ray casting along +x."""
    if len(polygon_points) < 3:
        return False
    px, py = point
    xi = polygon_points[:, 0]
    yi = polygon_points[:, 1]
    xj = np.roll(xi, 1)
    yj = np.roll(yi, 1)

    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
    crossings = np.count_nonzero(straddles & (px < x_cross))
    return bool(crossings % 2)


def sample_vertices(points: NDArray[np.float64], count: int) -> NDArray[np.float64]:
    """Up to ``count`` vertices spread evenly along the loop."""
    n = len(points)
    if n <= count:
        return points
    idx = np.linspace(0, n, num=count, endpoint=False).astype(int)
    return points[idx]


def loop_inside_loop(
    inner: NDArray[np.float64],
    outer: NDArray[np.float64],
    samples: int = 3,
) -> bool:
    """True if every sampled vertex of ``inner`` lies inside ``outer``.

    Contour loops never cross, so a few vertices decide containment.
    """
    if len(inner) == 0 or len(outer) < 3:
        return False
    ox0, oy0, ox1, oy1 = bbox(outer)
    ix0, iy0, ix1, iy1 = bbox(inner)
    if ix0 < ox0 or iy0 < oy0 or ix1 > ox1 or iy1 > oy1:
        return False
    return all(
        point_in_polygon((float(p[0]), float(p[1])), outer)
        for p in sample_vertices(inner, samples)
    )


def circle_points(
    center: tuple[float, float],
    radius: float,
    segments: int = 64,
) -> NDArray[np.float64]:
    """Regular polygon approximating a circle."""
    angles = np.linspace(0.0, 2 * np.pi, num=segments, endpoint=False)
    return np.column_stack([
        center[0] + radius * np.cos(angles),
        center[1] + radius * np.sin(angles),
    ])
