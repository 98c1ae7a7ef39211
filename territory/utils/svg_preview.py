"""Standalone SVG previews of a territory result, for inspection and debugging.

Shapes are drawn with the even-odd fill rule so holes show through. Uses only
shapely coords and string formatting.
"""

from __future__ import annotations

from shapely.geometry import Polygon

from territory.models.territory import TerritoryResult
from territory.utils.geometry import bbox

_MARGIN = 10.0


def _ring_path(coords) -> str:
    coords = list(coords)
    if len(coords) < 3:
        return ""
    d = f"M {coords[0][0]:.1f},{coords[0][1]:.1f}"
    for x, y in coords[1:]:
        d += f" L {x:.1f},{y:.1f}"
    return d + " Z"


def polygon_to_svg_path(
    poly: Polygon,
    fill: str = "#888888",
    opacity: float = 0.25,
) -> str:
    """One <path> for a polygon with holes."""
    if poly is None or poly.is_empty:
        return ""
    rings = [_ring_path(poly.exterior.coords)]
    rings.extend(_ring_path(interior.coords) for interior in poly.interiors)
    d = " ".join(r for r in rings if r)
    if not d:
        return ""
    return (
        f'<path d="{d}" fill="{fill}" fill-opacity="{opacity}" fill-rule="evenodd" '
        f'stroke="{fill}" stroke-width="3" stroke-opacity="0.9"/>'
    )


def _svg_wrap(content: str, x0: float, y0: float, w: float, h: float) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{x0:.1f} {y0:.1f} {w:.1f} {h:.1f}"'
        f' width="{w:.1f}" height="{h:.1f}">'
        f"\n{content}\n</svg>"
    )


def render_svg_preview(result: TerritoryResult) -> str:
    """Every territory shape, plus debug circles when present, as one SVG document."""
    paths: list[str] = []
    extents: list[tuple[float, float, float, float]] = []

    for territory in result.territories:
        for shape in territory.shapes:
            paths.append(polygon_to_svg_path(shape.polygon, fill=territory.color))
            extents.append(bbox(shape.outer_loop))

    for circle in result.debug_shapes:
        d = _ring_path(circle.points)
        if d:
            paths.append(
                f'<path d="{d}" fill="none" stroke="{circle.color}" '
                f'stroke-width="2" stroke-opacity="0.5"/>'
            )
            extents.append(bbox(circle.points))

    if not extents:
        return _svg_wrap("", 0.0, 0.0, 1.0, 1.0)

    x0 = min(e[0] for e in extents) - _MARGIN
    y0 = min(e[1] for e in extents) - _MARGIN
    x1 = max(e[2] for e in extents) + _MARGIN
    y1 = max(e[3] for e in extents) + _MARGIN
    return _svg_wrap("\n".join(p for p in paths if p), x0, y0, x1 - x0, y1 - y0)
