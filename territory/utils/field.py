"""Influence field sampling. Quadratic falloff, summed per faction."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from territory.engine.errors import ComputationCancelled

if TYPE_CHECKING:
    from territory.engine.context import InfluenceSource

# Relative tolerance under which two faction strengths count as tied
TIE_TOLERANCE = 1e-12


def strength(source: InfluenceSource, point: tuple[float, float]) -> float:
    """``power * (1 - (d/r)^2)`` inside the radius, 0 outside."""
    r2 = source.radius * source.radius
    if r2 <= 0:
        return 0.0
    dx = point[0] - source.x
    dy = point[1] - source.y
    d2 = dx * dx + dy * dy
    if d2 > r2:
        return 0.0
    return source.power * max(0.0, 1.0 - d2 / r2)


def faction_strength(
    sources: Iterable[InfluenceSource],
    point: tuple[float, float],
    faction_id: Hashable,
) -> float:
    return sum(strength(s, point) for s in sources if s.faction_id == faction_id)


def dominant_faction(
    sources: Sequence[InfluenceSource],
    point: tuple[float, float],
    factions: Sequence[Hashable],
) -> tuple[Hashable | None, float]:
    """(winner, strength) at one point; ``factions`` order decides exact ties."""
    best: Hashable | None = None
    best_strength = 0.0
    for faction_id in factions:
        total = faction_strength(sources, point, faction_id)
        if best is None:
            if total > 0:
                best, best_strength = faction_id, total
        elif total > best_strength * (1.0 + TIE_TOLERANCE):
            best = faction_id
            best_strength = total
    return best, best_strength


def strength_field(
    sources: Iterable[InfluenceSource],
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Summed strength of ``sources`` at every node of the ``ys`` x ``xs`` mesh."""
    gx, gy = np.meshgrid(xs, ys)
    total = np.zeros_like(gx, dtype=np.float64)
    for s in sources:
        r2 = s.radius * s.radius
        d2 = (gx - s.x) ** 2 + (gy - s.y) ** 2
        inside = d2 <= r2
        total[inside] += s.power * (1.0 - d2[inside] / r2)
    return total


def sample_dominance(
    groups: dict[Hashable, list[InfluenceSource]],
    factions: Sequence[Hashable],
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    *,
    band_rows: int = 32,
    should_cancel: Callable[[], bool] | None = None,
) -> tuple[NDArray[np.int32], NDArray[np.float64]]:
    """Winner index and winning strength for every node, one band of rows at a time.

    Factions within a relative TIE_TOLERANCE of the maximum are tied and
    the earliest in ``factions`` wins. Nodes where every faction is 0 get -1.
    """
    rows, cols = len(ys), len(xs)
    winner = np.full((rows, cols), -1, dtype=np.int32)
    best = np.zeros((rows, cols), dtype=np.float64)
    if not factions or rows == 0 or cols == 0:
        return winner, best

    for start in range(0, rows, band_rows):
        if should_cancel is not None and should_cancel():
            raise ComputationCancelled(f"cancelled at grid row {start}/{rows}")

        band_ys = ys[start : start + band_rows]
        stack = np.stack([strength_field(groups[f], xs, band_ys) for f in factions])
        top = stack.max(axis=0)
        tied = stack >= top * (1.0 - TIE_TOLERANCE)
        idx = np.argmax(tied, axis=0).astype(np.int32)
        chosen = np.take_along_axis(stack, idx[np.newaxis], axis=0)[0]

        claimed = top > 0
        winner[start : start + len(band_ys)] = np.where(claimed, idx, -1)
        best[start : start + len(band_ys)] = np.where(claimed, chosen, 0.0)

    return winner, best
