"""Contour extraction: marching squares segments and segment stitching."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Segment = tuple[Point, Point]

# Corner bits: top-left=1, top-right=2, bottom-right=4, bottom-left=8.
# Edge k runs from corner k to corner (k+1) % 4: top=0, right=1, bottom=2, left=3.
MARCHING_SQUARES_CASES: dict[int, tuple[tuple[int, int], ...]] = {
    0: (),
    1: ((3, 0),),
    2: ((0, 1),),
    3: ((3, 1),),
    4: ((1, 2),),
    5: ((3, 0), (1, 2)),
    6: ((0, 2),),
    7: ((3, 2),),
    8: ((2, 3),),
    9: ((2, 0),),
    10: ((0, 1), (2, 3)),
    11: ((2, 1),),
    12: ((1, 3),),
    13: ((1, 0),),
    14: ((0, 3),),
    15: (),
}

# Checkerboard codes, split as two independent diagonal connections
AMBIGUOUS_CASES = frozenset({5, 10})

# Points closer than this are the same vertex
COINCIDENT_EPS = 1e-9


def interpolate_crossing(
    p0: Point,
    p1: Point,
    v0: float,
    v1: float,
    threshold: float,
    epsilon: float = 0.001,
) -> Point:
    """Point on edge p0-p1 where the linearly interpolated field equals ``threshold``.

    Endpoints are put in a fixed order first so the two cells sharing an edge
    produce bit-identical crossings.
    """
    if p1 < p0:
        p0, p1, v0, v1 = p1, p0, v1, v0
    if abs(v0 - v1) < epsilon:
        return ((p0[0] + p1[0]) / 2, (p0[1] + p1[1]) / 2)
    t = (threshold - v0) / (v1 - v0)
    return (p0[0] + t * (p1[0] - p0[0]), p0[1] + t * (p1[1] - p0[1]))


def cell_codes(field: NDArray[np.float64], threshold: float) -> NDArray[np.int8]:
    """4-bit corner classification for every cell of the node grid."""
    above = (field >= threshold).astype(np.int8)
    return (
        above[:-1, :-1] * 1
        | above[:-1, 1:] * 2
        | above[1:, 1:] * 4
        | above[1:, :-1] * 8
    ).astype(np.int8)


def trace_segments(
    field: NDArray[np.float64],
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    threshold: float,
    epsilon: float = 0.001,
) -> list[Segment]:
    """Unordered boundary segments of ``field >= threshold`` over the node grid."""
    if field.shape[0] < 2 or field.shape[1] < 2:
        return []

    codes = cell_codes(field, threshold)
    rows, cols = np.nonzero((codes != 0) & (codes != 15))
    segments: list[Segment] = []

    for r, c in zip(rows.tolist(), cols.tolist()):
        code = int(codes[r, c])
        x0, x1 = float(xs[c]), float(xs[c + 1])
        y0, y1 = float(ys[r]), float(ys[r + 1])
        corners = ((x0, y0), (x1, y0), (x1, y1), (x0, y1))
        values = (
            float(field[r, c]),
            float(field[r, c + 1]),
            float(field[r + 1, c + 1]),
            float(field[r + 1, c]),
        )

        def edge_point(k: int) -> Point:
            j = (k + 1) % 4
            return interpolate_crossing(
                corners[k], corners[j], values[k], values[j], threshold, epsilon
            )

        for a, b in MARCHING_SQUARES_CASES[code]:
            pa, pb = edge_point(a), edge_point(b)
            if pa != pb:
                segments.append((pa, pb))

    return segments


def stitch_segments(
    segments: list[Segment],
    epsilon: float,
) -> tuple[list[NDArray[np.float64]], int]:
    """Greedily join segments into closed loops.

    A chain grows from its open end by taking the pool segment with the nearest
    endpoint within ``epsilon``. It closes once it has 3+ points and its start
    is within ``epsilon`` and no pool endpoint is nearer. Chains that never close
    are dropped.

    Returns (loops, dropped_chain_count).
    """
    if not segments:
        return [], 0

    seg = np.asarray(segments, dtype=np.float64)  # (N, 2, 2)
    starts = seg[:, 0]
    ends = seg[:, 1]
    alive = np.ones(len(seg), dtype=bool)
    eps2 = epsilon * epsilon

    loops: list[NDArray[np.float64]] = []
    dropped = 0

    while alive.any():
        first = int(np.flatnonzero(alive)[-1])
        alive[first] = False
        chain = [seg[first, 0], seg[first, 1]]
        closed = False

        while True:
            tip = chain[-1]
            close_d2 = float(np.sum((tip - chain[0]) ** 2)) if len(chain) >= 3 else np.inf

            best_d2 = np.inf
            best_idx = -1
            best_flip = False
            if alive.any():
                d_start = np.sum((starts - tip) ** 2, axis=1)
                d_end = np.sum((ends - tip) ** 2, axis=1)
                d_start[~alive] = np.inf
                d_end[~alive] = np.inf
                i_start = int(np.argmin(d_start))
                i_end = int(np.argmin(d_end))
                if d_start[i_start] <= d_end[i_end]:
                    best_idx, best_d2, best_flip = i_start, float(d_start[i_start]), False
                else:
                    best_idx, best_d2, best_flip = i_end, float(d_end[i_end]), True

            if close_d2 <= eps2 and close_d2 <= best_d2:
                closed = True
                break
            if best_idx < 0 or best_d2 > eps2:
                break

            alive[best_idx] = False
            chain.append(seg[best_idx, 0] if best_flip else seg[best_idx, 1])

        if not closed:
            dropped += 1
            continue

        loop = np.array(chain, dtype=np.float64)
        if np.sum((loop[-1] - loop[0]) ** 2) <= COINCIDENT_EPS:
            loop = loop[:-1]
        if len(loop) >= 3:
            loops.append(loop)

    if dropped:
        logger.debug("Stitching dropped %d open chain(s) of %d segments", dropped, len(seg))
    return loops, dropped
