"""Shared test fixtures."""

from __future__ import annotations

import pytest

from territory.engine.config import TerritoryConfig
from territory.engine.context import InfluenceSource


# One isolated source: contour at radius 100 * sqrt(0.7) ~ 83.7
SINGLE_SOURCE = [InfluenceSource(x=0, y=0, radius=100, power=1, faction_id="A")]

# Same faction, overlapping fields: one merged region
MERGED_PAIR = [
    InfluenceSource(x=0, y=0, radius=40, power=1, faction_id="A"),
    InfluenceSource(x=50, y=0, radius=40, power=1, faction_id="A"),
]

# Different factions, far apart
SEPARATE_PAIR = [
    InfluenceSource(x=0, y=0, radius=50, power=1, faction_id="A"),
    InfluenceSource(x=300, y=0, radius=50, power=1, faction_id="B"),
]

# Weak wide A around a strong small B: A ring with a hole, B island inside it.
# Both strengths are ~0.43 at the dominance boundary (r ~ 75), so B's contour
# sits inside A's hole contour.
POCKET = [
    InfluenceSource(x=0, y=0, radius=400, power=0.45, faction_id="A"),
    InfluenceSource(x=0, y=0, radius=100, power=1, faction_id="B"),
]

# Strong B pocket: strengths ~0.97 at the dominance boundary
STRONG_POCKET = [
    InfluenceSource(x=0, y=0, radius=300, power=1, faction_id="A"),
    InfluenceSource(x=0, y=0, radius=60, power=5, faction_id="B"),
]

# Eight A sources on a circle of radius 200: a ring with an unclaimed center
RING = [
    InfluenceSource(x=x, y=y, radius=100, power=1, faction_id="A")
    for x, y in [
        (200, 0), (141.42, 141.42), (0, 200), (-141.42, 141.42),
        (-200, 0), (-141.42, -141.42), (0, -200), (141.42, -141.42),
    ]
]


@pytest.fixture
def fine_config() -> TerritoryConfig:
    return TerritoryConfig(cell_size=10)


@pytest.fixture
def single_source() -> list[InfluenceSource]:
    return list(SINGLE_SOURCE)


@pytest.fixture
def merged_pair() -> list[InfluenceSource]:
    return list(MERGED_PAIR)


@pytest.fixture
def pocket() -> list[InfluenceSource]:
    return list(POCKET)
