"""S0.01: Source Filter & Grouping.

Drops sources with a non-positive or non-finite radius or power (unconfigured
objects are normal user data, not errors) and groups the rest by faction.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable

from territory.engine.context import InfluenceSource, TerritoryContext, faction_sort_key
from territory.engine.registry import Layer, transform

logger = logging.getLogger(__name__)


@transform(
    id="S0.01",
    layer=Layer.SOURCES,
    description="Filter degenerate sources and group the rest by faction",
)
def source_filter(ctx: TerritoryContext) -> None:
    ctx.valid_sources = [s for s in ctx.sources if s.is_valid]

    skipped = len(ctx.sources) - len(ctx.valid_sources)
    if skipped:
        logger.debug("Skipped %d source(s) with degenerate radius or power", skipped)

    groups: dict[Hashable, list[InfluenceSource]] = {}
    for source in ctx.valid_sources:
        groups.setdefault(source.faction_id, []).append(source)

    ctx.factions = sorted(groups, key=faction_sort_key)
    ctx.groups = {f: groups[f] for f in ctx.factions}
