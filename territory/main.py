"""Entry point: one recompute of all faction territories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from territory.config import settings
from territory.engine.config import TerritoryConfig
from territory.engine.context import InfluenceSource, TerritoryContext
from territory.engine.errors import ComputationCancelled
from territory.engine.pipeline import Pipeline
from territory.models.sources import SourceRecord, coerce_source
from territory.models.territory import TerritoryResult
from territory.utils.color import css_color_to_hex

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ["layer0", "layer1", "layer2", "layer3"]
_registered = False


def configure_logging(level: str | None = None) -> None:
    """Root logging setup for hosts that have none of their own."""
    name = (level or settings.territory_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _register_transforms() -> None:
    """Import all stage modules so @transform decorators fire."""
    global _registered
    if _registered:
        return

    import importlib
    import pkgutil

    for layer_name in _LAYER_PACKAGES:
        package = importlib.import_module(f"territory.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package.__name__}.{module_name}")
    _registered = True


def create_pipeline() -> Pipeline:
    _register_transforms()
    return Pipeline()


def _resolve_sources(
    sources: Iterable[InfluenceSource | SourceRecord | Mapping[str, Any]],
    grid_size: float | None = None,
) -> list[InfluenceSource]:
    resolved: list[InfluenceSource] = []
    for item in sources:
        try:
            resolved.append(coerce_source(item, grid_size))
        except ValidationError as e:
            logger.warning("Skipping unreadable source record %r: %s", item, e.errors())
    return resolved


def _resolve_colors(faction_colors: Mapping[Hashable, str] | None) -> dict[Hashable, str]:
    colors: dict[Hashable, str] = {}
    for faction_id, raw in (faction_colors or {}).items():
        color = css_color_to_hex(raw)
        if color is None:
            logger.warning("Ignoring invalid color %r for faction %r", raw, faction_id)
            continue
        colors[faction_id] = color
    return colors


def compute_territories(
    sources: Iterable[InfluenceSource | SourceRecord | Mapping[str, Any]],
    config: TerritoryConfig | None = None,
    *,
    faction_colors: Mapping[Hashable, str] | None = None,
    should_cancel: Callable[[], bool] | None = None,
    grid_size: float | None = None,
) -> TerritoryResult:
    """Compute every faction's territory shapes from scratch.

    A pure function of its inputs: no state survives between calls, so the
    returned result fully replaces whatever the caller rendered before.
    ``grid_size`` is the catalog grid size in pixels, used to convert raw
    ``gRange`` records.
    ConfigurationError is raised for an invalid config; every other problem
    degrades to fewer shapes and is reported in ``result.errors``.
    """
    config = config or TerritoryConfig()
    config.validate()

    ctx = TerritoryContext(
        sources=_resolve_sources(sources, grid_size),
        config=config,
        faction_colors=_resolve_colors(faction_colors),
        should_cancel=should_cancel,
    )

    try:
        create_pipeline().run(ctx)
    except ComputationCancelled as e:
        logger.info("Territory computation cancelled: %s", e)
        return TerritoryResult(cancelled=True)

    return ctx.to_result()
