"""Pipeline orchestrator: runs stages in dependency order over one context."""

from __future__ import annotations

import logging
import time

from territory.engine.context import TerritoryContext
from territory.engine.errors import ComputationCancelled
from territory.engine.registry import Layer, TransformRegistry, get_registry

logger = logging.getLogger(__name__)

# Stages that only run when the config asks for diagnostics
DEBUG_TAG = "debug"


class Pipeline:
    """Orchestrates the territory stages.

    A failing stage is recorded in ``ctx.errors`` and the remaining stages still
    run on whatever state is present, so a failure costs shapes, never the call.
    Cancellation is the one exception that escapes.
    """

    def __init__(self, registry: TransformRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    def run(self, ctx: TerritoryContext) -> TerritoryContext:
        """Run every applicable stage on the given context."""
        start = time.perf_counter()

        skip_ids = self._adaptive_gate(ctx)
        requested = {s.id for s in self.registry.all()} - skip_ids
        ordered = self.registry.resolve_order(requested)

        logger.debug(
            "Pipeline: %d stages queued (%d skipped) for %d sources",
            len(ordered),
            len(skip_ids),
            len(ctx.sources),
        )

        for spec in ordered:
            self._run_stage(spec.id, spec.fn, ctx)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Territories: %d sources, %d factions, %d loops in %.0fms (%d stage errors)",
            ctx.num_sources,
            len(ctx.factions),
            len(ctx.loops),
            total,
            len(ctx.errors),
        )
        return ctx

    def run_layer(self, ctx: TerritoryContext, layer: Layer) -> TerritoryContext:
        """Run only the stages in a specific layer."""
        for spec in self.registry.get_layer(layer):
            self._run_stage(spec.id, spec.fn, ctx)
        return ctx

    def _run_stage(self, stage_id, fn, ctx: TerritoryContext) -> None:
        t0 = time.perf_counter()
        try:
            fn(ctx)
        except ComputationCancelled:
            raise
        except Exception as e:
            ctx.errors[stage_id] = str(e)
            logger.warning("  %s FAILED: %s", stage_id, e)
            return
        ctx.completed_transforms.add(stage_id)
        logger.debug("  %s completed in %.1fms", stage_id, (time.perf_counter() - t0) * 1000)

    def _adaptive_gate(self, ctx: TerritoryContext) -> set[str]:
        """Stages to skip for this context: diagnostics unless debug mode is on."""
        if ctx.config.debug_mode:
            return set()
        return {s.id for s in self.registry.with_tag(DEBUG_TAG)}
