"""Stage registry: each pipeline stage is a plain function registered by decorator.

Usage:
    @transform(id="S2.01", layer=Layer.CONTOURS, dependencies=["S1.01"])
    def marching_squares(ctx: TerritoryContext) -> None:
        for faction_id in ctx.factions:
            ctx.segments[faction_id] = trace_segments(...)

Stages only read and write the context they are handed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from territory.engine.context import TerritoryContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    SOURCES = 0
    FIELD = 1
    CONTOURS = 2
    TOPOLOGY = 3


@dataclass
class TransformSpec:
    id: str
    layer: Layer
    fn: Callable[["TerritoryContext"], None]
    dependencies: list[str] = field(default_factory=list)
    tags: set[str] = field(default_factory=set)
    description: str = ""


class TransformRegistry:
    """Registry of pipeline stages keyed by stage id."""

    def __init__(self) -> None:
        self._transforms: dict[str, TransformSpec] = {}

    def register(self, spec: TransformSpec) -> None:
        if spec.id in self._transforms:
            raise ValueError(f"Duplicate transform ID: {spec.id}")
        self._transforms[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, transform_id: str) -> TransformSpec:
        return self._transforms[transform_id]

    def get_layer(self, layer: Layer) -> list[TransformSpec]:
        return sorted(
            (s for s in self._transforms.values() if s.layer == layer),
            key=lambda s: s.id,
        )

    def with_tag(self, tag: str) -> list[TransformSpec]:
        return sorted(
            (s for s in self._transforms.values() if tag in s.tags),
            key=lambda s: s.id,
        )

    def all(self) -> list[TransformSpec]:
        return sorted(self._transforms.values(), key=lambda s: (s.layer, s.id))

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[TransformSpec]:
        """Dependency order for the requested stages (all when None).

        Missing dependencies are pulled in. Ties are broken by (layer, id).
        """
        pool = self._transforms
        if requested_ids is not None:
            needed: set[str] = set()
            stack = list(requested_ids)
            while stack:
                tid = stack.pop()
                if tid in needed or tid not in pool:
                    continue
                needed.add(tid)
                stack.extend(pool[tid].dependencies)
            pool = {k: v for k, v in pool.items() if k in needed}

        remaining = {tid: {d for d in spec.dependencies if d in pool} for tid, spec in pool.items()}
        ordered: list[TransformSpec] = []
        while remaining:
            ready = [pool[tid] for tid, deps in remaining.items() if not deps]
            if not ready:
                raise ValueError(f"Circular dependency detected among: {set(remaining)}")
            spec = min(ready, key=lambda s: (s.layer, s.id))
            ordered.append(spec)
            del remaining[spec.id]
            for deps in remaining.values():
                deps.discard(spec.id)
        return ordered

    @property
    def count(self) -> int:
        return len(self._transforms)


# Module-level singleton
_registry = TransformRegistry()


def get_registry() -> TransformRegistry:
    return _registry


def transform(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    tags: set[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function in the module-level registry."""

    def decorator(fn: Callable[["TerritoryContext"], None]):
        _registry.register(
            TransformSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=dependencies or [],
                tags=tags or set(),
                description=description,
            )
        )
        return fn

    return decorator
