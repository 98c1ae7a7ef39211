"""Source catalog input records."""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from territory.engine.context import InfluenceSource
from territory.utils.color import normalize_faction_key

# Catalog grid size in pixels when the caller does not supply one
DEFAULT_GRID_SIZE = 100.0

_FACTION_KEYS = ("faction_id", "factionId", "faction")


def _coerce_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if not math.isnan(result) else default


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class SourceRecord(BaseModel):
    """One influence source as reported by the catalog.

    Accepts both the plain field names and the catalog's actor attribute names
    (``gRange``, ``gPower``, ``gFaction``, legacy ``gSide``). ``gRange`` is in
    grid units x100 and is converted to pixels with the ``grid_size`` validation
    context (default 100 px). Plain ``radius`` is taken as pixels. A missing or
    unreadable power counts as 1, a missing or unreadable radius as 0 (such a
    source is filtered later).
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    radius: float = Field(
        default=0.0,
        validation_alias=AliasChoices("radius", "gRange", "range"),
    )
    power: float = Field(
        default=1.0,
        validation_alias=AliasChoices("power", "gPower"),
    )
    faction_id: Hashable = Field(
        default="neutral",
        validation_alias=AliasChoices("faction_id", "factionId", "faction", "gFaction"),
    )

    @model_validator(mode="before")
    @classmethod
    def _catalog_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if "gRange" in data and "radius" not in data and "range" not in data:
            grid_size = (info.context or {}).get("grid_size") or DEFAULT_GRID_SIZE
            data["gRange"] = _coerce_float(data["gRange"], 0.0) / 100 * grid_size
        if not any(k in data for k in _FACTION_KEYS) and _is_blank(data.get("gFaction")):
            if not _is_blank(data.get("gSide")):
                data["gFaction"] = data["gSide"]
        return data

    @field_validator("radius", mode="before")
    @classmethod
    def _radius(cls, v: Any) -> float:
        return _coerce_float(v, 0.0)

    @field_validator("power", mode="before")
    @classmethod
    def _power(cls, v: Any) -> float:
        return _coerce_float(v, 1.0)

    @field_validator("faction_id", mode="before")
    @classmethod
    def _faction(cls, v: Any) -> Hashable:
        if v is None or isinstance(v, str):
            return normalize_faction_key(v)
        return v

    def to_source(self) -> InfluenceSource:
        return InfluenceSource(
            x=self.x,
            y=self.y,
            radius=self.radius,
            power=self.power,
            faction_id=self.faction_id,
        )


def coerce_source(
    item: InfluenceSource | SourceRecord | Mapping[str, Any],
    grid_size: float | None = None,
) -> InfluenceSource:
    """Turn any accepted input form into an InfluenceSource.

    ``grid_size`` converts catalog ``gRange`` values; it has no effect on
    sources that already carry a pixel radius.

    Raises pydantic.ValidationError for mappings without usable coordinates.
    """
    if isinstance(item, InfluenceSource):
        return item
    if isinstance(item, SourceRecord):
        return item.to_source()
    return SourceRecord.model_validate(item, context={"grid_size": grid_size}).to_source()
