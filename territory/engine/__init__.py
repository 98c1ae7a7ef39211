"""Faction territory engine: dominance field, contours, hierarchy."""

from territory.engine.config import TerritoryConfig
from territory.engine.context import InfluenceSource, TerritoryContext
from territory.engine.errors import ComputationCancelled, ConfigurationError, TerritoryError
from territory.engine.pipeline import Pipeline
from territory.engine.registry import Layer, get_registry, transform

__all__ = [
    "transform",
    "Layer",
    "get_registry",
    "TerritoryConfig",
    "TerritoryContext",
    "InfluenceSource",
    "Pipeline",
    "TerritoryError",
    "ConfigurationError",
    "ComputationCancelled",
]
