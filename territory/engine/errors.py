"""Exception types raised by the territory engine."""

from __future__ import annotations


class TerritoryError(Exception):
    """Base class for territory engine errors."""


class ConfigurationError(TerritoryError, ValueError):
    """Invalid configuration value. Raised immediately, never tolerated."""


class ComputationCancelled(TerritoryError):
    """The caller's cancellation hook fired between grid row bands."""
