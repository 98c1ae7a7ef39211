"""Tests for configuration and settings."""

import logging

import pytest

from territory.config import Settings
from territory.engine.config import TerritoryConfig
from territory.engine.errors import ConfigurationError, TerritoryError
from territory.main import configure_logging


def test_defaults():
    cfg = TerritoryConfig()
    assert cfg.cell_size == 25.0
    assert cfg.contour_threshold == 0.3
    assert cfg.boundary_padding == 50.0
    assert cfg.debug_mode is False
    assert cfg.stitch_epsilon_cells == 1.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"cell_size": 0},
        {"cell_size": -5},
        {"cell_size": float("nan")},
        {"contour_threshold": 0.0},
        {"contour_threshold": 1.0},
        {"boundary_padding": -1},
        {"stitch_epsilon_cells": 0},
        {"containment_samples": 0},
        {"max_work": -1},
        {"min_cell_size": 50, "max_cell_size": 10},
        {"debug_circle_segments": 2},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        TerritoryConfig(**overrides)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(ConfigurationError, TerritoryError)


def test_validate_catches_later_mutation():
    cfg = TerritoryConfig()
    cfg.cell_size = 0
    with pytest.raises(ConfigurationError):
        cfg.validate()


def test_from_settings_with_overrides():
    settings = Settings(territory_cell_size=10, territory_debug_mode=True)
    cfg = TerritoryConfig.from_settings(settings, contour_threshold=0.5)
    assert cfg.cell_size == 10
    assert cfg.debug_mode is True
    assert cfg.contour_threshold == 0.5


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("TERRITORY_CELL_SIZE", "12.5")
    monkeypatch.setenv("TERRITORY_DEBUG_MODE", "true")
    settings = Settings()
    assert settings.territory_cell_size == 12.5
    assert settings.territory_debug_mode is True


def test_configure_logging_accepts_unknown_level():
    configure_logging("not-a-level")
    configure_logging("debug")
    assert logging.getLogger("territory").getEffectiveLevel() <= logging.CRITICAL
