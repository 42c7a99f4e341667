"""Tests for settings loading and validation."""
from __future__ import annotations

import json

import pytest

from cosmogen.config import CacheConfig, GenerationConfig, PlacementConfig, SurfaceConfig
from cosmogen.errors import ConfigurationError


def test_defaults_are_valid() -> None:
    config = GenerationConfig().validate()
    assert config.placement.resolved_grid_width == 3
    assert config.surface.overlap_factor == pytest.approx(1.05)


def test_missing_or_malformed_settings_fall_back(tmp_path) -> None:
    assert GenerationConfig.from_settings(tmp_path / "absent.json") == GenerationConfig()
    broken = tmp_path / "settings.json"
    broken.write_text("{not json")
    assert GenerationConfig.from_settings(broken) == GenerationConfig()


def test_settings_are_parsed(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "logLevel": "DEBUG",
        "generation": {
            "worldSeed": 42,
            "placement": {"sectorSize": 2000, "margin": 0.2, "density": 3, "gridWidth": 2},
            "surface": {"craterCount": [2, 4], "overlapFactor": 1.2, "lightDirection": [1, 0, 1]},
            "cache": {"maxEntries": 8},
        },
    }))
    config = GenerationConfig.from_settings(path).validate()
    assert config.world_seed == 42
    assert config.placement == PlacementConfig(sector_size=2000.0, margin=0.2, density=3, grid_width=2)
    assert config.surface.crater_count == (2, 4)
    assert config.surface.overlap_factor == pytest.approx(1.2)
    assert config.surface.light_direction == (1.0, 0.0, 1.0)
    assert config.cache == CacheConfig(max_entries=8)


@pytest.mark.parametrize(
    "config",
    [
        PlacementConfig(margin=0.5),
        PlacementConfig(margin=-0.1),
        PlacementConfig(density=-1),
        PlacementConfig(density=10, grid_width=3),
        PlacementConfig(grid_width=0),
        PlacementConfig(scale_range=(1.0, 0.5)),
    ],
)
def test_invalid_placement(config: PlacementConfig) -> None:
    with pytest.raises(ConfigurationError):
        config.validate()


@pytest.mark.parametrize(
    "config",
    [
        SurfaceConfig(crater_count=(5, 2)),
        SurfaceConfig(crater_size=(0.0, 0.1)),
        SurfaceConfig(crater_depth=(0.5, 0.2)),
        SurfaceConfig(crater_size_steps=0),
        SurfaceConfig(overlap_factor=1.0),
        SurfaceConfig(noise_frequency=0.0),
        SurfaceConfig(normal_step=0),
        SurfaceConfig(light_direction=(0.0, 0.0, 0.0)),
    ],
)
def test_invalid_surface(config: SurfaceConfig) -> None:
    with pytest.raises(ConfigurationError):
        config.validate()


def test_invalid_cache() -> None:
    with pytest.raises(ConfigurationError):
        GenerationConfig(cache=CacheConfig(max_entries=0)).validate()


def test_crater_size_steps() -> None:
    sizes = SurfaceConfig(crater_size=(0.1, 0.4), crater_size_steps=4).crater_sizes
    assert sizes == pytest.approx((0.1, 0.2, 0.3, 0.4))
    assert sizes[-1] == 0.4
    assert SurfaceConfig(crater_size=(0.1, 0.4), crater_size_steps=1).crater_sizes == (0.1,)


def test_grid_width_follows_density() -> None:
    assert PlacementConfig(density=3).resolved_grid_width == 2
    assert PlacementConfig(density=10).resolved_grid_width == 4
    assert PlacementConfig(density=0).resolved_grid_width == 1
    assert PlacementConfig(density=3, grid_width=5).subsector_count == 25
