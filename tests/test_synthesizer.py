"""Tests for surface texture synthesis."""
from __future__ import annotations

import logging

import numpy as np
import pytest

from cosmogen.config import SurfaceConfig
from cosmogen.engine.logger import GenLogger, LoggerConfig
from cosmogen.errors import ConfigurationError
from cosmogen.surface.noise import LatticeCache, disc_coordinates, fractal_noise, spherify
from cosmogen.surface.synthesizer import (
    LUNAR_GRAY,
    SurfaceSynthesizer,
    SurfaceType,
    estimate_normals,
    palette_indices,
    shade,
    surface_type_for,
    synthesize,
)
from cosmogen.world.bodies import BodyKind


def test_synthesis_is_byte_identical() -> None:
    first = synthesize(7, 32)
    second = SurfaceSynthesizer().synthesize(7, 32)
    assert first.pixels == second.pixels
    assert first.digest() == second.digest()
    assert len(first.pixels) == 32 * 32 * 4


def test_disc_masking() -> None:
    size = 32
    image = synthesize(11, size)
    for y in range(size):
        for x in range(size):
            cx = (x + 0.5) / size * 2.0 - 1.0
            cy = (y + 0.5) / size * 2.0 - 1.0
            r, g, b, a = image.pixel(x, y)
            if cx * cx + cy * cy > 1.0:
                assert (r, g, b, a) == (0, 0, 0, 0)
            else:
                assert a == 255


def test_single_pixel_image_is_opaque() -> None:
    image = synthesize(3, 1)
    assert image.pixel(0, 0)[3] == 255


def test_invalid_pixel_size_fails_fast() -> None:
    synthesizer = SurfaceSynthesizer()
    for bad in (0, -4, 2.5, "16"):
        with pytest.raises(ConfigurationError):
            synthesizer.synthesize(1, bad)


def test_seeds_and_types_change_output() -> None:
    base = synthesize(7, 32)
    assert synthesize(8, 32).digest() != base.digest()
    assert synthesize(7, 32, SurfaceType.ICE).digest() != base.digest()
    assert synthesize(7, 32, SurfaceType.ICE).surface_type is SurfaceType.ICE


def test_crater_count_matches_layout() -> None:
    synthesizer = SurfaceSynthesizer()
    image = synthesizer.synthesize(21, 24, SurfaceType.DESERT)
    assert image.crater_count == len(synthesizer.craters(21, SurfaceType.DESERT))


def test_image_views() -> None:
    image = synthesize(5, 16)
    array = image.as_array()
    assert array.shape == (16, 16, 4)
    assert tuple(array[8, 8]) == image.pixel(8, 8)
    surface = image.to_surface()
    assert surface.get_size() == (16, 16)
    assert surface.get_at((8, 8)).a == 255
    assert surface.get_at((0, 0)).a == 0


def test_moon_colours_come_from_lunar_palette() -> None:
    config = SurfaceConfig(ambient=1.0, diffuse_intensity=0.0, edge_darkening=0.0)
    image = SurfaceSynthesizer(config).synthesize(9, 24)
    array = image.as_array()
    opaque = array[array[..., 3] == 255][:, :3]
    assert {tuple(int(c) for c in row) for row in opaque} <= set(LUNAR_GRAY)


def test_logging_channel_receives_timing(caplog) -> None:
    logger = GenLogger(LoggerConfig(level=logging.DEBUG, channels={"surface": True}))
    caplog.set_level(logging.DEBUG, logger="cosmogen")
    SurfaceSynthesizer(logger=logger.channel("surface")).synthesize(2, 8)
    assert any("Surface moon seed=2 size=8" in record.getMessage() for record in caplog.records)


def test_spherify_is_identity_outside_disc() -> None:
    cx = np.array([0.0, 0.6, 1.0, 0.9])
    cy = np.array([0.0, 0.0, 1.0, 0.9])
    sx, sy = spherify(cx, cy)
    assert sx[0] == 0.0 and sy[0] == 0.0
    assert sx[1] == pytest.approx(0.6 / 1.8)
    assert (sx[2], sy[2]) == (1.0, 1.0)
    assert (sx[3], sy[3]) == (0.9, 0.9)


def test_disc_coordinates() -> None:
    disc = disc_coordinates(4)
    assert disc.u[0, 0] == pytest.approx(0.125)
    assert not disc.inside[0, 0]
    assert disc.inside[1, 1]
    assert disc.inside.sum() == 12


def test_fractal_noise_range_and_cache() -> None:
    lattice = LatticeCache(99)
    grid = np.linspace(0.0, 1.0, 50)
    u, v = np.meshgrid(grid, grid)
    noise = fractal_noise(lattice, u, v, 4.0)
    assert noise.min() >= 0.0
    assert noise.max() < 1.0
    # Octave frequencies 4, 8 and 16 share lattice points 0..17.
    assert len(lattice) <= 18 * 18
    assert np.array_equal(noise, fractal_noise(LatticeCache(99), u, v, 4.0))


def test_flat_depth_gives_upward_normals() -> None:
    normals = estimate_normals(np.zeros((8, 8)), 1, 0.05)
    assert np.allclose(normals, (0.0, 0.0, 1.0))


def test_normals_replicate_edges() -> None:
    depth = np.tile(np.arange(8, dtype=np.float64) * 0.01, (8, 1))
    normals = estimate_normals(depth, 1, 0.05)
    # A wraparound border would see the far edge and tilt the other way.
    assert normals[3, 0, 0] < 0.0
    assert normals[3, 7, 0] < 0.0
    assert abs(normals[3, 0, 0]) < abs(normals[3, 4, 0])
    assert np.allclose(normals[..., 1], 0.0)


def test_palette_indices() -> None:
    noise = np.array([0.95, 0.05, 0.95, 0.95, 0.1])
    depth = np.array([0.0, 0.0, -0.6, -0.05, -0.8])
    assert palette_indices(noise, depth).tolist() == [0, 4, 1, 0, 4]


def test_shade_applies_ambient_diffuse_and_edge() -> None:
    config = SurfaceConfig(light_direction=(0.0, 0.0, 2.0), ambient=0.35, diffuse_intensity=0.8, edge_darkening=0.2)
    base = np.array([[100.0, 100.0, 100.0], [100.0, 100.0, 100.0]])
    normals = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, -1.0]])
    lit = shade(base, normals, np.array([0.0, 1.0]), config)
    assert lit[0] == pytest.approx([115.0] * 3)
    assert lit[1] == pytest.approx([35.0 * 0.8] * 3)


def test_surface_type_for_bodies() -> None:
    assert surface_type_for(BodyKind.PLANET_ICE) is SurfaceType.ICE
    assert surface_type_for(BodyKind.PLANET_VOLCANIC) is SurfaceType.VOLCANIC
    assert surface_type_for(BodyKind.ASTEROID_LARGE) is SurfaceType.MOON


def test_planet_profiles_scale_configured_crater_count() -> None:
    synthesizer = SurfaceSynthesizer(SurfaceConfig(crater_count=(0, 0)))
    for surface_type in SurfaceType:
        layout = synthesizer.craters(7, surface_type)
        assert layout.requested == 0
        assert len(layout) == 0
    fixed = SurfaceSynthesizer(SurfaceConfig(crater_count=(10, 10)))
    assert fixed.craters(7, SurfaceType.MOON).requested == 10
    assert fixed.craters(7, SurfaceType.ROCKY).requested == 7
    assert fixed.craters(7, SurfaceType.ICE).requested == 4


def test_craters_reach_the_pixels() -> None:
    cratered = SurfaceSynthesizer().synthesize(7, 64)
    flat = SurfaceSynthesizer(SurfaceConfig(crater_count=(0, 0))).synthesize(7, 64)
    assert cratered.crater_count > 0
    assert flat.crater_count == 0
    assert cratered.pixels != flat.pixels
    # Corners lie outside the disc in both.
    assert tuple(cratered.as_array()[0, 0]) == tuple(flat.as_array()[0, 0]) == (0, 0, 0, 0)


def test_pixel_outside_image_raises() -> None:
    image = synthesize(5, 8)
    assert image.pixel(7, 7) == tuple(image.as_array()[7, 7])
    for x, y in ((8, 0), (0, 8), (-1, 0), (0, -1)):
        with pytest.raises(IndexError):
            image.pixel(x, y)
