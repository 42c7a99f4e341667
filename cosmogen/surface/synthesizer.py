"""Procedural moon and planet surface textures.

``SurfaceSynthesizer.synthesize`` turns a seed into a square RGBA image of a lit,
cratered disc:

1. place non-overlapping craters from the seed,
2. sample three-octave value noise over hemisphere-projected disc coordinates,
3. accumulate crater depth for every pixel inside the disc,
4. estimate normals from the depth field,
5. quantise noise (darkened inside craters) onto a five-step palette,
6. light with ambient plus Lambertian diffuse and darken towards the rim.

Pixels outside the inscribed disc are fully transparent.
"""
from __future__ import annotations

import hashlib
import operator
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from cosmogen.config import SurfaceConfig
from cosmogen.engine.logger import ChannelLogger
from cosmogen.errors import ConfigurationError
from cosmogen.surface.craters import CraterLayout, crater_depth, place_craters
from cosmogen.surface.noise import LatticeCache, disc_coordinates, fractal_noise, spherify
from cosmogen.world.bodies import BodyKind

Color = Tuple[int, int, int]
Palette = Tuple[Color, Color, Color, Color, Color]

CRATER_DARKENING_THRESHOLD = -0.1


class SurfaceType(Enum):
    MOON = "moon"
    ROCKY = "rocky"
    ICE = "ice"
    VOLCANIC = "volcanic"
    DESERT = "desert"


@dataclass(frozen=True)
class SurfaceProfile:
    """Palette (light to dark) and crater/noise tweaks for one surface type."""

    palette: Palette
    crater_scale: float = 1.0
    frequency_scale: float = 1.0

    def crater_range(self, config: SurfaceConfig) -> Tuple[int, int]:
        """Configured crater count range scaled for this surface type."""

        low, high = config.crater_count
        return int(round(low * self.crater_scale)), int(round(high * self.crater_scale))


LUNAR_GRAY: Palette = (
    (206, 206, 202),
    (176, 176, 172),
    (146, 146, 143),
    (114, 114, 112),
    (82, 82, 81),
)

SURFACE_PROFILES: Dict[SurfaceType, SurfaceProfile] = {
    SurfaceType.MOON: SurfaceProfile(palette=LUNAR_GRAY),
    SurfaceType.ROCKY: SurfaceProfile(
        palette=((196, 164, 132), (168, 136, 104), (138, 108, 80), (106, 82, 62), (72, 56, 44)),
        crater_scale=0.7,
        frequency_scale=1.25,
    ),
    SurfaceType.ICE: SurfaceProfile(
        palette=((236, 244, 252), (204, 222, 240), (168, 196, 224), (128, 162, 200), (92, 124, 168)),
        crater_scale=0.4,
        frequency_scale=0.75,
    ),
    SurfaceType.VOLCANIC: SurfaceProfile(
        palette=((236, 120, 60), (184, 72, 40), (122, 44, 32), (74, 34, 30), (38, 26, 26)),
        crater_scale=0.55,
        frequency_scale=1.5,
    ),
    SurfaceType.DESERT: SurfaceProfile(
        palette=((242, 216, 160), (222, 190, 128), (196, 160, 100), (164, 128, 76), (126, 96, 56)),
        crater_scale=0.85,
    ),
}

_BODY_SURFACES: Dict[BodyKind, SurfaceType] = {
    BodyKind.PLANET_ROCKY: SurfaceType.ROCKY,
    BodyKind.PLANET_ICE: SurfaceType.ICE,
    BodyKind.PLANET_VOLCANIC: SurfaceType.VOLCANIC,
    BodyKind.PLANET_DESERT: SurfaceType.DESERT,
}


def surface_type_for(kind: BodyKind) -> SurfaceType:
    return _BODY_SURFACES.get(kind, SurfaceType.MOON)


@dataclass(frozen=True)
class SurfaceImage:
    """Square RGBA8 raster with straight alpha, rows top to bottom."""

    seed: int
    surface_type: SurfaceType
    size: int
    pixels: bytes
    crater_count: int

    @property
    def width(self) -> int:
        return self.size

    @property
    def height(self) -> int:
        return self.size

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"pixel ({x}, {y}) outside {self.size}x{self.size} image")
        offset = (y * self.size + x) * 4
        return tuple(self.pixels[offset:offset + 4])  # type: ignore[return-value]

    def as_array(self) -> np.ndarray:
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.size, self.size, 4)

    def digest(self) -> str:
        return hashlib.sha256(self.pixels).hexdigest()

    def to_surface(self) -> pygame.Surface:
        return pygame.image.frombuffer(self.pixels, (self.size, self.size), "RGBA")


def estimate_normals(depth: np.ndarray, step: int, scale: float) -> np.ndarray:
    """Central-difference normals of a square depth field, replicating edges."""

    size = depth.shape[0]
    padded = np.pad(depth, step, mode="edge")
    inner = slice(step, step + size)
    right = padded[inner, 2 * step:2 * step + size]
    left = padded[inner, 0:size]
    down = padded[2 * step:2 * step + size, inner]
    up = padded[0:size, inner]
    # Gradients per unit of image width so the look is independent of resolution.
    unit = size / (2.0 * step)
    nx = -(right - left) * unit * scale
    ny = -(down - up) * unit * scale
    nz = np.ones_like(depth)
    length = np.sqrt(nx * nx + ny * ny + nz * nz)
    return np.stack((nx / length, ny / length, nz / length), axis=-1)


def palette_indices(noise: np.ndarray, depth: np.ndarray, steps: int = 5) -> np.ndarray:
    """Map noise to palette slots, 0 being the lightest."""

    darkened = np.where(
        depth < CRATER_DARKENING_THRESHOLD,
        np.maximum(0.0, noise - np.abs(depth) * 0.5),
        noise,
    )
    return np.clip(np.floor((1.0 - darkened) * steps), 0, steps - 1).astype(np.int64)


def shade(
    base: np.ndarray,
    normals: np.ndarray,
    distance: np.ndarray,
    config: SurfaceConfig,
) -> np.ndarray:
    lx, ly, lz = config.light_direction
    length = (lx * lx + ly * ly + lz * lz) ** 0.5
    # Element-wise products keep the summation order fixed.
    facing = (normals[..., 0] * lx + normals[..., 1] * ly + normals[..., 2] * lz) / length
    diffuse = np.maximum(0.0, facing) * config.diffuse_intensity
    lighting = config.ambient + diffuse
    edge = 1.0 - distance * distance * config.edge_darkening
    return base * (lighting * edge)[..., np.newaxis]


class SurfaceSynthesizer:
    """Deterministic surface texture generator."""

    def __init__(self, config: Optional[SurfaceConfig] = None, logger: Optional[ChannelLogger] = None) -> None:
        self.config = config or SurfaceConfig()
        self.config.validate()
        self._logger = logger

    def profile(self, surface_type: SurfaceType) -> SurfaceProfile:
        return SURFACE_PROFILES[surface_type]

    def craters(self, seed: int, surface_type: SurfaceType = SurfaceType.MOON) -> CraterLayout:
        profile = self.profile(surface_type)
        return place_craters(seed, self.config, profile.crater_range(self.config), self._logger)

    def synthesize(
        self,
        seed: int,
        pixel_size: int,
        surface_type: SurfaceType = SurfaceType.MOON,
    ) -> SurfaceImage:
        try:
            size = operator.index(pixel_size)
        except TypeError as exc:
            raise ConfigurationError(f"pixel_size must be an integer, got {pixel_size!r}") from exc
        if size <= 0:
            raise ConfigurationError(f"pixel_size must be positive, got {pixel_size!r}")
        seed = operator.index(seed)
        start_time = time.perf_counter()
        profile = self.profile(surface_type)

        layout = self.craters(seed, surface_type)
        disc = disc_coordinates(size)
        inside = disc.inside

        sx, sy = spherify(disc.cx[inside], disc.cy[inside])
        lattice = LatticeCache(seed)
        noise = fractal_noise(
            lattice,
            sx * 0.5 + 0.5,
            sy * 0.5 + 0.5,
            self.config.noise_frequency * profile.frequency_scale,
        )

        depth = np.zeros((size, size), dtype=np.float64)
        depth[inside] = crater_depth(layout, disc.u[inside], disc.v[inside])
        normals = estimate_normals(depth, self.config.normal_step, self.config.normal_scale)

        palette = np.asarray(profile.palette, dtype=np.float64)
        base = palette[palette_indices(noise, depth[inside], len(profile.palette))]
        rgb = shade(base, normals[inside], disc.distance[inside], self.config)

        pixels = np.zeros((size, size, 4), dtype=np.uint8)
        pixels[inside, :3] = np.clip(np.rint(rgb), 0.0, 255.0).astype(np.uint8)
        pixels[inside, 3] = 255

        if self._logger:
            self._logger.debug(
                "Surface %s seed=%d size=%d craters=%d/%d lattice=%d in %.2fms",
                surface_type.value,
                seed,
                size,
                len(layout),
                layout.requested,
                len(lattice),
                (time.perf_counter() - start_time) * 1000.0,
            )
        return SurfaceImage(
            seed=seed,
            surface_type=surface_type,
            size=size,
            pixels=pixels.tobytes(),
            crater_count=len(layout),
        )


def synthesize(
    seed: int,
    pixel_size: int,
    surface_type: SurfaceType = SurfaceType.MOON,
    config: Optional[SurfaceConfig] = None,
) -> SurfaceImage:
    return SurfaceSynthesizer(config).synthesize(seed, pixel_size, surface_type)


__all__ = [
    "LUNAR_GRAY",
    "SURFACE_PROFILES",
    "SurfaceImage",
    "SurfaceProfile",
    "SurfaceSynthesizer",
    "SurfaceType",
    "estimate_normals",
    "palette_indices",
    "shade",
    "surface_type_for",
    "synthesize",
]
