"""Disc sampling, hemispherical UV remapping and lattice value noise."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from cosmogen.world.seeding import derive

OCTAVES: Tuple[Tuple[float, float], ...] = ((1.0, 1.0), (2.0, 0.5), (4.0, 0.25))

# Keeps lattice draws apart from crater draws made with the same surface seed.
_LATTICE_CHANNEL = 7


@dataclass(frozen=True)
class DiscSample:
    """Per-pixel coordinates for a square image with an inscribed disc.

    ``u``/``v`` are pixel centres mapped to ``[0, 1]``, ``cx``/``cy`` the same
    points in ``[-1, 1]`` and ``distance`` their distance from the disc centre.
    """

    size: int
    u: np.ndarray
    v: np.ndarray
    cx: np.ndarray
    cy: np.ndarray
    distance: np.ndarray
    inside: np.ndarray


def disc_coordinates(size: int) -> DiscSample:
    coords = np.arange(size, dtype=np.float64)
    u_axis = (coords + 0.5) / size
    u, v = np.meshgrid(u_axis, u_axis)
    cx = u * 2.0 - 1.0
    cy = v * 2.0 - 1.0
    radius_sq = cx * cx + cy * cy
    return DiscSample(
        size=size,
        u=u,
        v=v,
        cx=cx,
        cy=cy,
        distance=np.sqrt(radius_sq),
        inside=radius_sq <= 1.0,
    )


def spherify(cx: np.ndarray, cy: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Project disc coordinates onto a hemisphere; points outside pass through."""

    radius_sq = cx * cx + cy * cy
    inside = radius_sq <= 1.0
    z = np.sqrt(np.where(inside, 1.0 - radius_sq, 0.0))
    sx = np.where(inside, cx / (z + 1.0), cx)
    sy = np.where(inside, cy / (z + 1.0), cy)
    return sx, sy


class LatticeCache:
    """Lattice values for one synthesis call, keyed by integer coordinates."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._values: Dict[Tuple[int, int], float] = {}

    def __len__(self) -> int:
        return len(self._values)

    def value(self, ix: int, iy: int) -> float:
        key = (ix, iy)
        cached = self._values.get(key)
        if cached is None:
            cached = derive(self.seed, ix, iy, _LATTICE_CHANNEL)
            self._values[key] = cached
        return cached

    def grid(self, x0: int, x1: int, y0: int, y1: int) -> np.ndarray:
        """Values for the inclusive block ``[x0, x1] x [y0, y1]``, rows indexed by y."""

        block = np.empty((y1 - y0 + 1, x1 - x0 + 1), dtype=np.float64)
        for row, iy in enumerate(range(y0, y1 + 1)):
            for col, ix in enumerate(range(x0, x1 + 1)):
                block[row, col] = self.value(ix, iy)
        return block


def _hermite(t: np.ndarray) -> np.ndarray:
    return t * t * (3.0 - 2.0 * t)


def value_noise(lattice: LatticeCache, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Smooth value noise in ``[0, 1)`` sampled at arbitrary coordinates."""

    if x.size == 0:
        return np.zeros_like(x)
    x0 = np.floor(x).astype(np.int64)
    y0 = np.floor(y).astype(np.int64)
    min_x, min_y = int(x0.min()), int(y0.min())
    block = lattice.grid(min_x, int(x0.max()) + 1, min_y, int(y0.max()) + 1)
    col = x0 - min_x
    row = y0 - min_y
    tx = _hermite(x - x0)
    ty = _hermite(y - y0)
    top = block[row, col] + (block[row, col + 1] - block[row, col]) * tx
    bottom = block[row + 1, col] + (block[row + 1, col + 1] - block[row + 1, col]) * tx
    return top + (bottom - top) * ty


def fractal_noise(
    lattice: LatticeCache,
    u: np.ndarray,
    v: np.ndarray,
    base_frequency: float,
) -> np.ndarray:
    """Three octaves of value noise, normalised back into ``[0, 1)``."""

    total = np.zeros_like(u)
    amplitude_sum = 0.0
    for frequency_scale, amplitude in OCTAVES:
        frequency = base_frequency * frequency_scale
        total += value_noise(lattice, u * frequency, v * frequency) * amplitude
        amplitude_sum += amplitude
    return total / amplitude_sum


__all__ = [
    "DiscSample",
    "LatticeCache",
    "OCTAVES",
    "disc_coordinates",
    "fractal_noise",
    "spherify",
    "value_noise",
]
