"""Crater placement and the crater depth field."""
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from cosmogen.config import SurfaceConfig
from cosmogen.engine.logger import ChannelLogger
from cosmogen.errors import ExhaustedAttemptsWarning
from cosmogen.world.seeding import derive, derive_index, derive_range

ATTEMPTS_PER_CRATER = 15
CENTER_RADIUS_RANGE = (0.1, 0.9)
NOISE_FREQUENCY_RANGE = (3, 8)
NOISE_AMPLITUDE_RANGE = (0.05, 0.2)
ELONGATION_CHANCE = 0.3
ELONGATION_STRENGTH_RANGE = (0.1, 0.35)

FLOOR_EDGE = 0.2
WALL_EDGE = 0.85
FLOOR_DOME = 0.1
WALL_POWER = 2.0
RIM_HEIGHT = 0.15

_COUNT_CHANNEL = 20
_ANGLE_CHANNEL = 21
_RADIUS_CHANNEL = 22
_SIZE_CHANNEL = 23
_DEPTH_CHANNEL = 24
_NOISE_FREQUENCY_CHANNEL = 25
_NOISE_AMPLITUDE_CHANNEL = 26
_ELONGATION_CHANCE_CHANNEL = 27
_ELONGATION_ANGLE_CHANNEL = 28
_ELONGATION_STRENGTH_CHANNEL = 29


@dataclass(frozen=True)
class Crater:
    center: Tuple[float, float]
    radius: float
    depth: float
    noise_frequency: float
    noise_amplitude: float
    elongation_angle: float
    elongation_strength: float

    @property
    def influence_radius(self) -> float:
        # Upper bound of radius * shape_factor over all angles.
        return self.radius * (1.0 + self.noise_amplitude + self.elongation_strength)

    def shape_factor(self, theta: np.ndarray) -> np.ndarray:
        wobble = self.noise_amplitude * np.sin(self.noise_frequency * theta)
        stretch = self.elongation_strength * np.cos(2.0 * (theta - self.elongation_angle))
        return 1.0 + wobble + stretch

    def separation(self, other: "Crater") -> float:
        return math.hypot(self.center[0] - other.center[0], self.center[1] - other.center[1])


@dataclass(frozen=True)
class CraterLayout:
    seed: int
    craters: Tuple[Crater, ...]
    requested: int
    attempts: int

    @property
    def exhausted(self) -> bool:
        return len(self.craters) < self.requested

    def __len__(self) -> int:
        return len(self.craters)


def _fits(center: Tuple[float, float], radius: float, accepted: list, overlap_factor: float) -> bool:
    for crater in accepted:
        distance = math.hypot(center[0] - crater.center[0], center[1] - crater.center[1])
        if distance < (radius + crater.radius) * overlap_factor:
            return False
    return True


def place_craters(
    seed: int,
    config: SurfaceConfig,
    count_range: Optional[Tuple[int, int]] = None,
    logger: Optional[ChannelLogger] = None,
) -> CraterLayout:
    """Scatter non-overlapping craters over the unit square.

    Falling short of the drawn count is an accepted outcome; it is logged and
    reported through :class:`ExhaustedAttemptsWarning`.
    """

    low, high = count_range or config.crater_count
    requested = low + derive_index(seed, high - low + 1, 0, _COUNT_CHANNEL)
    sizes = config.crater_sizes
    accepted: list = []
    attempts = 0
    for attempt in range(requested * ATTEMPTS_PER_CRATER):
        if len(accepted) >= requested:
            break
        attempts += 1
        angle = derive_range(seed, 0.0, 2.0 * math.pi, attempt, _ANGLE_CHANNEL)
        distance = derive_range(seed, *CENTER_RADIUS_RANGE, attempt, _RADIUS_CHANNEL)
        center = (0.5 + math.cos(angle) * distance * 0.5, 0.5 + math.sin(angle) * distance * 0.5)
        radius = sizes[derive_index(seed, len(sizes), attempt, _SIZE_CHANNEL)]
        if not _fits(center, radius, accepted, config.overlap_factor):
            continue
        elongated = derive(seed, attempt, _ELONGATION_CHANCE_CHANNEL) < ELONGATION_CHANCE
        accepted.append(
            Crater(
                center=center,
                radius=radius,
                depth=derive_range(seed, *config.crater_depth, attempt, _DEPTH_CHANNEL),
                noise_frequency=float(
                    NOISE_FREQUENCY_RANGE[0]
                    + derive_index(
                        seed,
                        NOISE_FREQUENCY_RANGE[1] - NOISE_FREQUENCY_RANGE[0] + 1,
                        attempt,
                        _NOISE_FREQUENCY_CHANNEL,
                    )
                ),
                noise_amplitude=derive_range(seed, *NOISE_AMPLITUDE_RANGE, attempt, _NOISE_AMPLITUDE_CHANNEL),
                elongation_angle=derive_range(seed, 0.0, math.pi, attempt, _ELONGATION_ANGLE_CHANNEL),
                elongation_strength=(
                    derive_range(seed, *ELONGATION_STRENGTH_RANGE, attempt, _ELONGATION_STRENGTH_CHANNEL)
                    if elongated
                    else 0.0
                ),
            )
        )
    layout = CraterLayout(seed=seed, craters=tuple(accepted), requested=requested, attempts=attempts)
    if layout.exhausted:
        if logger:
            logger.warning(
                "Seed %d: placed %d of %d craters after %d attempts",
                seed,
                len(layout),
                requested,
                attempts,
            )
        warnings.warn(
            f"placed {len(layout)} of {requested} craters for seed {seed}",
            ExhaustedAttemptsWarning,
            stacklevel=2,
        )
    return layout


def crater_profile(shaped: np.ndarray, depth: float) -> np.ndarray:
    """Radial height of one crater: domed floor, power-curve wall, raised rim."""

    floor_t = shaped / FLOOR_EDGE
    wall_t = (shaped - FLOOR_EDGE) / (WALL_EDGE - FLOOR_EDGE)
    rim_t = (shaped - WALL_EDGE) / (1.0 - WALL_EDGE)
    return np.select(
        [shaped < FLOOR_EDGE, shaped < WALL_EDGE, shaped < 1.0],
        [
            -depth * (1.0 - FLOOR_DOME * (1.0 - floor_t * floor_t)),
            -depth * (1.0 - np.power(np.clip(wall_t, 0.0, 1.0), WALL_POWER)),
            depth * RIM_HEIGHT * np.sin(math.pi * np.clip(rim_t, 0.0, 1.0)),
        ],
        default=0.0,
    )


def crater_depth(layout: CraterLayout, u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Sum every crater's contribution at the given unit-square coordinates."""

    depth = np.zeros_like(u, dtype=np.float64)
    for crater in layout.craters:
        reach = crater.influence_radius
        dx = u - crater.center[0]
        dy = v - crater.center[1]
        near = np.nonzero((np.abs(dx) <= reach) & (np.abs(dy) <= reach))
        if not near[0].size:
            continue
        ndx = dx[near]
        ndy = dy[near]
        ratio = np.hypot(ndx, ndy) / crater.radius
        shaped = ratio / crater.shape_factor(np.arctan2(ndy, ndx))
        depth[near] += crater_profile(shaped, crater.depth)
    return depth


__all__ = [
    "ATTEMPTS_PER_CRATER",
    "Crater",
    "CraterLayout",
    "crater_depth",
    "crater_profile",
    "place_craters",
]
