"""Deterministic placement of bodies inside world sectors.

The world is an infinite grid of square sectors. Each ordinary sector is split into
a ``grid_width x grid_width`` grid of subsectors; a seeded permutation of those
subsectors decides which slots receive the sector's asteroid quota. Reserved
sectors from the :class:`SpecialBodyMap` hold exactly one fixed body at their centre.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from cosmogen.config import PlacementConfig
from cosmogen.engine.logger import ChannelLogger
from cosmogen.world.bodies import ASTEROID_KINDS, BodyKind, SpecialBodyMap
from cosmogen.world.seeding import derive, derive_index, derive_range, deterministic_shuffle, hash_seed


Vector2 = Tuple[float, float]
Rect = Tuple[float, float, float, float]

# Draw channels, one per independent random quantity of a placed object.
_SHUFFLE_CHANNEL = 1
_KIND_CHANNEL = 2
_POSITION_X_CHANNEL = 3
_POSITION_Y_CHANNEL = 4
_ROTATION_CHANNEL = 5
_SCALE_CHANNEL = 6


@dataclass(frozen=True)
class SubsectorSlot:
    """A margin-shrunk placement rectangle in sector-local coordinates."""

    index: int
    sub_x: int
    sub_y: int
    bounds: Rect

    def contains(self, point: Vector2) -> bool:
        left, top, right, bottom = self.bounds
        return left <= point[0] <= right and top <= point[1] <= bottom


@dataclass(frozen=True)
class PlacedObject:
    kind: BodyKind
    local_position: Vector2
    world_position: Vector2
    rotation: float
    scale: float
    slot: Optional[SubsectorSlot] = None


@dataclass(frozen=True)
class Sector:
    x_id: int
    y_id: int
    seed: int
    origin: Vector2
    size: float
    permutation: Tuple[int, ...]
    objects: Tuple[PlacedObject, ...]
    special: Optional[BodyKind] = None

    @property
    def is_special(self) -> bool:
        return self.special is not None

    @property
    def center(self) -> Vector2:
        return (self.origin[0] + self.size * 0.5, self.origin[1] + self.size * 0.5)

    @property
    def bounds(self) -> Rect:
        return (self.origin[0], self.origin[1], self.origin[0] + self.size, self.origin[1] + self.size)

    def asteroids(self) -> Tuple[PlacedObject, ...]:
        return tuple(obj for obj in self.objects if obj.kind.is_asteroid)


def sector_seed(world_seed: int, x_id: int, y_id: int) -> int:
    return hash_seed(world_seed, x_id, y_id)


class SectorPlacementGenerator:
    """Generate the contents of one sector from the world seed."""

    def __init__(
        self,
        config: Optional[PlacementConfig] = None,
        special_bodies: Optional[SpecialBodyMap] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.config = config or PlacementConfig()
        self.config.validate()
        self.special_bodies = special_bodies if special_bodies is not None else SpecialBodyMap.default()
        self._logger = logger

    @property
    def grid_width(self) -> int:
        return self.config.resolved_grid_width

    @property
    def subsector_count(self) -> int:
        return self.config.subsector_count

    def sector_origin(self, x_id: int, y_id: int) -> Vector2:
        size = self.config.sector_size
        return (x_id * size, y_id * size)

    def subsector_slot(self, index: int) -> SubsectorSlot:
        """Return the shrunk rectangle for a linear subsector index."""

        width = self.grid_width
        if not 0 <= index < width * width:
            raise IndexError(f"subsector index {index} outside 0..{width * width - 1}")
        sub_x = index // width
        sub_y = index - sub_x * width
        cell = self.config.sector_size / width
        inset = cell * self.config.margin
        left = sub_x * cell + inset
        top = sub_y * cell + inset
        return SubsectorSlot(
            index=index,
            sub_x=sub_x,
            sub_y=sub_y,
            bounds=(left, top, left + cell - 2.0 * inset, top + cell - 2.0 * inset),
        )

    def generate(self, world_seed: int, x_id: int, y_id: int) -> Sector:
        start_time = time.perf_counter()
        seed = sector_seed(world_seed, x_id, y_id)
        permutation = tuple(deterministic_shuffle(seed, range(self.subsector_count), _SHUFFLE_CHANNEL))
        origin = self.sector_origin(x_id, y_id)
        special = self.special_bodies.get(x_id, y_id)
        if special is not None:
            objects = (self._place_special(special, origin),)
        else:
            objects = tuple(
                self._place_asteroid(seed, order, index, origin)
                for order, index in enumerate(permutation[: self.config.density])
            )
        sector = Sector(
            x_id=x_id,
            y_id=y_id,
            seed=seed,
            origin=origin,
            size=self.config.sector_size,
            permutation=permutation,
            objects=objects,
            special=special,
        )
        if self._logger:
            self._logger.debug(
                "Sector (%d, %d): %d object(s)%s in %.2fms",
                x_id,
                y_id,
                len(objects),
                f" [{special.value}]" if special else "",
                (time.perf_counter() - start_time) * 1000.0,
            )
        return sector

    def _place_special(self, kind: BodyKind, origin: Vector2) -> PlacedObject:
        half = self.config.sector_size * 0.5
        return PlacedObject(
            kind=kind,
            local_position=(half, half),
            world_position=(origin[0] + half, origin[1] + half),
            rotation=0.0,
            scale=1.0,
        )

    def _place_asteroid(self, seed: int, order: int, index: int, origin: Vector2) -> PlacedObject:
        slot = self.subsector_slot(index)
        left, top, right, bottom = slot.bounds
        kind = ASTEROID_KINDS[derive_index(seed, len(ASTEROID_KINDS), order, _KIND_CHANNEL)]
        local = (
            derive_range(seed, left, right, order, _POSITION_X_CHANNEL),
            derive_range(seed, top, bottom, order, _POSITION_Y_CHANNEL),
        )
        return PlacedObject(
            kind=kind,
            local_position=local,
            world_position=(origin[0] + local[0], origin[1] + local[1]),
            rotation=-math.pi + 2.0 * math.pi * derive(seed, order, _ROTATION_CHANNEL),
            scale=derive_range(seed, *self.config.scale_range, order, _SCALE_CHANNEL),
            slot=slot,
        )


__all__ = ["PlacedObject", "Sector", "SectorPlacementGenerator", "SubsectorSlot", "sector_seed"]
