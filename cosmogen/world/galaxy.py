"""Owner of the world seed and every sector generated from it."""
from __future__ import annotations

import math
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from pygame.math import Vector2

from cosmogen.config import GenerationConfig
from cosmogen.engine.logger import ChannelLogger, GenLogger
from cosmogen.surface.cache import TextureCache, TextureKey
from cosmogen.surface.synthesizer import SurfaceImage, SurfaceSynthesizer, surface_type_for
from cosmogen.world.bodies import SectorCoord, SpecialBodyMap
from cosmogen.world.placement import Sector, SectorPlacementGenerator
from cosmogen.world.seeding import hash_seed

# Salt separating surface seeds from sector layout seeds.
_SURFACE_SALT = 0x5EED


class Galaxy:
    """Generates sectors on first visit and keeps them until the seed changes."""

    def __init__(
        self,
        world_seed: int,
        generator: Optional[SectorPlacementGenerator] = None,
        texture_cache: Optional[TextureCache] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._world_seed = int(world_seed)
        self.generator = generator or SectorPlacementGenerator(logger=logger)
        self.texture_cache = texture_cache if texture_cache is not None else TextureCache()
        self._logger = logger
        self._sectors: Dict[SectorCoord, Sector] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: GenerationConfig,
        logger: Optional[GenLogger] = None,
        special_bodies: Optional[SpecialBodyMap] = None,
    ) -> "Galaxy":
        """Wire a generator, synthesizer and texture cache from one config."""

        config.validate()
        placement_log = logger.channel("placement") if logger else None
        surface_log = logger.channel("surface") if logger else None
        cache_log = logger.channel("cache") if logger else None
        generator = SectorPlacementGenerator(config.placement, special_bodies, placement_log)
        cache = TextureCache(
            SurfaceSynthesizer(config.surface, surface_log),
            max_entries=config.cache.max_entries,
            logger=cache_log,
        )
        return cls(config.world_seed, generator, cache, placement_log)

    @property
    def world_seed(self) -> int:
        return self._world_seed

    @property
    def sector_size(self) -> float:
        return self.generator.config.sector_size

    @property
    def generated_count(self) -> int:
        with self._lock:
            return len(self._sectors)

    def sector(self, x_id: int, y_id: int) -> Sector:
        with self._lock:
            return self._sector_locked(x_id, y_id)

    def _sector_locked(self, x_id: int, y_id: int) -> Sector:
        key = (x_id, y_id)
        existing = self._sectors.get(key)
        if existing is not None:
            return existing
        sector = self.generator.generate(self._world_seed, x_id, y_id)
        self._sectors[key] = sector
        return sector

    def is_generated(self, x_id: int, y_id: int) -> bool:
        with self._lock:
            return (x_id, y_id) in self._sectors

    def sector_id_at(self, position: Sequence[float]) -> SectorCoord:
        point = Vector2(position)
        size = self.sector_size
        return (math.floor(point.x / size), math.floor(point.y / size))

    def sectors_in_radius(self, position: Sequence[float], radius: float) -> List[Sector]:
        """Return every sector whose bounds intersect the circle, generating as needed."""

        center = Vector2(position)
        radius = max(0.0, float(radius))
        size = self.sector_size
        min_x, min_y = self.sector_id_at((center.x - radius, center.y - radius))
        max_x, max_y = self.sector_id_at((center.x + radius, center.y + radius))
        sectors: List[Sector] = []
        for y_id in range(min_y, max_y + 1):
            for x_id in range(min_x, max_x + 1):
                left, top = x_id * size, y_id * size
                nearest = Vector2(
                    max(left, min(center.x, left + size)),
                    max(top, min(center.y, top + size)),
                )
                if nearest.distance_to(center) <= radius:
                    sectors.append(self.sector(x_id, y_id))
        return sectors

    def surface_seed(self, x_id: int, y_id: int) -> int:
        return hash_seed(self._world_seed, x_id, y_id, _SURFACE_SALT)

    def surface(self, x_id: int, y_id: int, size: int = 128) -> Optional[SurfaceImage]:
        """Texture for the body in a special sector, or ``None`` for ordinary sectors."""

        with self._lock:
            world_seed = self._world_seed
            generation = self.texture_cache.generation
            sector = self._sector_locked(x_id, y_id)
        if sector.special is None or not sector.special.is_planet:
            return None
        seed = hash_seed(world_seed, x_id, y_id, _SURFACE_SALT)
        key = TextureKey(seed, surface_type_for(sector.special), size)
        return self.texture_cache.get_or_create(key, generation)

    def reseed(self, world_seed: int) -> None:
        """Replace the world seed, dropping sectors and cached textures."""

        with self._lock:
            self._world_seed = int(world_seed)
            dropped = len(self._sectors)
            self._sectors = {}
            self.texture_cache.clear()
        if self._logger:
            self._logger.info("World reseeded to %d; dropped %d sector(s)", world_seed, dropped)

    def special_sectors(self) -> List[Tuple[SectorCoord, Sector]]:
        return [(coord, self.sector(*coord)) for coord in self.generator.special_bodies]


__all__ = ["Galaxy"]
