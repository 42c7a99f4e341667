"""Generation settings loaded from settings.json."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from cosmogen.errors import ConfigurationError


def _pair(value: Any, default: Tuple[float, float]) -> Tuple[float, float]:
    if value is None:
        return default
    return (float(value[0]), float(value[1]))


def _check_range(name: str, bounds: Tuple[float, float], *, minimum: float = 0.0) -> None:
    lo, hi = bounds
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ConfigurationError(f"{name} must be finite, got {bounds!r}")
    if lo < minimum or hi < lo:
        raise ConfigurationError(f"{name} must satisfy {minimum} <= min <= max, got {bounds!r}")


@dataclass(frozen=True)
class PlacementConfig:
    """Sector layout parameters."""

    sector_size: float = 4096.0
    margin: float = 0.15
    density: int = 6
    grid_width: Optional[int] = None
    scale_range: Tuple[float, float] = (0.75, 1.25)

    @property
    def resolved_grid_width(self) -> int:
        if self.grid_width is not None:
            return self.grid_width
        return max(1, math.ceil(math.sqrt(self.density)))

    @property
    def subsector_count(self) -> int:
        width = self.resolved_grid_width
        return width * width

    def validate(self) -> None:
        if not math.isfinite(self.sector_size) or self.sector_size <= 0.0:
            raise ConfigurationError(f"sector_size must be positive, got {self.sector_size!r}")
        if not 0.0 <= self.margin < 0.5:
            raise ConfigurationError(f"margin must be in [0, 0.5), got {self.margin!r}")
        if self.density < 0:
            raise ConfigurationError(f"density must be non-negative, got {self.density!r}")
        if self.grid_width is not None and self.grid_width < 1:
            raise ConfigurationError(f"grid_width must be at least 1, got {self.grid_width!r}")
        if self.density > self.subsector_count:
            raise ConfigurationError(
                f"density {self.density} exceeds {self.subsector_count} subsectors "
                f"(grid width {self.resolved_grid_width})"
            )
        _check_range("scale_range", self.scale_range, minimum=1e-6)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementConfig":
        default = cls()
        grid_width = data.get("gridWidth")
        return cls(
            sector_size=float(data.get("sectorSize", default.sector_size)),
            margin=float(data.get("margin", default.margin)),
            density=int(data.get("density", default.density)),
            grid_width=int(grid_width) if grid_width is not None else None,
            scale_range=_pair(data.get("scaleRange"), default.scale_range),
        )


@dataclass(frozen=True)
class SurfaceConfig:
    """Crater, noise and lighting parameters for surface synthesis."""

    crater_count: Tuple[int, int] = (6, 14)
    crater_size: Tuple[float, float] = (0.04, 0.16)
    crater_size_steps: int = 4
    crater_depth: Tuple[float, float] = (0.3, 0.8)
    overlap_factor: float = 1.05
    noise_frequency: float = 4.0
    normal_step: int = 1
    normal_scale: float = 0.05
    light_direction: Tuple[float, float, float] = (-0.5, -0.5, 0.7)
    ambient: float = 0.35
    diffuse_intensity: float = 0.8
    edge_darkening: float = 0.2

    def validate(self) -> None:
        lo, hi = self.crater_count
        if lo < 0 or hi < lo:
            raise ConfigurationError(f"crater_count must satisfy 0 <= min <= max, got {self.crater_count!r}")
        _check_range("crater_size", self.crater_size, minimum=1e-6)
        _check_range("crater_depth", self.crater_depth)
        if self.crater_size_steps < 1:
            raise ConfigurationError(f"crater_size_steps must be at least 1, got {self.crater_size_steps!r}")
        if self.overlap_factor <= 1.0:
            raise ConfigurationError(f"overlap_factor must exceed 1.0, got {self.overlap_factor!r}")
        if self.noise_frequency <= 0.0:
            raise ConfigurationError(f"noise_frequency must be positive, got {self.noise_frequency!r}")
        if self.normal_step < 1:
            raise ConfigurationError(f"normal_step must be at least 1 pixel, got {self.normal_step!r}")
        length = math.sqrt(sum(component * component for component in self.light_direction))
        if length <= 1e-9:
            raise ConfigurationError("light_direction must be a non-zero vector")

    @property
    def crater_sizes(self) -> Tuple[float, ...]:
        lo, hi = self.crater_size
        if self.crater_size_steps == 1:
            return (lo,)
        step = (hi - lo) / (self.crater_size_steps - 1)
        return tuple(lo + step * index for index in range(self.crater_size_steps - 1)) + (hi,)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurfaceConfig":
        default = cls()
        count = data.get("craterCount")
        light = data.get("lightDirection")
        return cls(
            crater_count=(int(count[0]), int(count[1])) if count is not None else default.crater_count,
            crater_size=_pair(data.get("craterSize"), default.crater_size),
            crater_size_steps=int(data.get("craterSizeSteps", default.crater_size_steps)),
            crater_depth=_pair(data.get("craterDepth"), default.crater_depth),
            overlap_factor=float(data.get("overlapFactor", default.overlap_factor)),
            noise_frequency=float(data.get("noiseFrequency", default.noise_frequency)),
            normal_step=int(data.get("normalStep", default.normal_step)),
            normal_scale=float(data.get("normalScale", default.normal_scale)),
            light_direction=tuple(float(v) for v in light) if light is not None else default.light_direction,
            ambient=float(data.get("ambient", default.ambient)),
            diffuse_intensity=float(data.get("diffuseIntensity", default.diffuse_intensity)),
            edge_darkening=float(data.get("edgeDarkening", default.edge_darkening)),
        )


@dataclass(frozen=True)
class CacheConfig:
    max_entries: int = 64

    def validate(self) -> None:
        if self.max_entries < 1:
            raise ConfigurationError(f"max_entries must be at least 1, got {self.max_entries!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        return cls(max_entries=int(data.get("maxEntries", cls.max_entries)))


@dataclass(frozen=True)
class GenerationConfig:
    """All tunables for one generation session."""

    world_seed: int = 1337
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    def validate(self) -> "GenerationConfig":
        self.placement.validate()
        self.surface.validate()
        self.cache.validate()
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationConfig":
        return cls(
            world_seed=int(data.get("worldSeed", cls.world_seed)),
            placement=PlacementConfig.from_dict(data.get("placement", {})),
            surface=SurfaceConfig.from_dict(data.get("surface", {})),
            cache=CacheConfig.from_dict(data.get("cache", {})),
        )

    @classmethod
    def from_settings(cls, settings_path: Path) -> "GenerationConfig":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        return cls.from_dict(data.get("generation", {}))


__all__ = ["CacheConfig", "GenerationConfig", "PlacementConfig", "SurfaceConfig"]
