"""Deterministic sector placement and surface texture synthesis."""
from __future__ import annotations

from cosmogen.config import CacheConfig, GenerationConfig, PlacementConfig, SurfaceConfig
from cosmogen.errors import ConfigurationError, ExhaustedAttemptsWarning
from cosmogen.surface.cache import TextureCache, TextureKey
from cosmogen.surface.synthesizer import SurfaceImage, SurfaceSynthesizer, SurfaceType, synthesize
from cosmogen.world.bodies import BodyKind, SpecialBodyMap
from cosmogen.world.galaxy import Galaxy
from cosmogen.world.placement import PlacedObject, Sector, SectorPlacementGenerator, SubsectorSlot
from cosmogen.world.seeding import derive, derive_bool

__all__ = [
    "BodyKind",
    "CacheConfig",
    "ConfigurationError",
    "ExhaustedAttemptsWarning",
    "Galaxy",
    "GenerationConfig",
    "PlacedObject",
    "PlacementConfig",
    "Sector",
    "SectorPlacementGenerator",
    "SpecialBodyMap",
    "SubsectorSlot",
    "SurfaceConfig",
    "SurfaceImage",
    "SurfaceSynthesizer",
    "SurfaceType",
    "TextureCache",
    "TextureKey",
    "derive",
    "derive_bool",
    "synthesize",
]
