"""Body kinds and the fixed map of reserved special sectors."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from cosmogen.errors import ConfigurationError


SectorCoord = Tuple[int, int]


class BodyKind(Enum):
    ASTEROID_SMALL = "asteroid_small"
    ASTEROID_MEDIUM = "asteroid_medium"
    ASTEROID_LARGE = "asteroid_large"
    SPAWN_POINT = "spawn_point"
    CAPITAL_SHIP = "capital_ship"
    PLANET_ROCKY = "planet_rocky"
    PLANET_ICE = "planet_ice"
    PLANET_VOLCANIC = "planet_volcanic"
    PLANET_DESERT = "planet_desert"

    @property
    def is_asteroid(self) -> bool:
        return self in ASTEROID_KINDS

    @property
    def is_planet(self) -> bool:
        return self in PLANET_KINDS


# Size classes ordered small to large; placement draws uniformly from this tuple.
ASTEROID_KINDS: Tuple[BodyKind, ...] = (
    BodyKind.ASTEROID_SMALL,
    BodyKind.ASTEROID_MEDIUM,
    BodyKind.ASTEROID_LARGE,
)

PLANET_KINDS: Tuple[BodyKind, ...] = (
    BodyKind.PLANET_ROCKY,
    BodyKind.PLANET_ICE,
    BodyKind.PLANET_VOLCANIC,
    BodyKind.PLANET_DESERT,
)

DEFAULT_SPECIAL_BODIES: Dict[SectorCoord, BodyKind] = {
    (0, 0): BodyKind.SPAWN_POINT,
    (2, -1): BodyKind.CAPITAL_SHIP,
    (3, 3): BodyKind.PLANET_ROCKY,
    (-4, 2): BodyKind.PLANET_ICE,
    (6, -5): BodyKind.PLANET_VOLCANIC,
    (-2, -6): BodyKind.PLANET_DESERT,
}


class SpecialBodyMap:
    """Read-only mapping from reserved sector coordinates to their single body."""

    def __init__(self, entries: Iterable[Tuple[SectorCoord, BodyKind]]) -> None:
        bodies: Dict[SectorCoord, BodyKind] = {}
        for coord, kind in entries:
            key = (int(coord[0]), int(coord[1]))
            if key in bodies:
                raise ConfigurationError(f"special sector {key} is reserved twice")
            if kind.is_asteroid:
                raise ConfigurationError(f"{kind.value} cannot occupy a reserved sector")
            bodies[key] = kind
        self._bodies: Mapping[SectorCoord, BodyKind] = MappingProxyType(bodies)

    @classmethod
    def default(cls) -> "SpecialBodyMap":
        return cls(DEFAULT_SPECIAL_BODIES.items())

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> "SpecialBodyMap":
        """Build from ``{"x,y": "kind"}`` pairs as stored in settings.json."""

        entries = []
        for coord_text, kind_name in data.items():
            try:
                x_text, y_text = coord_text.split(",")
                coord = (int(x_text), int(y_text))
                kind = BodyKind(kind_name)
            except ValueError as exc:
                raise ConfigurationError(f"invalid special body entry {coord_text!r}: {kind_name!r}") from exc
            entries.append((coord, kind))
        return cls(entries)

    def get(self, x_id: int, y_id: int) -> Optional[BodyKind]:
        return self._bodies.get((x_id, y_id))

    def is_reserved(self, x_id: int, y_id: int) -> bool:
        return (x_id, y_id) in self._bodies

    def coordinates_of(self, kind: BodyKind) -> Optional[SectorCoord]:
        for coord, mapped in self._bodies.items():
            if mapped is kind:
                return coord
        return None

    def __iter__(self) -> Iterator[SectorCoord]:
        return iter(self._bodies)

    def __len__(self) -> int:
        return len(self._bodies)


__all__ = [
    "ASTEROID_KINDS",
    "BodyKind",
    "DEFAULT_SPECIAL_BODIES",
    "PLANET_KINDS",
    "SectorCoord",
    "SpecialBodyMap",
]
