"""Render planet surfaces and a sector overview to PNG files for inspection."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pygame

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from cosmogen.config import GenerationConfig
from cosmogen.engine.logger import init_logger
from cosmogen.world.bodies import BodyKind
from cosmogen.world.galaxy import Galaxy

OUTPUT = ROOT / "preview"

KIND_COLORS = {
    BodyKind.ASTEROID_SMALL: (150, 150, 150),
    BodyKind.ASTEROID_MEDIUM: (190, 170, 140),
    BodyKind.ASTEROID_LARGE: (230, 200, 150),
    BodyKind.SPAWN_POINT: (90, 220, 120),
    BodyKind.CAPITAL_SHIP: (90, 150, 255),
}
PLANET_COLOR = (255, 210, 90)
GRID_COLOR = (40, 48, 64)
CELL_PIXELS = 48


def render_overview(galaxy: Galaxy, radius: int) -> pygame.Surface:
    span = radius * 2 + 1
    surface = pygame.Surface((span * CELL_PIXELS, span * CELL_PIXELS))
    surface.fill((8, 10, 18))
    scale = CELL_PIXELS / galaxy.sector_size
    for y_id in range(-radius, radius + 1):
        for x_id in range(-radius, radius + 1):
            sector = galaxy.sector(x_id, y_id)
            left = (x_id + radius) * CELL_PIXELS
            top = (y_id + radius) * CELL_PIXELS
            pygame.draw.rect(surface, GRID_COLOR, (left, top, CELL_PIXELS, CELL_PIXELS), 1)
            for obj in sector.objects:
                color = PLANET_COLOR if obj.kind.is_planet else KIND_COLORS[obj.kind]
                point = (int(left + obj.local_position[0] * scale), int(top + obj.local_position[1] * scale))
                size = 6 if sector.is_special else max(1, int(2 * obj.scale))
                pygame.draw.circle(surface, color, point, size)
    return surface


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--settings", type=Path, default=ROOT / "settings.json")
    parser.add_argument("--seed", type=int, default=None, help="override the world seed")
    parser.add_argument("--size", type=int, default=256, help="surface texture size in pixels")
    parser.add_argument("--radius", type=int, default=7, help="sectors drawn around the origin")
    parser.add_argument("--output", type=Path, default=OUTPUT)
    args = parser.parse_args()

    logger = init_logger(args.settings)
    config = GenerationConfig.from_settings(args.settings)
    galaxy = Galaxy.from_config(config, logger)
    if args.seed is not None:
        galaxy.reseed(args.seed)

    args.output.mkdir(parents=True, exist_ok=True)
    pygame.image.save(render_overview(galaxy, args.radius), str(args.output / "sectors.png"))
    for (x_id, y_id), sector in galaxy.special_sectors():
        image = galaxy.surface(x_id, y_id, args.size)
        if image is None:
            continue
        path = args.output / f"{sector.special.value}_{x_id}_{y_id}.png"
        pygame.image.save(image.to_surface(), str(path))
        print(f"{path.name}: craters={image.crater_count} sha256={image.digest()[:12]}")


if __name__ == "__main__":
    main()
