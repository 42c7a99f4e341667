"""Lightweight runtime telemetry for the texture cache."""
from __future__ import annotations

from dataclasses import dataclass

from cosmogen.engine.logger import ChannelLogger


@dataclass
class CacheTelemetrySnapshot:
    hits: int
    misses: int
    waits: int
    evictions: int
    syntheses: int
    clears: int
    synthesis_ms: float

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total <= 0:
            return 0.0
        return self.hits / total


@dataclass
class CacheTelemetry:
    """Counts lookups, evictions and synthesis time for a texture cache."""

    hits: int = 0
    misses: int = 0
    waits: int = 0
    evictions: int = 0
    syntheses: int = 0
    clears: int = 0
    synthesis_ms: float = 0.0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_wait(self) -> None:
        self.waits += 1

    def record_eviction(self, count: int = 1) -> None:
        self.evictions += count

    def record_synthesis(self, duration_ms: float) -> None:
        self.syntheses += 1
        self.synthesis_ms += duration_ms

    def record_clear(self) -> None:
        self.clears += 1

    def report(self, logger: ChannelLogger | None = None) -> None:
        if logger and logger.enabled:
            logger.info(
                "Texture cache: hits=%d misses=%d waits=%d evictions=%d syntheses=%d time=%.2fms",
                self.hits,
                self.misses,
                self.waits,
                self.evictions,
                self.syntheses,
                self.synthesis_ms,
            )

    def snapshot(self) -> CacheTelemetrySnapshot:
        return CacheTelemetrySnapshot(
            hits=self.hits,
            misses=self.misses,
            waits=self.waits,
            evictions=self.evictions,
            syntheses=self.syntheses,
            clears=self.clears,
            synthesis_ms=self.synthesis_ms,
        )


__all__ = ["CacheTelemetry", "CacheTelemetrySnapshot"]
