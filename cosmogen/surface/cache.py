"""Bounded store of synthesized surface images."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from cosmogen.engine.logger import ChannelLogger
from cosmogen.engine.telemetry import CacheTelemetry, CacheTelemetrySnapshot
from cosmogen.errors import ConfigurationError
from cosmogen.surface.synthesizer import SurfaceImage, SurfaceSynthesizer, SurfaceType


@dataclass(frozen=True)
class TextureKey:
    seed: int
    surface_type: SurfaceType = SurfaceType.MOON
    size: int = 128


class TextureCache:
    """Memoises surface images with insertion-order eviction.

    Entries are evicted oldest-inserted first once the store grows past
    ``max_entries``; lookups never refresh an entry's position. Only one synthesis
    runs per key at a time, and ``clear`` drops every entry under the lock so no
    reader sees a partially cleared store.
    """

    def __init__(
        self,
        synthesizer: Optional[SurfaceSynthesizer] = None,
        max_entries: int = 64,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        if max_entries < 1:
            raise ConfigurationError(f"max_entries must be at least 1, got {max_entries!r}")
        self.synthesizer = synthesizer or SurfaceSynthesizer()
        self.max_entries = max_entries
        self.telemetry = CacheTelemetry()
        self._logger = logger
        # dict preserves insertion order, which is the eviction order.
        self._entries: Dict[TextureKey, SurfaceImage] = {}
        self._pending: Dict[TextureKey, threading.Event] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def __contains__(self, key: TextureKey) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> List[TextureKey]:
        with self._lock:
            return list(self._entries)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get_or_create(self, key: TextureKey, generation: Optional[int] = None) -> SurfaceImage:
        """Return the image for ``key``, synthesizing it on a miss.

        A ``generation`` taken from the ``generation`` property pins the store: if
        the cache has been cleared since, the image is returned but not kept.
        """
        while True:
            with self._lock:
                image = self._entries.get(key)
                if image is not None:
                    self.telemetry.record_hit()
                    return image
                pending = self._pending.get(key)
                if pending is None:
                    self.telemetry.record_miss()
                    pending = threading.Event()
                    self._pending[key] = pending
                    if generation is None:
                        generation = self._generation
                    break
                self.telemetry.record_wait()
            # Another caller is synthesizing this key; retry once it finishes.
            pending.wait()

        try:
            start_time = time.perf_counter()
            image = self.synthesizer.synthesize(key.seed, key.size, key.surface_type)
            duration_ms = (time.perf_counter() - start_time) * 1000.0
            with self._lock:
                self.telemetry.record_synthesis(duration_ms)
                if generation == self._generation:
                    self._entries[key] = image
                    self._evict_locked()
        finally:
            with self._lock:
                if self._pending.get(key) is pending:
                    del self._pending[key]
            pending.set()
        return image

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries = {}
            self._generation += 1
            self.telemetry.record_clear()
            self.telemetry.report(self._logger)
        if self._logger:
            self._logger.info("Texture cache cleared (%d entries)", dropped)

    def stats(self) -> CacheTelemetrySnapshot:
        with self._lock:
            return self.telemetry.snapshot()

    def _evict_locked(self) -> None:
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            self.telemetry.record_eviction()
            if self._logger:
                self._logger.debug("Evicted texture seed=%d type=%s size=%d", oldest.seed, oldest.surface_type.value, oldest.size)


__all__ = ["TextureCache", "TextureKey"]
