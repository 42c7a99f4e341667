"""Deterministic per-call random values keyed by seed and integer coordinates.

Every draw re-seeds a fresh ``random.Random`` from a stable hash of its inputs and
takes exactly one sample, so results never depend on call order.
"""
from __future__ import annotations

import hashlib
import operator
import random
from typing import List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")


def hash_seed(*parts: int) -> int:
    """Combine integer parts into a stable 64-bit seed."""

    # operator.index rejects floats so platform rounding never reaches a seed.
    payload = "|".join(str(operator.index(part)) for part in parts)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return int(digest[:16], 16)


def derive(seed: int, a: int, b: int = 0, c: int = 0) -> float:
    """Return a reproducible float in ``[0, 1)`` for ``(seed, a, b, c)``."""

    return random.Random(hash_seed(seed, a, b, c)).random()


def derive_bool(seed: int, id: int, probability: float) -> bool:
    return derive(seed, id) < probability


def derive_range(seed: int, lo: float, hi: float, a: int, b: int = 0, c: int = 0) -> float:
    return lo + (hi - lo) * derive(seed, a, b, c)


def derive_index(seed: int, count: int, a: int, b: int = 0, c: int = 0) -> int:
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    return min(count - 1, int(derive(seed, a, b, c) * count))


def deterministic_shuffle(seed: int, items: Sequence[T], channel: int = 0) -> List[T]:
    """Fisher-Yates shuffle where each swap is an independent derived draw."""

    result: MutableSequence[T] = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = derive_index(seed, i + 1, i, channel)
        result[i], result[j] = result[j], result[i]
    return list(result)


__all__ = [
    "derive",
    "derive_bool",
    "derive_index",
    "derive_range",
    "deterministic_shuffle",
    "hash_seed",
]
