"""Distribution of one point stream over N parallel lines (saw and wave)."""

from __future__ import annotations

from enum import Enum
from typing import Generic, Iterable, TypeVar

from kofparse.common.constants import SAW_CODES, WAVE_CODES

T = TypeVar("T")


class Algorithm(str, Enum):
    SAW = "saw"
    WAVE = "wave"


def bucket_index(position: int, n: int, algorithm: Algorithm) -> int:
    """Bucket for the point at 0-based ``position``.

    Saw is round-robin. Wave sweeps up then down over a cycle of ``2 * n``
    and visits the end buckets twice per cycle: for n=3 the sequence is
    0, 1, 2, 2, 1, 0, 0, 1, ...
    """
    if n < 1:
        raise ValueError(f"Line count must be at least 1, got {n}")
    if algorithm is Algorithm.SAW or n == 1:
        return position % n
    cycle = 2 * n
    k = position % cycle
    return k if k < n else cycle - k - 1


class BucketAssigner(Generic[T]):
    """Incremental form of :func:`distribute`, fed one item at a time."""

    def __init__(self, algorithm: Algorithm, n: int):
        if n < 1:
            raise ValueError(f"Line count must be at least 1, got {n}")
        self.algorithm = algorithm
        self.n = n
        self.buckets: list[list[T]] = [[] for _ in range(n)]
        self.cursor = 0

    def assign(self, item: T) -> int:
        idx = bucket_index(self.cursor, self.n, self.algorithm)
        self.buckets[idx].append(item)
        self.cursor += 1
        return idx


def distribute(points: Iterable[T], algorithm: Algorithm, n: int) -> list[list[T]]:
    assigner: BucketAssigner[T] = BucketAssigner(algorithm, n)
    for point in points:
        assigner.assign(point)
    return assigner.buckets


def multiline_for_subtype(subtype: int | None) -> tuple[Algorithm, int] | None:
    if subtype in SAW_CODES:
        return Algorithm.SAW, subtype - 70
    if subtype in WAVE_CODES:
        return Algorithm.WAVE, subtype - 80
    return None
