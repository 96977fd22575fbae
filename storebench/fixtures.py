"""
Fixture generation for storebench.

Implements deterministic pseudo-random point generation. All randomness comes
from an explicit `random.Random` so a fixed seed reproduces every fixture and
every query/update coordinate of a run.
"""

from __future__ import annotations

import random
from typing import Iterator, List

from storebench.domain.errors import InvalidArgumentError
from storebench.domain.models import COORDINATE_MAX, COORDINATE_MIN, Point


def make_random_source(seed: int, scope: str = "") -> random.Random:
    """
    Build a seeded random source.

    `scope` (usually the scenario name) gives each scenario its own stream, so
    running a subset of scenarios does not shift the draws of the others.
    String seeds are hashed with SHA-512 by `random`, independent of
    PYTHONHASHSEED.
    """
    if not scope:
        return random.Random(seed)
    return random.Random(f"{seed}:{scope}")


def random_coordinate(rng: random.Random) -> int:
    return rng.randint(COORDINATE_MIN, COORDINATE_MAX)


def iter_points(count: int, rng: random.Random) -> Iterator[Point]:
    """
    Lazily yield `count` points with ids 1..count and uniform coordinates.
    """
    if count < 0:
        raise InvalidArgumentError(f"point count must be >= 0, got {count}")
    for point_id in range(1, count + 1):
        x = random_coordinate(rng)
        y = random_coordinate(rng)
        yield Point(id=point_id, x=x, y=y)


def generate_points(count: int, rng: random.Random) -> List[Point]:
    """
    Generate exactly `count` points.

    Parameters
    ----------
    count : int
        Number of points; ids run densely from 1 to `count`.
    rng : random.Random
        Source of randomness; the only state this function touches.

    Raises
    ------
    InvalidArgumentError
        If `count` is negative.
    """
    if count < 0:
        raise InvalidArgumentError(f"point count must be >= 0, got {count}")
    return list(iter_points(count, rng))


__all__ = ["generate_points", "iter_points", "make_random_source", "random_coordinate"]
