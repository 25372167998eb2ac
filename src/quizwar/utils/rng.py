"""Injectable random number sources for quizwar.

Every random decision in the rules layer goes through a *draw function*:
a callable taking an inclusive ``(low, high)`` integer range and returning a
uniformly distributed integer in it.  Three kinds are provided:

- :func:`system_draw`: the process-wide pseudorandom source (default).
- :func:`seeded_draw`: a deterministic stream derived from a seed string, so a
  session can be replayed.
- :func:`fixed_draw`: always returns the same value (clamped into range), used
  to pin a battle to a specific branch.

Examples:
    >>> draw = seeded_draw("1:3:battle")
    >>> 1 <= draw(1, 1100) <= 1100
    True
    >>> fixed_draw(7)(1, 5)
    5
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Callable

DrawFn = Callable[[int, int], int]


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def _check_range(low: int, high: int) -> None:
    if low > high:
        raise ValueError(f"low ({low}) cannot be greater than high ({high})")


def system_draw(low: int, high: int) -> int:
    """Draw from the process-wide pseudorandom source."""
    _check_range(low, high)
    return random.randint(low, high)


def seeded_draw(seed: str) -> DrawFn:
    """Return a draw function backed by a deterministic stream for ``seed``.

    Successive calls on the returned function continue the same stream, so two
    functions built from the same seed yield identical sequences.
    """
    rng = random.Random(_seed_to_int(seed))

    def draw(low: int, high: int) -> int:
        _check_range(low, high)
        return rng.randint(low, high)

    return draw


def fixed_draw(value: int) -> DrawFn:
    """Return a draw function that always yields ``value`` clamped into range."""

    def draw(low: int, high: int) -> int:
        _check_range(low, high)
        return max(low, min(high, value))

    return draw
