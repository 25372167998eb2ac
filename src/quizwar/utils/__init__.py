"""Utility functions for the quizwar engine."""

from quizwar.utils.rng import DrawFn, fixed_draw, seeded_draw, system_draw

__all__ = [
    "DrawFn",
    "fixed_draw",
    "seeded_draw",
    "system_draw",
]
