"""Enumerations used across the quizwar domain."""

from __future__ import annotations

from enum import StrEnum


class Difficulty(StrEnum):
    """Question difficulty tiers; each tier maps to a currency reward."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Terrain(StrEnum):
    """Battlefield terrain of a stage."""

    PLAIN = "plain"
    PASS = "pass"  # fortified pass or river crossing

    @property
    def multiplier(self) -> float:
        """Defensive multiplier applied to the enemy's power."""

        return _TERRAIN_MULTIPLIERS[self]


_TERRAIN_MULTIPLIERS: dict[Terrain, float] = {
    Terrain.PLAIN: 1.0,
    Terrain.PASS: 1.2,
}


class OfficerKind(StrEnum):
    """Broad officer archetypes."""

    WARRIOR = "warrior"
    STRATEGIST = "strategist"


class SupplyKind(StrEnum):
    """What a shop supply offer delivers."""

    TROOPS = "troops"
    RATIONS = "rations"
