"""Declarative rule configuration for the quizwar domain."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import Difficulty, SupplyKind


def _default_tier_rewards() -> dict[Difficulty, int]:
    return {Difficulty.EASY: 10, Difficulty.MEDIUM: 20, Difficulty.HARD: 30}


@dataclass(frozen=True, slots=True)
class QuizRules:
    """Answer rewards and combo thresholds."""

    tier_rewards: dict[Difficulty, int] = field(default_factory=_default_tier_rewards)
    combo_bonus_streak: int = 5
    combo_bonus: int = 50
    rampage_streak: int = 10  # also grants the morale buff
    rampage_bonus: int = 150


@dataclass(frozen=True, slots=True)
class BattleRules:
    """Parameters for the weighted-lottery battle formula."""

    defender_advantage: float = 1.2
    morale_buff_multiplier: float = 1.10
    loss_reduction_cap: float = 0.80

    victory_loss_factor: float = 0.20
    victory_loss_min: float = 0.05
    victory_loss_max: float = 0.30
    victory_min_losses: int = 10

    defeat_loss_factor: float = 0.60
    defeat_loss_min: float = 0.40
    defeat_loss_max: float = 0.70
    defeat_min_losses: int = 20
    defeat_halve_factor: float = 0.5
    defeat_enemy_loss_ratio: float = 0.1


@dataclass(frozen=True, slots=True)
class SupplyOffer:
    """A priced bundle of troops or rations sold in the shop."""

    id: str
    name: str
    kind: SupplyKind
    amount: int
    price: int


def _default_offers() -> tuple[SupplyOffer, ...]:
    return (
        SupplyOffer("militia", "Village militia", SupplyKind.TROOPS, 100, 50),
        SupplyOffer("veterans", "Veteran infantry", SupplyKind.TROOPS, 1000, 450),
        SupplyOffer("small_granary", "Small granary", SupplyKind.RATIONS, 100, 100),
        SupplyOffer("large_granary", "Large granary", SupplyKind.RATIONS, 300, 300),
    )


@dataclass(frozen=True, slots=True)
class EconomyRules:
    """Starting balance and shop offers."""

    starting_currency: int = 0
    offers: tuple[SupplyOffer, ...] = field(default_factory=_default_offers)


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    quiz: QuizRules = field(default_factory=QuizRules)
    battle: BattleRules = field(default_factory=BattleRules)
    economy: EconomyRules = field(default_factory=EconomyRules)


DEFAULT_RULES = RulesConfig()
