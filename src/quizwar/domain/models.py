"""Dataclasses describing every quizwar game entity.

The rules layer only interacts with these types.  Catalog records
(:class:`Officer`, :class:`Stage`) and questions are immutable; the
:class:`ResourceLedger` is the single mutable aggregate and is owned by the
session that created it.  Every rule function receives the ledger explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from .enums import Difficulty, OfficerKind, Terrain

# --- Strongly typed identifiers -------------------------------------------------

QuestionID = NewType("QuestionID", str)
OfficerID = NewType("OfficerID", str)
SessionID = NewType("SessionID", int)


# --- Catalog records ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Officer:
    """Officer catalog entry and its battle modifiers."""

    id: OfficerID
    name: str
    kind: OfficerKind
    price: int
    attack_bonus: float = 0.0
    enemy_morale_multiplier: float = 1.0
    loss_reduction: float = 0.0
    defeat_loss_halve: bool = False


@dataclass(frozen=True, slots=True)
class Stage:
    """Fixed battle encounter in the campaign sequence."""

    order: int
    name: str
    enemy_troops: int
    required_rations: int
    terrain: Terrain = Terrain.PLAIN
    reward_currency: int = 0
    enemy_commander: str = ""
    note: str = ""

    @property
    def terrain_multiplier(self) -> float:
        return self.terrain.multiplier


@dataclass(frozen=True, slots=True)
class Question:
    """The parts of a quiz question the rules care about."""

    id: QuestionID
    correct_index: int
    difficulty: Difficulty = Difficulty.MEDIUM


# --- Mutable session state ------------------------------------------------------


@dataclass(slots=True)
class ResourceLedger:
    """Economic and progress state of one player session.

    Amount-taking methods clamp at zero; they never reject input.  The two
    guarded withdrawals report failure through their return value.
    """

    currency: int = 0
    troops: int = 0
    rations: int = 0
    combo_streak: int = 0
    morale_buff_active: bool = False
    progress_index: int = 0
    solved_question_ids: set[QuestionID] = field(default_factory=set)
    missed_question_counts: dict[QuestionID, int] = field(default_factory=dict)
    owned_officer_ids: set[OfficerID] = field(default_factory=set)
    starting_currency: int = 0

    @classmethod
    def fresh(cls, starting_currency: int = 0) -> ResourceLedger:
        """Create a ledger in its initial configuration."""

        starting = max(0, starting_currency)
        return cls(currency=starting, starting_currency=starting)

    # Economy

    def add_currency(self, amount: int) -> None:
        self.currency = max(0, self.currency + amount)

    def spend_currency(self, amount: int) -> bool:
        if amount < 0 or self.currency < amount:
            return False
        self.currency -= amount
        return True

    def add_troops(self, amount: int) -> None:
        self.troops = max(0, self.troops + amount)

    def add_rations(self, amount: int) -> None:
        self.rations = max(0, self.rations + amount)

    def consume_rations(self, amount: int) -> bool:
        if amount < 0 or self.rations < amount:
            return False
        self.rations -= amount
        return True

    # Combo and buff

    def increase_combo(self) -> None:
        self.combo_streak += 1

    def reset_combo(self) -> None:
        self.combo_streak = 0

    def clear_morale_buff(self) -> None:
        self.morale_buff_active = False

    # Question bookkeeping

    def mark_solved(self, question_id: QuestionID) -> None:
        """Record a correct answer; a solved question leaves the wrong book."""

        self.solved_question_ids.add(question_id)
        self.missed_question_counts.pop(question_id, None)

    def mark_missed(self, question_id: QuestionID) -> None:
        """Count a wrong answer unless the question was already solved."""

        if question_id in self.solved_question_ids:
            return
        self.missed_question_counts[question_id] = (
            self.missed_question_counts.get(question_id, 0) + 1
        )

    # Officers

    def own_officer(self, officer_id: OfficerID) -> None:
        self.owned_officer_ids.add(officer_id)

    def has_officer(self, officer_id: OfficerID) -> bool:
        return officer_id in self.owned_officer_ids

    def reset_all(self) -> None:
        """Restore the initial configuration.  Irreversible."""

        self.currency = self.starting_currency
        self.troops = 0
        self.rations = 0
        self.combo_streak = 0
        self.morale_buff_active = False
        self.progress_index = 0
        self.solved_question_ids = set()
        self.missed_question_counts = {}
        self.owned_officer_ids = set()


# --- Result records -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnswerResult:
    """Outcome of answering one question."""

    is_correct: bool
    base_reward: int
    bonus_reward: int
    total_reward: int
    combo_streak: int
    triggered_buff: bool


@dataclass(frozen=True, slots=True)
class BattleOutcome:
    """Outcome of one battle, produced fresh for display."""

    victory: bool
    own_losses: int
    enemy_losses: int
    morale_multiplier: float
    notes: str
    effective_troops: int = 0
    own_power: float = 0.0
    enemy_power: float = 0.0
    draw: int = 0
