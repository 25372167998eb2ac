"""Runtime primitives backing the quizwar HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from quizwar.config import Settings, get_settings
from quizwar.domain import battle, catalog, quiz, shop
from quizwar.domain import models as dm
from quizwar.domain.rules_config import DEFAULT_RULES, RulesConfig
from quizwar.utils.rng import DrawFn, system_draw

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BattleCommand:
    """API-facing request to attack the current stage."""

    troops: int
    rations: int
    officer_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class BattleReport:
    """Outcome of a battle plus the progression it caused."""

    stage: dm.Stage
    outcome: dm.BattleOutcome
    advanced: bool


class SessionService:
    """Create, look up and mutate in-memory player sessions."""

    def __init__(
        self,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        starting_currency: int | None = None,
        max_officers: int = 3,
        officers: Sequence[dm.Officer] = catalog.OFFICERS,
        stages: Sequence[dm.Stage] = catalog.STAGES,
        draw: DrawFn = system_draw,
    ) -> None:
        self._rules = rules
        self._starting_currency = (
            starting_currency if starting_currency is not None else rules.economy.starting_currency
        )
        self._max_officers = max_officers
        self._officers = tuple(officers)
        self._stages = tuple(stages)
        self._draw = draw
        self._ledgers: dict[dm.SessionID, dm.ResourceLedger] = {}

    @property
    def officers(self) -> tuple[dm.Officer, ...]:
        return self._officers

    @property
    def stages(self) -> tuple[dm.Stage, ...]:
        return self._stages

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    @property
    def session_count(self) -> int:
        return len(self._ledgers)

    def create_session(self) -> tuple[dm.SessionID, dm.ResourceLedger]:
        session_id = self._next_identifier()
        ledger = dm.ResourceLedger.fresh(self._starting_currency)
        self._ledgers[session_id] = ledger
        logger.info("session %s created with %s IP", int(session_id), ledger.currency)
        return session_id, ledger

    def _next_identifier(self) -> dm.SessionID:
        if not self._ledgers:
            return dm.SessionID(1)
        return dm.SessionID(max(int(sid) for sid in self._ledgers) + 1)

    def get_ledger(self, session_id: dm.SessionID) -> dm.ResourceLedger:
        """Return a session's ledger or raise ``KeyError``."""

        try:
            return self._ledgers[session_id]
        except KeyError:
            raise KeyError(f"session {int(session_id)} not found") from None

    def reset_session(self, session_id: dm.SessionID) -> dm.ResourceLedger:
        ledger = self.get_ledger(session_id)
        ledger.reset_all()
        logger.info("session %s reset", int(session_id))
        return ledger

    def answer(
        self, session_id: dm.SessionID, question: dm.Question, chosen_index: int
    ) -> dm.AnswerResult:
        ledger = self.get_ledger(session_id)
        result = quiz.resolve_answer(question, chosen_index, ledger, rules=self._rules)
        if result.triggered_buff:
            logger.info("session %s reached a %s streak", int(session_id), result.combo_streak)
        return result

    def next_question(
        self, session_id: dm.SessionID, candidates: Sequence[dm.QuestionID]
    ) -> dm.QuestionID | None:
        ledger = self.get_ledger(session_id)
        return quiz.pick_next_question(candidates, ledger, draw=self._draw)

    def wrong_book(self, session_id: dm.SessionID) -> list[tuple[dm.QuestionID, int]]:
        return quiz.wrong_book(self.get_ledger(session_id))

    def buy_supplies(self, session_id: dm.SessionID, offer_id: str) -> shop.PurchaseResult:
        ledger = self.get_ledger(session_id)
        return shop.purchase_supplies(ledger, offer_id, rules=self._rules)

    def buy_officer(self, session_id: dm.SessionID, officer_id: str) -> shop.PurchaseResult:
        ledger = self.get_ledger(session_id)
        officer = catalog.officer_by_id(officer_id, self._officers)
        if officer is None:
            raise ValueError(f"unknown officer '{officer_id}'")
        return shop.purchase_officer(ledger, officer)

    def fight(self, session_id: dm.SessionID, command: BattleCommand) -> BattleReport:
        """Attack the current stage, enforcing the session's battle policy."""

        ledger = self.get_ledger(session_id)
        try:
            officers = self._validate_command(ledger, command)
        except ValueError as exc:
            logger.warning("session %s battle rejected: %s", int(session_id), exc)
            raise

        stage = battle.current_stage(ledger, self._stages)
        outcome = battle.resolve_battle(
            stage,
            command.troops,
            command.rations,
            officers,
            ledger,
            options=battle.BattleOptions(draw=self._draw),
            rules=self._rules,
        )
        advanced = outcome.victory and battle.advance_progress(ledger, len(self._stages))
        logger.info(
            "session %s %s stage %s: lost %s, enemy lost %s",
            int(session_id),
            "won" if outcome.victory else "lost",
            stage.order,
            outcome.own_losses,
            outcome.enemy_losses,
        )
        return BattleReport(stage=stage, outcome=outcome, advanced=advanced)

    def _validate_command(
        self, ledger: dm.ResourceLedger, command: BattleCommand
    ) -> list[dm.Officer]:
        officers = self._selected_officers(ledger, command.officer_ids)
        if command.troops <= 0:
            raise ValueError("at least one troop must be committed")
        if command.troops > ledger.troops:
            raise ValueError(f"only {ledger.troops} troops available")
        if command.rations < 0 or command.rations > ledger.rations:
            raise ValueError(f"only {ledger.rations} rations available")
        return officers

    def _selected_officers(
        self, ledger: dm.ResourceLedger, officer_ids: Sequence[str]
    ) -> list[dm.Officer]:
        unique_ids = list(dict.fromkeys(officer_ids))
        if len(unique_ids) > self._max_officers:
            raise ValueError(f"at most {self._max_officers} officers may join a battle")
        selected: list[dm.Officer] = []
        for officer_id in unique_ids:
            officer = catalog.officer_by_id(officer_id, self._officers)
            if officer is None:
                raise ValueError(f"unknown officer '{officer_id}'")
            if not ledger.has_officer(officer.id):
                raise ValueError(f"{officer.name} is not in your service")
            selected.append(officer)
        return selected

    @staticmethod
    def to_ledger_dict(session_id: dm.SessionID, ledger: dm.ResourceLedger) -> dict[str, object]:
        """Return a JSON-friendly view of a session's ledger."""

        return {
            "id": int(session_id),
            "currency": ledger.currency,
            "troops": ledger.troops,
            "rations": ledger.rations,
            "combo_streak": ledger.combo_streak,
            "morale_buff_active": ledger.morale_buff_active,
            "progress_index": ledger.progress_index,
            "solved_count": len(ledger.solved_question_ids),
            "missed_count": len(ledger.missed_question_counts),
            "owned_officer_ids": sorted(ledger.owned_officer_ids),
        }


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        draw: DrawFn = system_draw,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.sessions = SessionService(
            rules=rules,
            starting_currency=self.settings.starting_currency,
            max_officers=self.settings.max_officers_per_battle,
            draw=draw,
        )

    async def shutdown(self) -> None:
        logger.info("discarding %s in-memory sessions", self.sessions.session_count)


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
