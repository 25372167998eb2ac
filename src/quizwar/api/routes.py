"""HTTP routes for the quizwar API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from quizwar.api.runtime import ApiState, BattleCommand, SessionService
from quizwar.domain import models as dm
from quizwar.domain.enums import Difficulty, OfficerKind, SupplyKind, Terrain
from quizwar.domain.shop import PurchaseResult

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class LedgerSummary(BaseModel):
    id: int
    currency: int
    troops: int
    rations: int
    combo_streak: int
    morale_buff_active: bool
    progress_index: int
    solved_count: int
    missed_count: int
    owned_officer_ids: list[str]


class OfficerSummary(BaseModel):
    id: str
    name: str
    kind: OfficerKind
    price: int
    attack_bonus: float
    enemy_morale_multiplier: float
    loss_reduction: float
    defeat_loss_halve: bool


class StageSummary(BaseModel):
    order: int
    name: str
    enemy_commander: str
    enemy_troops: int
    required_rations: int
    terrain: Terrain
    terrain_multiplier: float
    reward_currency: int
    note: str


class OfferSummary(BaseModel):
    id: str
    name: str
    kind: SupplyKind
    amount: int
    price: int


class QuestionPayload(BaseModel):
    id: str = Field(min_length=1)
    correct_index: int = Field(ge=0)
    difficulty: Difficulty = Difficulty.MEDIUM


class AnswerRequest(BaseModel):
    question: QuestionPayload
    chosen_index: int


class AnswerResponse(BaseModel):
    is_correct: bool
    base_reward: int
    bonus_reward: int
    total_reward: int
    combo_streak: int
    triggered_buff: bool
    currency: int


class NextQuestionRequest(BaseModel):
    candidates: list[str] = Field(default_factory=list)


class NextQuestionResponse(BaseModel):
    question_id: str | None
    remaining: int


class WrongBookEntry(BaseModel):
    question_id: str
    miss_count: int


class PurchaseResponse(BaseModel):
    success: bool
    detail: str
    spent: int
    ledger: LedgerSummary


class BattleRequest(BaseModel):
    troops: int
    rations: int = Field(default=0, ge=0)
    officer_ids: list[str] = Field(default_factory=list)


class BattleResponse(BaseModel):
    stage_order: int
    stage_name: str
    victory: bool
    own_losses: int
    enemy_losses: int
    morale_multiplier: float
    notes: str
    advanced: bool
    ledger: LedgerSummary


def _ledger_or_404(state: ApiState, session_id: int) -> dm.ResourceLedger:
    try:
        return state.sessions.get_ledger(dm.SessionID(session_id))
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="session not found"
        ) from exc


def _summary(session_id: int, ledger: dm.ResourceLedger) -> LedgerSummary:
    return LedgerSummary.model_validate(
        SessionService.to_ledger_dict(dm.SessionID(session_id), ledger)
    )


def _purchase_response(
    session_id: int, ledger: dm.ResourceLedger, result: PurchaseResult
) -> PurchaseResponse:
    return PurchaseResponse(
        success=result.success,
        detail=result.detail,
        spent=result.spent,
        ledger=_summary(session_id, ledger),
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "sessions": state.sessions.session_count,
    }


@router.get("/officers", response_model=list[OfficerSummary])
async def list_officers(state: ApiStateDep) -> list[OfficerSummary]:
    return [
        OfficerSummary(
            id=officer.id,
            name=officer.name,
            kind=officer.kind,
            price=officer.price,
            attack_bonus=officer.attack_bonus,
            enemy_morale_multiplier=officer.enemy_morale_multiplier,
            loss_reduction=officer.loss_reduction,
            defeat_loss_halve=officer.defeat_loss_halve,
        )
        for officer in state.sessions.officers
    ]


@router.get("/stages", response_model=list[StageSummary])
async def list_stages(state: ApiStateDep) -> list[StageSummary]:
    return [
        StageSummary(
            order=stage.order,
            name=stage.name,
            enemy_commander=stage.enemy_commander,
            enemy_troops=stage.enemy_troops,
            required_rations=stage.required_rations,
            terrain=stage.terrain,
            terrain_multiplier=stage.terrain_multiplier,
            reward_currency=stage.reward_currency,
            note=stage.note,
        )
        for stage in state.sessions.stages
    ]


@router.get("/shop/offers", response_model=list[OfferSummary])
async def list_offers(state: ApiStateDep) -> list[OfferSummary]:
    return [
        OfferSummary(
            id=offer.id,
            name=offer.name,
            kind=offer.kind,
            amount=offer.amount,
            price=offer.price,
        )
        for offer in state.rules.economy.offers
    ]


@router.post("/sessions", response_model=LedgerSummary, status_code=status.HTTP_201_CREATED)
async def create_session(state: ApiStateDep) -> LedgerSummary:
    session_id, ledger = state.sessions.create_session()
    return _summary(int(session_id), ledger)


@router.get("/sessions/{session_id}", response_model=LedgerSummary)
async def get_session(session_id: int, state: ApiStateDep) -> LedgerSummary:
    ledger = _ledger_or_404(state, session_id)
    return _summary(session_id, ledger)


@router.post("/sessions/{session_id}/reset", response_model=LedgerSummary)
async def reset_session(session_id: int, state: ApiStateDep) -> LedgerSummary:
    _ledger_or_404(state, session_id)
    ledger = state.sessions.reset_session(dm.SessionID(session_id))
    return _summary(session_id, ledger)


@router.post("/sessions/{session_id}/answers", response_model=AnswerResponse)
async def submit_answer(
    session_id: int,
    request: AnswerRequest,
    state: ApiStateDep,
) -> AnswerResponse:
    ledger = _ledger_or_404(state, session_id)
    question = dm.Question(
        id=dm.QuestionID(request.question.id),
        correct_index=request.question.correct_index,
        difficulty=request.question.difficulty,
    )
    result = state.sessions.answer(dm.SessionID(session_id), question, request.chosen_index)
    return AnswerResponse(
        is_correct=result.is_correct,
        base_reward=result.base_reward,
        bonus_reward=result.bonus_reward,
        total_reward=result.total_reward,
        combo_streak=result.combo_streak,
        triggered_buff=result.triggered_buff,
        currency=ledger.currency,
    )


@router.post("/sessions/{session_id}/questions/next", response_model=NextQuestionResponse)
async def next_question(
    session_id: int,
    request: NextQuestionRequest,
    state: ApiStateDep,
) -> NextQuestionResponse:
    ledger = _ledger_or_404(state, session_id)
    candidates = [dm.QuestionID(qid) for qid in request.candidates]
    picked = state.sessions.next_question(dm.SessionID(session_id), candidates)
    remaining = sum(1 for qid in candidates if qid not in ledger.solved_question_ids)
    return NextQuestionResponse(question_id=picked, remaining=remaining)


@router.get("/sessions/{session_id}/wrong-book", response_model=list[WrongBookEntry])
async def get_wrong_book(session_id: int, state: ApiStateDep) -> list[WrongBookEntry]:
    _ledger_or_404(state, session_id)
    return [
        WrongBookEntry(question_id=qid, miss_count=count)
        for qid, count in state.sessions.wrong_book(dm.SessionID(session_id))
    ]


@router.post("/sessions/{session_id}/shop/supplies/{offer_id}", response_model=PurchaseResponse)
async def buy_supplies(session_id: int, offer_id: str, state: ApiStateDep) -> PurchaseResponse:
    ledger = _ledger_or_404(state, session_id)
    try:
        result = state.sessions.buy_supplies(dm.SessionID(session_id), offer_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _purchase_response(session_id, ledger, result)


@router.post(
    "/sessions/{session_id}/shop/officers/{officer_id}", response_model=PurchaseResponse
)
async def buy_officer(session_id: int, officer_id: str, state: ApiStateDep) -> PurchaseResponse:
    ledger = _ledger_or_404(state, session_id)
    try:
        result = state.sessions.buy_officer(dm.SessionID(session_id), officer_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _purchase_response(session_id, ledger, result)


@router.post("/sessions/{session_id}/battles", response_model=BattleResponse)
async def fight_battle(
    session_id: int,
    request: BattleRequest,
    state: ApiStateDep,
) -> BattleResponse:
    ledger = _ledger_or_404(state, session_id)
    command = BattleCommand(
        troops=request.troops,
        rations=request.rations,
        officer_ids=list(request.officer_ids),
    )
    try:
        report = state.sessions.fight(dm.SessionID(session_id), command)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    outcome = report.outcome
    return BattleResponse(
        stage_order=report.stage.order,
        stage_name=report.stage.name,
        victory=outcome.victory,
        own_losses=outcome.own_losses,
        enemy_losses=outcome.enemy_losses,
        morale_multiplier=outcome.morale_multiplier,
        notes=outcome.notes,
        advanced=report.advanced,
        ledger=_summary(session_id, ledger),
    )
