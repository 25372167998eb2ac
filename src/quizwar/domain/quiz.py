"""Quiz answer rules: rewards, combo streaks and question selection."""

from __future__ import annotations

from collections.abc import Sequence

from quizwar.utils.rng import DrawFn, system_draw

from .models import AnswerResult, Question, QuestionID, ResourceLedger
from .rules_config import DEFAULT_RULES, RulesConfig


def resolve_answer(
    question: Question,
    chosen_index: int,
    ledger: ResourceLedger,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> AnswerResult:
    """Score one answer and apply it to the ledger.

    Combo bonuses fire when the streak lands exactly on a threshold; a streak
    of 15 or 20 pays nothing extra.  Reaching the rampage streak also arms the
    one-shot morale buff for the next battle.
    """

    quiz = rules.quiz
    correct = chosen_index == question.correct_index
    base = 0
    bonus = 0
    triggered = False

    if correct:
        base = quiz.tier_rewards[question.difficulty]
        ledger.increase_combo()
        if ledger.combo_streak == quiz.combo_bonus_streak:
            bonus += quiz.combo_bonus
        elif ledger.combo_streak == quiz.rampage_streak:
            bonus += quiz.rampage_bonus
            ledger.morale_buff_active = True
            triggered = True
        ledger.add_currency(base + bonus)
        ledger.mark_solved(question.id)
    else:
        ledger.reset_combo()
        ledger.mark_missed(question.id)

    return AnswerResult(
        is_correct=correct,
        base_reward=base,
        bonus_reward=bonus,
        total_reward=base + bonus,
        combo_streak=ledger.combo_streak,
        triggered_buff=triggered,
    )


def pick_next_question(
    candidates: Sequence[QuestionID],
    ledger: ResourceLedger,
    *,
    draw: DrawFn = system_draw,
) -> QuestionID | None:
    """Pick uniformly among candidates that have not been solved yet."""

    remaining = [qid for qid in candidates if qid not in ledger.solved_question_ids]
    if not remaining:
        return None
    return remaining[draw(0, len(remaining) - 1)]


def wrong_book(ledger: ResourceLedger) -> list[tuple[QuestionID, int]]:
    """Missed, still-unsolved questions, most-missed first."""

    entries = [
        (qid, count)
        for qid, count in ledger.missed_question_counts.items()
        if qid not in ledger.solved_question_ids
    ]
    return sorted(entries, key=lambda item: (-item[1], item[0]))
