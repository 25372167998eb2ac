"""Unit tests for battle resolution."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from quizwar.domain import battle, catalog
from quizwar.domain import models as dm
from quizwar.domain.enums import OfficerKind, Terrain


def _stage(
    enemy_troops: int = 500,
    *,
    terrain: Terrain = Terrain.PLAIN,
    reward: int = 0,
    order: int = 1,
) -> dm.Stage:
    return dm.Stage(
        order=order,
        name=f"stage-{order}",
        enemy_troops=enemy_troops,
        required_rations=100,
        terrain=terrain,
        reward_currency=reward,
    )


def _officer(officer_id: str, **modifiers) -> dm.Officer:
    return dm.Officer(
        id=dm.OfficerID(officer_id),
        name=officer_id,
        kind=OfficerKind.WARRIOR,
        price=100,
        **modifiers,
    )


def _ledger(troops: int = 500, rations: int = 500) -> dm.ResourceLedger:
    return dm.ResourceLedger(troops=troops, rations=rations)


def test_fully_supplied_victory_matches_reference_scenario():
    ledger = _ledger()
    outcome = battle.resolve_battle(
        _stage(), 500, 500, [], ledger, options=battle.BattleOptions(fixed_draw=1)
    )

    assert outcome.victory
    assert outcome.own_power == pytest.approx(500)
    assert outcome.enemy_power == pytest.approx(600)
    assert outcome.effective_troops == 500
    assert outcome.own_losses == 120
    assert outcome.enemy_losses == 500
    assert outcome.morale_multiplier == 1.0
    assert ledger.troops == 380
    assert ledger.rations == 0


def test_lottery_boundary_between_victory_and_defeat():
    win = battle.resolve_battle(
        _stage(), 500, 500, [], _ledger(), options=battle.BattleOptions(fixed_draw=500)
    )
    loss = battle.resolve_battle(
        _stage(), 500, 500, [], _ledger(), options=battle.BattleOptions(fixed_draw=501)
    )
    assert win.victory
    assert not loss.victory
    assert loss.draw == 501


def test_draw_range_covers_both_weights():
    seen: list[tuple[int, int]] = []

    def recording_draw(low: int, high: int) -> int:
        seen.append((low, high))
        return high

    outcome = battle.resolve_battle(
        _stage(), 500, 500, [], _ledger(), options=battle.BattleOptions(draw=recording_draw)
    )
    assert seen == [(1, 1100)]
    assert not outcome.victory


def test_defeat_losses_and_enemy_attrition():
    ledger = _ledger()
    outcome = battle.resolve_battle(
        _stage(), 500, 500, [], ledger, options=battle.BattleOptions(fixed_draw=1100)
    )

    assert not outcome.victory
    assert outcome.own_losses == 200
    assert outcome.enemy_losses == 50
    assert ledger.troops == 300


@pytest.mark.parametrize(
    ("troops", "rations", "expected"),
    [(100, 40, 0), (100, 100, 100), (100, 150, 100), (100, 70, 40), (-5, 10, 0), (50, -3, 0)],
)
def test_effective_troops_under_supply(troops, rations, expected):
    assert battle.effective_troops(troops, rations) == expected


def test_starved_army_cannot_win():
    ledger = _ledger(troops=100, rations=40)
    outcome = battle.resolve_battle(
        _stage(), 100, 40, [], ledger, options=battle.BattleOptions(fixed_draw=1)
    )

    assert outcome.effective_troops == 0
    assert not outcome.victory
    assert outcome.own_losses == 60
    assert ledger.rations == 0
    assert ledger.troops == 40


def test_officer_aggregation_caps_loss_reduction():
    officers = [
        _officer("a", loss_reduction=0.5, attack_bonus=0.1, enemy_morale_multiplier=0.9),
        _officer("b", loss_reduction=0.5, attack_bonus=0.2, enemy_morale_multiplier=0.5),
        _officer("c", defeat_loss_halve=True),
    ]
    modifiers = battle.aggregate_officers(officers)

    assert modifiers.loss_reduction == 0.80
    assert modifiers.attack_bonus == pytest.approx(0.3)
    assert modifiers.enemy_morale_multiplier == pytest.approx(0.45)
    assert modifiers.defeat_loss_halve
    reordered = battle.aggregate_officers(list(reversed(officers)))
    assert reordered.attack_bonus == pytest.approx(modifiers.attack_bonus)
    assert reordered.enemy_morale_multiplier == pytest.approx(modifiers.enemy_morale_multiplier)
    assert reordered.loss_reduction == pytest.approx(modifiers.loss_reduction)
    assert reordered.defeat_loss_halve == modifiers.defeat_loss_halve


def test_no_officers_is_identity():
    modifiers = battle.aggregate_officers([])
    assert modifiers == battle.OfficerModifiers()


def test_officers_shift_power_and_losses():
    zhuge = catalog.officer_by_id("zhuge-liang")
    assert zhuge is not None
    ledger = _ledger(troops=1000, rations=1000)

    outcome = battle.resolve_battle(
        _stage(), 1000, 1000, [zhuge], ledger, options=battle.BattleOptions(fixed_draw=1)
    )

    assert outcome.victory
    assert outcome.own_power == pytest.approx(1400)
    assert outcome.enemy_power == pytest.approx(480)
    assert outcome.own_losses == 62
    assert "Zhuge Liang" in outcome.notes


def test_defeat_loss_halving_officer():
    zhao = catalog.officer_by_id("zhao-yun")
    assert zhao is not None
    ledger = _ledger(troops=100, rations=100)

    outcome = battle.resolve_battle(
        _stage(), 100, 100, [zhao], ledger, options=battle.BattleOptions(fixed_draw=712)
    )

    assert not outcome.victory
    assert outcome.own_losses == 22


def test_minimum_losses_are_bounded_by_commitment():
    ledger = _ledger(troops=20, rations=20)
    big = battle.resolve_battle(
        _stage(enemy_troops=1), 20, 20, [], ledger, options=battle.BattleOptions(fixed_draw=1)
    )
    assert big.victory
    assert big.own_losses == 10

    small = battle.resolve_battle(
        _stage(enemy_troops=1), 5, 5, [], _ledger(5, 5), options=battle.BattleOptions(fixed_draw=1)
    )
    assert small.own_losses == 5


def test_terrain_raises_enemy_power():
    outcome = battle.resolve_battle(
        _stage(terrain=Terrain.PASS),
        500,
        500,
        [],
        _ledger(),
        options=battle.BattleOptions(fixed_draw=1),
    )
    assert outcome.enemy_power == pytest.approx(720)


def test_morale_buff_is_consumed_by_next_battle():
    ledger = _ledger()
    ledger.morale_buff_active = True

    outcome = battle.resolve_battle(
        _stage(), 500, 500, [], ledger, options=battle.BattleOptions(fixed_draw=1)
    )

    assert outcome.morale_multiplier == pytest.approx(1.10)
    assert outcome.own_power == pytest.approx(550)
    assert outcome.own_losses == 109
    assert not ledger.morale_buff_active


def test_victory_reward_is_paid():
    ledger = _ledger()
    outcome = battle.resolve_battle(
        _stage(reward=300), 500, 500, [], ledger, options=battle.BattleOptions(fixed_draw=1)
    )
    assert outcome.victory
    assert ledger.currency == 300
    assert "300 IP" in outcome.notes


def test_defeat_pays_no_reward():
    ledger = _ledger()
    battle.resolve_battle(
        _stage(reward=300), 500, 500, [], ledger, options=battle.BattleOptions(fixed_draw=1100)
    )
    assert ledger.currency == 0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.5, 1),
        (1.49, 1),
        (2.5, 3),
        (3.5, 4),
        (599.9999, 600),
        (-3.2, 0),
        (0.0, 0),
        (0.49999999999999994, 0),
        (4503599627370495.5, 4503599627370496),
    ],
)
def test_round_half_away(value, expected):
    assert battle.round_half_away(value) == expected


@given(
    troops=st.integers(min_value=-100, max_value=5_000),
    rations=st.integers(min_value=-100, max_value=5_000),
    enemy=st.integers(min_value=0, max_value=5_000),
    draw=st.integers(min_value=1, max_value=20_000),
    officer_count=st.integers(min_value=0, max_value=len(catalog.OFFICERS)),
)
def test_losses_never_exceed_commitment(troops, rations, enemy, draw, officer_count):
    ledger = dm.ResourceLedger(troops=max(0, troops), rations=max(0, rations))
    outcome = battle.resolve_battle(
        _stage(enemy_troops=enemy),
        troops,
        rations,
        list(catalog.OFFICERS[:officer_count]),
        ledger,
        options=battle.BattleOptions(fixed_draw=draw),
    )

    assert 0 <= outcome.own_losses <= max(0, troops)
    assert outcome.enemy_losses >= 0
    assert ledger.troops >= 0
    assert ledger.rations >= 0


def test_current_stage_and_progression():
    stages = [_stage(order=1), _stage(order=2), _stage(order=3)]
    ledger = dm.ResourceLedger()

    assert battle.current_stage(ledger, stages).order == 1
    assert battle.advance_progress(ledger, len(stages))
    assert battle.advance_progress(ledger, len(stages))
    assert battle.current_stage(ledger, stages).order == 3
    assert not battle.advance_progress(ledger, len(stages))
    assert ledger.progress_index == 2


def test_current_stage_requires_catalog():
    with pytest.raises(ValueError, match="empty"):
        battle.current_stage(dm.ResourceLedger(), [])
