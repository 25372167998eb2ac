"""Battle resolution rules."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from quizwar.utils.rng import DrawFn, fixed_draw, system_draw

from .models import BattleOutcome, Officer, ResourceLedger, Stage
from .rules_config import DEFAULT_RULES, BattleRules, RulesConfig


@dataclass(slots=True)
class BattleOptions:
    """Configuration for resolving a battle."""

    draw: DrawFn | None = None
    fixed_draw: int | None = None

    def draw_fn(self) -> DrawFn:
        if self.fixed_draw is not None:
            return fixed_draw(self.fixed_draw)
        return self.draw or system_draw


@dataclass(frozen=True, slots=True)
class OfficerModifiers:
    """Aggregated effect of the officers sent into a battle."""

    attack_bonus: float = 0.0
    enemy_morale_multiplier: float = 1.0
    loss_reduction: float = 0.0
    defeat_loss_halve: bool = False


def aggregate_officers(
    officers: Sequence[Officer], rules: BattleRules = DEFAULT_RULES.battle
) -> OfficerModifiers:
    """Combine officer modifiers; the result does not depend on order."""

    attack_bonus = sum(officer.attack_bonus for officer in officers)
    enemy_morale = math.prod(officer.enemy_morale_multiplier for officer in officers)
    loss_reduction = min(
        rules.loss_reduction_cap, sum(officer.loss_reduction for officer in officers)
    )
    return OfficerModifiers(
        attack_bonus=attack_bonus,
        enemy_morale_multiplier=enemy_morale,
        loss_reduction=loss_reduction,
        defeat_loss_halve=any(officer.defeat_loss_halve for officer in officers),
    )


def effective_troops(committed_troops: int, committed_rations: int) -> int:
    """Troops that actually fight once supply is accounted for.

    Every ration short of the troop commitment removes two fighting troops.
    """

    commit = max(0, committed_troops)
    rations = max(0, committed_rations)
    if rations >= commit:
        return commit
    return max(0, 2 * rations - commit)


def round_half_away(value: float) -> int:
    """Round half away from zero, then floor at zero."""

    magnitude = abs(value)
    whole = math.floor(magnitude)
    # magnitude - whole is exact for doubles
    if magnitude - whole >= 0.5:
        whole += 1
    return max(0, int(math.copysign(whole, value)))


def resolve_battle(
    stage: Stage,
    committed_troops: int,
    committed_rations: int,
    selected_officers: Sequence[Officer],
    ledger: ResourceLedger,
    *,
    options: BattleOptions | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> BattleOutcome:
    """Resolve an attack on ``stage`` and apply the result to the ledger.

    The three-officer limit and the requirement to commit troops at all are
    the caller's policy; any list of officers is accepted here.
    """

    options = options or BattleOptions()
    battle_rules = rules.battle
    modifiers = aggregate_officers(selected_officers, battle_rules)

    commit = max(0, committed_troops)
    rations = max(0, committed_rations)
    fighting = effective_troops(commit, rations)

    morale = 1.0
    if ledger.morale_buff_active:
        morale = battle_rules.morale_buff_multiplier
        ledger.clear_morale_buff()

    own_power = fighting * (1.0 + modifiers.attack_bonus) * morale
    enemy_power = (
        stage.enemy_troops
        * stage.terrain_multiplier
        * battle_rules.defender_advantage
        * modifiers.enemy_morale_multiplier
    )

    own_weight = round_half_away(own_power)
    enemy_weight = round_half_away(enemy_power)
    total_weight = max(1, own_weight + enemy_weight)
    draw = options.draw_fn()(1, total_weight)
    victory = draw <= own_weight

    if victory:
        own_losses, enemy_losses = _victory_losses(
            commit, own_power, enemy_power, stage, modifiers, battle_rules
        )
    else:
        own_losses, enemy_losses = _defeat_losses(
            commit, own_power, enemy_power, stage, modifiers, battle_rules
        )
    own_losses = min(commit, own_losses)

    ledger.troops = max(0, ledger.troops - own_losses)
    ledger.rations = max(0, ledger.rations - rations)

    notes = ["Victory!" if victory else "Defeat..."]
    if selected_officers:
        names = ", ".join(officer.name for officer in selected_officers)
        notes.append(f"(Officers: {names})")
    if morale != 1.0:
        notes.append(f"Morale x{morale:.2f}.")
    if victory and stage.reward_currency > 0:
        ledger.add_currency(stage.reward_currency)
        notes.append(f"Earned {stage.reward_currency} IP.")

    return BattleOutcome(
        victory=victory,
        own_losses=own_losses,
        enemy_losses=enemy_losses,
        morale_multiplier=morale,
        notes=" ".join(notes),
        effective_troops=fighting,
        own_power=own_power,
        enemy_power=enemy_power,
        draw=draw,
    )


def _victory_losses(
    commit: int,
    own_power: float,
    enemy_power: float,
    stage: Stage,
    modifiers: OfficerModifiers,
    rules: BattleRules,
) -> tuple[int, int]:
    ratio = enemy_power / max(own_power, 1.0)
    loss_rate = _clamp(
        ratio * rules.victory_loss_factor, rules.victory_loss_min, rules.victory_loss_max
    )
    loss_rate *= 1.0 - modifiers.loss_reduction
    own_losses = max(rules.victory_min_losses, round_half_away(commit * loss_rate))
    # the defenders are routed
    return own_losses, stage.enemy_troops


def _defeat_losses(
    commit: int,
    own_power: float,
    enemy_power: float,
    stage: Stage,
    modifiers: OfficerModifiers,
    rules: BattleRules,
) -> tuple[int, int]:
    ratio = own_power / max(enemy_power, 1.0)
    loss_rate = _clamp(
        (1.0 - ratio) * rules.defeat_loss_factor, rules.defeat_loss_min, rules.defeat_loss_max
    )
    loss_rate *= 1.0 - modifiers.loss_reduction
    if modifiers.defeat_loss_halve:
        loss_rate *= rules.defeat_halve_factor
    own_losses = max(rules.defeat_min_losses, round_half_away(commit * loss_rate))
    enemy_losses = round_half_away(stage.enemy_troops * rules.defeat_enemy_loss_ratio)
    return own_losses, enemy_losses


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def current_stage(ledger: ResourceLedger, stages: Sequence[Stage]) -> Stage:
    """Stage the ledger's progress index points at."""

    if not stages:
        raise ValueError("stage catalog is empty")
    return stages[min(ledger.progress_index, len(stages) - 1)]


def advance_progress(ledger: ResourceLedger, stage_count: int) -> bool:
    """Move on to the next stage after a victory.

    Returns ``False`` when the ledger already sits on the last stage.
    """

    if ledger.progress_index + 1 >= stage_count:
        return False
    ledger.progress_index += 1
    return True
