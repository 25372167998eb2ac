"""Static officer and stage catalogs for the default campaign."""

from __future__ import annotations

from collections.abc import Sequence

from .enums import OfficerKind, Terrain
from .models import Officer, OfficerID, Stage

OFFICERS: tuple[Officer, ...] = (
    Officer(
        id=OfficerID("guan-yu"),
        name="Guan Yu",
        kind=OfficerKind.WARRIOR,
        price=5000,
        attack_bonus=0.20,
        loss_reduction=0.05,
    ),
    Officer(
        id=OfficerID("zhang-fei"),
        name="Zhang Fei",
        kind=OfficerKind.WARRIOR,
        price=4500,
        attack_bonus=0.10,
        enemy_morale_multiplier=0.90,
        loss_reduction=0.05,
    ),
    Officer(
        id=OfficerID("zhao-yun"),
        name="Zhao Yun",
        kind=OfficerKind.WARRIOR,
        price=4800,
        attack_bonus=0.12,
        loss_reduction=0.10,
        defeat_loss_halve=True,
    ),
    Officer(
        id=OfficerID("ma-chao"),
        name="Ma Chao",
        kind=OfficerKind.WARRIOR,
        price=4400,
        attack_bonus=0.15,
        loss_reduction=0.05,
    ),
    Officer(
        id=OfficerID("huang-zhong"),
        name="Huang Zhong",
        kind=OfficerKind.WARRIOR,
        price=4300,
        attack_bonus=0.10,
        loss_reduction=0.08,
    ),
    Officer(
        id=OfficerID("jiang-wei"),
        name="Jiang Wei",
        kind=OfficerKind.STRATEGIST,
        price=3800,
        attack_bonus=0.08,
        enemy_morale_multiplier=0.95,
        loss_reduction=0.08,
    ),
    Officer(
        id=OfficerID("zhuge-liang"),
        name="Zhuge Liang",
        kind=OfficerKind.STRATEGIST,
        price=10000,
        attack_bonus=0.40,
        enemy_morale_multiplier=0.80,
        loss_reduction=0.10,
        defeat_loss_halve=True,
    ),
)

STAGES: tuple[Stage, ...] = (
    Stage(
        order=1,
        name="Uprising at Zhuo",
        enemy_troops=500,
        required_rations=100,
        terrain=Terrain.PLAIN,
        reward_currency=0,
        enemy_commander="Cheng Yuanzhi",
        note="Tutorial stage",
    ),
)


def officer_by_id(
    officer_id: str, officers: Sequence[Officer] = OFFICERS
) -> Officer | None:
    """Return the catalog entry for ``officer_id`` if present."""

    for officer in officers:
        if officer.id == officer_id:
            return officer
    return None


def stage_at(index: int, stages: Sequence[Stage] = STAGES) -> Stage:
    """Return the stage at ``index`` clamped into the catalog bounds."""

    if not stages:
        raise ValueError("stage catalog is empty")
    return stages[max(0, min(index, len(stages) - 1))]
