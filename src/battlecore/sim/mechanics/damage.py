"""Damage calculation and application.

Implements the damage pipeline:
    base + atk/mag scaling -> (positive only) minus scaled defense -> floor(0)

Negative raw amounts are healing and skip the defense step.  Application
clamps HP/MP to ``[0, max]`` and handles death.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from battlecore.ir.skills import DamageType

from .status_effects import clear_status_effects

if TYPE_CHECKING:
    from battlecore.ir.skills import DamageDefinition
    from battlecore.ir.stats import StatBlock
    from battlecore.sim.core.status import BattleStatus


def calculate_damage(
    damage: DamageDefinition,
    source_stats: StatBlock,
    target_stats: StatBlock,
    multiplier: float = 1.0,
) -> int:
    """Calculate the final amount of one damage component.

    Pipeline (order matters):
        1. ``base + atk_scale * atk + mag_scale * mag`` from the source
        2. Non-positive results are healing: returned as-is (floored)
        3. Apply *multiplier* (criticals)
        4. Subtract ``defense_scale`` times armor (physical, MP damage) or
           magic resistance (magic)
        5. Floor at 0
    """
    raw = (
        damage.base
        + damage.atk_scale * source_stats.atk
        + damage.mag_scale * source_stats.mag
    )
    if raw <= 0:
        return math.floor(raw)

    raw *= multiplier

    if damage.damage_type == DamageType.MAGIC:
        defense = target_stats.mre
    else:
        defense = target_stats.arm
    raw -= damage.defense_scale * defense

    return max(0, math.floor(raw))


def apply_damage(target: BattleStatus, damage_type: DamageType, amount: int) -> int:
    """Apply *amount* to the target's HP or MP (negative heals).

    Returns the amount actually applied after clamping to ``[0, max]``,
    positive for damage and negative for healing.  A target whose HP drops
    to 0 dies: its readiness resets and temporary effects are cleared.
    """
    stats = target.stats

    if damage_type == DamageType.MP_DAMAGE:
        before = target.mp
        target.mp = min(stats.mmp, max(0, target.mp - amount))
        return before - target.mp

    before = target.hp
    target.hp = min(stats.mhp, max(0, target.hp - amount))
    if before > 0 and target.hp == 0:
        target.readiness = 0.0
        clear_status_effects(target)
    return before - target.hp
