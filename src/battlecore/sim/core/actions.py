"""Battle actions and the hits they produce.

An action is a command bound to an actor and a set of targets.  Action
kinds form a closed set (:data:`BattleAction`), tagged by ``kind``; each
kind carries its own :meth:`process`, which is the single place where
combat math mutates battle state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, Field

from battlecore.ir.skills import DamageType
from battlecore.sim.core.status import BattleStatus
from battlecore.sim.mechanics.damage import apply_damage, calculate_damage
from battlecore.sim.mechanics.status_effects import (
    add_status_effect,
    remove_status_effect,
)

if TYPE_CHECKING:
    from battlecore.ir.skills import SkillDefinition
    from battlecore.sim.core.battle import Battle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Hit (value objects)
# ---------------------------------------------------------------------------

class HitOutcome(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    CRITICAL = "CRITICAL"


@dataclass
class TakenDamage:
    """One damage component as actually applied to a target.

    ``value`` is positive for damage and negative for healing.
    """

    damage_type: DamageType
    element_id: int
    value: int


@dataclass
class Hit:
    """The result of resolving one action against one target."""

    target: BattleStatus
    damages: list[TakenDamage] = field(default_factory=list)
    outcome: HitOutcome = HitOutcome.HIT
    animation_id: int = 0

    @property
    def hp_damage(self) -> int:
        """Net HP lost by the target (negative if healed)."""
        return sum(
            d.value for d in self.damages if d.damage_type != DamageType.MP_DAMAGE
        )


def resolve_hit(
    battle: Battle,
    actor: BattleStatus,
    target: BattleStatus,
    skills: list[SkillDefinition],
) -> Hit:
    """Apply *skills* from *actor* to *target* as a single hit.

    The first skill decides accuracy, critical chance, and animation; the
    damage components and status effects of every skill are applied in
    order.  Application stops as soon as the target dies.
    """
    primary = skills[0]
    if battle.rng.random_float() >= primary.accuracy:
        return Hit(target=target, outcome=HitOutcome.MISS, animation_id=primary.animation_id)

    critical = (
        primary.critical_chance > 0
        and battle.rng.random_float() < primary.critical_chance
    )
    multiplier = battle.config.critical_multiplier if critical else 1.0

    source_stats = actor.stats
    target_stats = target.stats
    taken: list[TakenDamage] = []

    for skill in skills:
        for damage in skill.damages:
            if not target.alive:
                break
            amount = calculate_damage(damage, source_stats, target_stats, multiplier)
            applied = apply_damage(target, damage.damage_type, amount)
            taken.append(TakenDamage(damage.damage_type, damage.element_id, applied))

        if target.alive:
            for effect_id in skill.adds_status_effect_ids:
                add_status_effect(target, effect_id)
            for effect_id in skill.removes_status_effect_ids:
                remove_status_effect(target, effect_id)

    return Hit(
        target=target,
        damages=taken,
        outcome=HitOutcome.CRITICAL if critical else HitOutcome.HIT,
        animation_id=primary.animation_id,
    )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class _ActionBase(BaseModel):
    """Fields shared by every action kind.

    Each member of :data:`BattleAction` defines ``process(battle)``, which
    resolves the action and returns one hit per living target.
    """

    actor: BattleStatus
    targets: list[BattleStatus] = Field(default_factory=list)

    def _living_targets(self) -> list[BattleStatus]:
        return [t for t in self.targets if t.alive]


class AttackAction(_ActionBase):
    """A basic attack using the actor's on-attack skills.  Costs no MP."""

    kind: Literal["attack"] = "attack"

    def process(self, battle: Battle) -> list[Hit]:
        skills = [battle.project.skills[i] for i in self.actor.on_attack_skill_ids]
        if not skills:
            return []
        return [
            resolve_hit(battle, self.actor, target, skills)
            for target in self._living_targets()
        ]


class SkillAction(_ActionBase):
    """Use of a known skill, paying its MP cost."""

    kind: Literal["skill"] = "skill"
    skill_id: int

    def process(self, battle: Battle) -> list[Hit]:
        skill = battle.project.skills[self.skill_id]
        if skill.cost > self.actor.mp:
            logger.debug(
                "%r can no longer afford %s (cost %d, mp %d)",
                self.actor, skill.name, skill.cost, self.actor.mp,
            )
            return []

        self.actor.mp -= skill.cost
        return [
            resolve_hit(battle, self.actor, target, [skill])
            for target in self._living_targets()
        ]


BattleAction = Annotated[AttackAction | SkillAction, Field(discriminator="kind")]
"""Closed set of action kinds, discriminated on ``kind``."""
