"""Random controller -- picks targets and skills uniformly at random.

``RandomEnemyAI`` is the reference enemy behaviour.  ``RandomAI`` is the
same policy for either side; the batch runner uses it to drive the party so
that whole battles can play out without input.

Behaviour, for every ready combatant of the controlled side:
    - Pick a random living opponent.  If there is none the battle is about
      to end, so the rest of the pass is skipped.
    - With ``skill_chance`` probability try a skill: choose uniformly among
      the known skills whose cost the combatant can pay.  With no
      affordable skill, attack instead.
    - Otherwise attack the chosen opponent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from battlecore.ir.skills import SkillScope
from battlecore.sim.ai.base import BattleAI, affordable_skill_ids, opponent_of
from battlecore.sim.core.actions import AttackAction, SkillAction
from battlecore.sim.core.rng import GameRNG
from battlecore.sim.core.status import BattleEntityType

if TYPE_CHECKING:
    from battlecore.sim.core.battle import Battle
    from battlecore.sim.core.status import BattleStatus


class RandomAI(BattleAI):
    """Controller that acts randomly for one side of the battle.

    Parameters
    ----------
    controlled:
        Which side this controller submits actions for.
    rng:
        Seeded RNG for deterministic randomness.  If ``None``, a default
        ``GameRNG(seed=0)`` is created.
    skill_chance:
        Probability (0.0 -- 1.0) of attempting a skill instead of a basic
        attack.  Default is 0.5.
    """

    def __init__(
        self,
        controlled: BattleEntityType = BattleEntityType.ENEMY,
        rng: GameRNG | None = None,
        skill_chance: float = 0.5,
    ) -> None:
        self.controlled = controlled
        self._rng = rng or GameRNG(seed=0)
        self._skill_chance = skill_chance

    def update(self, battle: Battle) -> None:
        opponents = opponent_of(self.controlled)
        for status in battle.ready_of(self.controlled):
            living_opponents = battle.living(opponents)
            if not living_opponents:
                return
            target = self._rng.random_choice(living_opponents)

            if self._rng.random_float() < self._skill_chance:
                skill_ids = affordable_skill_ids(battle, status)
                if skill_ids:
                    skill_id = self._rng.random_choice(skill_ids)
                    targets = self._skill_targets(battle, status, skill_id, target)
                    battle.submit_action(
                        SkillAction(actor=status, targets=targets, skill_id=skill_id)
                    )
                    continue

            battle.submit_action(AttackAction(actor=status, targets=[target]))

    def _skill_targets(
        self,
        battle: Battle,
        status: BattleStatus,
        skill_id: int,
        target: BattleStatus,
    ) -> list[BattleStatus]:
        """Aim a skill according to its scope; single-enemy skills hit the
        already chosen opponent."""
        scope = battle.project.skills[skill_id].scope
        if scope == SkillScope.ALL_ENEMIES:
            return battle.living(opponent_of(self.controlled))
        if scope == SkillScope.SINGLE_ALLY:
            return [self._rng.random_choice(battle.living(self.controlled))]
        if scope == SkillScope.ALL_ALLIES:
            return battle.living(self.controlled)
        if scope == SkillScope.SELF:
            return [status]
        return [target]


class RandomEnemyAI(RandomAI):
    """The reference enemy controller: :class:`RandomAI` driving enemies."""

    def __init__(self, rng: GameRNG | None = None, skill_chance: float = 0.5) -> None:
        super().__init__(BattleEntityType.ENEMY, rng=rng, skill_chance=skill_chance)
