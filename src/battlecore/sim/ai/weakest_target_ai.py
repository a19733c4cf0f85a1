"""Deterministic controller that focuses the weakest opponent.

Each ready combatant of the controlled side basic-attacks the living
opponent with the lowest current HP (ties go to the lowest index).  It
never uses skills, which makes it a stable baseline for tests and batch
comparisons against :class:`~battlecore.sim.ai.random_ai.RandomAI`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from battlecore.sim.ai.base import BattleAI, opponent_of
from battlecore.sim.core.actions import AttackAction
from battlecore.sim.core.status import BattleEntityType

if TYPE_CHECKING:
    from battlecore.sim.core.battle import Battle


class WeakestTargetAI(BattleAI):
    def __init__(self, controlled: BattleEntityType = BattleEntityType.PARTY) -> None:
        self.controlled = controlled

    def update(self, battle: Battle) -> None:
        for status in battle.ready_of(self.controlled):
            living = battle.living(opponent_of(self.controlled))
            if not living:
                return
            target = min(living, key=lambda s: (s.hp, s.index))
            battle.submit_action(AttackAction(actor=status, targets=[target]))
