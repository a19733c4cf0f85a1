"""Base class for controllers that decide actions during a battle.

A controller is handed to :class:`~battlecore.sim.core.battle.Battle` (or
driven by the runner) and is called once per tick, after newly ready
combatants are promoted and before the next queued action resolves.  It
submits actions through ``battle.submit_action``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from battlecore.sim.core.status import BattleEntityType

if TYPE_CHECKING:
    from battlecore.sim.core.battle import Battle
    from battlecore.sim.core.status import BattleStatus


class BattleAI(ABC):
    """Base class for battle controllers."""

    @abstractmethod
    def update(self, battle: Battle) -> None:
        """Submit actions for the ready combatants this controller drives.

        Parameters
        ----------
        battle:
            The battle in progress, giving the controller full
            observability.  Combatants already holding a queued action are
            no longer in the ready queue and must not be acted for.
        """


def opponent_of(entity_type: BattleEntityType) -> BattleEntityType:
    """Return the side that *entity_type* fights against."""
    if entity_type == BattleEntityType.PARTY:
        return BattleEntityType.ENEMY
    return BattleEntityType.PARTY


def affordable_skill_ids(battle: Battle, status: BattleStatus) -> list[int]:
    """Known skills whose MP cost does not exceed the combatant's MP."""
    return [
        skill_id for skill_id in status.known_skill_ids
        if battle.project.skills[skill_id].cost <= status.mp
    ]
