"""Battle simulation runner -- drives battles with a fixed tick and collects telemetry.

Provides two key classes:

- **BattleSimulator**: plays one battle to completion the way a frame loop
  would: ticking time, letting a party controller act, and acknowledging
  every notification as soon as it appears.
- **BatchRunner**: runs many seeded battles of one encounter.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from battlecore.sim.ai.base import BattleAI
from battlecore.sim.ai.random_ai import RandomAI, RandomEnemyAI
from battlecore.sim.config import BattleConfig
from battlecore.sim.core.battle import Battle
from battlecore.sim.core.rng import GameRNG
from battlecore.sim.core.status import BattleEntityType
from battlecore.sim.telemetry import BattleTelemetry

if TYPE_CHECKING:
    from battlecore.ir.encounters import Encounter
    from battlecore.ir.project_data import ProjectData
    from battlecore.sim.core.battle import BattleActionNotification
    from battlecore.sim.core.status import PartyParameters

logger = logging.getLogger(__name__)

_DEFAULT_TICK = 1.0 / 60.0
_DEFAULT_MAX_SECONDS = 600.0


# =====================================================================
# BattleSimulator
# =====================================================================

class BattleSimulator:
    """Runs a single battle until it ends or the time limit passes.

    Parameters
    ----------
    party_ai:
        Controller for the party, called before every tick.  ``None`` means
        nobody acts for the party.
    tick_seconds:
        Battle time advanced per tick.
    max_seconds:
        Battle time after which the simulation gives up (``"timeout"``).
    """

    def __init__(
        self,
        party_ai: BattleAI | None = None,
        tick_seconds: float = _DEFAULT_TICK,
        max_seconds: float = _DEFAULT_MAX_SECONDS,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be > 0, got {tick_seconds}")
        self.party_ai = party_ai
        self.tick_seconds = tick_seconds
        self.max_seconds = max_seconds

    def run(self, battle: Battle) -> BattleTelemetry:
        party_hp_start = sum(s.hp for s in battle.party_status)
        telemetry = BattleTelemetry(
            encounter_name=battle.encounter.name,
            result="timeout",
            elapsed_seconds=0.0,
            actions_resolved=0,
            party_hp_start=party_hp_start,
            party_hp_end=party_hp_start,
        )

        # The constructor's initial tick may already have resolved an action.
        self._collect(battle, telemetry)

        while not battle.is_over and battle.time < self.max_seconds:
            if self.party_ai is not None:
                self.party_ai.update(battle)
            battle.advance_time(self.tick_seconds)
            self._collect(battle, telemetry)

        telemetry.elapsed_seconds = battle.time
        telemetry.party_hp_end = sum(s.hp for s in battle.party_status)
        if battle.victory:
            telemetry.result = "victory"
            telemetry.experience = battle.victory_experience
            telemetry.gold = battle.gold_drops
            telemetry.item_drops = battle.generate_item_drops()
        elif battle.defeat:
            telemetry.result = "defeat"
        else:
            logger.warning(
                "Battle %r did not finish within %.0fs", battle.encounter.name, self.max_seconds,
            )

        battle.release_temp_status_effects()
        return telemetry

    @staticmethod
    def _collect(battle: Battle, telemetry: BattleTelemetry) -> None:
        """Record and acknowledge the outstanding notification, if any."""
        notification = battle.get_notification()
        if notification is None:
            return
        _record_notification(notification, telemetry)
        battle.dismiss_notification()


def _record_notification(
    notification: BattleActionNotification, telemetry: BattleTelemetry
) -> None:
    action = notification.action
    telemetry.actions_resolved += 1
    telemetry.actions_by_kind[action.kind] = telemetry.actions_by_kind.get(action.kind, 0) + 1

    damage = sum(max(0, hit.hp_damage) for hit in notification.hits)
    if action.actor.entity_type == BattleEntityType.PARTY:
        telemetry.damage_dealt_by_party += damage
    else:
        telemetry.damage_dealt_by_enemies += damage


# =====================================================================
# BatchRunner
# =====================================================================

class BatchRunner:
    """Runs many seeded battles of one encounter with random controllers."""

    def __init__(
        self,
        project: ProjectData,
        party_ids: list[int],
        party_params: PartyParameters,
        encounter: Encounter,
        config: BattleConfig | None = None,
        tick_seconds: float = _DEFAULT_TICK,
        max_seconds: float = _DEFAULT_MAX_SECONDS,
    ) -> None:
        self.project = project
        self.party_ids = party_ids
        self.party_params = party_params
        self.encounter = encounter
        self.config = config
        self.tick_seconds = tick_seconds
        self.max_seconds = max_seconds

    def run_single(self, seed: int) -> BattleTelemetry:
        """Run one battle whose every random stream derives from *seed*."""
        master_rng = GameRNG(seed)
        battle = Battle(
            self.project,
            self.party_ids,
            self.party_params,
            self.encounter,
            ai=RandomEnemyAI(rng=master_rng.fork("enemy_ai")),
            rng=master_rng.fork("battle"),
            config=self.config,
        )
        simulator = BattleSimulator(
            party_ai=RandomAI(BattleEntityType.PARTY, rng=master_rng.fork("party_ai")),
            tick_seconds=self.tick_seconds,
            max_seconds=self.max_seconds,
        )
        return simulator.run(battle)

    def run_batch(self, n_runs: int, base_seed: int = 42) -> list[BattleTelemetry]:
        """Run *n_runs* battles with seeds ``base_seed .. base_seed + n_runs - 1``."""
        results = [self.run_single(base_seed + i) for i in range(n_runs)]
        wins = sum(1 for r in results if r.result == "victory")
        logger.info(
            "Ran %d battles of %r: %d victories", n_runs, self.encounter.name, wins,
        )
        return results
