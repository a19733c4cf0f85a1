"""The battle orchestrator.

A :class:`Battle` owns every combatant status, the readiness schedule, the
pending-action queue, and the single notification slot.  An external
update loop drives it by calling :meth:`Battle.advance_time` once per frame
with the elapsed time; controllers and player input submit actions through
:meth:`Battle.submit_action`.

The whole state is confined to one instance and must be driven from a
single thread: no method suspends or blocks.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from battlecore.sim.config import BattleConfig
from battlecore.sim.core.actions import BattleAction, Hit
from battlecore.sim.core.rng import GameRNG
from battlecore.sim.core.status import BattleEntityType, BattleStatus, PartyParameters
from battlecore.sim.mechanics.status_effects import release_battle_end_effects

if TYPE_CHECKING:
    from battlecore.ir.characters import EnemyDefinition
    from battlecore.ir.encounters import Encounter
    from battlecore.ir.project_data import ProjectData
    from battlecore.sim.ai.base import BattleAI

logger = logging.getLogger(__name__)


@dataclass
class BattleActionNotification:
    """A resolved action and the hits it produced, held until dismissed."""

    action: BattleAction
    hits: list[Hit] = field(default_factory=list)


class Battle:
    """Real-time-with-discretization battle between a party and an encounter.

    Parameters
    ----------
    project:
        Template tables; read, never mutated.
    party_ids:
        Character ids of the fighting party members, in party order.
    party_params:
        Levels, HP/MP, equipment, status effects, and rows for every
        character (indexed by character id).
    encounter:
        The enemy roster.
    ai:
        Optional controller invoked every tick to submit actions.
    rng:
        Seeded RNG for hit rolls, drops, and random targeting.  Defaults to
        ``GameRNG(seed=0)``.
    config:
        Timing and combat constants.

    Raises
    ------
    ValueError
        If a party id is not a valid character, the party parameters do not
        cover a party id or name an unknown item or status effect, or an
        encounter unit is not a valid enemy.
    """

    def __init__(
        self,
        project: ProjectData,
        party_ids: list[int],
        party_params: PartyParameters,
        encounter: Encounter,
        ai: BattleAI | None = None,
        rng: GameRNG | None = None,
        config: BattleConfig | None = None,
    ) -> None:
        for character_id in party_ids:
            if not 0 <= character_id < len(project.characters):
                raise ValueError(f"Invalid party character id {character_id}")
            if not party_params.covers(character_id):
                raise ValueError(
                    f"Party parameters have no entry for character id {character_id}"
                )
            for item_id in party_params.character_equip[character_id]:
                if not 0 <= item_id < len(project.items):
                    raise ValueError(
                        f"Invalid item id {item_id} equipped on character id {character_id}"
                    )
            for effect_id in party_params.initial_character_temp_status_effects[character_id]:
                if not 0 <= effect_id < len(project.status_effects):
                    raise ValueError(
                        f"Invalid status effect id {effect_id} on character id {character_id}"
                    )
        for unit in encounter.units:
            if not 0 <= unit.enemy_idx < len(project.enemies):
                raise ValueError(f"Invalid encounter enemy index {unit.enemy_idx}")

        self.project = project
        self.party_ids = list(party_ids)
        self.encounter = encounter
        self.config = config or BattleConfig()
        self.rng = rng or GameRNG(seed=0)
        self._ai = ai

        self._time = 0.0
        self._defeat = False
        self._victory = False
        self._current_notification: BattleActionNotification | None = None

        # Actions submitted but not yet resolved.  Resolved one at a time so
        # the presentation layer can show each outcome in turn.
        self._action_queue: deque[BattleAction] = deque()

        # Combatants eligible to act, in order of promotion.
        self._ready_queue: deque[BattleStatus] = deque()

        self.party_status: list[BattleStatus] = [
            BattleStatus.from_character(project, party_params, character_id, i)
            for i, character_id in enumerate(self.party_ids)
        ]
        unit_count = len(encounter.units)
        self.enemy_status: list[BattleStatus] = [
            BattleStatus.from_enemy(project, unit, i, unit_count)
            for i, unit in enumerate(encounter.units)
        ]
        self.all_status: list[BattleStatus] = self.party_status + self.enemy_status

        self._seed_readiness()
        self.advance_time(0.0)

    def _seed_readiness(self) -> None:
        """Spread initial readiness linearly from slowest (0.0) to fastest
        (1.0).  A lone combatant starts ready."""
        slowest_to_fastest = sorted(self.all_status, key=lambda s: s.stats.spd)
        count = len(slowest_to_fastest)
        if count == 1:
            slowest_to_fastest[0].readiness = 1.0
            return
        for i, status in enumerate(slowest_to_fastest):
            status.readiness = i / (count - 1)

    # -- terminal state ------------------------------------------------------

    @property
    def defeat(self) -> bool:
        return self._defeat

    @property
    def victory(self) -> bool:
        return self._victory

    @property
    def is_over(self) -> bool:
        return self._defeat or self._victory

    @property
    def time(self) -> float:
        """Total seconds of battle time elapsed."""
        return self._time

    # -- rewards -------------------------------------------------------------

    def _enemy_datas(self) -> list[EnemyDefinition]:
        return [self.project.enemies[s.entity_id] for s in self.enemy_status]

    @property
    def victory_experience(self) -> int:
        return sum(enemy.exp_value for enemy in self._enemy_datas())

    @property
    def gold_drops(self) -> int:
        return sum(enemy.dropped_gold for enemy in self._enemy_datas())

    def generate_item_drops(self) -> list[int]:
        """Roll each enemy's drop table once and return the dropped item ids.

        An enemy drops at most one item: it drops something with probability
        equal to the sum of its table's chances, and the item is then chosen
        weighted by those chances.
        """
        dropped_item_ids: list[int] = []
        for enemy in self._enemy_datas():
            if not enemy.dropped_items:
                continue
            total_chance = sum(drop.chance for drop in enemy.dropped_items)
            if total_chance > 1.0:
                logger.warning(
                    "Enemy %r has a %.1f%% chance of dropping items.",
                    enemy.name, total_chance * 100,
                )

            if self.rng.random_float() < total_chance:
                dropped_item_ids.append(
                    self.rng.weighted_choice(
                        [drop.item_id for drop in enemy.dropped_items],
                        [drop.chance for drop in enemy.dropped_items],
                    )
                )
        return dropped_item_ids

    def release_temp_status_effects(self) -> None:
        """Drop status effects that do not outlive the battle."""
        for status in self.all_status:
            release_battle_end_effects(status)

    # -- notifications -------------------------------------------------------

    def get_notification(self) -> BattleActionNotification | None:
        return self._current_notification

    def dismiss_notification(self) -> None:
        self._current_notification = None

    # -- ready queue queries -------------------------------------------------

    @property
    def ready_entity(self) -> BattleStatus | None:
        """The combatant at the head of the ready queue, if any."""
        return self._ready_queue[0] if self._ready_queue else None

    @property
    def ready_enemies(self) -> list[BattleStatus]:
        return self.ready_of(BattleEntityType.ENEMY)

    def ready_of(self, entity_type: BattleEntityType) -> list[BattleStatus]:
        """Ready combatants of one side, in ready-queue order."""
        return [s for s in self._ready_queue if s.entity_type == entity_type]

    @property
    def ready_queue(self) -> list[BattleStatus]:
        """Snapshot of the ready queue."""
        return list(self._ready_queue)

    @property
    def pending_actions(self) -> list[BattleAction]:
        """Snapshot of the submitted, not yet resolved actions."""
        return list(self._action_queue)

    def living(self, entity_type: BattleEntityType) -> list[BattleStatus]:
        side = self.party_status if entity_type == BattleEntityType.PARTY else self.enemy_status
        return [s for s in side if s.alive]

    def random_alive_of(self, entity_type: BattleEntityType) -> BattleStatus | None:
        """A uniformly random living member of one side, or None."""
        alive = self.living(entity_type)
        if not alive:
            return None
        return self.rng.random_choice(alive)

    # -- actions -------------------------------------------------------------

    def submit_action(self, action: BattleAction) -> None:
        """Queue *action* and take its actor out of the ready queue.

        If the actor is not in the ready queue (it died, or already acted)
        it can no longer act and the action is dropped.
        """
        actor = action.actor
        if actor not in self._ready_queue:
            logger.debug("Dropping %s action from %r: not ready", action.kind, actor)
            return

        self._ready_queue.remove(actor)
        self._action_queue.append(action)
        actor.readiness = 0.0
        logger.debug("Queued %s action from %r", action.kind, actor)

    def _has_pending_action(self, status: BattleStatus) -> bool:
        return any(action.actor is status for action in self._action_queue)

    # -- time ----------------------------------------------------------------

    def advance_time(self, delta_seconds: float) -> None:
        """Advance the battle by one tick of *delta_seconds*.

        Updates readiness, promotes newly ready combatants, runs the
        controller, resolves at most one queued action (only while no
        notification is outstanding), and checks for defeat/victory.  Once
        the battle is over this is a no-op.
        """
        if self._defeat or self._victory:
            return

        self._time += max(0.0, delta_seconds)

        for status in self.all_status:
            status.update(
                self._has_pending_action(status),
                delta_seconds,
                self.config.base_turn_time,
                self.config.speed_scale,
            )

        # sorted() is stable, so equal readiness keeps party-then-enemy order.
        newly_ready = sorted(
            (s for s in self.all_status if s.readiness >= 1.0 and s not in self._ready_queue),
            key=lambda s: -s.readiness,
        )
        for status in newly_ready:
            logger.debug("%r is ready", status)
            self._ready_queue.append(status)

        if self._ai is not None:
            self._ai.update(self)

        if self._action_queue and self._current_notification is None:
            self._resolve_next_action()

        for status in [s for s in self._ready_queue if not s.alive]:
            self._ready_queue.remove(status)

        if all(not s.alive for s in self.party_status):
            self._defeat = True
            self._ready_queue.clear()
            logger.info("Defeat after %.2fs", self._time)
        elif all(not s.alive for s in self.enemy_status):
            self._victory = True
            self._ready_queue.clear()
            logger.info("Victory after %.2fs", self._time)

    def _resolve_next_action(self) -> None:
        action = self._action_queue.popleft()
        if not action.actor.alive:
            # The turn is still announced, with no hits.
            logger.debug("Cancelled %s action from dead %r", action.kind, action.actor)
            self._current_notification = BattleActionNotification(action, [])
            return

        hits = action.process(self)
        self._current_notification = BattleActionNotification(action, hits)
        logger.debug(
            "%r resolved %s: %s",
            action.actor, action.kind,
            ", ".join(f"{h.target.name} {h.outcome.value} {h.hp_damage}" for h in hits) or "no hits",
        )
