"""Per-combatant battle state for the battle engine.

A :class:`BattleStatus` is created once per participant when a battle
starts and is never removed: a dead combatant stays in place as an inert
record so that indices into the party and enemy arrays remain stable.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from battlecore.ir.encounters import EncounterUnit
from battlecore.ir.project_data import ProjectData
from battlecore.ir.stats import StatBlock


class BattleEntityType(str, Enum):
    """Which side of the battle a combatant fights on."""

    PARTY = "PARTY"
    ENEMY = "ENEMY"


# ---------------------------------------------------------------------------
# PartyParameters
# ---------------------------------------------------------------------------

class PartyParameters(BaseModel):
    """Party state supplied by the calling context.

    Every list is indexed by character id and covers *all* characters in
    the project, not only the ones fighting in this battle.
    """

    character_levels: list[int]
    initial_character_hps: list[int]
    initial_character_mps: list[int]
    character_equip: list[list[int]]
    initial_character_temp_status_effects: list[list[int]]
    character_rows: list[int]

    def covers(self, character_id: int) -> bool:
        """Return True if every list has an entry for *character_id*."""
        return all(
            character_id < len(values)
            for values in (
                self.character_levels,
                self.initial_character_hps,
                self.initial_character_mps,
                self.character_equip,
                self.initial_character_temp_status_effects,
                self.character_rows,
            )
        )

    @classmethod
    def defaults_for(cls, project: ProjectData, level: int = 1) -> PartyParameters:
        """Build parameters with every character at *level*, full HP/MP,
        nothing equipped, no status effects, and in the front row."""
        stats = [c.progressions.at_level(level) for c in project.characters]
        n = len(project.characters)
        return cls(
            character_levels=[level] * n,
            initial_character_hps=[s.mhp for s in stats],
            initial_character_mps=[s.mmp for s in stats],
            character_equip=[[] for _ in range(n)],
            initial_character_temp_status_effects=[[] for _ in range(n)],
            character_rows=[0] * n,
        )


# ---------------------------------------------------------------------------
# BattleStatus
# ---------------------------------------------------------------------------

class BattleStatus(BaseModel):
    """Mutable state of one participant in a battle."""

    index: int
    """Position within its side (party or enemy); stable for the battle."""

    entity_type: BattleEntityType
    entity_id: int
    """Index into ``ProjectData.characters`` or ``ProjectData.enemies``."""

    hp: int
    mp: int
    base_stats: StatBlock
    equipment: list[int] = Field(default_factory=list)
    on_attack_skill_ids: list[int] = Field(default_factory=list)
    known_skill_ids: list[int] = Field(default_factory=list)
    temp_status_effect_ids: list[int] = Field(default_factory=list)
    row: int = 0

    readiness: float = 0.0
    """Progress toward the next turn, in ``[0.0, 1.0]``.  1.0 means ready."""

    project: ProjectData = Field(exclude=True, repr=False)

    # Two combatants with identical numbers are still two combatants.
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    # -- queries -------------------------------------------------------------

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def name(self) -> str:
        if self.entity_type == BattleEntityType.PARTY:
            return self.project.characters[self.entity_id].name
        return self.project.enemies[self.entity_id].name

    @property
    def stats(self) -> StatBlock:
        """Base stats plus equipment and temporary status effect bonuses."""
        total = self.base_stats
        for item_id in self.equipment:
            total = total + self.project.items[item_id].stat_bonuses
        for effect_id in self.temp_status_effect_ids:
            total = total + self.project.status_effects[effect_id].stat_bonuses
        return total.clamped()

    # -- time ----------------------------------------------------------------

    def update(
        self,
        has_pending_action: bool,
        delta_seconds: float,
        base_turn_time: float,
        speed_scale: float = 100.0,
    ) -> None:
        """Advance readiness by ``delta_seconds`` worth of time.

        A combatant with an action already queued does not accumulate
        readiness.  Negative deltas are ignored.  Dead combatants sit at 0.
        """
        if not self.alive:
            self.readiness = 0.0
            return
        if has_pending_action or delta_seconds <= 0:
            return

        rate = 1.0 + self.stats.spd / speed_scale
        self.readiness = min(1.0, self.readiness + rate * delta_seconds / base_turn_time)

    # -- construction --------------------------------------------------------

    @classmethod
    def from_character(
        cls,
        project: ProjectData,
        party_params: PartyParameters,
        character_id: int,
        index: int,
    ) -> BattleStatus:
        """Build the status of party member *index* playing *character_id*."""
        character = project.characters[character_id]
        level = party_params.character_levels[character_id]
        equipment = list(party_params.character_equip[character_id])

        on_attack_skill_ids = [
            project.items[item_id].on_attack_skill_id
            for item_id in equipment
            if project.items[item_id].on_attack_skill_id is not None
        ]
        if not on_attack_skill_ids:
            on_attack_skill_ids = [character.attack_skill_id]

        return cls(
            index=index,
            entity_type=BattleEntityType.PARTY,
            entity_id=character_id,
            hp=party_params.initial_character_hps[character_id],
            mp=party_params.initial_character_mps[character_id],
            base_stats=character.progressions.at_level(level),
            equipment=equipment,
            on_attack_skill_ids=on_attack_skill_ids,
            known_skill_ids=character.known_skill_ids(level),
            temp_status_effect_ids=list(
                party_params.initial_character_temp_status_effects[character_id]
            ),
            row=party_params.character_rows[character_id],
            project=project,
        )

    @classmethod
    def from_enemy(
        cls,
        project: ProjectData,
        unit: EncounterUnit,
        index: int,
        unit_count: int,
    ) -> BattleStatus:
        """Build the status of the *index*-th enemy of an encounter.

        Enemies are split into two rows: the first half of the roster
        stands in row 0, the rest in row 1.
        """
        enemy = project.enemies[unit.enemy_idx]
        return cls(
            index=index,
            entity_type=BattleEntityType.ENEMY,
            entity_id=unit.enemy_idx,
            hp=enemy.base_stats.mhp,
            mp=enemy.base_stats.mmp,
            base_stats=enemy.base_stats,
            on_attack_skill_ids=[enemy.attack_skill_id],
            known_skill_ids=list(enemy.skill_ids),
            row=(index * 2) // unit_count,
            project=project,
        )

    def __repr__(self) -> str:
        return (
            f"BattleStatus({self.entity_type.value}[{self.index}] {self.name!r}, "
            f"hp={self.hp}, mp={self.mp}, readiness={self.readiness:.2f})"
        )
