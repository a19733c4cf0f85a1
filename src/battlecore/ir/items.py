"""Item and status effect definitions -- sources of stat bonuses."""

from __future__ import annotations

from pydantic import BaseModel

from .stats import StatBlock


class ItemDefinition(BaseModel):
    """A single item in the project data."""

    name: str

    equippable: bool = False

    stat_bonuses: StatBlock = StatBlock()
    """Added to the wearer's stats while equipped."""

    on_attack_skill_id: int | None = None
    """If set, basic attacks by the wearer use this skill instead of the
    character's own attack skill (e.g. a fire sword)."""

    price: int = 0


class StatusEffectDefinition(BaseModel):
    """A temporary buff or debuff that modifies stats while active."""

    name: str

    stat_bonuses: StatBlock = StatBlock()

    release_on_battle_end: bool = True
    """If True the effect is removed once the battle is over."""
