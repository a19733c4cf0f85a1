"""Character and enemy templates."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .stats import StatBlock, StatProgressions


class LearnedSkill(BaseModel):
    """A skill a character knows once it reaches ``level``."""

    level: int
    skill_id: int


class CharacterDefinition(BaseModel):
    """A playable character template."""

    name: str

    progressions: StatProgressions = StatProgressions()
    """Stat curves; the battle evaluates them at the character's level."""

    attack_skill_id: int = 0
    """Skill used for basic attacks when no equipped item overrides it."""

    learned_skills: list[LearnedSkill] = Field(default_factory=list)

    def known_skill_ids(self, level: int) -> list[int]:
        """Return the skill ids learned at or below *level*, in list order."""
        return [ls.skill_id for ls in self.learned_skills if ls.level <= level]


class ItemDrop(BaseModel):
    """One entry of an enemy's drop table."""

    item_id: int
    chance: float
    """Probability in [0, 1].  Chances of one enemy's table are summed."""


class EnemyDefinition(BaseModel):
    """An enemy template."""

    name: str

    base_stats: StatBlock = StatBlock()

    attack_skill_id: int = 0

    skill_ids: list[int] = Field(default_factory=list)

    exp_value: int = 0
    dropped_gold: int = 0
    dropped_items: list[ItemDrop] = Field(default_factory=list)
