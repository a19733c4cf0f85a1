"""Skill definitions -- the unit of combat math for attacks and abilities."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DamageType(str, Enum):
    """Which resource a damage component hits and which stat defends it."""

    PHYSICAL = "PHYSICAL"
    """Reduces HP, defended by armor."""

    MAGIC = "MAGIC"
    """Reduces HP, defended by magic resistance."""

    MP_DAMAGE = "MP_DAMAGE"
    """Reduces MP, defended by armor."""


class SkillScope(str, Enum):
    """Who a skill is meant to be aimed at.  Controllers use this to pick
    targets; resolution itself only looks at the submitted targets."""

    SINGLE_ENEMY = "SINGLE_ENEMY"
    ALL_ENEMIES = "ALL_ENEMIES"
    SINGLE_ALLY = "SINGLE_ALLY"
    ALL_ALLIES = "ALL_ALLIES"
    SELF = "SELF"


class DamageDefinition(BaseModel):
    """One damage component of a skill.

    The raw amount is ``base + atk_scale * atk + mag_scale * mag`` using the
    user's stats.  A negative raw amount heals instead.
    """

    damage_type: DamageType = DamageType.PHYSICAL
    element_id: int = 0
    base: float = 0.0
    atk_scale: float = 0.0
    mag_scale: float = 0.0
    defense_scale: float = 0.5
    """Fraction of the target's defending stat subtracted from positive damage."""


class SkillDefinition(BaseModel):
    """Complete definition of a single skill in the project data."""

    name: str

    cost: int = 0
    """MP cost to use.  Basic attacks ignore it."""

    scope: SkillScope = SkillScope.SINGLE_ENEMY

    damages: list[DamageDefinition] = Field(default_factory=list)

    accuracy: float = 1.0
    """Probability that a hit lands."""

    critical_chance: float = 0.0
    """Probability that a landed hit is critical."""

    adds_status_effect_ids: list[int] = Field(default_factory=list)
    removes_status_effect_ids: list[int] = Field(default_factory=list)

    animation_id: int = 0
    """Opaque id handed through to the presentation layer."""
