"""Template data schema for the battle engine.

Characters, enemies, skills, items, status effects, and encounters are
Pydantic models that serialise cleanly to/from JSON.  :class:`ProjectData`
is the top-level container the battle engine reads from.
"""

from .characters import CharacterDefinition, EnemyDefinition, ItemDrop, LearnedSkill
from .encounters import Encounter, EncounterUnit
from .items import ItemDefinition, StatusEffectDefinition
from .project_data import ProjectData
from .skills import DamageDefinition, DamageType, SkillDefinition, SkillScope
from .stats import Curve, StatBlock, StatProgressions

__all__ = [
    # characters
    "CharacterDefinition",
    "EnemyDefinition",
    "ItemDrop",
    "LearnedSkill",
    # encounters
    "Encounter",
    "EncounterUnit",
    # items
    "ItemDefinition",
    "StatusEffectDefinition",
    # project_data
    "ProjectData",
    # skills
    "DamageDefinition",
    "DamageType",
    "SkillDefinition",
    "SkillScope",
    # stats
    "Curve",
    "StatBlock",
    "StatProgressions",
]
