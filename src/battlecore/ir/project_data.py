"""Top-level container that bundles every template table into one document."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .characters import CharacterDefinition, EnemyDefinition
from .encounters import Encounter
from .items import ItemDefinition, StatusEffectDefinition
from .skills import SkillDefinition


def _check_refs(
    errors: list[str], owner: str, field: str, ids: list[int], limit: int
) -> None:
    for i in ids:
        if not 0 <= i < limit:
            errors.append(f"{owner}: {field} {i} out of range (0..{limit - 1})")


class ProjectData(BaseModel):
    """Read-only template tables for a game project.

    Every cross reference is an index into one of the lists below, so the
    validator rejects dangling ids up front; the battle engine never has
    to bounds-check template lookups at runtime.
    """

    characters: list[CharacterDefinition] = Field(default_factory=list)
    enemies: list[EnemyDefinition] = Field(default_factory=list)
    skills: list[SkillDefinition] = Field(default_factory=list)
    items: list[ItemDefinition] = Field(default_factory=list)
    status_effects: list[StatusEffectDefinition] = Field(default_factory=list)
    encounters: list[Encounter] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_references(self) -> ProjectData:
        n_skills = len(self.skills)
        n_items = len(self.items)
        n_effects = len(self.status_effects)
        errors: list[str] = []

        for i, char in enumerate(self.characters):
            owner = f"character {i} ({char.name})"
            _check_refs(errors, owner, "attack_skill_id", [char.attack_skill_id], n_skills)
            _check_refs(
                errors, owner, "learned skill",
                [ls.skill_id for ls in char.learned_skills], n_skills,
            )

        for i, enemy in enumerate(self.enemies):
            owner = f"enemy {i} ({enemy.name})"
            _check_refs(errors, owner, "attack_skill_id", [enemy.attack_skill_id], n_skills)
            _check_refs(errors, owner, "skill", enemy.skill_ids, n_skills)
            _check_refs(
                errors, owner, "dropped item",
                [d.item_id for d in enemy.dropped_items], n_items,
            )

        for i, skill in enumerate(self.skills):
            owner = f"skill {i} ({skill.name})"
            _check_refs(errors, owner, "added status effect", skill.adds_status_effect_ids, n_effects)
            _check_refs(errors, owner, "removed status effect", skill.removes_status_effect_ids, n_effects)

        for i, item in enumerate(self.items):
            if item.on_attack_skill_id is not None:
                _check_refs(
                    errors, f"item {i} ({item.name})", "on_attack_skill_id",
                    [item.on_attack_skill_id], n_skills,
                )

        for encounter in self.encounters:
            _check_refs(
                errors, f"encounter {encounter.name!r}", "enemy",
                [u.enemy_idx for u in encounter.units], len(self.enemies),
            )

        if errors:
            raise ValueError("Invalid project data:\n  " + "\n  ".join(errors))
        return self
