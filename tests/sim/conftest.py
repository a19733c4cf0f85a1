"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from battlecore.ir import (
    CharacterDefinition,
    Curve,
    DamageDefinition,
    DamageType,
    Encounter,
    EncounterUnit,
    EnemyDefinition,
    ProjectData,
    SkillDefinition,
    StatBlock,
    StatProgressions,
)
from battlecore.sim.content.registry import ContentRegistry


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Module-scoped registry with the demo project loaded once."""
    reg = ContentRegistry()
    reg.load_project()
    return reg


@pytest.fixture
def duel_project() -> ProjectData:
    """One hero (spd 10, HP 20, atk 10) against one slime (spd 5, HP 1).

    The only skill is a sure-hit physical attack scaling with atk.
    """
    return ProjectData(
        characters=[
            CharacterDefinition(
                name="Hero",
                progressions=StatProgressions(
                    mhp=Curve(base=20),
                    atk=Curve(base=10),
                    spd=Curve(base=10),
                ),
                attack_skill_id=0,
            ),
        ],
        enemies=[
            EnemyDefinition(
                name="Slime",
                base_stats=StatBlock(mhp=1, atk=3, spd=5),
                attack_skill_id=0,
                exp_value=5,
                dropped_gold=8,
            ),
        ],
        skills=[
            SkillDefinition(
                name="Attack",
                damages=[DamageDefinition(damage_type=DamageType.PHYSICAL, atk_scale=1.0)],
            ),
        ],
    )


@pytest.fixture
def duel_encounter() -> Encounter:
    return Encounter(name="duel", units=[EncounterUnit(enemy_idx=0)])
