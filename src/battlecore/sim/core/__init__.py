"""Core simulation primitives for the battle engine."""

from battlecore.sim.core.rng import GameRNG
from battlecore.sim.core.status import BattleEntityType, BattleStatus, PartyParameters
from battlecore.sim.core.actions import (
    AttackAction,
    BattleAction,
    Hit,
    HitOutcome,
    SkillAction,
    TakenDamage,
)
from battlecore.sim.core.battle import Battle, BattleActionNotification

__all__ = [
    # rng
    "GameRNG",
    # status
    "BattleEntityType",
    "BattleStatus",
    "PartyParameters",
    # actions
    "AttackAction",
    "SkillAction",
    "BattleAction",
    "Hit",
    "HitOutcome",
    "TakenDamage",
    # battle
    "Battle",
    "BattleActionNotification",
]
