"""Tunable timing and combat constants for a battle."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BattleConfig(BaseModel):
    """Constants a :class:`~battlecore.sim.core.battle.Battle` runs with.

    The defaults reproduce the reference pacing: a zero-speed combatant
    gets a turn every four seconds, and 100 speed halves that.
    """

    model_config = {"frozen": True}

    base_turn_time: float = Field(default=4.0, gt=0)
    """Seconds it takes a combatant with 0 speed to become ready."""

    speed_scale: float = Field(default=100.0, gt=0)
    """Readiness rate is ``1 + spd / speed_scale``."""

    critical_multiplier: float = Field(default=1.5, ge=1.0)
    """Multiplier applied to positive damage on a critical hit."""
