"""Stat blocks and level curves shared by character and enemy templates."""

from __future__ import annotations

import math

from pydantic import BaseModel

_STAT_NAMES = ("mhp", "mmp", "atk", "spd", "mag", "arm", "mre")


class StatBlock(BaseModel):
    """The seven numeric stats every combatant carries.

    Used both for absolute stats (template base stats) and for additive
    bonuses (equipment, status effects).
    """

    mhp: int = 0
    """Maximum HP."""

    mmp: int = 0
    """Maximum MP."""

    atk: int = 0
    spd: int = 0
    mag: int = 0
    arm: int = 0
    """Armor -- reduces physical damage."""

    mre: int = 0
    """Magic resistance -- reduces magic damage."""

    def __add__(self, other: StatBlock) -> StatBlock:
        return StatBlock(
            **{name: getattr(self, name) + getattr(other, name) for name in _STAT_NAMES}
        )

    def clamped(self) -> StatBlock:
        """Return a copy with every negative stat raised to 0."""
        return StatBlock(
            **{name: max(0, getattr(self, name)) for name in _STAT_NAMES}
        )


class Curve(BaseModel):
    """Linear growth curve: ``base`` at level 1, plus ``per_level`` each level."""

    base: float = 0.0
    per_level: float = 0.0

    def value(self, level: int) -> int:
        return math.floor(self.base + self.per_level * (level - 1))


class StatProgressions(BaseModel):
    """Per-stat growth curves for a playable character."""

    mhp: Curve = Curve()
    mmp: Curve = Curve()
    atk: Curve = Curve()
    spd: Curve = Curve()
    mag: Curve = Curve()
    arm: Curve = Curve()
    mre: Curve = Curve()

    def at_level(self, level: int) -> StatBlock:
        """Evaluate every curve at *level*."""
        return StatBlock(
            **{name: getattr(self, name).value(level) for name in _STAT_NAMES}
        )
