"""Encounter definitions -- which enemies take part in a battle."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EncounterUnit(BaseModel):
    """A single enemy slot in an encounter."""

    enemy_idx: int
    """Index into ``ProjectData.enemies``."""

    x: int = 0
    y: int = 0
    """Screen placement; carried for the presentation layer only."""


class Encounter(BaseModel):
    """An ordered roster of enemy templates."""

    name: str = ""
    units: list[EncounterUnit] = Field(default_factory=list)
