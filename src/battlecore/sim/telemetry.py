"""Telemetry data model for per-battle statistics.

A lightweight dataclass capturing what is needed to compare encounters and
controllers without storing the whole battle history.  It is a plain
``dataclass`` (not a Pydantic model) to keep collection cheap during batch
runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BattleTelemetry:
    """Stats from a single simulated battle.

    Attributes
    ----------
    encounter_name:
        Name of the encounter fought.
    result:
        ``"victory"``, ``"defeat"``, or ``"timeout"`` if neither happened
        within the simulator's time limit.
    elapsed_seconds:
        Battle time when the simulation stopped.
    actions_resolved:
        Number of actions that produced a notification.
    actions_by_kind:
        Breakdown of resolved actions: ``kind -> count``.
    damage_dealt_by_party:
        Total HP damage party members dealt (healing excluded).
    damage_dealt_by_enemies:
        Total HP damage enemies dealt (healing excluded).
    party_hp_start:
        Summed party HP at the start of the battle.
    party_hp_end:
        Summed party HP when the simulation stopped.
    experience, gold, item_drops:
        Rewards collected on victory; zero/empty otherwise.
    """

    encounter_name: str
    result: str  # "victory", "defeat", or "timeout"
    elapsed_seconds: float
    actions_resolved: int
    party_hp_start: int
    party_hp_end: int
    damage_dealt_by_party: int = 0
    damage_dealt_by_enemies: int = 0
    actions_by_kind: dict[str, int] = field(default_factory=dict)
    experience: int = 0
    gold: int = 0
    item_drops: list[int] = field(default_factory=list)
