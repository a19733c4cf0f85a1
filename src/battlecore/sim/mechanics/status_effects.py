"""Temporary status effect lifecycle -- add, remove, clear, release.

Manages the ``temp_status_effect_ids`` list on
:class:`~battlecore.sim.core.status.BattleStatus` objects.  Effects do not
stack: adding an effect the combatant already has is a no-op.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from battlecore.sim.core.status import BattleStatus


def add_status_effect(status: BattleStatus, effect_id: int) -> bool:
    """Add *effect_id* to *status*.

    Returns True if the effect was newly added.
    """
    if effect_id in status.temp_status_effect_ids:
        return False
    status.temp_status_effect_ids.append(effect_id)
    _clamp_resources(status)
    return True


def remove_status_effect(status: BattleStatus, effect_id: int) -> bool:
    """Remove *effect_id* from *status*.

    Returns True if the effect was present.
    """
    if effect_id not in status.temp_status_effect_ids:
        return False
    status.temp_status_effect_ids.remove(effect_id)
    _clamp_resources(status)
    return True


def clear_status_effects(status: BattleStatus) -> None:
    """Remove every temporary status effect (e.g. on death)."""
    status.temp_status_effect_ids.clear()


def release_battle_end_effects(status: BattleStatus) -> list[int]:
    """Remove the effects flagged ``release_on_battle_end``.

    Returns the removed effect ids.
    """
    effects = status.project.status_effects
    released = [
        eid for eid in status.temp_status_effect_ids
        if effects[eid].release_on_battle_end
    ]
    status.temp_status_effect_ids[:] = [
        eid for eid in status.temp_status_effect_ids if eid not in released
    ]
    _clamp_resources(status)
    return released


def _clamp_resources(status: BattleStatus) -> None:
    """Keep HP/MP within the (possibly changed) maxima."""
    stats = status.stats
    status.hp = min(status.hp, stats.mhp)
    status.mp = min(status.mp, stats.mmp)
