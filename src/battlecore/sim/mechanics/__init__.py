"""Battle mechanics -- pure functions over combatant state.

Re-exports the public helpers so callers can do::

    from battlecore.sim.mechanics import calculate_damage, add_status_effect
"""

from .damage import apply_damage, calculate_damage
from .status_effects import (
    add_status_effect,
    clear_status_effects,
    release_battle_end_effects,
    remove_status_effect,
)

__all__ = [
    # damage
    "calculate_damage",
    "apply_damage",
    # status_effects
    "add_status_effect",
    "remove_status_effect",
    "clear_status_effects",
    "release_battle_end_effects",
]
