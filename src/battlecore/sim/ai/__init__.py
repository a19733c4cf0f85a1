"""Battle controller implementations.

Re-exports the base class and all concrete controllers so consumers can
do::

    from battlecore.sim.ai import BattleAI, RandomEnemyAI
"""

from .base import BattleAI
from .random_ai import RandomAI, RandomEnemyAI
from .weakest_target_ai import WeakestTargetAI

__all__ = ["BattleAI", "RandomAI", "RandomEnemyAI", "WeakestTargetAI"]
