"""Solver tuning constants.

Solutions depend on these values: two solves of the same level only agree
when they ran with the same budgets.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SolverConfig:
    """
    Search budgets and diagnostics switches.

    Attributes:
        max_astar_nodes: Node expansions allowed per A* setup search
        progress_depth: Depth after which a child whose heuristic is worse
            than its parent's is pruned (A* and IDA*)
        oscillation_window: Number of trailing moves checked for back-and-forth
            shuffling
        ida_max_bound: Largest f bound an IDA* iteration may use
        ida_max_depth: Depth guard for the recursive IDA* pass
        max_stages: Direct-solve / setup-search rounds per solve
        missing_exit_penalty: Heuristic charge for a pet without a matching exit
        time_limit: Seconds before a solve is cancelled (None = unlimited)
        cancel_check_interval: Node expansions between cancellation checks
        verbose: Print progress lines
    """
    max_astar_nodes: int = 40000
    progress_depth: int = 8
    oscillation_window: int = 3
    ida_max_bound: int = 800
    ida_max_depth: int = 400
    max_stages: int = 100
    missing_exit_penalty: int = 1000
    time_limit: Optional[float] = None
    cancel_check_interval: int = 256
    verbose: bool = False

    def with_overrides(self, **changes) -> "SolverConfig":
        """Return a copy with the given fields changed. None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_CONFIG = SolverConfig()
