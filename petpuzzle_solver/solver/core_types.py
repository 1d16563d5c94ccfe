"""Core types for the solver system.

Result containers, search statistics and the cancellation contract shared by
every search stage.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..moves.move import Move


class SolverCancelled(Exception):
    """Raised inside a search when its CancelToken fires."""


class CancelToken:
    """
    Cooperative cancellation for a solve.

    Combines an optional wall-clock limit with an optional external predicate.
    Searches call ``tick()`` once per node expansion; the token is actually
    checked every ``interval`` ticks and at each explicit ``check()``.
    """

    def __init__(self, time_limit: Optional[float] = None,
                 should_cancel: Optional[Callable[[], bool]] = None,
                 interval: int = 256):
        self.time_limit = time_limit
        self.should_cancel = should_cancel
        self.interval = max(1, interval)
        self.started = time.monotonic()
        self._ticks = 0

    def is_cancelled(self) -> bool:
        if self.time_limit is not None and time.monotonic() - self.started > self.time_limit:
            return True
        return self.should_cancel is not None and bool(self.should_cancel())

    def check(self) -> None:
        """Raise SolverCancelled if the solve should stop."""
        if self.is_cancelled():
            raise SolverCancelled()

    def tick(self) -> None:
        self._ticks += 1
        if self._ticks % self.interval == 0:
            self.check()


@dataclass
class SearchStats:
    """Statistics of one setup search."""
    nodes_expanded: int = 0
    cache_hits: int = 0
    cache_size: int = 0
    max_depth: int = 0
    iterations: int = 0  # IDA* passes
    time_ms: float = 0.0


@dataclass
class SetupSearchResult:
    """
    Result of a setup search.

    ``moves`` is None when nothing was found within budget, and an empty list
    when the start state already admits a direct solve.
    """
    moves: Optional[List[Move]]
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def found(self) -> bool:
        return self.moves is not None


@dataclass
class SolverStats:
    """Statistics of a whole solve."""
    stages: int = 0
    direct_solves: int = 0
    astar_searches: int = 0
    ida_searches: int = 0
    astar_nodes: int = 0
    ida_nodes: int = 0
    elapsed_ms: float = 0.0
    cancelled: bool = False

    def add_astar(self, stats: SearchStats) -> None:
        self.astar_searches += 1
        self.astar_nodes += stats.nodes_expanded

    def add_ida(self, stats: SearchStats) -> None:
        self.ida_searches += 1
        self.ida_nodes += stats.nodes_expanded


@dataclass
class SolveResult:
    """Outcome of a solve: move records on success, an error message otherwise."""
    success: bool
    records: List[str] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)
    used_hint: bool = False
    error: Optional[str] = None
    stats: SolverStats = field(default_factory=SolverStats)

    def __str__(self) -> str:
        if not self.success:
            return f"No solution found: {self.error}"
        return f"Solution with {len(self.records)} records ({len(self.moves)} steps)"
