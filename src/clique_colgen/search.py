"""State shared by the recursive clique and coloring searches.

Every constraint a tree node adds goes through a :class:`ConstraintScope`
and every excluded column through :meth:`ExcludedSets.excluding`; both undo
their changes when the ``with`` block exits, however it exits. The live
model therefore always holds exactly the constraints of the current
root-to-node path.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List, Optional, Set

from .exceptions import RelaxationError
from .graph import Graph
from .independent_sets import Fingerprint
from .relaxation import RelaxationOracle, Relation, Terms

logger = logging.getLogger(__name__)

EPSILON = 1e-4


def is_integral(value: float, eps: float = EPSILON) -> bool:
    return abs(value - round(value)) < eps


def almost_equal(value: float, target: float, eps: float = EPSILON) -> bool:
    return abs(value - target) < eps


@dataclass
class SearchConfig:
    """Tuning knobs for both searches.

    epsilon: absolute tolerance for integrality and bound comparisons.
    time_limit: wall-clock budget in seconds; None searches to completion.
    max_cut_rounds: separation rounds per tree node in the clique search.
    max_columns: sets returned per greedy pricing call.
    exact_pricing: exact fallback for pricing, "bnb", "milp" or None.
    exact_separation: also run the exact fallback when separating clique cuts.
    pairwise_constraints: add x_u + x_v <= 1 for every non-edge up front.
    verbose: print per-node progress to stdout.
    """

    epsilon: float = EPSILON
    time_limit: Optional[float] = None
    max_cut_rounds: int = 50
    max_columns: int = 3
    exact_pricing: Optional[str] = "bnb"
    exact_separation: bool = False
    pairwise_constraints: bool = False
    verbose: bool = False


@dataclass
class Incumbent:
    """Best feasible solution found so far and its size."""

    solution: Any
    size: int


@dataclass
class SearchStats:
    tree_nodes: int = 0
    max_depth: int = 0
    pruned: int = 0
    infeasible: int = 0
    relaxation_faults: int = 0
    cuts_added: int = 0
    columns_added: int = 0
    incumbent_updates: int = 0
    timed_out: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConstraintScope:
    """Adds constraints to a relaxation and removes them all on exit."""

    def __init__(self, relaxation: RelaxationOracle) -> None:
        self._relaxation = relaxation
        self._handles: List[int] = []

    def add(self, terms: Terms, relation: Relation, rhs: float) -> int:
        handle = self._relaxation.add_constraint(terms, relation, rhs)
        self._handles.append(handle)
        return handle

    def __len__(self) -> int:
        return len(self._handles)

    def __enter__(self) -> "ConstraintScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        while self._handles:
            self._relaxation.remove_constraint(self._handles.pop())
        return False


class ExcludedSets:
    """Fingerprints of columns fixed to zero on the current search path."""

    def __init__(self) -> None:
        self._fingerprints: Set[Fingerprint] = set()

    def __contains__(self, fp: object) -> bool:
        return fp in self._fingerprints

    def __len__(self) -> int:
        return len(self._fingerprints)

    def __iter__(self) -> Iterator[Fingerprint]:
        return iter(self._fingerprints)

    @contextmanager
    def excluding(self, fp: Fingerprint) -> Iterator[None]:
        if fp in self._fingerprints:
            raise ValueError(f"Set {fp} is already excluded on this path")
        self._fingerprints.add(fp)
        try:
            yield
        finally:
            self._fingerprints.remove(fp)


class SearchContext:
    """Incumbent, registry, statistics and deadline of one search run."""

    def __init__(
        self,
        graph: Graph,
        relaxation: RelaxationOracle,
        config: SearchConfig,
        incumbent: Incumbent,
    ) -> None:
        self.graph = graph
        self.relaxation = relaxation
        self.config = config
        self.incumbent = incumbent
        self.excluded = ExcludedSets()
        self.stats = SearchStats()
        self.started = time.monotonic()
        self.deadline = (
            self.started + config.time_limit if config.time_limit is not None else None
        )

    @property
    def eps(self) -> float:
        return self.config.epsilon

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def expired(self) -> bool:
        if self.deadline is not None and time.monotonic() >= self.deadline:
            if not self.stats.timed_out:
                logger.info("Time limit of %.1fs reached, unwinding", self.config.time_limit)
            self.stats.timed_out = True
            return True
        return False

    def enter(self, depth: int) -> None:
        self.stats.tree_nodes += 1
        self.stats.max_depth = max(self.stats.max_depth, depth)

    def scope(self) -> ConstraintScope:
        return ConstraintScope(self.relaxation)

    def solve(self) -> Optional[float]:
        """Solve the relaxation; None means the node must be pruned."""
        try:
            result = self.relaxation.solve()
        except RelaxationError as exc:
            self.fault(exc)
            return None
        if not result.success:
            self.stats.infeasible += 1
            return None
        return result.objective

    def fault(self, exc: RelaxationError) -> None:
        """Count a solver failure; the caller prunes the node."""
        self.stats.relaxation_faults += 1
        logger.warning("Solver failed, pruning node: %s", exc)

    def prune(self, reason: str) -> None:
        self.stats.pruned += 1
        logger.debug("Pruned node %d: %s", self.stats.tree_nodes, reason)

    def improve(self, solution: Any, size: int) -> None:
        logger.info("New incumbent of size %d (was %d)", size, self.incumbent.size)
        self.report(f"  new incumbent: size {size}")
        self.incumbent = Incumbent(solution, size)
        self.stats.incumbent_updates += 1

    def report(self, message: str) -> None:
        if self.config.verbose:
            print(message)
