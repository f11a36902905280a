"""Abstract base class for pricing oracles."""

from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional, Set

import numpy as np

from ..graph import Graph
from ..independent_sets import Fingerprint, extend_set, fingerprint


class PricingOracle(ABC):
    """Interface for maximum-weight independent set subproblem solvers.

    The same subproblem serves both searches. In the coloring search the
    weights are the dual prices of the covering rows and an improving set is
    a column with negative reduced cost. In the clique search the weights
    are the current node values and an improving set is a violated
    ``sum x_v <= 1`` cut.
    """

    @abstractmethod
    def solve(
        self,
        graph: Graph,
        weights: np.ndarray,
        skip: AbstractSet[Fingerprint] = frozenset(),
    ) -> List[FrozenSet[int]]:
        """Return improving independent sets.

        An independent set S is *improving* when
        sum(weights[graph.index_of(v)] for v in S) > 1 + epsilon.

        Args:
            graph: The graph being searched.
            weights: One weight per node, laid out by ``graph.index_of``.
            skip: Fingerprints that must not be returned (excluded columns
                and columns already in the pool).

        Returns:
            Independent sets (node ids) with total weight above the
            threshold. Empty when no improving set was found.
        """


def weight_map(graph: Graph, weights: np.ndarray) -> Dict[int, float]:
    return {v: float(weights[i]) for i, v in enumerate(graph.all_nodes())}


def total_weight(nodes: Iterable[int], weights: Dict[int, float]) -> float:
    return sum(weights[v] for v in nodes)


def first_allowed(
    graph: Graph,
    nodes: Iterable[int],
    skip: AbstractSet[Fingerprint],
) -> Optional[Set[int]]:
    """An independent superset of *nodes* whose fingerprint is not in *skip*.

    Tries the maximal extension first, then *nodes* itself, then grows the
    set one compatible node at a time. Every set visited without success is
    in *skip*, so the search is short when *skip* is small. Returns None
    when every independent superset is skipped.
    """
    base = set(nodes)
    members = extend_set(graph, set(base), graph.all_nodes())
    if fingerprint(members) not in skip:
        return members
    if fingerprint(base) not in skip:
        return base
    compatible = [
        v for v in graph.all_nodes()
        if v not in base and base.isdisjoint(graph.neighbors_of(v))
    ]
    return _grow(graph, base, compatible, skip)


def _grow(
    graph: Graph,
    base: Set[int],
    compatible: List[int],
    skip: AbstractSet[Fingerprint],
) -> Optional[Set[int]]:
    for i, v in enumerate(compatible):
        grown = base | {v}
        if fingerprint(grown) not in skip:
            return grown
        neighbors = graph.neighbors_of(v)
        found = _grow(graph, grown, [u for u in compatible[i + 1:] if u not in neighbors], skip)
        if found is not None:
            return found
    return None
