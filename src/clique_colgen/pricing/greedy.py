"""Greedy weighted pricing: the fast first stage of column and cut generation."""

from typing import AbstractSet, Dict, FrozenSet, List, Sequence, Set

import numpy as np

from ..graph import Graph
from ..independent_sets import Fingerprint, extend_set, fingerprint
from .base import PricingOracle, first_allowed, total_weight, weight_map


def _local_search(
    graph: Graph,
    independent_set: Set[int],
    weights: Dict[int, float],
    candidates: Sequence[int],
    max_passes: int = 2,
    epsilon: float = 1e-8,
) -> Set[int]:
    """Improve an independent set via 1-swap local search."""
    improved = set(independent_set)
    for _ in range(max_passes):
        changed = False
        for v in candidates:
            if v in improved:
                continue
            conflicts = {u for u in graph.neighbors_of(v) if u in improved}
            gain = weights[v] - sum(weights[u] for u in conflicts)
            if gain > epsilon:
                improved -= conflicts
                improved.add(v)
                changed = True
        if not changed:
            break
    return improved


class GreedyPricingOracle(PricingOracle):
    """Greedy heuristic for the maximum-weight independent set subproblem.

    Nodes with positive weight are sorted by descending weight (ties: lower
    degree first). A pass starts from one node, then keeps taking the
    heaviest remaining node that is not adjacent to anything taken so far.
    The result is refined by 1-swap local search and finally extended with
    any other compatible node of the graph. When that maximal set is in
    *skip*, another allowed superset of the candidate is returned instead.

    The first pass starts from the heaviest node. Further passes start from
    the next nodes in order until ``max_columns`` distinct improving sets
    are found or the starts run out.

    Parameters
    ----------
    epsilon : float
        Improving means total weight > 1 + epsilon.
    max_columns : int
        Maximum number of sets returned per call.
    local_search_passes : int
        Number of 1-swap passes per candidate; 0 disables local search.
    """

    def __init__(
        self,
        epsilon: float = 1e-4,
        max_columns: int = 3,
        local_search_passes: int = 2,
    ):
        self.epsilon = epsilon
        self.max_columns = max_columns
        self.local_search_passes = local_search_passes

    def solve(
        self,
        graph: Graph,
        weights: np.ndarray,
        skip: AbstractSet[Fingerprint] = frozenset(),
    ) -> List[FrozenSet[int]]:
        nodes = graph.all_nodes()
        if not nodes:
            return []
        w = weight_map(graph, weights)

        order = sorted(
            (v for v in nodes if w[v] > self.epsilon),
            key=lambda v: (-w[v], graph.degree(v), graph.index_of(v)),
        )
        if not order:
            return []

        seen: Set[Fingerprint] = set()
        found: List[FrozenSet[int]] = []
        for start in order:
            if len(found) >= self.max_columns:
                break
            candidate = extend_set(graph, {start}, order)
            if self.local_search_passes > 0:
                candidate = _local_search(
                    graph, candidate, w, order, max_passes=self.local_search_passes
                )
            if total_weight(candidate, w) <= 1.0 + self.epsilon:
                continue
            members = first_allowed(graph, candidate, skip)
            if members is None:
                continue
            sig = fingerprint(members)
            if sig not in seen:
                seen.add(sig)
                found.append(frozenset(members))
        return found
