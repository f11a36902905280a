"""Exact pricing by depth-first branch-and-bound over independent sets."""

from typing import AbstractSet, FrozenSet, List, Optional, Set

import numpy as np

from ..graph import Graph
from ..independent_sets import Fingerprint
from .base import PricingOracle, first_allowed, weight_map


class BranchAndBoundPricingOracle(PricingOracle):
    """Exact maximum-weight independent set search, used when greedy pricing fails.

    Positive-weight nodes are sorted by descending weight and every
    independent set among them is enumerated once: a set grows by nodes that
    come later in the order and are not adjacent to it. A branch is cut when
    its weight plus the weight of every remaining candidate cannot beat the
    best set found so far (initially the improvement threshold ``1 +
    epsilon``).

    A candidate is turned into an independent superset whose fingerprint is
    not in *skip* (its maximal extension when allowed). Candidates with no
    allowed superset are passed over and the search goes on to the next best
    set.

    Parameters
    ----------
    epsilon : float
        Improving means total weight > 1 + epsilon.
    """

    def __init__(self, epsilon: float = 1e-4):
        self.epsilon = epsilon
        self.nodes_explored = 0
        self.best_weight = 0.0

    def solve(
        self,
        graph: Graph,
        weights: np.ndarray,
        skip: AbstractSet[Fingerprint] = frozenset(),
    ) -> List[FrozenSet[int]]:
        self.nodes_explored = 0
        self.best_weight = 0.0
        if len(graph) == 0:
            return []

        w = weight_map(graph, weights)
        candidates = sorted(
            (v for v in graph.all_nodes() if w[v] > self.epsilon),
            key=lambda v: (-w[v], graph.index_of(v)),
        )
        if not candidates:
            return []

        self._graph = graph
        self._weights = w
        self._skip = skip
        self._best: Optional[Set[int]] = None
        self._threshold = 1.0 + self.epsilon

        self._expand([], 0.0, candidates)

        if self._best is None:
            return []
        self.best_weight = self._threshold
        return [frozenset(self._best)]

    def _expand(self, chosen: List[int], weight: float, candidates: List[int]) -> None:
        self.nodes_explored += 1
        if weight > self._threshold:
            members = first_allowed(self._graph, chosen, self._skip)
            if members is not None:
                self._best = members
                self._threshold = weight

        w = self._weights
        suffix = [0.0] * (len(candidates) + 1)
        for i in range(len(candidates) - 1, -1, -1):
            suffix[i] = suffix[i + 1] + w[candidates[i]]

        for i, v in enumerate(candidates):
            if weight + suffix[i] <= self._threshold:
                return
            neighbors = self._graph.neighbors_of(v)
            remaining = [u for u in candidates[i + 1:] if u not in neighbors]
            self._expand(chosen + [v], weight + w[v], remaining)
