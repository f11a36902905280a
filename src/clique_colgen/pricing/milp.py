"""MILP-based exact pricing subproblem solver."""

from typing import AbstractSet, FrozenSet, List

import numpy as np
from scipy.optimize import milp, LinearConstraint, Bounds
from scipy.sparse import lil_matrix

from ..exceptions import RelaxationError
from ..graph import Graph
from ..independent_sets import Fingerprint
from .base import PricingOracle, first_allowed, total_weight, weight_map


class MilpPricingOracle(PricingOracle):
    """Exact MILP solver for the Maximum Weight Independent Set pricing subproblem.

    Formulation (on the positive-weight subgraph V'):
        maximize  sum  w[v] * x[v]           for v in V'
        s.t.      x[u] + x[v] <= 1           for all edges (u,v) in G[V']
                  sum_{v in S} x[v] <= |S|-1 for every rejected optimum S
                  x[v] in {0, 1}

    When no independent superset of the optimum is allowed by *skip*, a
    no-good row cutting that optimum off is added and the MILP is re-solved.
    Each row removes at least one candidate, so the loop ends with an allowed
    set or with no improving set at all.
    """

    def __init__(self, epsilon: float = 1e-4):
        self.epsilon = epsilon

    def solve(
        self,
        graph: Graph,
        weights: np.ndarray,
        skip: AbstractSet[Fingerprint] = frozenset(),
    ) -> List[FrozenSet[int]]:
        node_list = graph.all_nodes()
        if not node_list:
            return []
        w = weight_map(graph, weights)

        # Filter to positive-weight subgraph V' = {v | w[v] > 0}
        filtered_nodes = [v for v in node_list if w[v] > self.epsilon]
        if not filtered_nodes:
            return []
        filtered_weights = np.array([w[v] for v in filtered_nodes])
        filtered_node_to_idx = {node: i for i, node in enumerate(filtered_nodes)}
        n_filt = len(filtered_nodes)

        edges = [
            (u, v) for u, v in graph.edges()
            if u in filtered_node_to_idx and v in filtered_node_to_idx
        ]
        rows: List[np.ndarray] = []
        if edges:
            A_ub = lil_matrix((len(edges), n_filt), dtype=float)
            for i, (u, v) in enumerate(edges):
                A_ub[i, filtered_node_to_idx[u]] = 1
                A_ub[i, filtered_node_to_idx[v]] = 1
            rows = list(A_ub.toarray())
        rhs: List[float] = [1.0] * len(rows)

        # Objective: maximize weighted sum -> minimize negative
        c_psp = -filtered_weights
        integrality = np.ones(n_filt, dtype=int)

        while True:
            constraints = []
            if rows:
                constraints = [LinearConstraint(np.vstack(rows), -np.inf, np.array(rhs))]
            result = milp(
                c=c_psp,
                constraints=constraints,
                integrality=integrality,
                bounds=Bounds(lb=0, ub=1),
            )
            if not result.success:
                raise RelaxationError(f"Pricing MILP failed: {result.message}")

            selected = [filtered_nodes[j] for j in range(n_filt) if result.x[j] > 0.5]
            if not selected or total_weight(selected, w) <= 1.0 + self.epsilon:
                return []

            members = first_allowed(graph, selected, skip)
            if members is not None:
                return [frozenset(members)]

            # every superset of this optimum is skipped
            no_good = np.zeros(n_filt)
            for v in selected:
                no_good[filtered_node_to_idx[v]] = 1
            rows.append(no_good)
            rhs.append(float(no_good.sum()) - 1.0)
