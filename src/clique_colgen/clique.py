"""Branch-and-cut search for a maximum clique.

maximize   sum x_v
s.t.       sum_{v in S} x_v <= 1    for independent sets S (initial + cuts)
           0 <= x_v <= 1
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, List, Optional, Set

import numpy as np

from .exceptions import RelaxationError
from .graph import Graph
from .independent_sets import extend_set, greedy_independent_sets
from .pricing import GreedyPricingOracle, make_exact_oracle
from .relaxation import LinearRelaxation, Relation, RelaxationOracle, Sense
from .search import Incumbent, SearchConfig, SearchContext, is_integral
from .solution import extract_clique, missing_edges

logger = logging.getLogger(__name__)


@dataclass
class CliqueResult:
    clique: FrozenSet[int]
    size: int
    stats: Dict[str, Any]
    optimal: bool


def greedy_clique(graph: Graph) -> Set[int]:
    """Largest clique found by growing one greedily from every start node.

    Candidates are tried in descending degree order; a node joins when it is
    adjacent to every node already chosen.
    """
    order = sorted(graph.all_nodes(), key=lambda v: (-graph.degree(v), graph.index_of(v)))
    best: Set[int] = set()
    for start in order:
        if graph.degree(start) < len(best):
            continue
        clique = {start}
        for v in order:
            if v not in clique and all(graph.has_edge(v, u) for u in clique):
                clique.add(v)
        if len(clique) > len(best):
            best = clique
    return best


class CliqueSearch:
    """Branch-and-cut over the node-selection LP of one graph.

    The model starts with one ``<= 1`` row per multi-node class of the greedy
    independent-set cover (and optionally one per non-edge). At every tree
    node the LP is re-solved while greedy separation on the current values
    finds violated independent-set cuts; then the node is pruned on its
    bound, accepted as a clique, or split on a fractional variable.
    """

    def __init__(
        self,
        graph: Graph,
        config: Optional[SearchConfig] = None,
        relaxation: Optional[RelaxationOracle] = None,
    ):
        self.graph = graph
        self.config = config if config is not None else SearchConfig()
        self.relaxation = relaxation if relaxation is not None else LinearRelaxation()
        eps = self.config.epsilon
        self.separator = GreedyPricingOracle(epsilon=eps, max_columns=self.config.max_columns)
        self.exact_separator = (
            make_exact_oracle(self.config.exact_pricing, eps)
            if self.config.exact_separation else None
        )
        self._vars: List[int] = []

    def _build_model(self) -> None:
        graph, relaxation = self.graph, self.relaxation
        self._vars = [relaxation.add_variable(0.0, 1.0, f"x{v}") for v in graph.all_nodes()]
        relaxation.set_objective(Sense.MAXIMIZE, [(1.0, x) for x in self._vars])

        for members in greedy_independent_sets(graph).values():
            if len(members) > 1:
                relaxation.add_constraint(self._terms(members), Relation.LE, 1.0)

        if self.config.pairwise_constraints:
            nodes = graph.all_nodes()
            for u, w in missing_edges(graph, nodes):
                relaxation.add_constraint(self._terms((u, w)), Relation.LE, 1.0)

    def _terms(self, nodes):
        return [(1.0, self._vars[self.graph.index_of(v)]) for v in nodes]

    def _values(self) -> np.ndarray:
        return np.array([self.relaxation.value_of(x) for x in self._vars])

    def run(self) -> CliqueResult:
        start = greedy_clique(self.graph)
        ctx = SearchContext(
            self.graph, self.relaxation, self.config,
            Incumbent(frozenset(start), len(start)),
        )
        ctx.report(f"Greedy clique: size {len(start)}")
        if len(self.graph) > 0:
            self._build_model()
            self._search(ctx, 0)

        logger.info(
            "Clique search finished: size %d, %d tree nodes, %d cuts, %.2fs",
            ctx.incumbent.size, ctx.stats.tree_nodes, ctx.stats.cuts_added, ctx.elapsed(),
        )
        stats = ctx.stats.as_dict()
        timer = getattr(self.relaxation, "timer", None)
        if timer is not None:
            stats.update(timer.summary())
        stats["seconds"] = ctx.elapsed()
        return CliqueResult(
            clique=ctx.incumbent.solution,
            size=ctx.incumbent.size,
            stats=stats,
            optimal=not ctx.stats.timed_out and ctx.stats.relaxation_faults == 0,
        )

    def _separate(self, values: np.ndarray) -> List[FrozenSet[int]]:
        cuts = self.separator.solve(self.graph, values)
        if not cuts and self.exact_separator is not None:
            cuts = self.exact_separator.solve(self.graph, values)
        return cuts

    def _pair_cuts(self, pairs, values: np.ndarray) -> List[Set[int]]:
        """Extend each non-adjacent selected pair to a maximal independent set."""
        graph = self.graph
        order = sorted(graph.all_nodes(), key=lambda v: -values[graph.index_of(v)])
        return [extend_set(graph, {u, w}, order) for u, w in pairs]

    def _search(self, ctx: SearchContext, depth: int) -> None:
        ctx.enter(depth)
        if ctx.expired():
            return
        eps = ctx.eps

        with ctx.scope() as scope:
            rounds = 0
            while True:
                objective = ctx.solve()
                if objective is None:
                    ctx.prune("relaxation infeasible or failed")
                    return
                if math.floor(objective + eps) <= ctx.incumbent.size:
                    ctx.prune(f"bound {objective:.4f} <= {ctx.incumbent.size}")
                    return

                values = self._values()
                try:
                    cuts = self._separate(values) if rounds < self.config.max_cut_rounds else []
                except RelaxationError as exc:
                    ctx.fault(exc)
                    ctx.prune("separation failed")
                    return
                if cuts:
                    for cut in cuts:
                        scope.add(self._terms(cut), Relation.LE, 1.0)
                    ctx.stats.cuts_added += len(cuts)
                    rounds += 1
                    continue

                fractional = [i for i, val in enumerate(values) if not is_integral(val, eps)]
                if fractional:
                    break

                selected = [v for i, v in enumerate(self.graph.all_nodes()) if values[i] > 0.5]
                pairs = missing_edges(self.graph, selected)
                if not pairs:
                    clique = extract_clique(self.graph, values, eps)
                    if len(clique) > ctx.incumbent.size:
                        ctx.improve(clique, len(clique))
                    return
                for cut in self._pair_cuts(pairs, values):
                    scope.add(self._terms(cut), Relation.LE, 1.0)
                ctx.stats.cuts_added += len(pairs)
                rounds += 1

            branch = max(fractional, key=lambda i: (values[i], -i))
            x = self._vars[branch]
            node = self.graph.node_at(branch)
            ctx.report(f"  depth {depth}: obj={objective:.4f}, branching on x{node}={values[branch]:.4f}")

            with ctx.scope() as child:
                child.add([(1.0, x)], Relation.GE, 1.0)
                self._search(ctx, depth + 1)
            with ctx.scope() as child:
                child.add([(1.0, x)], Relation.LE, 0.0)
                self._search(ctx, depth + 1)


def find_max_clique(
    graph: Graph,
    config: Optional[SearchConfig] = None,
    verbose: bool = False,
) -> CliqueResult:
    """Find a maximum clique of *graph* by branch-and-cut.

    Args:
        graph: Input graph.
        config: Search settings; defaults to ``SearchConfig()``.
        verbose: Print progress (overrides ``config.verbose`` when True).

    Returns:
        CliqueResult with the clique, its size and search statistics.
        ``optimal`` is False when the time limit stopped the search early or a
        relaxation fault pruned a node unexamined.
    """
    config = config if config is not None else SearchConfig()
    if verbose:
        config = replace(config, verbose=True)
    return CliqueSearch(graph, config).run()
