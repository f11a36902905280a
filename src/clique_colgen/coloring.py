"""Branch-and-price search for a minimum vertex coloring.

minimize   sum y_S + M * sum a_v
s.t.       sum_{S : v in S} y_S + a_v >= 1    for all v
           0 <= y_S <= 1,  0 <= a_v <= 1

Columns S are independent sets. The artificial a_v (cost M = n + 1) keeps
the restricted master feasible after branching has fixed every column that
covers v to zero; pricing then has duals to work with.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

import numpy as np

from .exceptions import RelaxationError
from .graph import Graph
from .independent_sets import Fingerprint, IndependentSet, fingerprint, greedy_independent_sets
from .pricing import GreedyPricingOracle, make_exact_oracle
from .relaxation import LinearRelaxation, Relation, RelaxationOracle, Sense
from .search import Incumbent, SearchConfig, SearchContext, is_integral
from .solution import extract_coloring, to_partition

logger = logging.getLogger(__name__)


@dataclass
class ColoringResult:
    coloring: Dict[int, FrozenSet[int]]
    num_colors: int
    stats: Dict[str, Any]
    optimal: bool
    initial_colors: int


class ColoringSearch:
    """Branch-and-price over the set-covering LP of one graph.

    The greedy independent-set cover seeds both the incumbent and the column
    pool. At every tree node the restricted master is re-solved while
    pricing on the covering duals produces new columns (greedy first, the
    exact oracle only when greedy finds nothing). Once pricing is exhausted
    the LP value bounds the node; the node is then pruned, accepted, or split
    on the fractional column with the largest value.

    Columns live for the whole search. Only the branching rows and the
    registry entries of fixed-to-zero columns are rolled back.
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
        self.greedy = GreedyPricingOracle(epsilon=eps, max_columns=self.config.max_columns)
        self.exact = make_exact_oracle(self.config.exact_pricing, eps)

        self.columns: List[IndependentSet] = []
        self._column_vars: List[int] = []
        self._known: Set[Fingerprint] = set()
        self._cover_rows: List[int] = []
        self._artificials: List[int] = []
        self._objective: List = []

    def _build_model(self, initial: Dict[int, Set[int]]) -> None:
        relaxation = self.relaxation
        penalty = float(len(self.graph) + 1)
        for v in self.graph.all_nodes():
            a = relaxation.add_variable(0.0, 1.0, f"a{v}")
            self._artificials.append(a)
            self._objective.append((penalty, a))
            self._cover_rows.append(relaxation.add_constraint([(1.0, a)], Relation.GE, 1.0))
        for key in sorted(initial):
            self._add_column(initial[key])

    def _add_column(self, nodes: Iterable[int]) -> IndependentSet:
        column = IndependentSet(len(self.columns) + 1, frozenset(nodes))
        y = self.relaxation.add_variable(0.0, 1.0, f"y{column.key}")
        for v in column.nodes:
            self.relaxation.set_coefficient(self._cover_rows[self.graph.index_of(v)], y, 1.0)
        self._objective.append((1.0, y))
        self.relaxation.set_objective(Sense.MINIMIZE, self._objective)

        self.columns.append(column)
        self._column_vars.append(y)
        self._known.add(column.fingerprint)
        return column

    def run(self) -> ColoringResult:
        initial = greedy_independent_sets(self.graph)
        start = to_partition(initial)
        ctx = SearchContext(
            self.graph, self.relaxation, self.config,
            Incumbent(start, len(start)),
        )
        ctx.report(f"Greedy coloring: {len(initial)} classes")
        if len(self.graph) > 0:
            self._build_model(initial)
            self._search(ctx, 0)

        logger.info(
            "Coloring search finished: %d colors, %d tree nodes, %d columns, %.2fs",
            ctx.incumbent.size, ctx.stats.tree_nodes, len(self.columns), ctx.elapsed(),
        )
        stats = ctx.stats.as_dict()
        timer = getattr(self.relaxation, "timer", None)
        if timer is not None:
            stats.update(timer.summary())
        stats["columns_generated"] = len(self.columns)
        stats["seconds"] = ctx.elapsed()
        return ColoringResult(
            coloring=ctx.incumbent.solution,
            num_colors=ctx.incumbent.size,
            stats=stats,
            optimal=(
                not ctx.stats.timed_out
                and ctx.stats.relaxation_faults == 0
                and self.exact is not None
            ),
            initial_colors=len(initial),
        )

    def _price(self, ctx: SearchContext) -> Optional[float]:
        """Solve and add columns until pricing finds none; None means prune."""
        while True:
            if ctx.expired():
                return None
            objective = ctx.solve()
            if objective is None:
                return None

            duals = np.array([max(self.relaxation.dual_of(h), 0.0) for h in self._cover_rows])
            skip = set(self._known)
            skip.update(ctx.excluded)

            try:
                new_columns = self.greedy.solve(self.graph, duals, skip)
                if not new_columns and self.exact is not None:
                    new_columns = self.exact.solve(self.graph, duals, skip)
            except RelaxationError as exc:
                ctx.fault(exc)
                return None
            if not new_columns:
                return objective

            added = 0
            for nodes in new_columns:
                if fingerprint(nodes) not in self._known:
                    self._add_column(nodes)
                    added += 1
            ctx.stats.columns_added += added
            ctx.report(f"  obj={objective:.4f}, +{added} columns, total {len(self.columns)}")

    def _search(self, ctx: SearchContext, depth: int) -> None:
        ctx.enter(depth)
        if ctx.expired():
            return
        eps = ctx.eps

        objective = self._price(ctx)
        if objective is None:
            ctx.prune("relaxation infeasible or failed")
            return
        if math.ceil(objective - eps) >= ctx.incumbent.size:
            ctx.prune(f"bound {objective:.4f} >= {ctx.incumbent.size}")
            return
        if any(self.relaxation.value_of(a) > eps for a in self._artificials):
            ctx.prune("no cover without artificial variables")
            return

        values = [self.relaxation.value_of(y) for y in self._column_vars]
        fractional = [j for j, val in enumerate(values) if not is_integral(val, eps)]
        if not fractional:
            coloring = extract_coloring(self.graph, self.columns, values, eps)
            if len(coloring) < ctx.incumbent.size:
                ctx.improve(coloring, len(coloring))
            return

        branch = max(fractional, key=lambda j: (values[j], -j))
        column = self.columns[branch]
        y = self._column_vars[branch]
        ctx.report(f"  depth {depth}: obj={objective:.4f}, branching on y{column.key}={values[branch]:.4f}")

        with ctx.scope() as child:
            child.add([(1.0, y)], Relation.GE, 1.0)
            self._search(ctx, depth + 1)
        with ctx.scope() as child, ctx.excluded.excluding(column.fingerprint):
            child.add([(1.0, y)], Relation.LE, 0.0)
            self._search(ctx, depth + 1)


def find_min_coloring(
    graph: Graph,
    config: Optional[SearchConfig] = None,
    verbose: bool = False,
) -> ColoringResult:
    """Find a minimum coloring of *graph* by branch-and-price.

    Args:
        graph: Input graph.
        config: Search settings; defaults to ``SearchConfig()``.
        verbose: Print progress (overrides ``config.verbose`` when True).

    Returns:
        ColoringResult mapping color keys 1..k to node sets. ``optimal`` is
        True only when the search ran to completion with exact pricing and
        without relaxation faults.
    """
    config = config if config is not None else SearchConfig()
    if verbose:
        config = replace(config, verbose=True)
    return ColoringSearch(graph, config).run()
