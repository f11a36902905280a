"""Turning relaxation solutions into cliques and colorings, and checking them."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Set, Tuple, Union

from .exceptions import InvalidSolutionError
from .graph import Graph
from .independent_sets import IndependentSet, is_independent
from .search import EPSILON, almost_equal

Coloring = Union[Mapping[int, Iterable[int]], Sequence[Iterable[int]]]


def _color_classes(coloring: Coloring) -> List[FrozenSet[int]]:
    if isinstance(coloring, Mapping):
        return [frozenset(coloring[k]) for k in sorted(coloring)]
    return [frozenset(c) for c in coloring]


def _pairs(graph: Graph, nodes: Iterable[int], adjacent: bool) -> List[Tuple[int, int]]:
    members = sorted(nodes, key=graph.index_of)
    return [
        (u, w)
        for i, u in enumerate(members)
        for w in members[i + 1:]
        if graph.has_edge(u, w) == adjacent
    ]


def missing_edges(graph: Graph, nodes: Iterable[int]) -> List[Tuple[int, int]]:
    """Pairs of *nodes* that are not adjacent, in node order."""
    return _pairs(graph, nodes, adjacent=False)


def adjacent_pairs(graph: Graph, nodes: Iterable[int]) -> List[Tuple[int, int]]:
    """Pairs of *nodes* joined by an edge, in node order."""
    return _pairs(graph, nodes, adjacent=True)


def verify_clique(graph: Graph, nodes: Iterable[int]) -> bool:
    """Check that every node is in *graph* and all pairs are adjacent."""
    members = list(nodes)
    if any(v not in graph for v in members):
        return False
    return not missing_edges(graph, members)


def extract_clique(graph: Graph, values: Sequence[float], eps: float = EPSILON) -> FrozenSet[int]:
    """Nodes whose selection value is within *eps* of 1, checked to be a clique.

    Args:
        values: One value per node, laid out by ``graph.index_of``.

    Raises:
        InvalidSolutionError: If the selected nodes are not pairwise adjacent.
    """
    selected = [v for i, v in enumerate(graph.all_nodes()) if almost_equal(values[i], 1.0, eps)]
    missing = missing_edges(graph, selected)
    if missing:
        raise InvalidSolutionError(f"Selected nodes are not a clique, missing edges {missing[:5]}")
    return frozenset(selected)


def to_partition(classes: Mapping[int, Iterable[int]]) -> Dict[int, FrozenSet[int]]:
    """Turn a cover by independent sets into a partition.

    Each node stays in the lowest-keyed class that contains it, classes left
    empty are dropped and the rest are renumbered 1..k in key order.
    """
    assigned: Set[int] = set()
    partition: Dict[int, FrozenSet[int]] = {}
    for key in sorted(classes):
        members = frozenset(v for v in classes[key] if v not in assigned)
        if members:
            assigned |= members
            partition[len(partition) + 1] = members
    return partition


def extract_coloring(
    graph: Graph,
    columns: Sequence[IndependentSet],
    values: Sequence[float],
    eps: float = EPSILON,
) -> Dict[int, FrozenSet[int]]:
    """Columns whose value is within *eps* of 1, as a partition of the nodes.

    Args:
        columns: The column pool.
        values: One value per column, aligned with *columns*.

    Raises:
        InvalidSolutionError: If the selected columns leave a node uncovered.
    """
    selected = {col.key: col.nodes for col, val in zip(columns, values) if almost_equal(val, 1.0, eps)}
    covered: Set[int] = set()
    for nodes in selected.values():
        covered |= nodes
    uncovered = [v for v in graph.all_nodes() if v not in covered]
    if uncovered:
        raise InvalidSolutionError(f"Selected columns leave nodes uncovered: {uncovered[:5]}")
    return to_partition(selected)


def verify_coloring(graph: Graph, coloring: Coloring) -> bool:
    """True iff the classes partition the nodes of *graph* into independent sets."""
    seen: Set[int] = set()
    for members in _color_classes(coloring):
        if not seen.isdisjoint(members) or not is_independent(graph, members):
            return False
        seen |= members
    return seen == set(graph.all_nodes())


@dataclass
class ValidationResult:
    """Every defect of a coloring.

    Classes are numbered by position, mappings in key order; that number is
    the first field of each ``edge_violations`` entry.
    """

    valid: bool
    num_colors: int
    num_vertices_covered: int
    num_vertices_expected: int
    missing_vertices: List[int]
    duplicate_vertices: List[int]
    edge_violations: List[Tuple[int, int, int]]
    empty_color_classes: List[int]


def validate_coloring(graph: Graph, coloring: Coloring) -> ValidationResult:
    """Like :func:`verify_coloring`, but collects every defect instead of stopping."""
    classes = _color_classes(coloring)
    seen: Set[int] = set()
    duplicates: List[int] = []
    violations: List[Tuple[int, int, int]] = []
    for idx, members in enumerate(classes):
        duplicates.extend(sorted(members & seen))
        seen |= members
        known = [v for v in members if v in graph]
        violations.extend((idx, u, w) for u, w in adjacent_pairs(graph, known))

    expected = set(graph.all_nodes())
    missing = sorted(expected - seen)
    return ValidationResult(
        valid=not (missing or duplicates or violations),
        num_colors=len(classes),
        num_vertices_covered=len(seen),
        num_vertices_expected=len(expected),
        missing_vertices=missing,
        duplicate_vertices=duplicates,
        edge_violations=violations,
        empty_color_classes=[idx for idx, members in enumerate(classes) if not members],
    )
