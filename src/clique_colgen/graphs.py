"""Test graph generators for the clique and coloring searches.

All graphs use 1-based node ids, like DIMACS files.
"""

import networkx as nx

from .graph import Graph


def _from_nx(graph: nx.Graph) -> Graph:
    return Graph.from_networkx(nx.convert_node_labels_to_integers(graph, first_label=1))


def triangle() -> Graph:
    """K3 triangle. Chromatic number = 3, clique number = 3."""
    return Graph([(1, 2), (2, 3), (1, 3)])


def cycle_c4() -> Graph:
    """C4 square. Chromatic number = 2, clique number = 2."""
    return Graph([(1, 2), (2, 3), (3, 4), (4, 1)])


def complete_k5() -> Graph:
    """K5 complete graph. Chromatic number = 5, clique number = 5."""
    return _from_nx(nx.complete_graph(5))


def empty_5() -> Graph:
    """Five isolated nodes. Chromatic number = 1, clique number = 1."""
    graph = Graph()
    for node in range(1, 6):
        graph.add_node(node)
    return graph


def path_p3() -> Graph:
    """P3 path 1-2-3. Chromatic number = 2, clique number = 2."""
    return Graph([(1, 2), (2, 3)])


def paper_5vertex() -> Graph:
    """The 5-vertex graph from arXiv:2301.02637. Chromatic number = 3."""
    return Graph([(1, 2), (1, 3), (2, 3), (2, 4), (3, 5), (4, 5)])


def cycle_c5() -> Graph:
    """C5 odd cycle. Chromatic number = 3, clique number = 2."""
    return _from_nx(nx.cycle_graph(5))


def wheel_w5() -> Graph:
    """Wheel graph W5 (6 nodes including center). Chromatic number = 4."""
    return _from_nx(nx.wheel_graph(6))


def erdos_renyi(n: int, p: float, seed: int = 42) -> Graph:
    """Erdos-Renyi random graph G(n,p)."""
    return _from_nx(nx.gnp_random_graph(n, p, seed=seed))


KNOWN_CHROMATIC = {
    "triangle": 3,
    "cycle_c4": 2,
    "complete_k5": 5,
    "empty_5": 1,
    "path_p3": 2,
    "paper_5vertex": 3,
    "cycle_c5": 3,
    "wheel_w5": 4,
}

KNOWN_CLIQUE = {
    "triangle": 3,
    "cycle_c4": 2,
    "complete_k5": 5,
    "empty_5": 1,
    "path_p3": 2,
    "paper_5vertex": 3,
    "cycle_c5": 2,
    "wheel_w5": 3,
}

TEST_GRAPHS = {
    "triangle": triangle,
    "cycle_c4": cycle_c4,
    "complete_k5": complete_k5,
    "empty_5": empty_5,
    "path_p3": path_p3,
    "paper_5vertex": paper_5vertex,
    "cycle_c5": cycle_c5,
    "wheel_w5": wheel_w5,
}
