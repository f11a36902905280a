"""Undirected, loop-free graph with stable node ordering."""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx


class Graph:
    """Adjacency store used by the clique and coloring searches.

    Nodes are integer identities. Their order is the order in which they were
    first seen (``add_node`` or either endpoint of ``add_edge``), and
    ``index_of`` maps a node to its position in that order. Relaxation
    variables and pricing weights are laid out by this index.

    The node set only grows; there is no removal.
    """

    def __init__(self, edges: Optional[Iterable[Tuple[int, int]]] = None) -> None:
        self._graph = nx.Graph()
        self._nodes: List[int] = []
        self._index: Dict[int, int] = {}
        if edges is not None:
            for u, v in edges:
                self.add_edge(u, v)

    @classmethod
    def from_networkx(cls, graph: nx.Graph) -> "Graph":
        """Build a Graph from a networkx graph, keeping its node order."""
        result = cls()
        for node in graph.nodes():
            result.add_node(node)
        for u, v in graph.edges():
            result.add_edge(u, v)
        return result

    def to_networkx(self) -> nx.Graph:
        return self._graph.copy()

    def add_node(self, node: int) -> None:
        if node not in self._index:
            self._index[node] = len(self._nodes)
            self._nodes.append(node)
            self._graph.add_node(node)

    def add_edge(self, u: int, v: int) -> None:
        """Link *u* and *v*, creating either endpoint if needed.

        Adding an existing edge is a no-op. A self-loop only registers the
        node, so adjacency stays loop-free.
        """
        self.add_node(u)
        self.add_node(v)
        if u != v:
            self._graph.add_edge(u, v)

    def neighbors_of(self, node: int):
        """Read-only view of the neighbours of *node* (supports ``in`` and iteration)."""
        return self._graph.adj[node].keys()

    def has_edge(self, u: int, v: int) -> bool:
        return self._graph.has_edge(u, v)

    def degree(self, node: int) -> int:
        return len(self._graph.adj[node])

    def all_nodes(self) -> List[int]:
        return list(self._nodes)

    def index_of(self, node: int) -> int:
        return self._index[node]

    def node_at(self, index: int) -> int:
        return self._nodes[index]

    def edges(self) -> List[Tuple[int, int]]:
        return list(self._graph.edges())

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._index

    def __iter__(self) -> Iterator[int]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"Graph({self.number_of_nodes()} nodes, {self.number_of_edges()} edges)"
