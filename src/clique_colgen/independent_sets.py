"""Independent sets: the columns of the coloring LP and the cuts of the clique LP."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, Set, Tuple

from .graph import Graph

Fingerprint = Tuple[int, ...]


def fingerprint(nodes: Iterable[int]) -> Fingerprint:
    """Canonical, hashable encoding of a node set."""
    return tuple(sorted(nodes))


@dataclass(frozen=True)
class IndependentSet:
    """A set of pairwise non-adjacent nodes tagged with a stable key."""

    key: int
    nodes: FrozenSet[int]

    @property
    def fingerprint(self) -> Fingerprint:
        return fingerprint(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self.nodes


def is_independent(graph: Graph, nodes: Iterable[int]) -> bool:
    members = list(nodes)
    for i, u in enumerate(members):
        for w in members[i + 1:]:
            if graph.has_edge(u, w):
                return False
    return True


def extend_set(graph: Graph, members: Set[int], candidates: Iterable[int]) -> Set[int]:
    """Add, in order, every candidate with no edge to the current members.

    *members* is updated in place and returned.
    """
    for v in candidates:
        if v not in members and members.isdisjoint(graph.neighbors_of(v)):
            members.add(v)
    return members


def greedy_independent_sets(graph: Graph) -> Dict[int, Set[int]]:
    """Sequential greedy coloring followed by an extension pass.

    Nodes are colored one at a time, always picking the uncolored node with
    the fewest uncolored neighbours (ties by node order), and each goes into
    the lowest-keyed class holding none of its neighbours; a new class is
    opened when none qualifies.

    The extension pass then walks the classes in increasing key order and
    lets each absorb compatible nodes of the earlier classes. Classes stay
    independent but may overlap, so the result is a cover of the nodes, not
    a partition.

    Returns:
        ``{key: nodes}`` with keys ``1..k``. ``k`` is an upper bound on the
        chromatic number.
    """
    uncolored = set(graph.all_nodes())
    pending = {v: graph.degree(v) for v in uncolored}
    classes: Dict[int, Set[int]] = {}

    while uncolored:
        node = min(uncolored, key=lambda v: (pending[v], graph.index_of(v)))
        uncolored.remove(node)
        neighbors = graph.neighbors_of(node)
        for u in neighbors:
            if u in uncolored:
                pending[u] -= 1

        key = 1
        while key in classes and not classes[key].isdisjoint(neighbors):
            key += 1
        classes.setdefault(key, set()).add(node)

    keys = sorted(classes)
    for i, key in enumerate(keys):
        earlier = [
            v
            for k in keys[:i]
            for v in sorted(classes[k], key=graph.index_of)
        ]
        extend_set(graph, classes[key], earlier)
    return classes
