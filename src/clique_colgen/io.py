"""DIMACS graph reader."""

from typing import Iterable

from .exceptions import GraphFormatError
from .graph import Graph


def parse_dimacs(lines: Iterable[str]) -> Graph:
    """
    Build a Graph from the lines of a DIMACS edge file.

    DIMACS format:
    - Line starting with 'p edge n m' declares nodes 1..n
    - Lines starting with 'e u v' define edges between nodes u and v
    - Everything else (comments, blank lines) is ignored

    Nodes are numbered in first-seen order, so a 'p' line that precedes
    the edges yields the natural 1..n order.

    Raises:
        GraphFormatError: If an 'e' or 'p' line does not carry integer ids.
    """
    graph = Graph()
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if line.startswith('p'):
            parts = line.split()
            if len(parts) >= 3:
                try:
                    num_nodes = int(parts[2])
                except ValueError:
                    raise GraphFormatError(f"line {lineno}: bad problem line {line!r}")
                for node in range(1, num_nodes + 1):
                    graph.add_node(node)
        elif line.startswith('e'):
            parts = line.split()
            if len(parts) < 3:
                raise GraphFormatError(f"line {lineno}: expected 'e <u> <v>', got {line!r}")
            try:
                u, v = int(parts[1]), int(parts[2])
            except ValueError:
                raise GraphFormatError(f"line {lineno}: non-integer vertex in {line!r}")
            graph.add_edge(u, v)
    return graph


def read_dimacs(file_path: str) -> Graph:
    """Read a graph from a DIMACS format file."""
    with open(file_path, 'r') as f:
        return parse_dimacs(f)
