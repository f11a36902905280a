#!/usr/bin/env python
"""CLI entry point for the maximum clique and minimum coloring searches."""

import argparse
import logging
import sys

from clique_colgen.clique import find_max_clique
from clique_colgen.coloring import find_min_coloring
from clique_colgen.graphs import KNOWN_CHROMATIC, KNOWN_CLIQUE, TEST_GRAPHS, erdos_renyi
from clique_colgen.io import read_dimacs
from clique_colgen.search import SearchConfig
from clique_colgen.solution import verify_clique, verify_coloring


def _solve(name, G, args, config):
    """Run the requested searches on one graph; return (clique_size, num_colors, valid)."""
    print(f"{name}: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
    omega, chi, valid = None, None, True

    if args.problem in ("clique", "both"):
        result = find_max_clique(G, config)
        ok = verify_clique(G, result.clique)
        valid = valid and ok
        omega = result.size
        print(f"  clique:   size={result.size}  valid={ok}  optimal={result.optimal}  "
              f"nodes={result.stats['tree_nodes']}  solves={result.stats.get('num_solves', '?')}  "
              f"time={result.stats['seconds']:.2f}s")
        if args.show:
            print(f"    {sorted(result.clique)}")

    if args.problem in ("coloring", "both"):
        result = find_min_coloring(G, config)
        ok = verify_coloring(G, result.coloring)
        valid = valid and ok
        chi = result.num_colors
        print(f"  coloring: colors={result.num_colors}  greedy={result.initial_colors}  "
              f"valid={ok}  optimal={result.optimal}  nodes={result.stats['tree_nodes']}  "
              f"cols={result.stats['columns_generated']}  time={result.stats['seconds']:.2f}s")
        if args.show:
            for key, members in result.coloring.items():
                print(f"    Color {key}: {sorted(members)}")

    return omega, chi, valid


def main():
    parser = argparse.ArgumentParser(
        description="Maximum clique (branch-and-cut) and minimum coloring (branch-and-price)"
    )
    parser.add_argument("graphs", nargs="*", help="DIMACS graph files")
    parser.add_argument(
        "--problem",
        choices=["clique", "coloring", "both"],
        default="both",
        help="Which search to run (default: both)",
    )
    parser.add_argument("--test", action="store_true", help="Run on predefined test graphs")
    parser.add_argument("--time-limit", type=float, default=None, help="Seconds per search")
    parser.add_argument(
        "--exact-pricing",
        choices=["bnb", "milp", "none"],
        default="bnb",
        help="Exact fallback when greedy pricing finds nothing (default: bnb)",
    )
    parser.add_argument("--pairwise", action="store_true",
                        help="Add x_u + x_v <= 1 for every non-edge up front")
    parser.add_argument("--show", action="store_true", help="Print the clique and color classes")
    parser.add_argument("--nodes", type=int, default=20, help="Erdos-Renyi node count")
    parser.add_argument("--edge-prob", type=float, default=0.5, help="Erdos-Renyi edge probability")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = SearchConfig(
        time_limit=args.time_limit,
        exact_pricing=None if args.exact_pricing == "none" else args.exact_pricing,
        pairwise_constraints=args.pairwise,
        verbose=args.verbose,
    )

    if args.test:
        print("=" * 60)
        print("Clique and coloring search on predefined test graphs")
        print("=" * 60)
        all_pass = True
        for name, factory in TEST_GRAPHS.items():
            omega, chi, valid = _solve(name, factory(), args, config)
            ok = valid
            if omega is not None:
                ok = ok and omega == KNOWN_CLIQUE[name]
            if chi is not None:
                ok = ok and chi == KNOWN_CHROMATIC[name]
            all_pass = all_pass and ok
            print(f"  [{'PASS' if ok else 'FAIL'}]")
        print("=" * 60)
        return 0 if all_pass else 1

    if not args.graphs:
        G = erdos_renyi(args.nodes, args.edge_prob)
        _, _, valid = _solve(f"G({args.nodes}, {args.edge_prob})", G, args, config)
        return 0 if valid else 1

    all_valid = True
    for path in args.graphs:
        _, _, valid = _solve(path, read_dimacs(path), args, config)
        all_valid = all_valid and valid
    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
