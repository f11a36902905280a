"""Branch-and-cut maximum clique and branch-and-price minimum coloring."""

from .clique import CliqueResult, CliqueSearch, find_max_clique, greedy_clique
from .coloring import ColoringResult, ColoringSearch, find_min_coloring
from .graph import Graph
from .independent_sets import IndependentSet, greedy_independent_sets
from .io import read_dimacs
from .relaxation import LinearRelaxation, RelaxationOracle
from .search import SearchConfig
from .solution import validate_coloring, verify_clique, verify_coloring, ValidationResult
