"""Exceptions raised by the clique and coloring searches."""


class CliqueColgenError(Exception):
    """Base exception for clique_colgen errors."""
    pass


class RelaxationError(CliqueColgenError):
    """Raised when the LP backend fails for a reason other than infeasibility."""
    pass


class GraphFormatError(CliqueColgenError):
    """Raised when a DIMACS graph file cannot be parsed."""
    pass


class InvalidSolutionError(CliqueColgenError):
    """Raised when an integral relaxation solution is not a clique or a cover."""
    pass
