"""LP relaxation oracle used by the branch-and-cut and branch-and-price drivers.

The drivers only talk to the :class:`RelaxationOracle` contract: create
bounded continuous variables, set a linear objective, add and remove linear
constraints by handle, solve, and read primal values and dual prices.
:class:`LinearRelaxation` implements it on top of HiGHS via
``scipy.optimize.linprog``.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog
from scipy.sparse import lil_matrix

from .exceptions import RelaxationError
from .timing import SolveTimer

Terms = Sequence[Tuple[float, int]]


class Sense(Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"


class Relation(Enum):
    LE = "<="
    GE = ">="
    EQ = "=="


class SolveStatus(Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"


@dataclass
class RelaxationResult:
    status: SolveStatus
    objective: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status is SolveStatus.OPTIMAL


class RelaxationOracle(ABC):
    """Interface of the LP model the search drivers build and re-solve.

    Variables and constraints are referred to by opaque integer handles.
    Values and duals are only meaningful right after a successful solve().
    """

    @abstractmethod
    def add_variable(self, lower: float = 0.0, upper: float = 1.0, name: Optional[str] = None) -> int:
        """Create a bounded continuous variable and return its handle."""

    @abstractmethod
    def set_objective(self, sense: Sense, terms: Terms) -> None:
        """Replace the objective with ``sum(coef * var)`` in the given sense."""

    @abstractmethod
    def add_constraint(self, terms: Terms, relation: Relation, rhs: float) -> int:
        """Add ``sum(coef * var) <relation> rhs`` and return a removable handle."""

    @abstractmethod
    def remove_constraint(self, handle: int) -> None:
        """Remove a constraint previously returned by add_constraint()."""

    @abstractmethod
    def set_coefficient(self, handle: int, var: int, coefficient: float) -> None:
        """Set the coefficient of *var* in a live constraint."""

    @abstractmethod
    def solve(self) -> RelaxationResult:
        """Solve the current model.

        Raises:
            RelaxationError: If the solver fails for a reason other than
                infeasibility.
        """

    @abstractmethod
    def value_of(self, var: int) -> float:
        """Primal value of *var* in the last solution."""

    @abstractmethod
    def dual_of(self, handle: int) -> float:
        """Dual price of a constraint in the last solution."""


@dataclass
class _Row:
    terms: Dict[int, float]
    relation: Relation
    rhs: float


class LinearRelaxation(RelaxationOracle):
    """In-memory LP model solved with HiGHS (``scipy.optimize.linprog``).

    The whole model is rebuilt into sparse matrices on every solve(), which
    keeps add/remove of rows trivial. Dual prices follow the model's own
    sense: ``dual_of(h)`` is the change of the objective per unit increase
    of constraint *h*'s right-hand side, so ``>=`` covering rows of a
    minimization have non-negative duals.
    """

    def __init__(self, timer: Optional[SolveTimer] = None) -> None:
        self._lower: List[float] = []
        self._upper: List[float] = []
        self._names: List[str] = []
        self._sense = Sense.MINIMIZE
        self._objective: Dict[int, float] = {}
        self._rows: Dict[int, _Row] = {}
        self._next_handle = 0
        self._x: Optional[np.ndarray] = None
        self._duals: Dict[int, float] = {}
        self.timer = timer if timer is not None else SolveTimer()

    @property
    def num_variables(self) -> int:
        return len(self._lower)

    @property
    def num_constraints(self) -> int:
        return len(self._rows)

    def variable_name(self, var: int) -> str:
        return self._names[var]

    def add_variable(self, lower: float = 0.0, upper: float = 1.0, name: Optional[str] = None) -> int:
        var = len(self._lower)
        self._lower.append(lower)
        self._upper.append(upper)
        self._names.append(name if name is not None else f"v{var}")
        return var

    def set_objective(self, sense: Sense, terms: Terms) -> None:
        if not isinstance(sense, Sense):
            raise ValueError(f"Unknown objective sense: {sense}")
        self._sense = sense
        self._objective = {}
        for coef, var in terms:
            self._objective[var] = self._objective.get(var, 0.0) + coef

    def add_constraint(self, terms: Terms, relation: Relation, rhs: float) -> int:
        if not isinstance(relation, Relation):
            raise ValueError(f"Unknown constraint relation: {relation}")
        row: Dict[int, float] = {}
        for coef, var in terms:
            row[var] = row.get(var, 0.0) + coef
        handle = self._next_handle
        self._next_handle += 1
        self._rows[handle] = _Row(row, relation, float(rhs))
        return handle

    def remove_constraint(self, handle: int) -> None:
        del self._rows[handle]
        self._duals.pop(handle, None)

    def set_coefficient(self, handle: int, var: int, coefficient: float) -> None:
        self._rows[handle].terms[var] = coefficient

    def solve(self) -> RelaxationResult:
        self._x = None
        self._duals = {}
        n = len(self._lower)

        sign = 1.0 if self._sense is Sense.MINIMIZE else -1.0
        c = np.zeros(n)
        for var, coef in self._objective.items():
            c[var] = sign * coef

        # >= rows are negated into <= rows; remember the flip for the duals
        ub_rows = [(h, -1.0 if r.relation is Relation.GE else 1.0)
                   for h, r in self._rows.items() if r.relation is not Relation.EQ]
        eq_rows = [h for h, r in self._rows.items() if r.relation is Relation.EQ]

        if n == 0:
            return self._solve_empty(ub_rows, eq_rows)

        A_ub, b_ub = None, None
        if ub_rows:
            A_ub = lil_matrix((len(ub_rows), n))
            b_ub = np.zeros(len(ub_rows))
            for i, (h, flip) in enumerate(ub_rows):
                row = self._rows[h]
                for var, coef in row.terms.items():
                    A_ub[i, var] = flip * coef
                b_ub[i] = flip * row.rhs
            A_ub = A_ub.tocsc()

        A_eq, b_eq = None, None
        if eq_rows:
            A_eq = lil_matrix((len(eq_rows), n))
            b_eq = np.zeros(len(eq_rows))
            for i, h in enumerate(eq_rows):
                row = self._rows[h]
                for var, coef in row.terms.items():
                    A_eq[i, var] = coef
                b_eq[i] = row.rhs
            A_eq = A_eq.tocsc()

        bounds = list(zip(self._lower, self._upper))

        t0 = time.monotonic()
        result = linprog(
            c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq,
            bounds=bounds, method="highs",
        )
        elapsed = time.monotonic() - t0

        if result.status == 2:
            self.timer.record(seconds=elapsed, status="infeasible")
            return RelaxationResult(SolveStatus.INFEASIBLE)
        if not result.success:
            self.timer.record(seconds=elapsed, status="failed")
            raise RelaxationError(f"HiGHS status {result.status}: {result.message}")
        self.timer.record(seconds=elapsed, status="optimal")

        self._x = np.asarray(result.x, dtype=float)
        if ub_rows:
            marginals = np.asarray(result.ineqlin.marginals, dtype=float)
            for (h, flip), m in zip(ub_rows, marginals):
                self._duals[h] = sign * flip * m
        if eq_rows:
            marginals = np.asarray(result.eqlin.marginals, dtype=float)
            for h, m in zip(eq_rows, marginals):
                self._duals[h] = sign * m
        return RelaxationResult(SolveStatus.OPTIMAL, sign * float(result.fun))

    def _solve_empty(self, ub_rows, eq_rows) -> RelaxationResult:
        """A model without variables is feasible iff every row holds at zero."""
        for h, _ in ub_rows:
            row = self._rows[h]
            if (row.relation is Relation.LE and row.rhs < 0) or (row.relation is Relation.GE and row.rhs > 0):
                self.timer.record(status="infeasible")
                return RelaxationResult(SolveStatus.INFEASIBLE)
        for h in eq_rows:
            if self._rows[h].rhs != 0:
                self.timer.record(status="infeasible")
                return RelaxationResult(SolveStatus.INFEASIBLE)
        self.timer.record(status="optimal")
        self._x = np.zeros(0)
        self._duals = {h: 0.0 for h in self._rows}
        return RelaxationResult(SolveStatus.OPTIMAL, 0.0)

    def value_of(self, var: int) -> float:
        if self._x is None:
            raise RelaxationError("No solution available; call solve() first")
        return float(self._x[var])

    def values(self) -> np.ndarray:
        """All primal values, indexed by variable handle."""
        if self._x is None:
            raise RelaxationError("No solution available; call solve() first")
        return self._x.copy()

    def dual_of(self, handle: int) -> float:
        if handle not in self._duals:
            raise RelaxationError(f"No dual available for constraint {handle}")
        return self._duals[handle]
