"""Tests for the shared search state: scoped constraints, exclusions, deadline."""

import logging

import pytest

from clique_colgen.exceptions import RelaxationError
from clique_colgen.graphs import triangle
from clique_colgen.relaxation import LinearRelaxation, Relation, Sense
from clique_colgen.search import (
    ConstraintScope,
    ExcludedSets,
    Incumbent,
    SearchConfig,
    SearchContext,
    almost_equal,
    is_integral,
)


def _context(config=None, relaxation=None):
    relaxation = relaxation if relaxation is not None else LinearRelaxation()
    return SearchContext(triangle(), relaxation, config or SearchConfig(), Incumbent(None, 0))


class _FailingRelaxation(LinearRelaxation):
    def solve(self):
        raise RelaxationError("solver crashed")


class TestTolerances:
    def test_is_integral(self):
        assert is_integral(1.00005)
        assert is_integral(-0.00005)
        assert not is_integral(0.5)

    def test_almost_equal(self):
        assert almost_equal(2.00001, 2.0)
        assert not almost_equal(2.01, 2.0)


class TestConstraintScope:
    def test_removes_rows_on_exit(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        with ConstraintScope(lp) as scope:
            scope.add([(1.0, x)], Relation.LE, 0.5)
            scope.add([(1.0, x)], Relation.GE, 0.1)
            assert len(scope) == 2
            assert lp.num_constraints == 2
        assert lp.num_constraints == 0

    def test_removes_rows_on_exception(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        with pytest.raises(RuntimeError):
            with ConstraintScope(lp) as scope:
                scope.add([(1.0, x)], Relation.LE, 0.5)
                raise RuntimeError("boom")
        assert lp.num_constraints == 0

    def test_nested_scopes_unwind_in_order(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x)])
        base = lp.add_constraint([(1.0, x)], Relation.LE, 0.9)
        with ConstraintScope(lp) as outer:
            outer.add([(1.0, x)], Relation.LE, 0.5)
            with ConstraintScope(lp) as inner:
                inner.add([(1.0, x)], Relation.LE, 0.2)
                assert lp.solve().objective == pytest.approx(0.2)
            assert lp.solve().objective == pytest.approx(0.5)
        assert lp.solve().objective == pytest.approx(0.9)
        assert lp.dual_of(base) == pytest.approx(1.0)


class TestExcludedSets:
    def test_excluding_is_scoped(self):
        excluded = ExcludedSets()
        with excluded.excluding((1, 3)):
            assert (1, 3) in excluded
            with excluded.excluding((2,)):
                assert len(excluded) == 2
            assert (2,) not in excluded
        assert len(excluded) == 0

    def test_pops_on_exception(self):
        excluded = ExcludedSets()
        with pytest.raises(RuntimeError):
            with excluded.excluding((1,)):
                raise RuntimeError("boom")
        assert (1,) not in excluded

    def test_duplicate_rejected(self):
        excluded = ExcludedSets()
        with excluded.excluding((1, 2)):
            with pytest.raises(ValueError):
                with excluded.excluding((1, 2)):
                    pass
            assert (1, 2) in excluded


class TestSearchContext:
    def test_no_time_limit_never_expires(self):
        ctx = _context()
        assert not ctx.expired()
        assert not ctx.stats.timed_out

    def test_zero_time_limit_expires(self, caplog):
        ctx = _context(SearchConfig(time_limit=0.0))
        with caplog.at_level(logging.INFO, logger="clique_colgen.search"):
            assert ctx.expired()
            assert ctx.expired()
        assert ctx.stats.timed_out
        assert sum("Time limit" in r.message for r in caplog.records) == 1

    def test_solve_infeasible_returns_none(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        lp.add_constraint([(1.0, x)], Relation.GE, 2.0)
        ctx = _context(relaxation=lp)
        assert ctx.solve() is None
        assert ctx.stats.infeasible == 1

    def test_solve_fault_is_logged_and_pruned(self, caplog):
        ctx = _context(relaxation=_FailingRelaxation())
        with caplog.at_level(logging.WARNING, logger="clique_colgen.search"):
            assert ctx.solve() is None
        assert ctx.stats.relaxation_faults == 1
        assert "solver crashed" in caplog.text

    def test_improve_replaces_incumbent(self, capsys):
        ctx = _context(SearchConfig(verbose=True))
        ctx.improve({1, 2}, 2)
        assert ctx.incumbent.size == 2
        assert ctx.stats.incumbent_updates == 1
        assert "new incumbent" in capsys.readouterr().out

    def test_enter_tracks_depth(self):
        ctx = _context()
        ctx.enter(0)
        ctx.enter(3)
        ctx.enter(1)
        assert ctx.stats.tree_nodes == 3
        assert ctx.stats.max_depth == 3
