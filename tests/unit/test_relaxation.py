"""Tests for the HiGHS-backed linear relaxation."""

import pytest

from clique_colgen.exceptions import RelaxationError
from clique_colgen.relaxation import LinearRelaxation, Relation, Sense, SolveStatus
from clique_colgen.timing import SolveTimer


class TestLinearRelaxation:
    def test_maximize_with_le_row(self):
        lp = LinearRelaxation()
        x = lp.add_variable(0.0, 1.0, "x")
        y = lp.add_variable(0.0, 1.0, "y")
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x), (1.0, y)])
        row = lp.add_constraint([(1.0, x), (1.0, y)], Relation.LE, 1.5)

        result = lp.solve()
        assert result.success
        assert result.objective == pytest.approx(1.5)
        assert lp.value_of(x) + lp.value_of(y) == pytest.approx(1.5)
        # one more unit of rhs is worth one more unit of objective
        assert lp.dual_of(row) == pytest.approx(1.0)

    def test_covering_duals_non_negative(self):
        lp = LinearRelaxation()
        ys = [lp.add_variable(0.0, 2.0, f"y{i}") for i in range(3)]
        lp.set_objective(Sense.MINIMIZE, [(1.0, y) for y in ys])
        rows = [lp.add_constraint([(1.0, y)], Relation.GE, 1.0) for y in ys]

        result = lp.solve()
        assert result.objective == pytest.approx(3.0)
        for h in rows:
            assert lp.dual_of(h) == pytest.approx(1.0)

    def test_equality_row(self):
        # x = 1 lies strictly inside its bounds, so the row dual is unique
        lp = LinearRelaxation()
        x = lp.add_variable(0.0, 2.0)
        y = lp.add_variable(0.0, 1.0)
        lp.set_objective(Sense.MINIMIZE, [(1.0, x), (2.0, y)])
        row = lp.add_constraint([(1.0, x), (1.0, y)], Relation.EQ, 1.0)

        assert lp.solve().objective == pytest.approx(1.0)
        assert lp.value_of(x) == pytest.approx(1.0)
        assert lp.dual_of(row) == pytest.approx(1.0)

    def test_equality_row_with_bounded_optimum(self):
        # x = 1 sits on its upper bound, so any dual in [1, 2] is optimal
        lp = LinearRelaxation()
        x = lp.add_variable(0.0, 1.0)
        y = lp.add_variable(0.0, 1.0)
        lp.set_objective(Sense.MINIMIZE, [(1.0, x), (2.0, y)])
        row = lp.add_constraint([(1.0, x), (1.0, y)], Relation.EQ, 1.0)

        assert lp.solve().objective == pytest.approx(1.0)
        assert 1.0 - 1e-6 <= lp.dual_of(row) <= 2.0 + 1e-6

    def test_infeasible(self):
        lp = LinearRelaxation()
        x = lp.add_variable(0.0, 1.0)
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x)])
        lp.add_constraint([(1.0, x)], Relation.GE, 1.0)
        lp.add_constraint([(1.0, x)], Relation.LE, 0.0)

        result = lp.solve()
        assert result.status is SolveStatus.INFEASIBLE
        assert not result.success
        with pytest.raises(RelaxationError):
            lp.value_of(x)

    def test_remove_constraint_restores_model(self):
        lp = LinearRelaxation()
        x = lp.add_variable(0.0, 1.0)
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x)])
        h = lp.add_constraint([(1.0, x)], Relation.LE, 0.0)
        assert lp.solve().objective == pytest.approx(0.0)

        lp.remove_constraint(h)
        assert lp.num_constraints == 0
        assert lp.solve().objective == pytest.approx(1.0)

    def test_remove_unknown_handle(self):
        lp = LinearRelaxation()
        with pytest.raises(KeyError):
            lp.remove_constraint(42)

    def test_handles_not_reused(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        h1 = lp.add_constraint([(1.0, x)], Relation.LE, 1.0)
        lp.remove_constraint(h1)
        h2 = lp.add_constraint([(1.0, x)], Relation.LE, 1.0)
        assert h1 != h2

    def test_set_coefficient_adds_variable_to_row(self):
        lp = LinearRelaxation()
        a = lp.add_variable(0.0, 1.0, "a")
        row = lp.add_constraint([(1.0, a)], Relation.GE, 1.0)
        lp.set_objective(Sense.MINIMIZE, [(10.0, a)])
        assert lp.solve().objective == pytest.approx(10.0)

        y = lp.add_variable(0.0, 1.0, "y")
        lp.set_coefficient(row, y, 1.0)
        lp.set_objective(Sense.MINIMIZE, [(10.0, a), (1.0, y)])
        assert lp.solve().objective == pytest.approx(1.0)
        assert lp.value_of(y) == pytest.approx(1.0)
        assert lp.variable_name(y) == "y"

    def test_empty_model(self):
        lp = LinearRelaxation()
        result = lp.solve()
        assert result.success
        assert result.objective == 0.0

    def test_empty_model_infeasible_row(self):
        lp = LinearRelaxation()
        lp.add_constraint([], Relation.GE, 1.0)
        assert lp.solve().status is SolveStatus.INFEASIBLE

    def test_dual_of_removed_row(self):
        lp = LinearRelaxation()
        x = lp.add_variable()
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x)])
        h = lp.add_constraint([(1.0, x)], Relation.LE, 1.0)
        lp.solve()
        lp.remove_constraint(h)
        with pytest.raises(RelaxationError):
            lp.dual_of(h)

    def test_bad_relation(self):
        lp = LinearRelaxation()
        with pytest.raises(ValueError):
            lp.add_constraint([], "<=", 1.0)

    def test_timer_records_solves(self):
        timer = SolveTimer()
        lp = LinearRelaxation(timer=timer)
        x = lp.add_variable()
        lp.set_objective(Sense.MAXIMIZE, [(1.0, x)])
        lp.solve()
        lp.add_constraint([(1.0, x)], Relation.GE, 2.0)
        lp.solve()

        summary = timer.summary()
        assert summary["num_solves"] == 2
        assert summary["optimal"] == 1
        assert summary["infeasible"] == 1


class TestSolveTimer:
    def test_empty(self):
        timer = SolveTimer()
        assert timer.num_calls == 0
        assert timer.avg_seconds == 0.0

    def test_record_and_reset(self):
        timer = SolveTimer()
        timer.record(0.5)
        timer.record(1.5, status="failed")
        assert timer.total_seconds == pytest.approx(2.0)
        assert timer.avg_seconds == pytest.approx(1.0)
        assert timer.count("failed") == 1
        assert "2 solves" in repr(timer)
        timer.reset()
        assert timer.num_calls == 0
