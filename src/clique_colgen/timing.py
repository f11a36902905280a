"""Timing utilities for relaxation solve instrumentation."""

from dataclasses import dataclass
from typing import Dict, List


@dataclass
class SolveRecord:
    """Timing record for a single relaxation solve() invocation."""

    seconds: float = 0.0
    status: str = "optimal"


class SolveTimer:
    """Accumulates per-call timing records for a relaxation backend.

    Usage::

        timer = SolveTimer()
        # inside relaxation.solve():
        t0 = time.monotonic(); result = linprog(...); elapsed = time.monotonic() - t0
        timer.record(seconds=elapsed, status="optimal")

        # after the search:
        print(timer.summary())
    """

    def __init__(self) -> None:
        self.calls: List[SolveRecord] = []

    def record(self, seconds: float = 0.0, status: str = "optimal") -> None:
        self.calls.append(SolveRecord(seconds=seconds, status=status))

    def reset(self) -> None:
        self.calls.clear()

    @property
    def num_calls(self) -> int:
        return len(self.calls)

    @property
    def total_seconds(self) -> float:
        return sum(c.seconds for c in self.calls)

    @property
    def avg_seconds(self) -> float:
        return self.total_seconds / self.num_calls if self.calls else 0.0

    def count(self, status: str) -> int:
        return sum(1 for c in self.calls if c.status == status)

    def summary(self) -> Dict[str, float]:
        """Return a dict of timing statistics suitable for JSON serialization."""
        return {
            "num_solves": self.num_calls,
            "total_solve_seconds": round(self.total_seconds, 4),
            "avg_solve_seconds": round(self.avg_seconds, 6),
            "optimal": self.count("optimal"),
            "infeasible": self.count("infeasible"),
            "failed": self.count("failed"),
        }

    def __repr__(self) -> str:
        s = self.summary()
        return (
            f"SolveTimer({s['num_solves']} solves, "
            f"total={s['total_solve_seconds']}s, "
            f"infeasible={s['infeasible']}, failed={s['failed']})"
        )
