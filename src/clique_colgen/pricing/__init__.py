"""Pricing oracle implementations for the maximum-weight independent set subproblem."""

from typing import Optional

from .base import PricingOracle
from .exact import BranchAndBoundPricingOracle
from .greedy import GreedyPricingOracle
from .milp import MilpPricingOracle


def make_exact_oracle(method: Optional[str], epsilon: float = 1e-4) -> Optional[PricingOracle]:
    """Build the exact fallback oracle named by *method* ("bnb", "milp" or None)."""
    if method is None:
        return None
    if method == "bnb":
        return BranchAndBoundPricingOracle(epsilon=epsilon)
    elif method == "milp":
        return MilpPricingOracle(epsilon=epsilon)
    else:
        raise ValueError(f"Unknown exact pricing method: {method}. Use 'bnb', 'milp' or None.")
