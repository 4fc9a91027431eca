from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class BisectionResult:
    value: float
    iterations: int
    converged: bool


def bisect(is_feasible: Callable[[float], bool], low: float, high: float,
           tolerance: float, max_iterations: int) -> BisectionResult:
    """
    Shrink [low, high] around the boundary of a monotonic feasibility predicate.

    A feasible midpoint moves the upper bound down, an infeasible one moves the
    lower bound up. The search stops once the bracket is no wider than
    ``tolerance`` or after ``max_iterations`` evaluations and returns the
    bracket midpoint either way; ``converged`` tells the two apart.

    Args:
        is_feasible: predicate that is False below the root and True above it
        low: starting lower bound
        high: starting upper bound
        tolerance: bracket width at which to stop
        max_iterations: hard cap on predicate evaluations
    """
    iterations = 0
    while high - low > tolerance and iterations < max_iterations:
        iterations += 1
        mid = (low + high) / 2
        if is_feasible(mid):
            high = mid
        else:
            low = mid

    return BisectionResult(
        value=(low + high) / 2,
        iterations=iterations,
        converged=high - low <= tolerance,
    )
