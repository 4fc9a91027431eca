from dataclasses import dataclass
from typing import List, Optional

from engine.simulator import SimulationResult


@dataclass
class SimulationSummary:
    total_simulations: int = 0
    survived: int = 0
    failed: int = 0
    survival_rate: float = 0.0
    best_case: Optional[SimulationResult] = None
    worst_case: Optional[SimulationResult] = None
    average_ending_corpus: float = 0.0


def analyze_simulation_results(results: List[SimulationResult]) -> SimulationSummary:
    """
    Survival statistics for a batch of runs.

    Best and average use survivors only. The earliest failure replaces the
    survivor worst case when it lasted fewer years than that survivor.
    """
    if not results:
        return SimulationSummary()

    survivors = [r for r in results if r.survived]
    failures = [r for r in results if not r.survived]

    best_case = None
    worst_case = None
    average = 0.0
    if survivors:
        best_case = max(survivors, key=lambda r: r.ending_corpus)
        worst_case = min(survivors, key=lambda r: r.ending_corpus)
        average = sum(r.ending_corpus for r in survivors) / len(survivors)
    if failures:
        worst_failure = min(failures, key=lambda r: r.years_simulated)
        if worst_case is None or worst_failure.years_simulated < worst_case.years_simulated:
            worst_case = worst_failure

    return SimulationSummary(
        total_simulations=len(results),
        survived=len(survivors),
        failed=len(failures),
        survival_rate=len(survivors) / len(results) * 100,
        best_case=best_case,
        worst_case=worst_case,
        average_ending_corpus=average,
    )
