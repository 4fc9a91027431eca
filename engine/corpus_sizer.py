import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from engine.bisection import bisect
from engine.simulator import SimulationParameters, run_simulation

logger = logging.getLogger(__name__)

DEFAULT_EQUITY_RATIO = 0.85
LOW_MULTIPLE = 5
HIGH_MULTIPLE = 100
TOLERANCE_FRACTION = 0.05
MAX_ITERATIONS = 50
EXTRA_YEARS = 5


@dataclass(frozen=True)
class StartYearCorpus:
    start_year: int
    corpus: float
    converged: bool = True


@dataclass
class CorpusEstimate:
    """
    Required corpus for a horizon across sampled start years.

    With no sampled years the estimate is the flat ``expenses x years``
    fallback and ``simulated`` is False.
    """
    target_years: int
    min_corpus: float
    max_corpus: float
    avg_corpus: float
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    results: List[StartYearCorpus] = field(default_factory=list)

    @property
    def simulated(self):
        return bool(self.results)

    @property
    def converged(self):
        return all(r.converged for r in self.results)


def corpus_for_start_year(params: SimulationParameters, target_years, start_year,
                          market_returns) -> StartYearCorpus:
    """Smallest starting corpus that lasts ``target_years`` from ``start_year``."""
    expenses = params.yearly_expenses
    base = replace(params, start_year=start_year, max_years=target_years + EXTRA_YEARS)

    def survives(corpus):
        result = run_simulation(replace(base, starting_corpus=corpus), market_returns)
        return result.survived and result.years_simulated >= target_years

    found = bisect(
        survives,
        low=expenses * LOW_MULTIPLE,
        high=expenses * HIGH_MULTIPLE,
        tolerance=expenses * TOLERANCE_FRACTION,
        max_iterations=MAX_ITERATIONS,
    )
    if not found.converged:
        logger.debug("Corpus search for %s did not converge after %d iterations",
                     start_year, found.iterations)

    return StartYearCorpus(start_year=start_year, corpus=found.value,
                           converged=found.converged)


def find_corpus_for_duration(params: SimulationParameters, target_years, test_years,
                             market_returns) -> CorpusEstimate:
    """
    Size the corpus for each test year and summarise the spread.

    ``params.starting_corpus`` and ``params.start_year`` are ignored.
    """
    if not test_years:
        flat = params.yearly_expenses * target_years
        return CorpusEstimate(target_years=target_years, min_corpus=flat,
                              max_corpus=flat, avg_corpus=flat)

    results = [
        corpus_for_start_year(params, target_years, start_year, market_returns)
        for start_year in test_years
    ]

    lowest = min(results, key=lambda r: r.corpus)
    highest = max(results, key=lambda r: r.corpus)

    return CorpusEstimate(
        target_years=target_years,
        min_corpus=lowest.corpus,
        max_corpus=highest.corpus,
        avg_corpus=sum(r.corpus for r in results) / len(results),
        min_year=lowest.start_year,
        max_year=highest.start_year,
        results=results,
    )
