from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from engine.analysis import SimulationSummary, analyze_simulation_results
from engine.contributions import ContributionSchedule, calculate_sip_for_target
from engine.corpus_sizer import DEFAULT_EQUITY_RATIO, find_corpus_for_duration
from engine.market_data import MarketProfile, valid_starting_years
from engine.projections import (
    Allocation,
    GapAnalysis,
    Projection,
    Reallocation,
    gap_analysis,
    ideal_allocation,
    inflation_adjusted_expenses,
    investment_projection,
    reallocation,
    required_corpus,
)
from engine.simulator import SimulationParameters, SimulationResult, run_multiple_simulations
from engine.year_selector import select_simulation_years
from engine.yield_solver import YieldResult, calculate_yield

PERPETUAL = 'perpetual'
CORPUS_DURATIONS = (30, 25, 20, 15)
SAMPLE_COUNT = 5
ESTIMATE_HORIZON = 50
STRESS_TEST_HORIZON = 15
STRESS_TEST_MAX_YEARS = 50
CRISIS_YEARS = (2000, 2008)
EQUITY_SPLITS = {'85:15': 0.85, '60:40': 0.60}
DEFAULT_STEP_UP = 10


class PlanConfig:
    """
    Pure Python Object to hold planner inputs.
    No validation logic here (that's schemas layer).
    Rates are whole-number percentages.
    """
    def __init__(self, market='sensex', **kwargs):
        self.market = market
        self.inputs = kwargs

    def get(self, key, default=0):
        value = self.inputs.get(key, default)
        return default if value is None else value

    def __getitem__(self, key):
        return self.inputs[key]


@dataclass
class CorpusRange:
    min: float
    max: float
    min_year: Optional[int]
    max_year: Optional[int]
    min_year_pe: Optional[float] = None
    max_year_pe: Optional[float] = None


@dataclass
class CorpusOption:
    duration: str
    corpus: float
    range: Optional[CorpusRange] = None
    estimated: bool = False
    converged: bool = True


@dataclass
class SplitOutcome:
    equity_ratio: float
    results: List[SimulationResult]
    analysis: SimulationSummary


@dataclass
class StressTest:
    test_years: List[int]
    splits: Dict[str, SplitOutcome]
    is_surplus: bool


@dataclass
class ContributionPlan:
    schedule: ContributionSchedule
    total_gap: float
    move_to_debt_at_retirement: float


@dataclass
class PlanResult:
    market: str
    yield_result: YieldResult
    expenses_at_retirement: float
    expenses_growth: float
    corpus_options: Dict[str, CorpusOption]
    selected_duration: str
    selected_corpus: CorpusOption
    projection: Projection
    gap: GapAnalysis
    ideal_allocation: Allocation
    reallocation: Reallocation
    simulation_corpus: float
    stress_test: StressTest
    contribution_plan: Optional[ContributionPlan] = None
    test_years: Dict[str, List[int]] = field(default_factory=dict)


def calculate_corpus_options(config: PlanConfig, market: MarketProfile, expenses_at_retirement,
                             perpetual_yield, market_returns, rng=None):
    """Required corpus for a perpetual horizon and for each fixed duration."""
    perpetual = required_corpus(expenses_at_retirement, perpetual_yield)
    options = {PERPETUAL: CorpusOption(duration='Perpetual', corpus=perpetual)}
    test_years_used = {}

    base = SimulationParameters(
        starting_corpus=0.0,
        yearly_expenses=expenses_at_retirement,
        equity_ratio=DEFAULT_EQUITY_RATIO,
        yield_rate=perpetual_yield,
        debt_return=config['debt_return'],
        inflation_rate=config['inflation'],
        tax_rate=config['tax_rate'],
        start_year=market.data_range.start_year,
    )

    for years in CORPUS_DURATIONS:
        key = str(years)
        label = f'{years} years'
        valid_years = valid_starting_years(market.data_range, years)
        if not valid_years:
            options[key] = CorpusOption(duration=label, corpus=perpetual * years / ESTIMATE_HORIZON,
                                        estimated=True)
            continue

        test_years = select_simulation_years(valid_years, min(SAMPLE_COUNT, len(valid_years)),
                                             market_returns=market_returns, rng=rng)
        test_years_used[key] = test_years
        estimate = find_corpus_for_duration(base, years, test_years, market_returns)
        if not estimate.simulated:
            options[key] = CorpusOption(duration=label, corpus=estimate.avg_corpus, estimated=True)
            continue

        options[key] = CorpusOption(
            duration=label,
            corpus=estimate.avg_corpus,
            range=CorpusRange(
                min=estimate.min_corpus,
                max=estimate.max_corpus,
                min_year=estimate.min_year,
                max_year=estimate.max_year,
                # P/E going into the start year
                min_year_pe=market.pe_for(estimate.min_year - 1),
                max_year_pe=market.pe_for(estimate.max_year - 1),
            ),
            converged=estimate.converged,
        )

    return options, test_years_used


def run_historical_simulation(config: PlanConfig, market: MarketProfile, corpus, yield_rate,
                              market_returns, is_surplus, rng=None) -> StressTest:
    """Replay the retirement from sampled historical start years at each equity split."""
    valid_years = valid_starting_years(market.data_range, STRESS_TEST_HORIZON)
    must_include = [year for year in CRISIS_YEARS if year in valid_years]
    test_years = select_simulation_years(valid_years, SAMPLE_COUNT, must_include,
                                         market_returns, rng=rng)

    years_to_retire = config.get('years_to_retire')
    if years_to_retire == 0:
        expenses = config['yearly_expenses']
    else:
        expenses = inflation_adjusted_expenses(config['yearly_expenses'], config['inflation'],
                                               years_to_retire)

    splits = {}
    for name, ratio in EQUITY_SPLITS.items():
        params = SimulationParameters(
            starting_corpus=corpus,
            yearly_expenses=expenses,
            equity_ratio=ratio,
            yield_rate=yield_rate,
            debt_return=config['debt_return'],
            inflation_rate=config['inflation'],
            tax_rate=config['tax_rate'],
            start_year=market.data_range.start_year,
            max_years=STRESS_TEST_MAX_YEARS,
        )
        results = run_multiple_simulations(params, test_years, market_returns)
        splits[name] = SplitOutcome(equity_ratio=ratio, results=results,
                                    analysis=analyze_simulation_results(results))

    return StressTest(test_years=test_years, splits=splits, is_surplus=is_surplus)


def run_plan(config: PlanConfig, market: MarketProfile,
             rng: Optional[np.random.Generator] = None) -> PlanResult:
    """
    Run the complete planner (core engine logic).

    Args:
        config: PlanConfig object containing all inputs
        market: market table and defaults to plan against
        rng: randomness for start-year sampling; pass a seeded generator for
            reproducible output
    """
    market_returns = market.returns()

    yearly_expenses = config['yearly_expenses']
    years_to_retire = int(config.get('years_to_retire'))
    average_return = config['average_return']
    debt_return = config['debt_return']
    inflation = config['inflation']

    # --- 1. Sustainable yield ---
    yield_result = calculate_yield(yearly_expenses, average_return, config['tax_rate'], inflation)
    expenses_at_retirement = inflation_adjusted_expenses(yearly_expenses, inflation, years_to_retire)

    # --- 2. Corpus options ---
    corpus_options, test_years_used = calculate_corpus_options(
        config, market, expenses_at_retirement, yield_result.yield_rate, market_returns, rng=rng)
    duration = str(config.get('duration', PERPETUAL))
    if duration not in corpus_options:
        duration = PERPETUAL
    selected = corpus_options[duration]

    # --- 3. Projection & gap ---
    current_equity = config.get('current_equity')
    current_debt = config.get('current_debt')
    projection = investment_projection(current_equity, current_debt, average_return,
                                       debt_return, years_to_retire)
    gap = gap_analysis(selected.corpus, projection.future_total)
    allocation = ideal_allocation(selected.corpus, DEFAULT_EQUITY_RATIO)
    advice = reallocation(current_equity, current_debt, allocation.ideal_equity,
                          allocation.ideal_debt, average_return, debt_return, years_to_retire)

    # --- 4. Contributions to close a shortfall ---
    contribution_plan = None
    if config.get('sip_enabled', False) and not gap.is_surplus:
        after_move = investment_projection(advice.new_equity, advice.new_debt, average_return,
                                           debt_return, years_to_retire)
        total_gap = selected.corpus - after_move.future_total
        if total_gap > 0 and years_to_retire > 0:
            schedule = calculate_sip_for_target(total_gap, average_return,
                                                config.get('sip_step_up', DEFAULT_STEP_UP),
                                                years_to_retire)
            contribution_plan = ContributionPlan(
                schedule=schedule,
                total_gap=total_gap,
                move_to_debt_at_retirement=allocation.ideal_debt - after_move.future_debt,
            )

    # --- 5. Historical stress test ---
    if years_to_retire == 0:
        simulation_corpus = current_equity + current_debt
    else:
        simulation_corpus = projection.future_total
    stress_test = run_historical_simulation(config, market, simulation_corpus,
                                            yield_result.yield_rate, market_returns,
                                            gap.is_surplus, rng=rng)
    test_years_used['stress_test'] = stress_test.test_years

    return PlanResult(
        market=market.name,
        yield_result=yield_result,
        expenses_at_retirement=expenses_at_retirement,
        expenses_growth=(expenses_at_retirement / yearly_expenses
                         if years_to_retire > 0 and yearly_expenses > 0 else 1.0),
        corpus_options=corpus_options,
        selected_duration=duration,
        selected_corpus=selected,
        projection=projection,
        gap=gap,
        ideal_allocation=allocation,
        reallocation=advice,
        simulation_corpus=simulation_corpus,
        stress_test=stress_test,
        contribution_plan=contribution_plan,
        test_years=test_years_used,
    )
