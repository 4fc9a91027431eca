import logging
from dataclasses import asdict
from typing import Optional

import numpy as np
import pandas as pd

from config import get_config
from engine.contributions import calculate_sip_for_target
from engine.core import PlanConfig, run_plan
from engine.market_data import MARKETS, get_market
from engine.simulator import SimulationParameters, run_simulation
from engine.yield_solver import calculate_yield
from schemas.plan import ContributionRequest, PlanParams, SimulationRequest, YieldRequest

logger = logging.getLogger(__name__)

MARKET_DEFAULT_FIELDS = ('average_return', 'tax_rate', 'debt_return', 'inflation')


def make_rng() -> np.random.Generator:
    """Generator for start-year sampling, seeded when configured."""
    return np.random.default_rng(get_config().selection_seed)


def map_to_engine_config(params: PlanParams) -> PlanConfig:
    """Convert Pydantic model to Engine Config, filling market defaults"""
    market = get_market(params.market)
    inputs = params.model_dump(exclude={'market'})
    for key in MARKET_DEFAULT_FIELDS:
        if inputs.get(key) is None:
            inputs[key] = getattr(market, key)
    return PlanConfig(market=params.market, **inputs)


def format_results(records: list) -> dict:
    """Format engine rows for API response"""
    if not records:
        return {'results': [], 'columns': []}

    df = pd.DataFrame(records)
    header = list(df.columns)

    results_json = []
    for record in df.to_dict(orient='records'):
        row_dict = {}
        for col in header:
            val = record[col]
            if pd.isna(val):
                row_dict[col] = None
            elif hasattr(val, 'item'):
                row_dict[col] = val.item()
            else:
                row_dict[col] = val
        results_json.append(row_dict)

    return {
        'results': results_json,
        'columns': header
    }


def format_simulation(result, include_ledger=True) -> dict:
    """Run summary, optionally with its year-by-year ledger"""
    if result is None:
        return None
    summary = asdict(result)
    ledger = summary.pop('ledger')
    if include_ledger:
        summary['ledger'] = format_results(ledger)
    return summary


def format_analysis(analysis) -> dict:
    out = asdict(analysis)
    out['best_case'] = format_simulation(analysis.best_case, include_ledger=False)
    out['worst_case'] = format_simulation(analysis.worst_case, include_ledger=False)
    return out


def format_plan(plan) -> dict:
    """Plain-data view of a PlanResult; ledgers go through the DataFrame formatter"""
    stress = {
        'test_years': plan.stress_test.test_years,
        'is_surplus': plan.stress_test.is_surplus,
        'splits': {
            name: {
                'equity_ratio': split.equity_ratio,
                'results': [format_simulation(r) for r in split.results],
                'analysis': format_analysis(split.analysis),
            }
            for name, split in plan.stress_test.splits.items()
        },
    }

    return {
        'market': plan.market,
        'yield': asdict(plan.yield_result),
        'expenses_at_retirement': plan.expenses_at_retirement,
        'expenses_growth': plan.expenses_growth,
        'corpus_options': {k: asdict(v) for k, v in plan.corpus_options.items()},
        'selected_duration': plan.selected_duration,
        'selected_corpus': asdict(plan.selected_corpus),
        'projection': asdict(plan.projection),
        'gap_analysis': asdict(plan.gap),
        'ideal_allocation': asdict(plan.ideal_allocation),
        'reallocation': asdict(plan.reallocation),
        'contribution_plan': asdict(plan.contribution_plan) if plan.contribution_plan else None,
        'simulation_corpus': plan.simulation_corpus,
        'simulation': stress,
        'test_years': plan.test_years,
    }


def run_plan_service(params: PlanParams, rng: Optional[np.random.Generator] = None):
    """
    Service to run the complete planner and return formatted results.
    """
    config = map_to_engine_config(params)
    market = get_market(params.market)
    plan = run_plan(config, market, rng=rng if rng is not None else make_rng())

    logger.info("Plan for %s: selected %s corpus %.0f, %s",
                params.market, plan.selected_duration, plan.selected_corpus.corpus,
                plan.gap.status)

    return {
        'success': True,
        'config': {**params.model_dump(), **{k: config[k] for k in MARKET_DEFAULT_FIELDS}},
        'plan': format_plan(plan),
    }


def run_simulation_service(request: SimulationRequest):
    """
    Service to run one historical simulation with its ledger.
    """
    market = get_market(request.market)
    inflation = request.inflation if request.inflation is not None else market.inflation
    tax_rate = request.tax_rate if request.tax_rate is not None else market.tax_rate
    debt_return = request.debt_return if request.debt_return is not None else market.debt_return

    yield_rate = request.yield_rate
    if yield_rate is None:
        average_return = (request.average_return if request.average_return is not None
                          else market.average_return)
        yield_rate = calculate_yield(request.yearly_expenses, average_return, tax_rate,
                                     inflation).yield_rate

    params = SimulationParameters(
        starting_corpus=request.starting_corpus,
        yearly_expenses=request.yearly_expenses,
        equity_ratio=request.equity_ratio,
        yield_rate=yield_rate,
        debt_return=debt_return,
        inflation_rate=inflation,
        tax_rate=tax_rate,
        start_year=request.start_year,
        max_years=request.max_years,
        dividend_yield=request.dividend_yield,
    )
    result = run_simulation(params, market.returns())

    logger.info("Simulation %s from %d: %d years, survived=%s",
                request.market, request.start_year, result.years_simulated, result.survived)

    return {
        'success': True,
        'parameters': asdict(params),
        'simulation': format_simulation(result),
    }


def yield_service(request: YieldRequest):
    result = calculate_yield(request.annual_expenses, request.annual_return, request.tax_rate,
                             request.inflation, max_years=request.max_years)
    return {'success': True, 'yield': asdict(result)}


def contribution_service(request: ContributionRequest):
    schedule = calculate_sip_for_target(request.target, request.annual_return,
                                        request.step_up, request.years)
    return {'success': True, 'contribution_plan': asdict(schedule)}


def market_defaults_service():
    """Defaults and data ranges for every supported market"""
    return {
        'success': True,
        'markets': {
            name: {
                'label': market.label,
                'currency': market.currency,
                'average_return': market.average_return,
                'tax_rate': market.tax_rate,
                'debt_return': market.debt_return,
                'inflation': market.inflation,
                'data_range': asdict(market.data_range),
            }
            for name, market in MARKETS.items()
        },
    }
