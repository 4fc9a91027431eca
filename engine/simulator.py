from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

FALLBACK_MARKET_RETURN = 5.0
DEFAULT_MAX_YEARS = 50


@dataclass(frozen=True)
class SimulationParameters:
    """
    Inputs for one historical run.

    Rates are whole-number percentages; ``equity_ratio`` is a fraction.
    ``yield_rate`` is the sustainable yield, withdrawn from equity first.
    """
    starting_corpus: float
    yearly_expenses: float
    equity_ratio: float
    yield_rate: float
    debt_return: float
    inflation_rate: float
    tax_rate: float
    start_year: int
    max_years: int = DEFAULT_MAX_YEARS
    dividend_yield: float = 0.0


@dataclass(frozen=True)
class LedgerEntry:
    year: int
    simulation_year: int
    market_return: float
    expenses: float
    equity_withdrawal: float
    debt_withdrawal: float
    rebalancing_tax: float
    total_wealth: float  # after withdrawals, before rebalancing tax
    equity: float
    debt: float
    survived: bool

    @property
    def ending_wealth(self):
        return self.equity + self.debt


@dataclass
class SimulationResult:
    start_year: int
    years_simulated: int
    final_year: int
    starting_corpus: float
    ending_corpus: float
    survived: bool
    ran_out_year: Optional[int]
    ledger: List[LedgerEntry] = field(default_factory=list)


def run_simulation(params: SimulationParameters, market_returns: Dict[int, float]) -> SimulationResult:
    """
    Simulate one retirement year by year against historical returns.

    Each year: escalate expenses, gross them up for tax, grow both sleeves,
    withdraw from the equity yield first and debt second, then rebalance to
    ``equity_ratio`` paying capital-gains tax on any equity sold. The run stops
    when equity is exhausted, ``max_years`` is reached or the return data ends.
    """
    if not params.starting_corpus or params.starting_corpus <= 0:
        return SimulationResult(
            start_year=params.start_year,
            years_simulated=0,
            final_year=params.start_year,
            starting_corpus=0.0,
            ending_corpus=0.0,
            survived=False,
            ran_out_year=params.start_year,
        )

    equity_ratio = params.equity_ratio
    debt_ratio = 1 - equity_ratio
    dividend = params.dividend_yield / 100
    debt_rate = params.debt_return / 100
    inflation = params.inflation_rate / 100
    tax = params.tax_rate / 100
    yield_rate = params.yield_rate / 100

    equity = params.starting_corpus * equity_ratio
    debt = params.starting_corpus * debt_ratio
    cost_basis = equity
    current_expenses = params.yearly_expenses

    end_year = max(market_returns) if market_returns else params.start_year - 1
    year = params.start_year
    simulation_year = 0
    ran_out = False
    ran_out_year = None
    ledger = []

    while simulation_year < params.max_years and year <= end_year and not ran_out:
        simulation_year += 1
        market_return = market_returns.get(year, FALLBACK_MARKET_RETURN) / 100

        # --- 1. Expenses ---
        current_expenses *= (1 + inflation)
        if tax < 1:
            pre_tax_need = current_expenses / (1 - tax)
        else:
            pre_tax_need = float('inf')

        # --- 2. Growth ---
        equity_after_return = equity * (1 + market_return + dividend)
        debt_after_return = debt * (1 + debt_rate)

        # --- 3. Withdrawals: equity yield first, debt for the rest ---
        equity_yield_amount = equity_after_return * yield_rate
        if equity_yield_amount >= pre_tax_need:
            equity_withdrawal = pre_tax_need
            debt_withdrawal = 0.0
        else:
            equity_withdrawal = equity_yield_amount
            debt_withdrawal = pre_tax_need - equity_yield_amount

        equity_after = equity_after_return - equity_withdrawal
        debt_after = debt_after_return - debt_withdrawal

        if equity_after_return > 0 and equity_withdrawal > 0:
            cost_basis *= (1 - equity_withdrawal / equity_after_return)

        # Debt can't go negative; the shortfall comes out of equity
        if debt_after < 0:
            shortfall = -debt_after
            equity_after -= shortfall
            debt_after = 0.0
            if equity_after > 0:
                cost_basis *= (1 - shortfall / (equity_after + shortfall))

        if equity_after <= 0:
            ran_out = True
            ran_out_year = year
            equity_after = 0.0

        # --- 4. Rebalancing ---
        total_wealth = equity_after + debt_after
        rebalancing_tax = 0.0
        if not ran_out and total_wealth > 0:
            ideal_equity = total_wealth * equity_ratio
            wealth = total_wealth
            if equity_after > ideal_equity:
                excess_equity = equity_after - ideal_equity
                gain_ratio = (equity_after - cost_basis) / equity_after
                gain_ratio = min(1.0, max(0.0, gain_ratio))
                rebalancing_tax = max(0.0, excess_equity * gain_ratio * tax)
                cost_basis *= (1 - excess_equity / equity_after)
                wealth -= rebalancing_tax
            elif equity_after < ideal_equity:
                cost_basis += ideal_equity - equity_after
            equity = wealth * equity_ratio
            debt = wealth * debt_ratio
        else:
            equity = equity_after
            debt = debt_after

        # --- 5. Record ---
        ledger.append(LedgerEntry(
            year=year,
            simulation_year=simulation_year,
            market_return=market_return * 100,
            expenses=current_expenses,
            equity_withdrawal=equity_withdrawal,
            debt_withdrawal=debt_withdrawal,
            rebalancing_tax=rebalancing_tax,
            total_wealth=total_wealth,
            equity=equity,
            debt=debt,
            survived=not ran_out,
        ))
        year += 1

    return SimulationResult(
        start_year=params.start_year,
        years_simulated=simulation_year,
        final_year=year - 1,
        starting_corpus=params.starting_corpus,
        ending_corpus=equity + debt,
        survived=not ran_out,
        ran_out_year=ran_out_year,
        ledger=ledger,
    )


def run_multiple_simulations(params: SimulationParameters, start_years, market_returns):
    """One independent run per start year, in the order given."""
    return [
        run_simulation(replace(params, start_year=start_year), market_returns)
        for start_year in start_years
    ]
