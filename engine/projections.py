"""
Deterministic planning arithmetic around the simulator: required corpus,
growth of current savings, allocation targets and the surplus/shortfall gap.
All rates are whole-number percentages.
"""
from dataclasses import dataclass

REALLOCATION_THRESHOLD = 1000


def required_corpus(yearly_expenses, yield_rate):
    """Corpus whose sustainable yield covers ``yearly_expenses``."""
    if yield_rate <= 0:
        return yearly_expenses * 100
    return yearly_expenses / (yield_rate / 100)


def inflation_adjusted_expenses(current_expenses, inflation_rate, years):
    if years <= 0:
        return current_expenses
    return current_expenses * (1 + inflation_rate / 100) ** years


@dataclass(frozen=True)
class Projection:
    future_equity: float
    future_debt: float
    future_total: float
    equity_growth: float
    debt_growth: float


def investment_projection(current_equity, current_debt, equity_return, debt_return, years):
    """Compound both sleeves forward with no further contributions."""
    if years <= 0:
        return Projection(current_equity, current_debt, current_equity + current_debt, 1.0, 1.0)

    fv_equity = current_equity * (1 + equity_return / 100) ** years
    fv_debt = current_debt * (1 + debt_return / 100) ** years
    return Projection(
        future_equity=fv_equity,
        future_debt=fv_debt,
        future_total=fv_equity + fv_debt,
        equity_growth=fv_equity / current_equity if current_equity > 0 else 0.0,
        debt_growth=fv_debt / current_debt if current_debt > 0 else 0.0,
    )


@dataclass(frozen=True)
class Allocation:
    ideal_equity: float
    ideal_debt: float


def ideal_allocation(total_corpus, equity_ratio):
    return Allocation(ideal_equity=total_corpus * equity_ratio,
                      ideal_debt=total_corpus * (1 - equity_ratio))


@dataclass(frozen=True)
class Reallocation:
    action: str
    amount: float
    source: str
    destination: str
    new_equity: float
    new_debt: float
    projected_equity: float
    projected_debt: float
    debt_shortfall_at_retirement: float = 0.0
    move_at_retirement: float = 0.0


def reallocation(current_equity, current_debt, ideal_equity_at_retirement,
                 ideal_debt_at_retirement, equity_return, debt_return, years):
    """
    Advice on moving money between sleeves before retirement.

    Debt held today beyond what compounds into the ideal retirement debt is
    moved to equity now. If debt instead falls short at retirement, the
    shortfall is reported as an amount to move at retirement.
    """
    equity_rate = equity_return / 100
    debt_rate = debt_return / 100
    projected_equity = current_equity * (1 + equity_rate) ** years
    projected_debt = current_debt * (1 + debt_rate) ** years

    if years > 0:
        ideal_debt_now = ideal_debt_at_retirement / (1 + debt_rate) ** years
    else:
        ideal_debt_now = ideal_debt_at_retirement
    debt_excess_now = current_debt - ideal_debt_now

    if debt_excess_now > REALLOCATION_THRESHOLD:
        new_equity = current_equity + debt_excess_now
        return Reallocation(
            action='move',
            amount=debt_excess_now,
            source='debt',
            destination='equity',
            new_equity=new_equity,
            new_debt=current_debt - debt_excess_now,
            projected_equity=new_equity * (1 + equity_rate) ** years,
            projected_debt=ideal_debt_at_retirement,
        )

    shortfall = 0.0
    if projected_debt < ideal_debt_at_retirement:
        shortfall = ideal_debt_at_retirement - projected_debt

    return Reallocation(
        action='none',
        amount=0.0,
        source='',
        destination='',
        new_equity=current_equity,
        new_debt=current_debt,
        projected_equity=projected_equity,
        projected_debt=projected_debt,
        debt_shortfall_at_retirement=shortfall,
        move_at_retirement=shortfall,
    )


@dataclass(frozen=True)
class GapAnalysis:
    required: float
    projected: float
    difference: float
    is_surplus: bool
    status: str


def gap_analysis(required, projected):
    difference = projected - required
    return GapAnalysis(required=required, projected=projected,
                       difference=abs(difference), is_surplus=difference >= 0,
                       status='surplus' if difference >= 0 else 'shortfall')
