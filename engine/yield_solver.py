from dataclasses import dataclass

DEFAULT_MAX_YEARS = 100
UNSUSTAINABLE_YIELD = 1.0


@dataclass(frozen=True)
class YieldResult:
    """
    Outcome of the sustainable-yield search.

    ``yield_rate`` is a percentage. When ``sustainable`` is False the rate is a
    placeholder, not a usable withdrawal rate.
    """
    years: int
    yield_rate: float
    total_balance: float
    inflation_adjusted_expenses: float
    sustainable: bool = True


def investment_future_value(initial_amount, increase_rate, annual_return, years):
    """
    Future value of a yearly amount invested in monthly instalments.

    The yearly amount escalates by ``increase_rate`` each year and the balance
    compounds monthly at ``annual_return / 12``. Rates are percentages.
    """
    if years <= 0:
        return 0.0

    total_balance = 0.0
    current_contribution = initial_amount
    r = annual_return / 100
    i = increase_rate / 100

    for _ in range(years):
        monthly_contribution = current_contribution / 12
        for _ in range(12):
            monthly_return = (total_balance + monthly_contribution) * (r / 12)
            total_balance += monthly_return + monthly_contribution
        current_contribution *= (1 + i)

    return total_balance


def calculate_yield(annual_expenses, annual_return, tax_rate, inflation_rate,
                    max_years=DEFAULT_MAX_YEARS):
    """
    Sustainable annual withdrawal percentage of a perpetual corpus.

    Args:
        annual_expenses: today's yearly expenses
        annual_return: expected market return (%)
        tax_rate: withdrawal tax rate (%)
        inflation_rate: expense inflation (%)
        max_years: cap on the search horizon
    """
    if annual_expenses <= 0 or max_years <= 0:
        return YieldResult(years=0, yield_rate=0.0, total_balance=0.0,
                           inflation_adjusted_expenses=0.0)

    r = annual_return / 100
    tax = tax_rate / 100
    inflation = inflation_rate / 100

    if r <= inflation:
        return YieldResult(
            years=max_years,
            yield_rate=UNSUSTAINABLE_YIELD,
            total_balance=annual_expenses * max_years,
            inflation_adjusted_expenses=annual_expenses * (1 + inflation) ** max_years,
            sustainable=False,
        )

    original_expenses = annual_expenses
    inflation_adjusted = annual_expenses
    income_and_returns = annual_expenses

    for year in range(1, max_years + 1):
        inflation_adjusted *= (1 + inflation)
        income_and_returns += income_and_returns * r

        target = 2 * inflation_adjusted + tax * (inflation_adjusted - original_expenses)
        if income_and_returns >= target:
            return _yield_at(original_expenses, inflation_adjusted, inflation_rate,
                             annual_return, year)

    # Threshold never met: best effort at the cap
    return _yield_at(original_expenses, inflation_adjusted, inflation_rate,
                     annual_return, max_years)


def _yield_at(original_expenses, inflation_adjusted, inflation_rate, annual_return, years):
    total_balance = investment_future_value(original_expenses, inflation_rate,
                                            annual_return, years)
    return YieldResult(
        years=years,
        yield_rate=inflation_adjusted / total_balance * 100,
        total_balance=total_balance,
        inflation_adjusted_expenses=inflation_adjusted,
    )
