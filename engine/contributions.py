from dataclasses import dataclass, field
from typing import List

from engine.bisection import bisect

TOLERANCE = 100
MAX_ITERATIONS = 100


@dataclass(frozen=True)
class ContributionYear:
    year: int
    monthly_contribution: float
    yearly_total: float


@dataclass
class ContributionSchedule:
    monthly_contribution: float
    final_monthly_contribution: float
    total_invested: float
    schedule: List[ContributionYear] = field(default_factory=list)
    converged: bool = True


def sip_future_value(initial_monthly, annual_return, step_up_rate, years):
    """
    Value at the horizon of a monthly SIP that steps up once a year.

    Each year's instalments compound monthly to a year-end value, which then
    grows annually at ``annual_return`` for the remaining years.
    """
    if years <= 0 or initial_monthly <= 0:
        return 0.0

    monthly_rate = annual_return / 100 / 12
    annual_growth = 1 + annual_return / 100
    step_up = step_up_rate / 100

    total = 0.0
    current_monthly = initial_monthly
    for year in range(1, years + 1):
        if monthly_rate > 0:
            year_end = current_monthly * ((1 + monthly_rate) ** 12 - 1) / monthly_rate * (1 + monthly_rate)
        else:
            year_end = current_monthly * 12
        total += year_end * annual_growth ** (years - year)
        current_monthly *= (1 + step_up)

    return total


def calculate_sip_for_target(target, annual_return, step_up_rate, years) -> ContributionSchedule:
    """
    Initial monthly SIP whose stepped-up stream grows to ``target``.

    Args:
        target: amount needed at the horizon
        annual_return: expected return (%)
        step_up_rate: yearly increase of the monthly amount (%)
        years: horizon in years
    """
    if target <= 0 or years <= 0:
        return ContributionSchedule(monthly_contribution=0.0,
                                    final_monthly_contribution=0.0,
                                    total_invested=0.0)

    found = bisect(
        lambda monthly: sip_future_value(monthly, annual_return, step_up_rate, years) >= target,
        low=0.0,
        high=target / (years * 6),
        tolerance=TOLERANCE,
        max_iterations=MAX_ITERATIONS,
    )

    schedule = []
    current = found.value
    total_invested = 0.0
    for year in range(1, years + 1):
        schedule.append(ContributionYear(year=year, monthly_contribution=current,
                                         yearly_total=current * 12))
        total_invested += current * 12
        current *= (1 + step_up_rate / 100)

    return ContributionSchedule(
        monthly_contribution=found.value,
        final_monthly_contribution=schedule[-1].monthly_contribution,
        total_invested=total_invested,
        schedule=schedule,
        converged=found.converged,
    )
