from typing import Literal, Optional
from pydantic import BaseModel, Field

MarketName = Literal['sensex', 'sp500']
Duration = Literal['perpetual', '30', '25', '20', '15']


class PlanParams(BaseModel):
    """Planner inputs with validation. Rates are whole-number percentages."""
    market: MarketName = 'sensex'

    # Household
    yearly_expenses: float = Field(gt=0)
    current_equity: float = Field(ge=0, default=0)
    current_debt: float = Field(ge=0, default=0)
    years_to_retire: int = Field(ge=0, le=60, default=0)
    duration: Duration = 'perpetual'

    # Market assumptions (None = market default)
    average_return: Optional[float] = Field(ge=-50, le=50, default=None)
    tax_rate: Optional[float] = Field(ge=0, lt=100, default=None)
    debt_return: Optional[float] = Field(ge=-50, le=50, default=None)
    inflation: Optional[float] = Field(ge=0, le=50, default=None)

    # Contributions
    sip_enabled: bool = False
    sip_step_up: float = Field(ge=0, le=100, default=10)


class SimulationRequest(BaseModel):
    """One historical run. Omitted rates come from the market defaults."""
    market: MarketName = 'sensex'
    starting_corpus: float = Field(ge=0)
    yearly_expenses: float = Field(gt=0)
    equity_ratio: float = Field(ge=0, le=1, default=0.85)
    start_year: int = Field(ge=1900, le=2100)
    max_years: int = Field(ge=1, le=100, default=50)

    yield_rate: Optional[float] = Field(ge=0, le=100, default=None)
    dividend_yield: float = Field(ge=0, le=20, default=0)
    debt_return: Optional[float] = Field(ge=-50, le=50, default=None)
    inflation: Optional[float] = Field(ge=0, le=50, default=None)
    tax_rate: Optional[float] = Field(ge=0, lt=100, default=None)
    average_return: Optional[float] = Field(ge=-50, le=50, default=None)


class YieldRequest(BaseModel):
    annual_expenses: float = Field(ge=0)
    annual_return: float = Field(ge=-50, le=50)
    tax_rate: float = Field(ge=0, lt=100)
    inflation: float = Field(ge=0, le=50)
    max_years: int = Field(ge=1, le=200, default=100)


class ContributionRequest(BaseModel):
    target: float
    annual_return: float = Field(ge=-50, le=50)
    step_up: float = Field(ge=0, le=100, default=10)
    years: int = Field(ge=0, le=60)
