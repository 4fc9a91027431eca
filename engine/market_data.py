from dataclasses import dataclass, field
from types import MappingProxyType

import pandas as pd


# Year-end closing levels
SENSEX_LEVELS = MappingProxyType({
    1991: 1908.85, 1992: 2615.37, 1993: 3346.06, 1994: 3926.90, 1995: 3110.49,
    1996: 3085.20, 1997: 3658.98, 1998: 3055.41, 1999: 5005.82, 2000: 3972.12,
    2001: 3262.33, 2002: 3377.28, 2003: 5838.96, 2004: 6602.69, 2005: 9397.93,
    2006: 13786.91, 2007: 20286.99, 2008: 9647.31, 2009: 17464.81, 2010: 20509.09,
    2011: 15454.92, 2012: 19426.71, 2013: 21170.68, 2014: 27499.42, 2015: 26117.54,
    2016: 26626.46, 2017: 34056.83, 2018: 36068.33, 2019: 41253.74, 2020: 47751.33,
    2021: 58253.82, 2022: 60840.74, 2023: 72240.26, 2024: 78139.01, 2025: 85220.60,
})

SP500_LEVELS = MappingProxyType({
    1985: 211.28, 1986: 242.17, 1987: 247.08, 1988: 277.72, 1989: 353.40,
    1990: 330.22, 1991: 417.09, 1992: 435.71, 1993: 466.45, 1994: 459.27,
    1995: 615.93, 1996: 740.74, 1997: 970.43, 1998: 1229.23, 1999: 1469.25,
    2000: 1320.28, 2001: 1148.08, 2002: 879.82, 2003: 1111.92, 2004: 1211.92,
    2005: 1248.29, 2006: 1418.30, 2007: 1468.36, 2008: 903.25, 2009: 1115.10,
    2010: 1257.64, 2011: 1257.60, 2012: 1426.19, 2013: 1848.36, 2014: 2058.90,
    2015: 2043.94, 2016: 2238.83, 2017: 2673.61, 2018: 2506.85, 2019: 3230.78,
    2020: 3756.07, 2021: 4766.18, 2022: 3839.50, 2023: 4769.83, 2024: 5881.63,
    2025: 6845.50,
})


@dataclass(frozen=True)
class DataRange:
    start_year: int
    end_year: int

    @property
    def total_years(self):
        return self.end_year - self.start_year + 1


@dataclass(frozen=True)
class MarketProfile:
    """
    Read-only market table plus the planner defaults for that market.
    Rates are whole-number percentages.
    """
    name: str
    label: str
    currency: str
    levels: MappingProxyType
    average_return: float
    tax_rate: float
    debt_return: float
    inflation: float
    data_range: DataRange
    pe_ratios: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def returns(self):
        return yearly_returns(self.levels)

    def pe_for(self, year):
        """Trailing P/E annotation for a year, if the table has one."""
        if year is None:
            return None
        return self.pe_ratios.get(year)


def yearly_returns(levels):
    """
    Convert a year -> year-end level table into year -> percentage return.

    The earliest year has no prior level and is left out.
    """
    if not levels:
        return {}

    series = pd.Series(dict(levels), dtype=float).sort_index()
    prev = series.shift(1)
    pct = ((series - prev) / prev * 100).dropna()
    return {int(year): float(value) for year, value in pct.items()}


def valid_starting_years(data_range, duration):
    """Start years from which a full ``duration`` fits inside the data range."""
    return list(range(data_range.start_year, data_range.end_year - duration + 1))


MARKETS = MappingProxyType({
    'sensex': MarketProfile(
        name='sensex',
        label='BSE Sensex',
        currency='INR',
        levels=SENSEX_LEVELS,
        average_return=12,
        tax_rate=12.5,
        debt_return=7,
        inflation=7,
        data_range=DataRange(1994, 2025),
    ),
    'sp500': MarketProfile(
        name='sp500',
        label='S&P 500',
        currency='USD',
        levels=SP500_LEVELS,
        average_return=9,
        tax_rate=15,
        debt_return=5,
        inflation=3,
        data_range=DataRange(1986, 2025),
    ),
})


def get_market(name):
    """Look up a market profile; unknown names raise KeyError."""
    return MARKETS[name]
