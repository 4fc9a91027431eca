import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from engine.market_data import (
    MARKETS,
    DataRange,
    get_market,
    valid_starting_years,
    yearly_returns,
)


class TestYearlyReturns(unittest.TestCase):
    def test_year_over_year_change(self):
        returns = yearly_returns({2000: 100.0, 2001: 110.0, 2002: 99.0})
        self.assertEqual(sorted(returns), [2001, 2002])
        self.assertAlmostEqual(returns[2001], 10.0)
        self.assertAlmostEqual(returns[2002], -10.0)

    def test_unsorted_input(self):
        returns = yearly_returns({2002: 99.0, 2000: 100.0, 2001: 110.0})
        self.assertAlmostEqual(returns[2002], -10.0)

    def test_empty_table(self):
        self.assertEqual(yearly_returns({}), {})

    def test_sp500_returns(self):
        returns = get_market('sp500').returns()
        self.assertNotIn(1985, returns)
        self.assertEqual(min(returns), 1986)
        self.assertEqual(max(returns), 2025)
        self.assertAlmostEqual(returns[1986], (242.17 - 211.28) / 211.28 * 100)
        self.assertLess(returns[2008], -35)
        self.assertIsInstance(next(iter(returns)), int)

    def test_sensex_returns(self):
        returns = get_market('sensex').returns()
        self.assertEqual(min(returns), 1992)
        self.assertLess(returns[2008], -50)


class TestMarkets(unittest.TestCase):
    def test_defaults(self):
        sensex = get_market('sensex')
        self.assertEqual(sensex.average_return, 12)
        self.assertEqual(sensex.tax_rate, 12.5)
        self.assertEqual(sensex.data_range, DataRange(1994, 2025))
        sp500 = get_market('sp500')
        self.assertEqual(sp500.inflation, 3)
        self.assertEqual(sp500.data_range.total_years, 40)

    def test_unknown_market(self):
        with self.assertRaises(KeyError):
            get_market('nikkei')

    def test_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            MARKETS['nikkei'] = None
        with self.assertRaises(TypeError):
            get_market('sensex').levels[2026] = 1.0

    def test_pe_lookup_without_table(self):
        self.assertIsNone(get_market('sensex').pe_for(2007))
        self.assertIsNone(get_market('sensex').pe_for(None))


class TestValidStartingYears(unittest.TestCase):
    def test_duration_fits_inside_range(self):
        years = valid_starting_years(DataRange(1994, 2025), 15)
        self.assertEqual(years[0], 1994)
        self.assertEqual(years[-1], 2010)
        self.assertEqual(len(years), 17)

    def test_duration_longer_than_range(self):
        self.assertEqual(valid_starting_years(DataRange(1994, 2025), 40), [])


if __name__ == '__main__':
    unittest.main()
