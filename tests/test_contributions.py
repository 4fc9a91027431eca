import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from engine.contributions import (
    TOLERANCE,
    calculate_sip_for_target,
    sip_future_value,
)


class TestSipFutureValue(unittest.TestCase):
    def test_degenerate_inputs(self):
        self.assertEqual(sip_future_value(0, 12, 10, 10), 0)
        self.assertEqual(sip_future_value(5000, 12, 10, 0), 0)

    def test_one_year_monthly_compounding(self):
        # 1000 a month at 1% a month, paid at the start of each month
        self.assertAlmostEqual(sip_future_value(1000, 12, 0, 1), 12809.33, delta=0.01)

    def test_zero_return_sums_stepped_contributions(self):
        # 12k, 13.2k, 14.52k
        self.assertAlmostEqual(sip_future_value(1000, 0, 10, 3), 39720, places=6)

    def test_earlier_years_compound_to_horizon(self):
        one_year = sip_future_value(1000, 12, 0, 1)
        self.assertAlmostEqual(sip_future_value(1000, 12, 0, 2), one_year * 1.12 + one_year)


class TestCalculateSipForTarget(unittest.TestCase):
    def test_non_positive_target_is_all_zero(self):
        for target, years in ((0, 10), (-5000, 10), (100000, 0)):
            plan = calculate_sip_for_target(target, 12, 10, years)
            self.assertEqual(plan.monthly_contribution, 0)
            self.assertEqual(plan.final_monthly_contribution, 0)
            self.assertEqual(plan.total_invested, 0)
            self.assertEqual(plan.schedule, [])

    def test_zero_return_root_within_tolerance(self):
        # 10 years of flat 10k a month reach 1.2M exactly
        plan = calculate_sip_for_target(1200000, 0, 0, 10)
        self.assertTrue(plan.converged)
        self.assertLessEqual(abs(plan.monthly_contribution - 10000), TOLERANCE)
        self.assertEqual(len(plan.schedule), 10)
        self.assertAlmostEqual(plan.total_invested, plan.monthly_contribution * 120)

    def test_solution_brackets_target(self):
        target = 25000000
        plan = calculate_sip_for_target(target, 12, 10, 15)
        monthly = plan.monthly_contribution
        self.assertLess(sip_future_value(monthly - TOLERANCE, 12, 10, 15), target)
        self.assertGreaterEqual(sip_future_value(monthly + TOLERANCE, 12, 10, 15), target)

    def test_schedule_steps_up_each_year(self):
        plan = calculate_sip_for_target(5000000, 10, 10, 5)
        self.assertEqual([row.year for row in plan.schedule], [1, 2, 3, 4, 5])
        self.assertAlmostEqual(plan.schedule[0].monthly_contribution, plan.monthly_contribution)
        for prev, row in zip(plan.schedule, plan.schedule[1:]):
            self.assertAlmostEqual(row.monthly_contribution, prev.monthly_contribution * 1.1)
            self.assertAlmostEqual(row.yearly_total, row.monthly_contribution * 12)
        self.assertAlmostEqual(plan.final_monthly_contribution, plan.monthly_contribution * 1.1 ** 4)
        self.assertAlmostEqual(plan.total_invested, sum(row.yearly_total for row in plan.schedule))


if __name__ == '__main__':
    unittest.main()
