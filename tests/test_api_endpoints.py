import unittest
import os
import sys

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from main import app

PLAN_PAYLOAD = {
    'market': 'sp500',
    'yearly_expenses': 60000,
    'current_equity': 400000,
    'current_debt': 100000,
    'years_to_retire': 8,
    'duration': '25',
    'sip_enabled': True,
    'sip_step_up': 5,
}

PLAN_CSV = b"""parameter,value
market,sp500
yearly_expenses,60000
current_equity,400000
current_debt,100000
years_to_retire,8
duration,15
sip_enabled,true
"""


class TestAPIEndpoints(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'healthy')

    def test_markets(self):
        resp = self.client.get("/api/markets")
        self.assertEqual(resp.status_code, 200)
        markets = resp.json()['markets']
        self.assertEqual(set(markets), {'sensex', 'sp500'})
        self.assertEqual(markets['sp500']['data_range'], {'start_year': 1986, 'end_year': 2025})

    def test_run_plan_json(self):
        resp = self.client.post("/api/run-plan", json=PLAN_PAYLOAD)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()

        self.assertTrue(data['success'])
        self.assertEqual(data['config']['tax_rate'], 15)
        plan = data['plan']
        self.assertEqual(plan['market'], 'sp500')
        self.assertEqual(plan['selected_duration'], '25')
        self.assertIn('perpetual', plan['corpus_options'])
        self.assertIn(plan['gap_analysis']['status'], ('surplus', 'shortfall'))

        splits = plan['simulation']['splits']
        self.assertEqual(set(splits), {'85:15', '60:40'})
        run = splits['85:15']['results'][0]
        self.assertIn('ledger', run)
        self.assertIn('equity', run['ledger']['columns'])
        self.assertEqual(len(run['ledger']['results']), run['years_simulated'])
        analysis = splits['85:15']['analysis']
        self.assertIn('survival_rate', analysis)
        if analysis['best_case'] is not None:
            self.assertNotIn('ledger', analysis['best_case'])

    def test_run_plan_csv_upload(self):
        files = {'file': ('plan.csv', PLAN_CSV, 'text/csv')}
        resp = self.client.post("/api/run-plan", files=files)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['config']['duration'], '15')
        self.assertEqual(data['config']['market'], 'sp500')
        self.assertTrue(data['config']['sip_enabled'])

    def test_run_plan_rejects_invalid_params(self):
        resp = self.client.post("/api/run-plan", json={**PLAN_PAYLOAD, 'yearly_expenses': 0})
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/run-plan", json={**PLAN_PAYLOAD, 'market': 'nikkei'})
        self.assertEqual(resp.status_code, 400)

    def test_run_plan_without_body(self):
        resp = self.client.post("/api/run-plan")
        self.assertEqual(resp.status_code, 400)

    def test_simulate(self):
        payload = {
            'market': 'sensex',
            'starting_corpus': 30000000,
            'yearly_expenses': 1000000,
            'start_year': 2008,
            'max_years': 10,
        }
        resp = self.client.post("/api/simulate", json=payload)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        sim = data['simulation']
        self.assertEqual(sim['start_year'], 2008)
        self.assertLessEqual(sim['years_simulated'], 10)
        self.assertEqual(len(sim['ledger']['results']), sim['years_simulated'])
        self.assertEqual(data['parameters']['tax_rate'], 12.5)
        self.assertGreater(data['parameters']['yield_rate'], 0)

    def test_simulate_rejects_bad_ratio(self):
        payload = {'starting_corpus': 1, 'yearly_expenses': 1, 'start_year': 2000, 'equity_ratio': 2}
        resp = self.client.post("/api/simulate", json=payload)
        self.assertEqual(resp.status_code, 400)

    def test_sustainable_yield(self):
        payload = {'annual_expenses': 100000, 'annual_return': 6, 'tax_rate': 10, 'inflation': 6}
        resp = self.client.post("/api/sustainable-yield", json=payload)
        self.assertEqual(resp.status_code, 200)
        result = resp.json()['yield']
        self.assertEqual(result['years'], 100)
        self.assertEqual(result['yield_rate'], 1.0)
        self.assertFalse(result['sustainable'])

    def test_contribution_plan(self):
        resp = self.client.post("/api/contribution-plan",
                                json={'target': 1200000, 'annual_return': 0, 'step_up': 0, 'years': 10})
        self.assertEqual(resp.status_code, 200)
        plan = resp.json()['contribution_plan']
        self.assertEqual(len(plan['schedule']), 10)
        self.assertLessEqual(abs(plan['monthly_contribution'] - 10000), 100)

    def test_contribution_plan_zero_target(self):
        resp = self.client.post("/api/contribution-plan",
                                json={'target': 0, 'annual_return': 12, 'years': 10})
        self.assertEqual(resp.status_code, 200)
        plan = resp.json()['contribution_plan']
        self.assertEqual(plan['schedule'], [])
        self.assertEqual(plan['total_invested'], 0)

    def test_sustainable_yield_rejects_incomplete_body(self):
        resp = self.client.post("/api/sustainable-yield", json={'annual_expenses': 1})
        self.assertEqual(resp.status_code, 400)
        self.assertIsInstance(resp.json()['detail'], list)

    def test_sustainable_yield_rejects_malformed_json(self):
        resp = self.client.post("/api/sustainable-yield", content=b"{not json",
                                headers={'content-type': 'application/json'})
        self.assertEqual(resp.status_code, 400)

    def test_contribution_plan_rejects_negative_years(self):
        resp = self.client.post("/api/contribution-plan",
                                json={'target': 1000, 'annual_return': 12, 'years': -1})
        self.assertEqual(resp.status_code, 400)


if __name__ == '__main__':
    unittest.main()
