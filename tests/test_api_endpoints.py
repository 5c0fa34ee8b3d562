import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient

from config import MAX_CONTENT_LENGTH
from main import app

SAMPLE_CSV = b"parameter,value\nfiling_status,single\ngross_wages,80000\nwithheld,9000\nstandard_deduction,\n"


class TestAPIEndpoints(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "healthy", "service": "tax-estimator-api"})

    def test_estimate_json(self):
        payload = {
            "filing_status": "single",
            "gross_wages": 80000,
            "withheld": 9000,
            "standard_deduction": 15750,
        }
        resp = self.client.post("/api/estimate", json=payload)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])

        summary = data['summary']
        self.assertEqual(summary['taxable_income'], 64250)
        self.assertEqual(summary['total_tax'], 9049.0)
        self.assertEqual(summary['refund_or_due'], -49.0)
        self.assertFalse(summary['is_refund'])

        brackets = data['ordinary_brackets']
        self.assertEqual(brackets['columns'], ['label', 'rate', 'amount', 'tax'])
        self.assertEqual(len(brackets['results']), 7)
        self.assertEqual(brackets['results'][2], {'label': '22%', 'rate': 0.22, 'amount': 15775.0, 'tax': 3470.5})

        tiers = data['ltcg_tiers']['results']
        self.assertEqual([row['label'] for row in tiers], ['0%', '15%', '20%'])
        self.assertFalse(data['brackets_fallback'])

    def test_estimate_json_fills_deduction(self):
        resp = self.client.post("/api/estimate", json={"filing_status": "mfj", "gross_wages": 100000})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['inputs']['standard_deduction'], 31500)
        self.assertEqual(data['summary']['taxable_income'], 68500)
        self.assertTrue(data['brackets_fallback'])
        self.assertEqual(len(data['advisories']), 1)

    def test_estimate_ltcg(self):
        resp = self.client.post("/api/estimate", json={"gross_wages": 115750, "long_term_gains": 500000})
        self.assertEqual(resp.status_code, 200)
        tiers = resp.json()['ltcg_tiers']['results']
        self.assertEqual([row['amount'] for row in tiers], [0, 433400, 66600])
        self.assertEqual(resp.json()['summary']['ltcg_tax'], 78330)

    def test_estimate_invalid_status(self):
        resp = self.client.post("/api/estimate", json={"filing_status": "widow", "gross_wages": 1})
        self.assertEqual(resp.status_code, 422)

    def test_estimate_non_numeric_amount(self):
        resp = self.client.post("/api/estimate", json={"gross_wages": "lots"})
        self.assertEqual(resp.status_code, 422)

    def test_estimate_amounts_too_large(self):
        resp = self.client.post("/api/estimate", json={"gross_wages": 1e308, "short_term_gains": 1e308})
        self.assertEqual(resp.status_code, 422)

    def test_estimate_largest_allowed_amounts(self):
        payload = {"gross_wages": 1e15, "short_term_gains": 1e15, "long_term_gains": 1e15}
        resp = self.client.post("/api/estimate", json=payload)
        self.assertEqual(resp.status_code, 200)
        self.assertGreater(resp.json()["summary"]["total_tax"], 0)

    def test_estimate_without_body(self):
        resp = self.client.post("/api/estimate")
        self.assertEqual(resp.status_code, 400)

    def test_csv_upload(self):
        files = {'file': ('inputs.csv', SAMPLE_CSV, 'text/csv')}
        resp = self.client.post("/api/estimate", files=files)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['summary']['standard_deduction'], 15750)
        self.assertEqual(data['summary']['total_tax'], 9049.0)

    def test_csv_upload_wrong_extension(self):
        files = {'file': ('inputs.txt', SAMPLE_CSV, 'text/plain')}
        resp = self.client.post("/api/estimate", files=files)
        self.assertEqual(resp.status_code, 400)

    def test_csv_upload_too_large(self):
        padding = b"filler,0\n" * (MAX_CONTENT_LENGTH // 9 + 1)
        files = {'file': ('inputs.csv', SAMPLE_CSV + padding, 'text/csv')}
        resp = self.client.post("/api/estimate", files=files)
        self.assertEqual(resp.status_code, 413)

    def test_csv_upload_malformed(self):
        files = {'file': ('inputs.csv', b"name,amount\ngross,1\n", 'text/csv')}
        resp = self.client.post("/api/estimate", files=files)
        self.assertEqual(resp.status_code, 400)

    def test_standard_deduction_lookup(self):
        resp = self.client.get("/api/standard-deduction/hoh")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {'filing_status': 'hoh', 'standard_deduction': 23625})

        resp = self.client.get("/api/standard-deduction/widow")
        self.assertEqual(resp.status_code, 404)

    def test_tables(self):
        resp = self.client.get("/api/tables/mfj")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['brackets_fallback'])
        self.assertEqual(data['standard_deduction'], 31500)
        self.assertEqual(data['ltcg_zero_rate_ceiling'], 96700)
        self.assertEqual(len(data['brackets']), 7)
        self.assertIsNone(data['brackets'][-1]['upper'])
        self.assertEqual(data['brackets'][0]['upper'], 11925)

    def test_export_inputs(self):
        resp = self.client.post("/api/export-inputs", json={"gross_wages": 80000, "filing_status": "single"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers['content-type'].startswith('text/csv'))
        lines = resp.text.strip().splitlines()
        self.assertEqual(lines[0], 'parameter,value')
        self.assertIn('gross_wages,80000', lines)
        self.assertIn('filing_status,single', lines)

    def test_export_then_upload(self):
        exported = self.client.post(
            "/api/export-inputs",
            json={"gross_wages": 80000, "withheld": 9000, "filing_status": "single"},
        )
        files = {'file': ('tax_inputs.csv', exported.content, 'text/csv')}
        resp = self.client.post("/api/estimate", files=files)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['summary']['refund_or_due'], -49.0)


if __name__ == '__main__':
    unittest.main()
