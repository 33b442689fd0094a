import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from kondate.api.api_run import app
from kondate.infra import paths


class TestMealsAPI(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        p = patch.object(paths, "DATA_DIR", Path(self._tmp.name))
        p.start()
        self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)
        self.client = TestClient(app)

    def _add(self, name, categories, user_id="u1"):
        return self.client.post("/api/meals", json={"name": name, "categories": categories, "user_id": user_id})

    def test_add_list_and_suggestions(self):
        resp = self._add("  Curry ", ["dinner", "lunch"])
        self.assertEqual(resp.status_code, 201, resp.text)
        meal = resp.json()
        self.assertEqual(meal["name"], "Curry")
        self.assertEqual(meal["categories"], ["lunch", "dinner"])
        self._add("Toast", ["breakfast"])
        self._add("Other user", ["breakfast"], user_id="u2")

        listing = self.client.get("/api/meals", params={"user_id": "u1"}).json()
        self.assertEqual(listing["count"], 2)
        suggestions = self.client.get("/api/meals/suggestions", params={"user_id": "u1"}).json()
        self.assertEqual(suggestions["breakfast"], ["Toast"])
        self.assertEqual(suggestions["dinner"], ["Curry"])

    def test_validation(self):
        self.assertEqual(self._add("", ["lunch"]).status_code, 422)
        self.assertEqual(self._add("Soup", []).status_code, 422)
        self.assertEqual(self._add("Soup", ["snack"]).status_code, 422)

    def test_update_and_delete(self):
        meal_id = self._add("Soup", ["lunch"]).json()["id"]
        resp = self.client.put(f"/api/meals/{meal_id}",
                               json={"name": "Miso soup", "categories": ["breakfast"], "memo": "tofu", "user_id": "u1"})
        self.assertEqual(resp.status_code, 200)
        fetched = self.client.get(f"/api/meals/{meal_id}").json()
        self.assertEqual(fetched["name"], "Miso soup")
        self.assertEqual(fetched["memo"], "tofu")

        self.assertEqual(self.client.delete(f"/api/meals/{meal_id}").json(), {"success": True})
        self.assertEqual(self.client.get(f"/api/meals/{meal_id}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/meals/{meal_id}").status_code, 404)

    def test_update_missing_meal(self):
        resp = self.client.put("/api/meals/missing",
                               json={"name": "Soup", "categories": ["lunch"], "user_id": "u1"})
        self.assertEqual(resp.status_code, 404)


if __name__ == '__main__':
    unittest.main()
