import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from kondate.api import context
from kondate.api.api_run import app
from kondate.infra import paths
from kondate.logic.window.clock import FixedClock


class TestPages(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        patchers = [
            patch.object(paths, "DATA_DIR", Path(self._tmp.name)),
            patch.object(context, "clock", FixedClock("2024-06-11")),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)
        self.client = TestClient(app)

    def _save_form(self, plan_id="p1"):
        return self.client.post("/save", data={
            "plan_id": plan_id,
            "day": ["2024-06-10", "2024-06-11", "2024-06-12"],
            "breakfast-2024-06-10": "toast",
            "lunch-2024-06-11": "soup",
            "dinner-2024-06-12": "rice",
        })

    def test_main_page_without_id_redirects_to_generated_id(self):
        resp = self.client.get("/", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertTrue(resp.headers["location"].startswith("/?id="))
        plan_id = resp.headers["location"].split("id=")[1]
        self.assertEqual(resp.cookies.get("currentMealPlanId"), plan_id)

    def test_cookie_id_is_reused(self):
        self.client.cookies.set("currentMealPlanId", "abc123")
        resp = self.client.get("/", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/?id=abc123")

    def test_new_plan_shows_three_days_from_today(self):
        resp = self.client.get("/?id=fresh")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("No saved plan was found", resp.text)
        for label in ("6/11 (Tue)", "6/12 (Wed)", "6/13 (Thu)"):
            self.assertIn(label, resp.text)

    def test_save_form_then_history(self):
        resp = self._save_form()
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Meal plan saved.", resp.text)
        self.assertIn('value="soup"', resp.text)
        self.assertNotIn("6/10 (Mon)", resp.text)

        history = self.client.get("/history?id=p1")
        self.assertEqual(history.status_code, 200)
        self.assertIn("6/10 (Mon)", history.text)
        self.assertIn("toast", history.text)

    def test_save_rejects_bad_plan_id(self):
        resp = self.client.post("/save", data={"plan_id": "../etc"})
        self.assertEqual(resp.status_code, 400)

    def test_clear_form(self):
        self._save_form()
        resp = self.client.post("/clear", data={"plan_id": "p1"})
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn('value="soup"', resp.text)

    def test_new_plan_form_switches_id(self):
        self.client.cookies.set("currentMealPlanId", "p1")
        resp = self.client.post("/new", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertNotEqual(resp.cookies.get("currentMealPlanId"), "p1")

    def test_meal_form_feeds_suggestions(self):
        resp = self.client.post("/meals/save", data={
            "plan_id": "p1", "name": "Curry", "categories": ["dinner"], "memo": "",
        })
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Curry", resp.text)

        page = self.client.get("/?id=p1")
        self.assertIn('<option value="Curry">', page.text)

    def test_meal_form_without_category_is_not_saved(self):
        self.client.post("/meals/save", data={"plan_id": "p1", "name": "Curry"})
        listing = self.client.get("/api/meals", params={"user_id": "p1"}).json()
        self.assertEqual(listing["count"], 0)

    def test_meal_edit_and_delete_forms(self):
        meal_id = self.client.post("/api/meals", json={
            "name": "Soup", "categories": ["lunch"], "user_id": "p1",
        }).json()["id"]
        edit = self.client.get(f"/meals?id=p1&edit={meal_id}")
        self.assertIn("Edit meal", edit.text)

        self.client.post("/meals/save", data={
            "plan_id": "p1", "meal_id": meal_id, "name": "Miso soup", "categories": ["breakfast"],
        })
        self.assertEqual(self.client.get(f"/api/meals/{meal_id}").json()["name"], "Miso soup")

        resp = self.client.post(f"/meals/{meal_id}/delete", data={"plan_id": "p1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f"/api/meals/{meal_id}").status_code, 404)


if __name__ == '__main__':
    unittest.main()
