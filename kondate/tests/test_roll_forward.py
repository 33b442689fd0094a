import tempfile
import unittest
from pathlib import Path

from kondate.domain.Plan import DaySlots, PlanWindow
from kondate.events.Event_Bus import GLOBAL_EVENT_BUS, PLAN_SHIFTED
from kondate.infra.Archive_Repository import ArchiveRepository
from kondate.infra.Document_Store import DocumentStore
from kondate.infra.Plan_Repository import PlanRepository
from kondate.logic.window.clock import FixedClock
from kondate.logic.window.migrator import migrate
from kondate.logic.window.service import roll_forward


class TestRollForward(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        store = DocumentStore(Path(self._tmp.name))
        self.store = store
        self.plans = PlanRepository(store)
        self.archives = ArchiveRepository(store)
        self.events = []
        GLOBAL_EVENT_BUS.subscribe(PLAN_SHIFTED, self._on_event)

    def tearDown(self):
        GLOBAL_EVENT_BUS.unsubscribe(PLAN_SHIFTED, self._on_event)
        self._tmp.cleanup()

    def _on_event(self, name, payload):
        self.events.append(payload)

    def _seed(self):
        self.plans.write("p1", PlanWindow.from_dict({
            "2024-06-10": {"breakfast": "toast"},
            "2024-06-11": {"lunch": "soup"},
            "2024-06-12": {"dinner": "rice"},
        }))

    def test_archives_and_rewrites_plan(self):
        self._seed()
        result = roll_forward("p1", self.plans, self.archives, FixedClock("2024-06-11"))
        self.assertEqual(result.archived_keys, ["2024-06-10"])
        stored = self.plans.read("p1")
        self.assertEqual(stored.keys(), ["2024-06-11", "2024-06-12", "2024-06-13"])
        self.assertEqual(stored["2024-06-11"], DaySlots(lunch="soup"))
        history = self.archives.list_for_plan("p1")
        self.assertEqual([r.date_key for r in history], ["2024-06-10"])
        self.assertEqual(history[0].slots, DaySlots(breakfast="toast"))
        self.assertEqual(len(self.events), 1)
        self.assertEqual(self.events[0]["archived"], ["2024-06-10"])

    def test_second_run_same_day_is_noop(self):
        self._seed()
        roll_forward("p1", self.plans, self.archives, FixedClock("2024-06-11"))
        stamp = self.plans.last_updated("p1")
        result = roll_forward("p1", self.plans, self.archives, FixedClock("2024-06-11"))
        self.assertFalse(result.changed)
        self.assertEqual(self.plans.last_updated("p1"), stamp)
        self.assertEqual(len(self.archives.list_for_plan("p1")), 1)
        self.assertEqual(len(self.events), 1)

    def test_recovers_after_interrupted_run(self):
        self._seed()
        # Archive written, plan write never happened
        for record in migrate(self.plans.read("p1"), "2024-06-11", plan_id="p1").archived:
            self.archives.append(record)
        result = roll_forward("p1", self.plans, self.archives, FixedClock("2024-06-11"))
        self.assertEqual(result.archived_keys, ["2024-06-10"])
        self.assertEqual(len(self.archives.list_for_plan("p1")), 1)
        self.assertEqual(self.plans.read("p1").keys()[0], "2024-06-11")

    def test_filling_missing_days_publishes_no_shift(self):
        self.plans.write("p1", PlanWindow.from_dict({"2024-06-11": {"lunch": "soup"}}))
        result = roll_forward("p1", self.plans, self.archives, FixedClock("2024-06-11"))
        self.assertTrue(result.changed)
        self.assertFalse(result.shifted)
        self.assertEqual(self.plans.read("p1").keys(), ["2024-06-11", "2024-06-12", "2024-06-13"])
        self.assertEqual(self.events, [])

    def test_missing_plan_is_not_created(self):
        result = roll_forward("fresh", self.plans, self.archives, FixedClock("2024-01-01"))
        self.assertEqual(result.new_plan.keys(), ["2024-01-01", "2024-01-02", "2024-01-03"])
        self.assertIsNone(self.plans.read_document("fresh"))
        self.assertEqual(self.events, [])

    def test_legacy_document_is_rewritten_date_keyed(self):
        self.store.set("mealPlans", "old", {
            "dates": {"day1": "2024-06-11", "day2": "2024-06-12", "day3": "2024-06-13"},
            "day1": {"breakfast": "toast", "lunch": "", "dinner": ""},
            "day2": {"breakfast": "", "lunch": "", "dinner": ""},
            "day3": {"breakfast": "", "lunch": "", "dinner": ""},
        })
        result = roll_forward("old", self.plans, self.archives, FixedClock("2024-06-11"))
        self.assertFalse(result.changed)
        doc = self.plans.read_document("old")
        self.assertNotIn("day1", doc)
        self.assertEqual(doc["2024-06-11"]["breakfast"], "toast")


if __name__ == '__main__':
    unittest.main()
