import unittest
from datetime import date, datetime

from kondate.domain.ArchiveRecord import ArchiveRecord, archive_id
from kondate.domain.Plan import DaySlots, PlanWindow, add_days, is_date_key, to_date_key


class TestDateKey(unittest.TestCase):
    def test_normalizes_inputs(self):
        self.assertEqual(to_date_key(date(2024, 1, 5)), "2024-01-05")
        self.assertEqual(to_date_key(datetime(2024, 1, 5, 18, 30)), "2024-01-05")
        self.assertEqual(to_date_key(" 2024-01-05 "), "2024-01-05")
        self.assertEqual(to_date_key("2024-01-05T22:10:00Z"), "2024-01-05")
        self.assertEqual(to_date_key("2024-01-05 22:10"), "2024-01-05")

    def test_rejects_non_dates(self):
        for value in ("2024-13-01", "", "lastUpdated", None, 20240105,
                      "2024-06-11garbage", "2024-06-11Tea", "2024-6-1"):
            self.assertFalse(is_date_key(value), value)

    def test_add_days(self):
        self.assertEqual(add_days("2024-12-31", 1), "2025-01-01")


class TestDaySlots(unittest.TestCase):
    def test_from_dict_ignores_unknown_and_none(self):
        slots = DaySlots.from_dict({"breakfast": "toast", "lunch": None, "snack": "cake"})
        self.assertEqual(slots.to_dict(), {"breakfast": "toast", "lunch": "", "dinner": ""})

    def test_equality_and_empty(self):
        self.assertEqual(DaySlots(lunch="soup"), DaySlots.from_dict({"lunch": "soup"}))
        self.assertTrue(DaySlots().is_empty())
        self.assertTrue(DaySlots(breakfast="  ").is_empty())


class TestPlanWindow(unittest.TestCase):
    def test_from_dict_sorts_and_skips_non_dates(self):
        window = PlanWindow.from_dict({"2024-06-12": {}, "2024-06-11": {"lunch": "soup"}, "lastUpdated": "x"})
        self.assertEqual(window.keys(), ["2024-06-11", "2024-06-12"])
        self.assertIn(date(2024, 6, 11), window)
        self.assertNotIn("lastUpdated", window)

    def test_from_dict_does_not_fold_suffixed_keys_onto_days(self):
        window = PlanWindow.from_dict({"2024-06-11": {"lunch": "soup"}, "2024-06-11garbage": {"lunch": "cake"}})
        self.assertEqual(window.keys(), ["2024-06-11"])
        self.assertEqual(window["2024-06-11"].lunch, "soup")

    def test_to_dict_round_trip_shape(self):
        window = PlanWindow([("2024-06-11", DaySlots(dinner="rice"))])
        self.assertEqual(window.to_dict(), {"2024-06-11": {"breakfast": "", "lunch": "", "dinner": "rice"}})


class TestArchiveRecord(unittest.TestCase):
    def test_identifier_and_immutability(self):
        record = ArchiveRecord("2024-06-10", DaySlots(breakfast="toast"), plan_id="p1")
        self.assertEqual(record.id, archive_id("p1", "2024-06-10"))
        self.assertEqual(record.id, "archive-p1-2024-06-10")
        with self.assertRaises(AttributeError):
            record.plan_id = "other"

    def test_document_shape(self):
        record = ArchiveRecord("2024-06-10", DaySlots(breakfast="toast"), plan_id="p1")
        doc = record.to_dict()
        self.assertEqual(doc["planId"], "p1")
        self.assertEqual(doc["date"], "2024-06-10")
        self.assertEqual(doc["meals"]["breakfast"], "toast")
        self.assertEqual(ArchiveRecord.from_dict(doc), record)

    def test_without_plan_id_has_no_identifier(self):
        self.assertIsNone(ArchiveRecord("2024-06-10", DaySlots()).id)


if __name__ == '__main__':
    unittest.main()
