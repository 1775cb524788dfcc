import os
import tempfile
import unittest
from datetime import date

from stridecoach.errors import PlanNotFound
from stridecoach.models import ProgressRecord
from stridecoach.plan_store import PlanStore
from stridecoach.preferences import UserProfile, normalize_preferences
from stridecoach.schedule_parser import parse_plan_response


TEXT = "### Week 1\n**Monday**\n- Squats x 15\n**Wednesday**\n- Brisk Walk: 20 min\n"


def _plan(plan_id, user_id="user-1"):
    prefs = normalize_preferences({"days": ["monday", "wednesday"]})
    profile = UserProfile(user_id=user_id)
    return parse_plan_response(TEXT, prefs, profile, start_date=date(2024, 1, 1), plan_id=plan_id)


class PlanStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = PlanStore(os.path.join(self.tmp.name, "nested", "plans.db"))
        self.store.init_schema()

    def tearDown(self):
        self.store.close()
        self.tmp.cleanup()

    def test_plan_round_trip(self):
        plan = _plan("plan_a")
        self.store.save_plan(plan)
        loaded = self.store.get_plan("plan_a")
        self.assertEqual(loaded.model_dump(), plan.model_dump())
        self.assertEqual(self.store.get_active_plan("user-1").id, "plan_a")

    def test_new_plan_supersedes_active_plan(self):
        self.store.save_plan(_plan("plan_a"))
        self.store.save_plan(_plan("plan_b"))
        self.assertEqual(self.store.get_active_plan("user-1").id, "plan_b")
        self.assertEqual(self.store.get_plan("plan_a").status, "completed")

    def test_active_plan_is_per_user(self):
        self.store.save_plan(_plan("plan_a", user_id="user-1"))
        self.store.save_plan(_plan("plan_b", user_id="user-2"))
        self.assertEqual(self.store.get_active_plan("user-1").id, "plan_a")
        self.assertIsNone(self.store.get_active_plan("user-3"))

    def test_unknown_plan_raises(self):
        with self.assertRaises(PlanNotFound):
            self.store.get_plan("missing")
        with self.assertRaises(PlanNotFound):
            self.store.update_day_progress("missing", 1, 1, ProgressRecord(completed=True))
        with self.assertRaises(PlanNotFound):
            self.store.set_plan_status("missing", "completed")

    def test_progress_upsert(self):
        self.store.save_plan(_plan("plan_a"))
        self.store.update_day_progress("plan_a", 1, 1, {"completed": True, "notes": "first"})
        self.store.update_day_progress("plan_a", 1, 1, ProgressRecord(completed=True, notes="second"))
        self.store.update_day_progress("plan_a", 2, 3, ProgressRecord(completed=False))

        records = self.store.get_progress_records("plan_a")
        self.assertEqual(sorted(records), [(1, 1), (2, 3)])
        self.assertEqual(records[(1, 1)].notes, "second")
        self.assertFalse(records[(2, 3)].completed)
        self.assertEqual(self.store.count_summary()["day_progress"], 2)

    def test_progress_update_returns_plan(self):
        self.store.save_plan(_plan("plan_a"))
        plan = self.store.update_day_progress("plan_a", 1, 3, ProgressRecord(completed=True))
        self.assertEqual(plan.id, "plan_a")
        self.assertEqual(plan.get_day(1, 3).day_name, "Wednesday")

    def test_progress_for_unscheduled_slot_rejected(self):
        self.store.save_plan(_plan("plan_a"))
        with self.assertRaises(ValueError):
            self.store.update_day_progress("plan_a", 1, 2, ProgressRecord(completed=True))
        self.assertEqual(self.store.get_progress_records("plan_a"), {})

    def test_set_plan_status(self):
        self.store.save_plan(_plan("plan_a"))
        self.store.set_plan_status("plan_a", "completed")
        self.assertIsNone(self.store.get_active_plan("user-1"))
        with self.assertRaises(ValueError):
            self.store.set_plan_status("plan_a", "archived")

    def test_motivation_marker(self):
        self.assertIsNone(self.store.get_motivation("user-1"))
        self.store.save_motivation("user-1", "Keep going", date(2024, 1, 5))
        self.store.save_motivation("user-1", "Push harder", date(2024, 1, 6))
        self.assertEqual(self.store.get_motivation("user-1"), ("Push harder", date(2024, 1, 6)))


if __name__ == "__main__":
    unittest.main()
