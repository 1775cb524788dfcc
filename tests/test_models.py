import unittest
from datetime import date

from pydantic import ValidationError

from stridecoach.models import Exercise, Plan, ProgressRecord, Week, is_valid_name
from stridecoach.preferences import PreferenceModel


class NameValidationTests(unittest.TestCase):
    def test_rejects_noise(self):
        for value in ["", " ", ".", ", ;", " : ", "-", "x", "…"]:
            self.assertFalse(is_valid_name(value), value)

    def test_accepts_real_names(self):
        for value in ["Squats", "Push-ups", "5k"]:
            self.assertTrue(is_valid_name(value), value)

    def test_exercise_name_is_validated(self):
        with self.assertRaises(ValidationError):
            Exercise(id="1-1-1", name=". .")
        self.assertEqual(Exercise(id="1-1-1", name="  Squats ").name, "Squats")


class PlanModelTests(unittest.TestCase):
    def test_plan_requires_four_weeks(self):
        weeks = [Week(week_number=n, focus="Focus") for n in (1, 2, 3)]
        with self.assertRaises(ValidationError):
            Plan(
                id="plan_x",
                user_id="user-1",
                title="Plan",
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 29),
                preferences=PreferenceModel(days=["monday"]),
                weeks=weeks,
            )

    def test_progress_record_defaults(self):
        record = ProgressRecord()
        self.assertFalse(record.completed)
        self.assertEqual(record.difficulty_rating, 3)
        with self.assertRaises(ValidationError):
            ProgressRecord(difficulty_rating=6)


if __name__ == "__main__":
    unittest.main()
