import unittest

from stridecoach.errors import InvalidPreferences
from stridecoach.preferences import (
    Difficulty,
    Equipment,
    Goal,
    PreferenceModel,
    Weekday,
    WorkoutType,
    normalize_preferences,
)


class NormalizePreferencesTests(unittest.TestCase):
    def test_toggle_map_payload(self):
        raw = {
            "workoutTypes": {"walking": True, "strength": True, "yoga": False},
            "availableDays": {"friday": True, "monday": True, "tuesday": False},
            "hasEquipment": {"none": True, "dumbbells": True},
            "workoutDuration": 45,
            "difficultyLevel": "intermediate",
            "primaryGoal": "weight_loss",
            "preferredTime": "morning",
            "customNotes": "Bad left knee",
        }
        prefs = normalize_preferences(raw)
        self.assertEqual(prefs.workout_types, [WorkoutType.WALK, WorkoutType.STRENGTH])
        self.assertEqual(prefs.days, [Weekday.MONDAY, Weekday.FRIDAY])
        self.assertEqual(prefs.equipment, [Equipment.DUMBBELLS])
        self.assertEqual(prefs.duration_minutes, 45)
        self.assertEqual(prefs.difficulty, Difficulty.INTERMEDIATE)
        self.assertEqual(prefs.goal, Goal.WEIGHT_LOSS)
        self.assertEqual(prefs.preferred_time, "morning")
        self.assertEqual(prefs.notes, "Bad left knee")

    def test_canonical_dict_defaults(self):
        prefs = normalize_preferences({"days": ["wednesday", "monday", "wednesday"]})
        self.assertEqual(prefs.day_labels, ["Monday", "Wednesday"])
        self.assertEqual(prefs.duration_minutes, 30)
        self.assertEqual(prefs.difficulty, Difficulty.BEGINNER)
        self.assertEqual(prefs.goal, Goal.GENERAL_FITNESS)
        self.assertEqual(prefs.equipment, [])

    def test_canonical_values_are_case_insensitive(self):
        prefs = normalize_preferences(
            {
                "days": ["Monday", "FRIDAY"],
                "workout_types": ["Walk"],
                "equipment": ["Dumbbells"],
                "difficulty": "Advanced",
                "goal": "Weight_Loss",
            }
        )
        self.assertEqual(prefs.days, [Weekday.MONDAY, Weekday.FRIDAY])
        self.assertEqual(prefs.workout_types, [WorkoutType.WALK])
        self.assertEqual(prefs.equipment, [Equipment.DUMBBELLS])
        self.assertEqual(prefs.difficulty, Difficulty.ADVANCED)
        self.assertEqual(prefs.goal, Goal.WEIGHT_LOSS)

    def test_model_passes_through(self):
        prefs = PreferenceModel(days=["sunday"])
        self.assertIs(normalize_preferences(prefs), prefs)

    def test_no_enabled_days_rejected(self):
        with self.assertRaises(InvalidPreferences):
            normalize_preferences({"availableDays": {"monday": False}})
        with self.assertRaises(InvalidPreferences):
            normalize_preferences({"days": []})

    def test_non_positive_duration_rejected(self):
        with self.assertRaises(InvalidPreferences):
            normalize_preferences({"days": ["monday"], "duration_minutes": 0})

    def test_unknown_enum_value_rejected(self):
        with self.assertRaises(InvalidPreferences):
            normalize_preferences({"days": ["funday"]})

    def test_unsupported_payload_rejected(self):
        with self.assertRaises(InvalidPreferences):
            normalize_preferences(["monday"])

    def test_invalid_preferences_is_value_error(self):
        with self.assertRaises(ValueError):
            normalize_preferences({"days": []})


class PreferenceModelTests(unittest.TestCase):
    def test_weekday_numbers(self):
        self.assertEqual(Weekday.MONDAY.number, 1)
        self.assertEqual(Weekday.SUNDAY.number, 7)
        self.assertEqual(Weekday.THURSDAY.label, "Thursday")

    def test_endurance_focus(self):
        self.assertTrue(PreferenceModel(days=["monday"], workout_types=["run"]).is_endurance_focused)
        self.assertFalse(PreferenceModel(days=["monday"], workout_types=["yoga"]).is_endurance_focused)


if __name__ == "__main__":
    unittest.main()
