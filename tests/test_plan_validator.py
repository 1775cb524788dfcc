import unittest
from datetime import date

from stridecoach.plan_validator import validate_plan
from stridecoach.preferences import UserProfile, normalize_preferences
from stridecoach.schedule_parser import parse_plan_response


PROFILE = UserProfile(user_id="user-1")


def _parse(text, days):
    prefs = normalize_preferences({"days": days})
    return parse_plan_response(text, prefs, PROFILE, start_date=date(2024, 1, 1))


class PlanValidatorTests(unittest.TestCase):
    def test_complete_plan_has_no_violations(self):
        text = "".join(f"### Week {n}\n**Monday**\n- Squats x {10 + n}\n" for n in range(1, 5))
        result = validate_plan(_parse(text, ["monday"]))
        self.assertEqual(result["violations"], [])
        self.assertIn("4 workout days checked", result["summary"])

    def test_detects_missing_week_content(self):
        text = "### Week 1\n**Monday**\n- Squats x 15\n"
        result = validate_plan(_parse(text, ["monday"]))
        codes = [(v["code"], v["week"]) for v in result["violations"]]
        self.assertEqual(
            codes,
            [("missing_week_content", 2), ("missing_week_content", 3), ("missing_week_content", 4)],
        )

    def test_detects_missing_day_workout(self):
        text = "".join(f"### Week {n}\n**Monday**\n- Squats x 15\n" for n in range(1, 5))
        result = validate_plan(_parse(text, ["monday", "friday"]))
        missing = [v for v in result["violations"] if v["code"] == "missing_day_workout"]
        self.assertEqual(len(missing), 4)
        self.assertEqual({v["day"] for v in missing}, {"Friday"})

    def test_detects_empty_exercise_list(self):
        text = "### Week 1\n**Monday**\nTake it easy today\n"
        result = validate_plan(_parse(text, ["monday"]))
        codes = {v["code"] for v in result["violations"]}
        self.assertIn("empty_exercise_list", codes)


if __name__ == "__main__":
    unittest.main()
