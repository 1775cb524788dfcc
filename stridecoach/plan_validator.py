"""
Validation utilities for parsed workout plans.
"""


def _add_violation(violations, code, message, week=None, day=None):
    violations.append(
        {
            "code": code,
            "message": message,
            "week": week or 0,
            "day": day or "",
        }
    )


def validate_plan(plan):
    """
    Report structural gaps in a parsed plan.

    Never raises; a plan with gaps is still usable, the report only tells the
    caller where the generator ignored the requested format.

    Returns:
        dict with keys: violations, summary
    """
    violations = []
    enabled_days = plan.preferences.day_labels
    checked_days = 0

    for week in plan.weeks:
        scheduled = [day for day in week.days if day.workout is not None]
        if not scheduled:
            _add_violation(
                violations,
                "missing_week_content",
                f"Week {week.week_number} has no workouts for any enabled day.",
                week=week.week_number,
            )
            continue

        for day_name in enabled_days:
            checked_days += 1
            day = next((d for d in week.days if d.day_name == day_name), None)
            if day is None or day.workout is None:
                _add_violation(
                    violations,
                    "missing_day_workout",
                    f"Week {week.week_number}: no workout found for {day_name}.",
                    week=week.week_number,
                    day=day_name,
                )
                continue

            if not day.workout.exercises:
                _add_violation(
                    violations,
                    "empty_exercise_list",
                    f"Week {week.week_number}: {day_name} workout has no parsed exercises.",
                    week=week.week_number,
                    day=day_name,
                )

    summary = (
        f"Validation: {checked_days} workout days checked, {len(violations)} violation(s)."
        if checked_days
        else "Validation: no workouts parsed from plan."
    )

    return {
        "violations": violations,
        "summary": summary,
    }
