"""
Caller-facing plan operations: generate, read progress, record completions.
"""

import os
from datetime import date, datetime

from stridecoach.models import ProgressRecord
from stridecoach.motivation import DailyMotivation
from stridecoach.plan_validator import validate_plan
from stridecoach.preferences import normalize_preferences
from stridecoach.progress_engine import ProgressEngine
from stridecoach.prompt_builder import SYSTEM_PROMPT, build_plan_prompt
from stridecoach.schedule_parser import parse_plan_response


def _as_date(value):
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


class PlanService:
    """Orchestrates preferences -> prompt -> generator -> parser -> store."""

    def __init__(self, generator, store, motivation_max_tokens=None):
        """
        Args:
            generator: object with ``async generate(prompt, system=None, max_tokens=None)``
            store: PlanStore
            motivation_max_tokens: token cap for daily feedback requests
        """
        self.generator = generator
        self.store = store
        self.motivation = DailyMotivation(generator, store, max_tokens=motivation_max_tokens)
        self.last_response = None
        self.last_validation = None

    async def request_new_plan(self, profile, preferences, today=None):
        """
        Generate, parse and persist a new 4-week plan.

        Args:
            profile: UserProfile
            preferences: PreferenceModel or raw preferences dict
            today: plan start date (defaults to today)

        Returns:
            The persisted Plan

        Raises:
            InvalidPreferences: before any generator call
            GenerationFailure: the generator failed; nothing is persisted
            ParseFailure: the response had no usable week markers; nothing is persisted
        """
        preferences = normalize_preferences(preferences)
        prompt = build_plan_prompt(profile, preferences)

        print("\n🤖 Generating your personalized workout plan with Claude AI...")
        text = await self.generator.generate(prompt, system=SYSTEM_PROMPT)
        self.last_response = text

        plan = parse_plan_response(text, preferences, profile, start_date=_as_date(today))

        self.last_validation = validate_plan(plan)
        print(self.last_validation["summary"])
        for violation in self.last_validation["violations"]:
            print(f"  ⚠ {violation['message']}")

        plan = self.store.save_plan(plan)
        print(f"✓ Plan saved: {plan.title} ({plan.start_date} → {plan.end_date})")
        return plan

    def get_current_plan(self, user_id):
        """Return the user's active plan, or None."""
        return self.store.get_active_plan(user_id)

    def get_derived_progress(self, plan, records=None, now=None):
        """Recompute progress metrics; nothing is cached or stored."""
        if records is None:
            records = self.store.get_progress_records(plan.id)
        return ProgressEngine(plan, records).derived(now)

    def complete_workout(self, plan_id, week_number, day_number, duration=0, notes="",
                         difficulty=3, exercises=None, now=None):
        """
        Mark one scheduled day as completed.

        Returns:
            The plan, with status "completed" once every workout day is done.

        Raises:
            PlanNotFound: unknown plan id
            ValueError: no scheduled day in that slot
        """
        if now is None:
            now = datetime.now()
        record = ProgressRecord(
            completed=True,
            completed_at=now,
            duration_minutes=duration,
            notes=notes,
            difficulty_rating=difficulty,
            exercises_completed=list(exercises or []),
        )
        plan = self.store.update_day_progress(plan_id, week_number, day_number, record)
        records = self.store.get_progress_records(plan_id)
        if plan.status == "active" and ProgressEngine(plan, records).is_plan_completed():
            self.store.set_plan_status(plan_id, "completed")
            plan = plan.model_copy(update={"status": "completed"})
            print("✓ Plan completed! Every scheduled workout is done.")
        return plan

    async def get_daily_motivation(self, profile, now=None):
        """Return today's feedback message for the user's active plan, or None."""
        plan = self.get_current_plan(profile.user_id)
        if plan is None:
            return None
        derived = self.get_derived_progress(plan, now=now)
        return await self.motivation.get(profile, derived, today=_as_date(now))


def save_response(text, output_folder):
    """
    Save the raw generator response to a timestamped markdown file.

    Returns:
        Path of the written file, or None when there is nothing to save
    """
    if not text:
        print("No plan to save.")
        return None

    os.makedirs(output_folder, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = os.path.join(output_folder, f"workout_plan_{timestamp}.md")
    with open(filepath, 'w') as f:
        f.write(text)
    print(f"✓ Plan saved to: {filepath}")
    return filepath
