"""
Progress metrics derived from a plan and its per-day completion records.
"""

import math
from datetime import date, datetime, timedelta

from stridecoach.models import (
    PLAN_DAYS,
    PLAN_WEEKS,
    CompletionStats,
    DerivedProgress,
    NextWorkout,
    ProgressRecord,
)


def _as_date(value):
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def _percentage(completed, total):
    # Half rounds up: 1 of 8 is 13%.
    return math.floor(100 * completed / total + 0.5) if total > 0 else 0


def format_relative_day(day, today):
    """Label a past date relative to today."""
    offset = (today - day).days
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Yesterday"
    if 1 < offset < 7:
        return f"{offset} days ago"
    return day.strftime("%b %d, %Y")


class ProgressEngine:
    """Compute completion, streak and next-workout metrics for one plan.

    Records are keyed by (week_number, day_number) with day_number 1 = Monday.
    A calendar date maps to week ``(date - start) // 7 + 1`` and its ISO
    weekday. Only days with a scheduled workout count; every other date is
    neutral.
    """

    def __init__(self, plan, records=None):
        """
        Args:
            plan: Plan to analyze
            records: Mapping (week_number, day_number) -> ProgressRecord or dict
        """
        self.plan = plan
        self.records = {}
        for key, record in (records or {}).items():
            if not isinstance(record, ProgressRecord):
                record = ProgressRecord.model_validate(record)
            self.records[(int(key[0]), int(key[1]))] = record

    def _is_completed(self, week_number, day_number):
        record = self.records.get((week_number, day_number))
        return bool(record and record.completed)

    def _workout_days(self, week):
        return [day for day in week.days if day.workout is not None]

    def _slot_for_date(self, day):
        """Return (week, Day) scheduled on a calendar date, or None."""
        offset = (day - self.plan.start_date).days
        if offset < 0 or offset >= PLAN_DAYS:
            return None
        week = self.plan.get_week(offset // 7 + 1)
        if week is None:
            return None
        scheduled = week.get_day(day.isoweekday())
        if scheduled is None or scheduled.workout is None:
            return None
        return week, scheduled

    def _walk_back(self, now):
        """Yield (date, week, Day) for workout days from now back to the plan start."""
        today = _as_date(now)
        last_day = self.plan.start_date + timedelta(days=PLAN_DAYS - 1)
        current = min(today, last_day)
        while current >= self.plan.start_date:
            slot = self._slot_for_date(current)
            if slot is not None:
                yield current, slot[0], slot[1]
            current -= timedelta(days=1)

    def completion_stats(self):
        completed = 0
        total = 0
        for week in self.plan.weeks:
            for day in self._workout_days(week):
                total += 1
                if self._is_completed(week.week_number, day.day_number):
                    completed += 1
        return CompletionStats(
            completed=completed,
            total=total,
            percentage=_percentage(completed, total),
        )

    def week_progress(self, week_number):
        if week_number < 1 or week_number > PLAN_WEEKS:
            return CompletionStats()
        week = self.plan.get_week(week_number)
        if week is None:
            return CompletionStats()

        workout_days = self._workout_days(week)
        completed = sum(
            1 for day in workout_days if self._is_completed(week_number, day.day_number)
        )
        return CompletionStats(
            completed=completed,
            total=len(workout_days),
            percentage=_percentage(completed, len(workout_days)),
        )

    def is_plan_completed(self):
        stats = self.completion_stats()
        return stats.total > 0 and stats.completed == stats.total

    def current_week_number(self, now=None):
        offset = (_as_date(now) - self.plan.start_date).days
        return min(max(offset // 7 + 1, 1), PLAN_WEEKS)

    def streak(self, now=None):
        """Consecutive completed workout days walking back from now."""
        count = 0
        for _, week, day in self._walk_back(now):
            if not self._is_completed(week.week_number, day.day_number):
                break
            count += 1
        return count

    def last_workout_date(self, now=None):
        """Relative label of the most recent completed workout day, or None."""
        today = _as_date(now)
        for current, week, day in self._walk_back(today):
            if self._is_completed(week.week_number, day.day_number):
                return format_relative_day(current, today)
        return None

    def _next_workout_from(self, now, include_completed):
        today = _as_date(now)
        current = max(today, self.plan.start_date)
        last_day = self.plan.start_date + timedelta(days=PLAN_DAYS - 1)
        while current <= last_day:
            slot = self._slot_for_date(current)
            if slot is not None:
                week, day = slot
                if include_completed or not self._is_completed(week.week_number, day.day_number):
                    return NextWorkout(
                        week_number=week.week_number,
                        day_number=day.day_number,
                        day_name=day.day_name,
                        week_focus=week.focus,
                        scheduled_date=current,
                        workout=day.workout,
                    )
            current += timedelta(days=1)
        return None

    def next_workout(self, now=None):
        """First scheduled workout from now on that is not completed yet."""
        return self._next_workout_from(now, include_completed=False)

    def todays_workout(self, now=None):
        """The workout scheduled on now's date, completed or not."""
        today = _as_date(now)
        upcoming = self._next_workout_from(today, include_completed=True)
        if upcoming is None or upcoming.scheduled_date != today:
            return None
        return upcoming

    def derived(self, now=None):
        stats = self.completion_stats()
        return DerivedProgress(
            completed=stats.completed,
            total=stats.total,
            percentage=stats.percentage,
            streak=self.streak(now),
            current_week=self.current_week_number(now),
            last_workout=self.last_workout_date(now),
            next_workout=self.next_workout(now),
        )
