"""Workout plan data models."""

import string
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from stridecoach.preferences import PreferenceModel


PLAN_WEEKS = 4
PLAN_DAYS = PLAN_WEEKS * 7

# Characters that never make up a meaningful name on their own.
NOISE_CHARS = set(string.punctuation) | set("–—•·…‘’“”")


def is_valid_name(value):
    """Return True when a candidate name carries real text.

    Rejects empty strings, single stray characters and strings made only of
    punctuation or whitespace (".", ", ;", " : " ...).
    """
    stripped = (value or "").strip()
    if len(stripped) < 2:
        return False
    return not all(ch in NOISE_CHARS or ch.isspace() for ch in stripped)


class Exercise(BaseModel):
    """Single exercise parsed from a day block."""

    id: str = Field(..., description="Stable id, '<week>-<day>-<index>'")
    name: str = Field(..., description="Exercise name as written by the generator")
    sets: Optional[int] = Field(None, ge=1)
    reps: Optional[int] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_has_text(cls, value):
        if not is_valid_name(value):
            raise ValueError(f"Exercise name has no usable text: {value!r}")
        return value.strip()


class Workout(BaseModel):
    """Workout scheduled on one day."""

    type: str = Field(..., description="Walking, Running, Strength, Cardio, Yoga, Cycling, Swimming or Mixed")
    duration_minutes: int = Field(..., ge=1)
    difficulty: str = Field(..., description="Beginner, Intermediate or Advanced")
    notes: str = Field(default="", description="First line of the source block")
    exercises: List[Exercise] = Field(default_factory=list)


class Day(BaseModel):
    """One enabled weekday within a week."""

    day_number: int = Field(..., ge=1, le=7, description="1 = Monday ... 7 = Sunday")
    day_name: str
    is_workout_day: bool = True
    workout: Optional[Workout] = None


class Week(BaseModel):
    """One week of the plan."""

    week_number: int = Field(..., ge=1, le=PLAN_WEEKS)
    focus: str
    days: List[Day] = Field(default_factory=list)

    def get_day(self, day_number):
        for day in self.days:
            if day.day_number == day_number:
                return day
        return None


class Plan(BaseModel):
    """Complete 4-week plan for a user."""

    id: str = Field(..., description="Plan id")
    user_id: str
    title: str
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    start_date: date
    end_date: date
    status: str = Field(default="active", pattern="^(active|completed)$")
    preferences: PreferenceModel
    weeks: List[Week]

    @field_validator("weeks")
    @classmethod
    def _four_weeks(cls, value):
        if len(value) != PLAN_WEEKS:
            raise ValueError(f"A plan has exactly {PLAN_WEEKS} weeks, got {len(value)}")
        return value

    def get_week(self, week_number):
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        return None

    def get_day(self, week_number, day_number):
        week = self.get_week(week_number)
        if week is None:
            return None
        return week.get_day(day_number)


class ProgressRecord(BaseModel):
    """Completion record for one scheduled day."""

    completed: bool = False
    completed_at: Optional[datetime] = None
    duration_minutes: int = Field(0, ge=0)
    notes: str = ""
    difficulty_rating: int = Field(3, ge=1, le=5)
    exercises_completed: List[str] = Field(default_factory=list)


class NextWorkout(BaseModel):
    """Lookup result for the next pending workout."""

    week_number: int
    day_number: int
    day_name: str
    week_focus: str
    scheduled_date: date
    workout: Workout


class CompletionStats(BaseModel):
    completed: int = 0
    total: int = 0
    percentage: int = 0


class DerivedProgress(BaseModel):
    """Progress metrics recomputed on every read; never persisted."""

    completed: int = 0
    total: int = 0
    percentage: int = 0
    streak: int = 0
    current_week: int = 1
    last_workout: Optional[str] = None
    next_workout: Optional[NextWorkout] = None
