"""
User preferences and profile normalization.

Preferences arrive either in canonical form (lists of enum values) or in the
toggle-map form produced by the preferences screen, e.g.::

    {"availableDays": {"monday": True, "tuesday": False}, "workoutDuration": 30}

Both normalize to a PreferenceModel. Anything that cannot drive a plan (no
training days, non-positive duration) is rejected with InvalidPreferences.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from stridecoach.errors import InvalidPreferences


class WorkoutType(str, Enum):
    WALK = "walk"
    RUN = "run"
    STRENGTH = "strength"
    YOGA = "yoga"
    CYCLE = "cycle"
    SWIM = "swim"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self):
        return self.value.capitalize()

    @property
    def number(self):
        """ISO day number, 1 = Monday."""
        return list(Weekday).index(self) + 1


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Goal(str, Enum):
    GENERAL_FITNESS = "general_fitness"
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"
    ENDURANCE = "endurance"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"


class Equipment(str, Enum):
    DUMBBELLS = "dumbbells"
    RESISTANCE_BANDS = "resistance_bands"
    YOGA_MAT = "yoga_mat"
    TREADMILL = "treadmill"
    BIKE = "bike"


ENDURANCE_TYPES = {WorkoutType.WALK, WorkoutType.RUN, WorkoutType.CYCLE, WorkoutType.SWIM}

# Toggle-map keys used by the preferences screen.
WORKOUT_TYPE_ALIASES = {
    "walking": "walk",
    "running": "run",
    "strength": "strength",
    "strength_training": "strength",
    "yoga": "yoga",
    "cycling": "cycle",
    "swimming": "swim",
}


def _canonical_order(values, enum_cls):
    """Deduplicate enum values and sort them in declaration order."""
    members = list(enum_cls)
    unique = {enum_cls(value) for value in values}
    return sorted(unique, key=members.index)


def _enabled_keys(toggles):
    if isinstance(toggles, dict):
        return [key for key, selected in toggles.items() if selected]
    return list(toggles or [])


class PreferenceModel(BaseModel):
    """Canonical preference record consumed by prompt building and parsing."""

    workout_types: List[WorkoutType] = Field(default_factory=list)
    days: List[Weekday] = Field(..., description="Enabled training days, Monday first")
    duration_minutes: int = Field(30, description="Target session length")
    difficulty: Difficulty = Difficulty.BEGINNER
    goal: Goal = Goal.GENERAL_FITNESS
    equipment: List[Equipment] = Field(default_factory=list, description="Empty means bodyweight only")
    preferred_time: Optional[str] = None
    notes: str = ""

    @field_validator("workout_types")
    @classmethod
    def _order_types(cls, value):
        return _canonical_order(value, WorkoutType)

    @field_validator("equipment")
    @classmethod
    def _order_equipment(cls, value):
        return _canonical_order(value, Equipment)

    @field_validator("days")
    @classmethod
    def _order_days(cls, value):
        ordered = _canonical_order(value, Weekday)
        if not ordered:
            raise ValueError("At least one training day must be enabled")
        return ordered

    @field_validator("duration_minutes")
    @classmethod
    def _positive_duration(cls, value):
        if value <= 0:
            raise ValueError("Workout duration must be a positive number of minutes")
        return value

    @property
    def day_labels(self):
        return [day.label for day in self.days]

    @property
    def is_endurance_focused(self):
        return bool(set(self.workout_types) & {WorkoutType.WALK, WorkoutType.RUN})


class UserProfile(BaseModel):
    """Subset of the user profile used for prompting and plan metadata."""

    user_id: str
    display_name: str = "User"
    age: Optional[int] = Field(None, ge=0)
    height_cm: Optional[float] = Field(None, ge=0)
    weight_kg: Optional[float] = Field(None, ge=0)
    goal_weight_kg: Optional[float] = Field(None, ge=0)
    fitness_level: Optional[str] = None


def _from_toggle_map(raw):
    """Translate the preferences-screen payload into canonical field names."""
    workout_types = []
    for key in _enabled_keys(raw.get("workoutTypes")):
        mapped = WORKOUT_TYPE_ALIASES.get(str(key).lower())
        if mapped:
            workout_types.append(mapped)

    equipment = [
        str(key).lower()
        for key in _enabled_keys(raw.get("hasEquipment"))
        if str(key).lower() != "none"
    ]

    data = {
        "workout_types": workout_types,
        "days": [str(day).lower() for day in _enabled_keys(raw.get("availableDays"))],
        "equipment": equipment,
        "preferred_time": raw.get("preferredTime"),
        "notes": raw.get("customNotes") or "",
    }
    if raw.get("workoutDuration") is not None:
        data["duration_minutes"] = raw["workoutDuration"]
    if raw.get("difficultyLevel"):
        data["difficulty"] = str(raw["difficultyLevel"]).lower()
    if raw.get("primaryGoal"):
        data["goal"] = str(raw["primaryGoal"]).lower()
    return data


LIST_ENUM_FIELDS = ("days", "workout_types", "equipment")
SCALAR_ENUM_FIELDS = ("difficulty", "goal")


def _lower(value):
    return value.lower() if isinstance(value, str) else value


def _lowercase_enum_fields(data):
    """Accept "Monday" or "Beginner" wherever the enum value is lowercase."""
    for key in LIST_ENUM_FIELDS:
        if isinstance(data.get(key), (list, tuple, set)):
            data[key] = [_lower(value) for value in data[key]]
    for key in SCALAR_ENUM_FIELDS:
        if key in data:
            data[key] = _lower(data[key])
    return data


def normalize_preferences(raw):
    """
    Build a PreferenceModel from a model or a raw dict.

    Args:
        raw: PreferenceModel, canonical dict, or preferences-screen toggle map

    Returns:
        PreferenceModel

    Raises:
        InvalidPreferences: when no training day is enabled, the duration is
            not positive, or a value is outside its enum.
    """
    if isinstance(raw, PreferenceModel):
        return raw
    if not isinstance(raw, dict):
        raise InvalidPreferences(f"Unsupported preferences payload: {type(raw).__name__}")

    data = _from_toggle_map(raw) if "availableDays" in raw else dict(raw)
    data = _lowercase_enum_fields(data)
    try:
        return PreferenceModel(**data)
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise InvalidPreferences(f"Invalid preferences: {messages}") from exc
