"""
Parse a generated 4-week workout description into a Plan.

Expected shape of the generator output (requested by the plan prompt):

    ### Week 1: Foundation
    **Monday**
    - Squats x 15
    - Plank: 45 sec
    **Wednesday**
    - Brisk Walk: 20 min

Weeks are located by "### Week <n>" markers, falling back to a looser
case-insensitive "Week <n>". When neither is present the parse fails; the
parser never invents exercises. Missing days and days without recognizable
exercises are tolerated and show up as empty slots in the Plan.
"""

import math
import re
import uuid
from datetime import date, datetime, timedelta

from stridecoach.errors import ParseFailure
from stridecoach.models import PLAN_DAYS, PLAN_WEEKS, Day, Exercise, Plan, Week, Workout, is_valid_name
from stridecoach.preferences import Weekday


WEEKDAY_PATTERN = "|".join(day.label for day in Weekday)

WEEK_RE = re.compile(r"###[ \t]*Week[ \t]+(\d+)([^\n]*)")
LOOSE_WEEK_RE = re.compile(r"\bWeek[ \t]*(\d+)([^\n]*)", re.IGNORECASE)

DAY_MARKER_RE = re.compile(
    r"\*\*[ \t]*(" + WEEKDAY_PATTERN + r")\b([^*\n]*)\*\*",
    re.IGNORECASE,
)
DAY_HEADING_RE = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*)?(" + WEEKDAY_PATTERN + r")\b[ \t]*((?:[:\-–—][^\n]*)?)$",
    re.IGNORECASE | re.MULTILINE,
)
FOCUS_LINE_RE = re.compile(r"^[*_\s]*focus[*_\s]*:[*_\s]*(.+?)[*_\s]*$", re.IGNORECASE)

WEEK_FOCUS_DEFAULTS = {
    1: "Foundation Building",
    2: "Progressive Overload",
    3: "Intensity Increase",
    4: "Peak Performance",
}

# Classification keyword families, checked in order after the walk+strength mix.
WALK_RE = re.compile(r"\bwalk", re.IGNORECASE)
STRENGTH_RE = re.compile(
    r"\b(?:strength|bodyweight|body[\s-]weight|squats?|push[\s-]?ups?|lunges?|planks?|dumbbells?)\b",
    re.IGNORECASE,
)
TYPE_RULES = [
    ("Walking", WALK_RE),
    ("Running", re.compile(r"\b(?:run|runs|running|jog\w*)\b", re.IGNORECASE)),
    ("Strength", STRENGTH_RE),
    ("Cardio", re.compile(r"\bcardio\b", re.IGNORECASE)),
    ("Yoga", re.compile(r"\byoga\b", re.IGNORECASE)),
    ("Cycling", re.compile(r"\b(?:cycl\w*|bike|biking|bicycle)\b", re.IGNORECASE)),
    ("Swimming", re.compile(r"\bswim\w*", re.IGNORECASE)),
]
DEFAULT_TYPE = "Mixed"

DURATION_RE = re.compile(r"(\d+)\s*(?:minutes|minute|mins|min)\b", re.IGNORECASE)
BEGINNER_RE = re.compile(r"\b(?:beginner|intro\w*|easy)\b", re.IGNORECASE)
ADVANCED_RE = re.compile(r"\b(?:advanced|challeng\w*|hard)\b", re.IGNORECASE)

BULLET_RE = re.compile(r"^(?:[-•+]|\*(?!\*))[ \t]*(.+)$")
ROUND_RE = re.compile(r"\b(?:rounds?|circuits?)\b", re.IGNORECASE)
SECTION_WORD_RE = re.compile(r"warm[\s-]?up|cool[\s-]?down|\bmain\b", re.IGNORECASE)
EMPHASIS_RE = re.compile(r"\*\*|__")

REPS_RE = re.compile(
    r"^(.+?)\s+[x×]\s*(\d+)\s*(?:reps?\b|each\s+(?:side|leg)\b)?(.*)$",
    re.IGNORECASE,
)
TIMED_RE = re.compile(r"^(.+?):\s*(\d+)\s*(min|sec)\w*(.*)$", re.IGNORECASE)
PAREN_MINUTES_RE = re.compile(r"^(.+?)\s*\((\d+)\s*min\w*\)(.*)$", re.IGNORECASE)

DEFAULT_REPS = 10
MIN_BARE_NAME_LENGTH = 5
MAX_NOTE_LENGTH = 100


def _clean_label(value):
    """Strip marker separators and emphasis around a free-text label."""
    text = EMPHASIS_RE.sub("", value or "")
    return text.strip().strip(":-–—|*#").strip()


def _split_sections(text, pattern):
    """Return (number, remainder_of_marker_line, block_text) per marker match."""
    matches = list(pattern.finditer(text))
    sections = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        sections.append((int(match.group(1)), match.group(2), text[match.end():end]))
    return sections


def segment_weeks(text):
    """
    Split generator text into week blocks.

    Returns:
        dict week_number -> (marker_remainder, block_text) for weeks 1-4.
        First occurrence of a week number wins.

    Raises:
        ParseFailure: when no usable week section is present.
    """
    text = text or ""
    sections = _split_sections(text, WEEK_RE)
    if not sections:
        sections = _split_sections(text, LOOSE_WEEK_RE)
    if not sections:
        raise ParseFailure("Failed to parse plan: no '### Week <n>' or 'Week <n>' sections found in generator response.")

    blocks = {}
    for number, remainder, block in sections:
        if 1 <= number <= PLAN_WEEKS and number not in blocks:
            blocks[number] = (remainder, block)

    if not blocks:
        numbers = ", ".join(str(number) for number, _, _ in sections)
        raise ParseFailure(f"Failed to parse plan: week sections found ({numbers}) but none numbered 1-{PLAN_WEEKS}.")
    return blocks


def extract_week_focus(week_number, marker_remainder, block_text):
    """Focus label from the marker line or a leading 'Focus:' line, else the stage default."""
    candidate = _clean_label(marker_remainder)
    if is_valid_name(candidate):
        return candidate

    for line in block_text.split("\n"):
        if not line.strip():
            continue
        match = FOCUS_LINE_RE.match(line.strip())
        if match and is_valid_name(_clean_label(match.group(1))):
            return _clean_label(match.group(1))
        break

    return WEEK_FOCUS_DEFAULTS[week_number]


def segment_days(week_text):
    """
    Split a week block into day blocks.

    Bold "**Monday**" markers and plain weekday heading lines ("Wednesday:",
    "#### Friday") both start a day; a block may mix the two.

    Returns:
        dict "Monday" -> day text (inline marker title first, then content)
    """
    markers = list(DAY_MARKER_RE.finditer(week_text))
    for heading in DAY_HEADING_RE.finditer(week_text):
        if not any(m.start() < heading.end() and heading.start() < m.end() for m in markers):
            markers.append(heading)
    markers.sort(key=lambda m: m.start())

    days = {}
    for i, match in enumerate(markers):
        day_name = match.group(1).capitalize()
        if day_name in days:
            continue
        end = markers[i + 1].start() if i + 1 < len(markers) else len(week_text)
        title = _clean_label(match.group(2))
        content = week_text[match.end():end].strip()
        days[day_name] = f"{title}\n{content}".strip() if title else content
    return days


def classify_workout_type(day_text):
    if WALK_RE.search(day_text) and STRENGTH_RE.search(day_text):
        return DEFAULT_TYPE
    for label, pattern in TYPE_RULES:
        if pattern.search(day_text):
            return label
    return DEFAULT_TYPE


def extract_duration(day_text, default_minutes):
    match = DURATION_RE.search(day_text)
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return default_minutes


def extract_difficulty(day_text, default_difficulty):
    if BEGINNER_RE.search(day_text):
        return "Beginner"
    if ADVANCED_RE.search(day_text):
        return "Advanced"
    return default_difficulty.capitalize()


def _is_section_header(line):
    if ROUND_RE.search(line):
        return True
    if line.rstrip("*_ ").endswith(":"):
        return True
    if ":" in line and SECTION_WORD_RE.search(line):
        after_colon = line.split(":", 1)[1]
        return not re.search(r"\d", after_colon)
    return False


def _trailing_description(value):
    text = _clean_label((value or "").strip().strip("(),;"))
    return text if is_valid_name(text) else None


def parse_exercise_line(text):
    """
    Parse one bullet's text into exercise fields.

    Returns:
        dict with name/sets/reps/duration_minutes/description, or None when the
        line is a header, too vague, or has no usable name.
    """
    text = EMPHASIS_RE.sub("", text).strip()
    if not text or _is_section_header(text):
        return None

    fields = None
    match = REPS_RE.match(text)
    if match:
        fields = {
            "name": match.group(1),
            "sets": 1,
            "reps": int(match.group(2)),
            "duration_minutes": None,
            "description": _trailing_description(match.group(3)),
        }

    if fields is None:
        match = TIMED_RE.match(text)
        if match:
            amount = int(match.group(2))
            minutes = math.ceil(amount / 60) if match.group(3).lower() == "sec" else amount
            fields = {
                "name": match.group(1),
                "sets": 1,
                "reps": None,
                "duration_minutes": minutes,
                "description": _trailing_description(match.group(4)),
            }

    if fields is None:
        match = PAREN_MINUTES_RE.match(text)
        if match:
            fields = {
                "name": match.group(1),
                "sets": 1,
                "reps": None,
                "duration_minutes": int(match.group(2)),
                "description": _trailing_description(match.group(3)),
            }

    if fields is None:
        if len(text) < MIN_BARE_NAME_LENGTH or ":" in text or "week" in text.lower():
            return None
        fields = {
            "name": text,
            "sets": 1,
            "reps": DEFAULT_REPS,
            "duration_minutes": None,
            "description": None,
        }

    fields["name"] = fields["name"].strip().rstrip(" -–—:,;")
    if not is_valid_name(fields["name"]):
        return None
    return fields


def extract_exercises(day_text, week_number, day_number):
    """Build Exercise entities from the bulleted lines of a day block."""
    exercises = []
    for line in day_text.split("\n"):
        bullet = BULLET_RE.match(line.strip())
        if not bullet:
            continue
        fields = parse_exercise_line(bullet.group(1))
        if fields is None:
            continue
        exercises.append(
            Exercise(id=f"{week_number}-{day_number}-{len(exercises) + 1}", **fields)
        )
    return exercises


def build_workout(day_text, week_number, day_number, preferences):
    """Classify and extract one day's workout. Empty exercise lists are allowed."""
    workout_type = classify_workout_type(day_text)
    first_line = day_text.split("\n")[0].strip() if day_text else ""
    notes = re.sub(r"^[-•*+]\s*", "", first_line)
    notes = EMPHASIS_RE.sub("", notes).strip()[:MAX_NOTE_LENGTH]

    return Workout(
        type=workout_type,
        duration_minutes=extract_duration(day_text, preferences.duration_minutes),
        difficulty=extract_difficulty(day_text, preferences.difficulty.value),
        notes=notes or f"{workout_type} Workout",
        exercises=extract_exercises(day_text, week_number, day_number),
    )


def build_week(week_number, focus, day_blocks, preferences):
    days = []
    for weekday in preferences.days:
        day_text = day_blocks.get(weekday.label)
        workout = None
        if day_text is not None:
            workout = build_workout(day_text, week_number, weekday.number, preferences)
        days.append(
            Day(
                day_number=weekday.number,
                day_name=weekday.label,
                is_workout_day=True,
                workout=workout,
            )
        )
    return Week(week_number=week_number, focus=focus, days=days)


def _as_date(value):
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_plan_response(text, preferences, profile, start_date=None, plan_id=None):
    """
    Parse the generator's free text into a Plan.

    Args:
        text: Generator response
        preferences: PreferenceModel used to build the prompt
        profile: UserProfile owning the plan
        start_date: First day of the plan (defaults to today)
        plan_id: Optional id; a fresh one is generated otherwise

    Returns:
        Plan with exactly four weeks and one Day per enabled weekday

    Raises:
        ParseFailure: when no week section can be located
    """
    blocks = segment_weeks(text)
    start = _as_date(start_date)

    weeks = []
    for week_number in range(1, PLAN_WEEKS + 1):
        if week_number in blocks:
            remainder, block = blocks[week_number]
            focus = extract_week_focus(week_number, remainder, block)
            day_blocks = segment_days(block)
        else:
            focus = WEEK_FOCUS_DEFAULTS[week_number]
            day_blocks = {}
        weeks.append(build_week(week_number, focus, day_blocks, preferences))

    difficulty = preferences.difficulty.value.capitalize()
    return Plan(
        id=plan_id or f"plan_{uuid.uuid4().hex[:12]}",
        user_id=profile.user_id,
        title=f"{difficulty} 4-Week Fitness Plan",
        description=f"Personalized 4-week fitness plan for {profile.display_name}",
        start_date=start,
        end_date=start + timedelta(days=PLAN_DAYS),
        status="active",
        preferences=preferences,
        weeks=weeks,
    )
