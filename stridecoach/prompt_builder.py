"""
Prompt construction for plan generation and daily motivation.

The plan prompt pins the output format the schedule parser relies on:
"### Week <n>" section markers and "**<Weekday>**" day markers, with
per-category exercise line formats.
"""

from stridecoach.preferences import ENDURANCE_TYPES, WorkoutType


SYSTEM_PROMPT = (
    "You are StrideCoach, an expert fitness AI coach specializing in walking and "
    "strength training. Create personalized, safe, and effective workout plans."
)

MOTIVATION_SYSTEM_PROMPT = (
    "You are StrideCoach, a direct, data-driven fitness coach. Give honest, specific "
    "feedback based on actual performance metrics. No generic motivation - only "
    "fact-based analysis."
)

WORKOUT_TYPE_LABELS = {
    WorkoutType.WALK: "Walking",
    WorkoutType.RUN: "Running",
    WorkoutType.STRENGTH: "Strength Training",
    WorkoutType.YOGA: "Yoga",
    WorkoutType.CYCLE: "Cycling",
    WorkoutType.SWIM: "Swimming",
}

ENDURANCE_EXAMPLE = """- Warm-Up:
  - Easy Walk: 5 min
  - 1km at a conversational pace (no faster than 7:00/km)
- Main Workout (Repeat x3):
  - 1km at 6:00/km
  - 90s walking rest
- Cool Down:
  - Stretching: 5 min"""

STRENGTH_EXAMPLE = """- Warm-Up:
  - Jumping Jacks: 2 min
  - Dynamic stretches x 10 each side
- Main Workout (3 Rounds):
  - Squats x 15
  - Push-ups x 12
  - Plank: 45 sec
  - Rest: 90 seconds between rounds
- Cool Down:
  - Stretching: 5 min"""


def _humanize(value):
    text = str(value).replace("_", " ")
    return text[:1].upper() + text[1:]


def _value_or(value, fallback, suffix=""):
    if value is None or value == "":
        return fallback
    return f"{value}{suffix}"


def _format_workout_types(preferences):
    if not preferences.workout_types:
        return "Walking, Strength Training"
    return ", ".join(WORKOUT_TYPE_LABELS[t] for t in preferences.workout_types)


def _format_equipment(preferences):
    if not preferences.equipment:
        return "None (bodyweight only)"
    return ", ".join(_humanize(item.value) for item in preferences.equipment)


def _example_block(preferences):
    """Worked example for the first enabled day."""
    selected = set(preferences.workout_types)
    endurance_only = bool(selected) and selected <= ENDURANCE_TYPES
    if preferences.is_endurance_focused or endurance_only:
        body = ENDURANCE_EXAMPLE
    else:
        body = STRENGTH_EXAMPLE
    return f"**{preferences.day_labels[0]}**\n{body}"


def build_plan_prompt(profile, preferences):
    """
    Build the 4-week plan request.

    Args:
        profile: UserProfile
        preferences: PreferenceModel (already validated)

    Returns:
        Complete prompt string
    """
    days = preferences.day_labels
    days_text = ", ".join(days)
    day_count = len(days)
    duration = f"{preferences.duration_minutes} minutes"
    difficulty = _humanize(preferences.difficulty.value)
    goal = _humanize(preferences.goal.value)
    workout_types = _format_workout_types(preferences)

    remaining_days = "\n\n".join(f"**{day}**\n[Same structured format]" for day in days[1:])
    if remaining_days:
        remaining_days = f"\n\n{remaining_days}"

    later_weeks = "\n\n".join(
        f"### Week {n}\n\n[Continue with same format for all {day_count} days: {days_text}]"
        for n in range(2, 5)
    )

    notes_block = ""
    if preferences.notes:
        notes_block = f"\nAdditional Notes: {preferences.notes}\n"

    return f"""Create a 4-week personalized workout plan for:

User Details:
- Name: {profile.display_name}
- Age: {_value_or(profile.age, "Not specified")}
- Height: {_value_or(profile.height_cm, "Not specified", " cm")}
- Weight: {_value_or(profile.weight_kg, "Not specified", " kg")}
- Goal: {goal}
- Target Weight: {_value_or(profile.goal_weight_kg, "Not specified", " kg")}
- Available Days: {days_text}
- Preferred Time: {_humanize(preferences.preferred_time) if preferences.preferred_time else "Not specified"}
- Equipment: {_format_equipment(preferences)}

Preferences:
- Workout Duration: {duration}
- Intensity Level: {difficulty}
- Focus Areas: {goal}
- Workout Types: {workout_types}
{notes_block}
CRITICAL REQUIREMENTS:
1. You MUST create workouts for EXACTLY these days ONLY: {days_text}
2. DO NOT include workouts for any other days
3. Each workout should be approximately {duration}
4. Focus on these workout types: {workout_types}
5. Difficulty should match: {difficulty}

FORMAT REQUIREMENTS FOR ENDURANCE WORKOUTS (walking, running, cycling, swimming):
- Use DISTANCE (km) with PACE where possible (e.g., "1km at 6:00/km")
- Write timed efforts as "Exercise Name: <minutes> min" (e.g., "Brisk Walk: 20 min")
- Group repeated intervals clearly (e.g., "Repeat x3:")
- For rest periods, use seconds or minutes (e.g., "90s rest")

FORMAT REQUIREMENTS FOR STRENGTH WORKOUTS:
- Write every exercise as "Exercise Name x <reps>" (e.g., "Squats x 15")
- Write holds as "Exercise Name: <seconds> sec" (e.g., "Plank: 45 sec")
- Group exercises into rounds if appropriate (e.g., "3 Rounds:")
- Include rest periods between rounds

Please create a structured 4-week plan using this EXACT format:

## Daily Workout Breakdown

### Week 1

{_example_block(preferences)}{remaining_days}

{later_weeks}

IMPORTANT FORMATTING RULES:
1. Start every week with "### Week <number>" on its own line
2. Start every day with the day name in bold on its own line, e.g. "**{days[0]}**"
3. Put every exercise on its own line starting with "- "
4. Always structure workouts as: Warm-Up -> Main Workout -> Cool Down
5. Keep descriptions simple and actionable
6. Progress intensity across the 4 weeks
7. Create workouts for ALL {day_count} selected days: {days_text}"""


def build_motivation_prompt(profile, progress):
    """
    Build the daily feedback request from derived progress numbers.

    Args:
        profile: UserProfile
        progress: DerivedProgress
    """
    fitness_level = _humanize(profile.fitness_level) if profile.fitness_level else "General fitness"
    last_workout = progress.last_workout or "Not yet"

    return f"""You are a direct, results-focused fitness coach analyzing this week's performance.

User: {profile.display_name}
Fitness Level: {fitness_level}

ACTUAL PROGRESS DATA:
- Workouts Completed: {progress.completed} out of {progress.total} scheduled
- Completion Rate: {progress.percentage}%
- Current Streak: {progress.streak} workouts
- Week: {progress.current_week} of 4
- Last Workout: {last_workout}

Provide a SHORT, NO-NONSENSE feedback message (2-3 sentences max, under 80 words) that:
1. States the facts about their performance (good or bad)
2. Gives specific, actionable feedback based on their completion rate:
   - If 80-100%: Acknowledge strong performance and push for consistency
   - If 50-79%: Point out the gap and motivate to close it
   - If below 50%: Be direct about underperformance and need for commitment
3. Includes ONE specific action they should take this week

Be honest, direct, and motivating. No fluff or generic platitudes. Base everything on their actual numbers."""
