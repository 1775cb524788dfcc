#!/usr/bin/env python3
"""
StrideCoach workout planner
Main entry point for the command line tool.
"""

import argparse
import asyncio
import sys
from datetime import datetime

from dotenv import load_dotenv

from stridecoach.config import get_api_key, load_config
from stridecoach.errors import PlanEngineError
from stridecoach.plan_service import PlanService, save_response
from stridecoach.plan_store import PlanStore
from stridecoach.preferences import UserProfile
from stridecoach.text_generator import AnthropicTextGenerator


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        STRIDECOACH 4-WEEK WORKOUT PLANNER                    ║
║        Powered by Claude AI                                  ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def print_section(title):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def build_parser():
    parser = argparse.ArgumentParser(description="Generate and track 4-week workout plans.")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("generate", help="Generate a new plan from the configured preferences")
    subparsers.add_parser("progress", help="Show progress for the active plan")

    complete = subparsers.add_parser("complete", help="Mark a scheduled workout as done")
    complete.add_argument("week", type=int, help="Week number (1-4)")
    complete.add_argument("day", type=int, help="Day number (1 = Monday ... 7 = Sunday)")
    complete.add_argument("--notes", default="", help="Free-form notes")
    complete.add_argument("--difficulty", type=int, default=3, help="Perceived difficulty (1-5)")
    complete.add_argument("--duration", type=int, default=0, help="Actual duration in minutes")

    subparsers.add_parser("motivation", help="Show today's coaching feedback")
    return parser


def load_settings(path):
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


def build_service(config):
    api_key = get_api_key(config)
    api_key_env = config['claude']['api_key_env']
    if not api_key:
        print(f"\n❌ Error: {api_key_env} not found in environment variables!")
        print("\nPlease:")
        print("1. Copy .env.example to .env")
        print("2. Add your Anthropic API key to .env")
        print("3. Get your API key from: https://console.anthropic.com/")
        sys.exit(1)

    generator = AnthropicTextGenerator(api_key=api_key, config=config)
    store = PlanStore(config['database']['path'])
    store.init_schema()
    return PlanService(
        generator,
        store,
        motivation_max_tokens=config['claude']['motivation_max_tokens'],
    )


def print_progress(service, plan):
    derived = service.get_derived_progress(plan, now=datetime.now())
    print(f"  Plan: {plan.title} ({plan.status})")
    print(f"  Dates: {plan.start_date} → {plan.end_date}")
    print(f"  Completed: {derived.completed}/{derived.total} ({derived.percentage}%)")
    print(f"  Streak: {derived.streak}")
    print(f"  Week: {derived.current_week} of 4")
    print(f"  Last workout: {derived.last_workout or 'Not yet'}")
    if derived.next_workout:
        upcoming = derived.next_workout
        print(
            f"  Next: Week {upcoming.week_number} {upcoming.day_name} "
            f"({upcoming.scheduled_date}) - {upcoming.workout.type}, "
            f"{upcoming.workout.duration_minutes} min"
        )
    else:
        print("  Next: nothing left to schedule")


async def run_command(args, config):
    profile = UserProfile(**(config.get('profile') or {'user_id': 'local'}))
    service = build_service(config)

    try:
        if args.command == "generate":
            print_section("GENERATING WORKOUT PLAN")
            plan = await service.request_new_plan(profile, config.get('preferences') or {})
            save_response(service.last_response, config['output']['folder'])
            print_section("YOUR PLAN")
            for week in plan.weeks:
                print(f"\nWeek {week.week_number}: {week.focus}")
                for day in week.days:
                    if day.workout is None:
                        print(f"  {day.day_name}: (no workout parsed)")
                        continue
                    print(
                        f"  {day.day_name}: {day.workout.type}, {day.workout.duration_minutes} min, "
                        f"{len(day.workout.exercises)} exercises"
                    )
            return

        plan = service.get_current_plan(profile.user_id)
        if plan is None:
            print("\n⚠ No active plan. Run 'generate' first.")
            return

        if args.command == "progress":
            print_section("PROGRESS")
            print_progress(service, plan)
        elif args.command == "complete":
            plan = service.complete_workout(
                plan.id,
                args.week,
                args.day,
                duration=args.duration,
                notes=args.notes,
                difficulty=args.difficulty,
            )
            print(f"✓ Week {args.week}, day {args.day} marked as completed.")
            print_section("PROGRESS")
            print_progress(service, plan)
        elif args.command == "motivation":
            print_section("TODAY'S FEEDBACK")
            text = await service.get_daily_motivation(profile, now=datetime.now())
            print("\n" + (text or "") + "\n")
    finally:
        service.store.close()


def main(argv=None):
    """Main application flow."""
    args = build_parser().parse_args(argv)
    print_banner()

    load_dotenv()

    print("Loading configuration...")
    config = load_settings(args.config)

    try:
        asyncio.run(run_command(args, config))
    except PlanEngineError as e:
        print(f"\n❌ {type(e).__name__}: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
