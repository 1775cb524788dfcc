"""
SQLite persistence for plans, per-day progress and the daily motivation marker.
"""

import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime

from stridecoach.errors import PlanNotFound
from stridecoach.models import Plan, ProgressRecord


PLAN_STATUSES = ("active", "completed")


class PlanStore:
    """Small SQLite wrapper for plan documents and completion records."""

    def __init__(self, db_path):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        self.conn = sqlite3.connect(db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Context manager for atomic write operations."""
        try:
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def init_schema(self):
        """Create core schema if it does not already exist."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS plans (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'active',
                document TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS day_progress (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                plan_id TEXT NOT NULL,
                week_number INTEGER NOT NULL,
                day_number INTEGER NOT NULL,
                record TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(plan_id) REFERENCES plans(id) ON DELETE CASCADE,
                UNIQUE(plan_id, week_number, day_number)
            );

            CREATE TABLE IF NOT EXISTS motivation (
                user_id TEXT PRIMARY KEY,
                text TEXT NOT NULL,
                computed_on TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_plans_user_status ON plans(user_id, status);
            CREATE INDEX IF NOT EXISTS idx_day_progress_plan_id ON day_progress(plan_id);
            """
        )
        self.conn.commit()

    def _row_to_plan(self, row):
        plan = Plan.model_validate_json(row["document"])
        if plan.status != row["status"]:
            plan = plan.model_copy(update={"status": row["status"]})
        return plan

    def get_plan(self, plan_id):
        row = self.conn.execute(
            "SELECT document, status FROM plans WHERE id = ?",
            (plan_id,),
        ).fetchone()
        if row is None:
            raise PlanNotFound(f"Plan not found: {plan_id}")
        return self._row_to_plan(row)

    def get_active_plan(self, user_id):
        """Return the user's active plan, or None."""
        row = self.conn.execute(
            """
            SELECT document, status FROM plans
            WHERE user_id = ? AND status = 'active'
            ORDER BY created_at DESC
            LIMIT 1
            """,
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return self._row_to_plan(row)

    def save_plan(self, plan):
        """Persist a plan as the user's only active plan and return it."""
        plan = plan.model_copy(update={"status": "active"})
        with self.transaction():
            self.conn.execute(
                """
                UPDATE plans SET status = 'completed', updated_at = datetime('now')
                WHERE user_id = ? AND status = 'active' AND id != ?
                """,
                (plan.user_id, plan.id),
            )
            self.conn.execute(
                """
                INSERT INTO plans (id, user_id, status, document, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, datetime('now'))
                ON CONFLICT(id) DO UPDATE SET
                    status = excluded.status,
                    document = excluded.document,
                    updated_at = datetime('now')
                """,
                (
                    plan.id,
                    plan.user_id,
                    plan.status,
                    plan.model_dump_json(),
                    plan.created_at.isoformat(),
                ),
            )
        return plan

    def set_plan_status(self, plan_id, status):
        if status not in PLAN_STATUSES:
            raise ValueError(f"Unknown plan status: {status}")
        with self.transaction():
            cursor = self.conn.execute(
                "UPDATE plans SET status = ?, updated_at = datetime('now') WHERE id = ?",
                (status, plan_id),
            )
            if cursor.rowcount == 0:
                raise PlanNotFound(f"Plan not found: {plan_id}")

    def update_day_progress(self, plan_id, week_number, day_number, record):
        """
        Replace the completion record of one scheduled day atomically.

        Args:
            plan_id: Plan id
            week_number: 1-4
            day_number: 1 = Monday ... 7 = Sunday
            record: ProgressRecord or dict

        Returns:
            The Plan the record belongs to

        Raises:
            PlanNotFound: unknown plan id
            ValueError: the plan has no Day in that slot
        """
        if not isinstance(record, ProgressRecord):
            record = ProgressRecord.model_validate(record)

        plan = self.get_plan(plan_id)
        if plan.get_day(week_number, day_number) is None:
            raise ValueError(
                f"Plan {plan_id} has no scheduled day for week {week_number}, day {day_number}"
            )

        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO day_progress (plan_id, week_number, day_number, record, updated_at)
                VALUES (?, ?, ?, ?, datetime('now'))
                ON CONFLICT(plan_id, week_number, day_number) DO UPDATE SET
                    record = excluded.record,
                    updated_at = datetime('now')
                """,
                (plan_id, week_number, day_number, record.model_dump_json()),
            )
        return plan

    def get_progress_records(self, plan_id):
        """Return {(week_number, day_number): ProgressRecord} for a plan."""
        rows = self.conn.execute(
            """
            SELECT week_number, day_number, record FROM day_progress
            WHERE plan_id = ?
            ORDER BY week_number, day_number
            """,
            (plan_id,),
        ).fetchall()
        return {
            (int(row["week_number"]), int(row["day_number"])): ProgressRecord.model_validate_json(row["record"])
            for row in rows
        }

    def get_motivation(self, user_id):
        """Return (text, computed_on date) or None."""
        row = self.conn.execute(
            "SELECT text, computed_on FROM motivation WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return row["text"], date.fromisoformat(row["computed_on"])

    def save_motivation(self, user_id, text, day):
        if isinstance(day, datetime):
            day = day.date()
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO motivation (user_id, text, computed_on)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    text = excluded.text,
                    computed_on = excluded.computed_on
                """,
                (user_id, text, day.isoformat()),
            )

    def count_summary(self):
        """Return row counts for the core tables."""
        summary = {}
        for table in ["plans", "day_progress", "motivation"]:
            row = self.conn.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()
            summary[table] = int(row["c"])
        return summary
