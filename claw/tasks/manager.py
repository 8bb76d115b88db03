"""
Tool: Task Manager
Purpose: SQLite persistence for tasks, subtasks and coin balances

This is the task-persistence collaborator the assistant engine talks to:
- Create tasks with an ordered list of subtasks
- Rename, delete (subtasks cascade) and clear completed tasks
- Toggle subtasks, completing the parent task atomically when the last one
  finishes and crediting coins for its energy level
- Store reminder times and recurrence descriptors

Every public method returns the result-dict contract used across the engine:
``{"success": bool, "data": ..., "error": ..., "message": ...}``. SQLite
errors are logged and reported as ``success=False``; they never propagate.

Usage:
    python -m claw.tasks.manager --action create --user alice --task "Clean kitchen" --subtask Dishes --subtask Counters
    python -m claw.tasks.manager --action list --user alice
    python -m claw.tasks.manager --action active --user alice
    python -m claw.tasks.manager --action get --task-id abc123
    python -m claw.tasks.manager --action toggle --subtask-id def456 --user alice
    python -m claw.tasks.manager --action delete --task-id abc123

Dependencies:
    - sqlite3 (stdlib)
    - uuid (stdlib)

Output:
    JSON result with success status and data
"""

import argparse
import json
import logging
import sqlite3
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from . import (
    DB_PATH,
    DEFAULT_SUBTASK_EMOJI,
    DEFAULT_TASK_EMOJI,
    ENERGY_COINS,
    ENERGY_LEVELS,
    RECURRENCE_TYPES,
)
from .models import Subtask, Task, parse_energy_tag

logger = logging.getLogger(__name__)

SubtaskSpec = Union[str, Dict[str, str]]


def generate_id() -> str:
    """Generate a short unique ID."""
    return uuid.uuid4().hex[:12]


def now_iso() -> str:
    return datetime.now().isoformat(timespec="microseconds")


def _failure(operation: str, error: Exception) -> Dict[str, Any]:
    logger.warning(f"Task store failed while {operation}: {error}")
    return {"success": False, "error": str(error)}


class TaskStore:
    """SQLite-backed task persistence scoped by user id."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DB_PATH

    # ─────────────────────────────────────────────────────────────────────
    # Connection
    # ─────────────────────────────────────────────────────────────────────

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")

        conn.executescript("""
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                emoji TEXT NOT NULL DEFAULT '📝',
                completed INTEGER NOT NULL DEFAULT 0,
                energy_tag TEXT CHECK(energy_tag IN ('low', 'medium', 'high') OR energy_tag IS NULL),
                reminder_at TEXT,
                recurrence_type TEXT CHECK(recurrence_type IN ('daily', 'weekdays', 'weekly', 'monthly', 'yearly') OR recurrence_type IS NULL),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                completed_at TEXT
            );

            CREATE TABLE IF NOT EXISTS subtasks (
                id TEXT PRIMARY KEY,
                task_id TEXT NOT NULL,
                name TEXT NOT NULL,
                emoji TEXT NOT NULL DEFAULT '▪️',
                completed INTEGER NOT NULL DEFAULT 0,
                sort_order INTEGER NOT NULL,
                UNIQUE(task_id, sort_order),
                FOREIGN KEY(task_id) REFERENCES tasks(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS profiles (
                user_id TEXT PRIMARY KEY,
                coins INTEGER NOT NULL DEFAULT 0,
                completed_tasks INTEGER NOT NULL DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id, completed, updated_at);
            CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(user_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_subtasks_task ON subtasks(task_id, sort_order);
        """)
        return conn

    # ─────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────────────

    def _load_tasks(
        self,
        conn: sqlite3.Connection,
        where: str,
        params: tuple,
        limit: Optional[int] = None,
    ) -> List[Task]:
        query = f"SELECT * FROM tasks WHERE {where} ORDER BY updated_at DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ?"
            params = (*params, limit)
        rows = conn.execute(query, params).fetchall()
        if not rows:
            return []

        task_ids = [row["id"] for row in rows]
        placeholders = ",".join("?" for _ in task_ids)
        subtask_rows = conn.execute(
            f"SELECT * FROM subtasks WHERE task_id IN ({placeholders}) ORDER BY sort_order",
            task_ids,
        ).fetchall()

        by_task: Dict[str, List[Subtask]] = {task_id: [] for task_id in task_ids}
        for row in subtask_rows:
            by_task[row["task_id"]].append(Subtask.from_row(row))

        return [Task.from_row(row, by_task[row["id"]]) for row in rows]

    def _touch(self, conn: sqlite3.Connection, task_id: str) -> None:
        conn.execute("UPDATE tasks SET updated_at = ? WHERE id = ?", (now_iso(), task_id))

    def _award(self, conn: sqlite3.Connection, user_id: str, energy_tag: Optional[str]) -> int:
        coins = ENERGY_COINS[parse_energy_tag(energy_tag)]
        conn.execute("INSERT OR IGNORE INTO profiles (user_id) VALUES (?)", (user_id,))
        conn.execute(
            "UPDATE profiles SET coins = coins + ?, completed_tasks = completed_tasks + 1 WHERE user_id = ?",
            (coins, user_id),
        )
        return coins

    def _sync_completion(self, conn: sqlite3.Connection, task_id: str, user_id: str) -> int:
        """Complete the task if every subtask is done. Returns coins awarded."""
        task = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if task is None or task["completed"]:
            return 0

        counts = conn.execute(
            "SELECT COUNT(*) AS total, SUM(completed) AS done FROM subtasks WHERE task_id = ?",
            (task_id,),
        ).fetchone()
        if not counts["total"] or counts["done"] != counts["total"]:
            return 0

        conn.execute(
            "UPDATE tasks SET completed = 1, completed_at = ?, updated_at = ? WHERE id = ?",
            (now_iso(), now_iso(), task_id),
        )
        return self._award(conn, user_id, task["energy_tag"])

    # ─────────────────────────────────────────────────────────────────────
    # Tasks
    # ─────────────────────────────────────────────────────────────────────

    def create_task(
        self,
        user_id: str,
        name: str,
        emoji: Optional[str] = None,
        subtasks: Optional[List[SubtaskSpec]] = None,
        energy_tag: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a task and its subtasks in one transaction.

        Args:
            user_id: User who owns the task
            name: Task name as the user said it
            emoji: Task emoji (defaults to 📝)
            subtasks: Subtask names, or dicts with "name" and optional "emoji"
            energy_tag: low/medium/high

        Returns:
            dict with success status and the created Task
        """
        if energy_tag and energy_tag not in ENERGY_LEVELS:
            return {"success": False, "error": f"Invalid energy level. Must be one of: {ENERGY_LEVELS}"}

        task_id = generate_id()
        timestamp = now_iso()

        try:
            conn = self.get_connection()
            try:
                with conn:
                    conn.execute(
                        """INSERT INTO tasks (id, user_id, name, emoji, energy_tag, created_at, updated_at)
                           VALUES (?, ?, ?, ?, ?, ?, ?)""",
                        (task_id, user_id, name, emoji or DEFAULT_TASK_EMOJI, energy_tag, timestamp, timestamp),
                    )
                    for order, item in enumerate(subtasks or []):
                        if isinstance(item, str):
                            sub_name, sub_emoji = item, DEFAULT_SUBTASK_EMOJI
                        else:
                            sub_name, sub_emoji = item["name"], item.get("emoji") or DEFAULT_SUBTASK_EMOJI
                        conn.execute(
                            """INSERT INTO subtasks (id, task_id, name, emoji, sort_order)
                               VALUES (?, ?, ?, ?, ?)""",
                            (generate_id(), task_id, sub_name, sub_emoji, order),
                        )
                task = self._load_tasks(conn, "id = ?", (task_id,))[0]
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("creating a task", e)

        return {
            "success": True,
            "data": {"task_id": task_id, "task": task},
            "message": f"Task created with ID {task_id}",
        }

    def get_task(self, task_id: str) -> Dict[str, Any]:
        """Get a task with its subtasks by ID."""
        try:
            conn = self.get_connection()
            try:
                tasks = self._load_tasks(conn, "id = ?", (task_id,))
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("loading a task", e)

        if not tasks:
            return {"success": False, "error": f"Task not found: {task_id}"}
        return {"success": True, "data": {"task": tasks[0]}}

    def list_tasks(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        List a user's tasks, most recently updated first.

        Args:
            user_id: Owner of the tasks
            completed: Filter on completion (None = all)
            limit: Maximum number of tasks

        Returns:
            dict with success status and list of Tasks
        """
        where = "user_id = ?"
        params: tuple = (user_id,)
        if completed is not None:
            where += " AND completed = ?"
            params = (*params, 1 if completed else 0)

        try:
            conn = self.get_connection()
            try:
                tasks = self._load_tasks(conn, where, params, limit)
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("listing tasks", e)

        return {"success": True, "data": {"tasks": tasks, "count": len(tasks)}}

    def list_active_tasks(self, user_id: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """Non-completed tasks, most recently updated first."""
        return self.list_tasks(user_id, completed=False, limit=limit)

    def list_recent_tasks(self, user_id: str, since: datetime) -> Dict[str, Any]:
        """Tasks created at or after ``since``."""
        try:
            conn = self.get_connection()
            try:
                tasks = self._load_tasks(
                    conn,
                    "user_id = ? AND created_at >= ?",
                    (user_id, since.isoformat(timespec="microseconds")),
                )
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("listing recent tasks", e)

        return {"success": True, "data": {"tasks": tasks, "count": len(tasks)}}

    def rename_task(self, task_id: str, name: str) -> Dict[str, Any]:
        return self._update_task_field(task_id, "name", name, "renaming a task")

    def update_reminder(self, task_id: str, reminder_at: Optional[str]) -> Dict[str, Any]:
        """Set or clear (None) a task's reminder time (ISO string)."""
        return self._update_task_field(task_id, "reminder_at", reminder_at, "updating a reminder")

    def set_recurrence(self, task_id: str, recurrence_type: Optional[str]) -> Dict[str, Any]:
        """Set or clear (None) a task's recurrence descriptor."""
        if recurrence_type is not None and recurrence_type not in RECURRENCE_TYPES:
            return {"success": False, "error": f"Invalid recurrence. Must be one of: {RECURRENCE_TYPES}"}
        return self._update_task_field(task_id, "recurrence_type", recurrence_type, "setting recurrence")

    def _update_task_field(self, task_id: str, column: str, value: Any, operation: str) -> Dict[str, Any]:
        try:
            conn = self.get_connection()
            try:
                with conn:
                    cursor = conn.execute(
                        f"UPDATE tasks SET {column} = ?, updated_at = ? WHERE id = ?",
                        (value, now_iso(), task_id),
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure(operation, e)

        if cursor.rowcount == 0:
            return {"success": False, "error": f"Task not found: {task_id}"}
        return {"success": True, "data": {"task_id": task_id, column: value}}

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        """Delete a task. Its subtasks are removed by the cascade."""
        try:
            conn = self.get_connection()
            try:
                with conn:
                    cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("deleting a task", e)

        if cursor.rowcount == 0:
            return {"success": False, "error": f"Task not found: {task_id}"}
        return {"success": True, "data": {"task_id": task_id}, "message": "Task deleted"}

    def clear_completed_tasks(self, user_id: str) -> Dict[str, Any]:
        """Delete every completed task of a user."""
        try:
            conn = self.get_connection()
            try:
                with conn:
                    cursor = conn.execute(
                        "DELETE FROM tasks WHERE user_id = ? AND completed = 1", (user_id,)
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("clearing completed tasks", e)

        return {"success": True, "data": {"count": cursor.rowcount}}

    def complete_task(self, task_id: str, user_id: str) -> Dict[str, Any]:
        """Mark every subtask and the task complete, crediting coins once."""
        try:
            conn = self.get_connection()
            try:
                with conn:
                    task = conn.execute(
                        "SELECT * FROM tasks WHERE id = ? AND user_id = ?", (task_id, user_id)
                    ).fetchone()
                    if task is None:
                        return {"success": False, "error": f"Task not found: {task_id}"}
                    if task["completed"]:
                        return {"success": True, "data": {"task_id": task_id, "coins_awarded": 0}}

                    conn.execute("UPDATE subtasks SET completed = 1 WHERE task_id = ?", (task_id,))
                    timestamp = now_iso()
                    conn.execute(
                        "UPDATE tasks SET completed = 1, completed_at = ?, updated_at = ? WHERE id = ?",
                        (timestamp, timestamp, task_id),
                    )
                    coins = self._award(conn, user_id, task["energy_tag"])
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("completing a task", e)

        return {"success": True, "data": {"task_id": task_id, "coins_awarded": coins}}

    # ─────────────────────────────────────────────────────────────────────
    # Subtasks
    # ─────────────────────────────────────────────────────────────────────

    def add_subtask(self, task_id: str, name: str, emoji: Optional[str] = None) -> Dict[str, Any]:
        """Append a subtask after the task's last one."""
        subtask_id = generate_id()
        try:
            conn = self.get_connection()
            try:
                with conn:
                    row = conn.execute(
                        "SELECT COALESCE(MAX(sort_order), -1) + 1 AS next_order FROM subtasks WHERE task_id = ?",
                        (task_id,),
                    ).fetchone()
                    conn.execute(
                        """INSERT INTO subtasks (id, task_id, name, emoji, sort_order)
                           VALUES (?, ?, ?, ?, ?)""",
                        (subtask_id, task_id, name, emoji or DEFAULT_SUBTASK_EMOJI, row["next_order"]),
                    )
                    self._touch(conn, task_id)
                    subtask_row = conn.execute("SELECT * FROM subtasks WHERE id = ?", (subtask_id,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("adding a subtask", e)

        return {"success": True, "data": {"subtask_id": subtask_id, "subtask": Subtask.from_row(subtask_row)}}

    def rename_subtask(self, subtask_id: str, name: str) -> Dict[str, Any]:
        try:
            conn = self.get_connection()
            try:
                with conn:
                    row = conn.execute("SELECT task_id FROM subtasks WHERE id = ?", (subtask_id,)).fetchone()
                    if row is None:
                        return {"success": False, "error": f"Subtask not found: {subtask_id}"}
                    conn.execute("UPDATE subtasks SET name = ? WHERE id = ?", (name, subtask_id))
                    self._touch(conn, row["task_id"])
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("renaming a subtask", e)

        return {"success": True, "data": {"subtask_id": subtask_id, "name": name}}

    def delete_subtask(self, subtask_id: str, user_id: str) -> Dict[str, Any]:
        """Remove a subtask. If only finished subtasks remain, the task completes."""
        try:
            conn = self.get_connection()
            try:
                with conn:
                    row = conn.execute("SELECT task_id FROM subtasks WHERE id = ?", (subtask_id,)).fetchone()
                    if row is None:
                        return {"success": False, "error": f"Subtask not found: {subtask_id}"}
                    conn.execute("DELETE FROM subtasks WHERE id = ?", (subtask_id,))
                    self._touch(conn, row["task_id"])
                    coins = self._sync_completion(conn, row["task_id"], user_id)
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("removing a subtask", e)

        return {
            "success": True,
            "data": {"subtask_id": subtask_id, "task_completed": coins > 0, "coins_awarded": coins},
        }

    def toggle_subtask(self, subtask_id: str, completed: bool, user_id: str) -> Dict[str, Any]:
        """
        Set a subtask's completion.

        Completing the last open subtask completes the task and credits coins in
        the same transaction. Reopening a subtask reopens a completed task.
        """
        try:
            conn = self.get_connection()
            try:
                with conn:
                    row = conn.execute("SELECT task_id FROM subtasks WHERE id = ?", (subtask_id,)).fetchone()
                    if row is None:
                        return {"success": False, "error": f"Subtask not found: {subtask_id}"}
                    task_id = row["task_id"]

                    conn.execute(
                        "UPDATE subtasks SET completed = ? WHERE id = ?",
                        (1 if completed else 0, subtask_id),
                    )
                    self._touch(conn, task_id)

                    coins = 0
                    if completed:
                        coins = self._sync_completion(conn, task_id, user_id)
                    else:
                        conn.execute(
                            "UPDATE tasks SET completed = 0, completed_at = NULL WHERE id = ?",
                            (task_id,),
                        )
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("toggling a subtask", e)

        return {
            "success": True,
            "data": {
                "subtask_id": subtask_id,
                "task_id": task_id,
                "task_completed": coins > 0,
                "coins_awarded": coins,
            },
        }

    # ─────────────────────────────────────────────────────────────────────
    # Profiles
    # ─────────────────────────────────────────────────────────────────────

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        try:
            conn = self.get_connection()
            try:
                row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            return _failure("loading a profile", e)

        profile = dict(row) if row else {"user_id": user_id, "coins": 0, "completed_tasks": 0}
        return {"success": True, "data": profile}


def _serialize(value: Any) -> Any:
    if isinstance(value, (Task, Subtask)):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


def main():
    parser = argparse.ArgumentParser(
        description="Task Manager - task and subtask CRUD operations"
    )
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "list", "active", "get", "rename", "delete", "complete", "toggle", "profile"],
        help="Action to perform",
    )
    parser.add_argument("--task-id", help="Task ID for operations")
    parser.add_argument("--subtask-id", help="Subtask ID for toggle")
    parser.add_argument("--user", help="User ID")
    parser.add_argument("--task", help="Task name")
    parser.add_argument("--subtask", action="append", default=[], help="Subtask name (repeatable)")
    parser.add_argument("--emoji", help="Task emoji")
    parser.add_argument("--energy", choices=ENERGY_LEVELS, help="Energy level")
    parser.add_argument("--undo", action="store_true", help="Reopen instead of complete (toggle)")
    parser.add_argument("--limit", type=int, default=None, help="Max results")
    parser.add_argument("--db", help="Database path")

    args = parser.parse_args()
    store = TaskStore(Path(args.db) if args.db else None)
    result = None

    if args.action == "create":
        if not args.user or not args.task:
            print(json.dumps({"success": False, "error": "--user and --task required for create"}))
            sys.exit(1)
        result = store.create_task(args.user, args.task, args.emoji, args.subtask, args.energy)

    elif args.action in ("list", "active"):
        if not args.user:
            print(json.dumps({"success": False, "error": "--user required for list"}))
            sys.exit(1)
        if args.action == "active":
            result = store.list_active_tasks(args.user, limit=args.limit)
        else:
            result = store.list_tasks(args.user, limit=args.limit)

    elif args.action == "get":
        if not args.task_id:
            print(json.dumps({"success": False, "error": "--task-id required for get"}))
            sys.exit(1)
        result = store.get_task(args.task_id)

    elif args.action == "rename":
        if not args.task_id or not args.task:
            print(json.dumps({"success": False, "error": "--task-id and --task required for rename"}))
            sys.exit(1)
        result = store.rename_task(args.task_id, args.task)

    elif args.action == "delete":
        if not args.task_id:
            print(json.dumps({"success": False, "error": "--task-id required for delete"}))
            sys.exit(1)
        result = store.delete_task(args.task_id)

    elif args.action == "complete":
        if not args.task_id or not args.user:
            print(json.dumps({"success": False, "error": "--task-id and --user required for complete"}))
            sys.exit(1)
        result = store.complete_task(args.task_id, args.user)

    elif args.action == "toggle":
        if not args.subtask_id or not args.user:
            print(json.dumps({"success": False, "error": "--subtask-id and --user required for toggle"}))
            sys.exit(1)
        result = store.toggle_subtask(args.subtask_id, not args.undo, args.user)

    elif args.action == "profile":
        if not args.user:
            print(json.dumps({"success": False, "error": "--user required for profile"}))
            sys.exit(1)
        result = store.get_profile(args.user)

    print(json.dumps(_serialize(result), indent=2, ensure_ascii=False))
    if result and not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
