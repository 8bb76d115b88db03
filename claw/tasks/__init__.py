"""Task Engine - gamified task and subtask tracking

Philosophy:
    A big task is only finished when its small steps are. Completing the last
    subtask completes the task and pays out coins, so the list always tells
    the truth about what is left.

Components:
    models.py: Task and Subtask dataclasses, progress helpers
    manager.py: SQLite persistence (TaskStore) with atomic completion
    breakdown.py: AI breakdown of a new task into emoji + subtasks
    recurrence.py: Frequency phrases for repeating tasks

Usage:
    from claw.tasks.manager import TaskStore

    store = TaskStore()
    result = store.create_task("alice", "Clean kitchen", "🧽", ["Dishes", "Counters"])
    task_id = result["data"]["task_id"]
    store.list_active_tasks("alice", limit=20)
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "tasks.db"
CONFIG_PATH = PROJECT_ROOT / "args" / "assistant.yaml"

# Energy classification and the coins a completed task pays out
ENERGY_LEVELS = ("low", "medium", "high")
ENERGY_COINS = {"high": 3, "medium": 2, "low": 1}
ENERGY_EMOJI = {"high": "🌳", "medium": "🌿", "low": "🌱"}
DEFAULT_ENERGY = "medium"

RECURRENCE_TYPES = ("daily", "weekdays", "weekly", "monthly", "yearly")

DEFAULT_TASK_EMOJI = "📝"
DEFAULT_SUBTASK_EMOJI = "▪️"

__all__ = [
    "PROJECT_ROOT",
    "DB_PATH",
    "CONFIG_PATH",
    "ENERGY_LEVELS",
    "ENERGY_COINS",
    "ENERGY_EMOJI",
    "DEFAULT_ENERGY",
    "RECURRENCE_TYPES",
    "DEFAULT_TASK_EMOJI",
    "DEFAULT_SUBTASK_EMOJI",
]
