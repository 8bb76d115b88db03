"""Tests for claw/tasks/manager.py

The task store persists tasks and subtasks per user. Key functionality:
- Create tasks with ordered subtasks in one transaction
- Keep a task's completion in step with its subtasks
- Credit coins exactly once per completed task
- Cascade subtask deletion with the task

These tests ensure reliable task management.
"""

from datetime import datetime, timedelta

import pytest

from claw.tasks.manager import TaskStore


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _create(store, user_id, name="Clean kitchen", subtasks=("Dishes", "Counters"), energy="medium"):
    result = store.create_task(user_id, name, "🧽", list(subtasks), energy)
    assert result["success"] is True
    return result["data"]["task"]


# ─────────────────────────────────────────────────────────────────────────────
# Task Creation Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestCreateTask:
    """Tests for task creation."""

    def test_creates_task_with_subtasks_in_order(self, task_store, mock_user_id):
        """Subtasks keep the order they were given."""
        task = _create(task_store, mock_user_id, subtasks=("First", "Second", "Third"))

        assert task.name == "Clean kitchen"
        assert task.emoji == "🧽"
        assert [st.name for st in task.subtasks] == ["First", "Second", "Third"]
        assert [st.sort_order for st in task.subtasks] == [0, 1, 2]
        assert task.completed is False

    def test_accepts_subtask_dicts(self, task_store, mock_user_id):
        """Subtasks may carry their own emoji."""
        result = task_store.create_task(
            mock_user_id, "Bake", subtasks=[{"name": "Preheat", "emoji": "🔥"}, {"name": "Mix"}]
        )

        subtasks = result["data"]["task"].subtasks
        assert subtasks[0].emoji == "🔥"
        assert subtasks[1].emoji == "▪️"

    def test_defaults_emoji(self, task_store, mock_user_id):
        result = task_store.create_task(mock_user_id, "Plain task")

        assert result["data"]["task"].emoji == "📝"

    def test_generates_unique_id(self, task_store, mock_user_id):
        """Should generate unique IDs for each task."""
        first = _create(task_store, mock_user_id, name="task 1")
        second = _create(task_store, mock_user_id, name="task 2")

        assert first.id != second.id

    def test_rejects_invalid_energy_level(self, task_store, mock_user_id):
        """Should reject invalid energy level."""
        result = task_store.create_task(mock_user_id, "task", energy_tag="super_high")

        assert result["success"] is False
        assert "Invalid energy level" in result["error"]


# ─────────────────────────────────────────────────────────────────────────────
# Listing Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestListTasks:
    """Tests for task listing."""

    def test_lists_most_recently_updated_first(self, task_store, mock_user_id):
        old = _create(task_store, mock_user_id, name="Old")
        new = _create(task_store, mock_user_id, name="New")

        tasks = task_store.list_tasks(mock_user_id)["data"]["tasks"]
        assert [t.id for t in tasks] == [new.id, old.id]

        task_store.rename_task(old.id, "Old renamed")
        tasks = task_store.list_tasks(mock_user_id)["data"]["tasks"]
        assert tasks[0].id == old.id

    def test_active_excludes_completed(self, task_store, mock_user_id):
        done = _create(task_store, mock_user_id, name="Done")
        open_task = _create(task_store, mock_user_id, name="Open")
        task_store.complete_task(done.id, mock_user_id)

        active = task_store.list_active_tasks(mock_user_id)["data"]["tasks"]
        assert [t.id for t in active] == [open_task.id]

    def test_limit(self, task_store, mock_user_id):
        for i in range(5):
            _create(task_store, mock_user_id, name=f"Task {i}")

        result = task_store.list_active_tasks(mock_user_id, limit=3)
        assert result["data"]["count"] == 3

    def test_scoped_to_user(self, task_store, mock_user_id):
        _create(task_store, mock_user_id, name="Mine")
        _create(task_store, "someone_else", name="Theirs")

        names = [t.name for t in task_store.list_tasks(mock_user_id)["data"]["tasks"]]
        assert names == ["Mine"]

    def test_recent_tasks_since(self, task_store, mock_user_id):
        _create(task_store, mock_user_id, name="Fresh")

        recent = task_store.list_recent_tasks(mock_user_id, datetime.now() - timedelta(seconds=30))
        later = task_store.list_recent_tasks(mock_user_id, datetime.now() + timedelta(minutes=1))

        assert [t.name for t in recent["data"]["tasks"]] == ["Fresh"]
        assert later["data"]["count"] == 0


# ─────────────────────────────────────────────────────────────────────────────
# Completion Invariant Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestCompletion:
    """A task is complete exactly when all of its subtasks are."""

    def test_last_subtask_completes_task(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id, energy="high")
        first, second = task.subtasks

        result = task_store.toggle_subtask(first.id, True, mock_user_id)
        assert result["data"]["task_completed"] is False

        result = task_store.toggle_subtask(second.id, True, mock_user_id)
        assert result["data"]["task_completed"] is True
        assert result["data"]["coins_awarded"] == 3

        stored = task_store.get_task(task.id)["data"]["task"]
        assert stored.completed is True
        assert stored.completed_at is not None

    def test_uncompleting_subtask_reopens_task(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)
        for st in task.subtasks:
            task_store.toggle_subtask(st.id, True, mock_user_id)

        task_store.toggle_subtask(task.subtasks[0].id, False, mock_user_id)

        stored = task_store.get_task(task.id)["data"]["task"]
        assert stored.completed is False
        assert stored.completed_at is None

    def test_complete_task_completes_all_subtasks(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id, energy="low")

        result = task_store.complete_task(task.id, mock_user_id)

        assert result["data"]["coins_awarded"] == 1
        stored = task_store.get_task(task.id)["data"]["task"]
        assert stored.completed is True
        assert all(st.completed for st in stored.subtasks)

    def test_coins_credited_once(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id, energy="medium")

        task_store.complete_task(task.id, mock_user_id)
        again = task_store.complete_task(task.id, mock_user_id)

        assert again["data"]["coins_awarded"] == 0
        profile = task_store.get_profile(mock_user_id)["data"]
        assert profile["coins"] == 2
        assert profile["completed_tasks"] == 1

    def test_deleting_last_open_subtask_completes_task(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)
        done, still_open = task.subtasks
        task_store.toggle_subtask(done.id, True, mock_user_id)

        result = task_store.delete_subtask(still_open.id, mock_user_id)

        assert result["data"]["task_completed"] is True
        assert task_store.get_task(task.id)["data"]["task"].completed is True

    def test_complete_unknown_task(self, task_store, mock_user_id):
        result = task_store.complete_task("missing", mock_user_id)

        assert result["success"] is False


# ─────────────────────────────────────────────────────────────────────────────
# Subtask Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSubtasks:
    """Tests for subtask add/rename/delete."""

    def test_add_appends_after_last(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)

        result = task_store.add_subtask(task.id, "Mop floor")

        assert result["data"]["subtask"].sort_order == 2
        stored = task_store.get_task(task.id)["data"]["task"]
        assert stored.subtasks[-1].name == "Mop floor"

    def test_add_after_delete_keeps_order_unique(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id, subtasks=("A", "B", "C"))
        task_store.delete_subtask(task.subtasks[1].id, mock_user_id)

        result = task_store.add_subtask(task.id, "D")

        assert result["success"] is True
        orders = [st.sort_order for st in task_store.get_task(task.id)["data"]["task"].subtasks]
        assert len(orders) == len(set(orders))

    def test_rename_subtask(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)

        task_store.rename_subtask(task.subtasks[0].id, "Wash dishes")

        assert task_store.get_task(task.id)["data"]["task"].subtasks[0].name == "Wash dishes"

    def test_unknown_subtask(self, task_store, mock_user_id):
        assert task_store.toggle_subtask("missing", True, mock_user_id)["success"] is False
        assert task_store.rename_subtask("missing", "x")["success"] is False
        assert task_store.delete_subtask("missing", mock_user_id)["success"] is False


# ─────────────────────────────────────────────────────────────────────────────
# Deletion Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestDeletion:
    """Tests for task deletion."""

    def test_delete_cascades_to_subtasks(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)

        task_store.delete_task(task.id)

        conn = task_store.get_connection()
        try:
            count = conn.execute("SELECT COUNT(*) FROM subtasks WHERE task_id = ?", (task.id,)).fetchone()[0]
        finally:
            conn.close()
        assert count == 0
        assert task_store.get_task(task.id)["success"] is False

    def test_delete_missing_task(self, task_store):
        assert task_store.delete_task("missing")["success"] is False

    def test_clear_completed(self, task_store, mock_user_id):
        done = _create(task_store, mock_user_id, name="Done")
        _create(task_store, mock_user_id, name="Open")
        task_store.complete_task(done.id, mock_user_id)

        result = task_store.clear_completed_tasks(mock_user_id)

        assert result["data"]["count"] == 1
        names = [t.name for t in task_store.list_tasks(mock_user_id)["data"]["tasks"]]
        assert names == ["Open"]


# ─────────────────────────────────────────────────────────────────────────────
# Reminder and Recurrence Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSchedulingFields:
    def test_set_and_clear_reminder(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)

        task_store.update_reminder(task.id, "2026-03-11T15:00:00")
        assert task_store.get_task(task.id)["data"]["task"].reminder_at == "2026-03-11T15:00:00"

        task_store.update_reminder(task.id, None)
        assert task_store.get_task(task.id)["data"]["task"].reminder_at is None

    def test_set_recurrence(self, task_store, mock_user_id):
        task = _create(task_store, mock_user_id)

        task_store.set_recurrence(task.id, "weekly")

        assert task_store.get_task(task.id)["data"]["task"].recurrence == {"type": "weekly"}

    @pytest.mark.parametrize("bad", ["hourly", "fortnightly"])
    def test_rejects_unknown_recurrence(self, task_store, mock_user_id, bad):
        task = _create(task_store, mock_user_id)

        assert task_store.set_recurrence(task.id, bad)["success"] is False

    def test_update_missing_task(self, task_store):
        assert task_store.rename_task("missing", "x")["success"] is False


# ─────────────────────────────────────────────────────────────────────────────
# Storage Error Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestStorageErrors:
    def test_unwritable_database_returns_failure(self, tmp_path, mock_user_id):
        """A database path that is a directory fails softly."""
        bad_path = tmp_path / "not_a_db"
        bad_path.mkdir()
        store = TaskStore(bad_path)

        result = store.list_tasks(mock_user_id)

        assert result["success"] is False
        assert "error" in result
