"""Tests for claw/assistant/functions/query_functions.py"""

import pytest

from claw.assistant.functions.query_functions import get_next_subtask, get_task_details, list_tasks
from claw.assistant.models import ErrorCode
from tests.conftest import make_task


class TestListTasks:
    @pytest.mark.asyncio
    async def test_lists_active_tasks(self, make_context, sample_tasks):
        result = await list_tasks({}, make_context(tasks=sample_tasks))

        assert result.success
        assert result.message.startswith("You have 4 active tasks: ")
        assert "📝 Clean kitchen (0/3 done)" in result.message
        assert len(result.data["tasks"]) == 4

    @pytest.mark.asyncio
    async def test_no_tasks(self, make_context):
        result = await list_tasks({}, make_context(tasks=[]))

        assert result.message == "You don't have any active tasks. Would you like to create one?"


class TestGetTaskDetails:
    @pytest.mark.asyncio
    async def test_details(self, make_context, sample_tasks):
        result = await get_task_details({"taskName": "alpha"}, make_context(tasks=sample_tasks))

        assert result.message == "📝 Project Alpha: 50% complete (1/2). Subtasks: ○ Write outline; ✓ Draft intro."
        assert result.data["task_id"] == "project_alpha"

    @pytest.mark.asyncio
    async def test_task_without_subtasks(self, make_context, sample_tasks):
        result = await get_task_details({"taskName": "taxes"}, make_context(tasks=sample_tasks))

        assert result.message.endswith("No subtasks yet.")

    @pytest.mark.asyncio
    async def test_ambiguous(self, make_context, sample_tasks):
        result = await get_task_details({"taskName": "project"}, make_context(tasks=sample_tasks))

        assert result.error == ErrorCode.DISAMBIGUATION_NEEDED


class TestGetNextSubtask:
    @pytest.mark.asyncio
    async def test_prefers_most_progressed_task(self, make_context, sample_tasks):
        result = await get_next_subtask({}, make_context(tasks=sample_tasks))

        assert result.message == 'Next up: "Write outline" from "Project Alpha".'
        assert result.data == {"task_id": "project_alpha", "subtask_id": "project_alpha_st0"}

    @pytest.mark.asyncio
    async def test_prefers_timer_task(self, make_context, sample_tasks, focus_timer):
        focus_timer.set_active_task("clean_kitchen")
        focus_timer.start(600)

        result = await get_next_subtask({}, make_context(tasks=sample_tasks))

        assert result.message == 'You\'re working on "Clean kitchen". Next up: Wash dishes.'

    @pytest.mark.asyncio
    async def test_no_subtasks_anywhere(self, make_context):
        result = await get_next_subtask({}, make_context(tasks=[make_task("Taxes")]))

        assert result.success
        assert "any active tasks with subtasks" in result.message
