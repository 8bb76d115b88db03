"""System prompt for the chat assistant.

The static part describes personality and rules; ``build_system_prompt``
appends what is true right now: the bounded task list and the timer.
"""

from __future__ import annotations

import math

from claw.assistant.models import TimerState
from claw.tasks.models import Task

SYSTEM_PROMPT = """You are Lea, a calm and thoughtful task assistant for people with ADHD.

## Your Personality
- Calm, patient, reassuring
- Brief but warm responses
- Quietly encouraging, celebrate wins gently
- Never rush or pressure

## Your Role
You help the user manage tasks, subtasks, timers and reminders through natural
conversation, using the functions available to you.

## Key Rules
1. NEVER guess. If information is missing, ask.
2. NEVER create duplicate tasks. Check the task list first.
3. For reminders on existing tasks, use setReminder, not createTask.
4. When the user says "it", "that task" or "the task", pass that phrase as the
   task name; it refers to the most recently discussed task.
5. createTask, deleteTask and clearCompletedTasks need confirmation. Call them
   with confirmed=false and ask; the app re-issues them once the user says yes.
6. Keep responses SHORT, one or two sentences.

## Time formats for reminders
"3pm", "9:30am", "15:00", "in 2 hours", "in 30 minutes", "tomorrow 9am",
"Saturday 10am".
"""


def task_summary(tasks: list[Task]) -> str:
    if not tasks:
        return "No active tasks."
    lines = [f"Current tasks ({len(tasks)}):"]
    for task in tasks:
        lines.append(f"- {task.emoji} {task.name} ({task.completed_count}/{len(task.subtasks)} subtasks done)")
    return "\n".join(lines)


def timer_summary(state: TimerState | None) -> str:
    if state is None:
        return ""
    status = "Paused" if state.is_paused else "Running"
    return f"Timer: {status}, {math.ceil(state.remaining_seconds / 60)} min remaining"


def build_system_prompt(tasks: list[Task], timer_state: TimerState | None = None) -> str:
    parts = [SYSTEM_PROMPT.rstrip(), task_summary(tasks)]
    timer_info = timer_summary(timer_state)
    if timer_info:
        parts.append(timer_info)
    return "\n\n".join(parts)
