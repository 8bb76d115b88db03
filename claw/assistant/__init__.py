"""Assistant Engine - grounded, confirmed task commands from chat and voice

Philosophy:
    The language model decides WHAT the user asked for. This package decides
    WHICH task they meant and WHETHER it is safe to do it now. Nothing is
    guessed: an ambiguous name asks back, a forgotten "it" asks back, and
    creating or deleting always waits for a "yes".

Components:
    models.py: FunctionCall, FunctionResult, ConversationState, PendingAction, TimerState
    schemas.py: Required parameters per function, tool definitions for the model
    parser/: Name and pronoun resolution, yes/no classifiers, time phrases, input guards
    conversation.py: Last-referenced task/subtask memory
    gate.py: Confirmation gate for create/delete/clear
    timer.py: Focus timer state machine
    context.py: Bounded task context and the per-session state object
    chat_log.py: Durable chat history capped per user
    functions/: Operation handlers
    dispatcher.py: Validates and routes function calls to handlers
    chat.py: One chat turn, end to end
    voice.py: Voice tool-call batches

Usage:
    from claw.assistant.context import AssistantSession
    from claw.assistant.chat import send_message

    session = AssistantSession.load("alice", store)
    turn = await send_message("complete the kitchen task", session, llm)
    print(turn.response)
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "assistant.yaml"

# Chat log database
DB_PATH = DATA_DIR / "assistant.db"

# Context window bounds
MAX_CONTEXT_TASKS = 20
LLM_CONTEXT_MESSAGE_LIMIT = 10
MAX_STORED_MESSAGES = 50

DEFAULT_TIMER_MINUTES = 25

# Functions that must not run without explicit user assent
GATED_FUNCTIONS = ("createTask", "deleteTask", "clearCompletedTasks")

__all__ = [
    "PROJECT_ROOT",
    "DATA_DIR",
    "ARGS_DIR",
    "CONFIG_PATH",
    "DB_PATH",
    "MAX_CONTEXT_TASKS",
    "LLM_CONTEXT_MESSAGE_LIMIT",
    "MAX_STORED_MESSAGES",
    "DEFAULT_TIMER_MINUTES",
    "GATED_FUNCTIONS",
]
