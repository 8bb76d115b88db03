"""
Tool: Chat Log
Purpose: Durable per-user chat history for the assistant

Keeps the most recent messages per user (50 by default, oldest dropped
first) plus the last referenced task/subtask ids, so a reloaded chat picks
up where it left off, pronouns included.

Usage:
    from claw.assistant.chat_log import ChatLog

    log = ChatLog()
    log.save_message("alice", ChatMessage(role="user", content="hi"))
    messages = log.load_messages("alice")

Dependencies:
    - sqlite3 (stdlib)
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from claw.assistant import DB_PATH, MAX_STORED_MESSAGES
from claw.assistant.models import ChatMessage, ConversationState

logger = logging.getLogger(__name__)


class ChatLog:
    """SQLite-backed chat history, capped per user."""

    def __init__(self, db_path: Path | None = None, max_messages: int = MAX_STORED_MESSAGES):
        self.db_path = Path(db_path) if db_path else DB_PATH
        self.max_messages = min(max_messages, MAX_STORED_MESSAGES)

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        conn.executescript("""
            CREATE TABLE IF NOT EXISTS chat_messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                role TEXT NOT NULL CHECK(role IN ('user', 'assistant')),
                content TEXT NOT NULL,
                function_calls TEXT,
                timestamp TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS chat_sessions (
                user_id TEXT PRIMARY KEY,
                last_referenced_task_id TEXT,
                last_referenced_subtask_id TEXT,
                last_updated TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_chat_messages_user ON chat_messages(user_id, id);
        """)
        return conn

    def save_message(self, user_id: str, message: ChatMessage) -> None:
        """Append a message, trimming the user's oldest beyond the cap."""
        conn = self.get_connection()
        try:
            with conn:
                conn.execute(
                    """INSERT INTO chat_messages (user_id, role, content, function_calls, timestamp)
                       VALUES (?, ?, ?, ?, ?)""",
                    (
                        user_id,
                        message.role,
                        message.content,
                        json.dumps(message.function_calls) if message.function_calls else None,
                        message.timestamp.isoformat(),
                    ),
                )
                conn.execute(
                    """DELETE FROM chat_messages
                       WHERE user_id = ? AND id NOT IN (
                           SELECT id FROM chat_messages WHERE user_id = ?
                           ORDER BY id DESC LIMIT ?
                       )""",
                    (user_id, user_id, self.max_messages),
                )
                self._touch_session(conn, user_id)
        finally:
            conn.close()

    def load_messages(self, user_id: str) -> list[ChatMessage]:
        """The user's stored messages, oldest first."""
        conn = self.get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM chat_messages WHERE user_id = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()

        return [
            ChatMessage(
                role=row["role"],
                content=row["content"],
                timestamp=datetime.fromisoformat(row["timestamp"]),
                function_calls=json.loads(row["function_calls"]) if row["function_calls"] else [],
            )
            for row in rows
        ]

    def clear(self, user_id: str) -> None:
        """Forget a user's chat, including remembered references."""
        conn = self.get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM chat_messages WHERE user_id = ?", (user_id,))
                conn.execute("DELETE FROM chat_sessions WHERE user_id = ?", (user_id,))
        finally:
            conn.close()

    def load_conversation_state(self, user_id: str) -> ConversationState:
        conn = self.get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM chat_sessions WHERE user_id = ?", (user_id,)
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return ConversationState()
        return ConversationState(
            last_referenced_task_id=row["last_referenced_task_id"],
            last_referenced_subtask_id=row["last_referenced_subtask_id"],
        )

    def save_conversation_state(self, user_id: str, state: ConversationState) -> None:
        conn = self.get_connection()
        try:
            with conn:
                conn.execute(
                    """INSERT INTO chat_sessions
                       (user_id, last_referenced_task_id, last_referenced_subtask_id, last_updated)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT(user_id) DO UPDATE SET
                           last_referenced_task_id = excluded.last_referenced_task_id,
                           last_referenced_subtask_id = excluded.last_referenced_subtask_id,
                           last_updated = excluded.last_updated""",
                    (
                        user_id,
                        state.last_referenced_task_id,
                        state.last_referenced_subtask_id,
                        datetime.now().isoformat(),
                    ),
                )
        finally:
            conn.close()

    def _touch_session(self, conn: sqlite3.Connection, user_id: str) -> None:
        conn.execute(
            """INSERT INTO chat_sessions (user_id, last_updated) VALUES (?, ?)
               ON CONFLICT(user_id) DO UPDATE SET last_updated = excluded.last_updated""",
            (user_id, datetime.now().isoformat()),
        )
