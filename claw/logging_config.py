"""
Logging for the assistant: stdlib loggers rendered by structlog.

The API app calls ``setup_logging()`` at import and the CLI calls it with
``--log-level``. Chat turns and voice batches call ``bind_session()`` so a
turn's lines can be grouped by user and channel.

Usage:
    from claw.logging_config import setup_logging
    setup_logging()
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Route stdlib log records from every claw module through structlog.

    Each line carries the ``user_id`` and ``channel`` (chat, voice, cli)
    bound by ``bind_session``, plus level, logger name and an ISO timestamp.
    The dispatcher's per-call lines (function, success, error code,
    elapsed ms) come through here unchanged.

    Args:
        level: Log level name. Defaults to CLAW_LOG_LEVEL, then INFO.
        json_output: JSON lines instead of console output. Defaults to
            CLAW_LOG_FORMAT=json.
    """
    if level is None:
        level = os.environ.get("CLAW_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("CLAW_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # Model client request lines only at WARNING and above
    for name in ("httpx", "anthropic"):
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def bind_session(user_id: str, channel: str) -> None:
    """Attach the user and channel to every log line of the current turn."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(user_id=user_id, channel=channel)


__all__ = ["bind_session", "setup_logging"]
