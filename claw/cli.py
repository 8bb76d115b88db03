#!/usr/bin/env python3
"""
Claw Command Line Interface

Main entry point for the `claw` command.

Usage:
    claw chat --user alice        # Talk to the assistant in the terminal
    claw tasks --user alice       # List a user's tasks
    claw serve                    # Start the assistant API server
    claw --version                # Show version
"""

import argparse
import sys


def cmd_chat(args):
    """Interactive chat with the assistant.

    Uses the same session, gate and dispatcher as the API, with a local focus
    timer. Type "quit" or press Ctrl+D to leave.
    """
    import asyncio

    from claw.assistant.chat import send_message
    from claw.assistant.chat_log import ChatLog
    from claw.assistant.config import load_config
    from claw.assistant.context import AssistantSession
    from claw.assistant.llm import AnthropicLLM
    from claw.assistant.timer import FocusTimer
    from claw.logging_config import bind_session, setup_logging
    from claw.tasks.breakdown import TaskBreakdown
    from claw.tasks.manager import TaskStore

    setup_logging(level=args.log_level)
    config = load_config()
    bind_session(args.user, "cli")

    breakdown = None
    if config.breakdown.enabled:
        breakdown = TaskBreakdown(
            model=config.breakdown.model,
            timeout_seconds=config.breakdown.timeout_seconds,
            api_key_env=config.llm.api_key_env,
        )

    session = AssistantSession.load(
        args.user,
        TaskStore(),
        chat_log=ChatLog(max_messages=config.context.stored_messages),
        timer=FocusTimer(),
        breakdown=breakdown,
        config=config,
    )
    llm = AnthropicLLM(config.llm)

    print(f"Chatting as {args.user}. Type 'quit' to exit.\n")

    async def _loop():
        while True:
            try:
                message = input("you> ").strip()
            except EOFError:
                print()
                return
            if not message:
                continue
            if message.lower() in ("quit", "exit"):
                return
            turn = await send_message(message, session, llm)
            print(f"claw> {turn.response}\n")

    try:
        asyncio.run(_loop())
    except KeyboardInterrupt:
        print()


def cmd_tasks(args):
    """List a user's tasks with subtask progress."""
    from claw.tasks import ENERGY_EMOJI
    from claw.tasks.manager import TaskStore

    result = TaskStore().list_tasks(args.user, completed=None if args.all else False)
    if not result["success"]:
        print(f"Error: {result['error']}")
        return 1

    tasks = result["data"]["tasks"]
    if not tasks:
        print("No tasks.")
        return

    for task in tasks:
        energy = ENERGY_EMOJI.get(task.energy_tag, "") if task.energy_tag else ""
        status = "✓" if task.completed else " "
        print(f"[{status}] {task.summary()} {energy}".rstrip())
        for subtask in task.subtasks:
            mark = "✓" if subtask.completed else "○"
            print(f"      {mark} {subtask.emoji} {subtask.name}")


def cmd_serve(args):
    """Start the assistant API server."""
    import uvicorn

    print(f"Starting Claw Assistant at http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "claw.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


def cmd_version(args):
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        v = version("claw-assistant")
    except PackageNotFoundError:
        v = "0.1.0 (development)"

    print(f"Claw version {v}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="claw",
        description="Claw - task assistant for chat and voice",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Chat subcommand
    chat_parser = subparsers.add_parser("chat", help="Chat with the assistant")
    chat_parser.add_argument("--user", required=True, help="User ID")
    chat_parser.add_argument(
        "--log-level", default="WARNING", help="Log level (default: WARNING)"
    )
    chat_parser.set_defaults(func=cmd_chat)

    # Tasks subcommand
    tasks_parser = subparsers.add_parser("tasks", help="List a user's tasks")
    tasks_parser.add_argument("--user", required=True, help="User ID")
    tasks_parser.add_argument(
        "--all", action="store_true", help="Include completed tasks"
    )
    tasks_parser.set_defaults(func=cmd_tasks)

    # Serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", type=int, default=8080, help="Port to bind to (default: 8080)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if args.version:
        cmd_version(args)
        return

    if not args.command:
        parser.print_help()
        return

    result = args.func(args)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
