"""
Tool: Task Breakdown
Purpose: Turn a new task description into an emoji, a few subtasks and an energy tag

"Clean the garage" is hard to start. "Clear the floor", "Sort the shelves",
"Take out the recycling" are not. The assistant asks a small model for this
breakdown when it creates a task, and never lets a bad answer block creation:
any failure (no key, timeout, malformed reply) falls back to a single
"Get started" subtask.

Usage:
    python -m claw.tasks.breakdown --task "clean the garage"

Dependencies:
    - anthropic (breakdown model)
    - PyYAML (config via claw.assistant.config)

Output:
    JSON with emoji, subtasks and energy_tag
"""

import argparse
import asyncio
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import anthropic

from . import DEFAULT_ENERGY, DEFAULT_SUBTASK_EMOJI, DEFAULT_TASK_EMOJI, ENERGY_LEVELS

logger = logging.getLogger(__name__)

DEFAULT_BREAKDOWN_MODEL = "claude-3-5-haiku-latest"
DEFAULT_TIMEOUT_SECONDS = 10.0
MAX_SUBTASKS = 7

BREAKDOWN_PROMPT = """You break tasks down for people who find getting started hard.

Given a task, reply with JSON only:
{
  "emoji": "one emoji for the task",
  "subtasks": [{"name": "short concrete step", "emoji": "one emoji"}],
  "energy_tag": "low" | "medium" | "high"
}

Rules:
1. Three to five subtasks, each small enough to finish in one sitting
2. The first subtask is the easiest possible starting point
3. energy_tag is how much effort the whole task takes
"""

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class Breakdown:
    emoji: str = DEFAULT_TASK_EMOJI
    subtasks: List[Dict[str, str]] = field(
        default_factory=lambda: [{"name": "Get started", "emoji": DEFAULT_SUBTASK_EMOJI}]
    )
    energy_tag: str = DEFAULT_ENERGY
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emoji": self.emoji,
            "subtasks": self.subtasks,
            "energy_tag": self.energy_tag,
            "fallback": self.fallback,
        }


def fallback_breakdown() -> Breakdown:
    return Breakdown(fallback=True)


def parse_breakdown(content: str) -> Breakdown:
    """
    Parse a model reply into a Breakdown.

    The model may wrap the JSON in prose, so the outermost {...} is taken.
    Subtasks may be plain strings or {name, emoji} objects.

    Raises:
        ValueError: no JSON object, or no emoji/subtask list
    """
    match = JSON_OBJECT.search(content)
    if not match:
        raise ValueError("Could not find JSON in breakdown response")

    parsed = json.loads(match.group(0))
    raw_subtasks = parsed.get("subtasks") or parsed.get("subTasks")
    if not parsed.get("emoji") or not isinstance(raw_subtasks, list) or not raw_subtasks:
        raise ValueError("Malformed breakdown response")

    subtasks = []
    for item in raw_subtasks[:MAX_SUBTASKS]:
        if isinstance(item, str):
            subtasks.append({"name": item, "emoji": DEFAULT_SUBTASK_EMOJI})
        elif isinstance(item, dict) and item.get("name"):
            subtasks.append({"name": item["name"], "emoji": item.get("emoji") or DEFAULT_SUBTASK_EMOJI})
    if not subtasks:
        raise ValueError("Breakdown response has no usable subtasks")

    energy = parsed.get("energy_tag") or parsed.get("energyTag")
    return Breakdown(
        emoji=parsed["emoji"],
        subtasks=subtasks,
        energy_tag=energy if energy in ENERGY_LEVELS else DEFAULT_ENERGY,
    )


class TaskBreakdown:
    """Asks the breakdown model for a task plan, falling back on any failure."""

    def __init__(
        self,
        client: Optional[anthropic.AsyncAnthropic] = None,
        model: str = DEFAULT_BREAKDOWN_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        enabled: bool = True,
        api_key_env: str = "ANTHROPIC_API_KEY",
    ):
        self._client = client
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled
        self.api_key_env = api_key_env

    def _get_client(self) -> Optional[anthropic.AsyncAnthropic]:
        if self._client is None:
            api_key = os.environ.get(self.api_key_env)
            if not api_key:
                return None
            self._client = anthropic.AsyncAnthropic(api_key=api_key)
        return self._client

    async def breakdown(self, description: str) -> Breakdown:
        if not self.enabled:
            return fallback_breakdown()

        client = self._get_client()
        if client is None:
            logger.debug(f"{self.api_key_env} not set, using fallback breakdown")
            return fallback_breakdown()

        try:
            message = await asyncio.wait_for(
                client.messages.create(
                    model=self.model,
                    max_tokens=512,
                    system=BREAKDOWN_PROMPT,
                    messages=[{"role": "user", "content": description}],
                ),
                timeout=self.timeout_seconds,
            )
            text = "".join(
                block.text for block in message.content if getattr(block, "type", None) == "text"
            )
            return parse_breakdown(text)
        except asyncio.TimeoutError:
            logger.warning(f"Breakdown timed out after {self.timeout_seconds}s")
        except (anthropic.APIError, ValueError) as e:
            logger.warning(f"Breakdown failed, using fallback: {e}")
        return fallback_breakdown()


def main():
    parser = argparse.ArgumentParser(description="Task Breakdown - emoji, subtasks and energy for a task")
    parser.add_argument("--task", required=True, help="Task description")
    parser.add_argument("--model", default=DEFAULT_BREAKDOWN_MODEL, help="Breakdown model")

    args = parser.parse_args()
    result = asyncio.run(TaskBreakdown(model=args.model).breakdown(args.task))
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
