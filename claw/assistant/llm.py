"""Language-model collaborator.

``AssistantLLM`` is the boundary the chat turn depends on: a system prompt,
bounded history and tool definitions in; text and structured function calls
out. ``AnthropicLLM`` implements it with the Messages API tool-use
interface.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Protocol

import anthropic

from claw.assistant.config import LLMConfig
from claw.assistant.models import ChatMessage, FunctionCall

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """The language model could not be reached or returned nothing usable."""


@dataclass
class LLMReply:
    text: str = ""
    function_calls: list[FunctionCall] = field(default_factory=list)


class AssistantLLM(Protocol):
    async def complete(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> LLMReply: ...


def build_messages(history: list[ChatMessage], user_message: str) -> list[dict[str, Any]]:
    """Turn chat history plus the new message into alternating Messages API turns.

    Leading assistant turns are dropped and consecutive same-role turns merged,
    since the API requires the conversation to open with the user and alternate.
    """
    messages: list[dict[str, Any]] = []
    for message in [*history, ChatMessage(role="user", content=user_message)]:
        if not message.content:
            continue
        if not messages and message.role != "user":
            continue
        if messages and messages[-1]["role"] == message.role:
            messages[-1]["content"] += "\n\n" + message.content
        else:
            messages.append({"role": message.role, "content": message.content})
    return messages


def parse_reply(content: list[Any]) -> LLMReply:
    """Split response content blocks into text and function calls."""
    texts = []
    calls = []
    for block in content:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            texts.append(block.text)
        elif block_type == "tool_use":
            arguments = block.input
            if isinstance(arguments, str):
                try:
                    arguments = json.loads(arguments)
                except json.JSONDecodeError:
                    logger.error(f"Failed to parse function arguments: {arguments!r}")
                    arguments = {}
            calls.append(FunctionCall(name=block.name, arguments=dict(arguments or {}), id=block.id))
    return LLMReply(text="".join(texts).strip(), function_calls=calls)


class AnthropicLLM:
    """AssistantLLM over the Anthropic Messages API."""

    def __init__(
        self,
        config: LLMConfig | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.config = config or LLMConfig()
        self._client = client

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            api_key = os.environ.get(self.config.api_key_env)
            if not api_key:
                raise LLMError(f"{self.config.api_key_env} not set")
            self._client = anthropic.AsyncAnthropic(api_key=api_key)
        return self._client

    async def complete(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> LLMReply:
        client = self._get_client()
        try:
            response = await client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=system,
                messages=messages,
                tools=tools,
            )
        except anthropic.APIError as e:
            raise LLMError(f"Messages API call failed: {e}") from e

        reply = parse_reply(response.content)
        if not reply.text and not reply.function_calls:
            raise LLMError("No response from assistant")
        return reply
