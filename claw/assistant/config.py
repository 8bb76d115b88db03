from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from claw.assistant import (
    CONFIG_PATH,
    LLM_CONTEXT_MESSAGE_LIMIT,
    MAX_CONTEXT_TASKS,
    MAX_STORED_MESSAGES,
)

logger = logging.getLogger(__name__)


# =============================================================================
# AssistantConfig (args/assistant.yaml)
# =============================================================================

class LLMConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    model: str = Field(default="claude-sonnet-4-20250514")
    max_tokens: int = Field(default=1024, ge=1)
    api_key_env: str = Field(default="ANTHROPIC_API_KEY")


class ContextConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_tasks: int = Field(default=MAX_CONTEXT_TASKS, ge=1, le=MAX_CONTEXT_TASKS)
    llm_history: int = Field(default=LLM_CONTEXT_MESSAGE_LIMIT, ge=0, le=LLM_CONTEXT_MESSAGE_LIMIT)
    stored_messages: int = Field(default=MAX_STORED_MESSAGES, ge=1, le=MAX_STORED_MESSAGES)


class TimerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    default_minutes: int = Field(default=25, ge=1)


class BreakdownConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    model: str = Field(default="claude-3-5-haiku-latest")
    timeout_seconds: float = Field(default=10.0, gt=0)
    enabled: bool = Field(default=True)


class AssistantConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    llm: LLMConfig = Field(default_factory=LLMConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)
    breakdown: BreakdownConfig = Field(default_factory=BreakdownConfig)


def load_config(path: Path | None = None) -> AssistantConfig:
    """Load args/assistant.yaml, falling back to defaults if missing or invalid."""
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return AssistantConfig.model_validate(raw)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning(f"Config validation failed for {yaml_path}: {e}, using defaults")
        return AssistantConfig()
