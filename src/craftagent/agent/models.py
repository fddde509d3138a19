"""Data models for the conversation loop."""

from enum import Enum

from pydantic import BaseModel, Field

from craftagent.agent.prompts import (
    DEFAULT_REPEAT_WARNING,
    DEFAULT_STEP_LIMIT_MESSAGE,
    DEFAULT_SYSTEM_PROMPT,
)


class LoopState(str, Enum):
    """Where the conversation loop currently is within a run."""

    AWAITING_MODEL = "awaiting_model"  # Request in flight
    EXECUTING_TOOLS = "executing_tools"  # Dispatching a batch of tool calls
    TERMINATED = "terminated"  # Run finished (or not started)


class LoopConfig(BaseModel):
    """Configuration for conversation loop execution."""

    max_steps: int = Field(
        default=25,
        ge=1,
        le=200,
        description="Maximum model requests per run",
    )

    repeat_history: int = Field(
        default=3,
        ge=1,
        le=20,
        description="How many recent tool calls are remembered for repeat detection",
    )

    repeat_warning: bool = Field(
        default=True,
        description="Warn the model when it keeps calling the same tool",
    )

    repeat_warning_message: str = Field(
        default=DEFAULT_REPEAT_WARNING,
        description="Warning added to the tool result; {name} and {count} are substituted",
    )

    persist_status_message: bool = Field(
        default=False,
        description="Keep the per-request status message in the history",
    )

    failure_message: str = Field(
        default="Error in LLM request",
        description="Reply returned when the model service fails",
    )

    step_limit_message: str = Field(
        default=DEFAULT_STEP_LIMIT_MESSAGE,
        description="Reply returned when max_steps is exhausted",
    )

    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System prompt template; {username} is substituted",
    )
