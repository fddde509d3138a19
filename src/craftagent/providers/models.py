"""
Provider data models for CraftAgent.

Defines the parsed model reply handed to the conversation loop.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from craftagent.functions.models import ToolCallRequest


class ToolChoice(str, Enum):
    """Whether the model may answer in plain text or must call a tool."""

    AUTO = "auto"
    REQUIRED = "required"


class ModelReply(BaseModel):
    """First choice of a chat completion, reduced to what the loop needs."""

    content: Optional[str] = None
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)
    reasoning: Optional[str] = None  # Reasoning output some local models return instead of content
    finish_reason: Optional[str] = None

    @property
    def has_tool_calls(self) -> bool:
        """Whether the model requested any actions."""
        return len(self.tool_calls) > 0

    @property
    def is_anomalous(self) -> bool:
        """Neither content nor tool calls: the model failed to produce a usable turn."""
        return not self.tool_calls and self.content is None
