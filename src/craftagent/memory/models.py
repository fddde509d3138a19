"""Conversation history models: messages and per-agent conversation state."""

from collections import deque
from collections.abc import Iterable
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from craftagent.functions.models import ToolCallRequest


class MessageRole(str, Enum):
    """Role of a conversation message."""

    SYSTEM = "system"
    DEVELOPER = "developer"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ConversationMessage(BaseModel):
    """A single message in the conversation history."""

    model_config = ConfigDict(use_enum_values=True)

    role: MessageRole
    content: Optional[Any] = None
    name: Optional[str] = None  # Speaker username for user messages
    tool_calls: Optional[list[ToolCallRequest]] = None  # Assistant turns requesting actions
    tool_call_id: Optional[str] = None  # Tool results: the call they answer
    tool_name: Optional[str] = None  # Tool results: used for pruning, never sent

    @classmethod
    def system(cls, content: str) -> "ConversationMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def developer(cls, content: str) -> "ConversationMessage":
        return cls(role=MessageRole.DEVELOPER, content=content)

    @classmethod
    def user(cls, content: str, name: Optional[str] = None) -> "ConversationMessage":
        return cls(role=MessageRole.USER, content=content, name=name)

    @classmethod
    def assistant(
        cls, content: Optional[str], tool_calls: Optional[list[ToolCallRequest]] = None
    ) -> "ConversationMessage":
        return cls(role=MessageRole.ASSISTANT, content=content, tool_calls=tool_calls)

    @classmethod
    def tool(cls, call_id: str, tool_name: str, content: str) -> "ConversationMessage":
        return cls(
            role=MessageRole.TOOL, content=content, tool_call_id=call_id, tool_name=tool_name
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to the chat-completions message format."""
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            data["name"] = self.name
        if self.tool_calls:
            data["tool_calls"] = [call.to_api_dict() for call in self.tool_calls]
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data


class ConversationState:
    """Ordered message history plus a short record of recent tool calls.

    Messages are only appended, except for targeted pruning of tool results.
    """

    def __init__(
        self,
        messages: Optional[Iterable[ConversationMessage]] = None,
        history_size: int = 3,
    ):
        """Initialize conversation state.

        Args:
            messages: Initial history (e.g. loaded from memory)
            history_size: Capacity of the recent tool-call record
        """
        self.messages: list[ConversationMessage] = list(messages or [])
        self.recent_tools: deque[str] = deque(maxlen=history_size)

    def append(self, message: ConversationMessage) -> None:
        """Append a message."""
        self.messages.append(message)

    def extend(self, messages: Iterable[ConversationMessage]) -> None:
        """Append several messages in order."""
        self.messages.extend(messages)

    def record_tool_call(self, name: str) -> None:
        """Remember a tool call; the oldest entry is evicted when full."""
        self.recent_tools.append(name)

    def is_repeating(self, name: str) -> bool:
        """Whether calling ``name`` now would fill the record with that one tool."""
        limit = self.recent_tools.maxlen or 0
        if limit < 2:
            return False
        recent = list(self.recent_tools)[-(limit - 1):]
        return len(recent) == limit - 1 and all(tool == name for tool in recent)

    def prune(self, tool_names: Iterable[str]) -> int:
        """Remove tool-result messages produced by the given tools.

        The matching tool-call requests are dropped from assistant messages
        too, so the history stays well-formed. Also clears the recent
        tool-call record.

        Returns:
            Number of messages removed
        """
        names = set(tool_names)
        pruned_ids = {
            m.tool_call_id for m in self.messages if m.role == MessageRole.TOOL and m.tool_name in names
        }

        before = len(self.messages)
        kept: list[ConversationMessage] = []
        for message in self.messages:
            if message.tool_call_id in pruned_ids:
                continue
            if message.tool_calls and any(c.call_id in pruned_ids for c in message.tool_calls):
                calls = [c for c in message.tool_calls if c.call_id not in pruned_ids]
                if not calls and not message.content:
                    continue
                message = message.model_copy(update={"tool_calls": calls or None})
            kept.append(message)

        self.messages = kept
        self.recent_tools.clear()
        return before - len(self.messages)

    def to_api_messages(self) -> list[dict[str, Any]]:
        """History in chat-completions format."""
        return [message.to_api_dict() for message in self.messages]

    def __len__(self) -> int:
        """Get number of messages."""
        return len(self.messages)

    def __repr__(self) -> str:
        """Representation."""
        return f"<ConversationState messages={len(self.messages)} recent={list(self.recent_tools)}>"

