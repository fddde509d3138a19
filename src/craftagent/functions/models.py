"""Data models for the function registry and dispatcher."""

import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Open-ended integer bounds. They keep schema validation honest about the
# integer range a model can send, but carry no information for the model
# and are dropped from the described schema.
SAFE_INT_MIN = -(2**53) + 1
SAFE_INT_MAX = 2**53 - 1

SafeInt = Annotated[int, Field(ge=SAFE_INT_MIN, le=SAFE_INT_MAX)]


class GameMode(str, Enum):
    """Runtime mode a tool can be restricted to."""

    SURVIVAL = "survival"
    CREATIVE = "creative"
    ADVENTURE = "adventure"
    SPECTATOR = "spectator"


class ResultStatus(str, Enum):
    """Outcome of a tool call."""

    SUCCESS = "success"
    ERROR = "error"


class ToolCallResult(BaseModel):
    """Result of a single tool dispatch, returned to the model."""

    model_config = ConfigDict(extra="forbid")

    status: ResultStatus = ResultStatus.SUCCESS
    message: Any = None  # String or any JSON-serializable value
    stop: bool = False  # End the conversation loop with this message

    @classmethod
    def error(cls, message: Any) -> "ToolCallResult":
        """Build an error result."""
        return cls(status=ResultStatus.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        """Whether the call failed."""
        return self.status == ResultStatus.ERROR

    def to_content(self, warning: Optional[str] = None) -> str:
        """Serialize for a tool-result message.

        The stop flag is internal to the loop and is never sent to the model.
        """
        payload: dict[str, Any] = {"status": self.status.value, "message": self.message}
        if warning:
            payload["warning"] = warning
        return json.dumps(payload, ensure_ascii=False, default=str)


# Handlers receive the agent context and the validated argument model. A bare
# string return value is an error message for the model.
HandlerReturn = Union[ToolCallResult, dict[str, Any], str]
ToolHandler = Callable[[Any, Any], Union[HandlerReturn, Awaitable[HandlerReturn]]]


class EmptyArgs(BaseModel):
    """Parameter schema for tools that take no arguments."""

    model_config = ConfigDict(extra="ignore")


class ToolDefinition(BaseModel):
    """A capability the model may request.

    ``parameters`` is a pydantic model class; it validates incoming arguments
    and produces the JSON schema shown to the model. Definitions are
    immutable once created.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    description: str = ""
    parameters: type[BaseModel] = EmptyArgs
    handler: ToolHandler
    group: Optional[str] = None  # Capability group gating availability
    game_mode: Optional[GameMode] = None  # Only offered in this mode

    def __str__(self) -> str:
        """String representation."""
        return f"ToolDefinition({self.name})"


class ToolCallRequest(BaseModel):
    """A tool call requested by the model."""

    call_id: str
    tool_name: str
    arguments: Union[str, dict[str, Any], None] = None  # Raw, unvalidated

    def arguments_json(self) -> str:
        """Arguments as the JSON string the provider expects."""
        if self.arguments is None:
            return "{}"
        if isinstance(self.arguments, str):
            return self.arguments
        return json.dumps(self.arguments, ensure_ascii=False)

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to an OpenAI-format tool call entry."""
        return {
            "id": self.call_id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": self.arguments_json()},
        }

    def __str__(self) -> str:
        """String representation."""
        return f"{self.tool_name}({self.arguments_json()})"
