"""Function calling for CraftAgent.

Capabilities are registered once at startup as tool definitions with a
pydantic parameter model and a handler. The dispatcher validates the
model's arguments against that model and runs the handler, always
producing a single ToolCallResult.
"""

from craftagent.functions.dispatcher import ToolDispatcher
from craftagent.functions.models import (
    EmptyArgs,
    GameMode,
    ResultStatus,
    SafeInt,
    ToolCallRequest,
    ToolCallResult,
    ToolDefinition,
)
from craftagent.functions.registry import FunctionRegistry

__all__ = [
    "EmptyArgs",
    "FunctionRegistry",
    "GameMode",
    "ResultStatus",
    "SafeInt",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
    "ToolDispatcher",
]
