"""
Exceptions for CraftAgent.

Dispatch-time errors (lookup, validation, handler) never leave the
dispatcher; they are turned into error results for the model. Upstream
errors are caught at the conversation loop boundary. Duplicate
registrations are fatal.
"""


class CraftAgentError(Exception):
    """Base exception for CraftAgent errors."""

    pass


class DuplicateNameError(CraftAgentError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(f"Function '{name}' is already registered")
        self.name = name


class ToolLookupError(CraftAgentError, LookupError):
    """Requested tool is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Function '{name}' not found!")
        self.name = name


class ToolValidationError(CraftAgentError, ValueError):
    """Tool arguments do not match the parameter schema."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class HandlerError(CraftAgentError):
    """Tool handler raised or returned a malformed result."""

    def __init__(self, message: str, tool_name: str | None = None):
        super().__init__(message)
        self.tool_name = tool_name


class UpstreamError(CraftAgentError):
    """Model service request failed."""

    def __init__(self, message: str, model: str | None = None):
        super().__init__(message)
        self.model = model


class AnomalyError(UpstreamError):
    """Model replied with neither content nor tool calls."""

    pass


class ConfigurationError(CraftAgentError):
    """Raised when configuration loading or validation fails."""

    pass
