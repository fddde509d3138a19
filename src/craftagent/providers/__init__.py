"""Model service access via LiteLLM."""

from craftagent.providers.client import ChatClient, ModelClient, parse_response
from craftagent.providers.models import ModelReply, ToolChoice

__all__ = [
    "ChatClient",
    "ModelClient",
    "ModelReply",
    "ToolChoice",
    "parse_response",
]
