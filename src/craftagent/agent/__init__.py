"""Agent package: conversation loop, chat coalescing and composition."""

from craftagent.agent.agent import CHAT_PREFIX, Agent
from craftagent.agent.coalescer import MessageCoalescer
from craftagent.agent.context import AgentContext, WorldUnavailableError
from craftagent.agent.loop import ConversationLoop
from craftagent.agent.models import LoopConfig, LoopState
from craftagent.agent.prompts import DEFAULT_SYSTEM_PROMPT, build_status_message
from craftagent.memory.models import ConversationMessage, ConversationState

__all__ = [
    "Agent",
    "AgentContext",
    "CHAT_PREFIX",
    "ConversationLoop",
    "ConversationMessage",
    "ConversationState",
    "DEFAULT_SYSTEM_PROMPT",
    "LoopConfig",
    "LoopState",
    "MessageCoalescer",
    "WorldUnavailableError",
    "build_status_message",
]
