"""
CraftAgent memory.

Conversation history models and the save/load contract used to make an
agent's conversation survive restarts.
"""

from craftagent.memory.models import ConversationMessage, ConversationState, MessageRole
from craftagent.memory.storage import InMemoryStore, JsonMemoryStore, MemoryStore

__all__ = [
    "ConversationMessage",
    "ConversationState",
    "InMemoryStore",
    "JsonMemoryStore",
    "MemoryStore",
    "MessageRole",
]
