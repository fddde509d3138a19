"""
Memory storage for CraftAgent.

Persists each agent's conversation as one JSON document holding the full
ordered message list. Every save overwrites the previous snapshot.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from craftagent.memory.models import ConversationMessage, ConversationState
from craftagent.storage.paths import ensure_directory, expand_path, get_bots_dir

logger = logging.getLogger(__name__)

_MESSAGES = TypeAdapter(list[ConversationMessage])

MEMORY_FILENAME = "memory.json"


class MemoryStore(ABC):
    """Save/load contract for conversation snapshots.

    A load issued after a save must see that save. Saves need not be
    durable before the caller continues.
    """

    @abstractmethod
    def save(self, state: ConversationState) -> None:
        """Store a snapshot of the conversation, replacing the previous one."""
        ...

    @abstractmethod
    def load(self) -> Optional[list[ConversationMessage]]:
        """Load the last snapshot, or None if nothing was saved."""
        ...

    @abstractmethod
    def clear(self) -> bool:
        """Delete the snapshot. Returns True if one existed."""
        ...


class InMemoryStore(MemoryStore):
    """Memory store that keeps the snapshot in process memory."""

    def __init__(self):
        self._messages: Optional[list[ConversationMessage]] = None
        self.save_count = 0

    def save(self, state: ConversationState) -> None:
        self._messages = [m.model_copy(deep=True) for m in state.messages]
        self.save_count += 1

    def load(self) -> Optional[list[ConversationMessage]]:
        if self._messages is None:
            return None
        return [m.model_copy(deep=True) for m in self._messages]

    def clear(self) -> bool:
        existed = self._messages is not None
        self._messages = None
        return existed


class JsonMemoryStore(MemoryStore):
    """File-based memory store.

    Stores ``<base_path>/<agent_name>/memory.json``.
    """

    def __init__(self, agent_name: str, base_path: Path | str | None = None):
        """Initialize the memory store.

        Args:
            agent_name: Agent identity; one snapshot per agent.
            base_path: Directory holding per-agent folders. Defaults to ~/.craftagent/bots.
        """
        if base_path is None:
            self.base_path = get_bots_dir()
        else:
            self.base_path = expand_path(base_path)

        self.agent_name = agent_name
        self.path = self.base_path / agent_name / MEMORY_FILENAME

    def save(self, state: ConversationState) -> None:
        """Write the snapshot atomically (temp file + rename)."""
        ensure_directory(self.path.parent)
        data = _MESSAGES.dump_json(state.messages, indent=2, exclude_none=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".memory-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"[Memory] Saved {len(state.messages)} messages to {self.path}")

    def load(self) -> Optional[list[ConversationMessage]]:
        """Load the snapshot.

        Returns:
            Messages, or None if there is no (readable) snapshot.
        """
        if not self.path.exists():
            logger.info("[Memory] No existing memory file found, starting fresh")
            return None

        try:
            messages = _MESSAGES.validate_json(self.path.read_bytes())
        except (OSError, ValidationError, json.JSONDecodeError) as e:
            logger.warning(f"[Memory] Ignoring unreadable memory file {self.path}: {e}")
            return None

        logger.info(f"[Memory] Loaded {len(messages)} messages from memory")
        return messages

    def clear(self) -> bool:
        """Delete the snapshot file."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True
