"""Context handed to every tool handler."""

from dataclasses import dataclass, field
from typing import Optional

from craftagent.functions.models import GameMode
from craftagent.tasks import TaskList
from craftagent.world.protocol import WorldActuator


class WorldUnavailableError(RuntimeError):
    """Raised by handlers that need a world when none is connected."""


@dataclass
class AgentContext:
    """Per-agent state that handlers may read and mutate."""

    name: str
    tasks: TaskList = field(default_factory=TaskList)
    world: Optional[WorldActuator] = None
    default_game_mode: GameMode = GameMode.SURVIVAL

    @property
    def game_mode(self) -> GameMode:
        """Game mode reported by the world, or the configured default."""
        if self.world is not None:
            return self.world.game_mode
        return self.default_game_mode

    def require_world(self) -> WorldActuator:
        """Get the world actuator.

        Raises:
            WorldUnavailableError: If no world is connected
        """
        if self.world is None:
            raise WorldUnavailableError("Not connected to a game world")
        return self.world
