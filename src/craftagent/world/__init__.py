"""Interface to the game world used by tool handlers."""

from craftagent.world.models import EntityInfo, Position
from craftagent.world.protocol import WorldActuator

__all__ = [
    "EntityInfo",
    "Position",
    "WorldActuator",
]
