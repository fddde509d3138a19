"""Data models exchanged with the world actuator."""

import math
from typing import Optional

from pydantic import BaseModel


class Position(BaseModel):
    """A point in the world."""

    x: float
    y: float
    z: float

    def distance_to(self, other: "Position") -> float:
        """Euclidean distance to another point."""
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))

    def __str__(self) -> str:
        """String representation."""
        return f"({self.x:g}, {self.y:g}, {self.z:g})"


class EntityInfo(BaseModel):
    """An entity near the agent."""

    entity_id: str
    entity_type: str
    position: Position
    distance: float = 0.0
    username: Optional[str] = None  # Set for players

    def to_message(self) -> dict:
        """Compact form shown to the model."""
        data = {
            "entity_id": self.entity_id,
            "distance": round(self.distance, 1),
            "entity_type": self.entity_type,
        }
        if self.username:
            data["username"] = self.username
        return data
