"""World actuator protocol definition."""

from abc import ABC, abstractmethod
from typing import Optional

from craftagent.functions.models import GameMode
from craftagent.world.models import EntityInfo, Position


class WorldActuator(ABC):
    """Abstract interface to the game world.

    Tool handlers act on the world only through this interface. Game
    connections implement it; tests use an in-memory fake. Implementations
    are responsible for bounding how long each call may take.
    """

    @property
    @abstractmethod
    def username(self) -> str:
        """The bot's in-game name."""
        ...

    @property
    @abstractmethod
    def game_mode(self) -> GameMode:
        """Current game mode."""
        ...

    @abstractmethod
    async def get_position(self) -> Position:
        """Current position of the bot."""
        ...

    @abstractmethod
    async def get_health(self) -> float:
        """Health points (0-20)."""
        ...

    @abstractmethod
    async def get_food(self) -> float:
        """Food level (0-20)."""
        ...

    @abstractmethod
    async def get_nearby_entities(self, max_distance: float) -> list[EntityInfo]:
        """Entities within ``max_distance``, nearest first, excluding the bot."""
        ...

    @abstractmethod
    async def walk_to(self, position: Position) -> Position:
        """Walk to a position.

        Returns:
            Position actually reached
        """
        ...

    @abstractmethod
    async def find_entity(self, entity_id: str) -> Optional[EntityInfo]:
        """Look up an entity by id."""
        ...

    @abstractmethod
    async def attack(self, entity_id: str) -> None:
        """Start attacking an entity. Returns once the attack has begun."""
        ...

    @abstractmethod
    async def give_item(self, item_type: str, entity_id: str, count: int) -> int:
        """Toss items towards an entity.

        Returns:
            Number of items actually given
        """
        ...

    @abstractmethod
    async def take_creative_item(self, item_id: str, amount: int) -> Optional[str]:
        """Put an item from the creative menu into the active hotbar slot.

        Returns:
            Display name of the item, or None if the id is unknown
        """
        ...

    @abstractmethod
    async def break_block(self, position: Position) -> Optional[str]:
        """Break the block at a position.

        Returns:
            Display name of the broken block, or None if there was no block
        """
        ...
