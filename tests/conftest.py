"""
Pytest configuration and fixtures for craftagent tests.
"""

import copy
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any, Optional

import pytest
from typer.testing import CliRunner

from craftagent.agent.context import AgentContext
from craftagent.config import clear_config_cache
from craftagent.functions import FunctionRegistry, GameMode
from craftagent.functions.builtin import register_builtin_functions
from craftagent.providers import ModelClient, ModelReply, ToolChoice
from craftagent.tasks import TaskList
from craftagent.world import EntityInfo, Position, WorldActuator


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def craftagent_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point CRAFTAGENT_HOME at a temp dir and drop other CRAFTAGENT_* variables."""
    for key in list(os.environ):
        if key.startswith("CRAFTAGENT_"):
            monkeypatch.delenv(key)

    home = temp_dir / ".craftagent"
    home.mkdir()
    monkeypatch.setenv("CRAFTAGENT_HOME", str(home))
    clear_config_cache()
    yield home
    clear_config_cache()


# =============================================================================
# Model service
# =============================================================================


class ScriptedClient(ModelClient):
    """Model client that replays canned replies and records every request."""

    model = "test/scripted"

    def __init__(self, replies: list[Any]):
        self.replies = list(replies)
        self.requests: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> ModelReply:
        self.requests.append(
            {
                "messages": copy.deepcopy(messages),
                "tools": tools,
                "tool_choice": tool_choice,
            }
        )
        if not self.replies:
            raise AssertionError("Model was asked for more replies than scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedClient]:
    """Factory: scripted_client(reply1, reply2, ...)."""

    def factory(*replies: Any) -> ScriptedClient:
        return ScriptedClient(list(replies))

    return factory


# =============================================================================
# Timers
# =============================================================================


class FakeHandle:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler driven in virtual time by advance_to()."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance_to(self, when: float) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        while True:
            due = [h for h in self.handles if not h.cancelled and not h.fired and h.when <= when]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = handle.when
            handle.fired = True
            handle.callback()
        self.now = when


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    """Provide a virtual-time scheduler."""
    return FakeScheduler()


# =============================================================================
# Game world
# =============================================================================


class FakeWorld(WorldActuator):
    """In-memory world that records actions."""

    def __init__(self, game_mode: GameMode = GameMode.SURVIVAL):
        self.mode = game_mode
        self.position = Position(x=0, y=64, z=0)
        self.health = 20.0
        self.food = 18.0
        self.entities: dict[str, EntityInfo] = {}
        self.inventory: dict[str, int] = {}
        self.creative_items = {"stone": "Stone", "oak_planks": "Oak Planks"}
        self.blocks: dict[tuple[int, int, int], str] = {}
        self.actions: list[tuple] = []

    @property
    def username(self) -> str:
        return "Bot"

    @property
    def game_mode(self) -> GameMode:
        return self.mode

    def add_entity(
        self, entity_id: str, entity_type: str, x: float, y: float, z: float, username: Optional[str] = None
    ) -> EntityInfo:
        position = Position(x=x, y=y, z=z)
        entity = EntityInfo(
            entity_id=entity_id,
            entity_type=entity_type,
            position=position,
            distance=self.position.distance_to(position),
            username=username,
        )
        self.entities[entity_id] = entity
        return entity

    async def get_position(self) -> Position:
        return self.position

    async def get_health(self) -> float:
        return self.health

    async def get_food(self) -> float:
        return self.food

    async def get_nearby_entities(self, max_distance: float) -> list[EntityInfo]:
        nearby = [e for e in self.entities.values() if e.distance <= max_distance]
        return sorted(nearby, key=lambda e: e.distance)

    async def walk_to(self, position: Position) -> Position:
        self.actions.append(("walk_to", position))
        self.position = position
        return position

    async def find_entity(self, entity_id: str) -> Optional[EntityInfo]:
        return self.entities.get(entity_id)

    async def attack(self, entity_id: str) -> None:
        self.actions.append(("attack", entity_id))

    async def give_item(self, item_type: str, entity_id: str, count: int) -> int:
        given = min(count, self.inventory.get(item_type, 0))
        if given:
            self.inventory[item_type] -= given
            self.actions.append(("give_item", item_type, entity_id, given))
        return given

    async def take_creative_item(self, item_id: str, amount: int) -> Optional[str]:
        name = self.creative_items.get(item_id)
        if name is not None:
            self.actions.append(("take_creative_item", item_id, amount))
        return name

    async def break_block(self, position: Position) -> Optional[str]:
        name = self.blocks.pop((int(position.x), int(position.y), int(position.z)), None)
        if name is not None:
            self.actions.append(("break_block", position))
        return name


@pytest.fixture
def fake_world() -> FakeWorld:
    """Provide an in-memory survival world."""
    return FakeWorld()


# =============================================================================
# Agent pieces
# =============================================================================


@pytest.fixture
def registry() -> FunctionRegistry:
    """Registry with all built-in functions."""
    registry = FunctionRegistry()
    register_builtin_functions(registry)
    return registry


@pytest.fixture
def context() -> AgentContext:
    """Agent context without a world."""
    return AgentContext(name="Bot", tasks=TaskList())


@pytest.fixture
def world_context(fake_world: FakeWorld) -> AgentContext:
    """Agent context connected to the fake world."""
    return AgentContext(name="Bot", tasks=TaskList(), world=fake_world)
