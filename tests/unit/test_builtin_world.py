"""Tests for the world functions."""

import pytest

from craftagent.functions import GameMode, ToolDispatcher
from craftagent.world import Position


@pytest.fixture
def dispatcher(registry) -> ToolDispatcher:
    return ToolDispatcher(registry)


class TestMovement:
    """Tests for walking."""

    @pytest.mark.asyncio
    async def test_walk_to_position(self, dispatcher, world_context, fake_world):
        """Test walk_to_position moves the bot."""
        result = await dispatcher.invoke("walk_to_position", world_context, {"x": 10, "y": 64, "z": -3})

        assert result.message == "Reached to (10, 64, -3)"
        assert fake_world.position == Position(x=10, y=64, z=-3)

    @pytest.mark.asyncio
    async def test_walk_to_unknown_entity(self, dispatcher, world_context):
        """Test walking to a missing entity is an error."""
        result = await dispatcher.invoke("walk_to_entity", world_context, {"entity_id": "42"})

        assert result.is_error
        assert result.message == "Entity with ID 42 is not found!"

    @pytest.mark.asyncio
    async def test_walk_to_entity(self, dispatcher, world_context, fake_world):
        """Test walking to an entity goes to its position."""
        fake_world.add_entity("7", "cow", 3, 64, 4)

        result = await dispatcher.invoke("walk_to_entity", world_context, {"entity_id": "7"})

        assert result.message == "Reached to 7 at (3, 64, 4)"


class TestEntities:
    """Tests for entity functions."""

    @pytest.mark.asyncio
    async def test_nearby_entities_default_distance(self, dispatcher, world_context, fake_world):
        """Test nearby entities within 100 blocks, nearest first."""
        fake_world.add_entity("1", "player", 0, 64, 30, username="Steve")
        fake_world.add_entity("2", "zombie", 0, 64, 5)
        fake_world.add_entity("3", "cow", 0, 64, 500)

        result = await dispatcher.invoke("get_nearby_entities", world_context, {})

        assert result.message == [
            {"entity_id": "2", "distance": 5.0, "entity_type": "zombie"},
            {"entity_id": "1", "distance": 30.0, "entity_type": "player", "username": "Steve"},
        ]

    @pytest.mark.asyncio
    async def test_nearby_entities_distance_bounds(self, dispatcher, world_context):
        """Test max_distance outside 20-1000 is rejected."""
        result = await dispatcher.invoke("get_nearby_entities", world_context, {"max_distance": 5})
        assert result.is_error
        assert "max_distance" in result.message

    @pytest.mark.asyncio
    async def test_attack_sets_stop(self, dispatcher, world_context, fake_world):
        """Test attack_entity asks the loop to stop."""
        fake_world.add_entity("9", "zombie", 1, 64, 1)

        result = await dispatcher.invoke("attack_entity", world_context, {"entity_id": "9"})

        assert result.stop is True
        assert result.message == "Attacking entity 9"
        assert fake_world.actions == [("attack", "9")]

    @pytest.mark.asyncio
    async def test_give_item(self, dispatcher, world_context, fake_world):
        """Test give_item_to_entity reports how much was given."""
        fake_world.add_entity("1", "player", 2, 64, 0, username="Alex")
        fake_world.inventory["apple"] = 3

        result = await dispatcher.invoke(
            "give_item_to_entity", world_context, {"item_type": "apple", "entity_id": "1", "num": 5}
        )

        assert result.message == "Given 3 apple to Alex."

        empty = await dispatcher.invoke(
            "give_item_to_entity", world_context, {"item_type": "apple", "entity_id": "1"}
        )
        assert empty.is_error


class TestStatus:
    """Tests for health and hunger."""

    @pytest.mark.asyncio
    async def test_health_and_hunger(self, dispatcher, world_context, fake_world):
        """Test levels are reported with percentages."""
        fake_world.health = 10

        health = await dispatcher.invoke("get_health_level", world_context, {})
        hunger = await dispatcher.invoke("get_hunger_level", world_context, {})

        assert health.message == "Health is at 10 (50%)"
        assert hunger.message == "Food saturation is at 18 (90%)"


class TestCreative:
    """Tests for creative-only functions."""

    @pytest.mark.asyncio
    async def test_take_item(self, dispatcher, world_context, fake_world):
        """Test taking a known and an unknown item."""
        fake_world.mode = GameMode.CREATIVE

        ok = await dispatcher.invoke("take_item_from_creative", world_context, {"item_id": "stone", "amount": 64})
        bad = await dispatcher.invoke("take_item_from_creative", world_context, {"item_id": "nope", "amount": 1})

        assert ok.message == "Stone is now in your hand"
        assert bad.message == "Item ID nope is invalid!"

    @pytest.mark.asyncio
    async def test_break_block(self, dispatcher, world_context, fake_world):
        """Test breaking a block within reach."""
        fake_world.blocks[(1, 64, 1)] = "Dirt"

        result = await dispatcher.invoke("break_block_at_position", world_context, {"x": 1, "y": 64, "z": 1})

        assert result.message == '"Dirt" at (1, 64, 1) was broken.'

    @pytest.mark.asyncio
    async def test_break_block_too_far(self, dispatcher, world_context, fake_world):
        """Test blocks out of reach are refused."""
        fake_world.blocks[(10, 64, 0)] = "Dirt"

        result = await dispatcher.invoke("break_block_at_position", world_context, {"x": 10, "y": 64, "z": 0})

        assert result.is_error
        assert result.message.startswith("Block is too far!")
        assert (10, 64, 0) in fake_world.blocks

    def test_mode_filtering(self, registry):
        """Test creative tools are hidden in survival and vice versa."""
        survival = {d.name for d in registry.list_tools(game_mode=GameMode.SURVIVAL)}
        creative = {d.name for d in registry.list_tools(game_mode=GameMode.CREATIVE)}

        assert "get_health_level" in survival
        assert "break_block_at_position" not in survival
        assert "break_block_at_position" in creative
        assert "get_hunger_level" not in creative


@pytest.mark.asyncio
async def test_world_function_without_world(registry, context):
    """Test world functions fail cleanly with no world connected."""
    result = await ToolDispatcher(registry).invoke("get_health_level", context, {})

    assert result.is_error
    assert "Not connected" in result.message
