"""Functions that act on the game world through the world actuator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from craftagent.functions.models import EmptyArgs, GameMode, SafeInt, ToolDefinition
from craftagent.world.models import Position

if TYPE_CHECKING:
    from craftagent.agent.context import AgentContext

# Reach distance for breaking blocks by hand
BLOCK_REACH = 4.0


class PositionArgs(BaseModel):
    x: float
    y: float
    z: float


class BlockPositionArgs(BaseModel):
    x: SafeInt
    y: SafeInt
    z: SafeInt


class EntityArgs(BaseModel):
    entity_id: str = Field(description="Id of the entity. Use get_nearby_entities to find it.")


class NearbyEntitiesArgs(BaseModel):
    max_distance: Optional[float] = Field(
        default=None,
        ge=20,
        le=1000,
        description="The maximum distance to search for entities. Default: 100",
    )


class GiveItemArgs(BaseModel):
    item_type: str = Field(description="The type of the item to give")
    entity_id: str = Field(description="The id of the entity to give the item to")
    num: int = Field(default=1, ge=1, le=2304, description="The number of items to give")


class CreativeItemArgs(BaseModel):
    item_id: str = Field(description='Minecraft item id. No tag needed, e.g. "stone" or similar.')
    amount: int = Field(ge=1, le=64, description="Amount of items to take")


async def walk_to_position(agent: AgentContext, args: PositionArgs):
    world = agent.require_world()
    reached = await world.walk_to(Position(x=args.x, y=args.y, z=args.z))
    return {"message": f"Reached to {reached}"}


async def walk_to_entity(agent: AgentContext, args: EntityArgs):
    world = agent.require_world()
    entity = await world.find_entity(args.entity_id)
    if entity is None:
        return f"Entity with ID {args.entity_id} is not found!"

    reached = await world.walk_to(entity.position)
    return {"message": f"Reached to {args.entity_id} at {reached}"}


async def attack_entity(agent: AgentContext, args: EntityArgs):
    world = agent.require_world()
    entity = await world.find_entity(args.entity_id)
    if entity is None:
        return f"Entity with ID {args.entity_id} is not found!"

    await world.attack(args.entity_id)
    # The fight runs on its own; the agent is prompted again when it ends.
    return {"message": f"Attacking entity {args.entity_id}", "stop": True}


async def get_nearby_entities(agent: AgentContext, args: NearbyEntitiesArgs):
    world = agent.require_world()
    entities = await world.get_nearby_entities(args.max_distance or 100)
    return {"message": [entity.to_message() for entity in entities]}


async def give_item_to_entity(agent: AgentContext, args: GiveItemArgs):
    world = agent.require_world()
    entity = await world.find_entity(args.entity_id)
    if entity is None:
        return f"Entity with ID {args.entity_id} is not found!"

    given = await world.give_item(args.item_type, args.entity_id, args.num)
    if given == 0:
        return f"You do not have any {args.item_type} to give."
    receiver = entity.username or args.entity_id
    return {"message": f"Given {given} {args.item_type} to {receiver}."}


async def get_health_level(agent: AgentContext, args: EmptyArgs):
    level = await agent.require_world().get_health()
    return {"message": f"Health is at {level:g} ({level * 5:g}%)"}


async def get_hunger_level(agent: AgentContext, args: EmptyArgs):
    level = await agent.require_world().get_food()
    return {"message": f"Food saturation is at {level:g} ({level * 5:g}%)"}


async def take_item_from_creative(agent: AgentContext, args: CreativeItemArgs):
    name = await agent.require_world().take_creative_item(args.item_id, args.amount)
    if name is None:
        return f"Item ID {args.item_id} is invalid!"
    return {"message": f"{name} is now in your hand"}


async def break_block_at_position(agent: AgentContext, args: BlockPositionArgs):
    world = agent.require_world()
    target = Position(x=args.x, y=args.y, z=args.z)

    distance = (await world.get_position()).distance_to(target)
    if distance > BLOCK_REACH:
        return f"Block is too far! Distance: {distance:.1f}"

    name = await world.break_block(target)
    if name is None:
        return f"There is no block at {target}"
    return {"message": f'"{name}" at {target} was broken.'}


WORLD_FUNCTIONS: list[ToolDefinition] = [
    ToolDefinition(
        name="walk_to_position",
        description="Walk to specified coordinates",
        parameters=PositionArgs,
        handler=walk_to_position,
    ),
    ToolDefinition(
        name="walk_to_entity",
        description=(
            "Walk to entity that is specified by entity_id. "
            "List of nearby entities can be obtained using get_nearby_entities."
        ),
        parameters=EntityArgs,
        handler=walk_to_entity,
    ),
    ToolDefinition(
        group="combat",
        name="attack_entity",
        description="You can use this function to attack an entity or mobs for farm or other purposes",
        parameters=EntityArgs,
        handler=attack_entity,
    ),
    ToolDefinition(
        name="get_nearby_entities",
        description=(
            "Get the nearby entities. Returns list of: entity_id, distance (meters), "
            "entity_type, username (if player)"
        ),
        parameters=NearbyEntitiesArgs,
        handler=get_nearby_entities,
    ),
    ToolDefinition(
        name="give_item_to_entity",
        description="Give an item to an player or entity",
        parameters=GiveItemArgs,
        handler=give_item_to_entity,
    ),
    ToolDefinition(
        game_mode=GameMode.SURVIVAL,
        name="get_health_level",
        description="Returns level of player's health",
        handler=get_health_level,
    ),
    ToolDefinition(
        game_mode=GameMode.SURVIVAL,
        name="get_hunger_level",
        description="Returns level of player's hunger",
        handler=get_hunger_level,
    ),
    ToolDefinition(
        game_mode=GameMode.CREATIVE,
        name="take_item_from_creative",
        description="Takes item or block from creative mode menu and places it into active quickbar slot",
        parameters=CreativeItemArgs,
        handler=take_item_from_creative,
    ),
    ToolDefinition(
        game_mode=GameMode.CREATIVE,
        name="break_block_at_position",
        description=(
            "Instantaneously break block at specified coordinates. "
            "Make sure you can reach it with your hand."
        ),
        parameters=BlockPositionArgs,
        handler=break_block_at_position,
    ),
]
