"""
Agent composition root.

Wires one bot together: context, tool registry, model client, memory,
conversation loop and the chat coalescer in front of it.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Optional, Union

from craftagent.agent.coalescer import MessageCoalescer, Scheduler
from craftagent.agent.context import AgentContext
from craftagent.agent.loop import DEFAULT_VOLATILE_TOOLS, ConversationLoop
from craftagent.agent.models import LoopConfig
from craftagent.functions.models import GameMode
from craftagent.functions.registry import FunctionRegistry
from craftagent.memory.storage import MemoryStore
from craftagent.providers.client import ModelClient
from craftagent.world.protocol import WorldActuator

if TYPE_CHECKING:
    from craftagent.config.schema import Config

logger = logging.getLogger(__name__)

# Messages the bot itself sends to chat start with this prefix
CHAT_PREFIX = "%"

ReplyCallback = Callable[[str], Union[None, Awaitable[None]]]


class Agent:
    """One bot: chat in, replies out.

    Chat messages are buffered by the coalescer; each batch triggers one
    run of the conversation loop, and its reply is passed to ``reply``.
    Runs never overlap.
    """

    def __init__(
        self,
        name: str,
        client: ModelClient,
        registry: FunctionRegistry,
        memory: Optional[MemoryStore] = None,
        world: Optional[WorldActuator] = None,
        config: Optional[LoopConfig] = None,
        groups: Optional[Iterable[str]] = None,
        game_mode: GameMode = GameMode.SURVIVAL,
        coalesce_window: float = 3.0,
        reply: Optional[ReplyCallback] = None,
        scheduler: Optional[Scheduler] = None,
        volatile_tools: Iterable[str] = DEFAULT_VOLATILE_TOOLS,
    ):
        """Initialize the agent.

        Args:
            name: Bot username (used when no world is connected)
            client: Model service client
            registry: Tools the model may call
            memory: Conversation persistence
            world: Game world connection
            config: Loop configuration
            groups: Enabled capability groups
            game_mode: Game mode assumed when no world is connected
            coalesce_window: Quiet period in seconds before chat is answered
            reply: Receives every reply text
            scheduler: Timer factory for the coalescer (tests)
            volatile_tools: Tool results dropped by tidy_memory()
        """
        self.context = AgentContext(name=name, world=world, default_game_mode=GameMode(game_mode))
        self.loop = ConversationLoop(
            client,
            registry,
            self.context,
            memory=memory,
            config=config,
            groups=groups,
            volatile_tools=volatile_tools,
        )
        self.coalescer: MessageCoalescer[str] = MessageCoalescer(
            self._on_batch, window=coalesce_window, scheduler=scheduler
        )
        self.reply = reply
        self._run_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        client: ModelClient,
        registry: FunctionRegistry,
        memory: Optional[MemoryStore] = None,
        world: Optional[WorldActuator] = None,
        name: Optional[str] = None,
        reply: Optional[ReplyCallback] = None,
    ) -> "Agent":
        """Build an agent from the application configuration."""
        return cls(
            name=name or config.agent.name,
            client=client,
            registry=registry,
            memory=memory,
            world=world,
            config=config.agent.loop_config(),
            groups=config.agent.groups,
            game_mode=config.agent.game_mode,
            coalesce_window=config.coalescer.window_seconds,
            reply=reply,
            volatile_tools=config.memory.volatile_tools,
        )

    @property
    def name(self) -> str:
        """In-game username."""
        if self.context.world is not None:
            return self.context.world.username
        return self.context.name

    def on_chat(self, username: str, message: str) -> bool:
        """Handle a chat line.

        Returns:
            True if the message was queued for the model
        """
        if username == self.name or message.startswith(CHAT_PREFIX):
            return False

        logger.debug(f"Chat from {username}: {message}")
        self.coalescer.push(self.chat_input(username, message))
        return True

    @staticmethod
    def chat_input(username: str, message: str) -> str:
        """Wrap a chat line as model input."""
        return f"User {username} said: {message}"

    async def on_stopped_attacking(self) -> str:
        """Tell the model a fight started by attack_entity is over."""
        return await self.respond("Done attacking")

    async def respond(self, message: Union[str, Sequence[str], None] = None) -> str:
        """Run the conversation loop and deliver its reply."""
        async with self._run_lock:
            text = await self.loop.run(message)

        if self.reply is not None:
            delivered = self.reply(text)
            if inspect.isawaitable(delivered):
                await delivered
        return text

    async def _on_batch(self, batch: list[str]) -> None:
        await self.respond(batch)

    def enable_group(self, group: str) -> None:
        """Allow tools of a capability group (e.g. "combat")."""
        self.loop.enable_group(group)

    def disable_group(self, group: str) -> None:
        """Hide tools of a capability group."""
        self.loop.disable_group(group)

    async def close(self) -> None:
        """Answer anything still buffered, then stop accepting chat."""
        self.coalescer.flush()
        await self.coalescer.drain()
        self.coalescer.close()

    def __repr__(self) -> str:
        """Representation."""
        return f"<Agent name={self.name!r} groups={sorted(self.loop.groups)}>"
