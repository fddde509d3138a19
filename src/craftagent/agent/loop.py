"""
Conversation loop for CraftAgent.

Drives the model turn by turn: send the history and the available tools,
run the tool calls the model asks for one at a time, feed the results back,
and stop when the model answers in plain text (with no active task left),
a tool asks to stop, or the step limit is reached.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any, Optional, Union

from craftagent.agent.context import AgentContext
from craftagent.agent.models import LoopConfig, LoopState
from craftagent.agent.prompts import build_status_message, format_template
from craftagent.exceptions import AnomalyError, UpstreamError
from craftagent.functions.dispatcher import ToolDispatcher
from craftagent.functions.models import ToolCallResult
from craftagent.functions.registry import FunctionRegistry
from craftagent.memory.models import ConversationMessage, ConversationState
from craftagent.memory.storage import MemoryStore
from craftagent.providers.client import ModelClient
from craftagent.providers.models import ModelReply, ToolChoice

logger = logging.getLogger(__name__)

# Tool results that go stale quickly and are dropped by tidy_memory()
DEFAULT_VOLATILE_TOOLS = ("get_nearby_entities", "show_inventory")


def _reply_text(message: Any) -> str:
    if message is None:
        return ""
    if isinstance(message, str):
        return message
    return json.dumps(message, ensure_ascii=False, default=str)


class ConversationLoop:
    """Turn-by-turn state machine between the model and the tool dispatcher.

    One loop owns one conversation. Runs are strictly sequential: at most
    one model request or tool call is in flight at any time.

    Example:
        >>> loop = ConversationLoop(client, registry, AgentContext(name="Bot"))
        >>> reply = await loop.run("User Steve said: what time is it?")
    """

    def __init__(
        self,
        client: ModelClient,
        registry: FunctionRegistry,
        context: AgentContext,
        memory: Optional[MemoryStore] = None,
        config: Optional[LoopConfig] = None,
        groups: Optional[Iterable[str]] = None,
        volatile_tools: Iterable[str] = DEFAULT_VOLATILE_TOOLS,
    ):
        """Initialize the loop.

        The previous conversation is loaded from memory if one was saved.

        Args:
            client: Model service client
            registry: Registry of tools the model may call
            context: Agent context handed to tool handlers
            memory: Conversation persistence (None = keep in process only)
            config: Loop configuration
            groups: Enabled capability groups
            volatile_tools: Tool names whose results tidy_memory() removes
        """
        self.client = client
        self.registry = registry
        self.context = context
        self.memory = memory
        self.config = config or LoopConfig()
        self.groups: set[str] = set(groups or ())
        self.volatile_tools = list(volatile_tools)

        self.dispatcher = ToolDispatcher(registry)
        self.loop_state = LoopState.TERMINATED
        self.state = ConversationState(history_size=self.config.repeat_history)

        if self.memory is not None:
            messages = self.memory.load()
            if messages:
                self.state.extend(messages)

    def enable_group(self, group: str) -> None:
        """Make tools of a capability group available."""
        self.groups.add(group)

    def disable_group(self, group: str) -> None:
        """Hide tools of a capability group."""
        self.groups.discard(group)

    def available_tools(self) -> list[dict[str, Any]]:
        """Model-facing schemas for the current groups and game mode."""
        return self.registry.get_tool_schemas(groups=self.groups, game_mode=self.context.game_mode)

    async def run(
        self,
        message: Union[str, Sequence[str], None] = None,
        username: Optional[str] = None,
    ) -> str:
        """Process new input and return the reply for the user.

        Args:
            message: New input; a sequence is appended as separate user turns
            username: Speaker name attached to the user turns

        Returns:
            Final reply text. Model service failures are reported with the
            configured failure message instead of raising.
        """
        self._push_system_prompt()

        if isinstance(message, str):
            message = [message]
        for text in message or ():
            self.state.append(ConversationMessage.user(text, name=username))

        logger.info("[LLM] Starting request")
        try:
            return await self._run_steps()
        except UpstreamError as e:
            logger.error(f"[LLM] Error: {e}", exc_info=True)
            return self.config.failure_message
        except Exception as e:
            logger.error(f"[LLM] Unexpected error: {e}", exc_info=True)
            return self.config.failure_message
        finally:
            self.loop_state = LoopState.TERMINATED

    async def _run_steps(self) -> str:
        anomalies = 0

        for step in range(self.config.max_steps):
            self.loop_state = LoopState.AWAITING_MODEL
            reply = await self._request()

            if reply.has_tool_calls:
                self.loop_state = LoopState.EXECUTING_TOOLS
                stop_result = await self._execute_tool_calls(reply)
                if stop_result is not None:
                    return _reply_text(stop_result.message)
                continue

            if reply.is_anomalous:
                anomalies += 1
                if anomalies > 1:
                    raise AnomalyError(
                        "Model returned neither content nor tool calls twice in one run",
                        model=getattr(self.client, "model", None),
                    )
                logger.warning("[LLM] Reply has no content and no tool calls, retrying")
                if reply.reasoning:
                    self.state.append(ConversationMessage.assistant(reply.reasoning))
                continue

            self.state.append(ConversationMessage.assistant(reply.content))
            self._save()
            logger.info(f"[LLM] Finish response: {reply.content}")

            if self.context.tasks.active() is None:
                return reply.content or ""
            logger.debug(f"Task still active after step {step + 1}, continuing")

        logger.warning(f"[LLM] Step limit reached ({self.config.max_steps}), giving up")
        return self.config.step_limit_message

    async def _request(self) -> ModelReply:
        """Send the history plus the status message to the model."""
        status = ConversationMessage.developer(await self.status_message())
        if self.config.persist_status_message:
            self.state.append(status)
            messages = self.state.to_api_messages()
        else:
            messages = self.state.to_api_messages() + [status.to_api_dict()]

        tools = self.available_tools()
        tool_choice = ToolChoice.REQUIRED if self.context.tasks.active() else ToolChoice.AUTO
        logger.debug(
            f"[LLM] Available tools: {', '.join(t['function']['name'] for t in tools)} "
            f"(tool_choice={tool_choice.value})"
        )

        return await self.client.complete(messages, tools, tool_choice)

    async def _execute_tool_calls(self, reply: ModelReply) -> Optional[ToolCallResult]:
        """Dispatch a batch of tool calls in order.

        Returns:
            The result that asked to stop, or None if the batch ran to the end
        """
        logger.info(f"[LLM] Processing {len(reply.tool_calls)} tool call(s)")

        # Only the first request message carries the text that came with the batch
        content = reply.content
        for call in reply.tool_calls:
            warning = None
            if self.config.repeat_warning and self.state.is_repeating(call.tool_name):
                count = self.config.repeat_history
                warning = format_template(
                    self.config.repeat_warning_message, name=call.tool_name, count=count
                )
                logger.warning(f"[Tool call] {call.tool_name} called {count} times in a row")

            logger.debug(f"[Tool call] Executing: {call}")
            result = await self.dispatcher.invoke(call.tool_name, self.context, call.arguments)
            logger.debug(f"[Tool call] Result: {result!r}")

            self.state.extend(
                [
                    ConversationMessage.assistant(content, tool_calls=[call]),
                    ConversationMessage.tool(
                        call.call_id, call.tool_name, result.to_content(warning)
                    ),
                ]
            )
            content = None
            self.state.record_tool_call(call.tool_name)
            self._save()

            if result.stop:
                logger.info(f"[Tool call] Stopping function calls due to stop flag from {call.tool_name}")
                return result

        return None

    async def status_message(self) -> str:
        """Status text sent with every request: position and active task."""
        position = None
        if self.context.world is not None:
            try:
                position = await self.context.world.get_position()
            except Exception as e:
                logger.warning(f"Could not read position for status message: {e}")

        return build_status_message(self.context.tasks.active_info(), position)

    def tidy_memory(self, tool_names: Optional[Iterable[str]] = None) -> int:
        """Drop stale tool results from the history and persist it.

        Args:
            tool_names: Tools whose results are removed (default: volatile tools)

        Returns:
            Number of messages removed
        """
        names = list(tool_names) if tool_names is not None else self.volatile_tools
        removed = self.state.prune(names)
        logger.info(f"[Memory] Pruned {removed} messages from {', '.join(names)}")
        self._save()
        return removed

    def reset(self) -> None:
        """Forget the conversation and delete the saved copy."""
        self.state = ConversationState(history_size=self.config.repeat_history)
        if self.memory is not None:
            self.memory.clear()

    def _push_system_prompt(self) -> None:
        if len(self.state) == 0 and self.config.system_prompt:
            self.state.append(
                ConversationMessage.system(
                    format_template(self.config.system_prompt, username=self.context.name)
                )
            )

    def _save(self) -> None:
        if self.memory is None:
            return
        try:
            self.memory.save(self.state)
        except OSError as e:
            logger.error(f"[Memory] Failed to save conversation: {e}", exc_info=True)

    def __repr__(self) -> str:
        """Representation."""
        return (
            f"<ConversationLoop agent={self.context.name!r} state={self.loop_state.value} "
            f"messages={len(self.state)}>"
        )
