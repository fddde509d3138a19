"""
Model service client for CraftAgent.

Sends chat completion requests through LiteLLM and parses the first choice
into a ModelReply. Every failure is raised as an UpstreamError.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import litellm
from litellm import acompletion

from craftagent.exceptions import UpstreamError
from craftagent.functions.models import ToolCallRequest
from craftagent.providers.models import ModelReply, ToolChoice

logger = logging.getLogger(__name__)

# Configure LiteLLM defaults
litellm.drop_params = True  # Drop unsupported params per-provider


class ModelClient(ABC):
    """Anything that can answer a tool-calling chat request."""

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> ModelReply:
        """Request the next turn from the model.

        Args:
            messages: Conversation in chat-completions format.
            tools: Model-facing tool schemas.
            tool_choice: Whether a tool call is mandatory.

        Returns:
            Parsed reply.

        Raises:
            UpstreamError: If the request fails.
        """
        ...


class ChatClient(ModelClient):
    """LiteLLM-backed client for OpenAI-compatible chat completion services."""

    def __init__(
        self,
        model: str,
        temperature: float = 1.0,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            model: Model identifier in LiteLLM form (e.g. "openai/gpt-oss-20b").
            temperature: Sampling temperature.
            api_base: Base URL of a self-hosted endpoint.
            api_key: API key; LiteLLM falls back to its provider env vars.
            timeout: Request timeout in seconds.
        """
        self.model = model
        self.temperature = temperature
        self.api_base = api_base
        self.api_key = api_key
        self.timeout = timeout

    def build_request(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> dict[str, Any]:
        """Build acompletion keyword arguments.

        Parallel tool calls are always disabled: handlers act on one shared
        world and must run one at a time.
        """
        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "parallel_tool_calls": False,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = ToolChoice(tool_choice).value
        if self.api_base:
            request["api_base"] = self.api_base
        if self.api_key:
            request["api_key"] = self.api_key
        if self.timeout:
            request["timeout"] = self.timeout
        return request

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> ModelReply:
        request = self.build_request(messages, tools, tool_choice)

        start = time.monotonic()
        try:
            response = await acompletion(**request)
        except Exception as e:
            raise UpstreamError(f"Request to {self.model} failed: {e}", model=self.model) from e
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(f"[LLM] Request completed in {elapsed_ms:.0f}ms")

        try:
            return parse_response(response, self.model)
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(f"Malformed response from {self.model}: {e}", model=self.model) from e


def parse_response(response: Any, model: Optional[str] = None) -> ModelReply:
    """Parse a LiteLLM/OpenAI response object into a ModelReply.

    Raises:
        UpstreamError: If the response has no choices or a tool call without a function.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise UpstreamError("Model response contains no choices", model=model)

    choice = choices[0]
    message = choice.message

    tool_calls = []
    for i, call in enumerate(getattr(message, "tool_calls", None) or []):
        function = getattr(call, "function", None)
        if function is None or not getattr(function, "name", None):
            raise UpstreamError(f"Tool call {i} in model response has no function name", model=model)
        tool_calls.append(
            ToolCallRequest(
                call_id=call.id or f"call_{i}",
                tool_name=function.name,
                arguments=function.arguments,
            )
        )

    reasoning = getattr(message, "reasoning_content", None) or getattr(message, "reasoning", None)

    return ModelReply(
        content=message.content,
        tool_calls=tool_calls,
        reasoning=reasoning if isinstance(reasoning, str) else None,
        finish_reason=getattr(choice, "finish_reason", None),
    )
