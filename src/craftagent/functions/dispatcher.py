"""Tool dispatcher: validates arguments and invokes handlers."""

import inspect
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ValidationError

from craftagent.exceptions import HandlerError, ToolLookupError, ToolValidationError
from craftagent.functions.models import ResultStatus, ToolCallResult, ToolDefinition
from craftagent.functions.registry import FunctionRegistry

logger = logging.getLogger(__name__)

RawArguments = Union[Mapping[str, Any], str, None]


def _format_validation_error(name: str, error: ValidationError) -> ToolValidationError:
    """Name every offending field in a validation error."""
    fields: list[str] = []
    problems: list[str] = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail.get("loc", ())) or "<arguments>"
        fields.append(field)
        problems.append(f"'{field}': {detail.get('msg', 'invalid value')}")

    message = f"Invalid arguments for '{name}': " + "; ".join(problems)
    return ToolValidationError(message, fields=fields)


class ToolDispatcher:
    """Dispatches tool calls against a function registry.

    ``invoke`` never raises for a bad call: unknown tools, invalid arguments
    and handler failures all come back as error results so the conversation
    loop can hand them to the model.
    """

    def __init__(self, registry: FunctionRegistry):
        """Initialize dispatcher.

        Args:
            registry: Registry to resolve tool names against
        """
        self.registry = registry

    async def invoke(
        self,
        name: str,
        context: Any,
        raw_args: RawArguments = None,
    ) -> ToolCallResult:
        """Validate and run a tool call.

        Args:
            name: Registered tool name
            context: Agent context passed as the handler's first argument
            raw_args: Arguments from the model (mapping or JSON string)

        Returns:
            Exactly one ToolCallResult
        """
        start_time = time.time()
        try:
            definition = self._resolve(name)
            args = self._validate(definition, raw_args)
            logger.debug(f"Executing function '{name}' with args={args!r}")
            result = await self._call(definition, context, args)
        except (ToolLookupError, ToolValidationError, HandlerError) as e:
            logger.warning(f"Function call '{name}' failed: {e}")
            return ToolCallResult.error(str(e))
        except Exception as e:
            logger.error(f"Function call '{name}' failed unexpectedly: {e}", exc_info=True)
            return ToolCallResult.error(f"Function '{name}' failed: {e}")

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(f"Function '{name}' returned {result.status.value} in {elapsed_ms:.0f}ms")
        return result

    def _resolve(self, name: str) -> ToolDefinition:
        definition = self.registry.get(name)
        if definition is None:
            raise ToolLookupError(name)
        return definition

    @staticmethod
    def _validate(definition: ToolDefinition, raw_args: RawArguments) -> BaseModel:
        """Validate raw arguments against the definition's parameter model.

        Raises:
            ToolValidationError: If arguments are malformed or mismatched
        """
        if raw_args is None or raw_args == "":
            raw_args = {}

        if isinstance(raw_args, str):
            try:
                raw_args = json.loads(raw_args)
            except (ValueError, RecursionError) as e:
                raise ToolValidationError(
                    f"Invalid arguments for '{definition.name}': not valid JSON ({e})"
                ) from e

        if not isinstance(raw_args, Mapping):
            raise ToolValidationError(
                f"Invalid arguments for '{definition.name}': expected an object, "
                f"got {type(raw_args).__name__}"
            )

        try:
            return definition.parameters.model_validate(dict(raw_args))
        except ValidationError as e:
            raise _format_validation_error(definition.name, e) from e

    async def _call(
        self, definition: ToolDefinition, context: Any, args: BaseModel
    ) -> ToolCallResult:
        """Run the handler and normalize its return value.

        Raises:
            HandlerError: If the handler raises or returns an unusable value
        """
        try:
            returned = definition.handler(context, args)
            if inspect.isawaitable(returned):
                returned = await returned
        except Exception as e:
            logger.error(f"Function '{definition.name}' raised: {e}", exc_info=True)
            raise HandlerError(
                f"Function '{definition.name}' failed: {e}", tool_name=definition.name
            ) from e

        return self._normalize(definition.name, returned)

    @staticmethod
    def _normalize(name: str, returned: Any) -> ToolCallResult:
        """Unify handler return values into one result shape.

        A bare string is an error message by convention. Structured results
        without an explicit status are successes.
        """
        if isinstance(returned, ToolCallResult):
            return returned

        if isinstance(returned, str):
            return ToolCallResult(status=ResultStatus.ERROR, message=returned)

        if isinstance(returned, Mapping):
            try:
                return ToolCallResult.model_validate(dict(returned))
            except ValidationError as e:
                raise HandlerError(
                    f"Function '{name}' returned a malformed result: {e}", tool_name=name
                ) from e

        raise HandlerError(
            f"Function '{name}' returned unsupported type {type(returned).__name__}",
            tool_name=name,
        )

    def __repr__(self) -> str:
        """Representation."""
        return f"<ToolDispatcher registry={self.registry!r}>"

