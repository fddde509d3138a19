"""Function registry holding the capabilities exposed to the model."""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from craftagent.exceptions import DuplicateNameError
from craftagent.functions.models import SAFE_INT_MAX, SAFE_INT_MIN, GameMode, ToolDefinition

logger = logging.getLogger(__name__)

_SENTINEL_BOUNDS = {
    "minimum": SAFE_INT_MIN,
    "maximum": SAFE_INT_MAX,
}

# Schema keys that only matter to validation or documentation tooling
_DROPPED_KEYS = {"title"}


def _strip_schema(node: Any) -> Any:
    """Remove internal-only details from a JSON schema, recursively."""
    if isinstance(node, list):
        return [_strip_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    result: dict[str, Any] = {}
    for key, value in node.items():
        if key == "properties" and isinstance(value, dict):
            # Property names are user data, not schema keywords
            result[key] = {name: _strip_schema(prop) for name, prop in value.items()}
            continue
        if key in _DROPPED_KEYS and isinstance(value, str):
            continue
        if key in _SENTINEL_BOUNDS and value == _SENTINEL_BOUNDS[key]:
            continue
        result[key] = _strip_schema(value)
    return result


class FunctionRegistry:
    """Registry of tool definitions.

    One registry is built at startup and passed to the dispatcher and the
    conversation loop. Definitions cannot be replaced once registered.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._functions: dict[str, ToolDefinition] = {}
        self._schema_cache: dict[tuple[frozenset[str], Optional[GameMode]], list[dict[str, Any]]] = {}

    def register(self, definition: ToolDefinition) -> None:
        """Register a tool definition.

        Args:
            definition: Definition to register

        Raises:
            DuplicateNameError: If the name is already registered
        """
        if definition.name in self._functions:
            raise DuplicateNameError(definition.name)

        self._functions[definition.name] = definition
        self._schema_cache.clear()
        logger.info(f"Registering function {definition.name}")

    def register_all(self, definitions: Iterable[ToolDefinition]) -> None:
        """Register several definitions in order."""
        for definition in definitions:
            self.register(definition)

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Get a definition by name, or None if not registered."""
        return self._functions.get(name)

    def list_tools(
        self,
        groups: Optional[Iterable[str]] = None,
        game_mode: Optional[GameMode | str] = None,
    ) -> list[ToolDefinition]:
        """List definitions available for a capability set and mode.

        A definition is included when its group is unset or among ``groups``,
        and its mode restriction is unset or equal to ``game_mode``.

        Args:
            groups: Enabled capability groups (None = no groups enabled)
            game_mode: Current game mode (None = only unrestricted tools)

        Returns:
            Matching definitions in registration order
        """
        allowed = set(groups or ())
        mode = GameMode(game_mode) if game_mode is not None else None

        return [
            definition
            for definition in self._functions.values()
            if (definition.group is None or definition.group in allowed)
            and (definition.game_mode is None or definition.game_mode == mode)
        ]

    def list_names(self) -> list[str]:
        """Get names of all registered definitions."""
        return list(self._functions.keys())

    @staticmethod
    def describe(definition: ToolDefinition) -> dict[str, Any]:
        """Build the model-facing schema for a definition.

        Titles and open-ended integer bounds are removed to keep the prompt
        small.

        Returns:
            Tool entry in OpenAI function-calling format
        """
        parameters = _strip_schema(definition.parameters.model_json_schema())
        parameters.setdefault("properties", {})

        function: dict[str, Any] = {
            "name": definition.name,
            "parameters": parameters,
        }
        if definition.description:
            function["description"] = definition.description.strip()

        return {"type": "function", "function": function}

    def get_tool_schemas(
        self,
        groups: Optional[Iterable[str]] = None,
        game_mode: Optional[GameMode | str] = None,
    ) -> list[dict[str, Any]]:
        """Get described schemas for the tools visible in a mode.

        Results are cached per (groups, mode) until the next registration.
        """
        mode = GameMode(game_mode) if game_mode is not None else None
        key = (frozenset(groups or ()), mode)

        if key not in self._schema_cache:
            self._schema_cache[key] = [
                self.describe(definition) for definition in self.list_tools(key[0], mode)
            ]
        return self._schema_cache[key]

    def __len__(self) -> int:
        """Get number of registered definitions."""
        return len(self._functions)

    def __contains__(self, name: str) -> bool:
        """Check if a definition is registered."""
        return name in self._functions

    def __str__(self) -> str:
        """String representation."""
        return f"FunctionRegistry({len(self._functions)} functions)"

    def __repr__(self) -> str:
        """Representation."""
        names = ", ".join(self._functions.keys())
        return f"<FunctionRegistry functions=[{names}]>"
