"""Utility functions for function registry setup."""

import logging

from craftagent.functions.builtin.tasks import TASK_FUNCTIONS
from craftagent.functions.builtin.utility import UTILITY_FUNCTIONS
from craftagent.functions.builtin.world import WORLD_FUNCTIONS
from craftagent.functions.registry import FunctionRegistry

logger = logging.getLogger(__name__)


def register_builtin_functions(
    registry: FunctionRegistry,
    include_world: bool = True,
) -> None:
    """Register all built-in functions.

    Args:
        registry: FunctionRegistry to register functions in
        include_world: Also register functions that need a game world

    Raises:
        DuplicateNameError: If any name is already taken
    """
    registry.register_all(TASK_FUNCTIONS)
    registry.register_all(UTILITY_FUNCTIONS)
    count = len(TASK_FUNCTIONS) + len(UTILITY_FUNCTIONS)

    if include_world:
        registry.register_all(WORLD_FUNCTIONS)
        count += len(WORLD_FUNCTIONS)

    logger.info(f"Registered {count} built-in functions")
