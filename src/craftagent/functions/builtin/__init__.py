"""Built-in functions for CraftAgent.

- Task list management (task_*)
- Time, weather and arithmetic helpers
- World actions: walking, combat, items, blocks
"""

from craftagent.functions.builtin.registry_utils import register_builtin_functions
from craftagent.functions.builtin.tasks import TASK_FUNCTIONS
from craftagent.functions.builtin.utility import UTILITY_FUNCTIONS, safe_eval_expression
from craftagent.functions.builtin.world import WORLD_FUNCTIONS

__all__ = [
    "TASK_FUNCTIONS",
    "UTILITY_FUNCTIONS",
    "WORLD_FUNCTIONS",
    "register_builtin_functions",
    "safe_eval_expression",
]
