"""Prompt templates used by the conversation loop."""

import re
from typing import Any, Optional

DEFAULT_SYSTEM_PROMPT = """
You are a minecraft bot player. Your username is: {username}.
Just play the game and help other players. Use tools to interact with the game.
Tools always print out results from your point of view in the game (e.g. if tool says YOU have 100% health, it is YOUR (bot) health).
Everything you say is sent to minecraft chat, so keep it short and don't use multiline answers.

Use the task list for complex task execution (like building a house or keeping a farm running)! Break tasks into subtasks and execute them one by one.
Don't use task list for tasks that can be completed by only one tool call.
Task list can be modified by tools that start with "task_*".
"""

DEFAULT_REPEAT_WARNING = (
    "You called {name} {count} times in a row. "
    "Check whether it is making progress before calling it again."
)

DEFAULT_STEP_LIMIT_MESSAGE = "I could not finish this in time."

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def format_template(template: str, **values: Any) -> str:
    """Substitute ``{key}`` placeholders, leaving unknown ones untouched.

    Unlike ``str.format`` this tolerates literal braces in user-supplied
    templates.
    """

    def replace(match: re.Match) -> str:
        key = match.group(1)
        return str(values[key]) if values.get(key) is not None else match.group(0)

    return _PLACEHOLDER.sub(replace, template)


def build_status_message(task_info: Optional[str], position: Optional[Any] = None) -> str:
    """Build the per-request status message.

    Args:
        task_info: Description of the active task, if any
        position: Current position, if connected to a world

    Returns:
        Status text for a developer message
    """
    lines = []
    if position is not None:
        lines.append(f"Your position: {position}")
    if task_info:
        lines.append(f"Your active task is:\n{task_info}")
    else:
        lines.append("You have no active tasks")
    return "\n".join(lines)
