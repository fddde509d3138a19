"""Task list functions.

These let the model break a complex request into steps and work through
them over several turns. Failures are returned as bare strings, which the
dispatcher reports to the model as errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from craftagent.functions.models import EmptyArgs, SafeInt, ToolDefinition

if TYPE_CHECKING:
    from craftagent.agent.context import AgentContext

_TITLE = "Short, descriptive title (max 10 words)"
_MARKDOWN = "Detailed task description in markdown"
_PRIORITY = "Task priority. Higher value = higher priority. Default: 0"


class TaskSpec(BaseModel):
    title: str = Field(description=_TITLE)
    markdown: Optional[str] = Field(default=None, description=_MARKDOWN)
    priority: Optional[SafeInt] = Field(default=None, description=_PRIORITY)
    completed: Optional[bool] = Field(
        default=None, description="Task completion flag. Default: false"
    )


class TaskSetArgs(BaseModel):
    tasks: list[TaskSpec]


class TaskAddArgs(BaseModel):
    title: str = Field(description=_TITLE)
    markdown: Optional[str] = Field(default=None, description=_MARKDOWN)
    priority: Optional[SafeInt] = Field(default=None, description=_PRIORITY)


class TaskInsertArgs(BaseModel):
    index: SafeInt = Field(description="Index in the list to insert task to")
    title: str = Field(description=_TITLE)
    markdown: Optional[str] = Field(default=None, description=_MARKDOWN)


class TaskIndexArgs(BaseModel):
    index: SafeInt = Field(description="Index of the task")


async def task_get_active(agent: AgentContext, args: EmptyArgs):
    task = agent.tasks.active()
    if task is None:
        return "There is no active tasks!"
    return {"message": task.model_dump()}


async def task_completed(agent: AgentContext, args: EmptyArgs):
    index = agent.tasks.mark_completed()
    if index < 0:
        return "There is no active tasks to mark complete!"
    return {"message": f"Task at index {index} marked as completed"}


async def task_revert(agent: AgentContext, args: TaskIndexArgs):
    task = agent.tasks.mark_incomplete(args.index)
    if task is None:
        return f"Task with index {args.index} is not found!"
    return {"message": f"Task '{task.title}' reverted to incomplete state"}


async def task_list(agent: AgentContext, args: EmptyArgs):
    tasks = agent.tasks.get()
    if not tasks:
        return "Task list is empty!"
    # detailed descriptions are left out to keep the reply short
    return {"message": [task.model_dump(include={"title", "priority", "completed"}) for task in tasks]}


async def task_clear(agent: AgentContext, args: EmptyArgs):
    agent.tasks.clear()
    return {"message": "Task list is cleared"}


async def task_set(agent: AgentContext, args: TaskSetArgs):
    if not args.tasks:
        return "No task list provided!"
    indices = agent.tasks.set(spec.model_dump() for spec in args.tasks)
    return {"message": f"Task list set. Task indices: {indices}"}


async def task_add(agent: AgentContext, args: TaskAddArgs):
    index = agent.tasks.add(args.model_dump())
    if index < 0:
        return "Failed to create a task"
    return {"message": f"Task inserted at index {index}"}


async def task_insert(agent: AgentContext, args: TaskInsertArgs):
    index = agent.tasks.insert(args.index, {"title": args.title, "markdown": args.markdown})
    if index < 0:
        return f"Failed to create a task at index {args.index}"
    return {"message": f"Task inserted at index {index}"}


async def task_remove(agent: AgentContext, args: TaskIndexArgs):
    task = agent.tasks.remove(args.index)
    if task is None:
        return f"Task with index {args.index} is not found!"
    return {"message": f"Task '{task.title}' at index {args.index} is removed"}


TASK_FUNCTIONS: list[ToolDefinition] = [
    ToolDefinition(
        name="task_get_active",
        description="Returns currently active (not completed) task",
        handler=task_get_active,
    ),
    ToolDefinition(
        name="task_completed",
        description=(
            "Marks currently active task as completed. Completed tasks become inactive. "
            "Use this tool if you are absolutely sure that task is completed successfully."
        ),
        handler=task_completed,
    ),
    ToolDefinition(
        name="task_revert",
        description=(
            "Revert task at specified index to incomplete state. "
            "Use this tool to correct mistakenly completed task."
        ),
        parameters=TaskIndexArgs,
        handler=task_revert,
    ),
    ToolDefinition(
        name="task_list",
        description=(
            "Returns list of all tasks, even if they are inactive. Tasks are sorted by "
            "priority. Detailed task markdown description is omitted."
        ),
        handler=task_list,
    ),
    ToolDefinition(
        name="task_clear",
        description=(
            "Removes all tasks from the list. Use it if you made a big error when creating "
            "task list or when you are sure that all tasks are completed."
        ),
        handler=task_clear,
    ),
    ToolDefinition(
        name="task_set",
        description=(
            "Rewrites whole task list. Tasks will be automatically sorted by priority. "
            "Order of tasks with the same priority is not changed."
        ),
        parameters=TaskSetArgs,
        handler=task_set,
    ),
    ToolDefinition(
        name="task_add",
        description=(
            "Inserts one task in the task list. Index of the new task will be determined "
            "based on provided priority."
        ),
        parameters=TaskAddArgs,
        handler=task_add,
    ),
    ToolDefinition(
        name="task_insert",
        description="Inserts one task in the task list by index. Use this function only if necessary.",
        parameters=TaskInsertArgs,
        handler=task_insert,
    ),
    ToolDefinition(
        name="task_remove",
        description=(
            "Removes task from the list. Use this function only if necessary. "
            "If active task is completed, use 'task_completed'."
        ),
        parameters=TaskIndexArgs,
        handler=task_remove,
    ),
]
