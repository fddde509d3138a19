"""Task list the model uses to track multi-step plans across turns."""

from craftagent.tasks.models import Task, TaskDescription
from craftagent.tasks.task_list import TaskList

__all__ = [
    "Task",
    "TaskDescription",
    "TaskList",
]
