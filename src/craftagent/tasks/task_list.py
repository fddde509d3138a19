"""Priority-sorted task list used by the model to track multi-step plans."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from craftagent.exceptions import ToolValidationError
from craftagent.tasks.models import Task, TaskDescription

logger = logging.getLogger(__name__)

TaskInput = Union[TaskDescription, Task, Mapping[str, Any]]


def _describe(task: TaskInput) -> TaskDescription:
    """Normalize caller input.

    Raises:
        ToolValidationError: If a mapping is not a valid task (e.g. no title)
    """
    if isinstance(task, TaskDescription):
        return task
    if isinstance(task, Task):
        return TaskDescription(**task.model_dump())
    try:
        return TaskDescription.model_validate(dict(task))
    except ValidationError as e:
        fields = [".".join(str(part) for part in detail["loc"]) for detail in e.errors()]
        raise ToolValidationError(f"Invalid task: {e}", fields=fields) from e


class TaskList:
    """Ordered list of tasks, always sorted by priority (highest first).

    The active task is the first entry that is not completed. Operations that
    would break the ordering are refused and report index -1; the list is
    left untouched in that case.

    Tasks may be given as mappings; every task needs a ``title``. Input that
    is not a valid task raises ToolValidationError before the list changes.
    """

    def __init__(self, tasks: Optional[Iterable[TaskInput]] = None):
        """Initialize the task list.

        Args:
            tasks: Optional initial tasks (sorted on load)
        """
        self._tasks: list[Task] = []
        if tasks:
            self.set(tasks)

    def get(self) -> list[Task]:
        """Get a copy of the whole list."""
        return list(self._tasks)

    def set(self, tasks: Iterable[TaskInput]) -> list[int]:
        """Replace the whole list.

        Missing priorities default to 0 and missing completion flags to False.
        Sorting is stable, so tasks with equal priority keep their order.

        Args:
            tasks: New tasks

        Returns:
            Position of each supplied task after sorting
        """
        new_tasks = [_describe(task).to_task() for task in tasks]
        self._tasks = sorted(new_tasks, key=lambda t: t.priority, reverse=True)

        positions = {id(task): i for i, task in enumerate(self._tasks)}
        return [positions[id(task)] for task in new_tasks]

    def clear(self) -> None:
        """Remove all tasks."""
        self._tasks = []

    def active_index(self) -> int:
        """Index of the active task, or -1 if every task is completed."""
        for i, task in enumerate(self._tasks):
            if not task.completed:
                return i
        return -1

    def active(self) -> Optional[Task]:
        """The active (first incomplete) task, if any."""
        i = self.active_index()
        return self._tasks[i] if i >= 0 else None

    def active_info(self) -> Optional[str]:
        """Markdown description (or title) of the active task."""
        task = self.active()
        return task.info() if task else None

    def mark_completed(self) -> int:
        """Mark the active task completed.

        Returns:
            Index of the completed task, or -1 if there was none
        """
        i = self.active_index()
        if i >= 0:
            self._tasks[i].completed = True
            logger.debug(f"Task {i} '{self._tasks[i].title}' completed")
        return i

    def mark_incomplete(self, index: int) -> Optional[Task]:
        """Revert a task to incomplete.

        Returns:
            The reverted task, or None if the index is out of range
        """
        if not 0 <= index < len(self._tasks):
            return None
        task = self._tasks[index]
        task.completed = False
        return task

    def add(self, task: TaskInput) -> int:
        """Insert a task at the position its priority dictates.

        Without a priority the task goes to the end with the lowest priority.

        Returns:
            Index of the new task, or -1 if it could not be placed
        """
        description = _describe(task)
        if description.priority is None:
            return self.add_back(description)

        for i, existing in enumerate(self._tasks):
            if existing.priority < description.priority:
                return self.insert(i, description)
        return self.add_back(description)

    def add_front(self, task: TaskInput) -> int:
        """Insert a task right before the active one.

        Without a priority the task takes the active task's priority.

        Returns:
            Index of the new task, or -1 if the priority check failed
        """
        i = self.active_index()
        if i < 0:
            return self.add_back(task)
        return self.insert(i, task)

    def add_back(self, task: TaskInput) -> int:
        """Append a task.

        Without a priority the task takes the last task's priority.

        Returns:
            Index of the new task, or -1 if its priority exceeds the last one
        """
        description = _describe(task)
        last_priority = self._tasks[-1].priority if self._tasks else None

        if (
            last_priority is not None
            and description.priority is not None
            and last_priority < description.priority
        ):
            return -1

        self._tasks.append(description.to_task(default_priority=last_priority or 0))
        return len(self._tasks) - 1

    def insert(self, index: int, task: TaskInput) -> int:
        """Insert a task at a specific position.

        A given priority must fit between its neighbours. Without a priority
        the task inherits the next task's priority (or the previous one's at
        the end of the list).

        Returns:
            Index of the new task, or -1 if the index or priority is invalid
        """
        if not 0 <= index <= len(self._tasks):
            return -1

        description = _describe(task)
        prev_priority = self._tasks[index - 1].priority if index > 0 else None
        next_priority = self._tasks[index].priority if index < len(self._tasks) else None

        if description.priority is not None:
            # previous item must have the same or greater priority
            if prev_priority is not None and prev_priority < description.priority:
                return -1
            # next item must have the same or lower priority
            if next_priority is not None and next_priority > description.priority:
                return -1

        if next_priority is not None:
            default_priority = next_priority
        elif prev_priority is not None:
            default_priority = prev_priority
        else:
            default_priority = 0

        self._tasks.insert(index, description.to_task(default_priority=default_priority))
        return index

    def remove(self, index: int) -> Optional[Task]:
        """Remove a task.

        Returns:
            The removed task, or None if the index is out of range
        """
        if not 0 <= index < len(self._tasks):
            return None
        return self._tasks.pop(index)

    def __len__(self) -> int:
        """Get number of tasks."""
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        """Iterate tasks in priority order."""
        return iter(list(self._tasks))

    def __getitem__(self, index: int) -> Task:
        """Get a task by index."""
        return self._tasks[index]

    def __repr__(self) -> str:
        """Representation."""
        return f"<TaskList tasks={len(self._tasks)} active={self.active_index()}>"
