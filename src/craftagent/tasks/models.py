"""Data models for the task list."""

from typing import Optional

from pydantic import BaseModel, Field


class Task(BaseModel):
    """A plan step tracked across turns."""

    title: str = Field(description="Short, descriptive title of the task")
    markdown: Optional[str] = Field(
        default=None, description="Detailed description of the task in markdown"
    )
    priority: int = Field(
        default=0, description="Higher value = higher priority. Can be negative."
    )
    completed: bool = False

    def info(self) -> str:
        """Detailed description, or the title when there is none."""
        return self.markdown or self.title


class TaskDescription(BaseModel):
    """Task as supplied by a caller; unset fields get list-dependent defaults."""

    title: str
    markdown: Optional[str] = None
    priority: Optional[int] = None
    completed: Optional[bool] = None

    def to_task(self, default_priority: int = 0) -> Task:
        """Build a task, filling unset fields."""
        return Task(
            title=self.title,
            markdown=self.markdown,
            priority=self.priority if self.priority is not None else default_priority,
            completed=self.completed if self.completed is not None else False,
        )
