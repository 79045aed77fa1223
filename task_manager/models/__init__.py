"""SQLAlchemy models for Task Manager."""

from .base import Base, TimestampMixin, utc_now
from .links import task_persons, task_projects
from .options import TaskStatus, TaskType
from .person import Person
from .project import Project
from .task import Task

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    "Project",
    "Task",
    "Person",
    "TaskType",
    "TaskStatus",
    "task_persons",
    "task_projects",
]
