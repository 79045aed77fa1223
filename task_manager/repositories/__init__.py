"""Repository layer for data access."""

from .base import BaseRepository
from .options import OptionRepository, TaskStatusRepository, TaskTypeRepository
from .person import PersonRepository
from .project import ProjectRepository
from .task import TaskRepository

__all__ = [
    "BaseRepository",
    "ProjectRepository",
    "TaskRepository",
    "PersonRepository",
    "OptionRepository",
    "TaskTypeRepository",
    "TaskStatusRepository",
]
