"""Service layer with business logic."""

from .export import export_filename, tasks_to_csv
from .person import PersonService
from .project import ProjectService
from .settings import SettingsService
from .task import TaskService
from .views import ViewService

__all__ = [
    "ProjectService",
    "TaskService",
    "PersonService",
    "SettingsService",
    "ViewService",
    "tasks_to_csv",
    "export_filename",
]
