"""API layer - FastAPI endpoints."""

from .persons import router as persons_router
from .projects import router as projects_router
from .settings import router as settings_router
from .tasks import router as tasks_router
from .views import router as views_router

__all__ = [
    "projects_router",
    "tasks_router",
    "persons_router",
    "settings_router",
    "views_router",
]
