"""
Dependencies для FastAPI endpoints.

Dependency Injection (DI): вместо создания сервиса вручную в каждом endpoint

    async def create_project(
        service: ProjectService = Depends(get_project_service)
    ):
        # service уже создан с сессией БД
        ...

Цепочка зависимостей:
    get_project_service зависит от get_db
    → FastAPI вызовет get_db() (commit при успехе, rollback при ошибке)
    → передаст сессию в get_project_service()
    → вернёт ProjectService в endpoint

В тестах get_db подменяется через app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..services import (
    PersonService,
    ProjectService,
    SettingsService,
    TaskService,
    ViewService,
)

__all__ = [
    "get_db",
    "get_project_service",
    "get_task_service",
    "get_person_service",
    "get_settings_service",
    "get_view_service",
]


async def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


async def get_person_service(db: AsyncSession = Depends(get_db)) -> PersonService:
    return PersonService(db)


async def get_settings_service(db: AsyncSession = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


async def get_view_service(db: AsyncSession = Depends(get_db)) -> ViewService:
    return ViewService(db)
