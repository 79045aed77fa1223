"""Project service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.logging import get_logger
from ..models import Project, Task
from ..planning import sort_tasks
from ..repositories import (
    ProjectRepository,
    TaskRepository,
    TaskStatusRepository,
    TaskTypeRepository,
)

logger = get_logger(__name__)


class ProjectService:
    """
    Сервис для работы с проектами.

    Содержит бизнес-логику:
    - Значения по умолчанию для новых проектов
    - Запрет на удаление последнего проекта
    - Сортировку задач проекта по настройкам типов и статусов
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.task_repo = TaskRepository(db)
        self.type_repo = TaskTypeRepository(db)
        self.status_repo = TaskStatusRepository(db)

    async def create_project(self, name: str | None = None, notes: str | None = None) -> Project:
        """
        Создать новый проект.

        Бизнес-правила:
        1. Пустое название заменяется на DEFAULT_PROJECT_NAME ("New Project")
        2. notes - HTML строка, хранится как есть
        """
        project = Project(
            name=(name or "").strip() or settings.DEFAULT_PROJECT_NAME,
            notes=notes or "",
        )
        project = await self.project_repo.create(project)

        logger.info(
            "Project created", extra={"project_id": project.id, "project_name": project.name}
        )
        return project

    async def get_project(self, project_id: int) -> Project:
        """
        Получить проект по ID.

        Raises:
            ValueError: Если проект не найден
        """
        project = await self.project_repo.get_by_id(project_id)
        if not project:
            raise ValueError(f"Project with id {project_id} not found")
        return project

    async def get_all_projects(self) -> list[Project]:
        """Все проекты, новые сверху."""
        return await self.project_repo.get_all_newest_first()

    async def update_project(
        self,
        project_id: int,
        name: str | None = None,
        notes: str | None = None,
    ) -> Project:
        """
        Частичное обновление проекта.

        None означает "не менять". Пустая строка в notes очищает заметки.
        """
        await self.get_project(project_id)

        if name is not None and not name.strip():
            raise ValueError("Project name cannot be empty")

        updates = {}
        if name is not None:
            updates["name"] = name.strip()
        if notes is not None:
            updates["notes"] = notes

        project = await self.project_repo.update(project_id, **updates)
        logger.info(
            "Project updated", extra={"project_id": project_id, "fields": sorted(updates)}
        )
        return project

    async def delete_project(self, project_id: int) -> bool:
        """
        Удалить проект.

        Бизнес-правила:
        - Последний проект удалить нельзя
        - Задачи, для которых проект основной, удаляются вместе с ним
        - У задач, только привязанных к проекту, удаляется лишь связь
        """
        await self.get_project(project_id)

        if await self.project_repo.count() <= 1:
            raise ValueError("Cannot delete the last project")

        deleted = await self.project_repo.delete(project_id)
        logger.info("Project deleted", extra={"project_id": project_id})
        return deleted

    async def get_project_tasks(self, project_id: int) -> list[Task]:
        """
        Задачи проекта (основной проект или связь), в порядке приоритета.

        Raises:
            ValueError: Если проект не найден
        """
        await self.get_project(project_id)

        tasks = await self.task_repo.get_by_project(project_id)
        return sort_tasks(
            tasks,
            await self.type_repo.get_names(),
            await self.status_repo.get_names(),
            done_status=settings.DONE_STATUS_NAME,
        )
