"""Project repository with specific queries."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Project, Task, task_projects
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """
    Репозиторий для работы с проектами.

    Наследуется от BaseRepository, получая все CRUD операции,
    и добавляет специфичные методы для проектов.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    async def get_all_newest_first(self) -> list[Project]:
        """
        Получить все проекты, новые сверху.

        SQL эквивалент:
            SELECT * FROM projects ORDER BY created_at DESC, id DESC;
        """
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(result.scalars().all())

    async def count_open_tasks(self, done_status: str) -> dict[int, int]:
        """
        Количество незавершённых задач по каждому проекту.

        Считаем и основной проект, и связи через task_projects
        (задача учитывается в проекте один раз).

        Returns:
            {project_id: open_task_count} - проекты без задач в словарь не попадают
        """
        membership = (
            select(Task.id.label("task_id"), Task.project_id.label("project_id"))
            .where(Task.status != done_status)
            .union(
                select(task_projects.c.task_id, task_projects.c.project_id)
                .join(Task, Task.id == task_projects.c.task_id)
                .where(Task.status != done_status)
            )
            .subquery()
        )
        result = await self.db.execute(
            select(membership.c.project_id, func.count(membership.c.task_id)).group_by(
                membership.c.project_id
            )
        )
        return {project_id: count for project_id, count in result.all()}
