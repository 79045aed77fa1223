"""Task repository with specific queries."""

from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Person, Project, Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """
    Репозиторий для работы с задачами.

    Все выборки сразу загружают проекты и людей (selectinload):
    в async режиме ленивая загрузка связей недоступна, а API всегда
    отдаёт project_ids / person_ids.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    @staticmethod
    def _with_links(query):
        return query.options(
            selectinload(Task.project),
            selectinload(Task.projects),
            selectinload(Task.persons),
        )

    async def get_by_id_full(self, id: int) -> Task | None:
        """
        Получить задачу со связями (основной проект, все проекты, люди).

        populate_existing обновляет объект, если он уже есть в сессии
        (например, после замены связей в этой же транзакции).
        """
        result = await self.db.execute(
            self._with_links(select(Task))
            .where(Task.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_full(self) -> list[Task]:
        """
        Все задачи со связями, новые сверху.

        SQL эквивалент:
            SELECT * FROM tasks ORDER BY created_at DESC, id DESC;
        """
        result = await self.db.execute(
            self._with_links(select(Task)).order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_project(self, project_id: int) -> list[Task]:
        """
        Задачи проекта: основной проект ИЛИ связь через task_projects.

        SQL эквивалент:
            SELECT * FROM tasks
            WHERE project_id = {project_id}
               OR EXISTS (SELECT 1 FROM task_projects
                          WHERE task_id = tasks.id AND project_id = {project_id});
        """
        result = await self.db.execute(
            self._with_links(select(Task))
            .where(or_(Task.project_id == project_id, Task.projects.any(Project.id == project_id)))
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(result.scalars().all())

    async def get_open_tasks(self, done_status: str) -> list[Task]:
        """
        Все незавершённые задачи.

        SQL эквивалент:
            SELECT * FROM tasks WHERE status != {done_status};
        """
        result = await self.db.execute(
            self._with_links(select(Task))
            .where(Task.status != done_status)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(result.scalars().all())

    async def set_persons(self, task: Task, persons: list[Person]) -> Task:
        """
        Полностью заменить людей задачи.

        SQLAlchemy сам удалит старые строки task_persons и вставит новые.
        """
        task.persons = list(persons)
        await self.db.flush()
        return task

    async def set_projects(self, task: Task, projects: list[Project]) -> Task:
        """
        Полностью заменить проекты задачи.

        Первый проект в списке становится основным (project_id).
        """
        task.project_id = projects[0].id
        task.project = projects[0]
        task.projects = list(projects)
        await self.db.flush()
        return task

    async def rename_field_value(self, field: str, old: str, new: str) -> int:
        """
        Переименовать тип или статус во всех задачах.

        SQL эквивалент:
            UPDATE tasks SET {field} = {new} WHERE {field} = {old};

        Returns:
            Количество обновлённых задач
        """
        column = getattr(Task, field)
        result = await self.db.execute(
            update(Task)
            .where(column == old)
            .values({field: new})
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    async def sync_completed_at(self, done_status: str, completed_at: datetime) -> int:
        """
        Привести completed_at в соответствие со статусом после массового
        переименования статусов.

        SQL эквивалент:
            UPDATE tasks SET completed_at = {completed_at}
            WHERE status = {done_status} AND completed_at IS NULL;
            UPDATE tasks SET completed_at = NULL
            WHERE status != {done_status} AND completed_at IS NOT NULL;

        Returns:
            Количество исправленных задач
        """
        closed = await self.db.execute(
            update(Task)
            .where(Task.status == done_status, Task.completed_at.is_(None))
            .values(completed_at=completed_at)
            .execution_options(synchronize_session="evaluate")
        )
        reopened = await self.db.execute(
            update(Task)
            .where(Task.status != done_status, Task.completed_at.is_not(None))
            .values(completed_at=None)
            .execution_options(synchronize_session="evaluate")
        )
        return closed.rowcount + reopened.rowcount
