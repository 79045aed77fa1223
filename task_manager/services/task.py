"""Task service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.logging import get_logger
from ..models import Task, utc_now
from ..planning import TaskFilter, TaskGroup, filter_and_sort, group_by_person
from ..repositories import (
    PersonRepository,
    ProjectRepository,
    TaskRepository,
    TaskStatusRepository,
    TaskTypeRepository,
)

logger = get_logger(__name__)


class TaskService:
    """
    Сервис для работы с задачами.

    Самый сложный сервис, так как задачи имеют много связей:
    - Основной проект + дополнительные проекты (Many-to-Many)
    - Люди (POC, Many-to-Many)
    - Тип и статус из настраиваемых списков
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.task_repo = TaskRepository(db)
        self.project_repo = ProjectRepository(db)
        self.person_repo = PersonRepository(db)
        self.type_repo = TaskTypeRepository(db)
        self.status_repo = TaskStatusRepository(db)

    @property
    def done_status(self) -> str:
        return settings.DONE_STATUS_NAME

    async def create_task(
        self,
        name: str,
        project_id: int | None = None,
        project_ids: list[int] | None = None,
        type: str | None = None,
        status: str | None = None,
        start_date: str | None = None,
        due_date: str | None = None,
        notes: str | None = None,
        person_ids: list[int] | None = None,
    ) -> Task:
        """
        Создать новую задачу с валидацией бизнес-правил.

        Args:
            name: Название задачи
            project_id: Основной проект
            project_ids: Все проекты задачи (первый становится основным,
                если project_id не передан)
            type: Тип задачи (по умолчанию DEFAULT_TASK_TYPE)
            status: Статус (по умолчанию DEFAULT_TASK_STATUS)
            start_date: Дата начала в свободном формате
            due_date: Дедлайн в свободном формате ("5/Mar", "03/05", "today")
            notes: Заметки
            person_ids: Назначенные люди

        Raises:
            ValueError: Если валидация не прошла

        Бизнес-правила:
        1. Название обязательно
        2. Хотя бы один проект, все проекты существуют
        3. Тип и статус есть в настройках (если настройки заполнены)
        4. Задача, созданная сразу в Done, получает completed_at
        """
        # 1. ВАЛИДАЦИЯ: Название
        if not name or not name.strip():
            raise ValueError("Task name cannot be empty")

        # 2. ВАЛИДАЦИЯ: Проекты
        ids = self._merge_project_ids(project_id, project_ids)
        if not ids:
            raise ValueError("Task must belong to at least one project")
        projects = await self._load_projects(ids)

        # 3. ВАЛИДАЦИЯ: Люди
        persons = await self._load_persons(person_ids or [])

        # 4. ВАЛИДАЦИЯ: Тип и статус
        type = type or settings.DEFAULT_TASK_TYPE
        status = status or settings.DEFAULT_TASK_STATUS
        await self._validate_type(type)
        await self._validate_status(status)

        # 5. СОЗДАНИЕ: связи передаём в конструктор, пока объект ещё pending
        task = Task(
            name=name.strip(),
            project=projects[0],
            projects=projects,
            persons=persons,
            type=type,
            status=status,
            start_date=start_date or "",
            due_date=due_date or "",
            notes=notes or "",
            completed_at=utc_now() if status == self.done_status else None,
        )
        task = await self.task_repo.create(task)

        logger.info(
            "Task created",
            extra={"task_id": task.id, "project_ids": ids, "status": status},
        )

        # 6. ЗАГРУЗКА: Вернуть задачу со всеми связями
        return await self.task_repo.get_by_id_full(task.id)

    async def get_task(self, task_id: int) -> Task:
        """
        Получить задачу по ID (со связями).

        Raises:
            ValueError: Если задача не найдена
        """
        task = await self.task_repo.get_by_id_full(task_id)
        if not task:
            raise ValueError(f"Task with id {task_id} not found")
        return task

    async def update_task(
        self,
        task_id: int,
        name: str | None = None,
        project_id: int | None = None,
        project_ids: list[int] | None = None,
        type: str | None = None,
        status: str | None = None,
        start_date: str | None = None,
        due_date: str | None = None,
        notes: str | None = None,
        person_ids: list[int] | None = None,
    ) -> Task:
        """
        Частичное обновление задачи.

        None означает "не менять". person_ids / project_ids, если переданы,
        полностью заменяют связи (пустой список людей - снять всех).

        Бизнес-правила:
        1. При смене статуса на Done - установить completed_at
        2. При смене статуса с Done - сбросить completed_at
        3. Смена только project_id меняет основной проект,
           остальные привязки сохраняются
        """
        task = await self.get_task(task_id)

        if name is not None:
            if not name.strip():
                raise ValueError("Task name cannot be empty")
            task.name = name.strip()
        if type is not None:
            await self._validate_type(type)
            task.type = type
        if status is not None:
            await self._validate_status(status)
            self._apply_status(task, status)
        if start_date is not None:
            task.start_date = start_date
        if due_date is not None:
            task.due_date = due_date
        if notes is not None:
            task.notes = notes

        if project_ids is not None:
            ids = self._merge_project_ids(project_id, project_ids)
            if not ids:
                raise ValueError("Task must belong to at least one project")
            await self.task_repo.set_projects(task, await self._load_projects(ids))
        elif project_id is not None and project_id != task.project_id:
            ids = [project_id] + [pid for pid in task.project_ids[1:] if pid != project_id]
            await self.task_repo.set_projects(task, await self._load_projects(ids))

        if person_ids is not None:
            await self.task_repo.set_persons(task, await self._load_persons(person_ids))

        await self.db.flush()
        logger.info("Task updated", extra={"task_id": task_id, "status": task.status})

        return await self.task_repo.get_by_id_full(task_id)

    async def toggle_done(self, task_id: int) -> Task:
        """
        Переключить задачу Done <-> открытый статус.

        Из Done задача возвращается в первый настроенный статус, который
        не Done (или DEFAULT_TASK_STATUS, если такого нет).
        """
        task = await self.get_task(task_id)

        if task.status == self.done_status:
            open_statuses = [
                s for s in await self.status_repo.get_names() if s != self.done_status
            ]
            new_status = open_statuses[0] if open_statuses else settings.DEFAULT_TASK_STATUS
        else:
            new_status = self.done_status

        self._apply_status(task, new_status)
        await self.db.flush()

        logger.info("Task toggled", extra={"task_id": task_id, "status": new_status})
        return await self.task_repo.get_by_id_full(task_id)

    async def delete_task(self, task_id: int) -> bool:
        """
        Удалить задачу.

        Строки task_persons / task_projects удаляются вместе с ней.
        """
        await self.get_task(task_id)

        deleted = await self.task_repo.delete(task_id)
        logger.info("Task deleted", extra={"task_id": task_id})
        return deleted

    async def list_tasks(self, criteria: TaskFilter | None = None) -> list[Task]:
        """
        Отфильтрованный и отсортированный список задач.

        Порядок: открытые задачи по рангу типа, рангу статуса и наличию дедлайна,
        затем Done (недавно завершённые сверху).
        """
        tasks = await self.task_repo.get_all_full()
        return filter_and_sort(
            tasks,
            criteria,
            await self.type_repo.get_names(),
            await self.status_repo.get_names(),
            done_status=self.done_status,
        )

    async def get_tasks_by_person(self) -> list[TaskGroup]:
        """Люди в порядке order, у каждого - его задачи в порядке приоритета."""
        return group_by_person(
            await self.task_repo.get_all_full(),
            await self.person_repo.get_all_ordered(),
            await self.type_repo.get_names(),
            await self.status_repo.get_names(),
            done_status=self.done_status,
        )

    # Вспомогательные методы (private)

    def _apply_status(self, task: Task, status: str) -> None:
        """Сменить статус, поддерживая completed_at."""
        if status == self.done_status and task.status != self.done_status:
            task.completed_at = utc_now()
        elif status != self.done_status and task.status == self.done_status:
            task.completed_at = None
        task.status = status

    @staticmethod
    def _merge_project_ids(project_id: int | None, project_ids: list[int] | None) -> list[int]:
        """project_id (если есть) первым, затем project_ids без повторов."""
        ids = [project_id] if project_id is not None else []
        ids.extend(project_ids or [])
        return list(dict.fromkeys(ids))

    async def _load_projects(self, ids: list[int]) -> list:
        projects = await self.project_repo.get_many(ids)
        found = {p.id for p in projects}
        for pid in ids:
            if pid not in found:
                raise ValueError(f"Project with id {pid} not found")
        return projects

    async def _load_persons(self, ids: list[int]) -> list:
        ids = list(dict.fromkeys(ids))
        persons = await self.person_repo.get_many(ids)
        found = {p.id for p in persons}
        for pid in ids:
            if pid not in found:
                raise ValueError(f"Person with id {pid} not found")
        return persons

    async def _validate_type(self, type: str) -> None:
        names = await self.type_repo.get_names()
        if names and type not in names:
            raise ValueError(f"Unknown task type '{type}'. Allowed: {', '.join(names)}")

    async def _validate_status(self, status: str) -> None:
        names = await self.status_repo.get_names()
        if names and status not in names:
            raise ValueError(f"Unknown task status '{status}'. Allowed: {', '.join(names)}")
