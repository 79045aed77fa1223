"""Read-only views: Gantt chart, calendar and the open-work summary."""

from datetime import date
from typing import Any, Literal

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models import utc_now
from ..planning import GanttChart, build_calendar, build_gantt, sort_tasks
from ..planning.calendar import CalendarGrid
from ..repositories import (
    ProjectRepository,
    TaskRepository,
    TaskStatusRepository,
    TaskTypeRepository,
)


class ViewService:
    """
    Сервис для производных представлений.

    Сам ничего не считает: загружает задачи и проекты и отдаёт их
    чистым функциям из planning.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.project_repo = ProjectRepository(db)
        self.type_repo = TaskTypeRepository(db)
        self.status_repo = TaskStatusRepository(db)

    async def get_gantt(
        self,
        project_ids: list[int] | None = None,
        chart_start: date | None = None,
        range_weeks: int | None = None,
        today: date | None = None,
    ) -> GanttChart:
        """
        Gantt по выбранным проектам (пустой список = все проекты).

        Raises:
            ValueError: Если какого-то проекта из scope нет
        """
        if project_ids:
            found = {p.id for p in await self.project_repo.get_many(project_ids)}
            for project_id in project_ids:
                if project_id not in found:
                    raise ValueError(f"Project with id {project_id} not found")

        return build_gantt(
            await self.task_repo.get_all_full(),
            await self.project_repo.get_all_newest_first(),
            scope_project_ids=project_ids,
            chart_start=chart_start,
            range_weeks=range_weeks or settings.GANTT_RANGE_WEEKS,
            px_per_day=settings.GANTT_PX_PER_DAY,
            today=today,
        )

    async def get_calendar(
        self,
        anchor: date | None = None,
        mode: Literal["week", "month"] = "week",
        today: date | None = None,
    ) -> CalendarGrid:
        tasks = sort_tasks(
            await self.task_repo.get_all_full(),
            await self.type_repo.get_names(),
            await self.status_repo.get_names(),
            done_status=settings.DONE_STATUS_NAME,
        )
        return build_calendar(tasks, anchor=anchor, mode=mode, today=today)

    async def get_summary(self) -> dict[str, Any]:
        """
        Компактный снимок текущей работы (все незавершённые задачи).

        Пример:
            {
                "generated_at": "2026-03-02T09:00:00",
                "summary": {"total_open_tasks": 3, "total_projects": 2,
                            "by_status": {"Must do": 1, "My action": 2}},
                "projects": [{"id": 1, "name": "...", "open_task_count": 3}, ...],
                "tasks": [...]
            }
        """
        done = settings.DONE_STATUS_NAME
        open_tasks = sort_tasks(
            await self.task_repo.get_open_tasks(done),
            await self.type_repo.get_names(),
            await self.status_repo.get_names(),
            done_status=done,
        )

        by_status: dict[str, int] = {}
        for task in open_tasks:
            by_status[task.status] = by_status.get(task.status, 0) + 1
        by_status = dict(sorted(by_status.items(), key=lambda item: -item[1]))

        counts = await self.project_repo.count_open_tasks(done)
        projects = await self.project_repo.get_all_newest_first()
        # sorted() стабильна: при равном количестве остаются новые сверху
        projects = sorted(projects, key=lambda p: -counts.get(p.id, 0))

        return {
            "generated_at": utc_now(),
            "summary": {
                "total_open_tasks": len(open_tasks),
                "total_projects": len(projects),
                "by_status": by_status,
            },
            "projects": [
                {
                    "id": p.id,
                    "name": p.name,
                    "notes": p.notes,
                    "open_task_count": counts.get(p.id, 0),
                }
                for p in projects
            ],
            "tasks": open_tasks,
        }
