"""Client-side board state with optimistic updates.

``BoardState`` is a plain container handed around by reference. Only
``TaskBoard`` mutates it: every mutation is applied locally first, then
sent to the API. If the request fails the error message is stored on the
state and the whole board is refetched from the server.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Literal

from ..core.config import settings
from ..core.logging import get_logger
from ..models import utc_now
from ..planning import (
    TaskFilter,
    TaskGroup,
    filter_and_sort,
    group_by_person,
    sort_tasks,
)
from .api import ApiError, TaskManagerAPI

logger = get_logger(__name__)

ViewName = Literal["project", "task", "person", "calendar", "gantt"]


@dataclass
class Item:
    """Row built from an API JSON object; unknown keys are ignored."""

    id: int

    @classmethod
    def from_json(cls, data: dict):
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})


@dataclass
class ProjectItem(Item):
    name: str = ""
    notes: str = ""


@dataclass
class OptionItem(Item):
    name: str = ""
    color: str | None = None
    order: int = 0


@dataclass
class TaskItem(Item):
    name: str = ""
    project_id: int = 0
    project_ids: list[int] = field(default_factory=list)
    project_names: list[str] = field(default_factory=list)
    type: str = "Regular"
    status: str = settings.DEFAULT_TASK_STATUS
    start_date: str = ""
    due_date: str = ""
    notes: str = ""
    person_ids: list[int] = field(default_factory=list)
    person_names: list[str] = field(default_factory=list)
    completed_at: str | None = None


@dataclass
class BoardState:
    projects: list[ProjectItem] = field(default_factory=list)
    tasks: list[TaskItem] = field(default_factory=list)
    types: list[OptionItem] = field(default_factory=list)
    statuses: list[OptionItem] = field(default_factory=list)
    persons: list[OptionItem] = field(default_factory=list)

    view: ViewName = "project"
    selected_project_id: int | None = None
    filter: TaskFilter = field(default_factory=TaskFilter)

    loading: bool = False
    error: str | None = None

    def task(self, task_id: int) -> TaskItem | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    @property
    def selected_project(self) -> ProjectItem | None:
        return next((p for p in self.projects if p.id == self.selected_project_id), None)


class TaskBoard:
    """
    Facade over ``BoardState`` and ``TaskManagerAPI``.

    Methods return True when the server accepted the change, False when it
    was rejected (``state.error`` holds the reason).
    """

    def __init__(
        self,
        api: TaskManagerAPI,
        state: BoardState | None = None,
        done_status: str = settings.DONE_STATUS_NAME,
        fallback_status: str = settings.DEFAULT_TASK_STATUS,
    ):
        self.api = api
        # должны совпадать с DONE_STATUS_NAME / DEFAULT_TASK_STATUS сервера
        self.done_status = done_status
        self.fallback_status = fallback_status
        self.state = state if state is not None else BoardState()
        self._temp_id = 0

    # ----- loading -----

    async def refresh(self) -> None:
        """Reload everything; keeps the selected project if it still exists."""
        state = self.state
        state.loading = True
        try:
            projects = await self.api.list_projects()
            tasks = await self.api.list_tasks()
            settings = await self.api.get_settings()
        except ApiError as e:
            state.error = e.message
            logger.warning("Board refresh failed", extra={"error": e.message})
            return
        finally:
            state.loading = False

        state.projects = [ProjectItem.from_json(p) for p in projects]
        state.tasks = [TaskItem.from_json(t) for t in tasks]
        state.types = [OptionItem.from_json(t) for t in settings["types"]]
        state.statuses = [OptionItem.from_json(s) for s in settings["statuses"]]
        state.persons = [OptionItem.from_json(p) for p in settings["persons"]]

        if state.selected_project is None:
            state.selected_project_id = state.projects[0].id if state.projects else None

    async def _failed(self, error: ApiError) -> bool:
        self.state.error = error.message
        logger.warning("Board change rejected", extra={"error": error.message})
        await self.refresh()
        return False

    def clear_error(self) -> None:
        self.state.error = None

    # ----- derived views -----

    def visible_tasks(self) -> list[TaskItem]:
        """Tasks of the current view after the filter and priority sort."""
        state = self.state
        tasks = state.tasks
        if state.view == "project" and state.selected_project_id is not None:
            tasks = [t for t in tasks if state.selected_project_id in t.project_ids]
        return filter_and_sort(
            tasks, state.filter, state.types, state.statuses, done_status=self.done_status
        )

    def person_groups(self) -> list[TaskGroup]:
        state = self.state
        return group_by_person(
            state.tasks, state.persons, state.types, state.statuses, done_status=self.done_status
        )

    def select_project(self, project_id: int) -> None:
        self.state.selected_project_id = project_id
        self.state.view = "project"

    # ----- projects -----

    async def create_project(self, name: str | None = None) -> bool:
        try:
            created = await self.api.create_project(name=name)
        except ApiError as e:
            return await self._failed(e)
        project = ProjectItem.from_json(created)
        self.state.projects.insert(0, project)
        self.state.selected_project_id = project.id
        return True

    async def rename_project(self, project_id: int, name: str) -> bool:
        project = next((p for p in self.state.projects if p.id == project_id), None)
        if project is not None:
            project.name = name
        try:
            await self.api.update_project(project_id, name=name)
        except ApiError as e:
            return await self._failed(e)
        return True

    async def delete_project(self, project_id: int) -> bool:
        state = self.state
        if len(state.projects) <= 1:
            state.error = "Cannot delete the last project"
            return False

        # Задачи с этим основным проектом удаляются, у остальных снимается привязка
        state.projects = [p for p in state.projects if p.id != project_id]
        state.tasks = [t for t in state.tasks if t.project_id != project_id]
        for task in state.tasks:
            if project_id in task.project_ids:
                task.project_ids = [pid for pid in task.project_ids if pid != project_id]
        if state.selected_project_id == project_id:
            state.selected_project_id = state.projects[0].id

        try:
            await self.api.delete_project(project_id)
        except ApiError as e:
            return await self._failed(e)
        return True

    # ----- tasks -----

    async def create_task(self, name: str, **fields_: Any) -> bool:
        state = self.state
        project_ids = fields_.get("project_ids") or [
            fields_.get("project_id") or state.selected_project_id
        ]
        fields_["project_ids"] = project_ids

        self._temp_id -= 1
        placeholder = TaskItem(
            id=self._temp_id,
            name=name,
            status=fields_.get("status") or self.fallback_status,
            project_id=project_ids[0],
            project_ids=list(project_ids),
            **{
                k: v
                for k, v in fields_.items()
                if k not in ("project_id", "project_ids", "status")
            },
        )
        state.tasks.insert(0, placeholder)

        try:
            created = await self.api.create_task(name=name, **fields_)
        except ApiError as e:
            return await self._failed(e)
        state.tasks = [TaskItem.from_json(created) if t is placeholder else t for t in state.tasks]
        return True

    async def update_task(self, task_id: int, **changes: Any) -> bool:
        task = self.state.task(task_id)
        if task is not None:
            self._apply_locally(task, changes)
        try:
            updated = await self.api.update_task(task_id, **changes)
        except ApiError as e:
            return await self._failed(e)
        self._replace(TaskItem.from_json(updated))
        return True

    async def toggle_done(self, task_id: int) -> bool:
        task = self.state.task(task_id)
        if task is not None:
            if task.status == self.done_status:
                open_statuses = [
                    s.name
                    for s in sort_statuses(self.state.statuses)
                    if s.name != self.done_status
                ]
                new_status = open_statuses[0] if open_statuses else self.fallback_status
            else:
                new_status = self.done_status
            self._apply_locally(task, {"status": new_status})
        try:
            updated = await self.api.toggle_done(task_id)
        except ApiError as e:
            return await self._failed(e)
        self._replace(TaskItem.from_json(updated))
        return True

    async def delete_task(self, task_id: int) -> bool:
        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
        try:
            await self.api.delete_task(task_id)
        except ApiError as e:
            return await self._failed(e)
        return True

    # ----- settings -----

    async def save_types(self, types: list[dict]) -> bool:
        try:
            saved = await self.api.save_types(types)
        except ApiError as e:
            return await self._failed(e)
        self.state.types = [OptionItem.from_json(t) for t in saved]
        # переименование типа меняет задачи на сервере
        await self.refresh()
        return True

    async def save_statuses(self, statuses: list[dict]) -> bool:
        try:
            saved = await self.api.save_statuses(statuses)
        except ApiError as e:
            return await self._failed(e)
        self.state.statuses = [OptionItem.from_json(s) for s in saved]
        await self.refresh()
        return True

    # ----- helpers -----

    def _replace(self, fresh: TaskItem) -> None:
        self.state.tasks = [fresh if t.id == fresh.id else t for t in self.state.tasks]

    def _apply_locally(self, task: TaskItem, changes: dict[str, Any]) -> None:
        status = changes.get("status")
        if status is not None and status != task.status:
            if status == self.done_status:
                task.completed_at = utc_now().isoformat()
            elif task.status == self.done_status:
                task.completed_at = None
        for key, value in changes.items():
            if value is not None and hasattr(task, key):
                setattr(task, key, value)
        if changes.get("project_ids"):
            task.project_id = changes["project_ids"][0]


def sort_statuses(statuses: list[OptionItem]) -> list[OptionItem]:
    return sorted(statuses, key=lambda s: s.order)
