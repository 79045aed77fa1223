"""Filtering and priority ordering of tasks.

Works on any object exposing ``name``, ``type``, ``status``, ``due_date``,
``completed_at``, ``project_ids`` and ``person_ids`` (ORM ``Task`` rows or
plain dataclasses), so the same rules drive the API and the client board.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

T = TypeVar("T")

DEFAULT_DONE_STATUS = "Done"


@dataclass
class TaskFilter:
    """
    Criteria for the task list.

    All criteria are AND-combined; values inside one criterion are OR-combined.
    An empty list means "no constraint".
    """

    search: str = ""
    types: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)
    project_ids: list[int] = field(default_factory=list)
    person_ids: list[int] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.search.strip()
            or self.types
            or self.statuses
            or self.project_ids
            or self.person_ids
        )


class OrderIndex:
    """
    Rank lookup for a user-configured ordered list of names.

    Names missing from the list rank after every configured name.
    """

    def __init__(self, names: Iterable[str]):
        self._rank: dict[str, int] = {}
        for name in names:
            self._rank.setdefault(name, len(self._rank))

    @classmethod
    def from_options(cls, options: Iterable[Any]) -> "OrderIndex":
        """Build from settings rows or plain names, sorted by their ``order``."""
        items = list(options)
        if items and not isinstance(items[0], str):
            items = [o.name for o in sorted(items, key=lambda o: getattr(o, "order", 0))]
        return cls(items)

    @property
    def unknown_rank(self) -> int:
        return len(self._rank)

    def rank(self, name: str | None) -> int:
        if name is None:
            return self.unknown_rank
        return self._rank.get(name, self.unknown_rank)

    def __contains__(self, name: object) -> bool:
        return name in self._rank

    def __len__(self) -> int:
        return len(self._rank)


def matches(task: Any, criteria: TaskFilter) -> bool:
    """Check a single task against the filter."""
    if criteria.types and task.type not in criteria.types:
        return False
    if criteria.statuses and task.status not in criteria.statuses:
        return False
    if criteria.project_ids and not any(
        pid in criteria.project_ids for pid in task.project_ids
    ):
        return False
    if criteria.person_ids and not any(pid in criteria.person_ids for pid in task.person_ids):
        return False

    search = criteria.search.strip().lower()
    if search and search not in (task.name or "").lower():
        return False
    return True


def filter_tasks(tasks: Iterable[T], criteria: TaskFilter | None = None) -> list[T]:
    """Return the tasks matching ``criteria``, keeping input order."""
    tasks = list(tasks)
    if criteria is None or criteria.is_empty():
        return tasks
    return [t for t in tasks if matches(t, criteria)]


def _completed_timestamp(completed_at: datetime | str | None) -> float:
    if not completed_at:
        return 0.0
    if isinstance(completed_at, str):
        try:
            completed_at = datetime.fromisoformat(completed_at)
        except ValueError:
            return 0.0
    return completed_at.timestamp()


def sort_key(
    task: Any,
    types: OrderIndex,
    statuses: OrderIndex,
    done_status: str = DEFAULT_DONE_STATUS,
) -> tuple:
    """
    Sort key for one task.

    Done tasks go last, most recently completed first. Everything else is
    ordered by type rank, then status rank, then "has a due date" first.
    """
    if task.status == done_status:
        return (1, 0, 0, 0, -_completed_timestamp(task.completed_at))
    return (
        0,
        types.rank(task.type),
        statuses.rank(task.status),
        0 if task.due_date else 1,
        0.0,
    )


def sort_tasks(
    tasks: Iterable[T],
    types: OrderIndex | Sequence[Any] = (),
    statuses: OrderIndex | Sequence[Any] = (),
    done_status: str = DEFAULT_DONE_STATUS,
) -> list[T]:
    """
    Stable priority sort.

    ``types`` / ``statuses`` are either ready ``OrderIndex`` objects or the
    ordered settings (rows or names).
    """
    type_index = types if isinstance(types, OrderIndex) else OrderIndex.from_options(types)
    status_index = (
        statuses if isinstance(statuses, OrderIndex) else OrderIndex.from_options(statuses)
    )
    return sorted(tasks, key=lambda t: sort_key(t, type_index, status_index, done_status))


def filter_and_sort(
    tasks: Iterable[T],
    criteria: TaskFilter | None,
    types: OrderIndex | Sequence[Any] = (),
    statuses: OrderIndex | Sequence[Any] = (),
    done_status: str = DEFAULT_DONE_STATUS,
) -> list[T]:
    """Task view pipeline: filter, then priority sort."""
    return sort_tasks(filter_tasks(tasks, criteria), types, statuses, done_status)
