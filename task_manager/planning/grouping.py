"""Aggregated views: tasks per person and tasks per project."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .ordering import DEFAULT_DONE_STATUS, OrderIndex, sort_tasks


@dataclass
class TaskGroup:
    """A person or project with its sorted tasks."""

    owner: Any
    tasks: list[Any] = field(default_factory=list)

    @property
    def open_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed_at is None)


def group_by_person(
    tasks: Iterable[Any],
    persons: Iterable[Any],
    types: OrderIndex | Sequence[Any] = (),
    statuses: OrderIndex | Sequence[Any] = (),
    done_status: str = DEFAULT_DONE_STATUS,
) -> list[TaskGroup]:
    """One group per person, in display order; a task shows up for each assignee."""
    tasks = list(tasks)
    groups = []
    for person in sorted(persons, key=lambda p: p.order):
        assigned = [t for t in tasks if person.id in t.person_ids]
        groups.append(TaskGroup(owner=person, tasks=sort_tasks(assigned, types, statuses, done_status)))
    return groups


def group_by_project(
    tasks: Iterable[Any],
    projects: Iterable[Any],
    types: OrderIndex | Sequence[Any] = (),
    statuses: OrderIndex | Sequence[Any] = (),
    done_status: str = DEFAULT_DONE_STATUS,
) -> list[TaskGroup]:
    tasks = list(tasks)
    return [
        TaskGroup(
            owner=project,
            tasks=sort_tasks(
                [t for t in tasks if project.id in t.project_ids], types, statuses, done_status
            ),
        )
        for project in projects
    ]
