"""Gantt timeline layout.

Maps tasks with an optional start date and a due date onto a pixel timeline
starting at ``chart_start``:

    x(d) = (d - chart_start).days * px_per_day

- no (parseable) due date  -> "no date" section, no marker
- due date, no start date  -> milestone at x(due)
- start and due date       -> bar from x(min(start, due)) to x(due)

A start date after the due date is tolerated: the bar collapses onto the due
point and gets the minimum visible width.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Literal

from .dates import parse_due_date

PX_PER_DAY = 14
DEFAULT_RANGE_WEEKS = 12
MIN_BAR_WIDTH = 4


@dataclass
class GanttMarker:
    """Position of a task on the timeline."""

    kind: Literal["bar", "milestone"]
    x: float
    width: float
    start: date
    due: date


@dataclass
class GanttRow:
    """One chart row: a project header or a task."""

    kind: Literal["project", "task"]
    project_id: int | None = None
    project_name: str | None = None
    task: Any = None
    marker: GanttMarker | None = None


@dataclass
class AxisTick:
    x: float
    day: date
    label: str


@dataclass
class GanttChart:
    chart_start: date
    range_end: date
    px_per_day: int
    total_days: int
    chart_width: int
    grouped: bool
    rows: list[GanttRow] = field(default_factory=list)
    no_date_tasks: list[Any] = field(default_factory=list)
    ticks: list[AxisTick] = field(default_factory=list)
    today_x: float | None = None


def default_chart_start(today: date | None = None) -> date:
    """The chart opens on today."""
    return today or date.today()


def shift_chart(chart_start: date, weeks: int) -> date:
    """Move the window by whole weeks (negative = back in time)."""
    return chart_start + timedelta(weeks=weeks)


def x_for(day: date, chart_start: date, px_per_day: int = PX_PER_DAY) -> float:
    return (day - chart_start).days * px_per_day


def scope_tasks(tasks: Iterable[Any], scope_project_ids: Sequence[int] | None) -> list[Any]:
    """Keep tasks linked to any project in scope (None or empty = all)."""
    tasks = list(tasks)
    if not scope_project_ids:
        return tasks
    scope = set(scope_project_ids)
    return [t for t in tasks if any(pid in scope for pid in t.project_ids)]


def place_task(
    task: Any,
    chart_start: date,
    px_per_day: int = PX_PER_DAY,
    today: date | None = None,
) -> GanttMarker | None:
    """Compute the marker for one task, or None when it has no usable due date."""
    due = parse_due_date(task.due_date, today=today)
    if due is None:
        return None

    start = parse_due_date(task.start_date, today=today) if task.start_date else None
    if start is None:
        return GanttMarker(
            kind="milestone",
            x=x_for(due, chart_start, px_per_day),
            width=0,
            start=due,
            due=due,
        )

    left_day = start if start <= due else due
    left = x_for(left_day, chart_start, px_per_day)
    right = x_for(due, chart_start, px_per_day)
    return GanttMarker(
        kind="bar",
        x=left,
        width=max(MIN_BAR_WIDTH, right - left),
        start=left_day,
        due=due,
    )


def _axis_ticks(chart_start: date, total_days: int, px_per_day: int) -> list[AxisTick]:
    ticks = []
    for offset in range(0, total_days + 1, 7):
        day = chart_start + timedelta(days=offset)
        ticks.append(AxisTick(x=offset * px_per_day, day=day, label=f"{day.day}/{day.month}"))
    return ticks


def build_gantt(
    tasks: Iterable[Any],
    projects: Iterable[Any] = (),
    scope_project_ids: Sequence[int] | None = None,
    chart_start: date | None = None,
    range_weeks: int = DEFAULT_RANGE_WEEKS,
    px_per_day: int = PX_PER_DAY,
    today: date | None = None,
) -> GanttChart:
    """
    Lay out the chart.

    With more than one project in scope, rows are grouped under a header per
    project (in scope order) and a task linked to several projects appears
    under each of them. With a single project the rows are flat. Tasks are
    ordered by ascending due date.
    """
    today = today or date.today()
    chart_start = chart_start or default_chart_start(today)
    total_days = max(1, range_weeks * 7)
    range_end = chart_start + timedelta(days=total_days)

    scoped = scope_tasks(tasks, scope_project_ids)

    if scope_project_ids:
        scope_ids = list(dict.fromkeys(scope_project_ids))
    else:
        scope_ids = list(dict.fromkeys(pid for t in scoped for pid in t.project_ids))
    grouped = len(scope_ids) > 1

    dated: list[tuple[date, Any, GanttMarker]] = []
    no_date: list[Any] = []
    for task in scoped:
        marker = place_task(task, chart_start, px_per_day, today=today)
        if marker is None:
            no_date.append(task)
        else:
            dated.append((marker.due, task, marker))
    dated.sort(key=lambda item: item[0])

    rows: list[GanttRow] = []
    if grouped:
        names = {p.id: p.name for p in projects}
        for pid in scope_ids:
            project_rows = [
                GanttRow(kind="task", project_id=pid, task=task, marker=marker)
                for _, task, marker in dated
                if pid in task.project_ids
            ]
            if project_rows:
                rows.append(
                    GanttRow(kind="project", project_id=pid, project_name=names.get(pid, "Unknown"))
                )
                rows.extend(project_rows)
    else:
        rows = [
            GanttRow(kind="task", project_id=task.project_ids[0], task=task, marker=marker)
            for _, task, marker in dated
        ]

    today_x = None
    if chart_start <= today <= range_end:
        today_x = x_for(today, chart_start, px_per_day)

    return GanttChart(
        chart_start=chart_start,
        range_end=range_end,
        px_per_day=px_per_day,
        total_days=total_days,
        chart_width=total_days * px_per_day,
        grouped=grouped,
        rows=rows,
        no_date_tasks=no_date,
        ticks=_axis_ticks(chart_start, total_days, px_per_day),
        today_x=today_x,
    )
