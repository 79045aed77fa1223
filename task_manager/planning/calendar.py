"""Week and month calendar grids with the tasks due on each day."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Literal

from .dates import parse_due_date


@dataclass
class CalendarDay:
    day: date
    in_month: bool = True
    is_today: bool = False
    tasks: list[Any] = field(default_factory=list)


@dataclass
class CalendarGrid:
    mode: Literal["week", "month"]
    anchor: date
    days: list[CalendarDay]

    @property
    def title(self) -> str:
        return self.anchor.strftime("%B %Y")


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_days(day: date) -> list[date]:
    start = week_start(day)
    return [start + timedelta(days=i) for i in range(7)]


def month_days(day: date) -> list[date]:
    """Monday-aligned grid covering the whole month of ``day``."""
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    last = next_month - timedelta(days=1)

    start = week_start(first)
    end = week_start(last) + timedelta(days=6)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def shift_week(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def tasks_for_date(tasks: Iterable[Any], day: date, today: date | None = None) -> list[Any]:
    """Tasks whose due date falls on ``day``."""
    return [t for t in tasks if t.due_date and parse_due_date(t.due_date, today=today) == day]


def build_calendar(
    tasks: Iterable[Any],
    anchor: date | None = None,
    mode: Literal["week", "month"] = "week",
    today: date | None = None,
) -> CalendarGrid:
    today = today or date.today()
    anchor = anchor or today

    # parse each due date once, not once per cell
    by_day: dict[date, list[Any]] = {}
    for task in tasks:
        due = parse_due_date(task.due_date, today=today) if task.due_date else None
        if due is not None:
            by_day.setdefault(due, []).append(task)

    days = week_days(anchor) if mode == "week" else month_days(anchor)
    return CalendarGrid(
        mode=mode,
        anchor=anchor,
        days=[
            CalendarDay(
                day=d,
                in_month=mode == "week" or d.month == anchor.month,
                is_today=d == today,
                tasks=by_day.get(d, []),
            )
            for d in days
        ],
    )
