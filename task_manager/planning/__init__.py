"""Pure planning helpers: working-day dates, ordering, Gantt and calendar layout."""

from .calendar import build_calendar, tasks_for_date, week_start
from .dates import (
    add_working_days,
    calculate_working_days,
    format_date_to_ddmmm,
    get_working_days_until_due,
    is_holiday,
    is_working_day,
    parse_due_date,
)
from .gantt import GanttChart, build_gantt, place_task
from .grouping import TaskGroup, group_by_person, group_by_project
from .ordering import OrderIndex, TaskFilter, filter_and_sort, filter_tasks, sort_tasks

__all__ = [
    "add_working_days",
    "calculate_working_days",
    "format_date_to_ddmmm",
    "get_working_days_until_due",
    "is_holiday",
    "is_working_day",
    "parse_due_date",
    "OrderIndex",
    "TaskFilter",
    "filter_tasks",
    "sort_tasks",
    "filter_and_sort",
    "GanttChart",
    "build_gantt",
    "place_task",
    "build_calendar",
    "tasks_for_date",
    "week_start",
    "TaskGroup",
    "group_by_person",
    "group_by_project",
]
