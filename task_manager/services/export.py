"""CSV export of task lists."""

import csv
import io
import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from ..planning import get_working_days_until_due

CSV_HEADERS = [
    "Context",
    "Task ID",
    "Task Name",
    "Type",
    "Status",
    "Start Date",
    "Due Date",
    "Working Days Until Due",
    "Project IDs",
    "Project Names",
    "Person IDs",
    "Person Names",
    "Notes",
    "Completed At",
    "Created At",
    "Updated At",
]

LIST_SEPARATOR = "; "

# only these characters survive into the Content-Disposition filename
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def _join(values: Iterable[Any]) -> str:
    return LIST_SEPARATOR.join(str(v) for v in values)


def _timestamp(value: datetime | None) -> str:
    return value.isoformat() if value else ""


def task_to_row(task: Any, context: str = "", today: date | None = None) -> list:
    days_left = get_working_days_until_due(task.due_date, today=today)
    return [
        context,
        task.id,
        task.name or "",
        task.type or "",
        task.status or "",
        task.start_date or "",
        task.due_date or "",
        "" if days_left is None else days_left,
        _join(task.project_ids),
        _join(task.project_names),
        _join(task.person_ids),
        _join(task.person_names),
        task.notes or "",
        _timestamp(task.completed_at),
        _timestamp(task.created_at),
        _timestamp(task.updated_at),
    ]


def tasks_to_csv(tasks: Iterable[Any], context: str = "", today: date | None = None) -> str:
    """
    Render tasks as CSV text.

    Fields are quoted only when they contain a comma, a quote or a line
    break; rows end with CRLF.
    """
    output = io.StringIO(newline="")
    writer = csv.writer(output, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    for task in tasks:
        writer.writerow(task_to_row(task, context, today))
    return output.getvalue()


def export_filename(context: str | None = None, today: date | None = None) -> str:
    """task-manager-{context or "all"}-{YYYY-MM-DD}.csv"""
    today = today or date.today()
    label = _UNSAFE_FILENAME_CHARS.sub("-", context or "").strip("-")
    return f"task-manager-{label or 'all'}-{today.isoformat()}.csv"
