"""Тесты для CSV выгрузки."""

import csv
import io
from dataclasses import dataclass, field
from datetime import date, datetime

from task_manager.services.export import CSV_HEADERS, export_filename, task_to_row, tasks_to_csv

TODAY = date(2026, 3, 2)


@dataclass
class FakeTask:
    id: int
    name: str = "Task"
    type: str = "Regular"
    status: str = "My action"
    start_date: str = ""
    due_date: str = ""
    notes: str = ""
    project_ids: list[int] = field(default_factory=lambda: [1])
    project_names: list[str] = field(default_factory=lambda: ["Website"])
    person_ids: list[int] = field(default_factory=list)
    person_names: list[str] = field(default_factory=list)
    completed_at: datetime | None = None
    created_at: datetime = datetime(2026, 3, 1, 9, 30)
    updated_at: datetime = datetime(2026, 3, 1, 9, 30)


def test_row_layout():
    task = FakeTask(
        7,
        name="Draft email",
        due_date="10/Mar",
        project_ids=[1, 3],
        project_names=["Website", "Launch"],
        person_ids=[2],
        person_names=["Shirley"],
    )

    row = task_to_row(task, "project", today=TODAY)

    assert len(row) == len(CSV_HEADERS)
    assert row[:8] == ["project", 7, "Draft email", "Regular", "My action", "", "10/Mar", 6]
    assert row[8:12] == ["1; 3", "Website; Launch", "2", "Shirley"]
    assert row[13] == ""
    assert row[14] == "2026-03-01T09:30:00"


def test_row_without_due_date_leaves_days_empty():
    row = task_to_row(FakeTask(1, due_date="someday"), today=TODAY)
    assert row[CSV_HEADERS.index("Working Days Until Due")] == ""


def test_csv_quoting_and_line_endings():
    tasks = [
        FakeTask(1, name='Call "vendor", then book'),
        FakeTask(2, notes="line one\nline two", status="Done", completed_at=datetime(2026, 3, 2)),
    ]

    text = tasks_to_csv(tasks, context="all", today=TODAY)

    assert text.startswith(",".join(CSV_HEADERS) + "\r\n")
    assert '"Call ""vendor"", then book"' in text
    assert text.endswith("\r\n")

    rows = list(csv.reader(io.StringIO(text, newline="")))
    assert rows[0] == CSV_HEADERS
    assert rows[2][CSV_HEADERS.index("Notes")] == "line one\nline two"
    assert rows[2][CSV_HEADERS.index("Completed At")] == "2026-03-02T00:00:00"


def test_empty_export_has_header_only():
    assert tasks_to_csv([], today=TODAY) == ",".join(CSV_HEADERS) + "\r\n"


def test_export_filename():
    assert export_filename("person", TODAY) == "task-manager-person-2026-03-02.csv"
    assert export_filename("", TODAY) == "task-manager-all-2026-03-02.csv"
    assert export_filename(None, TODAY) == "task-manager-all-2026-03-02.csv"


def test_export_filename_strips_header_breaking_characters():
    assert export_filename('my "team"\r\nX-Evil: 1', TODAY) == "task-manager-my-team-X-Evil-1-2026-03-02.csv"
    assert export_filename("Команда", TODAY) == "task-manager-all-2026-03-02.csv"
