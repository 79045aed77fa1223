"""Тесты для раскладки Gantt."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from task_manager.planning.gantt import (
    MIN_BAR_WIDTH,
    PX_PER_DAY,
    build_gantt,
    default_chart_start,
    place_task,
    scope_tasks,
    shift_chart,
    x_for,
)

TODAY = date(2026, 3, 2)
CHART_START = date(2026, 3, 2)


@dataclass
class FakeTask:
    id: int
    start_date: str = ""
    due_date: str = ""
    project_ids: list[int] = field(default_factory=lambda: [1])


@dataclass
class FakeProject:
    id: int
    name: str


PROJECTS = [FakeProject(1, "Website"), FakeProject(2, "Planning"), FakeProject(3, "Onboarding")]


class TestPlaceTask:
    def test_bar_from_start_to_due(self):
        marker = place_task(FakeTask(1, "5/Mar", "10/Mar"), CHART_START, today=TODAY)
        assert marker.kind == "bar"
        assert marker.x == x_for(date(2026, 3, 5), CHART_START) == 3 * PX_PER_DAY
        assert marker.width == x_for(date(2026, 3, 10), CHART_START) - marker.x
        assert marker.start == date(2026, 3, 5)
        assert marker.due == date(2026, 3, 10)

    def test_milestone_when_no_start(self):
        marker = place_task(FakeTask(1, "", "10/Mar"), CHART_START, today=TODAY)
        assert marker.kind == "milestone"
        assert marker.x == 8 * PX_PER_DAY
        assert marker.width == 0

    def test_unparseable_start_gives_milestone(self):
        marker = place_task(FakeTask(1, "sometime", "10/Mar"), CHART_START, today=TODAY)
        assert marker.kind == "milestone"

    def test_no_due_date_has_no_marker(self):
        assert place_task(FakeTask(1, "5/Mar", ""), CHART_START, today=TODAY) is None
        assert place_task(FakeTask(1, "5/Mar", "next week"), CHART_START, today=TODAY) is None

    def test_inverted_range_collapses_to_due_with_min_width(self):
        marker = place_task(FakeTask(1, "15/Mar", "10/Mar"), CHART_START, today=TODAY)
        assert marker.kind == "bar"
        assert marker.x == x_for(date(2026, 3, 10), CHART_START)
        assert marker.width == MIN_BAR_WIDTH

    def test_same_day_bar_gets_min_width(self):
        marker = place_task(FakeTask(1, "10/Mar", "10/Mar"), CHART_START, today=TODAY)
        assert marker.width == MIN_BAR_WIDTH

    def test_before_chart_start_is_negative_x(self):
        marker = place_task(FakeTask(1, "", "27/Feb"), CHART_START, today=TODAY)
        assert marker.x == -3 * PX_PER_DAY

    def test_custom_px_per_day(self):
        marker = place_task(FakeTask(1, "", "3/Mar"), CHART_START, px_per_day=20, today=TODAY)
        assert marker.x == 20


class TestScope:
    def test_empty_scope_keeps_all(self):
        tasks = [FakeTask(1, project_ids=[1]), FakeTask(2, project_ids=[2])]
        assert scope_tasks(tasks, None) == tasks
        assert scope_tasks(tasks, []) == tasks

    def test_scope_matches_any_linked_project(self):
        tasks = [FakeTask(1, project_ids=[1]), FakeTask(2, project_ids=[2, 3])]
        assert [t.id for t in scope_tasks(tasks, [3])] == [2]


class TestBuildGantt:
    def test_dimensions_and_ticks(self):
        chart = build_gantt([], PROJECTS, chart_start=CHART_START, range_weeks=12, today=TODAY)
        assert chart.total_days == 84
        assert chart.chart_width == 84 * PX_PER_DAY
        assert chart.range_end == date(2026, 5, 25)
        assert len(chart.ticks) == 13
        assert chart.ticks[0].label == "2/3"
        assert chart.ticks[1].x == 7 * PX_PER_DAY

    def test_zero_weeks_still_one_day(self):
        chart = build_gantt([], PROJECTS, chart_start=CHART_START, range_weeks=0, today=TODAY)
        assert chart.total_days == 1

    def test_today_marker(self):
        chart = build_gantt([], PROJECTS, chart_start=date(2026, 2, 23), today=TODAY)
        assert chart.today_x == 7 * PX_PER_DAY

    def test_today_marker_absent_outside_range(self):
        chart = build_gantt([], PROJECTS, chart_start=date(2026, 3, 9), today=TODAY)
        assert chart.today_x is None

    def test_default_start_is_today(self):
        chart = build_gantt([], PROJECTS, today=TODAY)
        assert chart.chart_start == TODAY == default_chart_start(TODAY)

    def test_shift_chart(self):
        assert shift_chart(CHART_START, 2) == date(2026, 3, 16)
        assert shift_chart(CHART_START, -1) == date(2026, 2, 23)

    def test_single_project_is_flat_and_sorted_by_due(self):
        tasks = [
            FakeTask(1, due_date="20/Mar"),
            FakeTask(2, due_date="5/Mar"),
            FakeTask(3, due_date=""),
            FakeTask(4, due_date="10/Mar", start_date="3/Mar"),
        ]
        chart = build_gantt(tasks, PROJECTS, [1], chart_start=CHART_START, today=TODAY)
        assert not chart.grouped
        assert [row.kind for row in chart.rows] == ["task", "task", "task"]
        assert [row.task.id for row in chart.rows] == [2, 4, 1]
        assert [t.id for t in chart.no_date_tasks] == [3]

    def test_multiple_projects_grouped_with_headers(self):
        tasks = [
            FakeTask(1, due_date="12/Mar", project_ids=[1]),
            FakeTask(2, due_date="6/Mar", project_ids=[2, 1]),
            FakeTask(3, due_date="9/Mar", project_ids=[2]),
        ]
        chart = build_gantt(tasks, PROJECTS, [1, 2], chart_start=CHART_START, today=TODAY)
        assert chart.grouped
        layout = [(row.kind, row.project_id, row.task.id if row.task else None) for row in chart.rows]
        assert layout == [
            ("project", 1, None),
            ("task", 1, 2),
            ("task", 1, 1),
            ("project", 2, None),
            ("task", 2, 2),
            ("task", 2, 3),
        ]
        assert chart.rows[0].project_name == "Website"

    def test_all_scope_groups_by_seen_projects(self):
        tasks = [
            FakeTask(1, due_date="12/Mar", project_ids=[3]),
            FakeTask(2, due_date="6/Mar", project_ids=[1]),
        ]
        chart = build_gantt(tasks, PROJECTS, None, chart_start=CHART_START, today=TODAY)
        assert chart.grouped
        headers = [row.project_id for row in chart.rows if row.kind == "project"]
        assert headers == [3, 1]

    def test_project_without_dated_tasks_has_no_header(self):
        tasks = [FakeTask(1, due_date="12/Mar", project_ids=[1]), FakeTask(2, project_ids=[2])]
        chart = build_gantt(tasks, PROJECTS, [1, 2], chart_start=CHART_START, today=TODAY)
        assert [row.project_id for row in chart.rows if row.kind == "project"] == [1]
        assert [t.id for t in chart.no_date_tasks] == [2]

    def test_unknown_project_name(self):
        tasks = [FakeTask(1, due_date="12/Mar", project_ids=[99]), FakeTask(2, due_date="6/Mar")]
        chart = build_gantt(tasks, PROJECTS, [1, 99], chart_start=CHART_START, today=TODAY)
        names = [row.project_name for row in chart.rows if row.kind == "project"]
        assert names == ["Website", "Unknown"]

    @pytest.mark.parametrize("weeks", [1, 4, 26])
    def test_range_weeks(self, weeks):
        chart = build_gantt([], PROJECTS, chart_start=CHART_START, range_weeks=weeks, today=TODAY)
        assert chart.total_days == weeks * 7
