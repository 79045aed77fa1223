"""
Тесты для Service Layer (Бизнес-логика).

Проверяем:
- Валидацию бизнес-правил
- Координацию между репозиториями
- completed_at при переходах в Done и обратно
- Сохранение настроек (diff по id, переименование в задачах)
- Производные представления (Gantt, календарь, сводка)
"""

from datetime import date

import pytest

from task_manager.planning import TaskFilter
from task_manager.services import (
    PersonService,
    ProjectService,
    SettingsService,
    TaskService,
    ViewService,
)

TODAY = date(2026, 3, 2)
TYPE_NAMES = ["Admin", "Urgent", "Regular", "Night", "Weekend", "Backlog", "Others"]
STATUS_NAMES = ["Must do", "Waiting others", "My action", "Done"]
PERSON_NAMES = ["Efa", "Shirley", "Joelle"]


async def person_ids(db) -> dict[str, int]:
    return {p.name: p.id for p in await PersonService(db).get_all_persons()}


# ============================================================================
# PROJECT SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_project_default_name(test_db):
    """Test: проект без названия получает "New Project"."""
    service = ProjectService(test_db)

    project = await service.create_project()
    blank = await service.create_project(name="   ")

    assert project.name == "New Project"
    assert blank.name == "New Project"
    assert project.notes == ""


@pytest.mark.asyncio
async def test_update_project_notes_and_name(test_db):
    service = ProjectService(test_db)
    project = await service.create_project(name="Website")

    updated = await service.update_project(project.id, notes="<p>Plan</p>")
    assert updated.name == "Website"
    assert updated.notes == "<p>Plan</p>"

    with pytest.raises(ValueError, match="cannot be empty"):
        await service.update_project(project.id, name="  ")


@pytest.mark.asyncio
async def test_get_project_not_found(test_db):
    service = ProjectService(test_db)

    with pytest.raises(ValueError, match="not found"):
        await service.get_project(999)


@pytest.mark.asyncio
async def test_cannot_delete_last_project(test_db):
    """Test: последний проект удалить нельзя."""
    service = ProjectService(test_db)
    project = await service.create_project(name="Only")

    with pytest.raises(ValueError, match="Cannot delete the last project"):
        await service.delete_project(project.id)

    assert await service.get_project(project.id)


@pytest.mark.asyncio
async def test_delete_project_cascade(seeded_settings):
    """Test: удаляются задачи с этим основным проектом, у остальных - только связь."""
    db = seeded_settings
    projects = ProjectService(db)
    tasks = TaskService(db)
    website = await projects.create_project(name="Website")
    planning = await projects.create_project(name="Planning")

    own = await tasks.create_task(name="Own", project_id=website.id)
    shared = await tasks.create_task(name="Shared", project_ids=[planning.id, website.id])
    await db.commit()

    await projects.delete_project(website.id)
    await db.commit()

    with pytest.raises(ValueError, match="not found"):
        await tasks.get_task(own.id)
    shared = await tasks.get_task(shared.id)
    assert shared.project_ids == [planning.id]


@pytest.mark.asyncio
async def test_project_tasks_sorted_by_priority(seeded_settings):
    """Test: задачи проекта отсортированы по типу, статусу и дедлайну."""
    db = seeded_settings
    website = await ProjectService(db).create_project(name="Website")
    service = TaskService(db)
    regular = await service.create_task(name="Regular", project_id=website.id, due_date="1/Mar")
    urgent = await service.create_task(
        name="Urgent", project_id=website.id, type="Urgent", status="Must do", due_date="5/Mar"
    )
    done = await service.create_task(
        name="Done", project_id=website.id, type="Admin", status="Done"
    )

    result = await ProjectService(db).get_project_tasks(website.id)

    assert [t.id for t in result] == [urgent.id, regular.id, done.id]


# ============================================================================
# TASK SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_task_defaults(seeded_settings):
    """Test: тип и статус по умолчанию, completed_at пустой."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")

    task = await TaskService(db).create_task(name="  Draft email  ", project_id=project.id)

    assert task.name == "Draft email"
    assert task.type == "Regular"
    assert task.status == "My action"
    assert task.completed_at is None
    assert task.project_ids == [project.id]
    assert task.person_ids == []


@pytest.mark.asyncio
async def test_create_task_validation(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    service = TaskService(db)

    with pytest.raises(ValueError, match="cannot be empty"):
        await service.create_task(name=" ", project_id=project.id)
    with pytest.raises(ValueError, match="at least one project"):
        await service.create_task(name="Orphan")
    with pytest.raises(ValueError, match="Project with id 999 not found"):
        await service.create_task(name="Task", project_ids=[project.id, 999])
    with pytest.raises(ValueError, match="Person with id 999 not found"):
        await service.create_task(name="Task", project_id=project.id, person_ids=[999])
    with pytest.raises(ValueError, match="Unknown task type"):
        await service.create_task(name="Task", project_id=project.id, type="Mystery")
    with pytest.raises(ValueError, match="Unknown task status"):
        await service.create_task(name="Task", project_id=project.id, status="Parked")


@pytest.mark.asyncio
async def test_create_task_any_type_without_settings(test_db):
    """Test: пока типы не настроены, принимается любое значение."""
    project = await ProjectService(test_db).create_project(name="Website")

    task = await TaskService(test_db).create_task(
        name="Task", project_id=project.id, type="Anything", status="Whatever"
    )

    assert task.type == "Anything"


@pytest.mark.asyncio
async def test_create_task_in_done_sets_completed_at(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")

    task = await TaskService(db).create_task(name="Task", project_id=project.id, status="Done")

    assert task.completed_at is not None


@pytest.mark.asyncio
async def test_create_task_multiple_projects_and_persons(seeded_settings):
    """Test: project_id становится основным, остальные проекты - связи."""
    db = seeded_settings
    projects = ProjectService(db)
    website = await projects.create_project(name="Website")
    planning = await projects.create_project(name="Planning")
    people = await person_ids(db)

    task = await TaskService(db).create_task(
        name="Launch",
        project_id=planning.id,
        project_ids=[website.id, planning.id],
        person_ids=[people["Joelle"], people["Efa"]],
    )

    assert task.project_id == planning.id
    assert task.project_ids == [planning.id, website.id]
    assert task.project_names == ["Planning", "Website"]
    # люди отдаются в порядке order
    assert task.person_names == ["Efa", "Joelle"]


@pytest.mark.asyncio
async def test_status_transitions_maintain_completed_at(seeded_settings):
    """Test: переход в Done ставит completed_at, выход из Done - сбрасывает."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    service = TaskService(db)
    task = await service.create_task(name="Task", project_id=project.id)

    task = await service.update_task(task.id, status="Done")
    assert task.completed_at is not None
    completed_at = task.completed_at

    # повторное сохранение в Done не меняет отметку
    task = await service.update_task(task.id, status="Done", notes="still done")
    assert task.completed_at == completed_at

    task = await service.update_task(task.id, status="Must do")
    assert task.completed_at is None


@pytest.mark.asyncio
async def test_update_task_partial(seeded_settings):
    """Test: None означает "не менять"."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    people = await person_ids(db)
    service = TaskService(db)
    task = await service.create_task(
        name="Task", project_id=project.id, due_date="10/Mar", person_ids=[people["Efa"]]
    )

    task = await service.update_task(task.id, name="Renamed")

    assert task.name == "Renamed"
    assert task.due_date == "10/Mar"
    assert task.person_names == ["Efa"]

    task = await service.update_task(task.id, person_ids=[], due_date="")
    assert task.person_ids == []
    assert task.due_date == ""


@pytest.mark.asyncio
async def test_update_task_projects(seeded_settings):
    """Test: смена project_id сохраняет остальные привязки, project_ids заменяет все."""
    db = seeded_settings
    projects = ProjectService(db)
    website = await projects.create_project(name="Website")
    planning = await projects.create_project(name="Planning")
    onboarding = await projects.create_project(name="Onboarding")
    service = TaskService(db)
    task = await service.create_task(name="Task", project_ids=[website.id, planning.id])

    task = await service.update_task(task.id, project_id=onboarding.id)
    assert task.project_ids == [onboarding.id, planning.id]

    task = await service.update_task(task.id, project_ids=[website.id])
    assert task.project_ids == [website.id]

    with pytest.raises(ValueError, match="not found"):
        await service.update_task(task.id, project_ids=[999])


@pytest.mark.asyncio
async def test_toggle_done(seeded_settings):
    """Test: Done <-> первый открытый статус."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    service = TaskService(db)
    task = await service.create_task(name="Task", project_id=project.id, status="My action")

    task = await service.toggle_done(task.id)
    assert task.status == "Done"
    assert task.completed_at is not None

    task = await service.toggle_done(task.id)
    assert task.status == STATUS_NAMES[0]
    assert task.completed_at is None


@pytest.mark.asyncio
async def test_toggle_done_without_statuses_uses_default(test_db):
    project = await ProjectService(test_db).create_project(name="Website")
    service = TaskService(test_db)
    task = await service.create_task(name="Task", project_id=project.id, status="Done")

    task = await service.toggle_done(task.id)

    assert task.status == "My action"


@pytest.mark.asyncio
async def test_delete_task(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    service = TaskService(db)
    task = await service.create_task(name="Task", project_id=project.id)

    assert await service.delete_task(task.id)
    with pytest.raises(ValueError, match="not found"):
        await service.delete_task(task.id)


@pytest.mark.asyncio
async def test_list_tasks_filter_and_order(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    people = await person_ids(db)
    service = TaskService(db)
    report = await service.create_task(
        name="Write report", project_id=project.id, type="Urgent", person_ids=[people["Efa"]]
    )
    review = await service.create_task(name="Review report", project_id=project.id, type="Admin")
    await service.create_task(name="Book venue", project_id=project.id)

    result = await service.list_tasks(TaskFilter(search="REPORT"))
    assert [t.id for t in result] == [review.id, report.id]

    result = await service.list_tasks(TaskFilter(person_ids=[people["Efa"]]))
    assert [t.id for t in result] == [report.id]


@pytest.mark.asyncio
async def test_tasks_by_person(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    people = await person_ids(db)
    service = TaskService(db)
    shared = await service.create_task(
        name="Shared", project_id=project.id, person_ids=[people["Efa"], people["Shirley"]]
    )
    await service.create_task(
        name="Closed", project_id=project.id, status="Done", person_ids=[people["Efa"]]
    )

    groups = await service.get_tasks_by_person()

    assert [g.owner.name for g in groups] == PERSON_NAMES
    assert [t.id for t in groups[1].tasks] == [shared.id]
    assert groups[0].open_count == 1
    assert len(groups[0].tasks) == 2
    assert groups[2].tasks == []


# ============================================================================
# PERSON SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_person_appends_to_end(seeded_settings):
    """Test: новый человек получает order = max + 1."""
    service = PersonService(seeded_settings)

    person = await service.create_person(name="Marta", color="#FF0000")

    assert person.order == len(PERSON_NAMES)
    assert [p.name for p in await service.get_all_persons()][-1] == "Marta"


@pytest.mark.asyncio
async def test_update_person_clears_color(seeded_settings):
    service = PersonService(seeded_settings)
    person = await service.create_person(name="Marta", color="#FF0000")

    person = await service.update_person(person.id, color="")

    assert person.color is None
    assert person.name == "Marta"


@pytest.mark.asyncio
async def test_delete_person_keeps_tasks(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    people = await person_ids(db)
    tasks = TaskService(db)
    task = await tasks.create_task(name="Task", project_id=project.id, person_ids=[people["Efa"]])

    await PersonService(db).delete_person(people["Efa"])

    task = await tasks.get_task(task.id)
    assert task.person_ids == []


# ============================================================================
# SETTINGS SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_get_settings(seeded_settings):
    result = await SettingsService(seeded_settings).get_settings()

    assert [t.name for t in result["types"]] == TYPE_NAMES
    assert [s.name for s in result["statuses"]] == STATUS_NAMES
    assert [p.name for p in result["persons"]] == PERSON_NAMES


@pytest.mark.asyncio
async def test_replace_types_diff(seeded_settings):
    """Test: id сохраняются, порядок из списка, лишние удаляются, новые добавляются."""
    service = SettingsService(seeded_settings)
    current = {t.name: t for t in (await service.get_settings())["types"]}

    saved = await service.replace_types(
        [
            {"id": current["Regular"].id, "name": "Regular", "color": "#111111"},
            {"id": current["Urgent"].id, "name": "Urgent"},
            {"name": "Someday", "color": None},
        ]
    )

    assert [(t.name, t.order) for t in saved] == [("Regular", 0), ("Urgent", 1), ("Someday", 2)]
    assert saved[0].id == current["Regular"].id
    assert saved[0].color == "#111111"
    assert saved[2].color == "#0066CC"


@pytest.mark.asyncio
async def test_rename_type_propagates_to_tasks(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    tasks = TaskService(db)
    task = await tasks.create_task(name="Task", project_id=project.id, type="Urgent")
    service = SettingsService(db)
    items = [{"id": t.id, "name": t.name} for t in (await service.get_settings())["types"]]
    for item in items:
        if item["name"] == "Urgent":
            item["name"] = "Critical"

    await service.replace_types(items)

    assert (await tasks.get_task(task.id)).type == "Critical"


@pytest.mark.asyncio
async def test_swap_status_names(seeded_settings):
    """Test: обмен именами двух статусов не упирается в уникальность."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    tasks = TaskService(db)
    must = await tasks.create_task(name="A", project_id=project.id, status="Must do")
    mine = await tasks.create_task(name="B", project_id=project.id, status="My action")
    service = SettingsService(db)
    rows = {s.name: s.id for s in (await service.get_settings())["statuses"]}

    saved = await service.replace_statuses(
        [
            {"id": rows["Must do"], "name": "My action"},
            {"id": rows["Waiting others"], "name": "Waiting others"},
            {"id": rows["My action"], "name": "Must do"},
            {"id": rows["Done"], "name": "Done"},
        ]
    )

    assert [s.name for s in saved] == ["My action", "Waiting others", "Must do", "Done"]
    assert (await tasks.get_task(must.id)).status == "My action"
    assert (await tasks.get_task(mine.id)).status == "Must do"


@pytest.mark.asyncio
async def test_swap_with_done_keeps_completed_at_in_sync(seeded_settings):
    """Test: задача, ставшая Done через переименование, получает completed_at и наоборот."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    tasks = TaskService(db)
    open_task = await tasks.create_task(name="A", project_id=project.id, status="Must do")
    done_task = await tasks.create_task(name="B", project_id=project.id, status="Done")
    assert done_task.completed_at is not None
    service = SettingsService(db)
    rows = {s.name: s.id for s in (await service.get_settings())["statuses"]}

    await service.replace_statuses(
        [
            {"id": rows["Must do"], "name": "Done"},
            {"id": rows["Waiting others"], "name": "Waiting others"},
            {"id": rows["My action"], "name": "My action"},
            {"id": rows["Done"], "name": "Must do"},
        ]
    )

    now_done = await tasks.get_task(open_task.id)
    assert now_done.status == "Done"
    assert now_done.completed_at is not None
    reopened = await tasks.get_task(done_task.id)
    assert reopened.status == "Must do"
    assert reopened.completed_at is None


@pytest.mark.asyncio
async def test_replace_options_rejects_bad_names(seeded_settings):
    service = SettingsService(seeded_settings)

    with pytest.raises(ValueError, match="Duplicate names: Urgent"):
        await service.replace_types([{"name": "Urgent"}, {"name": "Urgent"}])
    with pytest.raises(ValueError, match="cannot be empty"):
        await service.replace_statuses([{"name": "  "}])


@pytest.mark.asyncio
async def test_replace_persons_keeps_assignments(seeded_settings):
    """Test: люди с id сохраняют назначения, удалённые пропадают из задач."""
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    people = await person_ids(db)
    tasks = TaskService(db)
    task = await tasks.create_task(
        name="Task", project_id=project.id, person_ids=[people["Efa"], people["Shirley"]]
    )

    saved = await SettingsService(db).replace_persons(
        [
            {"id": people["Shirley"], "name": "Shirley K", "color": "#00AA00"},
            {"name": "Marta"},
        ]
    )

    assert [(p.name, p.order) for p in saved] == [("Shirley K", 0), ("Marta", 1)]
    assert saved[0].id == people["Shirley"]
    task = await tasks.get_task(task.id)
    assert task.person_names == ["Shirley K"]


# ============================================================================
# VIEW SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_gantt_scope_and_unknown_project(seeded_settings):
    db = seeded_settings
    projects = ProjectService(db)
    website = await projects.create_project(name="Website")
    planning = await projects.create_project(name="Planning")
    tasks = TaskService(db)
    await tasks.create_task(name="A", project_id=website.id, due_date="10/Mar")
    await tasks.create_task(name="B", project_id=planning.id, due_date="12/Mar")
    await tasks.create_task(name="C", project_id=planning.id)
    service = ViewService(db)

    chart = await service.get_gantt([website.id], chart_start=TODAY, today=TODAY)
    assert not chart.grouped
    assert [row.task.name for row in chart.rows] == ["A"]
    assert chart.px_per_day == 14
    assert chart.total_days == 12 * 7

    chart = await service.get_gantt([], chart_start=TODAY, range_weeks=4, today=TODAY)
    assert chart.grouped
    assert chart.total_days == 28
    assert [t.name for t in chart.no_date_tasks] == ["C"]

    with pytest.raises(ValueError, match="Project with id 999 not found"):
        await service.get_gantt([999])


@pytest.mark.asyncio
async def test_calendar(seeded_settings):
    db = seeded_settings
    project = await ProjectService(db).create_project(name="Website")
    await TaskService(db).create_task(name="A", project_id=project.id, due_date="4/Mar")

    grid = await ViewService(db).get_calendar(anchor=TODAY, mode="week", today=TODAY)

    assert grid.days[0].day == date(2026, 3, 2)
    assert [t.name for t in grid.days[2].tasks] == ["A"]


@pytest.mark.asyncio
async def test_summary(seeded_settings):
    """Test: сводка по незавершённым задачам."""
    db = seeded_settings
    projects = ProjectService(db)
    website = await projects.create_project(name="Website")
    planning = await projects.create_project(name="Planning")
    tasks = TaskService(db)
    await tasks.create_task(name="A", project_id=website.id, status="Must do")
    await tasks.create_task(name="B", project_ids=[website.id, planning.id], status="Must do")
    await tasks.create_task(name="C", project_id=website.id)
    await tasks.create_task(name="D", project_id=planning.id, status="Done")

    summary = await ViewService(db).get_summary()

    assert summary["summary"]["total_open_tasks"] == 3
    assert summary["summary"]["total_projects"] == 2
    assert summary["summary"]["by_status"] == {"Must do": 2, "My action": 1}
    assert [(p["name"], p["open_task_count"]) for p in summary["projects"]] == [
        ("Website", 3),
        ("Planning", 1),
    ]
    assert {t.name for t in summary["tasks"]} == {"A", "B", "C"}
    assert summary["generated_at"] is not None
