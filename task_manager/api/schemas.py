"""
Pydantic схемы для API.

DTOs (Data Transfer Objects) - объекты для передачи данных через HTTP.

Зачем отдельные схемы от моделей SQLAlchemy?
1. Контроль над тем, что видит клиент (project_ids вместо строк связей)
2. Валидация входящих данных
3. Разделение concerns (API ≠ Database)
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..planning import get_working_days_until_due

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
# Пустая строка = "без цвета"
OPTIONAL_HEX_COLOR = r"^(#[0-9A-Fa-f]{6})?$"

# ============================================================================
# PROJECT SCHEMAS
# ============================================================================


class ProjectCreate(BaseModel):
    """
    Схема для создания проекта (POST /projects).

    Оба поля необязательные: пустой запрос создаёт "New Project".

    Пример запроса:
    {
        "name": "Website redesign",
        "notes": "<p>Kick-off on <b>Monday</b></p>"
    }
    """

    name: str | None = Field(None, max_length=200, description="Название проекта")
    notes: str | None = Field(None, description="Заметки (HTML)")


class ProjectUpdate(BaseModel):
    """Схема для обновления проекта (PUT /projects/{id}). Все поля опциональные."""

    name: str | None = Field(None, min_length=1, max_length=200)
    notes: str | None = None


class ProjectResponse(BaseModel):
    """
    Схема для ответа API (GET /projects/{id}).

    Пример ответа:
    {
        "id": 1,
        "name": "Website redesign",
        "notes": "",
        "created_at": "2026-03-02T12:00:00",
        "updated_at": "2026-03-02T12:00:00"
    }
    """

    id: int
    name: str
    notes: str
    created_at: datetime
    updated_at: datetime

    # from_attributes=True позволяет создавать схему из SQLAlchemy модели:
    # ProjectResponse.model_validate(project_model)
    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# PERSON SCHEMAS
# ============================================================================


class PersonCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Имя")
    color: str | None = Field(None, pattern=OPTIONAL_HEX_COLOR, description="Цвет #RRGGBB")


class PersonUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    color: str | None = Field(None, pattern=OPTIONAL_HEX_COLOR)
    order: int | None = Field(None, ge=0)


class PersonResponse(BaseModel):
    id: int
    name: str
    color: str | None
    order: int

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskCreate(BaseModel):
    """
    Схема для создания задачи (POST /tasks).

    project_id и/или project_ids: первый проект становится основным.
    type и status по умолчанию "Regular" и "My action".

    Пример запроса:
    {
        "name": "Draft launch email",
        "project_ids": [1, 3],
        "type": "Urgent",
        "status": "Must do",
        "due_date": "10/Mar",
        "person_ids": [2]
    }
    """

    name: str = Field(..., min_length=1, max_length=300, description="Название задачи")
    project_id: int | None = Field(None, description="Основной проект")
    project_ids: list[int] | None = Field(None, description="Все проекты задачи")
    type: str | None = Field(None, max_length=50)
    status: str | None = Field(None, max_length=50)
    start_date: str | None = Field(None, max_length=50, description="Дата начала (свободный формат)")
    due_date: str | None = Field(None, max_length=50, description="Дедлайн (свободный формат)")
    notes: str | None = None
    person_ids: list[int] | None = Field(None, description="Назначенные люди")


class TaskUpdate(BaseModel):
    """
    Схема для обновления задачи (PUT /tasks/{id}).

    Все поля опциональные. person_ids / project_ids полностью заменяют связи.
    """

    name: str | None = Field(None, min_length=1, max_length=300)
    project_id: int | None = None
    project_ids: list[int] | None = Field(None, min_length=1)
    type: str | None = Field(None, max_length=50)
    status: str | None = Field(None, max_length=50)
    start_date: str | None = Field(None, max_length=50)
    due_date: str | None = Field(None, max_length=50)
    notes: str | None = None
    person_ids: list[int] | None = None


class TaskResponse(BaseModel):
    """
    Схема для ответа API (GET /tasks/{id}).

    project_ids / person_ids и имена берутся из свойств модели Task,
    working_days_until_due считается на лету (отрицательное = просрочено).
    """

    id: int
    name: str
    project_id: int
    project_ids: list[int]
    project_names: list[str]
    type: str
    status: str
    start_date: str
    due_date: str
    notes: str
    person_ids: list[int]
    person_names: list[str]
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def working_days_until_due(self) -> int | None:
        return get_working_days_until_due(self.due_date)


class PersonWithTasks(PersonResponse):
    """Человек со своими задачами (GET /tasks/by-person)."""

    tasks: list[TaskResponse] = []
    open_count: int = 0


# ============================================================================
# SETTINGS SCHEMAS
# ============================================================================


class OptionItem(BaseModel):
    """
    Элемент списка типов/статусов в PUT /settings/*.

    id есть у существующих строк, у новых - нет.
    """

    id: int | None = None
    name: str = Field(..., min_length=1, max_length=50)
    color: str | None = Field(None, pattern=HEX_COLOR)


class OptionResponse(BaseModel):
    id: int
    name: str
    color: str
    order: int

    model_config = ConfigDict(from_attributes=True)


class PersonItem(BaseModel):
    id: int | None = None
    name: str = Field(..., min_length=1, max_length=100)
    color: str | None = Field(None, pattern=OPTIONAL_HEX_COLOR)


class TypesUpdate(BaseModel):
    types: list[OptionItem]


class StatusesUpdate(BaseModel):
    statuses: list[OptionItem]


class PersonsUpdate(BaseModel):
    persons: list[PersonItem]


class SettingsResponse(BaseModel):
    """Все настройки сразу, каждый список в порядке order."""

    types: list[OptionResponse]
    statuses: list[OptionResponse]
    persons: list[PersonResponse]

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# VIEW SCHEMAS (Gantt, Calendar, Summary)
# ============================================================================


class GanttMarkerResponse(BaseModel):
    kind: Literal["bar", "milestone"]
    x: float
    width: float
    start: date
    due: date

    model_config = ConfigDict(from_attributes=True)


class GanttRowResponse(BaseModel):
    """Строка Gantt: заголовок проекта (kind="project") или задача."""

    kind: Literal["project", "task"]
    project_id: int | None = None
    project_name: str | None = None
    task: TaskResponse | None = None
    marker: GanttMarkerResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class AxisTickResponse(BaseModel):
    x: float
    day: date
    label: str

    model_config = ConfigDict(from_attributes=True)


class GanttResponse(BaseModel):
    chart_start: date
    range_end: date
    px_per_day: int
    total_days: int
    chart_width: int
    grouped: bool
    rows: list[GanttRowResponse]
    no_date_tasks: list[TaskResponse]
    ticks: list[AxisTickResponse]
    today_x: float | None = None

    model_config = ConfigDict(from_attributes=True)


class CalendarDayResponse(BaseModel):
    day: date
    in_month: bool
    is_today: bool
    tasks: list[TaskResponse]

    model_config = ConfigDict(from_attributes=True)


class CalendarResponse(BaseModel):
    mode: Literal["week", "month"]
    anchor: date
    title: str
    days: list[CalendarDayResponse]

    model_config = ConfigDict(from_attributes=True)


class ProjectSummary(BaseModel):
    id: int
    name: str
    notes: str
    open_task_count: int


class SummaryCounts(BaseModel):
    total_open_tasks: int
    total_projects: int
    by_status: dict[str, int]


class SummaryResponse(BaseModel):
    """
    Компактный снимок незавершённой работы (GET /summary).

    Удобен для дашбордов и внешних скриптов: всё в одном ответе.
    """

    generated_at: datetime
    summary: SummaryCounts
    projects: list[ProjectSummary]
    tasks: list[TaskResponse]


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Детали ошибки для конкретного поля.

    Пример:
    {
        "field": "name",
        "message": "String should have at least 1 character"
    }
    """

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """
    Тело ошибки с кодом и деталями.

    Коды:
    - VALIDATION_ERROR: ошибка валидации (400 бизнес-правила, 422 запрос)
    - NOT_FOUND: ресурс не найден
    - RATE_LIMIT_EXCEEDED: превышен лимит запросов
    """

    code: str = Field(..., description="Код ошибки (VALIDATION_ERROR, NOT_FOUND, etc.)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Список ошибок по полям (для валидации)"
    )


class ErrorResponse(BaseModel):
    """
    Единый формат ответа для всех ошибок API.

    Пример:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Project with id 999 not found",
            "details": null
        }
    }
    """

    error: ErrorBody


class SuccessResponse(BaseModel):
    """
    Схема для успешных операций без возврата данных.

    Пример:
    {
        "message": "Project deleted successfully"
    }
    """

    message: str
