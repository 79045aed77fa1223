"""
API endpoints для работы с задачами.

URL структура:
- GET    /tasks                    - список с фильтрами, в порядке приоритета
- GET    /tasks/by-person          - задачи по людям (Person View)
- GET    /tasks/export.csv         - выгрузка в CSV
- POST   /tasks                    - создать задачу
- GET    /tasks/{id}               - одна задача
- PUT    /tasks/{id}               - обновить задачу
- POST   /tasks/{id}/toggle-done   - Done <-> открытый статус
- DELETE /tasks/{id}               - удалить задачу

Статические пути (/by-person, /export.csv) объявлены раньше /{task_id}.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from ..planning import TaskFilter
from ..services import TaskService, export_filename, tasks_to_csv
from .dependencies import get_task_service
from .errors import from_service_error
from .schemas import (
    ErrorResponse,
    PersonWithTasks,
    SuccessResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def task_filter(
    search: str = Query("", description="Подстрока в названии (без учёта регистра)"),
    types: list[str] = Query([], alias="type", description="Типы (можно несколько)"),
    statuses: list[str] = Query([], alias="status", description="Статусы (можно несколько)"),
    project_ids: list[int] = Query([], alias="project_id", description="Проекты"),
    person_ids: list[int] = Query([], alias="person_id", description="Люди"),
) -> TaskFilter:
    """
    Query параметры фильтра.

    Пример:
        GET /tasks?type=Urgent&type=Regular&person_id=2&search=report
    """
    return TaskFilter(
        search=search,
        types=types,
        statuses=statuses,
        project_ids=project_ids,
        person_ids=person_ids,
    )


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Получить задачи",
    description="""
    Задачи с фильтрами.

    Внутри одного фильтра значения объединяются через ИЛИ, разные фильтры - через И.
    Порядок: открытые задачи по типу, статусу и наличию дедлайна, затем Done.
    """,
)
async def get_tasks(
    criteria: TaskFilter = Depends(task_filter),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    tasks = await service.list_tasks(criteria)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/by-person", response_model=list[PersonWithTasks], summary="Задачи по людям")
async def get_tasks_by_person(
    service: TaskService = Depends(get_task_service),
) -> list[PersonWithTasks]:
    groups = await service.get_tasks_by_person()
    return [
        PersonWithTasks(
            id=group.owner.id,
            name=group.owner.name,
            color=group.owner.color,
            order=group.owner.order,
            tasks=[TaskResponse.model_validate(t) for t in group.tasks],
            open_count=group.open_count,
        )
        for group in groups
    ]


@router.get(
    "/export.csv",
    summary="Выгрузить задачи в CSV",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/csv": {}}, "description": "CSV файл"}},
)
async def export_tasks_csv(
    criteria: TaskFilter = Depends(task_filter),
    context: str = Query("", max_length=100, description="Метка выгрузки (project, person, ...)"),
    service: TaskService = Depends(get_task_service),
) -> StreamingResponse:
    """
    Выгрузить отфильтрованные задачи.

    Имя файла: task-manager-{context или "all"}-{YYYY-MM-DD}.csv
    """
    tasks = await service.list_tasks(criteria)
    today = date.today()
    content = tasks_to_csv(tasks, context=context, today=today)
    filename = export_filename(context, today)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        404: {"model": ErrorResponse, "description": "Проект или человек не найден"},
    },
)
async def create_task(
    data: TaskCreate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    try:
        task = await service.create_task(**data.model_dump())
    except ValueError as e:
        raise from_service_error(e) from e
    return TaskResponse.model_validate(task)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Получить задачу",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    try:
        task = await service.get_task(task_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return TaskResponse.model_validate(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Обновить задачу",
    description="""
    Частичное обновление.

    - person_ids / project_ids, если переданы, полностью заменяют связи
    - Переход в Done ставит completed_at, выход из Done - сбрасывает
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def update_task(
    task_id: int, data: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    try:
        task = await service.update_task(task_id, **data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise from_service_error(e) from e
    return TaskResponse.model_validate(task)


@router.post(
    "/{task_id}/toggle-done",
    response_model=TaskResponse,
    summary="Отметить выполненной / вернуть в работу",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def toggle_done(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    try:
        task = await service.toggle_done(task_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    response_model=SuccessResponse,
    summary="Удалить задачу",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def delete_task(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> SuccessResponse:
    try:
        await service.delete_task(task_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return SuccessResponse(message="Task deleted successfully")
