"""
API endpoints для работы с проектами.

URL структура:
- GET    /projects              - список проектов (новые сверху)
- GET    /projects/{id}         - один проект
- POST   /projects              - создать проект
- PUT    /projects/{id}         - обновить проект
- DELETE /projects/{id}         - удалить проект вместе с его задачами
- GET    /projects/{id}/tasks   - задачи проекта в порядке приоритета
"""

from fastapi import APIRouter, Depends, status

from ..services import ProjectService
from .dependencies import get_project_service
from .errors import from_service_error
from .schemas import (
    ErrorResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    SuccessResponse,
    TaskResponse,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse], summary="Получить список проектов")
async def get_projects(
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    projects = await service.get_all_projects()
    return [ProjectResponse.model_validate(p) for p in projects]


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать проект",
    description="""
    Создать новый проект.

    - Без названия проект получает имя "New Project"
    - notes хранится как HTML строка
    """,
)
async def create_project(
    data: ProjectCreate, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    project = await service.create_project(name=data.name, notes=data.notes)
    return ProjectResponse.model_validate(project)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Получить проект по ID",
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def get_project(
    project_id: int, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    try:
        project = await service.get_project(project_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return ProjectResponse.model_validate(project)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Обновить проект",
    description="Частичное обновление: переданные поля меняются, остальные остаются.",
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        404: {"model": ErrorResponse, "description": "Проект не найден"},
    },
)
async def update_project(
    project_id: int, data: ProjectUpdate, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    try:
        project = await service.update_project(project_id, name=data.name, notes=data.notes)
    except ValueError as e:
        raise from_service_error(e) from e
    return ProjectResponse.model_validate(project)


@router.delete(
    "/{project_id}",
    response_model=SuccessResponse,
    summary="Удалить проект",
    description="""
    Удалить проект.

    - Задачи, для которых проект основной, удаляются вместе с ним
    - Задачи, только привязанные к проекту, теряют лишь эту привязку
    - Последний проект удалить нельзя (400)
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Последний проект"},
        404: {"model": ErrorResponse, "description": "Проект не найден"},
    },
)
async def delete_project(
    project_id: int, service: ProjectService = Depends(get_project_service)
) -> SuccessResponse:
    try:
        await service.delete_project(project_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return SuccessResponse(message="Project deleted successfully")


@router.get(
    "/{project_id}/tasks",
    response_model=list[TaskResponse],
    summary="Задачи проекта",
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def get_project_tasks(
    project_id: int, service: ProjectService = Depends(get_project_service)
) -> list[TaskResponse]:
    try:
        tasks = await service.get_project_tasks(project_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return [TaskResponse.model_validate(t) for t in tasks]
