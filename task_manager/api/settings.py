"""
API endpoints для настроек: типы задач, статусы и люди.

PUT принимает полный упорядоченный список. Строки с id обновляются,
без id - создаются, отсутствующие в списке - удаляются.
"""

from fastapi import APIRouter, Depends

from ..services import SettingsService
from .dependencies import get_settings_service
from .errors import from_service_error
from .schemas import (
    ErrorResponse,
    OptionResponse,
    PersonResponse,
    PersonsUpdate,
    SettingsResponse,
    StatusesUpdate,
    TypesUpdate,
)

router = APIRouter(prefix="/settings", tags=["settings"])

BAD_LIST = {400: {"model": ErrorResponse, "description": "Пустые или повторяющиеся имена"}}


@router.get("", response_model=SettingsResponse, summary="Получить все настройки")
async def get_settings(
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    return SettingsResponse.model_validate(await service.get_settings())


@router.put(
    "/types",
    response_model=list[OptionResponse],
    summary="Сохранить типы задач",
    description="""
    Порядок в списке = порядок сортировки задач.
    Переименование типа меняет его во всех задачах.

    Пример запроса:
    ```json
    {"types": [{"id": 1, "name": "Urgent", "color": "#DC2626"}, {"name": "Someday"}]}
    ```
    """,
    responses=BAD_LIST,
)
async def update_types(
    data: TypesUpdate, service: SettingsService = Depends(get_settings_service)
) -> list[OptionResponse]:
    try:
        types = await service.replace_types([item.model_dump() for item in data.types])
    except ValueError as e:
        raise from_service_error(e) from e
    return [OptionResponse.model_validate(t) for t in types]


@router.put(
    "/statuses",
    response_model=list[OptionResponse],
    summary="Сохранить статусы задач",
    responses=BAD_LIST,
)
async def update_statuses(
    data: StatusesUpdate, service: SettingsService = Depends(get_settings_service)
) -> list[OptionResponse]:
    try:
        statuses = await service.replace_statuses([item.model_dump() for item in data.statuses])
    except ValueError as e:
        raise from_service_error(e) from e
    return [OptionResponse.model_validate(s) for s in statuses]


@router.put(
    "/persons",
    response_model=list[PersonResponse],
    summary="Сохранить список людей",
    responses=BAD_LIST,
)
async def update_persons(
    data: PersonsUpdate, service: SettingsService = Depends(get_settings_service)
) -> list[PersonResponse]:
    try:
        persons = await service.replace_persons([item.model_dump() for item in data.persons])
    except ValueError as e:
        raise from_service_error(e) from e
    return [PersonResponse.model_validate(p) for p in persons]
