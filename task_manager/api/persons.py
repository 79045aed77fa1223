"""
API endpoints для людей (POC - Point of Contact).

- GET    /persons        - список в порядке order
- POST   /persons        - создать (в конец списка)
- PUT    /persons/{id}   - обновить
- DELETE /persons/{id}   - удалить (задачи остаются, снимаются назначения)
"""

from fastapi import APIRouter, Depends, status

from ..services import PersonService
from .dependencies import get_person_service
from .errors import from_service_error
from .schemas import ErrorResponse, PersonCreate, PersonResponse, PersonUpdate, SuccessResponse

router = APIRouter(prefix="/persons", tags=["persons"])


@router.get("", response_model=list[PersonResponse], summary="Получить список людей")
async def get_persons(
    service: PersonService = Depends(get_person_service),
) -> list[PersonResponse]:
    persons = await service.get_all_persons()
    return [PersonResponse.model_validate(p) for p in persons]


@router.post(
    "",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить человека",
)
async def create_person(
    data: PersonCreate, service: PersonService = Depends(get_person_service)
) -> PersonResponse:
    try:
        person = await service.create_person(name=data.name, color=data.color)
    except ValueError as e:
        raise from_service_error(e) from e
    return PersonResponse.model_validate(person)


@router.put(
    "/{person_id}",
    response_model=PersonResponse,
    summary="Обновить человека",
    responses={404: {"model": ErrorResponse, "description": "Человек не найден"}},
)
async def update_person(
    person_id: int, data: PersonUpdate, service: PersonService = Depends(get_person_service)
) -> PersonResponse:
    try:
        person = await service.update_person(
            person_id, name=data.name, color=data.color, order=data.order
        )
    except ValueError as e:
        raise from_service_error(e) from e
    return PersonResponse.model_validate(person)


@router.delete(
    "/{person_id}",
    response_model=SuccessResponse,
    summary="Удалить человека",
    responses={404: {"model": ErrorResponse, "description": "Человек не найден"}},
)
async def delete_person(
    person_id: int, service: PersonService = Depends(get_person_service)
) -> SuccessResponse:
    try:
        await service.delete_person(person_id)
    except ValueError as e:
        raise from_service_error(e) from e
    return SuccessResponse(message="Person deleted successfully")
