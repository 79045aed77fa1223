"""
API endpoints для производных представлений.

- GET /views/gantt      - раскладка Gantt по проектам
- GET /views/calendar   - неделя или месяц с задачами по дням
- GET /summary          - снимок незавершённой работы
"""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query

from ..services import ViewService
from .dependencies import get_view_service
from .errors import from_service_error
from .schemas import CalendarResponse, ErrorResponse, GanttResponse, SummaryResponse

router = APIRouter(tags=["views"])


@router.get(
    "/views/gantt",
    response_model=GanttResponse,
    summary="Gantt chart",
    description="""
    Раскладка Gantt.

    - project_id (можно несколько): проекты в scope, без параметра - все
    - start: первый день шкалы (по умолчанию сегодня)
    - weeks: ширина окна в неделях
    """,
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def get_gantt(
    project_ids: list[int] = Query([], alias="project_id"),
    start: date | None = Query(None, description="Первый день шкалы (YYYY-MM-DD)"),
    weeks: int | None = Query(None, ge=1, le=104, description="Ширина окна в неделях"),
    service: ViewService = Depends(get_view_service),
) -> GanttResponse:
    try:
        chart = await service.get_gantt(project_ids=project_ids, chart_start=start, range_weeks=weeks)
    except ValueError as e:
        raise from_service_error(e) from e
    return GanttResponse.model_validate(chart)


@router.get("/views/calendar", response_model=CalendarResponse, summary="Calendar")
async def get_calendar(
    anchor: date | None = Query(None, description="Любой день недели/месяца (YYYY-MM-DD)"),
    mode: Literal["week", "month"] = Query("week"),
    service: ViewService = Depends(get_view_service),
) -> CalendarResponse:
    grid = await service.get_calendar(anchor=anchor, mode=mode)
    return CalendarResponse.model_validate(grid)


@router.get("/summary", response_model=SummaryResponse, summary="Open work summary")
async def get_summary(service: ViewService = Depends(get_view_service)) -> SummaryResponse:
    return SummaryResponse.model_validate(await service.get_summary())
