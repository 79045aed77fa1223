"""
Точка входа FastAPI приложения.

    uvicorn task_manager.main:app --reload

Swagger UI: /docs, ReDoc: /redoc. Ресурсы живут под префиксом /api
(/api/projects, /api/tasks, ...), служебные / и /health - в корне.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import text

from .api import (
    persons_router,
    projects_router,
    settings_router,
    tasks_router,
    views_router,
)
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import settings
from .core.database import engine
from .core.logging import get_logger, setup_logging

setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

logger = get_logger(__name__)

APP_VERSION = "1.0.0"
API_PREFIX = "/api"

# Лимит только на служебных endpoints, по IP клиента
limiter = Limiter(key_func=get_remote_address)

_started_at: float | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Таблицы здесь не создаются: это делает миграция или init_db.py.
    """
    global _started_at
    _started_at = time.time()
    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "done_status": settings.DONE_STATUS_NAME,
        },
    )

    yield

    logger.info("Application stopped", extra={"uptime_seconds": _uptime()})


def _uptime() -> int:
    return int(time.time() - _started_at) if _started_at else 0


# ============================================================================
# APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Проекты, задачи, люди (POC) и планирование поверх них.

    * **Проекты** - задача принадлежит основному проекту и может быть привязана к другим
    * **Задачи** - тип и статус из настраиваемых списков, даты в свободном формате ("5/Mar")
    * **Настройки** - упорядоченные списки типов, статусов и людей задают сортировку
    * **Представления** - Gantt, календарь, задачи по людям, сводка, выгрузка CSV

    API → Service → Repository → DB; расчёты (рабочие дни, сортировка,
    раскладка Gantt) - чистые функции в task_manager.planning.
    """,
    version=APP_VERSION,
)

app.state.limiter = limiter
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

api_router = APIRouter(prefix=API_PREFIX)
for router in (projects_router, tasks_router, persons_router, settings_router, views_router):
    api_router.include_router(router)
app.include_router(api_router)


# ============================================================================
# SERVICE ENDPOINTS
# ============================================================================


@app.get("/", tags=["root"], summary="Информация о API")
@limiter.limit(settings.RATE_LIMIT)
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "projects": f"{API_PREFIX}/projects",
            "tasks": f"{API_PREFIX}/tasks",
            "persons": f"{API_PREFIX}/persons",
            "settings": f"{API_PREFIX}/settings",
            "gantt": f"{API_PREFIX}/views/gantt",
            "calendar": f"{API_PREFIX}/views/calendar",
            "summary": f"{API_PREFIX}/summary",
        },
        "rate_limit": settings.RATE_LIMIT,
    }


@app.get("/health", tags=["health"], summary="Проверка БД и аптайма")
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request):
    """200 если БД отвечает на SELECT 1, иначе 503."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.error("Health check failed", extra={"error": str(e)})
        database = "disconnected"

    healthy = database == "connected"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ok" if healthy else "error",
            "checks": {
                "database": database,
                "version": APP_VERSION,
                "uptime_seconds": _uptime(),
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
