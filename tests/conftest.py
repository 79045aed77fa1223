"""
Pytest fixtures для тестов.

Предоставляет:
- test_db: изолированная SQLite in-memory БД для каждого теста
- test_client: HTTP клиент для тестирования API endpoints
- seeded_settings: типы, статусы и люди как в демо-данных
"""

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from task_manager.api.dependencies import get_db
from task_manager.core.database import build_engine, build_sessionmaker
from task_manager.main import app
from task_manager.models import Base, Person, TaskStatus, TaskType

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Фиксированное "сегодня" для чистых функций: понедельник 2 марта 2026
TODAY = date(2026, 3, 2)

TYPE_NAMES = ["Admin", "Urgent", "Regular", "Night", "Weekend", "Backlog", "Others"]
STATUS_NAMES = ["Must do", "Waiting others", "My action", "Done"]
PERSON_NAMES = ["Efa", "Shirley", "Joelle"]


@pytest_asyncio.fixture
async def test_engine():
    """
    Создаёт async engine для тестовой БД (SQLite in-memory).

    build_engine() тот же, что и у приложения: StaticPool держит одно
    соединение (иначе in-memory данные теряются), PRAGMA foreign_keys включён.
    """
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """
    Предоставляет async session для работы с тестовой БД.

    Каждый тест получает чистую БД.
    """
    TestSessionLocal = build_sessionmaker(test_engine)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_settings(test_db):
    """Типы, статусы и люди в порядке из демо-данных."""
    for index, name in enumerate(TYPE_NAMES):
        test_db.add(TaskType(name=name, order=index))
    for index, name in enumerate(STATUS_NAMES):
        test_db.add(TaskStatus(name=name, order=index))
    for index, name in enumerate(PERSON_NAMES):
        test_db.add(Person(name=name, order=index))
    await test_db.flush()
    return test_db


@pytest_asyncio.fixture
async def test_client(test_engine):
    """
    Предоставляет HTTP клиент для тестирования API endpoints.

    Использует тестовую БД вместо production БД.
    """
    TestSessionLocal = build_sessionmaker(test_engine)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def today() -> date:
    return TODAY
