"""Base repository with common CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

# TypeVar для Generic класса - позволяет работать с любой моделью
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Базовый репозиторий с CRUD операциями.

    Generic[ModelType] означает, что этот класс работает с любой моделью,
    наследующейся от Base.

    Пример использования:
        person_repo = BaseRepository[Person](Person, db_session)
        person = await person_repo.get_by_id(1)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Создать новую запись в БД.

        flush() отправляет INSERT, но не делает commit - commit выполняет
        dependency get_db() в конце запроса.
        """
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)  # подтягиваем ID и timestamps из БД
        return obj

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Получить объект по ID.

        SQL эквивалент:
            SELECT * FROM table WHERE id = {id} LIMIT 1;
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_many(self, ids: list[int]) -> list[ModelType]:
        """
        Получить несколько объектов по списку ID.

        Порядок результата повторяет порядок ids, неизвестные ID пропускаются.
        """
        if not ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(ids)))
        by_id = {obj.id: obj for obj in result.scalars().all()}
        return [by_id[i] for i in dict.fromkeys(ids) if i in by_id]

    async def update(self, id: int, **kwargs: Any) -> ModelType | None:
        """
        Обновить запись по ID.

        Обновляются только переданные поля:
            project = await repo.update(1, name="Новое название")
        """
        obj = await self.get_by_id(id)
        if not obj:
            return None

        for key, value in kwargs.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: int) -> bool:
        """
        Удалить запись по ID.

        Удаляем через session.delete(), а не bulk DELETE: так ORM выполняет
        cascade (задачи проекта) и чистит строки в таблицах связей.

        Returns:
            True если удалено, False если не найдено
        """
        obj = await self.get_by_id(id)
        if obj is None:
            return False

        await self.db.delete(obj)
        await self.db.flush()
        return True

    async def count(self) -> int:
        """
        Подсчитать количество записей.

        SQL эквивалент:
            SELECT COUNT(*) FROM table;
        """
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
