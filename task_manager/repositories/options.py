"""Repositories for the configurable task types and statuses."""

from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TaskStatus, TaskType
from ..models.base import OrderedOptionMixin
from .base import BaseRepository

OptionType = TypeVar("OptionType", TaskType, TaskStatus)


class OptionRepository(BaseRepository[OptionType]):
    """
    Общий репозиторий для упорядоченных списков настроек.

    Типы и статусы устроены одинаково (name, color, order),
    поэтому отличаются только моделью.
    """

    async def get_all_ordered(self) -> list[OptionType]:
        """
        SQL эквивалент:
            SELECT * FROM task_types ORDER BY "order", id;
        """
        model: type[OrderedOptionMixin] = self.model
        result = await self.db.execute(select(self.model).order_by(model.order, model.id))
        return list(result.scalars().all())

    async def get_names(self) -> list[str]:
        return [option.name for option in await self.get_all_ordered()]


class TaskTypeRepository(OptionRepository[TaskType]):
    def __init__(self, db: AsyncSession):
        super().__init__(TaskType, db)


class TaskStatusRepository(OptionRepository[TaskStatus]):
    def __init__(self, db: AsyncSession):
        super().__init__(TaskStatus, db)
