"""Person repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Person
from .base import BaseRepository


class PersonRepository(BaseRepository[Person]):
    """Репозиторий для людей (POC). Список всегда отдаётся в порядке order."""

    def __init__(self, db: AsyncSession):
        super().__init__(Person, db)

    async def get_all_ordered(self) -> list[Person]:
        """
        SQL эквивалент:
            SELECT * FROM persons ORDER BY "order", id;
        """
        result = await self.db.execute(select(Person).order_by(Person.order, Person.id))
        return list(result.scalars().all())

    async def get_max_order(self) -> int | None:
        """Максимальный order или None, если людей нет."""
        result = await self.db.execute(select(func.max(Person.order)))
        return result.scalar_one_or_none()
