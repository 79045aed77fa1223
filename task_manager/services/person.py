"""Person (POC) service."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Person
from ..repositories import PersonRepository

logger = get_logger(__name__)


class PersonService:
    """CRUD для людей. Порядок (order) задаёт порядок колонок в Person View."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.person_repo = PersonRepository(db)

    async def get_person(self, person_id: int) -> Person:
        person = await self.person_repo.get_by_id(person_id)
        if not person:
            raise ValueError(f"Person with id {person_id} not found")
        return person

    async def get_all_persons(self) -> list[Person]:
        return await self.person_repo.get_all_ordered()

    async def create_person(self, name: str, color: str | None = None) -> Person:
        """
        Создать человека в конце списка.

        Бизнес-правило: order = max(order) + 1
        """
        if not name or not name.strip():
            raise ValueError("Person name cannot be empty")

        max_order = await self.person_repo.get_max_order()
        person = Person(name=name.strip(), color=color or None, order=(max_order or 0) + 1)
        person = await self.person_repo.create(person)

        logger.info("Person created", extra={"person_id": person.id, "order": person.order})
        return person

    async def update_person(
        self,
        person_id: int,
        name: str | None = None,
        color: str | None = None,
        order: int | None = None,
    ) -> Person:
        await self.get_person(person_id)

        if name is not None and not name.strip():
            raise ValueError("Person name cannot be empty")

        updates: dict = {}
        if name is not None:
            updates["name"] = name.strip()
        if color is not None:
            # пустая строка = убрать цвет
            updates["color"] = color or None
        if order is not None:
            updates["order"] = order

        return await self.person_repo.update(person_id, **updates)

    async def delete_person(self, person_id: int) -> bool:
        """Удалить человека. Задачи остаются, удаляются только назначения."""
        await self.get_person(person_id)

        deleted = await self.person_repo.delete(person_id)
        logger.info("Person deleted", extra={"person_id": person_id})
        return deleted
