"""Settings service: ordered task types, task statuses and people."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.logging import get_logger
from ..models import Person, TaskStatus, TaskType, utc_now
from ..repositories import (
    OptionRepository,
    PersonRepository,
    TaskRepository,
    TaskStatusRepository,
    TaskTypeRepository,
)

logger = get_logger(__name__)

DEFAULT_OPTION_COLOR = "#0066CC"


class SettingsService:
    """
    Сервис настроек.

    PUT /settings/* присылает полный упорядоченный список. Вместо
    "удалить всё и создать заново" применяем diff по id:

        элемент с известным id  -> UPDATE (name, color, order)
        элемент без id / с чужим -> INSERT
        строка, которой нет в списке -> DELETE

    order всегда берётся из позиции в списке. Переименование типа или
    статуса переименовывает его и во всех задачах.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.type_repo = TaskTypeRepository(db)
        self.status_repo = TaskStatusRepository(db)
        self.person_repo = PersonRepository(db)
        self.task_repo = TaskRepository(db)

    async def get_settings(self) -> dict[str, list]:
        return {
            "types": await self.type_repo.get_all_ordered(),
            "statuses": await self.status_repo.get_all_ordered(),
            "persons": await self.person_repo.get_all_ordered(),
        }

    async def replace_types(self, items: list[dict[str, Any]]) -> list[TaskType]:
        return await self._replace_options(self.type_repo, items, task_field="type")

    async def replace_statuses(self, items: list[dict[str, Any]]) -> list[TaskStatus]:
        return await self._replace_options(self.status_repo, items, task_field="status")

    async def replace_persons(self, items: list[dict[str, Any]]) -> list[Person]:
        """
        Сохранить список людей.

        id сохраняются, поэтому назначения на задачи не теряются.
        У удалённых людей пропадают только строки task_persons.
        """
        names = self._clean_names(items, unique=False)
        existing = {p.id: p for p in await self.person_repo.get_all_ordered()}
        keep_ids = {item.get("id") for item in items if item.get("id") in existing}

        for person_id, person in existing.items():
            if person_id not in keep_ids:
                await self.db.delete(person)
        await self.db.flush()

        for index, (item, name) in enumerate(zip(items, names)):
            person = existing.get(item.get("id")) if item.get("id") in keep_ids else None
            if person is None:
                self.db.add(Person(name=name, color=item.get("color") or None, order=index))
            else:
                person.name = name
                person.color = item.get("color") or None
                person.order = index
        await self.db.flush()

        logger.info(
            "Persons saved",
            extra={"count": len(items), "deleted": len(existing) - len(keep_ids)},
        )
        return await self.person_repo.get_all_ordered()

    async def _replace_options(
        self,
        repo: OptionRepository,
        items: list[dict[str, Any]],
        task_field: str,
    ) -> list:
        names = self._clean_names(items, unique=True)
        existing = {o.id: o for o in await repo.get_all_ordered()}
        keep_ids = {item.get("id") for item in items if item.get("id") in existing}

        # 1. DELETE: сначала освобождаем имена удалённых строк
        for option_id, option in existing.items():
            if option_id not in keep_ids:
                await self.db.delete(option)
        await self.db.flush()

        # 2. RENAME в две фазы через временные имена: name уникален,
        # а обмен именами (A <-> B) иначе упирается в constraint
        renames = []
        for item, name in zip(items, names):
            option = existing.get(item.get("id")) if item.get("id") in keep_ids else None
            if option is not None and option.name != name:
                renames.append((option, option.name, name))

        for option, old_name, _ in renames:
            temporary = f"__renaming_{option.id}"
            await self.task_repo.rename_field_value(task_field, old_name, temporary)
            option.name = temporary
        await self.db.flush()

        for option, old_name, new_name in renames:
            moved = await self.task_repo.rename_field_value(task_field, option.name, new_name)
            option.name = new_name
            logger.info(
                "Task %s renamed",
                task_field,
                extra={"old": old_name, "new": new_name, "tasks_updated": moved},
            )
        await self.db.flush()

        if task_field == "status" and renames:
            # задачи, ставшие Done (или переставшие им быть) только из-за имени
            fixed = await self.task_repo.sync_completed_at(settings.DONE_STATUS_NAME, utc_now())
            if fixed:
                logger.info("Task completion synced", extra={"tasks_updated": fixed})

        # 3. UPDATE order/color + INSERT новых
        for index, (item, name) in enumerate(zip(items, names)):
            option = existing.get(item.get("id")) if item.get("id") in keep_ids else None
            color = item.get("color") or DEFAULT_OPTION_COLOR
            if option is None:
                self.db.add(repo.model(name=name, color=color, order=index))
            else:
                option.color = color
                option.order = index
        await self.db.flush()

        logger.info(
            "Task %s list saved",
            task_field,
            extra={"count": len(items), "deleted": len(existing) - len(keep_ids)},
        )
        return await repo.get_all_ordered()

    @staticmethod
    def _clean_names(items: list[dict[str, Any]], unique: bool) -> list[str]:
        names = [(item.get("name") or "").strip() for item in items]
        if any(not name for name in names):
            raise ValueError("Name cannot be empty")
        if unique:
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"Duplicate names: {', '.join(duplicates)}")
        return names
