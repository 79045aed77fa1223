"""
Скрипт для инициализации базы данных.

Создаёт все таблицы напрямую через SQLAlchemy (без Alembic).
С флагом --reset сначала удаляет существующие таблицы.

    python init_db.py
    python init_db.py --reset
"""

import asyncio
import sys

from task_manager.core.database import drop_db, init_db
from task_manager.core.logging import get_logger, setup_logging

logger = get_logger("init_db")


async def main(reset: bool = False):
    """Создать все таблицы."""
    if reset:
        logger.info("Dropping tables")
        await drop_db()
    await init_db()
    logger.info("Tables created")


if __name__ == "__main__":
    setup_logging(log_level="INFO", log_format="simple")
    asyncio.run(main(reset="--reset" in sys.argv[1:]))
