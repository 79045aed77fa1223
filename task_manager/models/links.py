"""Junction tables: Task <-> Person and Task <-> Project."""

from sqlalchemy import Column, ForeignKey, Integer, Table

from .base import Base

# Many-to-many: назначенные на задачу люди (POC)
task_persons = Table(
    "task_persons",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("person_id", Integer, ForeignKey("persons.id", ondelete="CASCADE"), primary_key=True),
)

# Many-to-many: все проекты задачи (включая основной)
task_projects = Table(
    "task_projects",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
)
