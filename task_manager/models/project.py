"""Project model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Project(Base, TimestampMixin):
    """Project model for organizing tasks."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # Rich-text заметки проекта (HTML хранится как есть)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Задачи, для которых проект основной: удаляются вместе с проектом
    tasks: Mapped[list["Task"]] = relationship(
        "Task", back_populates="project", cascade="all, delete-orphan"
    )

    # Все задачи, привязанные к проекту через task_projects
    # (при удалении проекта удаляются только строки связи)
    linked_tasks: Mapped[list["Task"]] = relationship(
        "Task", secondary="task_projects", back_populates="projects"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}')>"
