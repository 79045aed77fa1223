"""Task model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Task(Base, TimestampMixin):
    """
    Task model.

    type и status - обычные строки (открытое перечисление из настроек),
    start_date и due_date - строки в свободном формате ("5/Mar", "03/05", "today").
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)

    # Основной проект (обязателен)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )

    type: Mapped[str] = mapped_column(String(50), nullable=False, default="Regular")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="My action")
    start_date: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    due_date: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="tasks")
    projects: Mapped[list["Project"]] = relationship(
        "Project", secondary="task_projects", back_populates="linked_tasks"
    )
    persons: Mapped[list["Person"]] = relationship(
        "Person", secondary="task_persons", back_populates="tasks", order_by="Person.order"
    )

    @property
    def project_ids(self) -> list[int]:
        """Primary project first, then every other linked project."""
        ids = [self.project_id]
        for project in self.projects:
            if project.id not in ids:
                ids.append(project.id)
        return ids

    @property
    def project_names(self) -> list[str]:
        names_by_id = {p.id: p.name for p in self.projects}
        if "project" in self.__dict__ and self.project is not None:
            names_by_id.setdefault(self.project.id, self.project.name)
        return [names_by_id[pid] for pid in self.project_ids if pid in names_by_id]

    @property
    def person_ids(self) -> list[int]:
        return [p.id for p in self.persons]

    @property
    def person_names(self) -> list[str]:
        return [p.name for p in self.persons]

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, name='{self.name}', status='{self.status}')>"
