"""Person (POC - Point of Contact) model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Person(Base):
    """Person who can be assigned to tasks."""

    __tablename__ = "persons"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)  # hex color
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # При удалении человека удаляются только строки task_persons
    tasks: Mapped[list["Task"]] = relationship(
        "Task", secondary="task_persons", back_populates="persons"
    )

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, name='{self.name}', order={self.order})>"
