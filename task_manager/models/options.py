"""User-configurable task types and statuses."""

from .base import Base, OrderedOptionMixin


class TaskType(Base, OrderedOptionMixin):
    """Task type (Urgent, Regular, ...). order defines the sort band."""

    __tablename__ = "task_types"

    def __repr__(self) -> str:
        return f"<TaskType(name='{self.name}', order={self.order})>"


class TaskStatus(Base, OrderedOptionMixin):
    """Task status (Must do, My action, Done, ...). order defines the sort band."""

    __tablename__ = "task_statuses"

    def __repr__(self) -> str:
        return f"<TaskStatus(name='{self.name}', order={self.order})>"
