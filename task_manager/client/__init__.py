"""Python client: REST wrapper and an optimistic board state."""

from .api import ApiError, TaskManagerAPI
from .store import BoardState, TaskBoard, TaskItem

__all__ = ["ApiError", "TaskManagerAPI", "BoardState", "TaskBoard", "TaskItem"]
