"""
Result and statistics models returned by the task collection
"""

from typing import Optional, Any, Dict
from pydantic import BaseModel, ConfigDict


class TaskResult(BaseModel):
    """Outcome of a task collection operation"""
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, message: str, **data: Any) -> "TaskResult":
        return cls(success=True, message=message, data=data or None)

    @classmethod
    def error_result(cls, message: str, **data: Any) -> "TaskResult":
        return cls(success=False, message=message, data=data or None)

    def __bool__(self) -> bool:
        return self.success


class TaskStats(BaseModel):
    """Aggregate task counts; immutable once computed"""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    todo: int = 0
    in_progress: int = 0
    completed: int = 0
    low_priority: int = 0
    medium_priority: int = 0
    high_priority: int = 0
    overdue: int = 0

    @property
    def completion_rate(self) -> float:
        """Share of completed tasks, 0.0 for an empty collection"""
        if self.total == 0:
            return 0.0
        return self.completed / self.total
