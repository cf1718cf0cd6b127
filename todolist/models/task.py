"""
Task model
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from todolist.config.constants import (
    STATUS_LABELS,
    PRIORITY_LABELS,
    STATUS_ALIASES,
    PRIORITY_ALIASES,
)
from todolist.utils.date_utils import (
    get_current_datetime,
    normalize_datetime,
    to_epoch_seconds,
    from_epoch_seconds,
)
from todolist.utils.error_handler import ValidationError


class TaskStatus(int, Enum):
    """Task status; integer values are the on-disk codes"""
    TODO = 1
    IN_PROGRESS = 2
    COMPLETED = 3

    @property
    def label(self) -> str:
        return STATUS_LABELS[self.value]

    @classmethod
    def parse(cls, text: str) -> "TaskStatus":
        """Parse user input such as "todo", "inprogress", "completed" or "1".."3" """
        key = str(text).strip().lower()
        if key not in STATUS_ALIASES:
            raise ValidationError(
                f"Invalid status '{text}'. Use one of: todo, inprogress, completed"
            )
        return cls(STATUS_ALIASES[key])


class TaskPriority(int, Enum):
    """Task priority; integer values are the on-disk codes"""
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return PRIORITY_LABELS[self.value]

    @classmethod
    def parse(cls, text: str) -> "TaskPriority":
        """Parse user input such as "low", "medium", "high" or "1".."3" """
        key = str(text).strip().lower()
        if key not in PRIORITY_ALIASES:
            raise ValidationError(
                f"Invalid priority '{text}'. Use one of: low, medium, high"
            )
        return cls(PRIORITY_ALIASES[key])


def _clean_tag(tag: str) -> str:
    cleaned = str(tag).strip()
    if not cleaned:
        raise ValidationError("Tag must not be empty")
    return cleaned


class TaskRecord(BaseModel):
    """On-disk shape of a single task (timestamps as epoch seconds)"""

    id: int
    name: str
    status: int
    priority: int
    created_at: Optional[int] = None
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    completed_at: Optional[int] = None
    due_date: Optional[int] = None


class Task(BaseModel):
    """
    A single to-do item

    completed_at is kept present exactly while the task is COMPLETED, on
    construction, on load and on every assignment to status.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int
    name: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    created_at: datetime = Field(default_factory=get_current_datetime)
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    description: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Task name cannot be empty")
        return value

    @field_validator("created_at", "completed_at", "due_date")
    @classmethod
    def _normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return normalize_datetime(value)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        unique: List[str] = []
        for tag in value:
            cleaned = tag.strip()
            if cleaned and cleaned not in unique:
                unique.append(cleaned)
        return unique

    @model_validator(mode="after")
    def _couple_completed_at(self) -> "Task":
        # completed_at is present exactly while the task is COMPLETED.
        # Writes go through __dict__: assigning here would re-run validation.
        if self.status == TaskStatus.COMPLETED:
            if self.completed_at is None:
                self.__dict__["completed_at"] = get_current_datetime()
        elif self.completed_at is not None:
            self.__dict__["completed_at"] = None
        return self

    # ---- mutators ----

    def rename(self, name: str) -> None:
        self.name = name

    def set_status(self, status: TaskStatus) -> None:
        """
        Change status; completing stamps completed_at unless the task is
        already completed, any other status clears it
        """
        self.status = TaskStatus(status)

    def mark_completed(self) -> None:
        self.set_status(TaskStatus.COMPLETED)

    def set_priority(self, priority: TaskPriority) -> None:
        self.priority = TaskPriority(priority)

    def set_description(self, description: str) -> None:
        self.description = description or ""

    def set_due_date(self, due_date: Optional[datetime]) -> None:
        self.due_date = due_date

    def add_tag(self, tag: str) -> bool:
        """Add a tag; returns False if the task already carries it"""
        cleaned = _clean_tag(tag)
        if cleaned in self.tags:
            return False
        self.tags.append(cleaned)
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove a tag; returns False if the task does not carry it"""
        wanted = str(tag).strip().lower()
        for existing in self.tags:
            if existing.lower() == wanted:
                self.tags.remove(existing)
                return True
        return False

    # ---- queries ----

    def has_tag(self, tag: str) -> bool:
        wanted = str(tag).strip().lower()
        return any(existing.lower() == wanted for existing in self.tags)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        now = normalize_datetime(now) if now is not None else get_current_datetime()
        return self.due_date < now

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against name or description"""
        needle = query.lower()
        return needle in self.name.lower() or needle in self.description.lower()

    def sort_key(self) -> Tuple[int, int, float, float]:
        """
        Display ordering: priority descending, then due date ascending
        (tasks without a due date last), then creation time ascending
        """
        has_no_due = 1 if self.due_date is None else 0
        due = self.due_date.timestamp() if self.due_date is not None else 0.0
        return (-int(self.priority), has_no_due, due, self.created_at.timestamp())

    def searchable_fields(self) -> List[str]:
        """Field values indexed by the search trie"""
        fields = [self.name]
        if self.description:
            fields.append(self.description)
        fields.extend(self.tags)
        fields.append(self.status.label)
        fields.append(self.priority.label)
        return fields

    # ---- JSON codec ----

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize to the on-disk JSON object"""
        record = TaskRecord(
            id=self.id,
            name=self.name,
            status=int(self.status),
            priority=int(self.priority),
            created_at=to_epoch_seconds(self.created_at),
            description=self.description,
            tags=list(self.tags),
            completed_at=to_epoch_seconds(self.completed_at),
            due_date=to_epoch_seconds(self.due_date),
        )
        return record.model_dump(exclude_none=True)

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Build a task from its on-disk JSON object

        Raises:
            pydantic.ValidationError: if required fields are missing or malformed
        """
        record = TaskRecord.model_validate(data)
        fields: Dict[str, Any] = {
            "id": record.id,
            "name": record.name,
            "status": record.status,
            "priority": record.priority,
            "description": record.description,
            "tags": record.tags,
            "completed_at": from_epoch_seconds(record.completed_at),
            "due_date": from_epoch_seconds(record.due_date),
        }
        if record.created_at is not None:
            fields["created_at"] = from_epoch_seconds(record.created_at)
        return cls(**fields)
