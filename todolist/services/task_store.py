"""
Task store service: JSON persistence of the whole task collection
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Dict, List, Any, Iterable, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from todolist.config.constants import JSON_INDENT
from todolist.models.task import Task
from todolist.utils.error_handler import PersistenceError
from todolist.utils.logger import logger


class TaskDocument(BaseModel):
    """On-disk document: id counter plus serialized tasks"""

    model_config = ConfigDict(populate_by_name=True)

    next_id: int = Field(1, alias="nextId")
    tasks: List[Dict[str, Any]] = Field(default_factory=list)


class LoadedTasks(BaseModel):
    """Result of reading the data file"""

    next_id: int = 1
    tasks: List[Task] = Field(default_factory=list)
    error: Optional[str] = None


class TaskStore:
    """Service for reading and writing the task collection as one JSON document"""

    def __init__(self, data_file: Union[str, Path]):
        """
        Initialize task store

        Args:
            data_file: Path to the JSON data file
        """
        self.data_file = Path(data_file)
        self.logger = logger

    def load(self) -> LoadedTasks:
        """
        Load tasks from the data file

        A missing file means an empty collection (its directory is created).
        Malformed data never raises: tasks parsed before the first bad entry
        are kept and the problem is reported in LoadedTasks.error.

        Returns:
            Loaded tasks, id counter and optional error message
        """
        if not self.data_file.exists():
            try:
                self.data_file.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self.logger.warning(f"[TaskStore] Failed to create data directory: {e}")
                return LoadedTasks(error=f"Error loading data: {e}")
            self.logger.debug(f"[TaskStore] No data file at {self.data_file}, starting empty")
            return LoadedTasks()

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"[TaskStore] Failed to load {self.data_file}: {e}")
            return LoadedTasks(error=f"Error loading data: {e}")

        if not isinstance(raw, dict):
            self.logger.warning(f"[TaskStore] Unexpected document type in {self.data_file}")
            return LoadedTasks(error="Error loading data: top-level JSON value must be an object")

        result = LoadedTasks()
        raw_next_id = raw.get("nextId")
        if isinstance(raw_next_id, int) and not isinstance(raw_next_id, bool):
            result.next_id = raw_next_id
        elif raw_next_id is not None:
            self.logger.warning(f"[TaskStore] Ignoring invalid nextId: {raw_next_id!r}")

        raw_tasks = raw.get("tasks", [])
        if not isinstance(raw_tasks, list):
            result.error = "Error loading data: 'tasks' must be an array"
            self.logger.warning(f"[TaskStore] {result.error}")
            raw_tasks = []

        seen_ids = set()
        for position, raw_task in enumerate(raw_tasks):
            try:
                task = Task.from_json_dict(raw_task)
            except PydanticValidationError as e:
                result.error = f"Error loading data: task #{position + 1} is malformed ({e.error_count()} error(s))"
                self.logger.warning(f"[TaskStore] {result.error}: {e}")
                break
            except (ValueError, OverflowError, OSError) as e:
                # Out-of-range timestamps
                result.error = f"Error loading data: task #{position + 1} is malformed ({e})"
                self.logger.warning(f"[TaskStore] {result.error}")
                break
            if task.id in seen_ids:
                result.error = f"Error loading data: duplicate task id {task.id}"
                self.logger.warning(f"[TaskStore] {result.error}")
                break
            seen_ids.add(task.id)
            result.tasks.append(task)

        if result.tasks:
            # The counter must stay ahead of every id in use
            result.next_id = max(result.next_id, max(task.id for task in result.tasks) + 1)

        self.logger.debug(f"[TaskStore] Loaded {len(result.tasks)} tasks, nextId={result.next_id}")
        return result

    @staticmethod
    def build_document(tasks: Iterable[Task], next_id: int) -> Dict[str, Any]:
        """
        Serialize the collection into a detached JSON document

        Args:
            tasks: Tasks to serialize
            next_id: Live id counter

        Returns:
            Plain dict safe to hand to another thread
        """
        document = TaskDocument(
            next_id=next_id,
            tasks=[task.to_json_dict() for task in tasks],
        )
        return document.model_dump(by_alias=True)

    def write_document(self, document: Dict[str, Any]) -> None:
        """
        Overwrite the data file with the document

        Raises:
            PersistenceError: if the file cannot be written
        """
        try:
            # Ensure directory exists
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.data_file, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=JSON_INDENT)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"{e}", path=self.data_file) from e
        self.logger.debug(f"[TaskStore] Saved {len(document.get('tasks', []))} tasks to {self.data_file}")

    def save(self, tasks: Iterable[Task], next_id: int) -> None:
        """
        Persist the whole collection

        Raises:
            PersistenceError: if the file cannot be written
        """
        self.write_document(self.build_document(tasks, next_id))

    async def write_document_async(self, document: Dict[str, Any]) -> None:
        """Write a prepared document from a worker thread"""
        await asyncio.to_thread(self.write_document, document)
