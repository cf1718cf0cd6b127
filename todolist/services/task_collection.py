"""
Task collection service: owns all tasks, coordinates caches and persistence
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Tuple, Iterable, Union, Any
from todolist.config.constants import DEFAULT_DATA_FILE
from todolist.models.response import TaskResult, TaskStats
from todolist.models.task import Task, TaskStatus, TaskPriority
from todolist.services.statistics_cache import StatisticsCache
from todolist.services.task_search_index import TaskSearchIndex
from todolist.services.task_store import TaskStore
from todolist.utils.error_handler import TodoError, TaskNotFoundError, PersistenceError, handle_error
from todolist.utils.logger import logger

# (live task, deep copy of its state) pairs plus the id counter
Snapshot = Tuple[List[Tuple[Task, Task]], int]


class TaskCollection:
    """
    Single source of truth for the set of tasks

    Every mutating operation marks the search index and statistics cache
    dirty and saves the whole collection before returning. If the save
    fails, the in-memory state is restored to what it was before the
    operation and a failed TaskResult is returned. Expected failures
    (unknown id, empty name) are reported as failed results, never raised.
    """

    def __init__(
        self,
        data_file: Union[str, Path] = DEFAULT_DATA_FILE,
        store: Optional[TaskStore] = None,
    ):
        """
        Initialize task collection and load existing tasks

        Args:
            data_file: Path to the JSON data file
            store: Task store (optional, built from data_file by default)
        """
        self.store = store or TaskStore(data_file)
        self.logger = logger

        self._tasks: List[Task] = []
        self._next_id: int = 1

        self._search_index = TaskSearchIndex()
        self._index_dirty: bool = True
        self._stats_cache = StatisticsCache()

        self._pending_save: Optional["asyncio.Task[TaskResult]"] = None

        self.load_error: Optional[str] = None
        self._load()

    # ---- introspection ----

    @property
    def data_file(self) -> Path:
        return self.store.data_file

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- mutations ----

    def add_task(
        self,
        name: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.LOW,
        due_date: Optional[datetime] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> TaskResult:
        """
        Add a new task with the next id

        Args:
            name: Task name (must not be empty)
            description: Free text description
            status: Initial status
            priority: Priority
            due_date: Optional due date
            tags: Optional tags (duplicates ignored)

        Returns:
            Result; on success data["id"] holds the new task id
        """
        snapshot = self._snapshot()
        task_id = self._next_id
        self._next_id += 1

        try:
            task = Task(
                id=task_id,
                name=name,
                priority=TaskPriority(priority),
                description=description or "",
                due_date=due_date,
            )
            task.set_status(TaskStatus(status))
            for tag in tags or []:
                task.add_tag(tag)
        except (ValueError, TodoError) as e:
            # Roll back the id so the next successful add reuses it
            self._next_id -= 1
            return TaskResult.error_result(f"Failed to add task: {handle_error(e).message}")

        self._tasks.append(task)
        return self._commit(snapshot, "Task added successfully!", id=task.id)

    def remove_task(self, task_id: int) -> TaskResult:
        """
        Remove a task by id; remaining ids are never reassigned

        Args:
            task_id: Task id

        Returns:
            Result of the operation
        """
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        snapshot = self._snapshot()
        self._tasks.remove(task)
        return self._commit(snapshot, "Task removed successfully!", id=task_id)

    def remove_all_tasks(self) -> TaskResult:
        """
        Remove every task (confirmation is the caller's job)

        Returns:
            Result; on success data["count"] holds the number removed
        """
        if not self._tasks:
            return TaskResult.error_result("No tasks to remove!")

        count = len(self._tasks)
        snapshot = self._snapshot()
        self._tasks.clear()
        return self._commit(snapshot, f"Removed {count} task(s) successfully!", count=count)

    def update_task(
        self,
        task_id: int,
        name: str,
        status: TaskStatus,
        priority: TaskPriority,
    ) -> TaskResult:
        """
        Replace name, status and priority of a task

        Status goes through the task's status setter, so completing or
        reopening a task stamps or clears its completion time.

        Args:
            task_id: Task id
            name: New name (must not be empty)
            status: New status
            priority: New priority

        Returns:
            Result of the operation
        """
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        snapshot = self._snapshot()
        try:
            status = TaskStatus(status)
            priority = TaskPriority(priority)
            # rename validates before anything is changed
            task.rename(name)
        except (ValueError, TodoError) as e:
            return TaskResult.error_result(f"Failed to update task: {handle_error(e).message}")

        task.set_status(status)
        task.set_priority(priority)
        return self._commit(snapshot, "Task updated successfully!", id=task_id)

    def complete_task(self, task_id: int) -> TaskResult:
        """Mark a task as completed"""
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        if task.status == TaskStatus.COMPLETED:
            return TaskResult.success_result("Task is already completed.", id=task_id)

        snapshot = self._snapshot()
        task.mark_completed()
        return self._commit(snapshot, "Task marked as completed!", id=task_id)

    def add_tag(self, task_id: int, tag: str) -> TaskResult:
        """Add a tag to a task; adding an existing tag changes nothing"""
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        snapshot = self._snapshot()
        try:
            added = task.add_tag(tag)
        except TodoError as e:
            return TaskResult.error_result(f"Failed to add tag: {handle_error(e).message}")

        if not added:
            return TaskResult.success_result(f"Task already has tag '{tag.strip()}'.", id=task_id)
        return self._commit(snapshot, "Tag added successfully!", id=task_id)

    def remove_tag(self, task_id: int, tag: str) -> TaskResult:
        """Remove a tag from a task"""
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        snapshot = self._snapshot()
        if not task.remove_tag(tag):
            return TaskResult.error_result(f"Task {task_id} has no tag '{tag}'")
        return self._commit(snapshot, "Tag removed successfully!", id=task_id)

    def set_due_date(self, task_id: int, due_date: Optional[datetime]) -> TaskResult:
        """Set or clear (None) the due date of a task"""
        task = self.find_task(task_id)
        if task is None:
            return self._not_found(task_id)

        snapshot = self._snapshot()
        task.set_due_date(due_date)
        message = "Due date set successfully!" if due_date is not None else "Due date cleared successfully!"
        return self._commit(snapshot, message, id=task_id)

    # ---- queries ----

    def find_task(self, task_id: int) -> Optional[Task]:
        """
        Find task by id

        Args:
            task_id: Task id

        Returns:
            Task or None; the reference is invalid once the task is removed
        """
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def search_tasks(self, query: str) -> List[Task]:
        """Case-insensitive substring search over name and description, in collection order"""
        return [task for task in self._tasks if task.matches(query)]

    def advanced_search(self, query: str) -> List[Task]:
        """
        Search every indexed field through the prefix trie

        Args:
            query: Search text (case-insensitive)

        Returns:
            Matching tasks sorted by id; empty for an empty query
        """
        if not query:
            return []

        self._rebuild_search_index()
        results = self._search_index.search_prefix(query)
        return sorted(results, key=lambda task: task.id)

    def search_substring(self, query: str) -> List[Task]:
        """Substring search through the index's fallback path, sorted by id"""
        if not query:
            return []

        self._rebuild_search_index()
        results = self._search_index.search_substring(query)
        return sorted(results, key=lambda task: task.id)

    def get_tasks_by_status(self, status: TaskStatus) -> List[Task]:
        return [task for task in self._tasks if task.status == status]

    def get_tasks_by_priority(self, priority: TaskPriority) -> List[Task]:
        return [task for task in self._tasks if task.priority == priority]

    def get_tasks_by_tag(self, tag: str) -> List[Task]:
        return [task for task in self._tasks if task.has_tag(tag)]

    def get_overdue_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return [task for task in self._tasks if task.is_overdue(now)]

    def get_high_priority_incomplete_tasks(self) -> List[Task]:
        """HIGH priority tasks that are not completed yet"""
        return [
            task for task in self._tasks
            if task.priority == TaskPriority.HIGH and task.status != TaskStatus.COMPLETED
        ]

    def get_critical_overdue_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        """Overdue tasks with HIGH priority"""
        return [
            task for task in self._tasks
            if task.priority == TaskPriority.HIGH and task.is_overdue(now)
        ]

    def get_tasks_by_criteria(self, status: TaskStatus, min_priority: TaskPriority) -> List[Task]:
        """
        Tasks with the given status and at least the given priority

        Args:
            status: Required status
            min_priority: Lowest accepted priority (LOW accepts every priority)

        Returns:
            Matching tasks in collection order
        """
        return [
            task for task in self._tasks
            if task.status == status and task.priority >= min_priority
        ]

    def get_statistics(self, now: Optional[datetime] = None) -> TaskStats:
        """
        Statistics snapshot, recomputed after a mutation or when a different
        reference time is given
        """
        return self._stats_cache.get(self._tasks, now)

    def get_sorted_tasks(self) -> List[Task]:
        """
        All tasks in display order: priority descending, due date ascending
        (no due date last), creation time ascending
        """
        return sorted(self._tasks, key=lambda task: task.sort_key())

    # ---- persistence ----

    def save(self) -> TaskResult:
        """
        Persist the current state

        Use after mutating a task obtained from find_task(); caches are
        invalidated as well.
        """
        self._invalidate_caches()
        try:
            self.store.save(self._tasks, self._next_id)
        except PersistenceError as e:
            return handle_error(e)
        return TaskResult.success_result("Tasks saved.")

    def save_async(self) -> "asyncio.Task[TaskResult]":
        """
        Queue a background save of the current state

        Must be called from a running event loop. The document is
        serialized immediately (including the live id counter), so later
        in-memory changes do not leak into this write. Writes are chained
        in the order they were queued.

        Returns:
            The asyncio task performing the write
        """
        document = self.store.build_document(self._tasks, self._next_id)
        previous = self._pending_save
        self._pending_save = asyncio.create_task(self._write_snapshot(document, previous))
        return self._pending_save

    async def wait_for_save(self) -> Optional[TaskResult]:
        """
        Wait until the last queued background save has finished

        Returns:
            Result of that save, or None if nothing was queued
        """
        pending = self._pending_save
        if pending is None:
            return None

        result = await pending
        if self._pending_save is pending:
            self._pending_save = None
        return result

    # ---- internals ----

    def _load(self) -> None:
        loaded = self.store.load()
        self._tasks = list(loaded.tasks)
        self._next_id = loaded.next_id
        self.load_error = loaded.error
        self._invalidate_caches()
        if loaded.error:
            self.logger.warning(
                f"[TaskCollection] Continuing with {len(self._tasks)} task(s) after load error: {loaded.error}"
            )

    async def _write_snapshot(
        self,
        document: Any,
        previous: Optional["asyncio.Task[TaskResult]"],
    ) -> TaskResult:
        if previous is not None:
            await previous
        try:
            await self.store.write_document_async(document)
        except PersistenceError as e:
            return handle_error(e)
        return TaskResult.success_result("Tasks saved.")

    def _snapshot(self) -> Snapshot:
        return [(task, task.model_copy(deep=True)) for task in self._tasks], self._next_id

    def _restore(self, snapshot: Snapshot) -> None:
        """
        Put the snapshot state back into the original task objects, so
        references handed out by find_task() stay attached to the collection
        """
        saved, next_id = snapshot
        for task, state in saved:
            task.__dict__.update(state.__dict__)
        self._tasks = [task for task, _ in saved]
        self._next_id = next_id

    def _commit(self, snapshot: Snapshot, message: str, **data: Any) -> TaskResult:
        """Invalidate caches and save; restore the snapshot if the save fails"""
        self._invalidate_caches()
        try:
            self.store.save(self._tasks, self._next_id)
        except PersistenceError as e:
            self._restore(snapshot)
            self._invalidate_caches()
            self.logger.error(f"[TaskCollection] Save failed, change reverted: {e}")
            return TaskResult.error_result(
                f"Change could not be saved and was reverted: {e.message}",
                path=e.path,
            )
        self.logger.info(f"[TaskCollection] {message} {data}")
        return TaskResult.success_result(message, **data)

    def _invalidate_caches(self) -> None:
        self._index_dirty = True
        self._stats_cache.invalidate()

    def _rebuild_search_index(self) -> None:
        if not self._index_dirty:
            return

        self._search_index.clear()
        for task in self._tasks:
            self._search_index.add_task(task)
        self._index_dirty = False
        self.logger.debug(f"[TaskCollection] Search index rebuilt with {len(self._tasks)} tasks")

    def _not_found(self, task_id: int) -> TaskResult:
        return handle_error(TaskNotFoundError(task_id))
