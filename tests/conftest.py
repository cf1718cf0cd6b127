"""
Pytest configuration and fixtures
"""

import pytest
from datetime import datetime, timedelta
from todolist.models.task import Task, TaskStatus, TaskPriority
from todolist.services.task_collection import TaskCollection
from todolist.services.task_store import TaskStore
from todolist.utils.date_utils import get_current_datetime


@pytest.fixture
def data_file(tmp_path):
    """Path of a not yet existing data file inside a temporary directory"""
    return tmp_path / "data" / "data.json"


@pytest.fixture
def task_store(data_file):
    """Task store writing to a temporary file"""
    return TaskStore(data_file)


@pytest.fixture
def collection(data_file):
    """Empty task collection backed by a temporary file"""
    return TaskCollection(data_file)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for overdue checks"""
    return get_current_datetime()


@pytest.fixture
def sample_tasks(now):
    """A small task set covering every status and priority"""
    return [
        Task(
            id=1,
            name="Write report",
            description="Quarterly numbers for finance",
            priority=TaskPriority.HIGH,
            tags=["work"],
            due_date=now - timedelta(days=2),
        ),
        Task(
            id=2,
            name="Buy milk",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            tags=["home", "shopping"],
        ),
        Task(
            id=3,
            name="Testing release",
            description="Run the smoke suite",
            status=TaskStatus.COMPLETED,
            completed_at=now,
            due_date=now - timedelta(days=1),
        ),
    ]
