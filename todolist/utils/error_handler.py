"""
Error handling utilities
"""

from pathlib import Path
from typing import Optional, Union
from pydantic import ValidationError as PydanticValidationError
from todolist.models.response import TaskResult
from todolist.utils.logger import logger


class TodoError(Exception):
    """Base exception for task tracker errors"""
    pass


class ValidationError(TodoError):
    """Invalid user input (empty name, unknown status, bad date)"""
    pass


class TaskNotFoundError(TodoError):
    """Task id does not exist in the collection"""
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found!")


class PersistenceError(TodoError):
    """Data file could not be read or written"""
    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.message = message
        self.path = str(path) if path is not None else None
        super().__init__(self.message)


def _describe_pydantic_error(error: PydanticValidationError) -> str:
    """Collapse pydantic error details into one readable line"""
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail.get("loc", ()))
        message = str(detail.get("msg", "invalid value"))
        # Value errors raised by our validators arrive prefixed
        message = message.removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid value"


def handle_error(error: Exception) -> TaskResult:
    """
    Handle error and return user-friendly result

    Args:
        error: Exception to handle

    Returns:
        Failed TaskResult with user-friendly message
    """
    if isinstance(error, (ValidationError, TaskNotFoundError)):
        logger.info(f"Rejected operation: {error}")
        return TaskResult.error_result(str(error))

    if isinstance(error, PydanticValidationError):
        logger.info(f"Rejected operation: {error}")
        return TaskResult.error_result(f"Invalid task data: {_describe_pydantic_error(error)}")

    if isinstance(error, ValueError):
        logger.info(f"Rejected operation: {error}")
        return TaskResult.error_result(f"Invalid value: {error}")

    if isinstance(error, PersistenceError):
        logger.error(f"Persistence error: {error}")
        return TaskResult.error_result(
            f"Could not save tasks: {error.message}",
            path=error.path,
        )

    logger.error(f"Error occurred: {error}", exc_info=True)

    # Generic error message
    return TaskResult.error_result(f"Unexpected error: {error}")


def format_error_message(error: Exception) -> str:
    """
    Format error message for user

    Args:
        error: Exception to format

    Returns:
        User-friendly error message
    """
    error_response = handle_error(error)
    return error_response.message
