"""
Message formatting utilities
"""

from datetime import datetime
from typing import Iterable, List, Optional
import click
from todolist.config.constants import (
    TABLE_ID_WIDTH,
    TABLE_NAME_WIDTH,
    TABLE_STATUS_WIDTH,
    TABLE_PRIORITY_WIDTH,
    TABLE_DUE_WIDTH,
    DISPLAY_DATE_FORMAT,
    DISPLAY_DATETIME_FORMAT,
)
from todolist.models.response import TaskResult, TaskStats
from todolist.models.task import Task, TaskStatus, TaskPriority

OVERDUE_MARKER = " [!]"

STATUS_COLORS = {
    TaskStatus.TODO: "yellow",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.COMPLETED: "green",
}
PRIORITY_COLORS = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "red",
}


def truncate(text: str, width: int) -> str:
    """Cut text to width, ending with "..." when shortened"""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[:width - 3] + "..."


def format_date(value: Optional[datetime], with_time: bool = False) -> str:
    if value is None:
        return "-"
    return value.strftime(DISPLAY_DATETIME_FORMAT if with_time else DISPLAY_DATE_FORMAT)


def _cell(text: str, width: int, color: Optional[str] = None) -> str:
    # Pad before styling so ANSI codes do not break column alignment
    padded = truncate(text, width).ljust(width)
    return click.style(padded, fg=color) if color else padded


def format_task_table(tasks: Iterable[Task], now: Optional[datetime] = None) -> str:
    """
    Format tasks as a fixed-width table

    Args:
        tasks: Tasks in display order
        now: Reference time for the overdue marker

    Returns:
        Table text, or a notice when there is nothing to show
    """
    tasks = list(tasks)
    if not tasks:
        return "No tasks found."

    header = " ".join([
        "ID".ljust(TABLE_ID_WIDTH),
        "Task Name".ljust(TABLE_NAME_WIDTH),
        "Status".ljust(TABLE_STATUS_WIDTH),
        "Priority".ljust(TABLE_PRIORITY_WIDTH),
        "Due Date".ljust(TABLE_DUE_WIDTH),
    ])
    lines: List[str] = [click.style(header, bold=True), "-" * len(header)]

    for task in tasks:
        due = format_date(task.due_date) if task.due_date else ""
        overdue = task.is_overdue(now)
        if overdue:
            due += OVERDUE_MARKER
        lines.append(" ".join([
            _cell(str(task.id), TABLE_ID_WIDTH),
            _cell(task.name, TABLE_NAME_WIDTH),
            _cell(task.status.label, TABLE_STATUS_WIDTH, STATUS_COLORS[task.status]),
            _cell(task.priority.label, TABLE_PRIORITY_WIDTH, PRIORITY_COLORS[task.priority]),
            # Last column is not padded
            click.style(due, fg="red") if overdue else due,
        ]).rstrip())

    return "\n".join(lines)


def format_task_details(task: Task, now: Optional[datetime] = None) -> str:
    """
    Format every field of a single task

    Args:
        task: Task to describe
        now: Reference time for the overdue marker

    Returns:
        Multi-line description
    """
    due = format_date(task.due_date)
    if task.is_overdue(now):
        due += click.style(" (overdue)", fg="red")

    lines = [
        click.style(f"Task #{task.id}: {task.name}", bold=True),
        f"Status:      {click.style(task.status.label, fg=STATUS_COLORS[task.status])}",
        f"Priority:    {click.style(task.priority.label, fg=PRIORITY_COLORS[task.priority])}",
        f"Created:     {format_date(task.created_at, with_time=True)}",
        f"Due date:    {due}",
    ]
    if task.completed_at is not None:
        lines.append(f"Completed:   {format_date(task.completed_at, with_time=True)}")
    lines.append(f"Tags:        {', '.join(task.tags) if task.tags else '-'}")
    lines.append(f"Description: {task.description or '-'}")
    return "\n".join(lines)


def format_statistics(stats: TaskStats) -> str:
    """Format statistics as a labelled summary"""
    rows = [
        ("Total tasks", stats.total),
        ("To-Do", stats.todo),
        ("In Progress", stats.in_progress),
        ("Completed", stats.completed),
        ("High priority", stats.high_priority),
        ("Medium priority", stats.medium_priority),
        ("Low priority", stats.low_priority),
        ("Overdue", stats.overdue),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [click.style("Task Statistics", bold=True)]
    lines.extend(f"{label.ljust(width)} : {value}" for label, value in rows)
    lines.append(f"{'Completion rate'.ljust(width)} : {stats.completion_rate:.1%}")
    return "\n".join(lines)


def format_result(result: TaskResult) -> str:
    """Format an operation result as a colored one-line message"""
    if result.success:
        return click.style(result.message, fg="green")
    return click.style(f"Error: {result.message}", fg="red")
