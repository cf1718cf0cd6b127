"""
Main application entry point
"""

import sys
from typing import Optional, Tuple
import click
from todolist.config.constants import APP_NAME, APP_VERSION
from todolist.config.settings import settings
from todolist.models.response import TaskResult
from todolist.models.task import TaskStatus, TaskPriority
from todolist.services.task_collection import TaskCollection
from todolist.utils.date_parser import parse_date
from todolist.utils.error_handler import TodoError, TaskNotFoundError, format_error_message
from todolist.utils.formatters import (
    format_task_table,
    format_task_details,
    format_statistics,
    format_result,
)
from todolist.utils.logger import logger

INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD"

SHOW_FILTERS = ["todo", "inprogress", "completed", "low", "medium", "high", "overdue"]


def get_collection(ctx: click.Context) -> TaskCollection:
    """Load the task collection on first use within this invocation"""
    collection = ctx.obj.get("collection")
    if collection is None:
        collection = TaskCollection(ctx.obj["data_file"])
        if collection.load_error:
            click.echo(click.style(f"Warning: {collection.load_error}", fg="yellow"), err=True)
        ctx.obj["collection"] = collection
    return collection


def fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def report(result: TaskResult) -> None:
    """Print an operation result; failures exit with status 1"""
    if not result.success:
        fail(result.message)
    click.echo(format_result(result))


def parse_status(text: str) -> TaskStatus:
    try:
        return TaskStatus.parse(text)
    except TodoError as e:
        fail(format_error_message(e))


def parse_priority(text: str) -> TaskPriority:
    try:
        return TaskPriority.parse(text)
    except TodoError as e:
        fail(format_error_message(e))


def parse_due(text: str):
    due_date = parse_date(text)
    if due_date is None:
        fail(INVALID_DATE_MESSAGE)
    return due_date


@click.group()
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False),
    default=lambda: settings.TODO_DATA_FILE,
    show_default="TODO_DATA_FILE or data/data.json",
    help="JSON file the tasks are stored in.",
)
@click.version_option(APP_VERSION, prog_name=APP_NAME)
@click.pass_context
def cli(ctx: click.Context, data_file: str):
    """Manage your to-do list from the terminal."""
    ctx.ensure_object(dict)
    ctx.obj["data_file"] = data_file
    logger.debug(f"[CLI] Using data file {data_file}")


@cli.command()
@click.argument("name")
@click.option("-s", "--status", default="todo", show_default=True, help="todo, inprogress or completed.")
@click.option("-p", "--priority", default="low", show_default=True, help="low, medium or high.")
@click.option("-d", "--description", default="", help="Longer description of the task.")
@click.option("--due", "due", default=None, help="Due date, e.g. 2025-12-31, tomorrow, in 3 days.")
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to attach (repeatable).")
@click.pass_context
def add(ctx, name: str, status: str, priority: str, description: str, due: Optional[str], tags: Tuple[str, ...]):
    """Add a new task."""
    task_status = parse_status(status)
    task_priority = parse_priority(priority)
    due_date = parse_due(due) if due else None

    result = get_collection(ctx).add_task(
        name,
        description=description,
        status=task_status,
        priority=task_priority,
        due_date=due_date,
        tags=tags,
    )
    if result.success:
        result.message = f"{result.message} (ID: {result.data['id']})"
    report(result)


@cli.command()
@click.argument("task_filter", metavar="[FILTER]", required=False,
                type=click.Choice(SHOW_FILTERS, case_sensitive=False))
@click.pass_context
def show(ctx, task_filter: Optional[str]):
    """Show all tasks, optionally filtered by status, priority or overdue."""
    collection = get_collection(ctx)
    if task_filter is None:
        tasks = collection.get_sorted_tasks()
    elif task_filter.lower() == "overdue":
        tasks = collection.get_overdue_tasks()
    elif task_filter.lower() in ("low", "medium", "high"):
        tasks = collection.get_tasks_by_priority(TaskPriority.parse(task_filter))
    else:
        tasks = collection.get_tasks_by_status(TaskStatus.parse(task_filter))
    click.echo(format_task_table(tasks))


@cli.command()
@click.argument("task_id", type=int)
@click.argument("name")
@click.argument("status")
@click.argument("priority")
@click.pass_context
def update(ctx, task_id: int, name: str, status: str, priority: str):
    """Replace the name, status and priority of a task."""
    task_status = parse_status(status)
    task_priority = parse_priority(priority)
    report(get_collection(ctx).update_task(task_id, name, task_status, task_priority))


@cli.command()
@click.argument("task_id", type=int)
@click.pass_context
def remove(ctx, task_id: int):
    """Remove a task."""
    report(get_collection(ctx).remove_task(task_id))


@cli.command("remove-all")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def remove_all(ctx, yes: bool):
    """Remove every task."""
    collection = get_collection(ctx)
    if not collection.is_empty() and not yes:
        click.confirm(f"Remove all {len(collection)} task(s)?", abort=True)
    report(collection.remove_all_tasks())


@cli.command()
@click.argument("query")
@click.option("--advanced", is_flag=True, help="Search tags, status and priority too (indexed search).")
@click.pass_context
def search(ctx, query: str, advanced: bool):
    """Search tasks by text."""
    collection = get_collection(ctx)
    if advanced:
        tasks = collection.advanced_search(query)
    else:
        tasks = collection.search_tasks(query)
    click.echo(format_task_table(tasks))


@cli.command()
@click.argument("task_id", type=int)
@click.pass_context
def detail(ctx, task_id: int):
    """Show every field of one task."""
    task = get_collection(ctx).find_task(task_id)
    if task is None:
        fail(format_error_message(TaskNotFoundError(task_id)))
    click.echo(format_task_details(task))


@cli.command()
@click.argument("task_id", type=int)
@click.pass_context
def complete(ctx, task_id: int):
    """Mark a task as completed."""
    report(get_collection(ctx).complete_task(task_id))


@cli.command()
@click.argument("task_id", type=int)
@click.argument("tag")
@click.pass_context
def tag(ctx, task_id: int, tag: str):
    """Add a tag to a task."""
    report(get_collection(ctx).add_tag(task_id, tag))


@cli.command()
@click.argument("task_id", type=int)
@click.argument("tag")
@click.pass_context
def untag(ctx, task_id: int, tag: str):
    """Remove a tag from a task."""
    report(get_collection(ctx).remove_tag(task_id, tag))


@cli.command()
@click.argument("task_id", type=int)
@click.argument("date")
@click.pass_context
def due(ctx, task_id: int, date: str):
    """Set the due date of a task ("none" clears it)."""
    due_date = None if date.strip().lower() == "none" else parse_due(date)
    report(get_collection(ctx).set_due_date(task_id, due_date))


@cli.command()
@click.pass_context
def stats(ctx):
    """Show task statistics."""
    click.echo(format_statistics(get_collection(ctx).get_statistics()))


@cli.command()
@click.pass_context
def overdue(ctx):
    """Show overdue tasks."""
    click.echo(format_task_table(get_collection(ctx).get_overdue_tasks()))


cli.add_command(show, name="list")
cli.add_command(remove, name="rm")


def main():
    """Main entry point"""
    try:
        settings.validate()
        cli(prog_name=APP_NAME, obj={})
    except Exception as e:
        # handle_error logs the traceback
        click.echo(f"Error: {format_error_message(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
