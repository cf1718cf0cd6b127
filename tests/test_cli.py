"""
Tests for the command line interface
"""

import json
import pytest
from click.testing import CliRunner
from todolist.config.constants import APP_VERSION
from todolist.main import cli


@pytest.fixture
def run(data_file):
    """Invoke the CLI against a temporary data file"""
    runner = CliRunner()

    def _run(*args, input=None):
        return runner.invoke(cli, ["--data-file", str(data_file), *args], input=input)

    return _run


def _saved(data_file):
    with open(data_file, 'r', encoding='utf-8') as f:
        return json.load(f)


def test_version():
    """Test --version prints the application version"""
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert APP_VERSION in result.output


def test_add_and_show(run):
    """Test adding tasks and listing them in display order"""
    assert run("add", "Buy milk").exit_code == 0
    result = run("add", "Ship release", "-s", "inprogress", "-p", "high", "-t", "work", "--due", "2099-01-01")
    assert result.exit_code == 0
    assert "Task added successfully! (ID: 2)" in result.output

    result = run("show")

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "Ship release" in lines[2]
    assert "2099-01-01" in lines[2]
    assert "Buy milk" in lines[3]


def test_show_filters(run):
    """Test the show filters and the list alias"""
    run("add", "Low task")
    run("add", "High task", "-p", "high")
    run("add", "Old task", "--due", "2020-01-01")

    high = run("list", "high")
    overdue = run("show", "overdue")
    done = run("show", "completed")

    assert "High task" in high.output and "Low task" not in high.output
    assert "Old task" in overdue.output and "[!]" in overdue.output
    assert "No tasks found." in done.output


def test_show_rejects_unknown_filter(run):
    """Test unknown filters are a usage error"""
    assert run("show", "someday").exit_code != 0


def test_add_rejects_bad_input(run, data_file):
    """Test invalid priority, date and empty name exit with status 1"""
    bad_priority = run("add", "Task", "-p", "urgent")
    bad_date = run("add", "Task", "--due", "31/12/2025")
    empty_name = run("add", "")

    assert bad_priority.exit_code == 1
    assert "Invalid priority" in bad_priority.output
    assert bad_date.exit_code == 1
    assert "Invalid date format. Use YYYY-MM-DD" in bad_date.output
    assert empty_name.exit_code == 1
    assert "Task name cannot be empty" in empty_name.output
    assert not data_file.exists()


def test_update_and_complete(run, data_file):
    """Test update and complete commands"""
    run("add", "Draft")
    run("add", "Other")

    assert run("update", "1", "Final", "inprogress", "medium").exit_code == 0
    assert "Task marked as completed!" in run("complete", "2").output

    tasks = _saved(data_file)["tasks"]
    assert tasks[0]["name"] == "Final"
    assert tasks[0]["status"] == 2
    assert tasks[0]["priority"] == 2
    assert tasks[1]["status"] == 3
    assert "completed_at" in tasks[1]


def test_remove_and_alias(run, data_file):
    """Test remove, rm and the not-found error"""
    run("add", "One")
    run("add", "Two")

    assert run("remove", "1").exit_code == 0
    assert run("rm", "2").exit_code == 0
    missing = run("rm", "2")

    assert missing.exit_code == 1
    assert "Task with ID 2 not found!" in missing.output
    assert _saved(data_file) == {"nextId": 3, "tasks": []}


def test_remove_all_asks_for_confirmation(run, data_file):
    """Test remove-all aborts unless confirmed"""
    run("add", "One")

    declined = run("remove-all", input="n\n")
    assert declined.exit_code != 0
    assert len(_saved(data_file)["tasks"]) == 1

    confirmed = run("remove-all", input="y\n")
    assert confirmed.exit_code == 0
    assert _saved(data_file)["tasks"] == []


def test_remove_all_with_yes(run, data_file):
    """Test --yes skips the prompt"""
    run("add", "One")
    run("add", "Two")

    result = run("remove-all", "--yes")

    assert result.exit_code == 0
    assert "Removed 2 task(s)" in result.output


def test_search(run):
    """Test plain and indexed search"""
    run("add", "Buy milk", "-t", "errand")
    run("add", "Write tests")

    plain = run("search", "milk")
    by_tag = run("search", "errand")
    advanced = run("search", "errand", "--advanced")

    assert "Buy milk" in plain.output
    assert "No tasks found." in by_tag.output
    assert "Buy milk" in advanced.output


def test_tags_due_and_detail(run, data_file):
    """Test tag, untag, due and detail commands"""
    run("add", "Pay rent")

    assert "Tag added successfully!" in run("tag", "1", "home").output
    assert "Due date set successfully!" in run("due", "1", "2030-05-01").output
    detail = run("detail", "1")

    assert "Task #1: Pay rent" in detail.output
    assert "home" in detail.output
    assert "2030-05-01" in detail.output

    assert "Tag removed successfully!" in run("untag", "1", "home").output
    assert run("due", "1", "none").exit_code == 0
    saved = _saved(data_file)["tasks"][0]
    assert saved["tags"] == []
    assert "due_date" not in saved

    assert run("due", "1", "whenever").exit_code == 1
    assert run("detail", "9").exit_code == 1


def test_stats_and_overdue(run):
    """Test statistics and overdue listing"""
    run("add", "Late", "--due", "2020-01-01")
    run("add", "Done", "-s", "completed")

    stats = run("stats")
    overdue = run("overdue")

    assert "Total tasks     : 2" in stats.output
    assert "Overdue         : 1" in stats.output
    assert "Late" in overdue.output
    assert "Done" not in overdue.output


def test_corrupt_file_warns_and_continues(run, data_file):
    """Test a corrupt data file is reported but does not crash"""
    data_file.parent.mkdir(parents=True)
    data_file.write_text("{broken")

    result = run("show")

    assert result.exit_code == 0
    assert "Warning: Error loading data" in result.output
    assert "No tasks found." in result.output
