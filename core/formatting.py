# =============================================================================
# core/formatting.py  —  Turning records into text the agent can read
# =============================================================================
#
# Every tool answers with a ToolResult whose body is plain text.  The helpers
# here decide what that text looks like, so that the same task renders the
# same way whether it comes from create-task, list-tasks or delete-task.
# =============================================================================

from datetime import datetime
from typing import Optional

from core.models import EnvironmentVariable, Task

HIDDEN = "***HIDDEN***"


def format_date(value: datetime) -> str:
    """Readable timestamp, e.g. 'Mar 05, 2025, 02:07:09 PM'."""
    return value.strftime("%b %d, %Y, %I:%M:%S %p")


def format_task(task: Task) -> str:
    lines = [
        f"ID: {task.id}",
        f"Title: {task.title}",
        f"Description: {task.description}",
        f"Status: {'Completed' if task.completed else 'Pending'}",
        f"Priority: {task.priority}",
    ]
    if task.tags:
        lines.append(f"Tags: {', '.join(task.tags)}")
    lines.append(f"Created: {task.created_at.isoformat()}")
    if task.updated_at:
        lines.append(f"Updated: {task.updated_at.isoformat()}")
    return "\n".join(f"  {line}" for line in lines)


def format_task_list(tasks: list[Task]) -> str:
    return "\n---\n".join(format_task(task) for task in tasks)


def display_value(var: EnvironmentVariable, reveal_secret: bool) -> str:
    if var.is_secret and not reveal_secret:
        return HIDDEN
    return var.value


def parse_comma_separated(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
