# =============================================================================
# tools/task_tools.py  —  Task Management Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Wraps core/task_store.py in MCP tools: create, read, list, complete,
#   update, delete and summarize tasks.
#
# TOOL NAMING CONVENTIONS:
#   MCP tool names are kebab-case ("create-task") — that's what MCP clients
#   in the wild (and the agent's prompt) expect.  The Python handlers keep
#   snake_case names.
#
# NOT FOUND:
#   Asking for a task that doesn't exist is not a crash and not a protocol
#   error.  The tool answers with success=False and says which id was
#   missing, so the agent can correct itself.
# =============================================================================

from typing import Annotated, Optional

from pydantic import Field

from core.formatting import format_task, format_task_list, parse_comma_separated
from core.models import Priority, TaskStatus, ToolResult
from tools.context import ToolContext
from tools.logs import log_request, log_response, log_status
from tools.registry import ToolDefinition

TaskId = Annotated[str, Field(description="ID of the task")]


def task_tools(ctx: ToolContext) -> list[ToolDefinition]:
    store = ctx.tasks

    def _not_found(tool: str, task_id: str) -> ToolResult:
        log_status(f"Task {task_id} not found")
        return log_response(tool, ToolResult.error(f"Task with ID {task_id} not found."))

    async def create_task(
        title: Annotated[str, Field(min_length=1, description="Title of the task")],
        description: Annotated[str, Field(description="Description of the task")],
        priority: Annotated[Optional[Priority], Field(description="Priority level of the task")] = None,
        tags: Annotated[Optional[str], Field(description="Comma-separated tags for the task")] = None,
        id: Annotated[
            Optional[str],
            Field(description="Optional task ID. Omit to have one generated; an existing ID updates that task."),
        ] = None,
    ) -> ToolResult:
        """Create a new task with title, description, priority, and optional tags.

        WHEN TO CALL THIS: The user asks to add, track or remember something
        to do.  Passing the id of an existing task updates that task instead.

        Args:
            title: Short title, e.g. "Renew SSL certificate".
            description: Free text; may be empty.
            priority: "low", "medium" or "high" (default "medium").
            tags: Comma-separated, e.g. "ops, security".
            id: Optional explicit id.  Omit to have one generated.

        Returns:
            A ToolResult whose text starts with "Task created successfully!"
            (or "Task updated successfully!") followed by the task details.
        """
        log_request("create-task", title=title, priority=priority, tags=tags, id=id)
        task, created = store.create(
            title=title,
            description=description,
            priority=priority or "medium",
            tags=parse_comma_separated(tags),
            task_id=id,
        )
        verb = "created" if created else "updated"
        return log_response("create-task", ToolResult.ok(f"Task {verb} successfully!\n{format_task(task)}"))

    async def get_task(id: TaskId) -> ToolResult:
        """Get a single task by its ID."""
        log_request("get-task", id=id)
        task = store.get(id)
        if task is None:
            return _not_found("get-task", id)
        return log_response("get-task", ToolResult.ok(f"Task details:\n{format_task(task)}"))

    async def list_tasks(
        status: Annotated[Optional[TaskStatus], Field(description="Filter tasks by status")] = None,
        priority: Annotated[Optional[Priority], Field(description="Filter tasks by priority")] = None,
        tag: Annotated[Optional[str], Field(description="Filter tasks by a specific tag")] = None,
    ) -> ToolResult:
        """List tasks, highest priority first and newest first within a priority."""
        log_request("list-tasks", status=status, priority=priority, tag=tag)
        status = status or "all"
        tasks = store.list_tasks(status=status, priority=priority, tag=tag)
        log_status(f"{len(tasks)} of {len(store)} tasks match")
        if not tasks:
            return log_response("list-tasks", ToolResult.ok("No tasks found matching the specified criteria."))

        filters = []
        if status != "all":
            filters.append(f"Status: {status}")
        if priority:
            filters.append(f"Priority: {priority}")
        if tag:
            filters.append(f"Tag: {tag}")
        filter_text = f" (Filtered by: {', '.join(filters)})" if filters else ""
        return log_response("list-tasks", ToolResult.ok(f"Tasks{filter_text}:\n{format_task_list(tasks)}"))

    async def pending_tasks() -> ToolResult:
        """List every task that is not completed yet, highest priority first.

        WHEN TO CALL THIS: "What's left to do?"  Same as list-tasks with
        status="pending", without the filter header.
        """
        log_request("pending-tasks")
        tasks = store.list_tasks(status="pending")
        if not tasks:
            return log_response("pending-tasks", ToolResult.ok("No pending tasks found."))
        return log_response("pending-tasks", ToolResult.ok(f"Pending Tasks:\n{format_task_list(tasks)}"))

    async def complete_task(id: Annotated[str, Field(description="ID of the task to mark as completed")]) -> ToolResult:
        """Mark a task as completed.

        WHEN TO CALL THIS: The user says a task is done.  Completing an
        already-completed task is harmless and says so.

        Args:
            id: The task id, as shown by list-tasks or create-task.

        Returns:
            success=False with "Task with ID ... not found." for an unknown id.
        """
        log_request("complete-task", id=id)
        task = store.get(id)
        if task is None:
            return _not_found("complete-task", id)
        if task.completed:
            return log_response(
                "complete-task", ToolResult.ok(f"Task with ID {id} is already marked as completed.")
            )
        store.complete(id)
        return log_response("complete-task", ToolResult.ok(f"Task marked as completed:\n{format_task(task)}"))

    async def update_task(
        id: Annotated[str, Field(description="ID of the task to update")],
        title: Annotated[Optional[str], Field(description="New title for the task")] = None,
        description: Annotated[Optional[str], Field(description="New description for the task")] = None,
        priority: Annotated[Optional[Priority], Field(description="New priority level")] = None,
        tags: Annotated[
            Optional[str], Field(description="New comma-separated tags (replaces existing tags)")
        ] = None,
    ) -> ToolResult:
        """Change some fields of an existing task.  Omitted fields stay as they are.

        Args:
            id: The task to change.
            title / description / priority: New values.
            tags: Comma-separated; REPLACES the current tags.  "" clears them.

        Returns:
            The updated task, or success=False if the id is unknown.
        """
        log_request("update-task", id=id, title=title, priority=priority, tags=tags)
        task = store.update(
            id,
            title=title,
            description=description,
            priority=priority,
            tags=parse_comma_separated(tags) if tags is not None else None,
        )
        if task is None:
            return _not_found("update-task", id)
        return log_response("update-task", ToolResult.ok(f"Task updated successfully:\n{format_task(task)}"))

    async def delete_task(id: Annotated[str, Field(description="ID of the task to delete")]) -> ToolResult:
        """Delete a task permanently and echo what was removed."""
        log_request("delete-task", id=id)
        task = store.delete(id)
        if task is None:
            return _not_found("delete-task", id)
        return log_response("delete-task", ToolResult.ok(f"Task deleted successfully:\n{format_task(task)}"))

    async def task_stats() -> ToolResult:
        """Summarize all tasks: totals, completion percentages, priority split and top tags.

        WHEN TO CALL THIS: The user wants an overview rather than the tasks
        themselves.  Percentages are rounded to whole numbers.
        """
        log_request("task-stats")
        stats = store.stats()

        def pct(count: int) -> int:
            return round(count * 100 / stats.total) if stats.total else 0

        lines = [
            "Task Statistics:",
            f"  Total Tasks: {stats.total}",
            f"  Completed: {stats.completed} ({pct(stats.completed)}%)",
            f"  Pending: {stats.pending} ({pct(stats.pending)}%)",
            "",
            "Priority Distribution:",
            f"  High: {stats.by_priority['high']}",
            f"  Medium: {stats.by_priority['medium']}",
            f"  Low: {stats.by_priority['low']}",
            "",
        ]
        if stats.top_tags:
            lines.append("Top Tags:")
            lines.extend(f"  #{tag}: {count}" for tag, count in stats.top_tags)
        else:
            lines.append("No tags used yet.")
        return log_response("task-stats", ToolResult.ok("\n".join(lines)))

    return [
        ToolDefinition("create-task", "Create a new task with title, description, priority, and optional tags", "task", create_task),
        ToolDefinition("get-task", "Get a single task by its ID", "task", get_task),
        ToolDefinition("list-tasks", "Get a list of all tasks with optional filtering by status, priority, or tags", "task", list_tasks),
        ToolDefinition("pending-tasks", "Get a list of all pending tasks", "task", pending_tasks),
        ToolDefinition("complete-task", "Mark a task as completed", "task", complete_task),
        ToolDefinition("update-task", "Update an existing task's title, description, priority, or tags", "task", update_task),
        ToolDefinition("delete-task", "Delete a task permanently", "task", delete_task),
        ToolDefinition("task-stats", "Get statistics about all tasks", "task", task_stats),
    ]
