# =============================================================================
# core/task_store.py  —  Task Storage & Retrieval
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Keeps tasks in memory, keyed by id, and answers the questions the task
#   tools ask: "create this", "find that", "what's still pending?".
#
# WHY AN OBJECT AND NOT A MODULE-LEVEL DICT?
#   A global dict is shared by everything that imports it — including every
#   test.  A TaskStore is created once by whoever assembles the server and
#   handed to the tools that need it.  Tests simply create a fresh one.
#
# INVARIANTS:
#   - Ids are unique.  Writing an existing id updates that task in place and
#     stamps updated_at; it never creates a second copy.
#   - Listing never mutates anything.  Filters and sorting are a read-side
#     projection over the current contents.
#   - Listing order is deterministic: priority (high > medium > low), then
#     newest first.  Python's sort is stable, so ties keep insertion order.
# =============================================================================

import secrets
import string
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, Optional

from core.models import PRIORITY_RANK, Priority, Task, TaskStatus, utcnow

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(length: int = 26) -> str:
    """Random lowercase alphanumeric id, e.g. 'k3j9x0...'."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


@dataclass
class TaskStats:
    total: int
    completed: int
    pending: int
    by_priority: dict[str, int]
    top_tags: list[tuple[str, int]]


def _sort_key(task: Task) -> tuple[int, float]:
    return (-PRIORITY_RANK.get(task.priority, PRIORITY_RANK["medium"]), -task.created_at.timestamp())


class TaskStore:
    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def all(self) -> list[Task]:
        return list(self._tasks.values())

    def put(self, task: Task) -> Task:
        """Insert a task, or replace the fields of the task with the same id.

        When the id already exists, the original created_at is kept and
        updated_at is stamped.
        """
        existing = self._tasks.get(task.id)
        if existing is not None:
            existing.title = task.title
            existing.description = task.description
            existing.completed = task.completed
            existing.priority = task.priority
            existing.tags = list(task.tags)
            existing.updated_at = utcnow()
            return existing
        self._tasks[task.id] = task
        return task

    def create(
        self,
        title: str,
        description: str,
        priority: Priority = "medium",
        tags: Optional[list[str]] = None,
        task_id: Optional[str] = None,
    ) -> tuple[Task, bool]:
        """Create a task.  Returns (task, created).

        `created` is False when task_id named an existing task, which was
        updated instead.
        """
        key = task_id or generate_id()
        created = key not in self._tasks
        task = self.put(Task(id=key, title=title, description=description, priority=priority, tags=tags or []))
        return task, created

    def update(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[Priority] = None,
        tags: Optional[list[str]] = None,
    ) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if priority is not None:
            task.priority = priority
        if tags is not None:
            task.tags = tags
        task.updated_at = utcnow()
        return task

    def complete(self, task_id: str) -> Optional[Task]:
        """Mark a task completed.  Already-completed tasks are left untouched."""
        task = self._tasks.get(task_id)
        if task is None or task.completed:
            return task
        task.completed = True
        task.updated_at = utcnow()
        return task

    def delete(self, task_id: str) -> Optional[Task]:
        return self._tasks.pop(task_id, None)

    def list_tasks(
        self,
        status: TaskStatus = "all",
        priority: Optional[Priority] = None,
        tag: Optional[str] = None,
    ) -> list[Task]:
        tasks = self.all()
        if status == "pending":
            tasks = [t for t in tasks if not t.completed]
        elif status == "completed":
            tasks = [t for t in tasks if t.completed]
        if priority:
            tasks = [t for t in tasks if t.priority == priority]
        if tag:
            needle = tag.lower()
            tasks = [t for t in tasks if any(needle in existing.lower() for existing in t.tags)]
        return sorted(tasks, key=_sort_key)

    def stats(self, top_tags: int = 5) -> TaskStats:
        tasks = self.all()
        completed = sum(1 for t in tasks if t.completed)
        by_priority = {name: 0 for name in ("high", "medium", "low")}
        for task in tasks:
            by_priority[task.priority] = by_priority.get(task.priority, 0) + 1
        tag_counts = Counter(tag for task in tasks for tag in task.tags)
        return TaskStats(
            total=len(tasks),
            completed=completed,
            pending=len(tasks) - completed,
            by_priority=by_priority,
            top_tags=tag_counts.most_common(top_tags),
        )
