"""
Task store: CRUD round trips, filtering and listing order.
"""

from datetime import timedelta

import pytest

from core.models import Task, utcnow
from core.task_store import TaskStore, generate_id


@pytest.fixture
def store():
    return TaskStore()


class TestCreate:
    def test_generates_unique_ids(self, store):
        first, created_first = store.create("Write docs", "README")
        second, created_second = store.create("Write docs", "README")

        assert created_first and created_second
        assert first.id != second.id
        assert len(store) == 2

    def test_defaults(self, store):
        task, _ = store.create("Ship it", "v2")

        assert task.priority == "medium"
        assert task.completed is False
        assert task.tags == []
        assert task.updated_at is None

    def test_explicit_id_round_trips(self, store):
        task, created = store.create("Ship it", "v2", priority="high", tags=["release"], task_id="t-1")

        assert created
        assert store.get("t-1") is task
        assert "t-1" in store

    def test_existing_id_updates_in_place(self, store):
        original, _ = store.create("Old title", "old", task_id="t-1")
        created_at = original.created_at

        again, created = store.create("New title", "new", priority="low", task_id="t-1")

        assert created is False
        assert again is original
        assert len(store) == 1
        assert again.title == "New title"
        assert again.priority == "low"
        assert again.created_at == created_at
        assert again.updated_at is not None


def test_generate_id_alphabet():
    value = generate_id()
    assert len(value) == 26
    assert value.isalnum() and value == value.lower()


class TestMutations:
    def test_complete_is_idempotent(self, store):
        task, _ = store.create("A", "a", task_id="a")

        assert store.complete("a").completed is True
        stamped = task.updated_at
        assert store.complete("a").updated_at == stamped

    def test_complete_missing(self, store):
        assert store.complete("nope") is None

    def test_update_only_given_fields(self, store):
        store.create("A", "desc", priority="low", tags=["x"], task_id="a")

        task = store.update("a", priority="high")

        assert task.priority == "high"
        assert task.title == "A"
        assert task.tags == ["x"]
        assert task.updated_at is not None

    def test_update_missing(self, store):
        assert store.update("nope", title="x") is None

    def test_delete_returns_record_once(self, store):
        store.create("A", "a", task_id="a")

        assert store.delete("a").id == "a"
        assert store.delete("a") is None
        assert store.get("a") is None


class TestListing:
    def _add(self, store, task_id, priority, minutes_ago, completed=False, tags=()):
        task = Task(
            id=task_id,
            title=task_id,
            description="",
            priority=priority,
            completed=completed,
            tags=list(tags),
            created_at=utcnow() - timedelta(minutes=minutes_ago),
        )
        store.put(task)
        return task

    def test_sorted_by_priority_then_newest(self, store):
        self._add(store, "low-new", "low", 1)
        self._add(store, "high-old", "high", 30)
        self._add(store, "high-new", "high", 2)
        self._add(store, "medium", "medium", 5)

        ids = [t.id for t in store.list_tasks()]

        assert ids == ["high-new", "high-old", "medium", "low-new"]

    def test_status_filter_partitions_tasks(self, store):
        self._add(store, "a", "high", 1, completed=True)
        self._add(store, "b", "low", 2)
        self._add(store, "c", "medium", 3)

        pending = store.list_tasks(status="pending")
        completed = store.list_tasks(status="completed")

        assert all(not t.completed for t in pending)
        assert all(t.completed for t in completed)
        assert {t.id for t in pending} | {t.id for t in completed} == {t.id for t in store.list_tasks()}

    def test_priority_and_tag_filters(self, store):
        self._add(store, "a", "high", 1, tags=["Backend", "urgent"])
        self._add(store, "b", "high", 2, tags=["frontend"])
        self._add(store, "c", "low", 3, tags=["backend"])

        assert [t.id for t in store.list_tasks(priority="high", tag="back")] == ["a"]
        assert [t.id for t in store.list_tasks(tag="END")] == ["a", "b", "c"]

    def test_listing_does_not_mutate(self, store):
        self._add(store, "a", "low", 1)
        before = [(t.id, t.updated_at) for t in store.all()]

        store.list_tasks(status="completed", priority="high", tag="x")

        assert [(t.id, t.updated_at) for t in store.all()] == before


def test_stats(store):
    store.create("A", "a", priority="high", tags=["ops", "db"], task_id="a")
    store.create("B", "b", priority="low", tags=["ops"], task_id="b")
    store.create("C", "c", task_id="c")
    store.complete("a")

    stats = store.stats()

    assert stats.total == 3
    assert stats.completed == 1
    assert stats.pending == 2
    assert stats.by_priority == {"high": 1, "medium": 1, "low": 1}
    assert stats.top_tags[0] == ("ops", 2)
