"""
In-memory event store used to resume SSE streams.
"""

from mcp.types import JSONRPCNotification

from tools.event_store import InMemoryEventStore


def note(n):
    return JSONRPCNotification(jsonrpc="2.0", method="notifications/message", params={"n": n})


async def replay(store, last_event_id):
    received = []

    async def collect(event):
        received.append(event)

    stream_id = await store.replay_events_after(last_event_id, collect)
    return stream_id, received


async def test_replays_only_later_events_of_the_same_stream():
    store = InMemoryEventStore()
    first = await store.store_event("s1", note(1))
    await store.store_event("s2", note(99))
    second = await store.store_event("s1", note(2))
    third = await store.store_event("s1", note(3))

    stream_id, events = await replay(store, first)

    assert stream_id == "s1"
    assert [e.event_id for e in events] == [second, third]
    assert [e.message.params["n"] for e in events] == [2, 3]


async def test_priming_events_are_not_replayed():
    store = InMemoryEventStore()
    priming = await store.store_event("s1", None)
    real = await store.store_event("s1", note(1))

    _, events = await replay(store, priming)

    assert [e.event_id for e in events] == [real]


async def test_unknown_event_id():
    stream_id, events = await replay(InMemoryEventStore(), "nope")
    assert stream_id is None
    assert events == []


async def test_history_is_bounded():
    store = InMemoryEventStore(max_events_per_stream=2)
    oldest = await store.store_event("s1", note(1))
    await store.store_event("s1", note(2))
    await store.store_event("s1", note(3))

    assert len(store.streams["s1"]) == 2
    assert oldest not in store.event_index
    assert (await replay(store, oldest))[0] is None


async def test_number_of_streams_is_bounded():
    store = InMemoryEventStore(max_streams=2)
    first = await store.store_event("s1", note(1))
    dropped = await store.store_event("s2", note(2))
    # Writing to s1 again makes s2 the stream written to longest ago.
    await store.store_event("s1", note(3))
    await store.store_event("s3", note(4))

    assert list(store.streams) == ["s1", "s3"]
    assert dropped not in store.event_index
    assert (await replay(store, dropped))[0] is None
    stream_id, events = await replay(store, first)
    assert stream_id == "s1"
    assert [e.message.params["n"] for e in events] == [3]
