# =============================================================================
# tools/event_store.py  —  In-Memory Event Store for Resumable SSE Streams
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Every message the HTTP binding streams to a client is recorded here with
#   an event id.  A client that loses its SSE connection reconnects with a
#   `Last-Event-ID` header and the transport replays whatever it missed.
#
# HOW IT'S USED:
#   tools/mcp_server.py hands one InMemoryEventStore to the HTTP binding,
#   which gives it to every StreamableHTTPServerTransport it creates.  The
#   MCP SDK calls store_event() and replay_events_after(); we never call
#   them ourselves.
#
# LIMITS:
#   Each stream keeps at most `max_events_per_stream` events (oldest drop
#   off first).  The SDK names streams after request ids and never tells us
#   when a session ends, so the number of streams is capped too: past
#   `max_streams`, the stream written to longest ago is forgotten.
#   Everything lives in RAM and disappears on restart.
# =============================================================================

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from mcp.server.streamable_http import EventCallback, EventId, EventMessage, EventStore, StreamId
from mcp.types import JSONRPCMessage

logger = logging.getLogger(__name__)


@dataclass
class EventEntry:
    event_id: EventId
    stream_id: StreamId
    message: Optional[JSONRPCMessage]


class InMemoryEventStore(EventStore):
    def __init__(self, max_events_per_stream: int = 100, max_streams: int = 1000) -> None:
        self.max_events_per_stream = max_events_per_stream
        self.max_streams = max_streams
        self.streams: dict[StreamId, deque[EventEntry]] = {}
        self.event_index: dict[EventId, EventEntry] = {}

    async def store_event(self, stream_id: StreamId, message: Optional[JSONRPCMessage]) -> EventId:
        event_id = str(uuid4())
        entry = EventEntry(event_id=event_id, stream_id=stream_id, message=message)

        events = self.streams.pop(stream_id, None)
        if events is None:
            events = deque(maxlen=self.max_events_per_stream)
        # Re-inserting keeps the dict ordered from least to most recently written.
        self.streams[stream_id] = events
        while len(self.streams) > self.max_streams:
            self._evict_oldest_stream()

        # The deque drops its oldest entry on overflow; drop it from the index too.
        if len(events) == events.maxlen:
            self.event_index.pop(events[0].event_id, None)

        events.append(entry)
        self.event_index[event_id] = entry
        return event_id

    async def replay_events_after(self, last_event_id: EventId, send_callback: EventCallback) -> Optional[StreamId]:
        last = self.event_index.get(last_event_id)
        if last is None:
            logger.warning("Event ID %s not found in store", last_event_id)
            return None

        stream_id = last.stream_id
        found = False
        for entry in self.streams.get(stream_id, ()):
            if found:
                # Priming events carry no message and are never replayed.
                if entry.message is not None:
                    await send_callback(EventMessage(entry.message, entry.event_id))
            elif entry.event_id == last_event_id:
                found = True
        return stream_id

    def _evict_oldest_stream(self) -> None:
        stream_id = next(iter(self.streams))
        for entry in self.streams.pop(stream_id):
            self.event_index.pop(entry.event_id, None)
        logger.debug("Dropped event history for stream %s", stream_id)
