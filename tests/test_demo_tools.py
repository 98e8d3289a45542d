"""
Demo tools: greetings and notification streams.
"""

import anyio
import pytest

from tools import demo_tools


class FakeContext:
    """Records what a handler would send to the client as notifications."""

    def __init__(self, fail_after=None):
        self.messages = []
        self.fail_after = fail_after

    async def _send(self, level, message):
        if self.fail_after is not None and len(self.messages) >= self.fail_after:
            raise anyio.ClosedResourceError()
        self.messages.append((level, message))

    async def info(self, message):
        await self._send("info", message)

    async def debug(self, message):
        await self._send("debug", message)


@pytest.fixture(autouse=True)
def no_greeting_delay(monkeypatch):
    monkeypatch.setattr(demo_tools, "GREETING_DELAY_SECONDS", 0)


async def test_greet(registry):
    result = await registry.dispatch("greet", {"name": "Ada", "last_name": "Lovelace"})
    assert result.text == "Hello, Ada Lovelace!"


async def test_multi_greet_sends_progress_before_result(registry):
    context = FakeContext()

    result = await registry.get("multi-greet").handler(name="Ada", context=context)

    assert result.text == "Good morning, Ada!"
    assert context.messages == [
        ("debug", "Starting multi-greet for Ada"),
        ("info", "Sending first greeting to Ada"),
        ("info", "Sending second greeting to Ada"),
    ]


async def test_multi_greet_without_connection(registry):
    result = await registry.dispatch("multi-greet", {"name": "Ada"})
    assert result.text == "Good morning, Ada!"


async def test_notification_stream_counts(registry):
    context = FakeContext()

    result = await registry.get("start-notification-stream").handler(interval=0, count=3, context=context)

    assert result.text == "Sent 3 periodic notifications every 0ms"
    assert [message.split(" at ")[0] for _, message in context.messages] == [
        "Periodic notification #1",
        "Periodic notification #2",
        "Periodic notification #3",
    ]


async def test_unbounded_stream_stops_when_connection_closes(registry):
    context = FakeContext(fail_after=4)

    result = await registry.get("start-notification-stream").handler(interval=0, count=0, context=context)

    assert result.success
    assert result.text == "Sent 4 periodic notifications every 0ms (stopped: connection closed)"


async def test_unbounded_stream_needs_a_connection(registry):
    result = await registry.dispatch("start-notification-stream", {"interval": 0, "count": 0})

    assert result.success is False
    assert "needs a client connection" in result.text


def test_prompt_and_resource_bodies():
    assert demo_tools.greeting_template("Ada") == "Please greet Ada in a friendly manner."
    assert demo_tools.default_greeting() == "Hello, world!"
