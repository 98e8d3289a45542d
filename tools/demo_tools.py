# =============================================================================
# tools/demo_tools.py  —  Demo Tools (greetings and notification streams)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   A few small tools that show off MCP features beyond "call a function,
#   get a result":
#     - greet                      → the simplest possible tool
#     - multi-greet                → sends progress messages BEFORE its result
#     - start-notification-stream  → keeps sending messages on a timer
#   plus the greeting-template prompt and the greeting://default resource,
#   which tools/mcp_server.py registers next to these tools.
#
# HOW DO PROGRESS MESSAGES REACH THE CLIENT?
#   FastMCP injects a Context into any handler that asks for one.  Calling
#   `await context.info(...)` sends a notifications/message on the SAME
#   connection the tool call came in on, ahead of the final result.
#   Called in-process (ToolRegistry.dispatch) there is no connection, so the
#   messages only go to our own log.
# =============================================================================

import asyncio
from typing import Annotated, Optional

import anyio
from fastmcp import Context
from pydantic import Field

from core.models import ToolResult, utcnow
from tools.context import ToolContext
from tools.logs import log_request, log_response, log_status
from tools.registry import ToolDefinition

# Pause between the multi-greet messages, in seconds.
GREETING_DELAY_SECONDS = 1.0

DEFAULT_GREETING = "Hello, world!"


async def _notify(context: Optional[Context], message: str, level: str = "info") -> None:
    log_status(message)
    if context is not None:
        send = context.debug if level == "debug" else context.info
        await send(message)


def greeting_template(name: Annotated[str, Field(description="Name to include in greeting")]) -> str:
    """A simple greeting prompt template."""
    return f"Please greet {name} in a friendly manner."


def default_greeting() -> str:
    """The default greeting text."""
    return DEFAULT_GREETING


def demo_tools(ctx: ToolContext) -> list[ToolDefinition]:
    async def greet(
        name: Annotated[str, Field(description="Name to greet")],
        last_name: Annotated[str, Field(description="Last name to greet")],
    ) -> ToolResult:
        """Say hello to someone by first and last name."""
        log_request("greet", name=name, last_name=last_name)
        return log_response("greet", ToolResult.ok(f"Hello, {name} {last_name}!"))

    async def multi_greet(
        name: Annotated[str, Field(description="Name to greet")],
        context: Optional[Context] = None,
    ) -> ToolResult:
        """Greet someone after two paced progress notifications.

        Each step waits GREETING_DELAY_SECONDS, so expect a couple of seconds
        before the answer.  Progress goes to the client as log notifications.
        """
        log_request("multi-greet", name=name)
        await _notify(context, f"Starting multi-greet for {name}", level="debug")
        await asyncio.sleep(GREETING_DELAY_SECONDS)
        await _notify(context, f"Sending first greeting to {name}")
        await asyncio.sleep(GREETING_DELAY_SECONDS)
        await _notify(context, f"Sending second greeting to {name}")
        return log_response("multi-greet", ToolResult.ok(f"Good morning, {name}!"))

    async def start_notification_stream(
        interval: Annotated[
            int, Field(ge=0, le=60000, description="Interval in milliseconds between notifications")
        ] = 100,
        count: Annotated[
            int, Field(ge=0, description="Number of notifications to send (0 = until the connection closes)")
        ] = 50,
        context: Optional[Context] = None,
    ) -> ToolResult:
        """Send `count` log notifications, `interval` ms apart, then report how many went out.

        WHEN TO CALL THIS: Only to exercise notifications and stream
        resumption.  count=0 keeps going until the client disconnects and
        therefore needs a live client connection.
        """
        log_request("start-notification-stream", interval=interval, count=count)
        if count == 0 and context is None:
            return log_response(
                "start-notification-stream",
                ToolResult.error("count=0 streams until the connection closes and needs a client connection"),
            )

        sent = 0
        closed = False
        while count == 0 or sent < count:
            try:
                await _notify(context, f"Periodic notification #{sent + 1} at {utcnow().isoformat()}")
            except (anyio.ClosedResourceError, anyio.BrokenResourceError):
                log_status(f"Connection closed after {sent} notifications")
                closed = True
                break
            sent += 1
            await asyncio.sleep(interval / 1000)

        text = f"Sent {sent} periodic notifications every {interval}ms"
        if closed:
            text += " (stopped: connection closed)"
        return log_response("start-notification-stream", ToolResult.ok(text))

    return [
        ToolDefinition("greet", "A simple greeting tool", "demo", greet),
        ToolDefinition("multi-greet", "A tool that sends different greetings with delays between them", "demo", multi_greet),
        ToolDefinition(
            "start-notification-stream",
            "Starts sending periodic notifications for testing resumability",
            "demo",
            start_notification_stream,
        ),
    ]
