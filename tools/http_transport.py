# =============================================================================
# tools/http_transport.py  —  Stateful MCP Sessions over Stateless HTTP
# =============================================================================
#
# WHAT THIS FILE DOES:
#   HTTP requests are independent of each other; an MCP session is not.
#   This module glues the two together with a session token:
#
#     1. A client POSTs an `initialize` request WITHOUT an mcp-session-id
#        header.  We mint a token, build a connection object for it
#        (the MCP SDK's StreamableHTTPServerTransport), start the MCP
#        server loop on that connection, and let it answer.  The response
#        carries the token in the mcp-session-id header.
#     2. Every later request carries that header.  We look the token up and
#        hand the request to the SAME connection object.
#     3. A DELETE with the header ends the session.
#
#   Anything else (no token and not an initialize, or a token we don't
#   know) gets a 400 with a JSON-RPC error body and changes nothing.
#
# SESSION LIFECYCLE:
#
#     absent ──POST initialize──▶ active ──DELETE / server loop ends──▶ closed
#                                   │  ▲
#                                   └──┘  POST / GET with the token
#
#   Removing a token is idempotent: a DELETE and the server loop winding
#   down both try to remove it, and only the first one does anything.
#
# WHY NOT JUST StreamableHTTPSessionManager?
#   The SDK ships a session manager that does all of this internally.
#   Doing it here keeps every step visible (and testable): the token table
#   is a plain object, the connection factory and the MCP server are
#   injected, and tests swap in fakes for both.
# =============================================================================

import json
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, Callable, Iterator, Optional
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup, TaskStatus
from mcp.server.streamable_http import (
    LAST_EVENT_ID_HEADER,
    MCP_SESSION_ID_HEADER,
    EventStore,
    StreamableHTTPServerTransport,
)
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

# JSON-RPC error codes used in HTTP-level rejections.
BAD_REQUEST_CODE = -32000
INTERNAL_ERROR_CODE = -32603

TransportFactory = Callable[[str], StreamableHTTPServerTransport]


def _jsonrpc_error(status_code: int, code: int, message: str) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": None},
        status_code=status_code,
    )


def _bad_request() -> JSONResponse:
    return _jsonrpc_error(400, BAD_REQUEST_CODE, "Bad Request: No valid session ID provided")


def _internal_error() -> JSONResponse:
    return _jsonrpc_error(500, INTERNAL_ERROR_CODE, "Internal server error")


def is_initialize_request(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("method") == "initialize"


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """A receive channel that yields an already-read body once, then defers to `receive`."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


# =============================================================================
# SessionTable — token → connection object
# =============================================================================
class SessionTable:
    """Thread-safe map from session token to its connection object.

    create() picks the token and stores the connection in one step under the
    lock, so two concurrent initializations can never share a token and a
    token is never visible before its connection exists.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, StreamableHTTPServerTransport] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions

    def create(self, factory: TransportFactory) -> tuple[str, StreamableHTTPServerTransport]:
        with self._lock:
            token = uuid4().hex
            while token in self._sessions:
                token = uuid4().hex
            transport = factory(token)
            self._sessions[token] = transport
        return token, transport

    def get(self, token: Optional[str]) -> Optional[StreamableHTTPServerTransport]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def remove(self, token: str) -> Optional[StreamableHTTPServerTransport]:
        """Forget a token.  Returns the connection, or None if it was already gone."""
        with self._lock:
            return self._sessions.pop(token, None)

    def tokens(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def clear(self) -> list[tuple[str, StreamableHTTPServerTransport]]:
        with self._lock:
            sessions = list(self._sessions.items())
            self._sessions.clear()
        return sessions

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens())


# =============================================================================
# StreamableHTTPBinding — the ASGI endpoint mounted at /mcp
# =============================================================================
class StreamableHTTPBinding:
    """Routes /mcp requests to per-session connections.

    Args:
        server: The low-level MCP server (FastMCP keeps it at `_mcp_server`).
            Each session runs `server.run(read, write, init_options)`.
        json_response: Answer POSTs with a single JSON body instead of SSE.
        event_store: Shared store that makes SSE streams resumable.
        transport_factory: Builds the connection object for a new token.
            Defaults to the SDK's StreamableHTTPServerTransport.
        sessions: Token table.  A fresh SessionTable by default.
    """

    def __init__(
        self,
        server: Any,
        *,
        json_response: bool = False,
        event_store: Optional[EventStore] = None,
        transport_factory: Optional[TransportFactory] = None,
        sessions: Optional[SessionTable] = None,
    ) -> None:
        self.server = server
        self.json_response = json_response
        self.event_store = event_store
        self.sessions = sessions if sessions is not None else SessionTable()
        self._transport_factory = transport_factory or self._default_transport
        self._task_group: Optional[TaskGroup] = None

    def _default_transport(self, token: str) -> StreamableHTTPServerTransport:
        return StreamableHTTPServerTransport(
            mcp_session_id=token,
            is_json_response_enabled=self.json_response,
            event_store=self.event_store,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    @asynccontextmanager
    async def run(self):
        """Own the task group that session server loops run in.

        Enter this in the web app's lifespan.  On the way out every active
        session is terminated and the table is cleared.
        """
        async with anyio.create_task_group() as task_group:
            self._task_group = task_group
            logger.info("HTTP session binding started")
            try:
                yield self
            finally:
                await self.shutdown()
                task_group.cancel_scope.cancel()
                self._task_group = None
                logger.info("HTTP session binding stopped")

    async def shutdown(self) -> None:
        for token, transport in self.sessions.clear():
            try:
                await transport.terminate()
            except Exception:
                logger.warning("Error terminating session %s during shutdown", token, exc_info=True)

    async def _serve(
        self,
        token: str,
        transport: StreamableHTTPServerTransport,
        *,
        task_status: TaskStatus = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """Run the MCP server loop for one session until its connection closes."""
        try:
            async with transport.connect() as (read_stream, write_stream):
                task_status.started()
                await self.server.run(read_stream, write_stream, self.server.create_initialization_options())
        except Exception:
            logger.exception("Session %s crashed", token)
        finally:
            if self.sessions.remove(token) is not None:
                logger.info("Session %s closed", token)

    # -------------------------------------------------------------------------
    # ASGI entry point
    # -------------------------------------------------------------------------
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self._dispatch(scope, receive, tracking_send)
        except Exception:
            logger.exception("Error handling MCP request")
            if response_started:
                raise
            await _internal_error()(scope, receive, send)

    async def _dispatch(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        if request.method == "POST":
            await self._handle_post(request, scope, receive, send)
        elif request.method == "GET":
            await self._handle_get(request, scope, receive, send)
        elif request.method == "DELETE":
            await self._handle_delete(request, scope, receive, send)
        else:
            await Response("Method Not Allowed", status_code=405, headers={"Allow": "GET, POST, DELETE"})(
                scope, receive, send
            )

    async def _handle_post(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        token = request.headers.get(MCP_SESSION_ID_HEADER)
        if token:
            transport = self.sessions.get(token)
            if transport is None:
                logger.info("Rejected POST with unknown session ID %s", token[:64])
                await _bad_request()(scope, receive, send)
                return
            await transport.handle_request(scope, receive, send)
            return

        body = await request.body()
        try:
            payload = json.loads(body) if body else None
        except ValueError:
            payload = None
        if not is_initialize_request(payload):
            await _bad_request()(scope, receive, send)
            return

        await self._open_session(scope, _replay_body(body, receive), send)

    async def _open_session(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self._task_group is None:
            raise RuntimeError("StreamableHTTPBinding.run() must be entered before serving requests")

        # No await between minting the token and registering the connection.
        token, transport = self.sessions.create(self._transport_factory)
        logger.info("Session %s created", token)
        try:
            await self._task_group.start(self._serve, token, transport)
        except Exception:
            self.sessions.remove(token)
            logger.exception("Failed to start session %s", token)
            await _internal_error()(scope, receive, send)
            return

        await transport.handle_request(scope, receive, send)

    async def _handle_get(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        token = request.headers.get(MCP_SESSION_ID_HEADER)
        transport = self.sessions.get(token)
        if transport is None:
            await _bad_request()(scope, receive, send)
            return

        last_event_id = request.headers.get(LAST_EVENT_ID_HEADER)
        if last_event_id:
            logger.info("Client reconnecting to session %s with Last-Event-ID %s", token, last_event_id)
        else:
            logger.info("Opening SSE stream for session %s", token)
        await transport.handle_request(scope, receive, send)

    async def _handle_delete(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        token = request.headers.get(MCP_SESSION_ID_HEADER)
        transport = self.sessions.get(token)
        if transport is None:
            await _bad_request()(scope, receive, send)
            return

        logger.info("Terminating session %s", token)
        try:
            await transport.handle_request(scope, receive, send)
        finally:
            self.sessions.remove(token)


# =============================================================================
# Starlette app
# =============================================================================
def create_http_app(binding: StreamableHTTPBinding, path: str = "/mcp") -> Starlette:
    """Wrap a binding in a Starlette app with `/mcp` and `/health` routes."""

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "sessions": len(binding.sessions)})

    @asynccontextmanager
    async def lifespan(app: Starlette):
        async with binding.run():
            yield

    return Starlette(
        routes=[
            Route(path, endpoint=binding, methods=["GET", "POST", "DELETE"]),
            Route("/health", endpoint=health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
