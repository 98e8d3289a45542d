# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (assembly + entry point)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the MCP server the agent talks to and starts it on one of two
#   transports:
#
#     a) stdio (default):   python -m tools.mcp_server
#        The agent (agent/task_agent.py) spawns this as a subprocess and
#        speaks MCP over its stdin/stdout.
#     b) HTTP:              python -m tools.mcp_server --http --port 3001
#        Clients POST to /mcp; tools/http_transport.py keeps one MCP session
#        per mcp-session-id header.
#
# HOW IT WORKS (the flow):
#   1. load_dotenv() + load_config() read the settings ONCE
#   2. build_registry() decides which tools exist (feature flags)
#   3. create_server() registers exactly those tools with FastMCP
#   4. A client calls a tool by name; FastMCP validates the arguments
#      against the handler's signature and awaits it
#   5. The handler returns a ToolResult and FastMCP serializes it
#
# WHY NOT @mcp.tool() DECORATORS?
#   The tool handlers live in per-category modules and close over a
#   ToolContext, so they only exist once a context has been built.  We
#   register them here in a loop instead of decorating them at import time.
# =============================================================================

import argparse
import functools
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from core.config import ServerConfig, config_summary, load_config, validate_config
from core.env_store import EnvVarStore
from tools.context import ToolContext
from tools.demo_tools import DEFAULT_GREETING, default_greeting, greeting_template
from tools.logs import configure_logging
from tools.registry import Handler, ToolRegistry, build_registry

logger = logging.getLogger("tools")


def _bind(handler: Handler) -> Handler:
    """A per-tool wrapper for FastMCP to register.

    FastMCP rewrites the signature of whatever it registers (it gives a
    Context parameter its own injection default).  Registering a wrapper
    keeps that rewrite off the handler that ToolRegistry.dispatch() calls.
    """

    @functools.wraps(handler)
    async def call(*args, **kwargs):
        return await handler(*args, **kwargs)

    return call


def create_server(
    config: ServerConfig, context: Optional[ToolContext] = None
) -> tuple[FastMCP, ToolRegistry]:
    """Build the FastMCP server and the registry it serves.

    Args:
        config: Settings from load_config().
        context: Stores and mailer the tools use.  When omitted, a fresh one
            is built whose env-var store mirrors into os.environ.

    Returns:
        (server, registry) — the registry is the same snapshot FastMCP
        serves, handy for in-process dispatch.
    """
    if context is None:
        context = ToolContext(config=config, env_vars=EnvVarStore(os.environ))
    registry = build_registry(context)

    mcp = FastMCP(config.name, version=config.version)
    for definition in registry:
        mcp.tool(_bind(definition.handler), name=definition.name, description=definition.description)

    if config.features.demo:
        mcp.prompt(greeting_template, name="greeting-template", description="A simple greeting prompt template")
        mcp.resource(
            "greeting://default",
            name="Default Greeting",
            description=f'A simple greeting resource ("{DEFAULT_GREETING}")',
            mime_type="text/plain",
        )(default_greeting)

    stats = registry.stats()
    logger.info(
        "Registered %d tools (%s)",
        stats["total"],
        ", ".join(f"{name}: {count}" for name, count in stats["by_category"].items() if count),
    )
    if stats["disabled"]:
        logger.info("Disabled categories: %s", ", ".join(stats["disabled"]))
    return mcp, registry


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MCP task assistant tool server")
    parser.add_argument("--http", action="store_true", help="serve streamable HTTP on /mcp instead of stdio")
    parser.add_argument("--host", default=None, help="HTTP bind address (default: $HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (default: $PORT or 3001)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)

    # .env values must be in os.environ BEFORE load_config() reads them.
    load_dotenv()
    config = load_config()
    configure_logging(config.log_level)

    for warning in validate_config(config):
        logger.warning("Configuration warning: %s", warning)
    logger.info(config_summary(config))

    mcp, _ = create_server(config)

    if not args.http:
        logger.info("Starting %s v%s on stdio", config.name, config.version)
        mcp.run()
        return

    # Imported here so the stdio path never loads the web stack.
    import uvicorn

    from tools.event_store import InMemoryEventStore
    from tools.http_transport import StreamableHTTPBinding, create_http_app

    host = args.host or config.host
    port = args.port or config.port
    binding = StreamableHTTPBinding(
        mcp._mcp_server,
        json_response=config.json_response,
        event_store=InMemoryEventStore(),
    )
    logger.info("Starting %s v%s on http://%s:%d/mcp", config.name, config.version, host, port)
    uvicorn.run(create_http_app(binding), host=host, port=port, log_level=config.log_level.lower())


# =============================================================================
# Server entry point
# =============================================================================
# When run directly (python -m tools.mcp_server), start the MCP server.
# The agent connects to this server via stdio transport.
# =============================================================================
if __name__ == "__main__":
    main()
