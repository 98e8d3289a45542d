# =============================================================================
# tools/logs.py  —  Logging Setup for the Tool Server
# =============================================================================
# We log to STDERR because, in stdio mode, the MCP server talks to the agent
# over STDOUT.  A single log line on stdout would corrupt the JSON-RPC stream
# and the agent would drop the connection.
#
# ANSI COLOR CODES:
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for responses
#   - YELLOW for intermediate status/progress messages
#   This makes tool calls and their answers easy to tell apart in a busy
#   terminal.
# =============================================================================

import logging
import sys

from core.models import ToolResult

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Successful responses
_RED = "\033[31m"      # Failed responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

logger = logging.getLogger("tools")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def log_response(tool_name: str, result: ToolResult) -> ToolResult:
    """Log the first line of the result, then return it unchanged."""
    color = _GREEN if result.success else _RED
    first_line = result.text.strip().splitlines()[0] if result.text.strip() else ""
    logger.info(f"{color}  ← {tool_name}: {first_line}{_RESET}")
    return result
