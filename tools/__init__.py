# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the MCP layer: tool handlers, the registry that decides
# which of them exist, and the two ways of serving them (stdio and HTTP).
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP clients and core/.
#   Each *_tools.py module:
#     1. Declares its tools as typed async functions (the type hints ARE
#        the input schema the client sees)
#     2. Calls into core/ stores and services
#     3. Words the answer as a ToolResult (success flag + text)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT hold state themselves (stores live in a ToolContext)
#   - They do NOT know about Google ADK
#
# MODULE MAP:
#   registry.py        → ToolDefinition, ToolRegistry, build_registry()
#   mcp_server.py      → FastMCP assembly + `python -m tools.mcp_server`
#   http_transport.py  → session tokens over HTTP (POST/GET/DELETE /mcp)
#   event_store.py     → replay buffer for resumable SSE streams
#   context.py, logs.py → shared plumbing
# =============================================================================
