# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is the "brain" that turns a chat message ("remind me
#   to renew the SSL cert, high priority") into tool calls:
#     1. Reads the user's message
#     2. Decides which MCP tools to call, and in what order
#     3. Interprets each ToolResult (success flag + text)
#     4. Answers the user in plain language
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the storage (tasks and env vars live in core/)
#   - It is NOT the tool implementations (that's tools/)
#   - It never touches data directly; every change goes through a tool
# =============================================================================
