# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the data and business logic of the task assistant:
# models, configuration, the task and env-var stores, the mailer and pure
# helper functions.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any MCP code.
#   Every module here is plain Python; tests build stores and configs
#   directly, with no server running.
# =============================================================================
