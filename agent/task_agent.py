# =============================================================================
# agent/task_agent.py  —  Google ADK Agent Configuration (LLM via LiteLlm)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that manages tasks, environment variables
#   and email for the user by calling the tools of our MCP server.
#
# HOW IT FITS TOGETHER:
#
#   ┌──────────────────────────────────────────────────────────────┐
#   │                      Google ADK Agent                        │
#   │   system prompt ──▶ LLM (via LiteLlm) ──▶ McpToolset         │
#   └──────────────────────────────────────────────────────────────┘
#                                                   │ stdio
#                                                   ▼
#                                   ┌──────────────────────────────┐
#                                   │  FastMCP server              │
#                                   │  (python -m tools.mcp_server)│
#                                   │  task / env / email / utility│
#                                   │  / demo tools                │
#                                   └──────────────────────────────┘
#
# WHICH TOOLS DOES THE AGENT SEE?
#   Whatever the server registered.  The feature flags in .env
#   (FEATURE_EMAIL_ENABLED=false, ...) are read by the SERVER process, so
#   switching a category off removes its tools from the agent too.
#
# MCP CONNECTION:
#   ADK spawns the tool server as a subprocess and speaks MCP over its
#   stdin/stdout.  No network, no ports.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import McpToolset, StdioConnectionParams
from mcp import StdioServerParameters

from agent.prompt import get_task_assistant_prompt

# Any LiteLlm model string works here; OPENROUTER_API_KEY must be set for this one.
DEFAULT_MODEL = "openrouter/openai/gpt-4o"

# Seconds ADK waits for the server subprocess to come up.
SERVER_START_TIMEOUT = 30.0


def create_tool_connection(project_root: str) -> McpToolset:
    """Describe how ADK starts and talks to our tool server.

    "uv run" makes the subprocess use the project's .venv, so fastmcp and
    the core/ and tools/ packages are importable no matter how the agent
    itself was launched.  Running it as a module (-m) from the project root
    keeps those package imports working.
    """
    return McpToolset(
        connection_params=StdioConnectionParams(
            server_params=StdioServerParameters(
                command="uv",
                args=["run", "python", "-m", "tools.mcp_server"],
                cwd=project_root,
            ),
            timeout=SERVER_START_TIMEOUT,
        ),
    )


def create_agent(model: str | None = None) -> Agent:
    """Create the task assistant agent.

    Args:
        model: LiteLlm model string.  Defaults to $AGENT_MODEL, then GPT-4o
            through OpenRouter.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    return Agent(
        name="task_assistant",
        model=LiteLlm(model=model or os.environ.get("AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_task_assistant_prompt(),
        tools=[create_tool_connection(project_root)],
    )
