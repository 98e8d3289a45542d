"""
FastMCP assembly: the server serves exactly the registry's tools.
"""

import pytest
from fastmcp import Client

from core.config import load_config
from tests.conftest import SMTP_ENV
from tools import demo_tools
from tools.context import ToolContext
from tools.mcp_server import create_server


@pytest.fixture
def served(context):
    return create_server(context.config, context)


async def test_tool_list_matches_registry(served):
    mcp, registry = served

    tools = await mcp.list_tools()

    assert sorted(tool.name for tool in tools) == sorted(registry.names())


async def test_disabled_categories_are_not_served():
    config = load_config({**SMTP_ENV, "FEATURE_ENV_VARS_ENABLED": "false"})
    mcp, registry = create_server(config, ToolContext(config=config))

    names = {tool.name for tool in await mcp.list_tools()}

    assert "set-env-var" not in names
    assert "get-datetime" in names
    assert names == set(registry.names())


async def test_call_over_the_protocol(served, context):
    mcp, _ = served
    async with Client(mcp) as client:
        created = await client.call_tool("create-task", {"title": "Ship", "description": "v2", "id": "t1"})
        missing = await client.call_tool("get-task", {"id": "nope"})

    assert created.structured_content["success"] is True
    assert "t1" in context.tasks
    # Not found is a normal result, not a protocol error.
    assert missing.is_error is False
    assert missing.structured_content == {"success": False, "text": "Error: Task with ID nope not found."}


async def test_invalid_arguments_are_rejected(served, context):
    mcp, _ = served
    async with Client(mcp) as client:
        result = await client.call_tool("create-task", {"description": "no title"}, raise_on_error=False)

    assert result.is_error is True
    assert len(context.tasks) == 0


async def test_registry_handlers_still_dispatch_after_registration(served, monkeypatch):
    monkeypatch.setattr(demo_tools, "GREETING_DELAY_SECONDS", 0)
    _, registry = served

    result = await registry.dispatch("multi-greet", {"name": "Ada"})

    assert result.text == "Good morning, Ada!"


async def test_greeting_prompt_and_resource(served):
    mcp, _ = served
    async with Client(mcp) as client:
        prompts = {prompt.name for prompt in await client.list_prompts()}
        [contents] = await client.read_resource("greeting://default")

    assert "greeting-template" in prompts
    assert contents.text == "Hello, world!"


async def test_no_demo_prompt_when_demo_disabled():
    config = load_config({"FEATURE_DEMO_ENABLED": "false"})
    mcp, _ = create_server(config, ToolContext(config=config))

    async with Client(mcp) as client:
        assert await client.list_prompts() == []
        assert await client.list_resources() == []
