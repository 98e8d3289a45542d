# =============================================================================
# tools/registry.py  —  The Operation Registry
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the list of tools this server offers — name, description, category
#   and handler — as ONE immutable snapshot built at startup.
#
# HOW IT'S USED:
#   1. build_registry() asks each tool module for its definitions and keeps
#      the categories whose feature flag is on.
#   2. tools/mcp_server.py registers exactly these handlers with FastMCP, so
#      the stdio and HTTP bindings serve the same set of tools.
#   3. ToolRegistry.dispatch() runs a tool in-process (tests, scripts) with
#      the same rules the protocol applies:
#        - unknown name         → UnknownOperationError
#        - payload doesn't fit  → InvalidInputError naming the field
#        - otherwise            → the handler's ToolResult
#
# A DISABLED CATEGORY IS NOT "DISABLED" — IT'S ABSENT:
#   Turning FEATURE_EMAIL_ENABLED off doesn't leave send-email around to say
#   "sorry, disabled".  The tool is simply not in the snapshot, so calling it
#   is an unknown operation like any typo.
#
# INPUT SHAPES:
#   A tool's input shape IS its handler's signature.  FastMCP turns the type
#   hints (plus pydantic Field constraints) into the JSON schema the client
#   sees; dispatch() validates against the very same signature with
#   pydantic.validate_call.
# =============================================================================

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Iterator, Mapping, Optional

from pydantic import ConfigDict, ValidationError, validate_call

from core.models import ToolResult
from tools.context import ToolContext

Handler = Callable[..., Awaitable[ToolResult]]

CATEGORIES = ("utility", "task", "email", "env", "demo")

# Context (fastmcp) is an arbitrary class as far as pydantic is concerned.
_CALL_CONFIG = ConfigDict(arbitrary_types_allowed=True)


class UnknownOperationError(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class InvalidInputError(ValueError):
    def __init__(self, tool_name: str, field: str, reason: str) -> None:
        super().__init__(f"Invalid input for {tool_name}: {field}: {reason}")
        self.tool_name = tool_name
        self.field = field
        self.reason = reason


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    category: str
    handler: Handler


class ToolRegistry:
    """Immutable name → ToolDefinition table."""

    def __init__(self, definitions: Iterable[ToolDefinition], disabled: Iterable[str] = ()) -> None:
        tools: dict[str, ToolDefinition] = {}
        duplicates = []
        for definition in definitions:
            if definition.name in tools:
                duplicates.append(definition.name)
            tools[definition.name] = definition
        if duplicates:
            raise ValueError(f"Duplicate tool names found: {', '.join(sorted(set(duplicates)))}")
        self._tools = tools
        self._disabled = tuple(disabled)
        self._validated = {name: validate_call(config=_CALL_CONFIG)(d.handler) for name, d in tools.items()}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def categories(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {category: [] for category in CATEGORIES}
        for definition in self._tools.values():
            grouped.setdefault(definition.category, []).append(definition.name)
        return grouped

    def stats(self) -> dict[str, Any]:
        by_category = {category: len(names) for category, names in self.categories().items()}
        return {
            "total": len(self._tools),
            "by_category": by_category,
            "enabled": [c for c in CATEGORIES if c not in self._disabled],
            "disabled": list(self._disabled),
        }

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        if name not in self._tools:
            raise UnknownOperationError(name)
        # Depending on the pydantic version, validation of a coroutine
        # function happens at call time or when the coroutine is awaited.
        try:
            outcome = self._validated[name](**dict(arguments or {}))
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error.get("loc", ())) or "<arguments>"
            raise InvalidInputError(name, field, error.get("msg", "invalid value")) from exc
        return outcome


def build_registry(context: ToolContext) -> ToolRegistry:
    """Compose the registry for this process from the feature flags."""
    from tools.demo_tools import demo_tools
    from tools.email_tools import email_tools
    from tools.env_tools import env_tools
    from tools.task_tools import task_tools
    from tools.utility_tools import utility_tools

    features = context.config.features
    optional = [
        ("task", features.task_management, task_tools),
        ("email", features.email, email_tools),
        ("env", features.environment_variables, env_tools),
        ("demo", features.demo, demo_tools),
    ]

    definitions = list(utility_tools(context))
    disabled = []
    for category, enabled, factory in optional:
        if enabled:
            definitions.extend(factory(context))
        else:
            disabled.append(category)
    return ToolRegistry(definitions, disabled=disabled)
