# =============================================================================
# tools/utility_tools.py  —  Utility Tools (always enabled)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   General-purpose helpers the agent can call no matter which features are
#   switched on: the current date/time, UUIDs, random data, hashes, a sleep
#   and two tools that describe the server itself.
#
# WHY "ALWAYS ENABLED"?
#   There is no feature flag for this category.  get-server-status in
#   particular is how an agent finds out which other categories exist.
# =============================================================================

import asyncio
import os
import platform
import sys
import time
from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field

from core.config import config_summary
from core.formatting import truncate_text
from core.models import ToolResult
from core.utilities import (
    DateFormat,
    HashAlgorithm,
    HashEncoding,
    RandomKind,
    UuidFormat,
    calculate_hash as compute_hash,
    describe_datetime,
    format_uptime,
    generate_uuids,
    random_value,
)
from tools.context import ToolContext
from tools.logs import log_request, log_response, log_status
from tools.registry import ToolDefinition

Length = Annotated[int, Field(ge=1, le=1000)]


def _peak_memory_mb() -> Optional[float]:
    """Peak resident set size of this process, where the OS reports it."""
    if sys.platform == "win32":
        return None
    import resource

    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes.
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return round(peak / divisor, 2)


def _enabled(flag: bool) -> str:
    return "Enabled" if flag else "Disabled"


def utility_tools(ctx: ToolContext) -> list[ToolDefinition]:
    config = ctx.config

    async def get_datetime(
        format: Annotated[DateFormat, Field(description="Date format to return")] = "all",
        timezone: Annotated[
            Optional[str], Field(description='Timezone for local format (e.g., "America/New_York")')
        ] = None,
    ) -> ToolResult:
        """Current date and time as ISO, local, UTC and/or a unix timestamp."""
        log_request("get-datetime", format=format, timezone=timezone)
        lines = describe_datetime(datetime.now().astimezone(), format, timezone)
        return log_response("get-datetime", ToolResult.ok("Current Date and Time:\n\n" + "\n".join(lines)))

    async def generate_uuid(
        count: Annotated[int, Field(ge=1, le=100, description="Number of UUIDs to generate (1-100)")] = 1,
        format: Annotated[UuidFormat, Field(description="UUID format")] = "standard",
    ) -> ToolResult:
        """Generate 1 to 100 random (v4) UUIDs."""
        log_request("generate-uuid", count=count, format=format)
        values = generate_uuids(count, format)
        if count == 1:
            return log_response("generate-uuid", ToolResult.ok(f"Generated UUID:\n\n{values[0]}"))
        listing = "\n".join(f"{index}. {value}" for index, value in enumerate(values, start=1))
        return log_response("generate-uuid", ToolResult.ok(f"Generated UUIDs:\n\n{listing}"))

    async def generate_random(
        type: Annotated[RandomKind, Field(description="Type of random data to generate")],
        length: Annotated[
            Optional[Length], Field(description="Length of generated data (for strings/passwords, 1-1000)")
        ] = None,
        min: Annotated[int, Field(description="Minimum value (for numbers)")] = 0,
        max: Annotated[int, Field(description="Maximum value (for numbers)")] = 100,
        include_symbols: Annotated[bool, Field(description="Include symbols in password generation")] = False,
    ) -> ToolResult:
        """Generate a random number, string or password.

        Args:
            type: "number", "string", "password", "hex" or "base64".
            length: Size of everything but numbers (defaults differ per type).
            min / max: Inclusive bounds for numbers; min must be below max.
            include_symbols: Add punctuation to passwords.
        """
        log_request("generate-random", type=type, length=length, min=min, max=max)
        try:
            value = random_value(type, length=length, minimum=min, maximum=max, include_symbols=include_symbols)
        except ValueError as exc:
            return log_response("generate-random", ToolResult.error(str(exc)))
        return log_response("generate-random", ToolResult.ok(f"Generated Random {type.capitalize()}:\n\n{value}"))

    async def calculate_hash(
        text: Annotated[str, Field(min_length=1, description="Text to hash")],
        algorithm: Annotated[HashAlgorithm, Field(description="Hash algorithm to use")] = "sha256",
        encoding: Annotated[HashEncoding, Field(description="Output encoding")] = "hex",
    ) -> ToolResult:
        """Hash text with md5, sha1, sha256 or sha512, as hex or base64."""
        log_request("calculate-hash", algorithm=algorithm, encoding=encoding)
        digest = compute_hash(text, algorithm, encoding)
        lines = [
            "Hash Calculation:",
            f"Algorithm: {algorithm.upper()}",
            f"Encoding: {encoding}",
            f"Input: {truncate_text(text, 53)}",
            f"Hash: {digest}",
        ]
        return log_response("calculate-hash", ToolResult.ok("\n".join(lines)))

    async def sleep(
        duration: Annotated[int, Field(ge=1, le=60000, description="Duration to sleep in milliseconds (1-60000)")],
        message: Annotated[Optional[str], Field(description="Optional message to log before sleeping")] = None,
    ) -> ToolResult:
        """Wait `duration` milliseconds, then report requested vs. actual time."""
        log_request("sleep", duration=duration, message=message)
        if message:
            log_status(message)
        started = time.monotonic()
        await asyncio.sleep(duration / 1000)
        actual = round((time.monotonic() - started) * 1000)
        lines = ["Sleep completed!", f"Requested Duration: {duration}ms", f"Actual Duration: {actual}ms"]
        if message:
            lines.append(f"Message: {message}")
        return log_response("sleep", ToolResult.ok("\n".join(lines)))

    async def get_server_status() -> ToolResult:
        """Report identity, uptime, runtime, enabled features and data counts."""
        log_request("get-server-status")
        features = config.features
        lines = [
            "MCP Server Status:",
            "",
            f"Server Name: {config.name}",
            f"Version: {config.version}",
            f"Port: {config.port}",
            f"Uptime: {format_uptime(ctx.uptime_seconds)}",
            f"Python Version: {platform.python_version()}",
            f"Platform: {sys.platform} {platform.machine()}",
            f"Process ID: {os.getpid()}",
        ]
        peak = _peak_memory_mb()
        if peak is not None:
            lines.append(f"Peak Memory (RSS): {peak} MB")
        lines += [
            "",
            "Features:",
            f"  Task Management: {_enabled(features.task_management)}",
            f"  Email: {_enabled(features.email)}",
            f"  Environment Variables: {_enabled(features.environment_variables)}",
            f"  Demo Tools: {_enabled(features.demo)}",
            "",
            "Data Summary:",
            f"  Tasks: {len(ctx.tasks)}",
            f"  Environment Variables: {len(ctx.env_vars)}",
        ]
        return log_response("get-server-status", ToolResult.ok("\n".join(lines)))

    async def get_server_config(
        include_sensitive: Annotated[
            bool, Field(description="Whether to include sensitive configuration details")
        ] = False,
    ) -> ToolResult:
        """Show the server configuration.

        The SMTP user is masked unless include_sensitive is set.  The SMTP
        password is never shown.
        """
        log_request("get-server-config", include_sensitive=include_sensitive)
        summary = config_summary(config, include_sensitive=include_sensitive)
        return log_response("get-server-config", ToolResult.ok(f"Server Configuration:\n{summary}"))

    return [
        ToolDefinition("get-datetime", "Get the current date and time in various formats", "utility", get_datetime),
        ToolDefinition("generate-uuid", "Generate a UUID (Universally Unique Identifier)", "utility", generate_uuid),
        ToolDefinition("generate-random", "Generate random data like numbers, strings, or passwords", "utility", generate_random),
        ToolDefinition("calculate-hash", "Calculate hash of text using various algorithms", "utility", calculate_hash),
        ToolDefinition("sleep", "Sleep/delay for a specified amount of time", "utility", sleep),
        ToolDefinition("get-server-status", "Get the current status and configuration of the MCP server", "utility", get_server_status),
        ToolDefinition("get-server-config", "Get detailed server configuration information", "utility", get_server_config),
    ]
