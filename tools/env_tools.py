# =============================================================================
# tools/env_tools.py  —  Environment Variable Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Lets the agent set, read, list, delete and export environment variables.
#   Values live in core/env_store.py and are mirrored into the process
#   environment the store was given.
#
# KEYS ARE SANITIZED FIRST:
#   "db-host" becomes "DB_HOST" before anything else happens, so every tool
#   in this file agrees on what a key looks like.
#
# SECRETS:
#   A variable flagged is_secret prints as ***HIDDEN*** unless the caller
#   explicitly asks to see it.  list-env-vars and export-env-vars leave
#   secrets out entirely unless include_secrets is set.
# =============================================================================

from typing import Annotated, Optional

from pydantic import Field

from core.formatting import display_value, format_date
from core.models import ToolResult, utcnow
from core.validation import is_valid_env_key, sanitize_env_key
from tools.context import ToolContext
from tools.logs import log_request, log_response, log_status
from tools.registry import ToolDefinition


def env_tools(ctx: ToolContext) -> list[ToolDefinition]:
    store = ctx.env_vars

    async def set_env_var(
        key: Annotated[str, Field(min_length=1, description="Environment variable key (will be converted to uppercase)")],
        value: Annotated[str, Field(description="Environment variable value")],
        description: Annotated[
            Optional[str], Field(description="Description of what this environment variable is used for")
        ] = None,
        is_secret: Annotated[bool, Field(description="Whether this is a secret value (masked in output)")] = False,
    ) -> ToolResult:
        """Set or update a managed environment variable.

        WHEN TO CALL THIS: The user wants the server process to have a
        variable, e.g. "set DB_HOST to localhost".

        Args:
            key: Sanitized before use: uppercased, and anything outside A-Z,
                 0-9 and _ becomes _.  It must then start with a letter.
            value: Stored as given.
            description: What the variable is for.
            is_secret: Mask the value in every answer unless explicitly revealed.

        Returns:
            "created" or "updated", with the value masked if secret.
        """
        log_request("set-env-var", key=key, description=description, is_secret=is_secret)
        sanitized = sanitize_env_key(key)
        if not is_valid_env_key(sanitized):
            return log_response(
                "set-env-var",
                ToolResult.error(
                    f"Invalid environment variable key: {key}. "
                    "Keys should contain only uppercase letters, numbers, and underscores."
                ),
            )

        var, created = store.set(sanitized, value, description=description, is_secret=is_secret)
        if sanitized != key:
            log_status(f"Key sanitized: {key} -> {sanitized}")
        stamp = f"Created: {format_date(var.created_at)}" if created else f"Updated: {format_date(var.updated_at)}"
        lines = [
            f"Environment variable {'created' if created else 'updated'} successfully!",
            f"Key: {var.key}",
            f"Value: {display_value(var, reveal_secret=False)}",
            f"Description: {var.description or 'No description provided'}",
            f"Secret: {'Yes' if var.is_secret else 'No'}",
            stamp,
        ]
        return log_response("set-env-var", ToolResult.ok("\n".join(lines)))

    async def get_env_var(
        key: Annotated[str, Field(min_length=1, description="Environment variable key")],
        show_secret: Annotated[bool, Field(description="Whether to show the actual value of a secret variable")] = False,
    ) -> ToolResult:
        """Read one environment variable.

        Managed variables are shown with their metadata.  Anything else set in
        the process environment is reported as a system variable.

        Args:
            key: Sanitized the same way as in set-env-var.
            show_secret: Reveal the value of a secret variable.
        """
        log_request("get-env-var", key=key, show_secret=show_secret)
        sanitized = sanitize_env_key(key)
        var = store.get(sanitized)

        if var is None:
            # Not managed by us, but maybe the process already had it.
            system_value = store.lookup_system(sanitized)
            if not system_value:
                return log_response("get-env-var", ToolResult.error(f"Environment variable {sanitized} not found."))
            lines = [
                "Environment Variable (System):",
                f"Key: {sanitized}",
                f"Value: {system_value}",
                "Source: System environment",
                "Description: Not managed by MCP server",
            ]
            return log_response("get-env-var", ToolResult.ok("\n".join(lines)))

        lines = [
            "Environment Variable Details:",
            f"Key: {var.key}",
            f"Value: {display_value(var, reveal_secret=show_secret)}",
            f"Description: {var.description or 'No description provided'}",
            f"Secret: {'Yes' if var.is_secret else 'No'}",
            f"Created: {format_date(var.created_at)}",
        ]
        if var.updated_at:
            lines.append(f"Updated: {format_date(var.updated_at)}")
        if var.is_secret and not show_secret:
            lines.append("")
            lines.append("Use show_secret=true to reveal the actual value")
        return log_response("get-env-var", ToolResult.ok("\n".join(lines)))

    async def list_env_vars(
        include_secrets: Annotated[bool, Field(description="Whether to include secret variables in the list")] = False,
        show_values: Annotated[
            bool, Field(description="Whether to show values (secrets stay masked unless show_secrets is true)")
        ] = False,
        show_secrets: Annotated[bool, Field(description="Whether to show actual values of secret variables")] = False,
        filter: Annotated[
            Optional[str], Field(description="Filter variables by key or description (case-insensitive)")
        ] = None,
    ) -> ToolResult:
        """List managed variables, sorted by key.

        Values are hidden unless show_values is set, and secrets are left
        out unless include_secrets is set.
        """
        log_request(
            "list-env-vars",
            include_secrets=include_secrets,
            show_values=show_values,
            show_secrets=show_secrets,
            filter=filter,
        )
        variables = store.list_vars(filter=filter, include_secrets=include_secrets)
        if not variables:
            filter_text = f' matching "{filter}"' if filter else ""
            secret_text = " (excluding secrets)" if not include_secrets else ""
            return log_response(
                "list-env-vars", ToolResult.ok(f"No environment variables found{filter_text}{secret_text}.")
            )

        header = f"Environment Variables (filtered by: {filter}):" if filter else "Environment Variables:"
        blocks = [header, ""]
        for index, var in enumerate(variables, start=1):
            shown = display_value(var, reveal_secret=show_secrets) if show_values else "[Value hidden]"
            blocks.append(f"{index}. {var.key}{' [secret]' if var.is_secret else ''}")
            blocks.append(f"   Value: {shown}")
            blocks.append(f"   Description: {var.description or 'No description'}")
            blocks.append(f"   Created: {format_date(var.created_at)}")
            if var.updated_at:
                blocks.append(f"   Updated: {format_date(var.updated_at)}")
            blocks.append("")

        secret_count = store.secret_count()
        summary = f"Summary: {len(variables)} variables shown"
        if secret_count and not include_secrets:
            summary += f", {secret_count} secret variables hidden"
        blocks.append(summary)
        if not show_values:
            blocks.append("Use show_values=true to see values")
        if secret_count and include_secrets and not show_secrets:
            blocks.append("Use show_secrets=true to reveal secret values")
        return log_response("list-env-vars", ToolResult.ok("\n".join(blocks)))

    async def delete_env_var(
        key: Annotated[str, Field(min_length=1, description="Environment variable key to delete")],
    ) -> ToolResult:
        """Stop managing a variable and remove it from the process environment."""
        log_request("delete-env-var", key=key)
        sanitized = sanitize_env_key(key)
        var = store.delete(sanitized)
        if var is None:
            return log_response("delete-env-var", ToolResult.error(f"Environment variable {sanitized} not found."))
        lines = [
            "Environment variable deleted successfully:",
            f"Key: {var.key}",
            f"Description: {var.description or 'No description'}",
            f"Was Secret: {'Yes' if var.is_secret else 'No'}",
        ]
        return log_response("delete-env-var", ToolResult.ok("\n".join(lines)))

    async def export_env_vars(
        include_secrets: Annotated[bool, Field(description="Whether to include secret variables in the export")] = False,
        include_comments: Annotated[bool, Field(description="Whether to include descriptions as comments")] = False,
    ) -> ToolResult:
        """Render managed variables as a .env file inside a code block.

        Secrets are excluded unless include_secrets is set, and when they are
        included their real values are written.
        """
        log_request("export-env-vars", include_secrets=include_secrets, include_comments=include_comments)
        variables = store.list_vars(include_secrets=include_secrets)
        if not variables:
            return log_response("export-env-vars", ToolResult.ok("No environment variables to export."))

        lines = [
            "# Environment Variables Export",
            f"# Generated on: {utcnow().isoformat()}",
            f"# Total variables: {len(variables)}",
            "",
        ]
        for var in variables:
            if include_comments and var.description:
                lines.append(f"# {var.description}")
            if var.is_secret:
                lines.append("# WARNING: This is a secret value")
            lines.append(f"{var.key}={var.value}")
            lines.append("")

        secret_count = store.secret_count()
        if secret_count and not include_secrets:
            lines.append(f"# Note: {secret_count} secret variables were excluded from this export")
            lines.append("# Use include_secrets=true to include them")

        body = "\n".join(lines).rstrip("\n")
        return log_response("export-env-vars", ToolResult.ok(f"Environment Variables Export:\n\n```\n{body}\n```"))

    return [
        ToolDefinition("set-env-var", "Set or update an environment variable with optional description", "env", set_env_var),
        ToolDefinition("get-env-var", "Get the value of an environment variable", "env", get_env_var),
        ToolDefinition("list-env-vars", "List all managed environment variables with optional filtering", "env", list_env_vars),
        ToolDefinition("delete-env-var", "Delete an environment variable", "env", delete_env_var),
        ToolDefinition("export-env-vars", "Export environment variables in .env file format", "env", export_env_vars),
    ]
