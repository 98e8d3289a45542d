# =============================================================================
# core/config.py  —  Server Configuration (read ONCE, at startup)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns environment variables into frozen dataclasses.  Everything the
#   server can be told from the outside lives here: its identity, where the
#   HTTP binding listens, how to reach the SMTP server, and which tool
#   categories are switched on.
#
# WHY FROZEN?
#   The registry is built from these values exactly once.  A feature flag
#   that is off at startup stays off for the lifetime of the process — there
#   is no "re-enable" path, so there is nothing that could mutate config.
#
# WHERE DOES .env COME IN?
#   The entry points (tools/mcp_server.py, main.py) call load_dotenv() before
#   load_config(), so values from a local .env file show up in os.environ.
#   This module only reads a mapping — which makes it trivial to test with a
#   plain dict.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.formatting import HIDDEN


class ConfigError(ValueError):
    """Raised when an environment variable has an unusable value."""


@dataclass(frozen=True)
class EmailConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    secure: bool = False
    user: str = ""
    password: str = ""
    sender: str = ""
    timeout: int = 30

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password and self.sender)


@dataclass(frozen=True)
class FeatureFlags:
    task_management: bool = True
    email: bool = True
    environment_variables: bool = True
    demo: bool = True


@dataclass(frozen=True)
class ServerConfig:
    name: str = "task-assistant-mcp"
    version: str = "2.0.0"
    host: str = "127.0.0.1"
    port: int = 3001
    json_response: bool = False
    log_level: str = "INFO"
    email: EmailConfig = field(default_factory=EmailConfig)
    features: FeatureFlags = field(default_factory=FeatureFlags)


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1")


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigError(f"Environment variable {key} must be a valid number, got {value!r}") from None


def load_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build a ServerConfig from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ.

    Raises:
        ConfigError: if a numeric variable is not a number.
    """
    env = os.environ if environ is None else environ

    email = EmailConfig(
        host=env.get("SMTP_HOST", "smtp.gmail.com"),
        port=_get_int(env, "SMTP_PORT", 587),
        secure=_get_bool(env, "SMTP_SECURE", False),
        user=env.get("SMTP_USER", ""),
        password=env.get("SMTP_PASS", ""),
        sender=env.get("SMTP_FROM", ""),
        timeout=_get_int(env, "SMTP_TIMEOUT", 30),
    )

    features = FeatureFlags(
        task_management=_get_bool(env, "FEATURE_TASK_MANAGEMENT_ENABLED", True),
        email=_get_bool(env, "FEATURE_EMAIL_ENABLED", True),
        environment_variables=_get_bool(env, "FEATURE_ENV_VARS_ENABLED", True),
        demo=_get_bool(env, "FEATURE_DEMO_ENABLED", True),
    )

    return ServerConfig(
        name=env.get("MCP_SERVER_NAME", "task-assistant-mcp"),
        version=env.get("MCP_SERVER_VERSION", "2.0.0"),
        host=env.get("HOST", "127.0.0.1"),
        port=_get_int(env, "PORT", 3001),
        json_response=_get_bool(env, "MCP_JSON_RESPONSE", False),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        email=email,
        features=features,
    )


def validate_config(config: ServerConfig) -> list[str]:
    """Return human-readable warnings about an incomplete configuration.

    Missing SMTP credentials are not fatal — the server still starts, the
    email tools just report that they are not configured.
    """
    warnings = []
    if config.features.email:
        if not config.email.user:
            warnings.append("SMTP_USER is required when email feature is enabled")
        if not config.email.password:
            warnings.append("SMTP_PASS is required when email feature is enabled")
        if not config.email.sender:
            warnings.append("SMTP_FROM is required when email feature is enabled")
    return warnings


def _enabled(flag: bool) -> str:
    return "Enabled" if flag else "Disabled"


def config_summary(config: ServerConfig, include_sensitive: bool = False) -> str:
    """Render the configuration for logs and the get-server-config tool."""
    email = config.email
    user = email.user if include_sensitive else (HIDDEN if email.user else "Not configured")
    return (
        "MCP Server Configuration:\n"
        f"  Name: {config.name}\n"
        f"  Version: {config.version}\n"
        f"  Host: {config.host}\n"
        f"  Port: {config.port}\n"
        "  Features:\n"
        f"    - Task Management: {_enabled(config.features.task_management)}\n"
        f"    - Email: {_enabled(config.features.email)}\n"
        f"    - Environment Variables: {_enabled(config.features.environment_variables)}\n"
        f"    - Demo Tools: {_enabled(config.features.demo)}\n"
        "  Email Configuration:\n"
        f"    - Host: {email.host}\n"
        f"    - Port: {email.port}\n"
        f"    - Secure: {email.secure}\n"
        f"    - User: {user}\n"
        f"    - Password: {HIDDEN if email.password else 'Not configured'}\n"
        f"    - From: {email.sender or 'Not configured'}\n"
    )
