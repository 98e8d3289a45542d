"""
Configuration loading from an environment mapping.
"""

import pytest

from core.config import ConfigError, ServerConfig, config_summary, load_config, validate_config


def test_defaults():
    config = load_config({})

    assert config.name == "task-assistant-mcp"
    assert config.version == "2.0.0"
    assert config.port == 3001
    assert config.json_response is False
    assert config.email.host == "smtp.gmail.com"
    assert config.email.port == 587
    assert config.email.configured is False
    assert config.features.task_management
    assert config.features.email
    assert config.features.environment_variables
    assert config.features.demo


def test_values_from_environment():
    config = load_config(
        {
            "MCP_SERVER_NAME": "tasks",
            "PORT": "8080",
            "MCP_JSON_RESPONSE": "TRUE",
            "LOG_LEVEL": "debug",
            "SMTP_SECURE": "1",
            "FEATURE_EMAIL_ENABLED": "false",
            "FEATURE_DEMO_ENABLED": "no",
        }
    )

    assert config.name == "tasks"
    assert config.port == 8080
    assert config.json_response is True
    assert config.log_level == "DEBUG"
    assert config.email.secure is True
    assert config.features.email is False
    # Only "true" and "1" switch a flag on.
    assert config.features.demo is False


def test_bad_number_raises():
    with pytest.raises(ConfigError, match="SMTP_PORT"):
        load_config({"SMTP_PORT": "five"})


def test_config_is_frozen():
    config = load_config({})
    with pytest.raises(AttributeError):
        config.port = 1


def test_validate_warns_about_missing_smtp_credentials():
    warnings = validate_config(load_config({"SMTP_USER": "me@test.local"}))

    assert "SMTP_PASS is required when email feature is enabled" in warnings
    assert "SMTP_FROM is required when email feature is enabled" in warnings
    assert not any("SMTP_USER" in w for w in warnings)


def test_validate_silent_when_email_disabled():
    assert validate_config(load_config({"FEATURE_EMAIL_ENABLED": "false"})) == []


def test_summary_masks_credentials(config):
    hidden = config_summary(config)
    shown = config_summary(config, include_sensitive=True)

    assert "hunter2" not in hidden
    assert "hunter2" not in shown
    assert "User: ***HIDDEN***" in hidden
    assert "User: robot@test.local" in shown
    assert "Password: ***HIDDEN***" in shown


def test_summary_unconfigured():
    summary = config_summary(ServerConfig())
    assert "User: Not configured" in summary
    assert "From: Not configured" in summary
