"""
Shared fixtures: fresh config, stores and registry for every test.

Nothing here touches os.environ; the env-var store mirrors into a plain
dict so tests never leak variables into each other or the process.
"""

import pytest

from core.config import load_config
from core.email_service import EmailService
from core.env_store import EnvVarStore
from core.models import SendResult
from tools.context import ToolContext
from tools.registry import build_registry

SMTP_ENV = {
    "SMTP_HOST": "smtp.test.local",
    "SMTP_PORT": "2525",
    "SMTP_USER": "robot@test.local",
    "SMTP_PASS": "hunter2",
    "SMTP_FROM": "robot@test.local",
}


class RecordingEmailService(EmailService):
    """EmailService that records messages instead of talking SMTP."""

    def __init__(self, config, result=None, reachable=True):
        super().__init__(config)
        self.sent = []
        self.result = result or SendResult(success=True, message_id="<test-message@test.local>")
        self.reachable = reachable

    async def send(self, message):
        self.sent.append(message)
        return self.result

    async def test_connection(self):
        return self.reachable


@pytest.fixture
def environ():
    """Stand-in for os.environ."""
    return {"HOME": "/home/tester"}


@pytest.fixture
def config():
    return load_config(dict(SMTP_ENV))


@pytest.fixture
def mailer(config):
    return RecordingEmailService(config.email)


@pytest.fixture
def context(config, environ, mailer):
    return ToolContext(config=config, env_vars=EnvVarStore(environ), email=mailer)


@pytest.fixture
def registry(context):
    return build_registry(context)
