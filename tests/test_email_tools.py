"""
Email tools and the SMTP-backed EmailService.

The tools are exercised against RecordingEmailService (conftest); the real
EmailService is exercised with smtplib patched out.
"""

import smtplib

import pytest

from core.config import EmailConfig, load_config
from core.email_service import EmailService
from core.models import EmailMessage, SendResult
from tests.conftest import SMTP_ENV, RecordingEmailService
from tools.context import ToolContext
from tools.registry import build_registry


async def test_send_email(registry, mailer):
    result = await registry.dispatch(
        "send-email",
        {"to": "a@x.test, b@x.test", "subject": "Hi", "text": "Body", "bcc": "boss@x.test"},
    )

    assert result.success
    assert result.text.startswith("Email sent successfully!")
    assert "To: a@x.test, b@x.test" in result.text
    assert "BCC: boss@x.test" in result.text
    assert "Message ID: <test-message@test.local>" in result.text
    [message] = mailer.sent
    assert message.to == ["a@x.test", "b@x.test"]
    assert message.bcc == ["boss@x.test"]


async def test_invalid_address_sends_nothing(registry, mailer):
    result = await registry.dispatch("send-email", {"to": "a@x.test", "cc": "not-an-email", "subject": "s", "text": "t"})

    assert result.success is False
    assert result.text == "Error: Invalid email address(es): not-an-email"
    assert mailer.sent == []


async def test_blank_recipient_list(registry):
    result = await registry.dispatch("send-email", {"to": " , ", "subject": "s", "text": "t"})
    assert result.text == "Error: At least one recipient email address is required"


async def test_smtp_failure_becomes_failure_result(config, mailer):
    failing = RecordingEmailService(config.email, result=SendResult(success=False, error="Connection refused"))
    registry = build_registry(ToolContext(config=config, email=failing))

    result = await registry.dispatch("send-email", {"to": "a@x.test", "subject": "s", "text": "t"})

    assert result.success is False
    assert result.text == "Error: Failed to send email: Connection refused"


async def test_not_configured():
    registry = build_registry(ToolContext(config=load_config({})))

    result = await registry.dispatch("send-email", {"to": "a@x.test", "subject": "s", "text": "t"})
    assert result.text == "Error: Email service is not properly configured. Please check SMTP settings."

    check = await registry.dispatch("test-email", {})
    assert check.success is False
    assert "- SMTP User: Not set" in check.text


async def test_send_html_email(registry, mailer):
    result = await registry.dispatch("send-html-email", {"to": "a@x.test", "subject": "s", "html": "<b>hi</b>", "text": "hi"})

    assert result.text.startswith("HTML email sent successfully!")
    assert "Format: HTML with text fallback" in result.text
    assert mailer.sent[0].html == "<b>hi</b>"


async def test_test_email(config):
    ok = build_registry(ToolContext(config=config, email=RecordingEmailService(config.email)))
    down = build_registry(ToolContext(config=config, email=RecordingEmailService(config.email, reachable=False)))

    assert (await ok.dispatch("test-email", {})).text.startswith("Email configuration test successful!")
    failed = await down.dispatch("test-email", {})
    assert failed.success is False
    assert failed.text.startswith("Error: Email connection test failed.")


async def test_task_notification(registry, context, mailer):
    context.tasks.create("Renew cert", "SSL", priority="high", task_id="t1")

    result = await registry.dispatch(
        "send-task-notification", {"to": "ops@x.test", "task_id": "t1", "action": "completed", "message": "Done!"}
    )

    assert result.text.startswith("Task notification sent successfully!")
    [message] = mailer.sent
    assert message.subject == "Task completed: Renew cert"
    assert "Title: Renew cert" in message.text
    assert "Additional Message:\nDone!" in message.text


async def test_task_notification_for_missing_task(registry, mailer):
    missing = await registry.dispatch("send-task-notification", {"to": "ops@x.test", "task_id": "gone", "action": "updated"})
    assert missing.text == "Error: Task with ID gone not found."

    deleted = await registry.dispatch("send-task-notification", {"to": "ops@x.test", "task_id": "gone", "action": "deleted"})
    assert deleted.success
    assert mailer.sent[0].subject == "Task deleted: gone"


class FakeSMTP:
    """Stands in for smtplib.SMTP and remembers every session opened."""

    sessions = []
    fail_login = False

    def __init__(self, host, port, timeout):
        self.host, self.port, self.timeout = host, port, timeout
        self.sent = []
        self.closed = False
        FakeSMTP.sessions.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return False

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"Authentication failed")
        self.credentials = (user, password)

    def noop(self):
        pass

    def send_message(self, message, from_addr, to_addrs):
        self.sent.append((message, from_addr, to_addrs))

    def close(self):
        self.closed = True


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.sessions = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def smtp_registry(config, fake_smtp):
    """Registry whose email tools use the real EmailService over FakeSMTP."""
    context = ToolContext(config=config)
    return context, build_registry(context)


class TestEmailService:
    @pytest.fixture
    def email_config(self):
        return load_config(dict(SMTP_ENV)).email

    async def test_connection_error_is_returned_not_raised(self, email_config, monkeypatch):
        def refuse(*args, **kwargs):
            raise ConnectionRefusedError("Connection refused")

        monkeypatch.setattr(smtplib, "SMTP", refuse)

        result = await EmailService(email_config).send(EmailMessage(to=["a@x.test"], subject="s", text="t"))

        assert result.success is False
        assert "Connection refused" in result.error

    async def test_delivers_to_every_recipient(self, email_config, fake_smtp):
        message = EmailMessage(to=["a@x.test"], subject="s", text="t", cc=["c@x.test"], bcc=["b@x.test"])
        result = await EmailService(email_config).send(message)

        assert result.success
        [smtp] = fake_smtp.sessions
        assert (smtp.host, smtp.port, smtp.timeout) == ("smtp.test.local", 2525, 30)
        assert smtp.credentials == ("robot@test.local", "hunter2")
        mime, sender, recipients = smtp.sent[0]
        assert recipients == ["a@x.test", "c@x.test", "b@x.test"]
        assert "Bcc" not in mime
        assert mime["Message-ID"] == result.message_id
        assert smtp.closed

    async def test_multiline_subject_is_a_failure_result(self, email_config, fake_smtp):
        result = await EmailService(email_config).send(
            EmailMessage(to=["a@x.test"], subject="Hi\nBcc: evil@x.test", text="t")
        )

        assert result.success is False
        assert "linefeed or carriage return" in result.error
        assert fake_smtp.sessions == []

    async def test_failed_login_closes_the_connection(self, email_config, fake_smtp):
        fake_smtp.fail_login = True
        service = EmailService(email_config)

        result = await service.send(EmailMessage(to=["a@x.test"], subject="s", text="t"))
        reachable = await service.test_connection()

        assert result.success is False
        assert reachable is False
        assert len(fake_smtp.sessions) == 2
        assert all(smtp.closed for smtp in fake_smtp.sessions)

    def test_build_message_with_html(self):
        service = EmailService(EmailConfig(sender="me@x.test"))
        mime = service.build_message(EmailMessage(to=["a@x.test"], subject="s", text="plain", html="<p>rich</p>"))

        assert mime["From"] == "me@x.test"
        assert mime.is_multipart()


class TestHeaderSafety:
    """Line breaks in a subject never escape a tool as an exception."""

    @pytest.mark.parametrize("tool, body", [("send-email", {"text": "t"}), ("send-html-email", {"html": "<p>t</p>"})])
    async def test_subject_with_line_break(self, smtp_registry, fake_smtp, tool, body):
        _, registry = smtp_registry

        result = await registry.dispatch(tool, {"to": "a@x.test", "subject": "Hi\r\nBcc: evil@x.test", **body})

        assert result.success is False
        assert result.text.startswith("Error: Failed to send")
        assert fake_smtp.sessions == []

    async def test_task_title_with_line_break(self, smtp_registry, fake_smtp):
        _, registry = smtp_registry
        await registry.dispatch("create-task", {"id": "t1", "title": "Line1\nLine2", "description": "d"})

        result = await registry.dispatch(
            "send-task-notification", {"to": "ops@x.test", "task_id": "t1", "action": "created"}
        )

        assert result.success
        assert "Subject: Task created: Line1 Line2" in result.text
        [smtp] = fake_smtp.sessions
        mime, _, _ = smtp.sent[0]
        assert mime["Subject"] == "Task created: Line1 Line2"
        assert "Title: Line1\nLine2" in mime.get_content()
