# =============================================================================
# tools/email_tools.py  —  Email Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Sends plain-text and HTML mail, checks the SMTP configuration, and mails
#   a notification about a task.  Delivery itself happens in
#   core/email_service.py; these tools only validate input and word the
#   answer.
#
# ADDRESSES:
#   to / cc / bcc arrive as comma-separated strings ("a@x.com, b@y.com").
#   Every address is checked before anything is sent — one bad address
#   fails the whole call and nothing goes out.
#
# WHEN DELIVERY FAILS:
#   The email service never raises for SMTP trouble.  It hands back a
#   SendResult with success=False, and we pass its error text on to the
#   agent as a failed ToolResult.
# =============================================================================

from typing import Annotated, Literal, Optional

from pydantic import Field

from core.formatting import parse_comma_separated
from core.models import EmailMessage, ToolResult
from core.validation import invalid_emails
from tools.context import ToolContext
from tools.logs import log_request, log_response, log_status
from tools.registry import ToolDefinition

TaskAction = Literal["completed", "created", "updated", "deleted"]

Recipients = Annotated[str, Field(description="Email address(es) of recipient(s), comma-separated for multiple")]
Cc = Annotated[Optional[str], Field(description="CC email address(es), comma-separated for multiple")]
Bcc = Annotated[Optional[str], Field(description="BCC email address(es), comma-separated for multiple")]
Subject = Annotated[str, Field(min_length=1, description="Subject line of the email")]

NOT_CONFIGURED = "Email service is not properly configured. Please check SMTP settings."


def _check_recipients(to: list[str], cc: list[str], bcc: list[str]) -> Optional[str]:
    """Return an error message for unusable recipients, or None."""
    bad = invalid_emails([*to, *cc, *bcc])
    if bad:
        return f"Invalid email address(es): {', '.join(bad)}"
    if not to:
        return "At least one recipient email address is required"
    return None


def _recipient_lines(to: list[str], cc: list[str], bcc: list[str]) -> list[str]:
    lines = [f"To: {', '.join(to)}"]
    if cc:
        lines.append(f"CC: {', '.join(cc)}")
    if bcc:
        lines.append(f"BCC: {', '.join(bcc)}")
    return lines


def email_tools(ctx: ToolContext) -> list[ToolDefinition]:
    service = ctx.email
    email_config = ctx.config.email

    async def send_email(
        to: Recipients,
        subject: Subject,
        text: Annotated[str, Field(min_length=1, description="Plain text content of the email")],
        cc: Cc = None,
        bcc: Bcc = None,
    ) -> ToolResult:
        """Send a plain-text email.

        WHEN TO CALL THIS: The user asks to email someone.  Every address in
        to, cc and bcc is validated first; one bad address and nothing is sent.

        Args:
            to: Comma-separated recipients, at least one.
            subject: Single line.  Line breaks make delivery fail.
            text: The body.
            cc / bcc: Optional comma-separated addresses.

        Returns:
            Recipients, subject and the message id on success; the SMTP
            error text on failure.
        """
        log_request("send-email", to=to, subject=subject, cc=cc, bcc=bcc)
        to_list, cc_list, bcc_list = parse_comma_separated(to), parse_comma_separated(cc), parse_comma_separated(bcc)
        problem = _check_recipients(to_list, cc_list, bcc_list)
        if problem:
            return log_response("send-email", ToolResult.error(problem))
        if not service.configured:
            return log_response("send-email", ToolResult.error(NOT_CONFIGURED))

        log_status(f"Sending email to {len(to_list) + len(cc_list) + len(bcc_list)} recipient(s)")
        result = await service.send(EmailMessage(to=to_list, subject=subject, text=text, cc=cc_list, bcc=bcc_list))
        if not result.success:
            return log_response("send-email", ToolResult.error(f"Failed to send email: {result.error}"))

        lines = ["Email sent successfully!", *_recipient_lines(to_list, cc_list, bcc_list)]
        lines.append(f"Subject: {subject}")
        lines.append(f"Message ID: {result.message_id or 'N/A'}")
        return log_response("send-email", ToolResult.ok("\n".join(lines)))

    async def send_html_email(
        to: Recipients,
        subject: Subject,
        html: Annotated[str, Field(min_length=1, description="HTML content of the email")],
        text: Annotated[Optional[str], Field(description="Plain text fallback content")] = None,
        cc: Cc = None,
        bcc: Bcc = None,
    ) -> ToolResult:
        """Send an HTML email, optionally with a plain-text fallback.

        Same recipient rules as send-email.
        """
        log_request("send-html-email", to=to, subject=subject, cc=cc, bcc=bcc)
        to_list, cc_list, bcc_list = parse_comma_separated(to), parse_comma_separated(cc), parse_comma_separated(bcc)
        problem = _check_recipients(to_list, cc_list, bcc_list)
        if problem:
            return log_response("send-html-email", ToolResult.error(problem))
        if not service.configured:
            return log_response("send-html-email", ToolResult.error(NOT_CONFIGURED))

        message = EmailMessage(to=to_list, subject=subject, text=text, html=html, cc=cc_list, bcc=bcc_list)
        result = await service.send(message)
        if not result.success:
            return log_response("send-html-email", ToolResult.error(f"Failed to send HTML email: {result.error}"))

        lines = ["HTML email sent successfully!", *_recipient_lines(to_list, cc_list, bcc_list)]
        lines.append(f"Subject: {subject}")
        lines.append(f"Format: HTML{' with text fallback' if text else ''}")
        lines.append(f"Message ID: {result.message_id or 'N/A'}")
        return log_response("send-html-email", ToolResult.ok("\n".join(lines)))

    async def test_email() -> ToolResult:
        """Check the SMTP settings and try to connect and log in."""
        log_request("test-email")
        if not service.configured:

            def is_set(value: str) -> str:
                return "Set" if value else "Not set"

            return log_response(
                "test-email",
                ToolResult.error(
                    "Email service is not properly configured:\n"
                    f"- SMTP Host: {email_config.host}\n"
                    f"- SMTP Port: {email_config.port}\n"
                    f"- SMTP User: {is_set(email_config.user)}\n"
                    f"- SMTP Password: {is_set(email_config.password)}\n"
                    f"- From Address: {is_set(email_config.sender)}\n"
                    "\n"
                    "Please check your environment variables: SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM"
                ),
            )

        log_status(f"Connecting to {email_config.host}:{email_config.port}")
        if not await service.test_connection():
            return log_response(
                "test-email",
                ToolResult.error(
                    "Email connection test failed. Please verify:\n"
                    "1. SMTP server settings are correct\n"
                    "2. Username and password are valid\n"
                    "3. Network connectivity to SMTP server\n"
                    "4. Firewall settings allow SMTP traffic"
                ),
            )
        return log_response(
            "test-email",
            ToolResult.ok(
                "Email configuration test successful!\n"
                f"- SMTP Host: {email_config.host}\n"
                f"- SMTP Port: {email_config.port}\n"
                f"- SMTP Secure: {email_config.secure}\n"
                f"- From Address: {email_config.sender}\n"
                "- Connection: Working"
            ),
        )

    async def send_task_notification(
        to: Recipients,
        task_id: Annotated[str, Field(description="ID of the task to notify about")],
        action: Annotated[TaskAction, Field(description="Action performed on the task")],
        message: Annotated[
            Optional[str], Field(description="Additional message to include in the notification")
        ] = None,
    ) -> ToolResult:
        """Email a summary of a task after it was created, updated, completed or deleted.

        WHEN TO CALL THIS: Right after changing a task, when the user wants
        someone told about it.  For action="deleted" the task no longer has
        to exist; the mail then names only its id.

        Args:
            to: Comma-separated recipients.
            task_id: The task the mail is about.
            action: "created", "updated", "completed" or "deleted".
            message: Optional extra paragraph appended to the body.
        """
        log_request("send-task-notification", to=to, task_id=task_id, action=action)
        task = ctx.tasks.get(task_id)
        # A deleted task is already gone from the store; the id alone is enough.
        if task is None and action != "deleted":
            return log_response("send-task-notification", ToolResult.error(f"Task with ID {task_id} not found."))

        to_list = parse_comma_separated(to)
        problem = _check_recipients(to_list, [], [])
        if problem:
            return log_response("send-task-notification", ToolResult.error(problem))
        if not service.configured:
            return log_response("send-task-notification", ToolResult.error(NOT_CONFIGURED))

        # Titles may span lines; a mail header may not.
        subject = f"Task {action}: {' '.join((task.title if task else task_id).split())}"
        body = [f"A task has been {action}:", ""]
        if task:
            body.append(f"Title: {task.title}")
            body.append(f"Description: {task.description}")
            body.append(f"Status: {'Completed' if task.completed else 'Pending'}")
            body.append(f"Priority: {task.priority}")
            if task.tags:
                body.append(f"Tags: {', '.join(task.tags)}")
            body.append(f"Created: {task.created_at.isoformat()}")
            if task.updated_at:
                body.append(f"Updated: {task.updated_at.isoformat()}")
        else:
            body.append(f"Task ID: {task_id}")
        if message:
            body.extend(["", "Additional Message:", message])
        body.extend(["", "---", "This notification was sent by the MCP Task Management System."])

        result = await service.send_simple(to_list, subject, "\n".join(body))
        if not result.success:
            return log_response(
                "send-task-notification", ToolResult.error(f"Failed to send task notification: {result.error}")
            )
        return log_response(
            "send-task-notification",
            ToolResult.ok(
                "Task notification sent successfully!\n"
                f"To: {', '.join(to_list)}\n"
                f"Subject: {subject}\n"
                f"Action: {action}\n"
                f"Message ID: {result.message_id or 'N/A'}"
            ),
        )

    return [
        ToolDefinition("send-email", "Send a simple text email to one or more recipients", "email", send_email),
        ToolDefinition("send-html-email", "Send an HTML email with optional plain text fallback", "email", send_html_email),
        ToolDefinition("test-email", "Test the email configuration by checking connection to SMTP server", "email", test_email),
        ToolDefinition(
            "send-task-notification",
            "Send an email notification about task completion or updates",
            "email",
            send_task_notification,
        ),
    ]
