# =============================================================================
# core/email_service.py  —  Outbound Mail over SMTP
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends mail through the SMTP server described by EmailConfig, and can
#   check that the server is reachable and accepts our credentials.
#
# FAILURE POLICY:
#   Mail delivery is an external dependency — it WILL fail sometimes (bad
#   password, server down, network blip).  Nothing here raises for that.
#   Every failure comes back as SendResult(success=False, error=...) and the
#   email tools turn it into a failed ToolResult.  Nothing is retried.
#
# WHY A THREAD?
#   smtplib is blocking.  The tool server runs on a single event loop, so
#   each delivery is pushed to a worker thread with asyncio.to_thread() and
#   other requests keep flowing while the SMTP conversation happens.
# =============================================================================

import asyncio
import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import make_msgid

from core.config import EmailConfig
from core.models import EmailMessage, SendResult

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, config: EmailConfig) -> None:
        self.config = config

    @property
    def configured(self) -> bool:
        return self.config.configured

    def status(self) -> dict[str, bool]:
        return {"configured": self.configured}

    def _connect(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.secure:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout)
        else:
            smtp = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
        # The caller only owns the connection once we return it.
        try:
            if not cfg.secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            if cfg.user:
                smtp.login(cfg.user, cfg.password)
        except Exception:
            smtp.close()
            raise
        return smtp

    def build_message(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["From"] = self.config.sender
        mime["To"] = ", ".join(message.to)
        if message.cc:
            mime["Cc"] = ", ".join(message.cc)
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid()
        # Bcc recipients go on the envelope only.
        mime.set_content(message.text or "")
        if message.html:
            mime.add_alternative(message.html, subtype="html")
        return mime

    def _deliver(self, message: EmailMessage) -> SendResult:
        try:
            # Header values with CR/LF (e.g. a multi-line subject) are refused here.
            mime = self.build_message(message)
        except ValueError as exc:
            logger.error("Refusing to send email to %s: %s", ", ".join(message.to), exc)
            return SendResult(success=False, error=str(exc))

        recipients = [*message.to, *message.cc, *message.bcc]
        try:
            with self._connect() as smtp:
                smtp.send_message(mime, from_addr=self.config.sender, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", ", ".join(message.to), exc)
            return SendResult(success=False, error=str(exc) or exc.__class__.__name__)
        return SendResult(success=True, message_id=mime["Message-ID"])

    async def send(self, message: EmailMessage) -> SendResult:
        return await asyncio.to_thread(self._deliver, message)

    async def send_simple(self, to: list[str], subject: str, text: str) -> SendResult:
        return await self.send(EmailMessage(to=to, subject=subject, text=text))

    def _verify(self) -> bool:
        try:
            with self._connect() as smtp:
                smtp.noop()
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email connection test failed: %s", exc)
            return False
        return True

    async def test_connection(self) -> bool:
        return await asyncio.to_thread(self._verify)
