from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Iterable, Optional

from .config import SmtpConfig

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of one send attempt; `skipped` means nothing was attempted."""

    sent: bool
    skipped: bool = False
    message_id: Optional[str] = None
    recipients: tuple[str, ...] = ()
    error: Optional[str] = None


class SmtpMailer:
    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def send(
        self,
        recipients: Iterable[str],
        document: bytes,
        subject: str,
        body: str,
        *,
        filename: str = "Invoice.pdf",
    ) -> DispatchResult:
        """Send `body` with the rendered document attached. Failures are logged, never raised."""
        recipient_list = tuple(recipients)
        if not self.config.is_configured:
            logger.warning("SMTP config missing; dispatch skipped.")
            return DispatchResult(sent=False, skipped=True, recipients=recipient_list)
        if not recipient_list:
            logger.warning("No recipients; dispatch skipped.")
            return DispatchResult(sent=False, skipped=True)

        msg = self._build_message(recipient_list, document, subject, body, filename)
        message_id = msg["Message-ID"]
        logger.info("Sending %s via %s:%s to %s", filename, self.config.host, self.config.port, ", ".join(recipient_list))
        try:
            self._deliver(msg, recipient_list)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email sending failed: %s", exc)
            return DispatchResult(sent=False, message_id=message_id, recipients=recipient_list, error=str(exc))

        logger.info("Email sent. Message ID: %s", message_id)
        return DispatchResult(sent=True, message_id=message_id, recipients=recipient_list)

    def _build_message(
        self,
        recipients: tuple[str, ...],
        document: bytes,
        subject: str,
        body: str,
        filename: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["Subject"] = subject
        msg["From"] = formataddr((self.config.sender_name, self.config.user))
        msg["To"] = ", ".join(recipients)
        msg["Message-ID"] = make_msgid(domain=_domain_of(self.config.user))
        msg.attach(MIMEText(body, "plain"))

        part = MIMEBase("application", "pdf")
        part.set_payload(document)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", f'attachment; filename="{filename}"')
        msg.attach(part)
        return msg

    def _deliver(self, msg: MIMEMultipart, recipients: tuple[str, ...]) -> None:
        context = ssl.create_default_context()
        if self.config.use_implicit_tls:
            server = smtplib.SMTP_SSL(
                self.config.host, self.config.port, timeout=self.config.timeout_seconds, context=context
            )
        else:
            server = smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout_seconds)
        with server:
            if not self.config.use_implicit_tls:
                server.starttls(context=context)
            if self.config.user:
                server.login(self.config.user, self.config.password)
            server.sendmail(self.config.user, list(recipients), msg.as_string())


def _domain_of(address: str) -> Optional[str]:
    if "@" in address:
        return address.rsplit("@", 1)[1]
    return None
