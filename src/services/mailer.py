"""Transactional email over SMTP."""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from starlette.concurrency import run_in_threadpool

from src.config import Settings, get_settings
from src.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class Mailer:
    """Sends HTML email through the configured SMTP transport."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        """Check if an SMTP host is configured."""
        return bool(self.settings.email_host)

    def build_message(
        self,
        subject: str,
        html: str,
        send_to: str,
        sent_from: str,
        reply_to: str | None = None,
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = sent_from or self.settings.email_user
        msg["To"] = send_to
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        cfg = self.settings
        with smtplib.SMTP(cfg.email_host, cfg.email_port, timeout=cfg.email_timeout) as client:
            if cfg.email_use_tls:
                client.starttls(context=ssl.create_default_context())
            if cfg.email_user:
                client.login(cfg.email_user, cfg.email_pass)
            client.send_message(msg)

    async def send_email(
        self,
        subject: str,
        html: str,
        send_to: str,
        sent_from: str,
        reply_to: str | None = None,
    ) -> None:
        """Send one email. Raises EmailDeliveryError if the transport fails."""
        if not self.is_configured:
            logger.warning("Mail transport not configured, cannot send email")
            raise EmailDeliveryError("Email not sent, please try again")

        msg = self.build_message(subject, html, send_to, sent_from, reply_to)
        try:
            await run_in_threadpool(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception(f"Failed to send email to {send_to}: {e}")
            raise EmailDeliveryError("Email not sent, please try again") from e

        logger.info(f"Email '{subject}' sent to {send_to}")