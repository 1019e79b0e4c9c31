"""
SMTP mail transport (STARTTLS, e.g. Gmail on port 587).
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from ..config import MailSettings
from ..errors import MailDeliveryError, MailNotConfiguredError
from .base import MailMessage, MailTransport

logger = logging.getLogger(__name__)


class SmtpMailTransport(MailTransport):
    """Sends messages through an authenticated SMTP relay."""

    def __init__(self, settings: MailSettings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    def build_email(self, message: MailMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = formataddr((message.sender_name, self.settings.user or ""))
        email["To"] = message.to
        email["Subject"] = message.subject
        if message.reply_to:
            email["Reply-To"] = message.reply_to
        for name, value in message.headers.items():
            email[name] = value
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def send(self, message: MailMessage) -> None:
        if not self.is_configured:
            logger.error("SMTP credentials not configured")
            raise MailNotConfiguredError()

        email = self.build_email(message)
        try:
            with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.settings.timeout) as smtp:
                smtp.starttls()
                smtp.login(self.settings.user, self.settings.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", message.to, e)
            raise MailDeliveryError(str(e)) from e

        logger.info("Idea submission sent to %s", message.to)
