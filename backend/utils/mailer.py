# backend/utils/mailer.py
import logging
import smtplib
from dataclasses import dataclass
from email import policy
from email.message import EmailMessage
from ssl import create_default_context
from typing import Optional

from config import settings
from utils.exceptions import ConfigurationError, EmailError

logger = logging.getLogger(__name__)


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str
    text: Optional[str] = None
    sender: Optional[str] = None
    reply_to: Optional[str] = None


def build_message(email: OutgoingEmail, default_sender: str) -> EmailMessage:
    message = EmailMessage(policy=policy.default)
    message["Subject"] = email.subject
    message["From"] = email.sender or default_sender
    message["To"] = email.to
    if email.reply_to:
        message["Reply-To"] = email.reply_to

    message.set_content(email.text or "Open this message in an HTML-capable mail client.")
    message.add_alternative(email.html, subtype="html")
    return message


class SmtpMailer:
    """Sends OutgoingEmail objects through an SMTP relay (Gmail by default)."""

    def __init__(self, host: str = None, port: int = None, username: str = None,
                 password: str = None, use_tls: bool = None):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username if username is not None else settings.EMAIL_USER
        self.password = password if password is not None else settings.EMAIL_APP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls

    @property
    def sender(self) -> str:
        return self.username

    def send(self, email: OutgoingEmail) -> None:
        if not self.host or not self.username:
            raise ConfigurationError("SMTP_HOST and EMAIL_USER must be configured to send email")

        message = build_message(email, self.sender)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as client:
                client.ehlo()
                if self.use_tls:
                    client.starttls(context=create_default_context())
                    client.ehlo()
                if self.username and self.password:
                    client.login(self.username, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{email.subject}' to {email.to}: {e}")
            raise EmailError(str(e)) from e

        logger.info(f"Email '{email.subject}' sent to {email.to}")
