#!/usr/bin/env python3
"""
Notification Channels

Channels deliver one rendered message to one recipient. Email over SMTP is
the only channel the marketplace needs; the abstract base keeps delivery
swappable (tests and dry-run deployments use the same interface).

Usage:
    from notification.channels import EmailChannel

    channel = EmailChannel(config.email)
    channel.send(recipient, subject, body, {'html': html_body})
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from tenacity import Retrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from core.config_loader import EmailConfig
from core.utils import mask_email

logger = logging.getLogger(__name__)


class NotificationChannel(ABC):
    """
    Abstract base class for all notification channels.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the channel type identifier."""
        pass

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        """
        Send a notification through this channel.

        Args:
            recipient: Target recipient (format depends on channel)
            subject: Notification subject/title
            body: Plain-text body
            metadata: Additional channel-specific data (e.g. 'html')

        Returns:
            True if sent successfully, False otherwise
        """
        pass

    def validate_config(self) -> bool:
        return True


class EmailChannel(NotificationChannel):
    """Email notification channel via SMTP."""

    def __init__(self, config: EmailConfig):
        self.config = config

    @property
    def channel_type(self) -> str:
        return 'email'

    def validate_config(self) -> bool:
        return all([
            self.config.smtp_server,
            self.config.smtp_port,
            self.config.smtp_username,
            self.config.smtp_password,
        ])

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        if self.config.dry_run:
            logger.info(f"[dry-run] Email to {mask_email(recipient)}: {subject}")
            return True

        if not self.validate_config():
            logger.error("Email not configured - SMTP settings missing")
            return False

        msg = self._build_message(recipient, subject, body, metadata)

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(max(1, self.config.retry_attempts)),
                wait=wait_fixed(self.config.retry_wait_seconds),
                retry=retry_if_exception_type((smtplib.SMTPException, OSError)),
                reraise=True,
            ):
                with attempt:
                    self._deliver(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {mask_email(recipient)}: {e}")
            return False

        logger.info(f"Email sent to {mask_email(recipient)}")
        return True

    def _build_message(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = f'"{self.config.from_name}" <{self.config.from_email}>'
        msg['To'] = recipient
        msg['Subject'] = subject
        msg.attach(MIMEText(body, 'plain', 'utf-8'))

        html_body = metadata.get('html')
        if html_body:
            msg.attach(MIMEText(html_body, 'html', 'utf-8'))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        if self.config.smtp_port == 465:
            server_cls = smtplib.SMTP_SSL
        else:
            server_cls = smtplib.SMTP

        with server_cls(self.config.smtp_server, self.config.smtp_port) as server:
            if server_cls is smtplib.SMTP:
                server.starttls()
            server.login(self.config.smtp_username, self.config.smtp_password)
            server.send_message(msg)
