#!/usr/bin/env python3
"""
Account email notifications.

Delivery is best-effort: a failed send is logged and reported as False,
never raised, so signup and password flows complete regardless.
"""

import logging
from typing import Optional

from core.config_loader import AppConfig
from core.utils import mask_email
from notification.channels import NotificationChannel, EmailChannel
from notification.message_builder import NotificationMessageBuilder, EmailContent

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, config: AppConfig, channel: Optional[NotificationChannel] = None):
        self.config = config
        self.channel = channel or EmailChannel(config.email)
        self.builder = NotificationMessageBuilder(config.email.frontend_url)

    def send_verification_email(self, email: str, display_name: str, token: str) -> bool:
        content = self.builder.verification_email(
            display_name, token, expires_hours=self.config.auth.verification_token_hours
        )
        return self._send(email, content, 'verification')

    def send_password_reset_email(self, email: str, display_name: str, token: str) -> bool:
        content = self.builder.password_reset_email(
            display_name, token, expires_hours=self.config.auth.password_reset_token_hours
        )
        return self._send(email, content, 'password_reset')

    def _send(self, recipient: str, content: EmailContent, kind: str) -> bool:
        sent = self.channel.send(recipient, content.subject, content.text, {'html': content.html})
        if not sent:
            logger.warning(f"{kind} email to {mask_email(recipient)} was not delivered")
        return sent
