"""
Notification Module

Account emails (verification, password reset) delivered over SMTP.

Usage:
    from notification import NotificationService

    service = NotificationService(config)
    service.send_verification_email('couple@example.com', 'Ann Lee & Bo Kim', token)
"""

from notification.channels import (
    NotificationChannel,
    EmailChannel,
)

from notification.message_builder import (
    NotificationMessageBuilder,
    EmailContent,
)

from notification.service import NotificationService

__all__ = [
    # Channels
    'NotificationChannel',
    'EmailChannel',
    # Messages
    'NotificationMessageBuilder',
    'EmailContent',
    # Service
    'NotificationService',
]
