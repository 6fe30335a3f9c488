import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, delete

from database.models import EmailVerification
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class EmailVerificationRepository(BaseRepository):
    def get_by_token(self, token: str) -> Optional[EmailVerification]:
        stmt = select(EmailVerification).where(EmailVerification.token == token)
        return self.db.execute(stmt).scalar_one_or_none()

    def replace_for_email(self, email: str, token: str, expires_at: datetime) -> EmailVerification:
        """Drop any outstanding token for the email and store a new one."""
        self.delete_for_email(email)
        record = EmailVerification(email=email, token=token, expires_at=expires_at)
        self.db.add(record)
        self.db.flush()
        return record

    def delete(self, record: EmailVerification) -> None:
        self.db.delete(record)

    def delete_for_email(self, email: str) -> int:
        result = self.db.execute(
            delete(EmailVerification).where(EmailVerification.email == email)
        )
        return result.rowcount
