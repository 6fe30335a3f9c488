from sqlalchemy.orm import Session

from database.repositories import (
    UserRepository,
    MatchRepository,
    MessageRepository,
    EmailVerificationRepository,
)


class Repositories:
    """All repositories bound to one session, so a unit of work shares a transaction."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.matches = MatchRepository(db)
        self.messages = MessageRepository(db)
        self.verifications = EmailVerificationRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
