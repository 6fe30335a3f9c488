from database.repositories.base import BaseRepository
from database.repositories.user import UserRepository
from database.repositories.match import MatchRepository
from database.repositories.message import MessageRepository
from database.repositories.email_verification import EmailVerificationRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'MatchRepository',
    'MessageRepository',
    'EmailVerificationRepository',
]
