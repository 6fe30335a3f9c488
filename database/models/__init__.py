from .base import Base
from .user import User, VendorCategory
from .match import Match, MatchStatus, make_pair_key
from .message import Message
from .email_verification import EmailVerification

__all__ = [
    'Base',
    'User',
    'VendorCategory',
    'Match',
    'MatchStatus',
    'make_pair_key',
    'Message',
    'EmailVerification',
]
