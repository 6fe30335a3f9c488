"""Business logic services."""

from .match_service import MatchService
from .message_service import MessageService
from .auth_service import AuthService
from .user_service import UserService
from .storage_service import StorageService
