"""API route handlers."""

from .auth import router as auth_router
from .users import router as users_router
from .matches import router as matches_router
from .messages import router as messages_router
