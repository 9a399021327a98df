"""Route modules for the codexmate API."""

from .sessions import router as sessions_router
from .actions import router as actions_router

__all__ = [
    'sessions_router',
    'actions_router',
]
