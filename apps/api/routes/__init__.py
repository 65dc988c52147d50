from .cats import router as cats_router
from .notifications import router as notifications_router
from .reminders import router as reminders_router

__all__ = [
    "cats_router",
    "notifications_router",
    "reminders_router",
]
