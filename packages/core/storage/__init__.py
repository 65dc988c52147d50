from .base import CatStore, ReminderStore
from .sqlite import SQLiteCareStore

__all__ = [
    "CatStore",
    "ReminderStore",
    "SQLiteCareStore",
]
