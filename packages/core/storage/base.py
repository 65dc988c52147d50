from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..cats.models import Cat
from ..reminders.models import ReminderInstance


@runtime_checkable
class ReminderStore(Protocol):
    def create_reminder(self, reminder: ReminderInstance) -> None:
        """Persist a new reminder instance."""

    def append_reminders(self, reminders: Sequence[ReminderInstance]) -> None:
        """Persist a batch of new instances in one transaction."""

    def update_reminder(self, reminder: ReminderInstance) -> None:
        """Update an existing reminder instance."""

    def get_reminder(self, reminder_id: str) -> Optional[ReminderInstance]:
        """Return reminder by id."""

    def list_reminders(
        self, active_only: bool = False, cat_id: Optional[str] = None
    ) -> List[ReminderInstance]:
        """List reminder instances ordered by scheduled time."""

    def delete_reminder(self, reminder_id: str) -> bool:
        """Delete a reminder. Returns True if deleted."""


@runtime_checkable
class CatStore(Protocol):
    def create_cat(self, cat: Cat) -> None:
        """Persist a new cat."""

    def update_cat(self, cat: Cat) -> None:
        """Update an existing cat."""

    def get_cat(self, cat_id: str) -> Optional[Cat]:
        """Return cat by id."""

    def list_cats(self) -> List[Cat]:
        """List cats ordered by name."""

    def delete_cat(self, cat_id: str) -> bool:
        """Delete a cat. Reminders referencing it are left in place."""
