from .models import Frequency, ReminderInputError, ReminderInstance, ReminderType, series_key
from .recurrence import advance, default_horizon, expand, latest_instance, new_instances
from .service import (
    create_reminder,
    delete_reminder,
    generate_recurring_instances,
    list_reminders,
    reminders_for_cat,
    toggle_reminder,
    upcoming_reminders,
    update_reminder,
)

__all__ = [
    "Frequency",
    "ReminderInputError",
    "ReminderInstance",
    "ReminderType",
    "advance",
    "create_reminder",
    "default_horizon",
    "delete_reminder",
    "expand",
    "generate_recurring_instances",
    "latest_instance",
    "list_reminders",
    "new_instances",
    "reminders_for_cat",
    "series_key",
    "toggle_reminder",
    "upcoming_reminders",
    "update_reminder",
]
