"""Monthly tax payment reminder timing.

Delivering the notification is the platform's job; this only works out
when the next reminder fires.
"""

from datetime import datetime

from .schemas import ReminderSettings


def next_reminder(settings: ReminderSettings, after: datetime) -> datetime:
    """Next time the monthly reminder fires strictly after `after`."""
    candidate = after.replace(
        day=settings.day, hour=settings.hour, minute=settings.minute,
        second=0, microsecond=0,
    )
    if candidate > after:
        return candidate

    if after.month == 12:
        return candidate.replace(year=after.year + 1, month=1)
    return candidate.replace(month=after.month + 1)
