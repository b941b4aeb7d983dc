"""Timeline entry storage and queries."""

from sqla_timeline.entries.models import TimelineEntry, TimelineEntryMixin
from sqla_timeline.entries.repository import TimelineEntryRepository


__all__ = [
    "TimelineEntry",
    "TimelineEntryMixin",
    "TimelineEntryRepository",
]
