"""Attribute-level change timelines for SQLAlchemy models.

Declare a timeline on a model, and every create, update and destroy
flushed through SQLAlchemy is appended to a timeline table together with
the acting user, client address and configured metadata.
"""

from sqla_timeline.constants import TimelineAction
from sqla_timeline.context import (
    clear_metadata,
    clear_request_context,
    current_actor,
    current_origin,
    disable,
    enable,
    get_metadata,
    get_request_context,
    is_enabled,
    merge_metadata,
    set_metadata,
    set_request_context,
    timeline_context,
    without_timeline,
)
from sqla_timeline.declarative import has_timeline, timeline
from sqla_timeline.entries import (
    TimelineEntry,
    TimelineEntryMixin,
    TimelineEntryRepository,
)
from sqla_timeline.errors import (
    ConfigurationError,
    PersistenceError,
    ResolutionError,
    TimelineError,
)
from sqla_timeline.recording import (
    Accessor,
    Computed,
    Literal,
    TimelineConfiguration,
    TimelineRecorder,
    TimelineRegistry,
    default_registry,
)


__version__ = "0.1.0"

__all__ = [
    "Accessor",
    "Computed",
    "ConfigurationError",
    "Literal",
    "PersistenceError",
    "ResolutionError",
    "TimelineAction",
    "TimelineConfiguration",
    "TimelineEntry",
    "TimelineEntryMixin",
    "TimelineEntryRepository",
    "TimelineError",
    "TimelineRecorder",
    "TimelineRegistry",
    "clear_metadata",
    "clear_request_context",
    "current_actor",
    "current_origin",
    "default_registry",
    "disable",
    "enable",
    "get_metadata",
    "get_request_context",
    "has_timeline",
    "is_enabled",
    "merge_metadata",
    "set_metadata",
    "set_request_context",
    "timeline",
    "timeline_context",
    "without_timeline",
]
