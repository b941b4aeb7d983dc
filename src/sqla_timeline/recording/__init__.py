"""Change capture: filtering, metadata, attribution, registry and recorder."""

from sqla_timeline.recording.attribution import Attribution, resolve_actor
from sqla_timeline.recording.changes import changes_for, serialize_value
from sqla_timeline.recording.configuration import TimelineConfiguration
from sqla_timeline.recording.filters import filter_changes
from sqla_timeline.recording.metadata import (
    Accessor,
    Computed,
    Literal,
    resolve_metadata,
    split_metadata,
)
from sqla_timeline.recording.recorder import TimelineRecorder
from sqla_timeline.recording.registry import TimelineRegistry, default_registry


__all__ = [
    "Accessor",
    "Attribution",
    "Computed",
    "Literal",
    "TimelineConfiguration",
    "TimelineRecorder",
    "TimelineRegistry",
    "changes_for",
    "default_registry",
    "filter_changes",
    "resolve_actor",
    "resolve_metadata",
    "serialize_value",
    "split_metadata",
]
