"""Ambient timeline context: actor, origin, metadata and the global switch."""

from sqla_timeline.context.enablement import (
    disable,
    enable,
    is_enabled,
    without_timeline,
)
from sqla_timeline.context.store import (
    clear_metadata,
    clear_request_context,
    current_actor,
    current_origin,
    get_metadata,
    get_request_context,
    merge_metadata,
    set_metadata,
    set_request_context,
    timeline_context,
)


__all__ = [
    "clear_metadata",
    "clear_request_context",
    "current_actor",
    "current_origin",
    "disable",
    "enable",
    "get_metadata",
    "get_request_context",
    "is_enabled",
    "merge_metadata",
    "set_metadata",
    "set_request_context",
    "timeline_context",
    "without_timeline",
]
