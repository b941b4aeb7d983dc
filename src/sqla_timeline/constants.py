"""Timeline-wide constants."""

from enum import Enum


class TimelineAction(str, Enum):
    """Lifecycle actions recorded on a timeline entry."""

    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


ALL_ACTIONS = frozenset(TimelineAction)

# Accepted spellings for the ``on`` option
ACTION_ALIASES = {
    "create": TimelineAction.CREATE,
    "update": TimelineAction.UPDATE,
    "destroy": TimelineAction.DESTROY,
    "delete": TimelineAction.DESTROY,
}

DEFAULT_TABLE_NAME = "timeline_entries"

# String field lengths
MAX_ACTION_LENGTH = 20
MAX_TYPE_NAME_LENGTH = 255
MAX_DISPLAY_NAME_LENGTH = 255
MAX_IPV6_LENGTH = 45

# Columns owned by the recorder; metadata keys never land in these
RESERVED_COLUMNS = frozenset(
    {
        "id",
        "subject_type",
        "subject_id",
        "action",
        "change_set",
        "metadata",
        "actor_type",
        "actor_id",
        "actor_display_name",
        "origin",
        "created_at",
        "updated_at",
    }
)
