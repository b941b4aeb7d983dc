"""Attribute-level diffs from SQLAlchemy's own dirty tracking."""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import event, inspect

from sqla_timeline.constants import TimelineAction


ChangeSet = dict[str, list[Any]]


def serialize_value(value: Any) -> Any:
    """Serialize a value to JSON-compatible primitives.

    Recursively converts non-JSON-serializable types to their
    string or primitive representations.

    Args:
        value: Any value to serialize

    Returns:
        JSON-serializable representation of the value
    """
    if isinstance(value, Enum):
        return serialize_value(value.value)

    # Pass through JSON primitives
    if value is None or isinstance(value, str | int | float | bool):
        return value

    result: Any
    if isinstance(value, UUID):
        result = str(value)
    elif isinstance(value, datetime | date | time):
        result = value.isoformat()
    elif isinstance(value, Decimal):
        result = str(value)
    elif isinstance(value, dict):
        result = {str(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list | tuple | set | frozenset):
        result = [serialize_value(item) for item in value]
    else:
        # Fallback: convert to string
        result = str(value)

    return result


def changes_for(obj: Any, action: TimelineAction) -> ChangeSet:
    """Extract the pending changes of a model instance.

    Must be called while the flush is in progress, before attribute
    history is reset.

    Args:
        obj: SQLAlchemy model instance
        action: The lifecycle action being recorded

    Returns:
        Dictionary of changes {attribute: [old, new]}, empty for destroy
    """
    if action is TimelineAction.DESTROY:
        return {}

    changes: ChangeSet = {}
    state = inspect(obj)

    for attr in state.mapper.column_attrs:
        if attr.key.startswith("_"):
            continue

        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue

        old_value = history.deleted[0] if history.deleted else None
        new_value = history.added[0] if history.added else None
        if old_value == new_value:
            continue

        changes[attr.key] = [serialize_value(old_value), serialize_value(new_value)]

    return changes


def _keep_previous_value(*_args: Any) -> None:
    """No-op set listener; registering it with active_history does the work."""


def track_previous_values(owner: type) -> None:
    """Make every column attribute of ``owner`` load its old value on set.

    Without this, assigning to an expired attribute (the normal state
    after a commit) records no previous value and the change set would
    show ``[None, new]``. Runs at class definition time, so it reads
    ``Mapper.columns`` rather than anything that configures mappers.
    """
    for key in inspect(owner).columns.keys():
        event.listen(
            getattr(owner, key),
            "set",
            _keep_previous_value,
            active_history=True,
            propagate=True,
        )
