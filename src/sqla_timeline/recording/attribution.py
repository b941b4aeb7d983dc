"""Who made a change: resolving actors and subjects to stored references."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import inspect

from sqla_timeline.constants import MAX_DISPLAY_NAME_LENGTH


@dataclass(frozen=True)
class Attribution:
    """Stored form of an actor.

    At most one of (actor_type, actor_id) and actor_display_name is set.
    """

    actor_type: str | None = None
    actor_id: Any = None
    actor_display_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.actor_type is None
            and self.actor_id is None
            and self.actor_display_name is None
        )

    def as_columns(self) -> dict[str, Any]:
        return {
            "actor_type": self.actor_type,
            "actor_id": self.actor_id,
            "actor_display_name": self.actor_display_name,
        }


NO_ATTRIBUTION = Attribution()


def persisted_identity(obj: Any) -> Any | None:
    """Return the single-column identity of a persisted mapped instance.

    Args:
        obj: Any object

    Returns:
        The primary key value, or None if ``obj`` is not a persisted
        mapped instance with a single-column key
    """
    state = inspect(obj, raiseerr=False)
    if state is None or not getattr(state, "has_identity", False):
        return None
    identity = state.identity
    if identity is None or len(identity) != 1:
        return None
    return identity[0]


def subject_type_name(cls: type) -> str:
    """Name stored as ``subject_type`` for instances of a mapped class.

    Subclasses in a mapped inheritance hierarchy share the name of the
    base class, so their entries are found through the owner's
    relationship and through ``for_record`` alike.
    """
    return inspect(cls).base_mapper.class_.__name__


def subject_reference(obj: Any) -> tuple[str, Any]:
    """Return the (type, id) pair that identifies a tracked instance.

    Falls back to the primary key attributes of the instance inside an
    insert flush, before the identity key is assigned.
    """
    state = inspect(obj)
    if state.has_identity:
        primary_key = state.identity
    else:
        primary_key = state.mapper.primary_key_from_instance(obj)
    return subject_type_name(type(obj)), primary_key[0] if primary_key else None


def _display_name(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value)[:MAX_DISPLAY_NAME_LENGTH]


def resolve_actor(actor: Any) -> Attribution:
    """Turn the ambient actor into an attribution.

    Precedence: strings and enums become a display name; persisted
    mapped instances become type + id; any other object is shown via
    ``str()``; None means no attribution.

    Args:
        actor: The current actor, as set on the timeline context

    Returns:
        The attribution to store on the entry
    """
    if actor is None:
        return NO_ATTRIBUTION

    if isinstance(actor, str | Enum):
        return Attribution(actor_display_name=_display_name(actor))

    identity = persisted_identity(actor)
    if identity is not None:
        return Attribution(actor_type=type(actor).__name__, actor_id=identity)

    return Attribution(actor_display_name=_display_name(actor))
