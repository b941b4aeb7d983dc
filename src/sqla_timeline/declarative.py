"""Declaring timelines on models.

Example:
    @timeline(only=["title", "content"], meta={"app": "cms"})
    class Post(Base):
        __tablename__ = "posts"
        ...

    has_timeline(
        Comment,
        CommentTimelineEntry,
        on=["create", "update"],
        meta={"post_id": Accessor("post_id")},
    )
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from sqla_timeline.constants import ACTION_ALIASES, ALL_ACTIONS, TimelineAction
from sqla_timeline.entries.models import TimelineEntry, TimelineEntryMixin
from sqla_timeline.errors import ConfigurationError
from sqla_timeline.recording.configuration import TimelineConfiguration
from sqla_timeline.recording.metadata import normalize_meta
from sqla_timeline.recording.registry import TimelineRegistry, default_registry


ModelT = TypeVar("ModelT", bound=type)


def _normalize_actions(on: Iterable[Any] | None) -> frozenset[TimelineAction]:
    if on is None:
        return ALL_ACTIONS
    actions = set()
    for action in on:
        key = action.value if isinstance(action, TimelineAction) else str(action)
        if key not in ACTION_ALIASES:
            raise ConfigurationError(
                f"Unknown timeline action {key!r}",
                details={"allowed": sorted(ACTION_ALIASES)},
            )
        actions.add(ACTION_ALIASES[key])
    return frozenset(actions)


def has_timeline(
    owner: type,
    entry_model: type | None = None,
    *,
    on: Iterable[Any] | None = None,
    only: Iterable[str] | None = None,
    ignore: Iterable[str] | None = None,
    meta: Mapping[str, Any] | None = None,
    relationship_name: str | None = None,
    registry: TimelineRegistry | None = None,
) -> TimelineConfiguration:
    """Track changes of a model class on a timeline.

    Args:
        owner: The mapped model class to track
        entry_model: Entry model to write to (default ``TimelineEntry``)
        on: Actions to record: create, update, destroy (default all)
        only: Limit tracking to these attributes
        ignore: Attributes to exclude from tracking
        meta: Metadata mapping (see ``sqla_timeline.recording.metadata``)
        relationship_name: Name of the owner -> entries relationship
            (default: the entry table name)
        registry: Registry to use (default ``default_registry``)

    Returns:
        The registered configuration

    Raises:
        ConfigurationError: If this timeline is already declared, or an
            option is invalid
    """
    entry_model = entry_model or TimelineEntry
    if not issubclass(entry_model, TimelineEntryMixin):
        raise ConfigurationError(
            f"{entry_model.__name__} must inherit from TimelineEntryMixin",
            owner=owner.__name__,
            entry_model=entry_model.__name__,
        )

    config = TimelineConfiguration(
        owner=owner,
        entry_model=entry_model,
        on=_normalize_actions(on),
        only=frozenset(only) if only is not None else None,
        ignore=frozenset(ignore or ()),
        meta=normalize_meta(meta),
        relationship_name=relationship_name or entry_model.__tablename__,
    )
    return (registry or default_registry).register(config)


def timeline(
    entry_model: type | None = None,
    **options: Any,
) -> Callable[[ModelT], ModelT]:
    """Class decorator form of ``has_timeline``.

    Example:
        @timeline(ignore=["updated_at"])
        class Post(Base):
            ...
    """

    def decorator(owner: ModelT) -> ModelT:
        has_timeline(owner, entry_model, **options)
        return owner

    return decorator
