"""Timeline entry database models.

Every destination table shares the column layout of ``TimelineEntryMixin``.
Extra columns declared on a concrete entry model become dedicated
destinations for ``meta`` keys of the same name; all other metadata is
stored in the ``metadata`` JSON document.

Example:
    class CommentTimelineEntry(Base, TimelineEntryMixin):
        __tablename__ = "comment_timeline_entries"

        post_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
"""

from typing import Any

from sqlalchemy import BigInteger, ColumnElement, Index, String, and_, false, literal
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from sqla_timeline.config import settings
from sqla_timeline.constants import (
    ACTION_ALIASES,
    MAX_ACTION_LENGTH,
    MAX_DISPLAY_NAME_LENGTH,
    MAX_TYPE_NAME_LENGTH,
    RESERVED_COLUMNS,
    TimelineAction,
)
from sqla_timeline.database.base import (
    Base,
    BigIntegerKey,
    JSONDocument,
    NetworkAddress,
    TimestampMixin,
)
from sqla_timeline.database.json_ops import has_attribute, new_value_text
from sqla_timeline.recording.attribution import resolve_actor, subject_reference
from sqla_timeline.recording.changes import serialize_value


def _json_text(value: Any) -> str | None:
    """Text form of a value as stored in a change set."""
    value = serialize_value(value)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class TimelineEntryMixin(TimestampMixin):
    """Column layout and query predicates shared by all entry tables.

    Attributes:
        subject_type: Class name of the tracked instance
        subject_id: Primary key of the tracked instance
        action: create, update or destroy
        change_set: {attribute: [old, new]}, empty for destroy
        metadata_: Metadata without a dedicated column
        actor_type: Class name of a persisted actor
        actor_id: Primary key of a persisted actor
        actor_display_name: Name of a non-persisted actor
        origin: Client network address
    """

    id: Mapped[int] = mapped_column(
        BigIntegerKey,
        primary_key=True,
        autoincrement=True,
    )

    # What changed
    subject_type: Mapped[str | None] = mapped_column(
        String(MAX_TYPE_NAME_LENGTH),
        nullable=True,
    )
    subject_id: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )
    action: Mapped[str] = mapped_column(
        String(MAX_ACTION_LENGTH),
        nullable=False,
    )
    change_set: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=dict,
        server_default="{}",
    )
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata",  # Column name in database
        JSONDocument,
        nullable=False,
        default=dict,
        server_default="{}",
    )

    # Who changed it
    actor_type: Mapped[str | None] = mapped_column(
        String(MAX_TYPE_NAME_LENGTH),
        nullable=True,
    )
    actor_id: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )
    actor_display_name: Mapped[str | None] = mapped_column(
        String(MAX_DISPLAY_NAME_LENGTH),
        nullable=True,
    )
    origin: Mapped[str | None] = mapped_column(
        NetworkAddress,
        nullable=True,
    )

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        table = cls.__tablename__
        return (
            Index(f"ix_{table}_subject", "subject_type", "subject_id"),
            Index(f"ix_{table}_actor", "actor_type", "actor_id"),
            Index(f"ix_{table}_change_set", "change_set", postgresql_using="gin"),
            Index(f"ix_{table}_metadata", "metadata", postgresql_using="gin"),
            Index(f"ix_{table}_origin", "origin"),
        )

    @classmethod
    def destination_columns(cls) -> frozenset[str]:
        """Names of the extra columns that receive metadata values."""
        return frozenset(c.name for c in cls.__table__.columns) - RESERVED_COLUMNS

    @classmethod
    def for_subject(cls, subject_type: str, subject_id: Any) -> ColumnElement[bool]:
        """Entries recorded for the given subject reference."""
        return and_(cls.subject_type == subject_type, cls.subject_id == subject_id)

    @classmethod
    def for_record(cls, record: Any) -> ColumnElement[bool]:
        """Entries recorded for a model instance."""
        return cls.for_subject(*subject_reference(record))

    @classmethod
    def for_actor(cls, actor: Any) -> ColumnElement[bool]:
        """Entries attributed to an actor.

        Accepts the same kinds of actor the recorder does: a persisted
        model instance, or a string/object matched by display name.
        """
        attribution = resolve_actor(actor)
        if attribution.actor_type is not None:
            return and_(
                cls.actor_type == attribution.actor_type,
                cls.actor_id == attribution.actor_id,
            )
        if attribution.actor_display_name is not None:
            return cls.actor_display_name == attribution.actor_display_name
        return false()

    @classmethod
    def for_origin(cls, origin: str) -> ColumnElement[bool]:
        """Entries recorded from a network address."""
        return cls.origin == origin

    @classmethod
    def with_action(cls, action: Any) -> ColumnElement[bool]:
        """Entries with the given lifecycle action."""
        key = action.value if isinstance(action, TimelineAction) else str(action)
        return cls.action == ACTION_ALIASES[key].value

    @classmethod
    def with_changed_attribute(cls, attribute: str) -> ColumnElement[bool]:
        """Entries whose change set contains ``attribute``."""
        return has_attribute(cls.change_set, literal(attribute, String))

    @classmethod
    def with_changed_value_to(cls, attribute: str, value: Any) -> ColumnElement[bool]:
        """Entries where ``attribute`` changed to ``value``.

        The value is serialized the way change sets are and compared as
        JSON text, so enums match by value and booleans as true/false.
        """
        new_value = new_value_text(cls.change_set, literal(attribute, String))
        expected = _json_text(value)
        if expected is None:
            return and_(cls.with_changed_attribute(attribute), new_value.is_(None))
        return new_value == expected

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, action={self.action}, "
            f"subject_type={self.subject_type}, subject_id={self.subject_id})>"
        )


class TimelineEntry(Base, TimelineEntryMixin):
    """Default destination for timelines declared without an entry model."""

    __tablename__ = settings.default_table_name
