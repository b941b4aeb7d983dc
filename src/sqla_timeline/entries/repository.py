"""Read-only repository over timeline entries."""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from sqla_timeline.entries.models import TimelineEntry, TimelineEntryMixin


EntryT = TypeVar("EntryT", bound=TimelineEntryMixin)


class TimelineEntryRepository(Generic[EntryT]):
    """Repository for reading timeline entries.

    Criteria are the predicates defined on the entry model and are
    combined with AND. Entries are append-only, so no write methods
    are exposed.

    Example:
        repo = TimelineEntryRepository(session)
        repo.find(
            TimelineEntry.for_record(post),
            TimelineEntry.with_changed_attribute("title"),
        )
    """

    def __init__(
        self,
        session: Session,
        entry_model: type[EntryT] = TimelineEntry,  # type: ignore[assignment]
    ) -> None:
        self.session = session
        self.entry_model = entry_model

    def find(self, *criteria: ColumnElement[bool]) -> list[EntryT]:
        """Get entries matching all criteria, oldest first.

        Args:
            *criteria: Predicates built from the entry model

        Returns:
            Matching entries in insertion order
        """
        stmt = select(self.entry_model).where(*criteria).order_by(self.entry_model.id)
        return list(self.session.scalars(stmt))

    def for_record(self, record: Any) -> list[EntryT]:
        """Get the full timeline of a model instance.

        Args:
            record: A tracked model instance

        Returns:
            The instance's entries, oldest first
        """
        return self.find(self.entry_model.for_record(record))

    def latest_for(self, record: Any) -> EntryT | None:
        """Get the most recent entry of a model instance.

        Args:
            record: A tracked model instance

        Returns:
            The newest entry, or None if the instance has none
        """
        stmt = (
            select(self.entry_model)
            .where(self.entry_model.for_record(record))
            .order_by(self.entry_model.id.desc())
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def count(self, *criteria: ColumnElement[bool]) -> int:
        """Count entries matching all criteria."""
        stmt = select(func.count()).select_from(self.entry_model).where(*criteria)
        return self.session.scalar(stmt) or 0
