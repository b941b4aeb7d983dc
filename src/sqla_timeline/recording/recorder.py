"""The single write path into timeline tables.

Called from mapper ``after_insert`` / ``after_update`` / ``after_delete``
events, inside the flush that persists the tracked change. Entries are
inserted on the flush's own connection, so they commit or roll back
together with the change that produced them.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import Connection, insert
from sqlalchemy.exc import SQLAlchemyError

from sqla_timeline.constants import TimelineAction
from sqla_timeline.context.enablement import is_enabled
from sqla_timeline.context.store import get_metadata, get_request_context
from sqla_timeline.errors import PersistenceError
from sqla_timeline.recording.attribution import (
    Attribution,
    resolve_actor,
    subject_reference,
)
from sqla_timeline.recording.changes import ChangeSet, changes_for
from sqla_timeline.recording.configuration import TimelineConfiguration
from sqla_timeline.recording.filters import filter_changes
from sqla_timeline.recording.metadata import resolve_metadata, split_metadata


log = structlog.get_logger()


class TimelineRecorder:
    """Turns one lifecycle event into zero or more timeline entries.

    Each configuration of the owner is evaluated independently; a single
    flush of one instance can write to several entry tables.
    """

    def record(
        self,
        connection: Connection,
        target: Any,
        action: TimelineAction,
        configurations: Sequence[TimelineConfiguration],
    ) -> int:
        """Record a lifecycle event.

        Args:
            connection: Connection of the running flush
            target: The instance being inserted, updated or deleted
            action: The lifecycle action
            configurations: Timelines declared for the instance's class

        Returns:
            Number of entries written

        Raises:
            ResolutionError: If a computed metadata value raises
            PersistenceError: If an entry insert fails
        """
        if not is_enabled():
            return 0

        applicable = [config for config in configurations if config.tracks(action)]
        if not applicable:
            return 0

        raw_changes = changes_for(target, action)
        subject_type, subject_id = subject_reference(target)
        actor, origin = get_request_context()
        attribution = resolve_actor(actor)
        context_metadata = get_metadata()

        written = 0
        for config in applicable:
            change_set = filter_changes(raw_changes, config.only, config.ignore)
            if action is not TimelineAction.DESTROY and not change_set:
                continue

            metadata = resolve_metadata(target, config.meta, context_metadata)
            column_values, generic = split_metadata(
                metadata, config.entry_model.destination_columns()
            )

            self._persist(
                connection,
                config,
                subject_type=subject_type,
                subject_id=subject_id,
                action=action,
                change_set=change_set,
                attribution=attribution,
                origin=origin,
                metadata=generic,
                column_values=column_values,
            )
            written += 1

        return written

    def _persist(
        self,
        connection: Connection,
        config: TimelineConfiguration,
        *,
        subject_type: str,
        subject_id: Any,
        action: TimelineAction,
        change_set: ChangeSet,
        attribution: Attribution,
        origin: str | None,
        metadata: dict[str, Any],
        column_values: dict[str, Any],
    ) -> None:
        table = config.entry_model.__table__
        columns = {column.name: column for column in table.columns}
        now = datetime.now(timezone.utc)

        values: dict[str, Any] = {
            **column_values,
            "subject_type": subject_type,
            "subject_id": subject_id,
            "action": action.value,
            "change_set": change_set,
            "metadata": metadata,
            **attribution.as_columns(),
            "origin": origin,
            "created_at": now,
            "updated_at": now,
        }

        try:
            connection.execute(
                insert(table).values(
                    {columns[name]: value for name, value in values.items()}
                )
            )
        except SQLAlchemyError as exc:
            log.warning(
                "timeline_entry_persist_failed",
                table=table.name,
                subject_type=subject_type,
                subject_id=subject_id,
                action=action.value,
                error=str(exc),
            )
            raise PersistenceError(
                details={
                    "table": table.name,
                    "subject_type": subject_type,
                    "subject_id": subject_id,
                    "action": action.value,
                },
            ) from exc

        log.debug(
            "timeline_entry_recorded",
            table=table.name,
            subject_type=subject_type,
            subject_id=subject_id,
            action=action.value,
            attributes=sorted(change_set),
        )
