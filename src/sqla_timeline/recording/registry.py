"""Registry of timeline configurations.

Registration happens at model definition time and is not guarded
against concurrent registration. Once all models are declared the
registry is only read, so lookups from concurrent flushes need no lock.
"""

from typing import Any

import structlog
from sqlalchemy import Connection, and_, event, inspect
from sqlalchemy.orm import Mapper, foreign, relationship

from sqla_timeline.constants import TimelineAction
from sqla_timeline.errors import ConfigurationError
from sqla_timeline.recording.attribution import subject_type_name
from sqla_timeline.recording.changes import track_previous_values
from sqla_timeline.recording.configuration import TimelineConfiguration
from sqla_timeline.recording.recorder import TimelineRecorder


log = structlog.get_logger()

_LIFECYCLE_EVENTS = (
    ("after_insert", TimelineAction.CREATE),
    ("after_update", TimelineAction.UPDATE),
    ("after_delete", TimelineAction.DESTROY),
)


class TimelineRegistry:
    """Timeline configurations keyed by (owner, entry model).

    The first registration for an owner class installs its mapper
    listeners; every registration adds a view-only relationship from
    the owner to its entries.
    """

    def __init__(self, recorder: TimelineRecorder | None = None) -> None:
        self.recorder = recorder or TimelineRecorder()
        self._configurations: dict[tuple[type, type], TimelineConfiguration] = {}
        self._by_owner: dict[type, list[TimelineConfiguration]] = {}

    def __len__(self) -> int:
        return len(self._configurations)

    def __contains__(self, key: object) -> bool:
        return key in self._configurations

    def register(self, config: TimelineConfiguration) -> TimelineConfiguration:
        """Register a timeline configuration.

        Args:
            config: The configuration to add

        Returns:
            The registered configuration

        Raises:
            ConfigurationError: If the (owner, entry model) pair is taken, or
                the relationship name clashes with an existing attribute
        """
        if config.key in self._configurations:
            raise ConfigurationError(
                owner=config.owner.__name__,
                entry_model=config.entry_model.__name__,
            )

        self._add_relationship(config)
        self._configurations[config.key] = config

        if config.owner not in self._by_owner:
            self._by_owner[config.owner] = []
            self._install_listeners(config.owner)
        self._by_owner[config.owner].append(config)

        log.debug("timeline_registered", **config.describe())
        return config

    def lookup(self, owner: type, entry_model: type) -> TimelineConfiguration | None:
        """Get the configuration for an (owner, entry model) pair, if any."""
        return self._configurations.get((owner, entry_model))

    def for_owner(self, owner: type) -> tuple[TimelineConfiguration, ...]:
        """Get all configurations of an owner, in registration order."""
        return tuple(self._by_owner.get(owner, ()))

    def _add_relationship(self, config: TimelineConfiguration) -> None:
        owner = config.owner
        name = config.relationship_name
        owner_mapper: Mapper[Any] = inspect(owner)

        if owner_mapper.has_property(name) or hasattr(owner, name):
            raise ConfigurationError(
                f"{owner.__name__}.{name} is already defined",
                owner=owner.__name__,
                entry_model=config.entry_model.__name__,
            )

        entry = config.entry_model
        owner_mapper.add_property(
            name,
            relationship(
                entry,
                primaryjoin=and_(
                    foreign(entry.subject_id) == owner_mapper.primary_key[0],
                    entry.subject_type == subject_type_name(owner),
                ),
                order_by=entry.id,
                viewonly=True,
            ),
        )

    def _install_listeners(self, owner: type) -> None:
        track_previous_values(owner)
        for event_name, action in _LIFECYCLE_EVENTS:
            event.listen(owner, event_name, self._listener(owner, action), propagate=True)

    def _listener(self, owner: type, action: TimelineAction) -> Any:
        def record(_mapper: Mapper[Any], connection: Connection, target: Any) -> None:
            self.recorder.record(connection, target, action, self.for_owner(owner))

        return record


# Registry used by has_timeline() when none is given
default_registry = TimelineRegistry()
