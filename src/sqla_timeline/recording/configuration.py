"""Timeline configuration value object."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqla_timeline.constants import ALL_ACTIONS, TimelineAction
from sqla_timeline.recording.metadata import MetaValue


@dataclass(frozen=True)
class TimelineConfiguration:
    """One timeline declared on a model.

    Identified by ``(owner, entry_model)``; at most one configuration
    exists per pair in a registry. Instances are immutable and shared
    read-only by every flush that touches the owner.

    Attributes:
        owner: The tracked model class
        entry_model: The entry model (table) entries are written to
        on: Actions that produce entries
        only: If set, the only attributes that are tracked
        ignore: Attributes never tracked
        meta: Tagged metadata mapping
        relationship_name: Name of the owner -> entries relationship
    """

    owner: type
    entry_model: type
    on: frozenset[TimelineAction] = ALL_ACTIONS
    only: frozenset[str] | None = None
    ignore: frozenset[str] = frozenset()
    meta: Mapping[str, MetaValue] = field(default_factory=dict)
    relationship_name: str = "timeline_entries"

    @property
    def key(self) -> tuple[type, type]:
        return self.owner, self.entry_model

    def tracks(self, action: TimelineAction) -> bool:
        return action in self.on

    def describe(self) -> dict[str, Any]:
        """Loggable summary of the configuration."""
        return {
            "owner": self.owner.__name__,
            "entry_model": self.entry_model.__name__,
            "on": sorted(action.value for action in self.on),
            "only": sorted(self.only) if self.only is not None else None,
            "ignore": sorted(self.ignore),
        }
