"""Timeline error taxonomy."""

from sqla_timeline.errors.exceptions import (
    ConfigurationError,
    PersistenceError,
    ResolutionError,
    TimelineError,
)


__all__ = [
    "ConfigurationError",
    "PersistenceError",
    "ResolutionError",
    "TimelineError",
]
