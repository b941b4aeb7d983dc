"""Timeline exceptions.

Only the three failures below ever leave the recording path. Disabled
recording, untracked actions and empty change sets are deliberate no-ops
and never raise.
"""

from typing import Any


class TimelineError(Exception):
    """Base exception for all timeline errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error details
    """

    message: str = "An unexpected timeline error occurred"
    error_code: str = "timeline_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(TimelineError):
    """Raised when a timeline is declared twice for the same entry model.

    Example:
        raise ConfigurationError(owner="Post", entry_model="TimelineEntry")
    """

    message = (
        "Multiple definitions of the same configuration found. "
        "Please ensure that each configuration is unique."
    )
    error_code = "timeline_configuration_error"

    def __init__(
        self,
        message: str | None = None,
        owner: str | None = None,
        entry_model: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if owner:
            details["owner"] = owner
        if entry_model:
            details["entry_model"] = entry_model
        super().__init__(message=message, details=details, **kwargs)


class ResolutionError(TimelineError):
    """Raised when a computed metadata value fails.

    The original exception is chained as ``__cause__``.
    """

    message = "Failed to resolve timeline metadata"
    error_code = "timeline_resolution_error"

    def __init__(
        self,
        message: str | None = None,
        key: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        super().__init__(message=message, details=details, **kwargs)


class PersistenceError(TimelineError):
    """Raised when a timeline entry cannot be inserted."""

    message = "Failed to persist timeline entry"
    error_code = "timeline_persistence_error"
