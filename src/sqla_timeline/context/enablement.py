"""Switches for timeline recording.

``enable()`` and ``disable()`` flip the process-wide flag.
``without_timeline()`` only suppresses recording for the current thread
or asyncio task, so overlapping blocks in other units never affect it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from sqla_timeline.config import settings


_suppressed: ContextVar[bool] = ContextVar("timeline_suppressed", default=False)


class TimelineSwitch:
    """Holder for the global recording flag.

    Uses a class attribute to manage module-level state without
    global statements. ``None`` means "not set yet, use settings".
    """

    enabled: bool | None = None


def is_enabled() -> bool:
    """Check whether timeline recording is on for the current context."""
    if _suppressed.get():
        return False
    if TimelineSwitch.enabled is None:
        return settings.enabled
    return TimelineSwitch.enabled


def enable() -> None:
    """Turn timeline recording on."""
    TimelineSwitch.enabled = True


def disable() -> None:
    """Turn timeline recording off."""
    TimelineSwitch.enabled = False


@contextmanager
def without_timeline() -> Iterator[None]:
    """Suspend recording for a block in the current context.

    The global flag is left untouched; nested blocks unwind
    last-in-first-out.

    Example:
        with without_timeline():
            backfill_posts(session)
    """
    token = _suppressed.set(True)
    try:
        yield
    finally:
        _suppressed.reset(token)
