"""Execution-scoped timeline context.

Holds the current actor, network origin and a metadata bag for the
running thread or asyncio task. Values live in ContextVars, so every
request, worker thread and task sees only its own context and no
locking is involved.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any


# ContextVars for async-safe timeline context storage
_actor: ContextVar[Any] = ContextVar("timeline_actor", default=None)
_origin: ContextVar[str | None] = ContextVar("timeline_origin", default=None)
_metadata: ContextVar[dict[str, Any] | None] = ContextVar(
    "timeline_metadata", default=None
)

_UNSET: Any = object()


def set_request_context(actor: Any = None, origin: str | None = None) -> None:
    """Set the actor and origin for the current request.

    This should be called by middleware (or a job runner) before any
    tracked model is flushed.

    Args:
        actor: The user or system identity responsible for changes
        origin: Client network address
    """
    _actor.set(actor)
    _origin.set(origin)


def get_request_context() -> tuple[Any, str | None]:
    """Get the current actor and origin.

    Returns:
        Tuple of (actor, origin), either of which may be None
    """
    return _actor.get(), _origin.get()


def current_actor() -> Any:
    """Get the current actor, or None."""
    return _actor.get()


def current_origin() -> str | None:
    """Get the current origin, or None."""
    return _origin.get()


def clear_request_context() -> None:
    """Clear actor and origin after the request completes."""
    _actor.set(None)
    _origin.set(None)


def get_metadata() -> dict[str, Any]:
    """Get the current metadata bag.

    Returns:
        Shallow copy of the metadata bag, or empty dict if not set
    """
    bag = _metadata.get()
    if bag is None:
        return {}
    return bag.copy()


def set_metadata(metadata: Mapping[str, Any]) -> None:
    """Replace the metadata bag for the current context."""
    _metadata.set(dict(metadata))


def clear_metadata() -> None:
    """Clear the metadata bag."""
    _metadata.set(None)


@contextmanager
def merge_metadata(metadata: Mapping[str, Any]) -> Iterator[dict[str, Any]]:
    """Merge metadata into the bag for the duration of a block.

    The previous bag is restored on exit, including when the block
    raises. Nested scopes unwind last-in-first-out.

    Args:
        metadata: Keys to add or override

    Yields:
        A copy of the merged bag

    Example:
        with merge_metadata({"source": "import"}):
            session.commit()
    """
    token = _metadata.set({**get_metadata(), **metadata})
    try:
        yield get_metadata()
    finally:
        _metadata.reset(token)


@contextmanager
def timeline_context(
    actor: Any = _UNSET,
    origin: str | None = _UNSET,
    metadata: Mapping[str, Any] | None = _UNSET,
) -> Iterator[None]:
    """Run a block with an explicit actor, origin and/or metadata.

    Only the arguments passed are overridden. All three values are
    restored to what they were before the block on exit.

    Example:
        with timeline_context(actor="nightly-sync", metadata={"job": "sync"}):
            session.commit()
    """
    tokens = []
    if actor is not _UNSET:
        tokens.append((_actor, _actor.set(actor)))
    if origin is not _UNSET:
        tokens.append((_origin, _origin.set(origin)))
    if metadata is not _UNSET:
        tokens.append(
            (_metadata, _metadata.set(dict(metadata) if metadata else None))
        )
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
