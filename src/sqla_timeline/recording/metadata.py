"""Declarative metadata for timeline entries.

A timeline's ``meta`` maps entry keys to one of three value kinds:

- ``Literal(value)``: stored as-is
- ``Accessor(name)``: read from the tracked instance (methods are called);
  when the instance has no such attribute the name itself is stored
- ``Computed(fn)``: ``fn(instance)``; a dict result is resolved again
  with the same rules, so computed values can nest

Plain values are accepted too: callables are treated as ``Computed`` and
everything else, strings included, as ``Literal``.
"""

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from typing import Any

from sqla_timeline.errors import ResolutionError
from sqla_timeline.recording.changes import serialize_value


@dataclass(frozen=True)
class Literal:
    """A fixed metadata value."""

    value: Any


@dataclass(frozen=True)
class Accessor:
    """Name of an attribute or method on the tracked instance."""

    name: str


@dataclass(frozen=True)
class Computed:
    """Function of the tracked instance."""

    fn: Callable[[Any], Any]


MetaValue = Literal | Accessor | Computed


def as_meta_value(value: Any) -> MetaValue:
    """Coerce a plain ``meta`` value into its tagged form."""
    if isinstance(value, Literal | Accessor | Computed):
        return value
    if callable(value):
        return Computed(value)
    return Literal(value)


def normalize_meta(meta: Mapping[str, Any] | None) -> dict[str, MetaValue]:
    """Tag every value of a ``meta`` mapping."""
    return {str(key): as_meta_value(value) for key, value in (meta or {}).items()}


def _resolve_value(entity: Any, key: str, value: MetaValue) -> Any:
    if isinstance(value, Literal):
        return value.value

    if isinstance(value, Accessor):
        if not hasattr(entity, value.name):
            return value.name
        attribute = getattr(entity, value.name)
        return attribute() if callable(attribute) else attribute

    try:
        result = value.fn(entity)
    except Exception as exc:
        raise ResolutionError(
            f"Computed metadata {key!r} raised {type(exc).__name__}: {exc}",
            key=key,
        ) from exc

    if isinstance(result, Mapping):
        return {
            str(k): _resolve_value(entity, f"{key}.{k}", as_meta_value(v))
            for k, v in result.items()
        }
    return result


def resolve_metadata(
    entity: Any,
    meta: Mapping[str, Any],
    context_metadata: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve a ``meta`` mapping against a tracked instance.

    Starts from the ambient context metadata and overlays ``meta``, so
    configured keys win over ambient ones.

    Args:
        entity: The tracked model instance
        meta: Mapping of key to tagged (or plain) value
        context_metadata: Metadata bag from the timeline context

    Returns:
        Flat dictionary of resolved metadata

    Raises:
        ResolutionError: If a computed value raises
    """
    resolved = dict(context_metadata or {})
    for key, value in meta.items():
        resolved[key] = _resolve_value(entity, key, as_meta_value(value))
    return resolved


def split_metadata(
    metadata: Mapping[str, Any],
    destination_columns: Collection[str],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Partition resolved metadata into dedicated columns and the JSON bag.

    Args:
        metadata: Resolved metadata
        destination_columns: Extra column names declared on the entry table

    Returns:
        Tuple of (column values, generic metadata)
    """
    column_values: dict[str, Any] = {}
    generic: dict[str, Any] = {}
    for key, value in metadata.items():
        if key in destination_columns:
            column_values[key] = value
        else:
            generic[key] = serialize_value(value)
    return column_values, generic
