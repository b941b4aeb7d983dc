"""Inclusion/exclusion filtering of change sets."""

from collections.abc import Collection, Mapping
from typing import Any


def filter_changes(
    changes: Mapping[str, Any],
    only: Collection[str] | None = None,
    ignore: Collection[str] = (),
) -> dict[str, Any]:
    """Narrow a change set to the attributes a timeline tracks.

    ``only`` is applied first, then ``ignore``, so an attribute listed
    in both is dropped.

    Args:
        changes: Mapping of attribute name to [old, new]
        only: If given, keep just these attributes
        ignore: Attributes to drop

    Returns:
        A new filtered dictionary
    """
    result = dict(changes)
    if only is not None:
        result = {key: value for key, value in result.items() if key in only}
    if ignore:
        result = {key: value for key, value in result.items() if key not in ignore}
    return result
