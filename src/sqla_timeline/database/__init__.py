"""Database layer - base model, mixins and portable types."""

from sqla_timeline.database.base import (
    Base,
    BigIntegerKey,
    JSONDocument,
    NetworkAddress,
    TimestampMixin,
)
from sqla_timeline.database.json_ops import has_attribute, new_value_text


__all__ = [
    "Base",
    "BigIntegerKey",
    "JSONDocument",
    "NetworkAddress",
    "TimestampMixin",
    "has_attribute",
    "new_value_text",
]
