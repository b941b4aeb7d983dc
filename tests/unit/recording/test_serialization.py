"""Tests for change value serialization."""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqla_timeline.constants import TimelineAction
from sqla_timeline.recording.changes import serialize_value


class SampleEnum(Enum):
    """Sample enum for serialization tests."""

    VALUE_A = "a"
    VALUE_B = 42


class Opaque:
    """Object without a JSON representation."""

    def __str__(self) -> str:
        return "opaque"


class TestSerializeValue:
    """Tests for serialize_value function."""

    def test_serialize_none(self):
        """Verify None passes through unchanged."""
        assert serialize_value(None) is None

    def test_serialize_primitives(self):
        """Verify JSON primitives pass through unchanged."""
        assert serialize_value("hello") == "hello"
        assert serialize_value(42) == 42
        assert serialize_value(3.14) == 3.14
        assert serialize_value(True) is True

    def test_serialize_uuid(self):
        """Verify UUID is converted to string."""
        test_uuid = uuid4()

        assert serialize_value(test_uuid) == str(test_uuid)

    def test_serialize_datetime(self):
        """Verify datetime is converted to ISO format."""
        assert serialize_value(datetime(2024, 1, 15, 10, 30, 45)) == "2024-01-15T10:30:45"

    def test_serialize_date(self):
        """Verify date is converted to ISO format."""
        assert serialize_value(date(2024, 1, 15)) == "2024-01-15"

    def test_serialize_time(self):
        """Verify time is converted to ISO format."""
        assert serialize_value(time(9, 5)) == "09:05:00"

    def test_serialize_decimal(self):
        """Verify Decimal keeps its exact text."""
        assert serialize_value(Decimal("19.90")) == "19.90"

    def test_serialize_enum(self):
        """Verify enums are reduced to their value."""
        assert serialize_value(SampleEnum.VALUE_A) == "a"
        assert serialize_value(SampleEnum.VALUE_B) == 42

    def test_serialize_str_enum(self):
        """Verify str-based enums are reduced to a plain string."""
        result = serialize_value(TimelineAction.CREATE)

        assert result == "create"
        assert type(result) is str

    def test_serialize_nested_dict(self):
        """Verify dictionaries are serialized recursively."""
        test_uuid = uuid4()

        result = serialize_value({"id": test_uuid, 1: {"when": date(2024, 1, 1)}})

        assert result == {"id": str(test_uuid), "1": {"when": "2024-01-01"}}

    def test_serialize_sequences(self):
        """Verify tuples and lists become lists."""
        assert serialize_value((1, Decimal("2.5"))) == [1, "2.5"]
        assert serialize_value([SampleEnum.VALUE_A]) == ["a"]

    def test_serialize_fallback_to_str(self):
        """Verify unknown objects fall back to str()."""
        assert serialize_value(Opaque()) == "opaque"
