"""Tests for timeline settings."""

import pytest
from pydantic import ValidationError

from sqla_timeline.config import TimelineSettings


class TestTimelineSettings:
    """Tests for TimelineSettings."""

    def test_defaults(self, monkeypatch):
        """Verify the defaults when no environment is set."""
        for name in (
            "ENABLED",
            "DEFAULT_TABLE_NAME",
            "ACTOR_ATTRIBUTE",
            "ORIGIN_ATTRIBUTE",
        ):
            monkeypatch.delenv(f"TIMELINE_{name}", raising=False)

        config = TimelineSettings(_env_file=None)

        assert config.enabled is True
        assert config.default_table_name == "timeline_entries"
        assert config.actor_attribute == "user"
        assert config.origin_attribute == "client_ip"

    def test_reads_prefixed_environment(self, monkeypatch):
        """Verify TIMELINE_ variables are picked up."""
        monkeypatch.setenv("TIMELINE_ENABLED", "false")
        monkeypatch.setenv("TIMELINE_ACTOR_ATTRIBUTE", "current_user")

        config = TimelineSettings(_env_file=None)

        assert config.enabled is False
        assert config.actor_attribute == "current_user"

    def test_rejects_invalid_attribute_name(self):
        """Verify request.state attribute names must be identifiers."""
        with pytest.raises(ValidationError) as exc_info:
            TimelineSettings(_env_file=None, origin_attribute="client-ip")

        assert "not a valid attribute name" in str(exc_info.value)
