"""pytest support for code that records timelines.

Load it from a conftest with ``pytest_plugins = ["sqla_timeline.testing"]``.
Recording is then switched off for every test except those marked
``@pytest.mark.timeline``, and the timeline context is reset between tests.

Example:
    @pytest.mark.timeline
    def test_rename_is_recorded(session, post):
        post.title = "New"
        session.commit()

        assert_timelined_value(session, post, "title", "New")
"""

from collections.abc import Generator
from typing import Any

import pytest
from sqlalchemy.orm import Session

from sqla_timeline.context import (
    clear_metadata,
    clear_request_context,
    disable,
    enable,
)
from sqla_timeline.entries import TimelineEntry, TimelineEntryRepository


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "timeline: enable timeline recording for the test"
    )


@pytest.fixture(autouse=True)
def _timeline_recording(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Enable recording only for tests marked ``timeline``."""
    if request.node.get_closest_marker("timeline"):
        enable()
    else:
        disable()
    try:
        yield
    finally:
        disable()
        clear_request_context()
        clear_metadata()


def _repository(session: Session, entry_model: type | None) -> TimelineEntryRepository[Any]:
    return TimelineEntryRepository(session, entry_model or TimelineEntry)


def assert_timeline_entries(
    session: Session,
    record: Any,
    count: int | None = None,
    entry_model: type | None = None,
) -> None:
    """Assert a record has timeline entries (exactly ``count`` if given)."""
    repo = _repository(session, entry_model)
    found = repo.count(repo.entry_model.for_record(record))
    if count is None:
        assert found > 0, f"expected {record!r} to have timeline entries, but found none"
    else:
        assert found == count, (
            f"expected {record!r} to have {count} timeline entries, but found {found}"
        )


def assert_timelined_action(
    session: Session,
    record: Any,
    action: str,
    entry_model: type | None = None,
) -> None:
    """Assert an entry with ``action`` was recorded for a record."""
    repo = _repository(session, entry_model)
    model = repo.entry_model
    found = repo.count(model.for_record(record), model.with_action(action))
    assert found, f"expected {record!r} to have recorded action {action!r}, but none was found"


def assert_timelined_change(
    session: Session,
    record: Any,
    attribute: str,
    entry_model: type | None = None,
) -> None:
    """Assert a change to ``attribute`` was recorded for a record."""
    repo = _repository(session, entry_model)
    model = repo.entry_model
    found = repo.count(model.for_record(record), model.with_changed_attribute(attribute))
    assert found, (
        f"expected {record!r} to have tracked changes to {attribute!r}, but none was found"
    )


def assert_timelined_value(
    session: Session,
    record: Any,
    attribute: str,
    value: Any,
    entry_model: type | None = None,
) -> None:
    """Assert ``attribute`` was recorded changing to ``value`` for a record."""
    repo = _repository(session, entry_model)
    model = repo.entry_model
    found = repo.count(
        model.for_record(record), model.with_changed_value_to(attribute, value)
    )
    assert found, (
        f"expected {record!r} to have tracked {attribute!r} changing to {value!r}, "
        "but no such change was found"
    )
