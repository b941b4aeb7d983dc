"""Tests for the timeline context store.

Verifies that the ContextVar-based context provides proper
isolation between concurrent async tasks and threads.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from sqla_timeline.context.store import (
    clear_metadata,
    clear_request_context,
    current_actor,
    current_origin,
    get_metadata,
    get_request_context,
    merge_metadata,
    set_metadata,
    set_request_context,
    timeline_context,
)


class TestRequestContext:
    """Basic tests for actor and origin."""

    def test_empty_by_default(self):
        """Verify no actor or origin is set by default."""
        clear_request_context()

        assert get_request_context() == (None, None)

    def test_set_and_get(self):
        """Verify setting and getting actor and origin."""
        set_request_context("alice", "192.168.1.1")

        assert get_request_context() == ("alice", "192.168.1.1")
        assert current_actor() == "alice"
        assert current_origin() == "192.168.1.1"

        clear_request_context()

    def test_clear(self):
        """Verify clearing actor and origin."""
        set_request_context("alice", "192.168.1.1")

        clear_request_context()

        assert current_actor() is None
        assert current_origin() is None

    def test_set_overwrites_previous(self):
        """Verify a second call replaces both values."""
        set_request_context("alice", "10.0.0.1")
        set_request_context("bob")

        assert get_request_context() == ("bob", None)

        clear_request_context()


class TestMetadata:
    """Tests for the metadata bag."""

    def setup_method(self):
        clear_metadata()

    def test_empty_by_default(self):
        """Verify the bag starts empty."""
        assert get_metadata() == {}

    def test_set_and_get(self):
        """Verify storing and retrieving metadata."""
        set_metadata({"key": "value"})

        assert get_metadata() == {"key": "value"}

    def test_get_returns_copy(self):
        """Verify get_metadata returns a copy, not the original."""
        set_metadata({"key": "value"})

        bag = get_metadata()
        bag["modified"] = True

        assert "modified" not in get_metadata()

    def test_clear(self):
        """Verify clearing metadata."""
        set_metadata({"key": "value"})

        clear_metadata()

        assert get_metadata() == {}

    def test_merge_restores_previous(self):
        """Verify merged keys only apply inside the block."""
        set_metadata({"existing": "data"})

        with merge_metadata({"new": "info"}) as merged:
            assert merged == {"existing": "data", "new": "info"}
            assert get_metadata() == {"existing": "data", "new": "info"}

        assert get_metadata() == {"existing": "data"}

    def test_merge_overrides_same_key(self):
        """Verify merged keys replace existing ones inside the block."""
        set_metadata({"source": "web"})

        with merge_metadata({"source": "import"}):
            assert get_metadata() == {"source": "import"}

        assert get_metadata() == {"source": "web"}

    def test_merge_restores_on_error(self):
        """Verify the previous bag is restored when the block raises."""
        set_metadata({"existing": "data"})

        with pytest.raises(RuntimeError), merge_metadata({"new": "info"}):
            raise RuntimeError("boom")

        assert get_metadata() == {"existing": "data"}

    def test_merge_restores_after_set_inside(self):
        """Verify mutations inside the block do not leak out."""
        set_metadata({"existing": "data"})

        with merge_metadata({"new": "info"}):
            set_metadata({"replaced": True})
            clear_metadata()

        assert get_metadata() == {"existing": "data"}

    def test_nested_merges_unwind_lifo(self):
        """Verify nested scopes restore the enclosing snapshot."""
        with merge_metadata({"a": 1}):
            with merge_metadata({"b": 2}):
                assert get_metadata() == {"a": 1, "b": 2}
            assert get_metadata() == {"a": 1}
        assert get_metadata() == {}


class TestTimelineContext:
    """Tests for the scoped timeline_context wrapper."""

    def setup_method(self):
        clear_request_context()
        clear_metadata()

    def test_sets_values_for_block(self):
        """Verify actor, origin and metadata are set inside the block."""
        with timeline_context(actor="alice", origin="10.0.0.1", metadata={"source": "t"}):
            assert get_request_context() == ("alice", "10.0.0.1")
            assert get_metadata() == {"source": "t"}

    def test_restores_previous_values(self):
        """Verify previous values come back after the block."""
        set_request_context("original_user", "original_ip")
        set_metadata({"original": True})

        with timeline_context(actor="alice", origin="10.0.0.1", metadata={"x": 1}):
            pass

        assert get_request_context() == ("original_user", "original_ip")
        assert get_metadata() == {"original": True}

    def test_only_overrides_given_values(self):
        """Verify omitted arguments keep their current value."""
        set_request_context("original_user", "original_ip")

        with timeline_context(actor="cron"):
            assert get_request_context() == ("cron", "original_ip")

        clear_request_context()

    def test_explicit_none_clears_for_block(self):
        """Verify passing None unsets a value inside the block."""
        set_request_context("original_user", "original_ip")

        with timeline_context(actor=None):
            assert current_actor() is None

        assert current_actor() == "original_user"
        clear_request_context()


class TestContextIsolation:
    """Tests verifying context isolation between execution units."""

    @pytest.mark.asyncio
    async def test_context_isolated_between_tasks(self):
        """Verify context is isolated between concurrent async tasks."""
        results: dict[str, tuple] = {}

        async def task(name: str, origin: str):
            set_request_context(name, origin)
            with merge_metadata({"task": name}):
                await asyncio.sleep(0.01)  # Yield control
                results[name] = (*get_request_context(), get_metadata())
            clear_request_context()

        await asyncio.gather(task("task1", "10.0.0.1"), task("task2", "10.0.0.2"))

        assert results["task1"] == ("task1", "10.0.0.1", {"task": "task1"})
        assert results["task2"] == ("task2", "10.0.0.2", {"task": "task2"})

    @pytest.mark.asyncio
    async def test_child_task_changes_dont_propagate_back(self):
        """Verify child tasks inherit context but cannot change the parent's."""
        set_request_context("parent", "10.0.0.1")

        async def child():
            inherited = get_request_context()
            set_request_context("child", "10.0.0.2")
            return inherited

        inherited = await asyncio.create_task(child())

        assert inherited == ("parent", "10.0.0.1")
        assert get_request_context() == ("parent", "10.0.0.1")

        clear_request_context()

    def test_context_isolated_between_threads(self):
        """Verify a worker thread does not see the caller's actor."""
        set_request_context("main", "127.0.0.1")

        with ThreadPoolExecutor(max_workers=1) as pool:
            seen = pool.submit(get_request_context).result()

        assert seen == (None, None)
        clear_request_context()
