"""Tests for invocation-scoped logging context."""

import asyncio

from fnruntime.logging.context import (
    clear_context,
    get_extra_context,
    get_invocation_id,
    set_extra_context,
    set_invocation_id,
)


class TestInvocationId:
    def test_default_empty(self):
        clear_context()
        assert get_invocation_id() == ""

    def test_set_and_get(self):
        set_invocation_id("event-123")
        assert get_invocation_id() == "event-123"
        clear_context()

    def test_isolated_between_tasks(self):
        async def serve(event_id):
            set_invocation_id(event_id)
            await asyncio.sleep(0)
            return get_invocation_id()

        async def serve_both():
            return await asyncio.gather(serve("first"), serve("second"))

        assert asyncio.run(serve_both()) == ["first", "second"]


class TestExtraContext:
    def test_default_empty(self):
        clear_context()
        assert get_extra_context() == {}

    def test_set_and_get(self):
        clear_context()
        set_extra_context(worker_id="0", trigger_kind="http")
        assert get_extra_context() == {"worker_id": "0", "trigger_kind": "http"}
        clear_context()

    def test_skips_empty_values(self):
        clear_context()
        set_extra_context(worker_id="", trigger_kind=None, trigger_name="cron-1")
        assert get_extra_context() == {"trigger_name": "cron-1"}
        clear_context()

    def test_accumulates(self):
        clear_context()
        set_extra_context(worker_id="1")
        set_extra_context(trigger_kind="kafka")
        assert get_extra_context() == {"worker_id": "1", "trigger_kind": "kafka"}
        clear_context()

    def test_returns_copy(self):
        clear_context()
        set_extra_context(key="value")
        first = get_extra_context()
        first["key"] = "changed"
        assert get_extra_context()["key"] == "value"
        clear_context()


class TestClearContext:
    def test_clears_everything(self):
        set_invocation_id("event-1")
        set_extra_context(worker_id="2")
        clear_context()
        assert get_invocation_id() == ""
        assert get_extra_context() == {}
