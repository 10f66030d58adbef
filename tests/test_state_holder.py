"""
UiStateHolder tests: atomic replacement, listeners and the async stream.
"""

import asyncio
import threading

import pytest

from flightsearch.models import SearchUiState
from flightsearch.services import UiStateHolder


def set_query(query):
    return lambda s: s.model_copy(update={"search_query": query})


class TestUiStateHolder:

    def test_starts_with_default_state(self):
        assert UiStateHolder().value == SearchUiState()

    def test_update_replaces_value(self):
        holder = UiStateHolder()
        before = holder.value

        after = holder.update(set_query("MUC"))

        assert holder.value is after
        assert after.search_query == "MUC"
        assert before.search_query == ""

    def test_unchanged_update_skips_listeners(self):
        holder = UiStateHolder()
        seen = []
        holder.add_listener(seen.append)

        holder.update(set_query(""))
        holder.update(set_query("M"))
        holder.update(set_query("M"))

        assert [s.search_query for s in seen] == ["M"]

    def test_failing_listener_does_not_break_writer(self):
        holder = UiStateHolder()
        seen = []

        def broken(_state):
            raise RuntimeError("listener bug")

        holder.add_listener(broken)
        holder.add_listener(seen.append)

        holder.update(set_query("M"))

        assert holder.value.search_query == "M"
        assert len(seen) == 1

    def test_remove_listener(self):
        holder = UiStateHolder()
        seen = []
        holder.add_listener(seen.append)
        holder.remove_listener(seen.append)
        holder.remove_listener(seen.append)

        holder.update(set_query("M"))
        assert seen == []

    def test_concurrent_writers_do_not_lose_updates(self):
        """Read-modify-write under the lock keeps every increment."""
        holder = UiStateHolder()

        def append_char():
            for _ in range(200):
                holder.update(lambda s: s.model_copy(update={"search_query": s.search_query + "x"}))

        threads = [threading.Thread(target=append_char) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(holder.value.search_query) == 800

    @pytest.mark.asyncio
    async def test_states_yields_current_then_changes(self):
        holder = UiStateHolder()
        stream = holder.states()

        first = await stream.__anext__()
        assert first.search_query == ""

        holder.update(set_query("M"))
        second = await asyncio.wait_for(stream.__anext__(), 1.0)
        assert second.search_query == "M"

        await stream.aclose()

    @pytest.mark.asyncio
    async def test_states_conflates_bursts(self):
        """A consumer that falls behind only sees the latest value."""
        holder = UiStateHolder()
        stream = holder.states()
        await stream.__anext__()

        holder.update(set_query("M"))
        holder.update(set_query("MU"))
        holder.update(set_query("MUC"))

        latest = await asyncio.wait_for(stream.__anext__(), 1.0)
        assert latest.search_query == "MUC"
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_wait_for_predicate(self):
        holder = UiStateHolder()

        async def type_later():
            await asyncio.sleep(0.01)
            holder.update(set_query("Lond"))

        asyncio.create_task(type_later())
        state = await holder.wait_for(lambda s: s.search_query == "Lond", timeout=1.0)
        assert state.search_query == "Lond"

    @pytest.mark.asyncio
    async def test_wait_for_times_out(self):
        holder = UiStateHolder()
        with pytest.raises(asyncio.TimeoutError):
            await holder.wait_for(lambda s: s.search_query == "never", timeout=0.05)
