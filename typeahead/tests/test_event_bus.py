"""Tests for session event delivery."""

import asyncio
import threading

import pytest
import pytest_asyncio

from typeahead.engine.bus import (
    RECENT_UPDATED, SEARCH_COMPLETED, SELECTION_CHANGED, Event, EventBus, Subscription
)
from typeahead.engine.config import SearchConfig, TypeaheadConfig
from typeahead.engine.models import Candidate
from typeahead.engine.session import TypeaheadSession

PHONES = [
    Candidate(id="1", label="iPhone 15 Pro", category="Smartphones", popularity=95),
    Candidate(id="2", label="Pixel 8", category="Smartphones", popularity=80),
]


def make_session(bus, multiple=False):
    config = TypeaheadConfig(multiple=multiple, search=SearchConfig(debounce_ms=0))
    return TypeaheadSession(PHONES, config, event_bus=bus)


@pytest_asyncio.fixture
async def bus():
    bus = EventBus()
    await bus.start()
    yield bus
    await bus.stop()


@pytest.mark.asyncio
async def test_sync_handlers_run_on_the_loop_thread(bus):
    on_loop_thread = []
    bus.subscribe("selection.*", lambda event: on_loop_thread.append(
        threading.current_thread() is threading.main_thread()
    ))

    session = make_session(bus)
    session.select(PHONES[0])
    await bus.drain()

    assert on_loop_thread == [True]


@pytest.mark.asyncio
async def test_session_events_arrive_in_order(bus):
    seen = []
    bus.subscribe("*", lambda event: seen.append(event.type))

    session = make_session(bus)
    await session.run_search("pixel")
    session.select(PHONES[1])
    await bus.drain()

    assert seen == [SEARCH_COMPLETED, SELECTION_CHANGED, RECENT_UPDATED]


@pytest.mark.asyncio
async def test_handler_sees_session_state_at_delivery(bus):
    """A plain handler can read session state without racing the loop."""
    snapshots = []
    session = make_session(bus, multiple=True)
    bus.subscribe(SELECTION_CHANGED, lambda event: snapshots.append(
        (event.data["selected"], [c.id for c in session.selection.selected])
    ))

    session.select(PHONES[0])
    await bus.drain()

    assert snapshots == [(["1"], ["1"])]


@pytest.mark.asyncio
async def test_coroutine_and_plain_handlers_both_receive(bus):
    received = []

    async def renderer(event: Event):
        await asyncio.sleep(0)
        received.append(("async", event.data["result_count"]))

    bus.subscribe("search.*", renderer)
    bus.subscribe(SEARCH_COMPLETED, lambda event: received.append(("sync", event.data["result_count"])))

    await make_session(bus).run_search("iphone")
    await bus.drain()

    assert sorted(received) == [("async", 1), ("sync", 1)]


@pytest.mark.asyncio
async def test_failing_handler_does_not_block_others(bus):
    delivered = []

    def broken(event: Event):
        raise RuntimeError("renderer crashed")

    async def broken_async(event: Event):
        raise ValueError("analytics offline")

    bus.subscribe(SELECTION_CHANGED, broken)
    bus.subscribe(SELECTION_CHANGED, broken_async)
    bus.subscribe(SELECTION_CHANGED, lambda event: delivered.append(event.data["candidate_id"]))

    make_session(bus).select(PHONES[1])
    await bus.drain()

    assert delivered == ["2"]
    assert bus.get_stats()["handler_errors"] == 2


@pytest.mark.asyncio
async def test_unsubscribe(bus):
    received = []

    def handler(event: Event):
        received.append(event)

    bus.subscribe(RECENT_UPDATED, handler)
    bus.unsubscribe(RECENT_UPDATED, handler)
    make_session(bus).select(PHONES[0])
    await bus.drain()

    assert received == []


@pytest.mark.asyncio
async def test_stop_delivers_queued_events():
    bus = EventBus()
    received = []
    bus.subscribe("*", received.append)

    session = make_session(bus)
    session.select(PHONES[0])
    assert received == []

    await bus.start()
    await bus.stop()

    assert [e.type for e in received] == [SELECTION_CHANGED, RECENT_UPDATED]
    assert not bus.running


@pytest.mark.asyncio
async def test_full_queue_drops_events():
    bus = EventBus(maxsize=2)
    session = make_session(bus)

    session.select(PHONES[0])
    assert not bus.publish(Event(type=SEARCH_COMPLETED, data={}))

    stats = bus.get_stats()
    assert stats["published"] == 2
    assert stats["dropped"] == 1


@pytest.mark.parametrize("pattern,event_type,expected", [
    ("*", "search.completed", True),
    ("search.*", "search.discarded", True),
    ("search.*", "searches.completed", False),
    ("selection.*", "search.completed", False),
    ("recent.updated", "recent.updated", True),
    ("recent.updated", "recent.cleared", False),
])
def test_subscription_patterns(pattern, event_type, expected):
    assert Subscription(pattern, print).accepts(event_type) is expected


def test_event_category():
    assert Event(type="selection.changed", data={}).category == "selection"
